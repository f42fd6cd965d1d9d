#!/usr/bin/env python3
"""
Product Parser CLI entry point.

    product-parser serve [--host HOST] [--port PORT] [--debug]
    product-parser extract URL [--api-key KEY] [--model MODEL]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

from dotenv import load_dotenv
from pydantic import ValidationError

from product_parser.config import load_config
from product_parser.exceptions import ProductParserError
from product_parser.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog='product-parser', description='LLM-backed product page parser')
	parser.add_argument('--debug', action='store_true', help='Enable debug logging')
	subparsers = parser.add_subparsers(dest='command', required=True)

	serve = subparsers.add_parser('serve', help='Run the HTTP API')
	serve.add_argument('--host', help='Server host (default: PRODUCT_PARSER_HOST or 127.0.0.1)')
	serve.add_argument('--port', type=int, help='Server port (default: PRODUCT_PARSER_PORT or 3000)')

	extract = subparsers.add_parser('extract', help='Extract one product page and print it as JSON')
	extract.add_argument('url', help='Product page URL')
	extract.add_argument('--api-key', help='OpenAI API key (default: OPENAI_API_KEY)')
	extract.add_argument('--model', help='Model identifier (default: PRODUCT_PARSER_MODEL)')

	return parser


async def _extract(url: str, api_key: str, model: str | None, debug: bool) -> int:
	from product_parser.extractor.service import extract_product

	config = load_config(model=model, logging_level='debug' if debug else None)
	try:
		product = await extract_product(url, api_key, config)
	except ProductParserError as e:
		logger.error(f'❌ {e.message}')
		return 1

	print(product.model_dump_json(indent=2))
	return 0


def main(argv: list[str] | None = None) -> int:
	"""CLI entry point"""
	args = _build_parser().parse_args(argv)

	try:
		config = load_config(logging_level='debug' if args.debug else None)
	except ValidationError as e:
		print(f'❌ Invalid configuration: {e}', file=sys.stderr)
		return 1

	setup_logging(stream=sys.stderr, log_level=config.logging_level)

	if args.command == 'serve':
		from product_parser.server.service import run_server

		try:
			run_server(load_config(host=args.host, port=args.port, logging_level=config.logging_level))
		except KeyboardInterrupt:
			print('\n✅ Server stopped')
		return 0

	load_dotenv()
	api_key = args.api_key or os.getenv('OPENAI_API_KEY')
	if not api_key:
		print('❌ An API key is required: pass --api-key or set OPENAI_API_KEY', file=sys.stderr)
		return 1

	return asyncio.run(_extract(args.url, api_key, args.model, args.debug))


if __name__ == '__main__':
	sys.exit(main())
