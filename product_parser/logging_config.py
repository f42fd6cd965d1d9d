import logging
import os
import sys
from typing import TextIO

from product_parser.llm.sanitization import sanitize_string

ROOT_LOGGER_NAME = 'product_parser'

THIRD_PARTY_LOGGERS = ('httpx', 'httpcore', 'openai', 'uvicorn.access')


class SensitiveDataFilter(logging.Filter):
	"""Masks API keys in log records before any handler formats them."""

	def filter(self, record: logging.LogRecord) -> bool:
		if isinstance(record.msg, str):
			record.msg = sanitize_string(record.msg)
		if record.args:
			if isinstance(record.args, dict):
				record.args = {k: sanitize_string(v) if isinstance(v, str) else v for k, v in record.args.items()}
			else:
				record.args = tuple(sanitize_string(a) if isinstance(a, str) else a for a in record.args)
		return True


class ProductParserFormatter(logging.Formatter):
	"""Shortens `product_parser.extractor.service` style logger names to their last two parts."""

	def format(self, record: logging.LogRecord) -> str:
		original_name = record.name
		if original_name.startswith(f'{ROOT_LOGGER_NAME}.'):
			record.name = '.'.join(original_name.split('.')[-2:])
		try:
			return super().format(record)
		finally:
			record.name = original_name


def setup_logging(stream: TextIO | None = None, log_level: str | None = None, force_setup: bool = False) -> logging.Logger:
	"""
	Configure the `product_parser` logger hierarchy.

	Args:
		stream: Output stream for logs (default: sys.stdout)
		log_level: Overrides PRODUCT_PARSER_LOGGING_LEVEL (debug, info, warning, error, critical)
		force_setup: Replace handlers even if logging was already configured
	"""
	logger = logging.getLogger(ROOT_LOGGER_NAME)
	if logger.handlers and not force_setup:
		return logger

	level_name = (log_level or os.getenv('PRODUCT_PARSER_LOGGING_LEVEL') or 'info').upper()
	level = logging.getLevelName(level_name)
	if not isinstance(level, int):
		level = logging.INFO

	for handler in list(logger.handlers):
		logger.removeHandler(handler)

	handler = logging.StreamHandler(stream or sys.stdout)
	handler.setFormatter(ProductParserFormatter('%(asctime)s %(levelname)-8s [%(name)s] %(message)s'))
	handler.addFilter(SensitiveDataFilter())

	logger.addHandler(handler)
	logger.setLevel(level)
	logger.propagate = False

	# Request-level chatter from HTTP clients would log every fetch twice
	third_party_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
	for name in THIRD_PARTY_LOGGERS:
		logging.getLogger(name).setLevel(third_party_level)

	return logger
