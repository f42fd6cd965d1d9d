"""
HTTP front end for the extraction pipeline.

A thin FastAPI layer: it validates the request body, runs one extraction and maps pipeline errors
to JSON payloads that say which stage failed.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from product_parser.config import ProductParserConfig, load_config
from product_parser.exceptions import ExtractionError, FetchError
from product_parser.extractor.service import extract_product
from product_parser.extractor.views import ProductRecord
from product_parser.server.views import ErrorResponse, HealthResponse, ParseProductRequest, ParseProductResponse

logger = logging.getLogger(__name__)

ExtractFunction = Callable[[str, str, ProductParserConfig], Awaitable[ProductRecord]]


def _error_response(error: ErrorResponse, status_code: int) -> JSONResponse:
	return JSONResponse(error.model_dump(by_alias=True, exclude_none=True), status_code=status_code)


def _field_errors(error: ValidationError) -> dict[str, list[str]]:
	"""Group validation messages by top-level field name."""
	details: dict[str, list[str]] = {}
	for item in error.errors():
		field = str(item['loc'][0]) if item['loc'] else '_body'
		details.setdefault(field, []).append(item['msg'])
	return details


def create_app(config: ProductParserConfig | None = None, extract: ExtractFunction = extract_product) -> FastAPI:
	"""
	Build the API application.

	Args:
		config: Settings passed to every extraction (default: loaded from the environment)
		extract: The extraction coroutine, replaceable for tests
	"""
	app_config = config or load_config()

	app = FastAPI(
		title='Product Parser',
		description='Extracts structured product data from product pages with an LLM',
		version='0.1.0',
	)

	@app.middleware('http')
	async def log_requests(request: Request, call_next):
		logger.info(f'{request.method} {request.url}')
		response = await call_next(request)
		logger.info(f'{request.method} {request.url} - {response.status_code}')
		return response

	@app.get('/health', response_model=HealthResponse)
	async def health() -> HealthResponse:
		return HealthResponse()

	@app.post('/parse-product', response_model=ParseProductResponse)
	async def parse_product(request: Request) -> Any:
		try:
			body = await request.json()
		except (json.JSONDecodeError, UnicodeDecodeError):
			logger.error('Invalid request body: not valid JSON')
			return _error_response(
				ErrorResponse(error='Invalid request body', details={'_body': ['Body must be valid JSON']}), 400
			)

		try:
			parsed = ParseProductRequest.model_validate(body)
		except ValidationError as e:
			details = _field_errors(e)
			logger.error(f'Invalid request body: {details}')
			return _error_response(ErrorResponse(error='Invalid request body', details=details), 400)

		logger.info(f'Processing product extraction for {parsed.url}')
		try:
			product = await extract(parsed.url, parsed.openai_api_key, app_config)
		except FetchError as e:
			logger.error(f'Error processing request: {e.message}')
			return _error_response(
				ErrorResponse(error=e.message, type='fetch_error', kind=e.kind.value, status_code=e.status_code), 400
			)
		except ExtractionError as e:
			logger.error(f'Error processing request: {e.message}')
			return _error_response(ErrorResponse(error=e.message, type='extraction_error'), 400)
		except Exception as e:
			logger.error(f'Unexpected error processing request: {type(e).__name__}: {e}', exc_info=True)
			return _error_response(ErrorResponse(error='Unexpected error'), 500)

		logger.info(f'Successfully extracted product from {parsed.url}: {product.title!r}')
		return ParseProductResponse(product=product)

	return app


def run_server(config: ProductParserConfig | None = None) -> None:
	"""Serve the API with uvicorn until interrupted."""
	import uvicorn

	app_config = config or load_config()
	app = create_app(app_config)
	logger.info(f'Server is running on http://{app_config.host}:{app_config.port}')
	uvicorn.run(
		app,
		host=app_config.host,
		port=app_config.port,
		log_level='debug' if app_config.logging_level == 'debug' else 'warning',
		access_log=False,
	)
