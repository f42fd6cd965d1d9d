"""
Extract structured product data from product page URLs with a schema-constrained LLM call.

Usage:
    from product_parser import extract_product

    product = await extract_product('https://shop.example.com/item/1', credential=openai_api_key)
    print(product.model_dump_json(indent=2))
"""

from product_parser.config import ProductParserConfig, load_config
from product_parser.exceptions import ExtractionError, FetchError, FetchErrorKind, ProductParserError
from product_parser.extractor.service import ExtractorService, extract_product
from product_parser.extractor.views import ProductAttribute, ProductPrice, ProductRecord
from product_parser.fetcher.service import PageFetcher, fetch_html
from product_parser.fetcher.views import FetchResult

__all__ = [
	'extract_product',
	'fetch_html',
	'ExtractorService',
	'PageFetcher',
	'FetchResult',
	'ProductRecord',
	'ProductPrice',
	'ProductAttribute',
	'ProductParserConfig',
	'load_config',
	'ProductParserError',
	'FetchError',
	'FetchErrorKind',
	'ExtractionError',
]
