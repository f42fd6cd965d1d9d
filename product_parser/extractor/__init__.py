from product_parser.extractor.prompts import build_extraction_prompt
from product_parser.extractor.service import ExtractionState, ExtractorService, create_chat_model, extract_product
from product_parser.extractor.views import ProductAttribute, ProductPrice, ProductRecord

__all__ = [
	'ExtractorService',
	'ExtractionState',
	'extract_product',
	'create_chat_model',
	'build_extraction_prompt',
	'ProductRecord',
	'ProductPrice',
	'ProductAttribute',
]
