from enum import Enum

from product_parser.llm.sanitization import sanitize_string


class FetchErrorKind(str, Enum):
	TRANSPORT = 'transport'
	HTTP_STATUS = 'http_status'
	CONTENT_TYPE = 'content_type'


class ProductParserError(Exception):
	"""Base class for failures of the extraction pipeline. `message` is safe to show to API callers."""

	def __init__(self, message: str):
		sanitized_message = sanitize_string(message)
		self.message = sanitized_message
		super().__init__(sanitized_message)


class FetchError(ProductParserError):
	"""The product page could not be retrieved as HTML."""

	def __init__(
		self,
		message: str,
		kind: FetchErrorKind,
		url: str,
		status_code: int | None = None,
		reason: str | None = None,
	):
		super().__init__(f'Failed to fetch product page: {message}')
		self.kind = kind
		self.url = url
		self.status_code = status_code
		self.reason = reason


class ExtractionError(ProductParserError):
	"""The model produced no usable product record."""

	def __init__(self, message: str = 'Failed to extract product', url: str | None = None):
		super().__init__(message)
		self.url = url
