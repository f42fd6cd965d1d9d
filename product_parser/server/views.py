"""
Pydantic models for the HTTP API.
"""

from typing import Annotated, Any

from pydantic import AfterValidator, AnyHttpUrl, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from product_parser.extractor.views import ProductRecord

_http_url = TypeAdapter(AnyHttpUrl)


def _validate_absolute_http_url(value: str) -> str:
	# Validate only: the record's url must equal the caller's string, not pydantic's normalized form
	try:
		_http_url.validate_python(value)
	except ValidationError as e:
		raise ValueError('must be an absolute http(s) URL') from e
	return value


HttpUrlString = Annotated[str, AfterValidator(_validate_absolute_http_url)]


class ParseProductRequest(BaseModel):
	"""Body of POST /parse-product"""

	model_config = ConfigDict(extra='ignore', populate_by_name=True)

	url: HttpUrlString = Field(description='Absolute http(s) URL of the product page')
	openai_api_key: str = Field(alias='openaiApiKey', min_length=1, description='Model-provider API key for this request')


class ParseProductResponse(BaseModel):
	product: ProductRecord


class ErrorResponse(BaseModel):
	"""Error payload; `type` tells clients which pipeline stage failed."""

	model_config = ConfigDict(populate_by_name=True)

	error: str
	type: str | None = None
	kind: str | None = None
	status_code: int | None = Field(default=None, alias='statusCode')
	details: dict[str, Any] | None = None


class HealthResponse(BaseModel):
	status: str = 'ok'
