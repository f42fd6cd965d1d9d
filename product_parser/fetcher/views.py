from pydantic import BaseModel, ConfigDict, Field


class FetchResult(BaseModel):
	"""Raw markup of a product page. Lives only for the duration of one extraction."""

	model_config = ConfigDict(extra='forbid', frozen=True)

	url: str = Field(description='The URL that was requested (not the post-redirect URL)')
	html: str
	status_code: int
	content_type: str
