"""
Runtime configuration read from the environment.

Every setting maps to a `PRODUCT_PARSER_`-prefixed variable (`model` -> `PRODUCT_PARSER_MODEL`), which may
also come from a `.env` file in the working directory. Model-provider credentials are never configured
here: each request brings its own.
"""

from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MODEL = 'gpt-4o-2024-08-06'

ENV_PREFIX = 'PRODUCT_PARSER_'

LogLevel = Literal['debug', 'info', 'warning', 'error', 'critical']


class ProductParserConfig(BaseSettings):
	"""Settings shared by the extraction pipeline, the HTTP server and the CLI."""

	model_config = SettingsConfigDict(
		env_prefix=ENV_PREFIX,
		env_file='.env',
		env_ignore_empty=True,
		extra='ignore',
		frozen=True,
		protected_namespaces=(),
	)

	model: str = Field(default=DEFAULT_MODEL, min_length=1, description='Model identifier used for extraction')
	fetch_timeout: float | None = Field(
		default=None, gt=0, description='Page fetch timeout in seconds, unset for the httpx default'
	)
	model_timeout: float | None = Field(
		default=None, gt=0, description='Model call timeout in seconds, unset for the OpenAI client default'
	)
	model_max_retries: int = Field(default=0, ge=0, description='Transport-level retries of the OpenAI client')
	host: str = Field(default='127.0.0.1')
	port: int = Field(default=3000, ge=1, le=65535)
	logging_level: LogLevel = 'info'

	@field_validator('logging_level', mode='before')
	@classmethod
	def _lowercase_level(cls, value: Any) -> Any:
		return value.strip().lower() if isinstance(value, str) else value


def load_config(use_dotenv: bool = True, **overrides) -> ProductParserConfig:
	"""
	Build the configuration from environment variables.

	Empty variables count as unset. Keyword overrides (e.g. from CLI flags) take precedence
	over the environment; None overrides are ignored.

	Raises:
		pydantic.ValidationError: a variable holds an invalid value
	"""
	values = {k: v for k, v in overrides.items() if v is not None}
	if not use_dotenv:
		return ProductParserConfig(_env_file=None, **values)
	return ProductParserConfig(**values)
