import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal, TypeVar, overload

import httpx
from openai import APIConnectionError, APIStatusError, AsyncOpenAI, RateLimitError
from openai.types.chat.chat_completion import ChatCompletion
from openai.types.shared.chat_model import ChatModel
from openai.types.shared_params.reasoning_effort import ReasoningEffort
from openai.types.shared_params.response_format_json_schema import JSONSchema, ResponseFormatJSONSchema
from pydantic import BaseModel, ValidationError

from product_parser.llm.exceptions import ModelOutputError, ModelProviderError, ModelRateLimitError
from product_parser.llm.messages import BaseMessage
from product_parser.llm.openai.serializer import OpenAIMessageSerializer
from product_parser.llm.schema import SchemaOptimizer
from product_parser.llm.views import ChatInvokeCompletion, ChatInvokeUsage

T = TypeVar('T', bound=BaseModel)

logger = logging.getLogger(__name__)


@dataclass
class ChatOpenAI:
	"""
	A wrapper around AsyncOpenAI that implements the BaseChatModel protocol.

	A fresh AsyncOpenAI client is created per call from the stored parameters and closed afterwards,
	so one instance can be built per request around that request's API key. An injected
	http_client is shared and left open.
	"""

	# Model configuration
	model: ChatModel | str

	# Model params
	temperature: float | None = None
	frequency_penalty: float | None = None
	reasoning_effort: ReasoningEffort = 'low'
	seed: int | None = None
	service_tier: Literal['auto', 'default', 'flex', 'priority', 'scale'] | None = None
	top_p: float | None = None
	max_completion_tokens: int | None = None
	remove_min_items_from_schema: bool = False  # Some OpenAI-compatible providers reject minItems

	# Client initialization parameters
	api_key: str | None = None
	organization: str | None = None
	project: str | None = None
	base_url: str | httpx.URL | None = None
	timeout: float | httpx.Timeout | None = None
	max_retries: int = 0  # One model invocation per extraction
	default_headers: Mapping[str, str] | None = None
	http_client: httpx.AsyncClient | None = None
	reasoning_models: list[ChatModel | str] | None = field(
		default_factory=lambda: [
			'o4-mini',
			'o3',
			'o3-mini',
			'o1',
			'o3-pro',
			'gpt-5',
			'gpt-5-mini',
			'gpt-5-nano',
		]
	)

	# Static
	@property
	def provider(self) -> str:
		return 'openai'

	@property
	def name(self) -> str:
		return str(self.model)

	def _get_client_params(self) -> dict[str, Any]:
		"""Prepare client parameters dictionary."""
		base_params = {
			'api_key': self.api_key,
			'organization': self.organization,
			'project': self.project,
			'base_url': self.base_url,
			'timeout': self.timeout,
			'max_retries': self.max_retries,
			'default_headers': self.default_headers,
		}

		client_params = {k: v for k, v in base_params.items() if v is not None}

		if self.http_client is not None:
			client_params['http_client'] = self.http_client

		return client_params

	def get_client(self) -> AsyncOpenAI:
		"""
		Returns an AsyncOpenAI client.

		Returns:
			AsyncOpenAI: An instance of the AsyncOpenAI client.
		"""
		return AsyncOpenAI(**self._get_client_params())

	def _get_model_params(self) -> dict[str, Any]:
		model_params: dict[str, Any] = {}

		if self.temperature is not None:
			model_params['temperature'] = self.temperature

		if self.frequency_penalty is not None:
			model_params['frequency_penalty'] = self.frequency_penalty

		if self.max_completion_tokens is not None:
			model_params['max_completion_tokens'] = self.max_completion_tokens

		if self.top_p is not None:
			model_params['top_p'] = self.top_p

		if self.seed is not None:
			model_params['seed'] = self.seed

		if self.service_tier is not None:
			model_params['service_tier'] = self.service_tier

		if self.reasoning_models and any(str(m).lower() in str(self.model).lower() for m in self.reasoning_models):
			model_params['reasoning_effort'] = self.reasoning_effort
			model_params.pop('temperature', None)
			model_params.pop('frequency_penalty', None)

		return model_params

	def _get_usage(self, response: ChatCompletion) -> ChatInvokeUsage | None:
		if response.usage is None:
			return None

		# completion_tokens already includes reasoning tokens
		return ChatInvokeUsage(
			prompt_tokens=response.usage.prompt_tokens,
			prompt_cached_tokens=response.usage.prompt_tokens_details.cached_tokens
			if response.usage.prompt_tokens_details is not None
			else None,
			completion_tokens=response.usage.completion_tokens,
			total_tokens=response.usage.total_tokens,
		)

	@overload
	async def ainvoke(
		self, messages: list[BaseMessage], output_format: None = None, output_name: str | None = None
	) -> ChatInvokeCompletion[str]: ...

	@overload
	async def ainvoke(
		self, messages: list[BaseMessage], output_format: type[T], output_name: str | None = None
	) -> ChatInvokeCompletion[T | None]: ...

	async def ainvoke(
		self, messages: list[BaseMessage], output_format: type[T] | None = None, output_name: str | None = None
	) -> ChatInvokeCompletion[T | None] | ChatInvokeCompletion[str]:
		"""
		Invoke the model with the given messages.

		Args:
			messages: List of chat messages
			output_format: Optional Pydantic model class for structured output
			output_name: Name of the response schema sent to the API (defaults to the model class name)

		Returns:
			Either a string response or an instance of output_format. For structured calls the
			completion is None when the model returned no content or refused.

		Raises:
			ModelOutputError: the structured content does not validate against output_format
			ModelProviderError: the API call itself failed
		"""
		openai_messages = OpenAIMessageSerializer.serialize_messages(messages)
		model_params = self._get_model_params()
		client = self.get_client()

		try:
			if output_format is None:
				response = await client.chat.completions.create(
					model=self.model,
					messages=openai_messages,
					**model_params,
				)

				return ChatInvokeCompletion(
					completion=response.choices[0].message.content or '',
					usage=self._get_usage(response),
					stop_reason=response.choices[0].finish_reason if response.choices else None,
				)

			response_format: JSONSchema = {
				'name': output_name or output_format.__name__,
				'strict': True,
				'schema': SchemaOptimizer.create_optimized_json_schema(
					output_format,
					remove_min_items=self.remove_min_items_from_schema,
				),
			}

			response = await client.chat.completions.create(
				model=self.model,
				messages=openai_messages,
				response_format=ResponseFormatJSONSchema(json_schema=response_format, type='json_schema'),
				**model_params,
			)

		except RateLimitError as e:
			raise ModelRateLimitError(message=e.message, model=self.name) from e

		except APIConnectionError as e:
			raise ModelProviderError(message=str(e), model=self.name) from e

		except APIStatusError as e:
			raise ModelProviderError(message=e.message, status_code=e.status_code, model=self.name) from e

		except Exception as e:
			raise ModelProviderError(message=str(e), model=self.name) from e

		finally:
			# An injected http_client belongs to the caller
			if self.http_client is None:
				await client.close()

		usage = self._get_usage(response)
		choice = response.choices[0] if response.choices else None
		message = choice.message if choice is not None else None
		stop_reason = choice.finish_reason if choice is not None else None

		if message is None or not message.content:
			refusal = getattr(message, 'refusal', None)
			if refusal:
				logger.warning(f'⚠️ {self.name} refused structured output: {refusal}')
			else:
				logger.debug(f'{self.name} returned no structured content (finish_reason={stop_reason})')
			return ChatInvokeCompletion(completion=None, usage=usage, stop_reason=stop_reason, refusal=refusal)

		try:
			parsed = output_format.model_validate_json(message.content)
		except ValidationError as e:
			raise ModelOutputError(
				message=f'Structured output does not match {output_format.__name__}: {e}',
				model=self.name,
				raw_output=message.content,
			) from e

		return ChatInvokeCompletion(completion=parsed, usage=usage, stop_reason=stop_reason)
