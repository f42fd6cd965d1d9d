"""Tests for ChatOpenAI structured output handling, using a dummy AsyncOpenAI client."""

import json

import httpx
import pytest
from openai import APIConnectionError, APIStatusError, OpenAIError, RateLimitError
from openai.types.chat.chat_completion import ChatCompletion, Choice
from openai.types.chat.chat_completion_message import ChatCompletionMessage
from openai.types.completion_usage import CompletionUsage, PromptTokensDetails

from product_parser.extractor.views import ProductRecord
from product_parser.llm.exceptions import ModelOutputError, ModelProviderError, ModelRateLimitError
from product_parser.llm.messages import BaseMessage, UserMessage
from product_parser.llm.openai.chat import ChatOpenAI
from product_parser.llm.openai.serializer import OpenAIMessageSerializer

URL = 'https://shop.example.com/products/classic-tee'


def _make_response(content: str | None, refusal: str | None = None, cached_tokens: int | None = None) -> ChatCompletion:
	return ChatCompletion(
		id='chatcmpl-test',
		choices=[
			Choice(
				finish_reason='stop',
				index=0,
				message=ChatCompletionMessage(role='assistant', content=content, refusal=refusal),
			)
		],
		created=1234567890,
		model='gpt-4o-2024-08-06',
		object='chat.completion',
		usage=CompletionUsage(
			completion_tokens=50,
			prompt_tokens=1000,
			total_tokens=1050,
			prompt_tokens_details=PromptTokensDetails(cached_tokens=cached_tokens) if cached_tokens is not None else None,
		),
	)


class DummyCompletions:
	def __init__(self, response: ChatCompletion | None = None, error: Exception | None = None):
		self.response = response
		self.error = error
		self.last_kwargs: dict | None = None
		self.client: DummyClient | None = None

	async def create(self, **kwargs):
		self.last_kwargs = kwargs
		if self.error is not None:
			raise self.error
		return self.response


class DummyClient:
	def __init__(self, completions: DummyCompletions):
		self.chat = type('chat', (), {'completions': completions})()
		self.closed = False
		completions.client = self

	async def close(self):
		self.closed = True


@pytest.fixture
def make_chat(monkeypatch):
	def make(response: ChatCompletion | None = None, error: Exception | None = None, **kwargs):
		chat = ChatOpenAI(model=kwargs.pop('model', 'gpt-4o-2024-08-06'), api_key='test', **kwargs)
		completions = DummyCompletions(response=response, error=error)
		monkeypatch.setattr(chat, 'get_client', lambda: DummyClient(completions))
		return chat, completions

	return make


def _request() -> httpx.Request:
	return httpx.Request('POST', 'https://api.openai.com/v1/chat/completions')


class TestStructuredOutput:
	@pytest.mark.asyncio
	async def test_parses_structured_content(self, make_chat, tshirt_payload):
		chat, _ = make_chat(_make_response(json.dumps(tshirt_payload(URL))))

		result = await chat.ainvoke([UserMessage(content='extract')], output_format=ProductRecord, output_name='product')

		assert isinstance(result.completion, ProductRecord)
		assert result.completion.price.value == 19.99
		assert result.stop_reason == 'stop'
		assert result.usage is not None
		assert result.usage.total_tokens == 1050

	@pytest.mark.asyncio
	async def test_sends_strict_json_schema_named_product(self, make_chat, tshirt_payload):
		chat, completions = make_chat(_make_response(json.dumps(tshirt_payload(URL))))

		await chat.ainvoke([UserMessage(content='extract')], output_format=ProductRecord, output_name='product')

		kwargs = completions.last_kwargs
		assert kwargs is not None
		assert kwargs['model'] == 'gpt-4o-2024-08-06'
		assert kwargs['messages'] == [{'role': 'user', 'content': 'extract'}]
		response_format = kwargs['response_format']
		assert response_format['type'] == 'json_schema'
		assert response_format['json_schema']['name'] == 'product'
		assert response_format['json_schema']['strict'] is True
		assert 'price' in response_format['json_schema']['schema']['properties']

	@pytest.mark.asyncio
	async def test_schema_name_defaults_to_class_name(self, make_chat, tshirt_payload):
		chat, completions = make_chat(_make_response(json.dumps(tshirt_payload(URL))))

		await chat.ainvoke([UserMessage(content='extract')], output_format=ProductRecord)

		assert completions.last_kwargs['response_format']['json_schema']['name'] == 'ProductRecord'

	@pytest.mark.asyncio
	async def test_empty_content_gives_no_completion(self, make_chat):
		chat, _ = make_chat(_make_response(None))

		result = await chat.ainvoke([UserMessage(content='extract')], output_format=ProductRecord)

		assert result.completion is None

	@pytest.mark.asyncio
	async def test_refusal_gives_no_completion(self, make_chat):
		chat, _ = make_chat(_make_response(None, refusal='I cannot help with that.'))

		result = await chat.ainvoke([UserMessage(content='extract')], output_format=ProductRecord)

		assert result.completion is None
		assert result.refusal == 'I cannot help with that.'

	@pytest.mark.asyncio
	async def test_invalid_payload_raises_output_error(self, make_chat):
		chat, _ = make_chat(_make_response('{"title": "only a title"}'))

		with pytest.raises(ModelOutputError) as exc_info:
			await chat.ainvoke([UserMessage(content='extract')], output_format=ProductRecord)

		assert exc_info.value.raw_output == '{"title": "only a title"}'
		assert exc_info.value.model == 'gpt-4o-2024-08-06'

	@pytest.mark.asyncio
	async def test_cached_prompt_tokens(self, make_chat, tshirt_payload):
		chat, _ = make_chat(_make_response(json.dumps(tshirt_payload(URL)), cached_tokens=600))

		result = await chat.ainvoke([UserMessage(content='extract')], output_format=ProductRecord)

		assert result.usage is not None
		assert result.usage.prompt_cached_tokens == 600


class TestMessageSerialization:
	def test_user_name_is_forwarded(self):
		result = OpenAIMessageSerializer.serialize(UserMessage(content='extract', name='parser'))

		assert result == {'role': 'user', 'content': 'extract', 'name': 'parser'}

	def test_unknown_message_type(self):
		with pytest.raises(ValueError):
			OpenAIMessageSerializer.serialize(BaseMessage(role='tool', content='x'))


class TestTextOutput:
	@pytest.mark.asyncio
	async def test_plain_completion(self, make_chat):
		chat, completions = make_chat(_make_response('hello'))

		result = await chat.ainvoke([UserMessage(content='hi')])

		assert result.completion == 'hello'
		assert 'response_format' not in completions.last_kwargs


class TestModelParams:
	@pytest.mark.asyncio
	async def test_unset_params_are_not_sent(self, make_chat):
		chat, completions = make_chat(_make_response('ok'))

		await chat.ainvoke([UserMessage(content='hi')])

		for key in ('temperature', 'frequency_penalty', 'max_completion_tokens', 'top_p', 'seed', 'reasoning_effort'):
			assert key not in completions.last_kwargs

	@pytest.mark.asyncio
	async def test_reasoning_models_drop_temperature(self, make_chat):
		chat, completions = make_chat(_make_response('ok'), model='o3-mini', temperature=0.2)

		await chat.ainvoke([UserMessage(content='hi')])

		assert completions.last_kwargs['reasoning_effort'] == 'low'
		assert 'temperature' not in completions.last_kwargs

	def test_client_params_skip_none(self):
		chat = ChatOpenAI(model='gpt-4o', api_key='sk-test', timeout=12.5)

		params = chat._get_client_params()

		assert params == {'api_key': 'sk-test', 'timeout': 12.5, 'max_retries': 0}


class TestProviderErrors:
	@pytest.mark.asyncio
	async def test_rate_limit(self, make_chat):
		response = httpx.Response(429, request=_request())
		chat, _ = make_chat(error=RateLimitError('Rate limit reached', response=response, body=None))

		with pytest.raises(ModelRateLimitError) as exc_info:
			await chat.ainvoke([UserMessage(content='hi')], output_format=ProductRecord)

		assert exc_info.value.status_code == 429
		assert exc_info.value.model == 'gpt-4o-2024-08-06'

	@pytest.mark.asyncio
	async def test_connection_error(self, make_chat):
		chat, _ = make_chat(error=APIConnectionError(request=_request()))

		with pytest.raises(ModelProviderError) as exc_info:
			await chat.ainvoke([UserMessage(content='hi')], output_format=ProductRecord)

		assert exc_info.value.status_code == 502

	@pytest.mark.asyncio
	async def test_status_error_message_is_sanitized(self, make_chat):
		response = httpx.Response(401, request=_request())
		error = APIStatusError(
			'Incorrect API key provided: sk-proj-abcdefghijklmnopqrstuvwxyz123456', response=response, body=None
		)
		chat, _ = make_chat(error=error)

		with pytest.raises(ModelProviderError) as exc_info:
			await chat.ainvoke([UserMessage(content='hi')], output_format=ProductRecord)

		assert exc_info.value.status_code == 401
		assert 'abcdefghijklmnopqrstuvwxyz123456' not in str(exc_info.value)
		assert 'Incorrect API key provided' in str(exc_info.value)

	@pytest.mark.asyncio
	async def test_other_client_errors_become_provider_errors(self, make_chat):
		error = OpenAIError('client blew up')
		chat, _ = make_chat(error=error)

		with pytest.raises(ModelProviderError) as exc_info:
			await chat.ainvoke([UserMessage(content='hi')], output_format=ProductRecord)

		assert 'client blew up' in str(exc_info.value)
		assert exc_info.value.status_code == 502
		assert exc_info.value.__cause__ is error


class TestClientLifecycle:
	@pytest.mark.asyncio
	async def test_client_is_closed_after_call(self, make_chat, tshirt_payload):
		chat, completions = make_chat(_make_response(json.dumps(tshirt_payload(URL))))

		await chat.ainvoke([UserMessage(content='extract')], output_format=ProductRecord)

		assert completions.client.closed

	@pytest.mark.asyncio
	async def test_client_is_closed_after_failure(self, make_chat):
		chat, completions = make_chat(error=OpenAIError('client blew up'))

		with pytest.raises(ModelProviderError):
			await chat.ainvoke([UserMessage(content='hi')], output_format=ProductRecord)

		assert completions.client.closed

	@pytest.mark.asyncio
	async def test_injected_http_client_is_left_open(self, make_chat):
		async with httpx.AsyncClient() as http_client:
			chat, completions = make_chat(_make_response('ok'), http_client=http_client)

			await chat.ainvoke([UserMessage(content='hi')])

			assert not completions.client.closed
			assert not http_client.is_closed
