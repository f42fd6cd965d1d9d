"""Shared fixtures: product page markup, canned model output and a stub chat model."""

import json
from typing import Any

import pytest
from pydantic import BaseModel

from product_parser.llm.exceptions import ModelOutputError
from product_parser.llm.views import ChatInvokeCompletion, ChatInvokeUsage

TSHIRT_HTML = """\
<!DOCTYPE html>
<html>
<head><title>Classic Cotton Tee | Example Shop</title></head>
<body>
	<h1>Classic Cotton Tee</h1>
	<p class="price">$19.99</p>
	<label>Color</label>
	<select name="color">
		<option>Red</option>
		<option>Blue</option>
	</select>
	<p class="description">A soft crew-neck T-shirt made from 100% cotton.</p>
</body>
</html>
"""


def tshirt_payload(url: str) -> dict[str, Any]:
	"""What a well-behaved model returns for TSHIRT_HTML: no brand, images or availability on the page."""
	return {
		'url': url,
		'title': 'Classic Cotton Tee',
		'description': 'A soft crew-neck T-shirt made from 100% cotton.',
		'category': 'T-Shirt',
		'images': None,
		'price': {'value': 19.99, 'currency': 'USD'},
		'availability': None,
		'brand': None,
		'attributes': [{'name': 'colorOptions', 'values': ['Red', 'Blue']}],
	}


class StubChatModel:
	"""
	Stands in for ChatOpenAI. Returns `content` parsed against the requested output format,
	or a None completion when `content` is None.
	"""

	def __init__(self, content: str | None = None, error: Exception | None = None):
		self.model = 'stub-model'
		self.content = content
		self.error = error
		self.calls: list[dict[str, Any]] = []

	@property
	def provider(self) -> str:
		return 'stub'

	@property
	def name(self) -> str:
		return self.model

	async def ainvoke(self, messages, output_format: type[BaseModel] | None = None, output_name: str | None = None):
		self.calls.append({'messages': messages, 'output_format': output_format, 'output_name': output_name})
		if self.error is not None:
			raise self.error

		usage = ChatInvokeUsage(prompt_tokens=100, completion_tokens=20, total_tokens=120)
		if self.content is None:
			return ChatInvokeCompletion(completion=None, usage=usage, stop_reason='stop')
		if output_format is None:
			return ChatInvokeCompletion(completion=self.content, usage=usage)

		try:
			parsed = output_format.model_validate_json(self.content)
		except ValueError as e:
			raise ModelOutputError(message=str(e), model=self.model, raw_output=self.content) from e
		return ChatInvokeCompletion(completion=parsed, usage=usage, stop_reason='stop')


@pytest.fixture
def stub_llm_factory():
	def make(payload: dict[str, Any] | str | None = None, error: Exception | None = None) -> StubChatModel:
		content = json.dumps(payload) if isinstance(payload, dict) else payload
		return StubChatModel(content=content, error=error)

	return make


@pytest.fixture
def tshirt_html() -> str:
	return TSHIRT_HTML


@pytest.fixture(name='tshirt_payload')
def tshirt_payload_fixture():
	return tshirt_payload
