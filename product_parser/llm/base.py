"""
The chat-model interface the extraction engine depends on.

Any object with a matching `ainvoke` works, which keeps the engine testable with stub models.
"""

from typing import Protocol, TypeVar, overload

from pydantic import BaseModel

from product_parser.llm.messages import BaseMessage
from product_parser.llm.views import ChatInvokeCompletion

T = TypeVar('T', bound=BaseModel)


class BaseChatModel(Protocol):
	model: str

	@property
	def provider(self) -> str: ...

	@property
	def name(self) -> str: ...

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
	) -> ChatInvokeCompletion[T | None] | ChatInvokeCompletion[str]: ...
