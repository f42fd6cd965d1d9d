from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar('T')


class ChatInvokeUsage(BaseModel):
	"""
	Usage information for a chat model invocation.
	"""

	prompt_tokens: int
	"""The number of tokens in the prompt."""

	prompt_cached_tokens: int | None = None
	"""The number of prompt tokens served from the provider cache."""

	completion_tokens: int
	"""The number of tokens in the completion."""

	total_tokens: int
	"""The total number of tokens in the response."""


class ChatInvokeCompletion(BaseModel, Generic[T]):
	"""
	Response from a chat model invocation.
	"""

	completion: T
	"""The completion of the response. `None` for a structured call the model left empty or refused."""

	usage: ChatInvokeUsage | None = None
	"""The usage of the response."""

	stop_reason: str | None = None

	refusal: str | None = None
	"""Refusal text, when the model declined to answer."""
