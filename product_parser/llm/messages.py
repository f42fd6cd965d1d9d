"""
Provider-independent chat message types.

Only user text is sent: the extraction prompt carries the page markup, never images or history.
"""

from typing import Literal

from pydantic import BaseModel


class BaseMessage(BaseModel):
	role: str

	content: str


class UserMessage(BaseMessage):
	role: Literal['user'] = 'user'

	name: str | None = None
