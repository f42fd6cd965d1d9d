"""
Chat-model layer used by the extraction engine.

Provides provider-independent message types, the `BaseChatModel` protocol and the OpenAI implementation.
"""

from product_parser.llm.base import BaseChatModel
from product_parser.llm.exceptions import ModelError, ModelOutputError, ModelProviderError, ModelRateLimitError
from product_parser.llm.messages import BaseMessage, UserMessage
from product_parser.llm.openai.chat import ChatOpenAI
from product_parser.llm.views import ChatInvokeCompletion, ChatInvokeUsage

__all__ = [
	# Message types
	'BaseMessage',
	'UserMessage',
	# Chat models
	'BaseChatModel',
	'ChatOpenAI',
	'ChatInvokeCompletion',
	'ChatInvokeUsage',
	# Errors
	'ModelError',
	'ModelOutputError',
	'ModelProviderError',
	'ModelRateLimitError',
]
