from openai.types.chat import ChatCompletionMessageParam, ChatCompletionUserMessageParam

from product_parser.llm.messages import BaseMessage, UserMessage


class OpenAIMessageSerializer:
	"""Serializer for converting between custom message types and OpenAI message param types."""

	@staticmethod
	def serialize(message: BaseMessage) -> ChatCompletionMessageParam:
		"""Serialize a custom message to an OpenAI message param."""
		if isinstance(message, UserMessage):
			user_result: ChatCompletionUserMessageParam = {'role': 'user', 'content': message.content}
			if message.name is not None:
				user_result['name'] = message.name
			return user_result

		raise ValueError(f'Unknown message type: {type(message)}')

	@staticmethod
	def serialize_messages(messages: list[BaseMessage]) -> list[ChatCompletionMessageParam]:
		return [OpenAIMessageSerializer.serialize(m) for m in messages]
