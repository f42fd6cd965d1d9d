from product_parser.llm.sanitization import sanitize_string


class ModelError(Exception):
	pass


class ModelProviderError(ModelError):
	"""Exception raised when a model provider returns an error."""

	def __init__(
		self,
		message: str,
		status_code: int = 502,
		model: str | None = None,
	):
		# Provider errors sometimes echo the request, key included
		sanitized_message = sanitize_string(message)
		super().__init__(sanitized_message)
		self.message = sanitized_message
		self.status_code = status_code
		self.model = model


class ModelRateLimitError(ModelProviderError):
	"""Exception raised when a model provider returns a rate limit error."""

	def __init__(
		self,
		message: str,
		status_code: int = 429,
		model: str | None = None,
	):
		super().__init__(message, status_code, model)


class ModelOutputError(ModelError):
	"""The model answered, but its structured output does not match the requested schema."""

	def __init__(self, message: str, model: str | None = None, raw_output: str | None = None):
		super().__init__(message)
		self.message = message
		self.model = model
		self.raw_output = raw_output
