import logging
from enum import Enum

from product_parser.config import ProductParserConfig, load_config
from product_parser.exceptions import ExtractionError
from product_parser.extractor.prompts import build_extraction_prompt
from product_parser.extractor.views import ProductRecord
from product_parser.fetcher.service import PageFetcher
from product_parser.llm.base import BaseChatModel
from product_parser.llm.exceptions import ModelOutputError, ModelProviderError
from product_parser.llm.messages import UserMessage
from product_parser.llm.openai.chat import ChatOpenAI
from product_parser.utils import time_execution_async, truncate_for_log

logger = logging.getLogger(__name__)

# Name of the response schema sent to the model service
OUTPUT_NAME = 'product'

EXTRACTION_FAILED_MESSAGE = 'Failed to extract product'


class ExtractionState(str, Enum):
	START = 'start'
	FETCHING = 'fetching'
	FETCHED = 'fetched'
	PROMPTING = 'prompting'
	INVOKING_MODEL = 'invoking_model'
	PARSING = 'parsing'
	SUCCESS = 'success'
	FAILED = 'failed'


class ExtractorService:
	"""
	Turns a product page URL into a validated ProductRecord.

	Each call fetches the page once and invokes the model once. Failures abort the call and
	propagate: FetchError as raised by the fetcher, everything model-related as ExtractionError.
	The service keeps no state between calls, so one instance can serve concurrent requests.
	"""

	def __init__(self, llm: BaseChatModel, fetcher: PageFetcher | None = None):
		self.llm = llm
		self.fetcher = fetcher or PageFetcher()

	def _transition(self, url: str, state: ExtractionState) -> None:
		logger.debug(f'[{url}] → {state.value}')

	@time_execution_async('--extract_product')
	async def extract_product(self, url: str) -> ProductRecord:
		self._transition(url, ExtractionState.START)
		try:
			product = await self._run(url)
		except BaseException:
			self._transition(url, ExtractionState.FAILED)
			raise
		self._transition(url, ExtractionState.SUCCESS)
		return product

	async def _run(self, url: str) -> ProductRecord:
		self._transition(url, ExtractionState.FETCHING)
		page = await self.fetcher.fetch(url)
		self._transition(url, ExtractionState.FETCHED)

		self._transition(url, ExtractionState.PROMPTING)
		prompt = build_extraction_prompt(page.html, url)

		self._transition(url, ExtractionState.INVOKING_MODEL)
		logger.info(f'🧠 Asking {self.llm.name} to extract product from {url}')
		try:
			response = await self.llm.ainvoke(
				[UserMessage(content=prompt)],
				output_format=ProductRecord,
				output_name=OUTPUT_NAME,
			)
		except ModelOutputError as e:
			logger.error(f'❌ {EXTRACTION_FAILED_MESSAGE} from {url}: {e.message}')
			if e.raw_output:
				logger.debug(f'Rejected model output: {truncate_for_log(e.raw_output)}')
			raise ExtractionError(EXTRACTION_FAILED_MESSAGE, url=url) from e
		except ModelProviderError as e:
			logger.error(f'❌ Model invocation failed for {url}: {e.message}')
			raise ExtractionError(f'Model invocation failed: {e.message}', url=url) from e

		self._transition(url, ExtractionState.PARSING)
		product = response.completion
		if product is None:
			logger.error(f'❌ {EXTRACTION_FAILED_MESSAGE} from {url}: model returned no structured output')
			raise ExtractionError(EXTRACTION_FAILED_MESSAGE, url=url)

		if response.usage is not None:
			logger.debug(
				f'Token usage: {response.usage.prompt_tokens} prompt, '
				f'{response.usage.completion_tokens} completion, {response.usage.total_tokens} total'
			)

		return self._normalize(product, url)

	def _normalize(self, product: ProductRecord, url: str) -> ProductRecord:
		if product.url != url:
			logger.warning(f'⚠️ Model returned url {product.url!r} for {url!r}, using the requested URL')
			product = product.model_copy(update={'url': url})

		duplicates = product.duplicate_attribute_names()
		if duplicates:
			logger.warning(f'⚠️ Duplicate attribute names in product from {url}: {", ".join(duplicates)}')

		return product


def create_chat_model(credential: str, config: ProductParserConfig) -> ChatOpenAI:
	"""Chat model bound to one request's credential."""
	return ChatOpenAI(
		model=config.model,
		api_key=credential,
		timeout=config.model_timeout,
		max_retries=config.model_max_retries,
	)


async def extract_product(url: str, credential: str, config: ProductParserConfig | None = None) -> ProductRecord:
	"""
	Extract a product record from `url` using the model service authenticated by `credential`.

	Raises:
		FetchError: the page could not be retrieved as HTML
		ExtractionError: the model produced no usable record
	"""
	config = config or load_config()
	service = ExtractorService(
		llm=create_chat_model(credential, config),
		fetcher=PageFetcher(timeout=config.fetch_timeout),
	)
	product = await service.extract_product(url)
	logger.info(f'✅ Extracted {product.title!r} from {url}')
	return product
