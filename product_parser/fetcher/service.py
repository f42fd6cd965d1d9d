"""
Retrieval of product page markup over plain HTTP.

No JavaScript is executed: what the server sends is what the model sees.
"""

import logging

import httpx

from product_parser.exceptions import FetchError, FetchErrorKind
from product_parser.fetcher.views import FetchResult
from product_parser.utils import time_execution_async

logger = logging.getLogger(__name__)

# Browser-like headers; several shops answer bare HTTP clients with a bot wall
DEFAULT_HEADERS = {
	'User-Agent': (
		'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) '
		'Chrome/124.0.0.0 Safari/537.36'
	),
	'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
	'Accept-Language': 'en-US,en;q=0.9',
}

HTML_MEDIA_TYPES = frozenset({'text/html', 'application/xhtml+xml'})


def _media_type(content_type: str) -> str:
	return content_type.split(';', 1)[0].strip().lower()


class PageFetcher:
	"""
	Fetches a URL and returns its body as text, failing with FetchError unless the response
	is a 2xx HTML document.

	Exactly one GET is issued per call and redirects are followed. Nothing is retried.
	"""

	def __init__(
		self,
		timeout: float | None = None,
		headers: dict[str, str] | None = None,
		http_client: httpx.AsyncClient | None = None,
	):
		self.timeout = timeout
		self.headers = {**DEFAULT_HEADERS, **(headers or {})}
		# An injected client is shared with the caller and left open
		self._http_client = http_client

	def _request_kwargs(self) -> dict:
		kwargs: dict = {'headers': self.headers, 'follow_redirects': True}
		if self.timeout is not None:
			kwargs['timeout'] = self.timeout
		return kwargs

	async def _get(self, url: str) -> httpx.Response:
		if self._http_client is not None:
			return await self._http_client.get(url, **self._request_kwargs())
		async with httpx.AsyncClient() as client:
			return await client.get(url, **self._request_kwargs())

	@time_execution_async('--fetch')
	async def fetch(self, url: str) -> FetchResult:
		logger.debug(f'🌐 Fetching {url}')

		try:
			response = await self._get(url)
		except (httpx.HTTPError, httpx.InvalidURL) as e:
			logger.error(f'❌ Network error fetching {url}: {type(e).__name__}: {e}')
			raise FetchError(
				f'{type(e).__name__}: {e}' if str(e) else type(e).__name__,
				kind=FetchErrorKind.TRANSPORT,
				url=url,
			) from e

		if not response.is_success:
			reason = response.reason_phrase
			logger.error(f'❌ {url} answered {response.status_code} {reason}')
			raise FetchError(
				f'{response.status_code} {reason}'.strip(),
				kind=FetchErrorKind.HTTP_STATUS,
				url=url,
				status_code=response.status_code,
				reason=reason,
			)

		content_type = response.headers.get('content-type', '')
		if _media_type(content_type) not in HTML_MEDIA_TYPES:
			logger.error(f'❌ {url} is not an HTML document (Content-Type: {content_type or "<missing>"})')
			raise FetchError(
				f'expected an HTML document but got Content-Type {content_type!r}'
				if content_type
				else 'response has no Content-Type header, expected an HTML document',
				kind=FetchErrorKind.CONTENT_TYPE,
				url=url,
				status_code=response.status_code,
			)

		html = response.text
		if str(response.url) != url:
			logger.debug(f'↪️ {url} redirected to {response.url}')
		logger.info(f'📄 Fetched {url} ({len(html)} chars, {response.status_code})')

		return FetchResult(url=url, html=html, status_code=response.status_code, content_type=content_type)


async def fetch_html(url: str, timeout: float | None = None) -> str:
	"""Fetch `url` and return its HTML text. Raises FetchError on any failure."""
	result = await PageFetcher(timeout=timeout).fetch(url)
	return result.html
