from product_parser.fetcher.service import DEFAULT_HEADERS, HTML_MEDIA_TYPES, PageFetcher, fetch_html
from product_parser.fetcher.views import FetchResult

__all__ = ['PageFetcher', 'FetchResult', 'fetch_html', 'DEFAULT_HEADERS', 'HTML_MEDIA_TYPES']
