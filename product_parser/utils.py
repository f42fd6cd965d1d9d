import logging
import time
from functools import wraps
from typing import Any, Callable, Coroutine, ParamSpec, TypeVar

logger = logging.getLogger(__name__)


# Define generic type variables for return type and parameters
R = TypeVar('R')
P = ParamSpec('P')


def time_execution_async(
	additional_text: str = '',
) -> Callable[[Callable[P, Coroutine[Any, Any, R]]], Callable[P, Coroutine[Any, Any, R]]]:
	"""Log at DEBUG how long the decorated coroutine took, whether it returned or raised."""

	def decorator(func: Callable[P, Coroutine[Any, Any, R]]) -> Callable[P, Coroutine[Any, Any, R]]:
		@wraps(func)
		async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
			start_time = time.time()
			try:
				return await func(*args, **kwargs)
			finally:
				execution_time = time.time() - start_time
				logger.debug(f'{additional_text} Execution time: {execution_time:.2f} seconds')

		return wrapper

	return decorator


def truncate_for_log(text: str, max_chars: int = 200) -> str:
	if len(text) <= max_chars:
		return text
	return f'{text[:max_chars]}… ({len(text) - max_chars} more chars)'
