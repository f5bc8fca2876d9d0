import logging
from collections.abc import Callable

from tenacity import (
	AsyncRetrying,
	RetryCallState,
	retry_if_exception,
	stop_after_attempt,
	wait_exponential,
)
from tenacity.wait import wait_base

from domain.exceptions.currency import CircuitOpenError, UpstreamUnavailableError

logger = logging.getLogger(__name__)


def is_transient(exc: BaseException) -> bool:
	# an open circuit fails fast, retrying would only wait on it
	return isinstance(exc, UpstreamUnavailableError) and not isinstance(exc, CircuitOpenError)


def _retry_logger(retries: int) -> Callable[[RetryCallState], None]:
	def log_retry(retry_state: RetryCallState) -> None:
		exc = retry_state.outcome.exception() if retry_state.outcome else None
		delay = retry_state.next_action.sleep if retry_state.next_action else 0
		logger.warning(
			f'Request failed ({exc}). Retrying in {delay}s. Attempt {retry_state.attempt_number}/{retries}'
		)

	return log_retry


def build_retrying(
	retries: int = 3, backoff_base: float = 2.0, wait: wait_base | None = None
) -> AsyncRetrying:
	"""Retry transient upstream failures, waiting backoff_base ** attempt seconds between tries."""
	return AsyncRetrying(
		stop=stop_after_attempt(retries + 1),
		wait=wait or wait_exponential(multiplier=backoff_base, exp_base=backoff_base),
		retry=retry_if_exception(is_transient),
		before_sleep=_retry_logger(retries),
		reraise=True,
	)
