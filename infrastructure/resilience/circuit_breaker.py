import logging
import threading
import time
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

from domain.exceptions.currency import CircuitOpenError, UpstreamUnavailableError

logger = logging.getLogger(__name__)


class CircuitBreakerState(Enum):
	CLOSED = 'CLOSED'
	OPEN = 'OPEN'
	HALF_OPEN = 'HALF_OPEN'


class CircuitBreaker:
	"""In-process circuit breaker guarding calls to one upstream provider.

	CLOSED -> OPEN after `failure_threshold` consecutive handled failures.
	OPEN -> HALF_OPEN once `recovery_timeout` seconds have passed; a single
	trial call is let through. The trial closes the circuit on success and
	reopens it on a handled failure. Exceptions outside `handled_exceptions`
	pass through without touching the failure count.
	"""

	def __init__(
		self,
		name: str,
		failure_threshold: int = 5,
		recovery_timeout: float = 60.0,
		handled_exceptions: tuple[type[BaseException], ...] = (UpstreamUnavailableError,),
		clock: Callable[[], float] = time.monotonic,
	):
		self.name = name
		self.failure_threshold = failure_threshold
		self.recovery_timeout = recovery_timeout
		self.handled_exceptions = handled_exceptions
		self._clock = clock

		self._state = CircuitBreakerState.CLOSED
		self._failure_count = 0
		self._opened_at = 0.0
		self._trial_in_flight = False
		self._lock = threading.Lock()

	@property
	def state(self) -> CircuitBreakerState:
		return self._state

	@property
	def failure_count(self) -> int:
		return self._failure_count

	async def call(self, func: Callable[[], Awaitable[Any]]) -> Any:
		"""Execute function with circuit breaker protection"""
		is_trial = self._acquire_permission()

		try:
			result = await func()
		except self.handled_exceptions:
			self._on_failure(is_trial)
			raise
		except BaseException:
			if is_trial:
				self._release_trial()
			raise

		self._on_success(is_trial)
		return result

	def _acquire_permission(self) -> bool:
		with self._lock:
			if self._state == CircuitBreakerState.CLOSED:
				return False

			if self._state == CircuitBreakerState.OPEN:
				elapsed = self._clock() - self._opened_at
				if elapsed < self.recovery_timeout:
					raise CircuitOpenError(self.name, self._failure_count, self.recovery_timeout - elapsed)
				self._transition(CircuitBreakerState.HALF_OPEN, 'recovery_timeout_elapsed')

			# HALF_OPEN: one trial call at a time
			if self._trial_in_flight:
				raise CircuitOpenError(self.name, self._failure_count, 0.0)
			self._trial_in_flight = True
			return True

	def _release_trial(self) -> None:
		with self._lock:
			self._trial_in_flight = False

	def _on_success(self, is_trial: bool) -> None:
		with self._lock:
			if is_trial:
				self._trial_in_flight = False
				self._transition(CircuitBreakerState.CLOSED, 'trial_call_succeeded')
			self._failure_count = 0

	def _on_failure(self, is_trial: bool) -> None:
		with self._lock:
			self._failure_count += 1

			if is_trial:
				self._trial_in_flight = False
				self._open('failure_during_recovery')
			elif self._state == CircuitBreakerState.CLOSED and self._failure_count >= self.failure_threshold:
				self._open(f'{self._failure_count}_consecutive_failures')
			else:
				logger.warning(
					f'Failure for {self.name}: {self._failure_count}/{self.failure_threshold}'
				)

	def _open(self, reason: str) -> None:
		self._opened_at = self._clock()
		self._transition(CircuitBreakerState.OPEN, reason)

	def _transition(self, new_state: CircuitBreakerState, reason: str) -> None:
		old_state = self._state
		self._state = new_state
		if old_state == new_state:
			return

		message = f'Circuit breaker {self.name}: {old_state.value} -> {new_state.value} ({reason})'
		if new_state == CircuitBreakerState.OPEN:
			logger.error(f'{message}, breaking for {self.recovery_timeout}s')
		else:
			logger.info(message)
