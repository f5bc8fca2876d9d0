import threading
import time
from collections.abc import Callable
from datetime import timedelta
from typing import Any, Protocol


class Cache(Protocol):
	def get(self, key: str) -> Any | None: ...

	def set(self, key: str, value: Any, ttl: timedelta) -> None: ...


class MemoryCacheService:
	"""Process-local key/value store with a per-entry TTL, safe for concurrent access."""

	def __init__(self, clock: Callable[[], float] = time.monotonic):
		self._clock = clock
		self._entries: dict[str, tuple[float, Any]] = {}
		self._lock = threading.Lock()

	def get(self, key: str) -> Any | None:
		with self._lock:
			entry = self._entries.get(key)
			if entry is None:
				return None

			expires_at, value = entry
			if self._clock() >= expires_at:
				del self._entries[key]
				return None
			return value

	def set(self, key: str, value: Any, ttl: timedelta) -> None:
		expires_at = self._clock() + ttl.total_seconds()
		with self._lock:
			self._entries[key] = (expires_at, value)

	def clear(self) -> None:
		with self._lock:
			self._entries.clear()

	def __len__(self) -> int:
		with self._lock:
			return len(self._entries)
