import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import replace
from datetime import timedelta
from decimal import Decimal, InvalidOperation
from typing import Any

from application.services.shaping import (
	build_history_entries,
	paginate,
	shape_conversion_result,
	strip_history,
	strip_snapshot,
)
from domain.exceptions.currency import InvalidArgumentError, RestrictedCurrencyError
from domain.models.currency import (
	ConversionResult,
	ExchangeRateSnapshot,
	HistoricalRatesRequest,
	PaginatedResult,
	RateHistoryEntry,
)
from infrastructure.cache.keys import CacheKeys
from infrastructure.cache.memory_cache import Cache
from infrastructure.providers.registry import ProviderSelector

logger = logging.getLogger(__name__)

UNIT_AMOUNT = Decimal('1')


class CurrencyService:
	def __init__(
		self,
		provider_selector: ProviderSelector,
		cache: Cache,
		restricted_currencies: Iterable[str],
		latest_ttl: timedelta = timedelta(hours=1),
		conversion_ttl: timedelta = timedelta(hours=1),
		historical_ttl: timedelta = timedelta(hours=24),
		default_page_size: int = 10,
		provider_name: str | None = None,
	):
		self.provider_selector = provider_selector
		self.cache = cache
		self.restricted_currencies = frozenset(code.upper() for code in restricted_currencies)
		self.latest_ttl = latest_ttl
		self.conversion_ttl = conversion_ttl
		self.historical_ttl = historical_ttl
		self.default_page_size = default_page_size
		self.provider_name = provider_name
		self._inflight: dict[str, asyncio.Lock] = {}

	def is_restricted(self, currency: str) -> bool:
		return currency.upper() in self.restricted_currencies

	async def get_latest_rates(self, base_currency: str) -> ExchangeRateSnapshot:
		if not base_currency or not base_currency.strip():
			raise InvalidArgumentError('Base currency cannot be null or empty')
		base = base_currency.strip().upper()
		self._ensure_allowed(base)

		async def load() -> ExchangeRateSnapshot:
			provider = self.provider_selector.get_provider(self.provider_name)
			snapshot = await provider.fetch_latest(base)
			return strip_snapshot(snapshot, self.restricted_currencies)

		return await self._read_through(
			CacheKeys.latest_rates(base), self.latest_ttl, load, f'latest rates with base currency {base}'
		)

	async def convert(
		self, amount: Decimal, source_currency: str, target_currency: str
	) -> ConversionResult:
		if not source_currency or not source_currency.strip() or not target_currency or not target_currency.strip():
			raise InvalidArgumentError('Source and target currencies must be specified')
		try:
			amount = Decimal(str(amount))
		except InvalidOperation as e:
			raise InvalidArgumentError(f'Amount {amount!r} is not a number') from e
		if not amount.is_finite() or amount <= 0:
			raise InvalidArgumentError('Amount must be greater than zero')

		source = source_currency.strip().upper()
		target = target_currency.strip().upper()
		self._ensure_allowed(source, target)

		async def load() -> ExchangeRateSnapshot:
			provider = self.provider_selector.get_provider(self.provider_name)
			snapshot = await provider.fetch_conversion(UNIT_AMOUNT, source, target)
			return strip_snapshot(snapshot, self.restricted_currencies)

		unit_snapshot = await self._read_through(
			CacheKeys.conversion_rate(source, target),
			self.conversion_ttl,
			load,
			f'conversion from {source} to {target}',
		)
		return shape_conversion_result(unit_snapshot, amount, source, target)

	async def get_historical_rates(
		self, request: HistoricalRatesRequest
	) -> PaginatedResult[RateHistoryEntry]:
		if not request.base_currency or not request.base_currency.strip():
			raise InvalidArgumentError('Base currency must be specified')
		if request.start_date > request.end_date:
			raise InvalidArgumentError('Start date must be before or equal to end date')

		base = request.base_currency.strip().upper()
		self._ensure_allowed(base)
		request = self.normalize_request(replace(request, base_currency=base))

		async def load() -> Mapping:
			provider = self.provider_selector.get_provider(self.provider_name)
			history = await provider.fetch_history(base, request.start_date, request.end_date)
			return strip_history(history, self.restricted_currencies)

		history = await self._read_through(
			CacheKeys.historical_rates(base, request.start_date, request.end_date),
			self.historical_ttl,
			load,
			f'historical rates with base currency {base} '
			f'from {request.start_date:%Y-%m-%d} to {request.end_date:%Y-%m-%d}',
		)

		entries = build_history_entries(history, base)
		return paginate(entries, request.page, request.page_size)

	def normalize_request(self, request: HistoricalRatesRequest) -> HistoricalRatesRequest:
		return replace(
			request,
			page=max(request.page, 1),
			page_size=request.page_size if request.page_size >= 1 else self.default_page_size,
		)

	def _ensure_allowed(self, *currencies: str) -> None:
		for currency in currencies:
			if self.is_restricted(currency):
				logger.warning(f'Rejected request for restricted currency {currency}')
				raise RestrictedCurrencyError(currency)

	async def _read_through(
		self, key: str, ttl: timedelta, load: Callable[[], Awaitable[Any]], description: str
	) -> Any:
		cached = self.cache.get(key)
		if cached is not None:
			logger.info(f'Cache hit for {description}')
			return cached

		# concurrent misses on one key share a single provider call
		lock = self._inflight.setdefault(key, asyncio.Lock())
		try:
			async with lock:
				cached = self.cache.get(key)
				if cached is not None:
					logger.info(f'Cache hit for {description}')
					return cached

				logger.info(f'Cache miss for {description}')
				value = await load()
				self.cache.set(key, value, ttl)
				return value
		finally:
			if not lock.locked() and self._inflight.get(key) is lock:
				del self._inflight[key]
