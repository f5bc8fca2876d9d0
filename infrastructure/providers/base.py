from datetime import date
from decimal import Decimal
from typing import Protocol

from domain.models.currency import ExchangeRateSnapshot


class ExchangeRateProvider(Protocol):
	@property
	def name(self) -> str: ...

	async def fetch_latest(self, base_currency: str) -> ExchangeRateSnapshot: ...

	async def fetch_conversion(
		self, amount: Decimal, from_currency: str, to_currency: str
	) -> ExchangeRateSnapshot: ...

	async def fetch_history(
		self, base_currency: str, start_date: date, end_date: date
	) -> dict[date, dict[str, Decimal]]: ...

	async def close(self) -> None: ...
