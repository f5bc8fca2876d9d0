import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Generic, TypeVar

T = TypeVar('T')


@dataclass(frozen=True)
class ExchangeRateSnapshot:
	amount: Decimal
	base_currency: str
	as_of: date
	rates: Mapping[str, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class ConversionResult:
	amount: Decimal
	from_currency: str
	to_currency: str
	converted_amount: Decimal
	rate: Decimal
	as_of: date


@dataclass(frozen=True)
class HistoricalRatesRequest:
	base_currency: str
	start_date: date
	end_date: date
	page: int = 1
	page_size: int = 10


@dataclass(frozen=True)
class RateHistoryEntry:
	date: date
	base_currency_code: str
	rates: dict[str, Decimal]


@dataclass(frozen=True)
class PaginatedResult(Generic[T]):
	items: list[T]
	page: int
	page_size: int
	total_count: int

	@property
	def total_pages(self) -> int:
		return math.ceil(self.total_count / self.page_size)
