"""Pure transformations from provider payloads to the shapes callers receive."""

from collections.abc import Collection, Mapping, Sequence
from dataclasses import replace
from datetime import date
from decimal import Decimal
from types import MappingProxyType
from typing import TypeVar

from domain.exceptions.currency import MalformedResponseError
from domain.models.currency import (
	ConversionResult,
	ExchangeRateSnapshot,
	PaginatedResult,
	RateHistoryEntry,
)

T = TypeVar('T')


def strip_restricted(rates: Mapping[str, Decimal], restricted: Collection[str]) -> dict[str, Decimal]:
	return {code: rate for code, rate in rates.items() if code.upper() not in restricted}


def strip_snapshot(snapshot: ExchangeRateSnapshot, restricted: Collection[str]) -> ExchangeRateSnapshot:
	"""Filtered copy with read-only rates, safe to share from the cache."""
	return replace(snapshot, rates=MappingProxyType(strip_restricted(snapshot.rates, restricted)))


def strip_history(
	history: Mapping[date, Mapping[str, Decimal]], restricted: Collection[str]
) -> Mapping[date, Mapping[str, Decimal]]:
	return MappingProxyType(
		{day: MappingProxyType(strip_restricted(rates, restricted)) for day, rates in history.items()}
	)


def shape_conversion_result(
	snapshot: ExchangeRateSnapshot, amount: Decimal, from_currency: str, to_currency: str
) -> ConversionResult:
	"""Scale a unit snapshot (1 `from_currency`) up to `amount`."""
	try:
		rate = snapshot.rates[to_currency]
	except KeyError as e:
		raise MalformedResponseError(
			f'Rate for {to_currency} missing from {from_currency} snapshot'
		) from e

	return ConversionResult(
		amount=amount,
		from_currency=from_currency,
		to_currency=to_currency,
		converted_amount=amount * rate,
		rate=rate,
		as_of=snapshot.as_of,
	)


def build_history_entries(
	history: Mapping[date, Mapping[str, Decimal]], base_currency: str
) -> list[RateHistoryEntry]:
	"""One entry per day, newest first."""
	return [
		RateHistoryEntry(date=day, base_currency_code=base_currency, rates=dict(history[day]))
		for day in sorted(history, reverse=True)
	]


def paginate(items: Sequence[T], page: int, page_size: int) -> PaginatedResult[T]:
	start = (page - 1) * page_size
	return PaginatedResult(
		items=list(items[start : start + page_size]),
		page=page,
		page_size=page_size,
		total_count=len(items),
	)
