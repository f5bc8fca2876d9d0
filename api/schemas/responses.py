import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from domain.models.auth import IssuedToken
from domain.models.currency import (
	ConversionResult,
	ExchangeRateSnapshot,
	PaginatedResult,
	RateHistoryEntry,
)


class LatestRatesResponse(BaseModel):
	amount: Decimal = Field(..., description='Amount of base currency the rates are quoted for')
	base_currency: str = Field(..., description='Base currency code')
	date: dt.date = Field(..., description='Date the rates were published')
	rates: dict[str, Decimal] = Field(..., description='Rates keyed by currency code')

	@classmethod
	def from_snapshot(cls, snapshot: ExchangeRateSnapshot) -> 'LatestRatesResponse':
		return cls(
			amount=snapshot.amount,
			base_currency=snapshot.base_currency,
			date=snapshot.as_of,
			rates=dict(snapshot.rates),
		)

	model_config = ConfigDict(
		json_schema_extra={
			'example': {
				'amount': 1.0,
				'base_currency': 'USD',
				'date': '2025-09-26',
				'rates': {'EUR': 0.85, 'GBP': 0.75},
			}
		}
	)


class ConversionResponse(BaseModel):
	amount: Decimal = Field(..., description='Original amount requested')
	from_currency: str = Field(..., description='Source currency code')
	to_currency: str = Field(..., description='Target currency code')
	converted_amount: Decimal = Field(..., description='Converted amount')
	rate: Decimal = Field(..., description='Exchange rate used for conversion')
	date: dt.date = Field(..., description='Date of the rate used')

	@classmethod
	def from_result(cls, result: ConversionResult) -> 'ConversionResponse':
		return cls(
			amount=result.amount,
			from_currency=result.from_currency,
			to_currency=result.to_currency,
			converted_amount=result.converted_amount,
			rate=result.rate,
			date=result.as_of,
		)

	model_config = ConfigDict(
		json_schema_extra={
			'example': {
				'amount': 100.00,
				'from_currency': 'USD',
				'to_currency': 'EUR',
				'converted_amount': 85.00,
				'rate': 0.85,
				'date': '2025-09-26',
			}
		}
	)


class RateHistoryEntryResponse(BaseModel):
	date: dt.date
	base_currency: str
	rates: dict[str, Decimal]


class HistoricalRatesResponse(BaseModel):
	items: list[RateHistoryEntryResponse]
	page: int
	page_size: int
	total_count: int
	total_pages: int

	@classmethod
	def from_result(cls, result: PaginatedResult[RateHistoryEntry]) -> 'HistoricalRatesResponse':
		return cls(
			items=[
				RateHistoryEntryResponse(date=e.date, base_currency=e.base_currency_code, rates=dict(e.rates))
				for e in result.items
			],
			page=result.page,
			page_size=result.page_size,
			total_count=result.total_count,
			total_pages=result.total_pages,
		)


class ProvidersResponse(BaseModel):
	providers: list[str] = Field(description='Registered provider names')
	default_provider: str


class TokenResponse(BaseModel):
	access_token: str
	token_type: str = 'bearer'
	expires_at: dt.datetime
	roles: list[str]

	@classmethod
	def from_token(cls, token: IssuedToken) -> 'TokenResponse':
		return cls(
			access_token=token.access_token,
			token_type=token.token_type,
			expires_at=token.expires_at,
			roles=token.roles,
		)


class HealthResponse(BaseModel):
	status: str
	timestamp: dt.datetime
	circuit_breakers: dict[str, str] = Field(default_factory=dict)
