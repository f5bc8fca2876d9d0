from .requests import TokenRequest
from .responses import (
	ConversionResponse,
	HealthResponse,
	HistoricalRatesResponse,
	LatestRatesResponse,
	ProvidersResponse,
	RateHistoryEntryResponse,
	TokenResponse,
)

__all__ = [
	'ConversionResponse',
	'HealthResponse',
	'HistoricalRatesResponse',
	'LatestRatesResponse',
	'ProvidersResponse',
	'RateHistoryEntryResponse',
	'TokenRequest',
	'TokenResponse',
]
