import logging
from datetime import date
from decimal import Decimal
from typing import Any

import httpx
from pydantic import BaseModel, Field, ValidationError
from tenacity import AsyncRetrying

from domain.exceptions.currency import (
	MalformedResponseError,
	UpstreamRequestError,
	UpstreamUnavailableError,
)
from domain.models.currency import ExchangeRateSnapshot
from infrastructure.resilience.circuit_breaker import CircuitBreaker
from infrastructure.resilience.retry import build_retrying

logger = logging.getLogger(__name__)

TRANSIENT_STATUS_CODES = {408, 429}


class LatestRatesPayload(BaseModel):
	amount: Decimal
	base: str
	as_of: date = Field(alias='date')
	rates: dict[str, Decimal]


class HistoricalRatesPayload(BaseModel):
	amount: Decimal
	base: str
	start_date: date
	end_date: date | None = None
	rates: dict[date, dict[str, Decimal]]


class FrankfurterProvider:
	BASE_URL = 'https://api.frankfurter.app'

	def __init__(
		self,
		base_url: str | None = None,
		client: httpx.AsyncClient | None = None,
		timeout: float = 10.0,
		retrying: AsyncRetrying | None = None,
		circuit_breaker: CircuitBreaker | None = None,
	):
		self.base_url = (base_url or self.BASE_URL).rstrip('/')
		self._client = client or httpx.AsyncClient(timeout=timeout)
		self._retrying = retrying or build_retrying()
		self.circuit_breaker = circuit_breaker or CircuitBreaker(self.name)

	@property
	def name(self) -> str:
		return 'frankfurter'

	async def _get(self, path: str, params: dict) -> dict[str, Any]:
		async def attempt() -> dict[str, Any]:
			return await self.circuit_breaker.call(lambda: self._request(path, params))

		return await self._retrying.copy()(attempt)

	async def _request(self, path: str, params: dict) -> dict[str, Any]:
		url = f'{self.base_url}{path}'

		try:
			response = await self._client.get(url, params=params)
			response.raise_for_status()
		except httpx.HTTPStatusError as e:
			status_code = e.response.status_code
			message = f'Frankfurter HTTP error {status_code}: {e.response.text[:200]}'
			if status_code >= 500 or status_code in TRANSIENT_STATUS_CODES:
				raise UpstreamUnavailableError(message) from e
			raise UpstreamRequestError(message, status_code) from e
		except httpx.RequestError as e:
			raise UpstreamUnavailableError(f'Frankfurter request failed: {e.__class__.__name__}') from e

		try:
			data = response.json(parse_float=Decimal)
		except ValueError as e:
			raise MalformedResponseError(f'Frankfurter returned invalid JSON for {path}') from e

		if not isinstance(data, dict):
			raise MalformedResponseError(f'Frankfurter returned unexpected payload for {path}')
		return data

	async def fetch_latest(self, base_currency: str) -> ExchangeRateSnapshot:
		data = await self._get('/latest', {'from': base_currency})
		return self._parse_snapshot(data)

	async def fetch_conversion(
		self, amount: Decimal, from_currency: str, to_currency: str
	) -> ExchangeRateSnapshot:
		data = await self._get(
			'/latest', {'amount': str(amount), 'from': from_currency, 'to': to_currency}
		)
		return self._parse_snapshot(data)

	async def fetch_history(
		self, base_currency: str, start_date: date, end_date: date
	) -> dict[date, dict[str, Decimal]]:
		path = f'/{start_date:%Y-%m-%d}..{end_date:%Y-%m-%d}'
		data = await self._get(path, {'from': base_currency})

		try:
			payload = HistoricalRatesPayload.model_validate(data)
		except ValidationError as e:
			raise MalformedResponseError(f'Frankfurter historical payload invalid: {e}') from e

		logger.debug(f'Fetched {len(payload.rates)} days of {base_currency} rates')
		return payload.rates

	@staticmethod
	def _parse_snapshot(data: dict[str, Any]) -> ExchangeRateSnapshot:
		try:
			payload = LatestRatesPayload.model_validate(data)
		except ValidationError as e:
			raise MalformedResponseError(f'Frankfurter rates payload invalid: {e}') from e

		return ExchangeRateSnapshot(
			amount=payload.amount,
			base_currency=payload.base,
			as_of=payload.as_of,
			rates=dict(payload.rates),
		)

	async def close(self) -> None:
		await self._client.aclose()
