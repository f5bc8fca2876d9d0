from datetime import date
from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from api.dependencies import get_currency_service, get_provider_selector, require_roles
from api.schemas import (
	ConversionResponse,
	HistoricalRatesResponse,
	LatestRatesResponse,
	ProvidersResponse,
)
from application.services import CurrencyService
from domain.models.currency import HistoricalRatesRequest
from infrastructure.providers import ProviderSelector

router = APIRouter(prefix='/api/v1/currency', tags=['currency'])

CurrencyCode = Annotated[str, Query(min_length=3, max_length=3)]


@router.get(
	'/rates',
	response_model=LatestRatesResponse,
	status_code=status.HTTP_200_OK,
	summary='Get latest exchange rates for a base currency',
	dependencies=[Depends(require_roles('User', 'Admin'))],
)
async def get_latest_rates(
	base_currency: CurrencyCode,
	service: Annotated[CurrencyService, Depends(get_currency_service)],
) -> LatestRatesResponse:
	snapshot = await service.get_latest_rates(base_currency)
	return LatestRatesResponse.from_snapshot(snapshot)


@router.get(
	'/convert',
	response_model=ConversionResponse,
	status_code=status.HTTP_200_OK,
	summary='Convert currency amount',
	dependencies=[Depends(require_roles('User', 'Admin'))],
)
async def convert_currency(
	amount: Annotated[Decimal, Query(gt=0)],
	source_currency: CurrencyCode,
	target_currency: CurrencyCode,
	service: Annotated[CurrencyService, Depends(get_currency_service)],
) -> ConversionResponse:
	result = await service.convert(amount, source_currency, target_currency)
	return ConversionResponse.from_result(result)


@router.get(
	'/historical',
	response_model=HistoricalRatesResponse,
	status_code=status.HTTP_200_OK,
	summary='Get paginated historical rates',
	dependencies=[Depends(require_roles('Admin'))],
)
async def get_historical_rates(
	base_currency: CurrencyCode,
	start_date: date,
	end_date: date,
	service: Annotated[CurrencyService, Depends(get_currency_service)],
	page: int = 1,
	page_size: int = 10,
) -> HistoricalRatesResponse:
	result = await service.get_historical_rates(
		HistoricalRatesRequest(
			base_currency=base_currency,
			start_date=start_date,
			end_date=end_date,
			page=page,
			page_size=page_size,
		)
	)
	return HistoricalRatesResponse.from_result(result)


@router.get(
	'/providers',
	response_model=ProvidersResponse,
	status_code=status.HTTP_200_OK,
	summary='List registered rate providers',
	dependencies=[Depends(require_roles('User', 'Admin'))],
)
async def list_providers(
	selector: Annotated[ProviderSelector, Depends(get_provider_selector)],
) -> ProvidersResponse:
	return ProvidersResponse(
		providers=sorted(selector.list_providers()), default_provider=selector.default_provider
	)
