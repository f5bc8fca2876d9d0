from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends

from api.dependencies import get_provider_selector
from api.schemas import HealthResponse
from infrastructure.providers import ProviderSelector

router = APIRouter(prefix='/api/v1', tags=['health'])


@router.get('/health', response_model=HealthResponse, summary='Liveness and circuit breaker status')
async def health_check(
	selector: Annotated[ProviderSelector, Depends(get_provider_selector)],
) -> HealthResponse:
	breakers = {}
	for name in sorted(selector.list_providers()):
		breaker = getattr(selector.get_provider(name), 'circuit_breaker', None)
		if breaker is not None:
			breakers[name] = breaker.state.value

	degraded = any(state != 'CLOSED' for state in breakers.values())
	return HealthResponse(
		status='degraded' if degraded else 'healthy',
		timestamp=datetime.now(timezone.utc),
		circuit_breakers=breakers,
	)
