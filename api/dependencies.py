import logging
from collections.abc import Callable
from datetime import timedelta
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from application.services import AuthService, CurrencyService
from config.settings import Settings
from domain.models.auth import UserCredential
from infrastructure.cache.memory_cache import MemoryCacheService
from infrastructure.providers import ProviderSelector
from infrastructure.security.jwt_handler import JWTHandler

logger = logging.getLogger(__name__)


class AppDependencies:
	"""Container for application-wide singleton dependencies."""

	def __init__(
		self,
		settings: Settings,
		provider_selector: ProviderSelector,
		cache: MemoryCacheService,
		currency_service: CurrencyService,
		auth_service: AuthService,
	):
		self.settings = settings
		self.provider_selector = provider_selector
		self.cache = cache
		self.currency_service = currency_service
		self.auth_service = auth_service


def init_dependencies(settings: Settings) -> AppDependencies:
	"""Build all singleton dependencies. Called at app startup."""
	logger.info('Initializing dependencies...')

	provider_selector = ProviderSelector.from_settings(settings)
	cache = MemoryCacheService()
	currency_service = CurrencyService(
		provider_selector=provider_selector,
		cache=cache,
		restricted_currencies=settings.restricted_currency_set(),
		latest_ttl=timedelta(seconds=settings.LATEST_RATES_TTL),
		conversion_ttl=timedelta(seconds=settings.CONVERSION_TTL),
		historical_ttl=timedelta(seconds=settings.HISTORICAL_RATES_TTL),
		default_page_size=settings.DEFAULT_PAGE_SIZE,
	)
	auth_service = AuthService(
		credentials=[
			UserCredential(username=c.username, password=c.password, roles=list(c.roles))
			for c in settings.USER_CREDENTIALS
		],
		jwt_handler=JWTHandler(
			secret_key=settings.JWT_SECRET_KEY,
			algorithm=settings.JWT_ALGORITHM,
			expire_minutes=settings.JWT_EXPIRE_MINUTES,
			issuer=settings.JWT_ISSUER,
			audience=settings.JWT_AUDIENCE,
		),
	)
	if not settings.USER_CREDENTIALS:
		logger.warning('No user credentials configured, token issuance will always fail')

	logger.info(f'Restricted currencies: {", ".join(sorted(currency_service.restricted_currencies))}')
	logger.info('Dependencies initialized')
	return AppDependencies(settings, provider_selector, cache, currency_service, auth_service)


async def cleanup_dependencies(deps: AppDependencies) -> None:
	logger.info('Cleaning up dependencies...')
	await deps.provider_selector.close()
	deps.cache.clear()
	logger.info('Cleanup complete')


def get_app_dependencies(request: Request) -> AppDependencies:
	deps = getattr(request.app.state, 'deps', None)
	if deps is None:
		raise RuntimeError('Dependencies not initialized')
	return deps


def get_currency_service(
	deps: Annotated[AppDependencies, Depends(get_app_dependencies)],
) -> CurrencyService:
	return deps.currency_service


def get_auth_service(
	deps: Annotated[AppDependencies, Depends(get_app_dependencies)],
) -> AuthService:
	return deps.auth_service


def get_provider_selector(
	deps: Annotated[AppDependencies, Depends(get_app_dependencies)],
) -> ProviderSelector:
	return deps.provider_selector


bearer_scheme = HTTPBearer(auto_error=False)


def get_current_claims(
	credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
	auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> dict:
	return auth_service.authenticate(credentials.credentials if credentials else '')


def require_roles(*roles: str) -> Callable[..., dict]:
	def check_roles(claims: Annotated[dict, Depends(get_current_claims)]) -> dict:
		AuthService.authorize(claims, roles)
		return claims

	return check_roles
