import logging
from collections.abc import Callable
from enum import Enum

from config.settings import Settings
from domain.exceptions.currency import UnsupportedProviderError
from infrastructure.providers.base import ExchangeRateProvider
from infrastructure.providers.frankfurter import FrankfurterProvider
from infrastructure.resilience.circuit_breaker import CircuitBreaker
from infrastructure.resilience.retry import build_retrying

logger = logging.getLogger(__name__)


class ProviderName(str, Enum):
	FRANKFURTER = 'frankfurter'


ProviderFactory = Callable[[Settings], ExchangeRateProvider]


def build_frankfurter(settings: Settings) -> FrankfurterProvider:
	return FrankfurterProvider(
		base_url=settings.FRANKFURTER_BASE_URL,
		timeout=settings.PROVIDER_TIMEOUT,
		retrying=build_retrying(settings.RETRY_ATTEMPTS, settings.RETRY_BACKOFF_BASE),
		circuit_breaker=CircuitBreaker(
			ProviderName.FRANKFURTER.value,
			failure_threshold=settings.CIRCUIT_FAILURE_THRESHOLD,
			recovery_timeout=settings.CIRCUIT_RECOVERY_TIMEOUT,
		),
	)


PROVIDER_REGISTRY: dict[ProviderName, ProviderFactory] = {
	ProviderName.FRANKFURTER: build_frankfurter,
}


class ProviderSelector:
	"""Resolves provider names to the client instances built at startup."""

	def __init__(self, providers: dict[str, ExchangeRateProvider], default_provider: str):
		self._providers = {name.lower(): provider for name, provider in providers.items()}
		self.default_provider = default_provider.lower()
		if self.default_provider not in self._providers:
			raise UnsupportedProviderError(default_provider)

	@classmethod
	def from_settings(
		cls, settings: Settings, registry: dict[ProviderName, ProviderFactory] | None = None
	) -> 'ProviderSelector':
		registry = registry if registry is not None else PROVIDER_REGISTRY
		providers = {name.value: factory(settings) for name, factory in registry.items()}
		logger.info(f'Registered providers: {", ".join(sorted(providers))}')
		return cls(providers, settings.DEFAULT_PROVIDER)

	def get_provider(self, name: str | None = None) -> ExchangeRateProvider:
		key = name.strip().lower() if name and name.strip() else self.default_provider
		provider = self._providers.get(key)
		if provider is None:
			raise UnsupportedProviderError(name or key)
		return provider

	def list_providers(self) -> set[str]:
		return set(self._providers)

	async def close(self) -> None:
		for provider in self._providers.values():
			await provider.close()
