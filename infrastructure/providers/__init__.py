from .base import ExchangeRateProvider
from .frankfurter import FrankfurterProvider
from .registry import PROVIDER_REGISTRY, ProviderName, ProviderSelector

__all__ = [
	'ExchangeRateProvider',
	'FrankfurterProvider',
	'PROVIDER_REGISTRY',
	'ProviderName',
	'ProviderSelector',
]
