from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CredentialProfile(BaseModel):
	username: str
	password: str
	roles: list[str] = Field(default_factory=list)


class Settings(BaseSettings):
	# Application
	APP_NAME: str = 'Currency Rates API'
	DEBUG: bool = False
	LOG_LEVEL: str = 'INFO'
	LOG_DIRECTORY: str = 'logs'

	# Providers
	DEFAULT_PROVIDER: str = 'frankfurter'
	FRANKFURTER_BASE_URL: str = 'https://api.frankfurter.app'
	PROVIDER_TIMEOUT: float = 10.0

	# Resilience
	RETRY_ATTEMPTS: int = 3
	RETRY_BACKOFF_BASE: float = 2.0
	CIRCUIT_FAILURE_THRESHOLD: int = 5
	CIRCUIT_RECOVERY_TIMEOUT: float = 60.0

	# Currency policy and caching (TTLs in seconds)
	RESTRICTED_CURRENCIES: str = 'TRY,PLN,THB,MXN'
	LATEST_RATES_TTL: int = 3600
	CONVERSION_TTL: int = 3600
	HISTORICAL_RATES_TTL: int = 86400
	DEFAULT_PAGE_SIZE: int = 10

	# Authentication
	JWT_SECRET_KEY: str = 'change-me-in-production'
	JWT_ALGORITHM: str = 'HS256'
	JWT_EXPIRE_MINUTES: int = 60
	JWT_ISSUER: str = 'currency-rates-api'
	JWT_AUDIENCE: str = 'currency-rates-clients'
	USER_CREDENTIALS: list[CredentialProfile] = Field(default_factory=list)

	# Rate limiting, per client address and endpoint
	RATE_LIMIT_ENABLED: bool = True
	RATE_LIMIT: str = '100 per 10 minutes'

	model_config = SettingsConfigDict(env_file='.env', case_sensitive=False, extra='ignore')

	def restricted_currency_set(self) -> frozenset[str]:
		return frozenset(
			code.strip().upper() for code in self.RESTRICTED_CURRENCIES.split(',') if code.strip()
		)


@lru_cache
def get_settings() -> Settings:
	return Settings()
