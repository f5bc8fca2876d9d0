class CurrencyException(Exception):
	pass


class InvalidArgumentError(CurrencyException):
	pass


class RestrictedCurrencyError(CurrencyException):
	def __init__(self, currency: str):
		self.currency = currency
		super().__init__(f'Currency {currency} is restricted and cannot be used')


class UnsupportedProviderError(CurrencyException):
	def __init__(self, provider_name: str):
		self.provider_name = provider_name
		super().__init__(f"Provider '{provider_name}' is not supported")


class ProviderError(CurrencyException):
	pass


class UpstreamUnavailableError(ProviderError):
	pass


class CircuitOpenError(UpstreamUnavailableError):
	"""Raised when the circuit breaker is open and blocking calls"""

	def __init__(self, provider_name: str, failure_count: int, retry_after: float):
		self.provider_name = provider_name
		self.failure_count = failure_count
		self.retry_after = retry_after
		super().__init__(
			f'Circuit breaker OPEN for {provider_name} ({failure_count} failures), '
			f'retry in {retry_after:.1f}s'
		)


class MalformedResponseError(ProviderError):
	pass


class UpstreamRequestError(ProviderError):
	def __init__(self, message: str, status_code: int):
		self.status_code = status_code
		super().__init__(message)
