import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from domain.exceptions.auth import AuthenticationError, AuthorizationError
from domain.exceptions.currency import (
	CircuitOpenError,
	InvalidArgumentError,
	MalformedResponseError,
	RestrictedCurrencyError,
	UnsupportedProviderError,
	UpstreamRequestError,
	UpstreamUnavailableError,
)

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
	@app.exception_handler(InvalidArgumentError)
	async def invalid_argument_handler(request: Request, exc: InvalidArgumentError):
		return JSONResponse(status_code=400, content={'detail': str(exc)})

	@app.exception_handler(RestrictedCurrencyError)
	async def restricted_currency_handler(request: Request, exc: RestrictedCurrencyError):
		return JSONResponse(status_code=400, content={'detail': str(exc)})

	@app.exception_handler(UnsupportedProviderError)
	async def unsupported_provider_handler(request: Request, exc: UnsupportedProviderError):
		logger.error(f'Provider configuration error: {exc}')
		return JSONResponse(status_code=500, content={'detail': 'Exchange rate provider misconfigured'})

	@app.exception_handler(UpstreamRequestError)
	async def upstream_request_handler(request: Request, exc: UpstreamRequestError):
		logger.warning(f'Upstream rejected request: {exc}')
		return JSONResponse(status_code=400, content={'detail': 'Request rejected by exchange rate provider'})

	@app.exception_handler(CircuitOpenError)
	async def circuit_open_handler(request: Request, exc: CircuitOpenError):
		logger.warning(f'Circuit open: {exc}')
		return JSONResponse(
			status_code=503,
			content={'detail': 'Exchange rate service unavailable'},
			headers={'Retry-After': str(max(int(exc.retry_after), 1))},
		)

	@app.exception_handler(UpstreamUnavailableError)
	async def upstream_unavailable_handler(request: Request, exc: UpstreamUnavailableError):
		logger.error(f'Provider error: {exc}')
		return JSONResponse(status_code=503, content={'detail': 'Exchange rate service unavailable'})

	@app.exception_handler(MalformedResponseError)
	async def malformed_response_handler(request: Request, exc: MalformedResponseError):
		logger.error(f'Malformed provider response: {exc}')
		return JSONResponse(status_code=502, content={'detail': 'Invalid response from exchange rate provider'})

	@app.exception_handler(AuthenticationError)
	async def authentication_handler(request: Request, exc: AuthenticationError):
		return JSONResponse(
			status_code=401, content={'detail': str(exc)}, headers={'WWW-Authenticate': 'Bearer'}
		)

	@app.exception_handler(AuthorizationError)
	async def authorization_handler(request: Request, exc: AuthorizationError):
		return JSONResponse(status_code=403, content={'detail': 'Access is denied'})

	@app.exception_handler(Exception)
	async def global_exception_handler(request: Request, exc: Exception):
		logger.error(f'Unhandled exception: {exc}', exc_info=True)
		return JSONResponse(status_code=500, content={'detail': 'Internal server error'})
