"""
Per-client request throttling.

Every endpoint gets its own window per client address, so a burst against
`/currency/rates` does not consume the budget of `/currency/convert`.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from config.settings import Settings

logger = logging.getLogger(__name__)


def build_limiter(settings: Settings) -> Limiter:
	return Limiter(
		key_func=get_remote_address,
		default_limits=[settings.RATE_LIMIT],
		enabled=settings.RATE_LIMIT_ENABLED,
	)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
	retry_after = exc.limit.limit.get_expiry()
	logger.warning(
		f'Rate limit exceeded for {get_remote_address(request)} on {request.url.path}: {exc.detail}'
	)
	return JSONResponse(
		status_code=429,
		content={
			'detail': f'Too many requests. Limit is {exc.detail}',
			'retry_after': retry_after,
		},
		headers={'Retry-After': str(retry_after)},
	)


def register_rate_limiting(app: FastAPI, settings: Settings) -> None:
	# SlowAPIMiddleware reads the limiter from app state
	app.state.limiter = build_limiter(settings)
	app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
	app.add_middleware(SlowAPIMiddleware)
