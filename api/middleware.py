import logging
import time

from fastapi import FastAPI, Request

logger = logging.getLogger('api.requests')


def register_middleware(app: FastAPI) -> None:
	@app.middleware('http')
	async def log_requests(request: Request, call_next):
		start_time = time.perf_counter()
		response = await call_next(request)
		duration_ms = (time.perf_counter() - start_time) * 1000

		logger.info(
			f'{request.method} {request.url.path} -> {response.status_code} ({duration_ms:.2f}ms)'
		)
		response.headers['X-Response-Time-Ms'] = f'{duration_ms:.2f}'
		return response
