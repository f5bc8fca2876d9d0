import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from api.dependencies import cleanup_dependencies, init_dependencies
from api.error_handlers import register_exception_handlers
from api.middleware import register_middleware
from api.rate_limit import register_rate_limiting
from api.routes import auth, currency, health
from config.logging_config import configure_logging
from config.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
	settings = settings or get_settings()

	@asynccontextmanager
	async def lifespan(app: FastAPI):
		configure_logging(console_level=settings.LOG_LEVEL, log_directory=settings.LOG_DIRECTORY)
		logger.info(f'Starting {settings.APP_NAME}...')

		app.state.deps = init_dependencies(settings)
		logger.info('Application ready')

		yield

		logger.info('Shutting down...')
		await cleanup_dependencies(app.state.deps)

	app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG, lifespan=lifespan)

	app.include_router(auth.router)
	app.include_router(currency.router)
	app.include_router(health.router)
	register_exception_handlers(app)
	register_rate_limiting(app, settings)
	register_middleware(app)

	return app


app = create_app()
