from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_auth_service, get_currency_service, get_provider_selector
from api.main import create_app
from application.services import AuthService
from config.settings import Settings
from domain.models.auth import UserCredential
from domain.models.currency import (
    ConversionResult,
    ExchangeRateSnapshot,
    PaginatedResult,
    RateHistoryEntry,
)
from infrastructure.providers import ProviderSelector
from infrastructure.resilience.circuit_breaker import CircuitBreaker
from infrastructure.security.jwt_handler import JWTHandler


@pytest.fixture
def auth_service():
    return AuthService(
        credentials=[
            UserCredential(username='user', password='user-pass', roles=['User']),
            UserCredential(username='admin', password='admin-pass', roles=['User', 'Admin']),
        ],
        jwt_handler=JWTHandler(secret_key='api-test-secret', issuer='tests', audience='clients'),
    )


@pytest.fixture
def mock_currency_service():
    service = MagicMock()
    service.get_latest_rates = AsyncMock(
        return_value=ExchangeRateSnapshot(
            amount=Decimal('1'),
            base_currency='USD',
            as_of=date(2025, 11, 5),
            rates={'EUR': Decimal('0.85'), 'GBP': Decimal('0.75')},
        )
    )
    service.convert = AsyncMock(
        return_value=ConversionResult(
            amount=Decimal('100'),
            from_currency='USD',
            to_currency='EUR',
            converted_amount=Decimal('85.00'),
            rate=Decimal('0.85'),
            as_of=date(2025, 11, 5),
        )
    )
    service.get_historical_rates = AsyncMock(
        return_value=PaginatedResult(
            items=[
                RateHistoryEntry(date=date(2020, 1, 3), base_currency_code='USD', rates={'EUR': Decimal('0.9')}),
                RateHistoryEntry(date=date(2020, 1, 2), base_currency_code='USD', rates={'EUR': Decimal('0.89')}),
            ],
            page=1,
            page_size=2,
            total_count=3,
        )
    )
    return service


@pytest.fixture
def breaker():
    return CircuitBreaker('frankfurter')


@pytest.fixture
def provider_selector(breaker):
    provider = MagicMock()
    provider.circuit_breaker = breaker
    return ProviderSelector({'frankfurter': provider}, default_provider='frankfurter')


@pytest.fixture
def client(auth_service, mock_currency_service, provider_selector):
    app = create_app(Settings(APP_NAME='Test API'))
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    app.dependency_overrides[get_currency_service] = lambda: mock_currency_service
    app.dependency_overrides[get_provider_selector] = lambda: provider_selector
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def user_headers(auth_service):
    token = auth_service.sign_in('user', 'user-pass')
    return {'Authorization': f'Bearer {token.access_token}'}


@pytest.fixture
def admin_headers(auth_service):
    token = auth_service.sign_in('admin', 'admin-pass')
    return {'Authorization': f'Bearer {token.access_token}'}
