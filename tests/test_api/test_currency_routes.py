from datetime import date
from decimal import Decimal

from domain.exceptions.currency import (
    CircuitOpenError,
    InvalidArgumentError,
    MalformedResponseError,
    RestrictedCurrencyError,
    UpstreamRequestError,
    UpstreamUnavailableError,
)
from domain.models.currency import HistoricalRatesRequest


# ============================================================================
# /rates
# ============================================================================

def test_latest_rates_success(client, mock_currency_service, user_headers):
    response = client.get('/api/v1/currency/rates', params={'base_currency': 'USD'}, headers=user_headers)

    assert response.status_code == 200
    data = response.json()
    assert data['base_currency'] == 'USD'
    assert data['date'] == '2025-11-05'
    assert {code: Decimal(str(rate)) for code, rate in data['rates'].items()} == {
        'EUR': Decimal('0.85'),
        'GBP': Decimal('0.75'),
    }
    mock_currency_service.get_latest_rates.assert_called_once_with('USD')
    assert 'X-Response-Time-Ms' in response.headers


def test_latest_rates_requires_token(client, mock_currency_service):
    response = client.get('/api/v1/currency/rates', params={'base_currency': 'USD'})

    assert response.status_code == 401
    assert response.headers['WWW-Authenticate'] == 'Bearer'
    mock_currency_service.get_latest_rates.assert_not_called()


def test_latest_rates_rejects_invalid_token(client):
    response = client.get(
        '/api/v1/currency/rates',
        params={'base_currency': 'USD'},
        headers={'Authorization': 'Bearer not-a-jwt'},
    )

    assert response.status_code == 401


def test_latest_rates_code_length_validated(client, user_headers):
    response = client.get('/api/v1/currency/rates', params={'base_currency': 'US'}, headers=user_headers)

    assert response.status_code == 422


def test_restricted_currency_is_bad_request(client, mock_currency_service, user_headers):
    mock_currency_service.get_latest_rates.side_effect = RestrictedCurrencyError('TRY')

    response = client.get('/api/v1/currency/rates', params={'base_currency': 'TRY'}, headers=user_headers)

    assert response.status_code == 400
    assert 'TRY is restricted' in response.json()['detail']


# ============================================================================
# /convert
# ============================================================================

def test_convert_success(client, mock_currency_service, user_headers):
    response = client.get(
        '/api/v1/currency/convert',
        params={'amount': '100', 'source_currency': 'USD', 'target_currency': 'EUR'},
        headers=user_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert Decimal(str(data['converted_amount'])) == Decimal('85')
    assert Decimal(str(data['rate'])) == Decimal('0.85')
    assert data['from_currency'] == 'USD'
    assert data['to_currency'] == 'EUR'
    mock_currency_service.convert.assert_called_once_with(Decimal('100'), 'USD', 'EUR')


def test_convert_non_positive_amount_rejected(client, mock_currency_service, user_headers):
    response = client.get(
        '/api/v1/currency/convert',
        params={'amount': '0', 'source_currency': 'USD', 'target_currency': 'EUR'},
        headers=user_headers,
    )

    assert response.status_code == 422
    mock_currency_service.convert.assert_not_called()


def test_invalid_argument_is_bad_request(client, mock_currency_service, user_headers):
    mock_currency_service.convert.side_effect = InvalidArgumentError('Amount must be greater than zero')

    response = client.get(
        '/api/v1/currency/convert',
        params={'amount': '5', 'source_currency': 'USD', 'target_currency': 'EUR'},
        headers=user_headers,
    )

    assert response.status_code == 400
    assert response.json() == {'detail': 'Amount must be greater than zero'}


# ============================================================================
# /historical
# ============================================================================

def test_historical_requires_admin(client, mock_currency_service, user_headers):
    response = client.get(
        '/api/v1/currency/historical',
        params={'base_currency': 'USD', 'start_date': '2020-01-01', 'end_date': '2020-01-05'},
        headers=user_headers,
    )

    assert response.status_code == 403
    mock_currency_service.get_historical_rates.assert_not_called()


def test_historical_success(client, mock_currency_service, admin_headers):
    response = client.get(
        '/api/v1/currency/historical',
        params={
            'base_currency': 'USD',
            'start_date': '2020-01-01',
            'end_date': '2020-01-05',
            'page': 1,
            'page_size': 2,
        },
        headers=admin_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data['total_count'] == 3
    assert data['total_pages'] == 2
    assert [item['date'] for item in data['items']] == ['2020-01-03', '2020-01-02']
    assert data['items'][0]['base_currency'] == 'USD'
    mock_currency_service.get_historical_rates.assert_called_once_with(
        HistoricalRatesRequest(
            base_currency='USD',
            start_date=date(2020, 1, 1),
            end_date=date(2020, 1, 5),
            page=1,
            page_size=2,
        )
    )


def test_historical_passes_unnormalized_paging_to_service(client, mock_currency_service, admin_headers):
    response = client.get(
        '/api/v1/currency/historical',
        params={
            'base_currency': 'USD',
            'start_date': '2020-01-01',
            'end_date': '2020-01-05',
            'page': -5,
            'page_size': 0,
        },
        headers=admin_headers,
    )

    assert response.status_code == 200
    request = mock_currency_service.get_historical_rates.call_args[0][0]
    assert request.page == -5
    assert request.page_size == 0


# ============================================================================
# Upstream failures
# ============================================================================

def test_upstream_unavailable_is_503(client, mock_currency_service, user_headers):
    mock_currency_service.get_latest_rates.side_effect = UpstreamUnavailableError('HTTP 503')

    response = client.get('/api/v1/currency/rates', params={'base_currency': 'USD'}, headers=user_headers)

    assert response.status_code == 503
    assert response.json() == {'detail': 'Exchange rate service unavailable'}


def test_open_circuit_is_503_with_retry_after(client, mock_currency_service, user_headers):
    mock_currency_service.get_latest_rates.side_effect = CircuitOpenError('frankfurter', 5, 42.5)

    response = client.get('/api/v1/currency/rates', params={'base_currency': 'USD'}, headers=user_headers)

    assert response.status_code == 503
    assert response.headers['Retry-After'] == '42'


def test_malformed_response_is_502(client, mock_currency_service, user_headers):
    mock_currency_service.get_latest_rates.side_effect = MalformedResponseError('bad payload')

    response = client.get('/api/v1/currency/rates', params={'base_currency': 'USD'}, headers=user_headers)

    assert response.status_code == 502


def test_upstream_rejection_is_400(client, mock_currency_service, user_headers):
    mock_currency_service.get_latest_rates.side_effect = UpstreamRequestError('not found', 404)

    response = client.get('/api/v1/currency/rates', params={'base_currency': 'XXX'}, headers=user_headers)

    assert response.status_code == 400


# ============================================================================
# /providers
# ============================================================================

def test_list_providers(client, user_headers):
    response = client.get('/api/v1/currency/providers', headers=user_headers)

    assert response.status_code == 200
    assert response.json() == {'providers': ['frankfurter'], 'default_provider': 'frankfurter'}
