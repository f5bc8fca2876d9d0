# nosec B101


from unittest.mock import AsyncMock, Mock

import pytest

from config.settings import Settings
from domain.exceptions.currency import UnsupportedProviderError
from infrastructure.providers import FrankfurterProvider, ProviderName, ProviderSelector


@pytest.fixture
def frankfurter():
    provider = Mock()
    provider.name = 'frankfurter'
    provider.close = AsyncMock()
    return provider


@pytest.fixture
def selector(frankfurter):
    return ProviderSelector({'frankfurter': frankfurter}, default_provider='frankfurter')


def test_empty_name_resolves_to_default(selector, frankfurter):
    assert selector.get_provider() is frankfurter
    assert selector.get_provider(None) is frankfurter
    assert selector.get_provider('') is frankfurter


def test_lookup_is_case_insensitive(selector, frankfurter):
    assert selector.get_provider('Frankfurter') is frankfurter
    assert selector.get_provider('FRANKFURTER') is frankfurter


def test_unknown_provider_raises(selector):
    with pytest.raises(UnsupportedProviderError) as exc_info:
        selector.get_provider('fixerio')

    assert "'fixerio' is not supported" in str(exc_info.value)
    assert exc_info.value.provider_name == 'fixerio'


def test_unknown_default_provider_is_rejected(frankfurter):
    with pytest.raises(UnsupportedProviderError):
        ProviderSelector({'frankfurter': frankfurter}, default_provider='openexchange')


def test_list_providers(selector):
    assert selector.list_providers() == {'frankfurter'}


def test_same_instance_returned_on_every_lookup(selector):
    assert selector.get_provider() is selector.get_provider('frankfurter')


def test_from_settings_builds_registered_providers():
    settings = Settings(
        FRANKFURTER_BASE_URL='https://rates.example.com/',
        CIRCUIT_FAILURE_THRESHOLD=7,
        CIRCUIT_RECOVERY_TIMEOUT=30,
    )

    selector = ProviderSelector.from_settings(settings)
    provider = selector.get_provider()

    assert isinstance(provider, FrankfurterProvider)
    assert provider.base_url == 'https://rates.example.com'
    assert provider.circuit_breaker.failure_threshold == 7
    assert provider.circuit_breaker.recovery_timeout == 30
    assert selector.list_providers() == {ProviderName.FRANKFURTER.value}


def test_from_settings_accepts_custom_registry(frankfurter):
    registry = {ProviderName.FRANKFURTER: lambda settings: frankfurter}

    selector = ProviderSelector.from_settings(Settings(), registry=registry)

    assert selector.get_provider() is frankfurter


@pytest.mark.asyncio
async def test_close_closes_every_provider(selector, frankfurter):
    await selector.close()

    frankfurter.close.assert_awaited_once()
