"""Unit tests for core.weather (OpenWeatherMap client)."""
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from core.models import GeoCoordinate, WeatherObservation
from core.weather import WeatherUnavailable, current_conditions_at, fetch_current_conditions

_PARIS = GeoCoordinate(48.8566, 2.3522)

_PAYLOAD = {
    "weather": [{"id": 802, "main": "Clouds", "description": "scattered clouds", "icon": "03d"}],
    "main": {"temp": 18.4, "feels_like": 17.9, "temp_min": 16.0, "temp_max": 20.1,
             "pressure": 1016, "humidity": 60},
    "clouds": {"all": 40},
    "name": "Paris",
}


def _patch_httpx(payload=None, get_side_effect=None, status_error=None):
    """Patch httpx.AsyncClient in core.weather to return a canned response."""
    mock_response = MagicMock()
    mock_response.json.return_value = payload
    mock_response.raise_for_status = MagicMock(side_effect=status_error)

    mock_client = AsyncMock()
    if get_side_effect is not None:
        mock_client.get.side_effect = get_side_effect
    else:
        mock_client.get.return_value = mock_response
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)

    return patch("core.weather.httpx.AsyncClient", return_value=mock_client), mock_client


def _status_error(code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://api.openweathermap.org/data/2.5/weather")
    response = httpx.Response(code, request=request)
    return httpx.HTTPStatusError("boom", request=request, response=response)


# ---------------------------------------------------------------------------
# fetch_current_conditions
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_parses_payload_into_observation():
    patcher, _ = _patch_httpx(_PAYLOAD)
    with patcher:
        obs = await fetch_current_conditions(_PARIS, api_key="k")

    assert obs == WeatherObservation("Clouds", "scattered clouds", 40, 18.4, 17.9)


@pytest.mark.asyncio
async def test_sends_coordinates_key_and_metric_units():
    patcher, client = _patch_httpx(_PAYLOAD)
    with patcher:
        await fetch_current_conditions(_PARIS, api_key="secret")

    params = client.get.call_args.kwargs["params"]
    assert params == {"lat": 48.8566, "lon": 2.3522, "appid": "secret", "units": "metric"}


@pytest.mark.asyncio
async def test_uses_env_key_when_not_passed(monkeypatch):
    monkeypatch.setenv("OPENWEATHERMAP_API_KEY", "from-env")
    patcher, client = _patch_httpx(_PAYLOAD)
    with patcher:
        await fetch_current_conditions(_PARIS)

    assert client.get.call_args.kwargs["params"]["appid"] == "from-env"


@pytest.mark.asyncio
async def test_missing_key_raises_without_network(monkeypatch):
    monkeypatch.delenv("OPENWEATHERMAP_API_KEY", raising=False)
    patcher, client = _patch_httpx(_PAYLOAD)
    with patcher, pytest.raises(WeatherUnavailable) as exc_info:
        await fetch_current_conditions(_PARIS)

    assert exc_info.value.reason == "missing_api_key"
    client.get.assert_not_called()


@pytest.mark.asyncio
async def test_placeholder_key_is_treated_as_missing():
    with pytest.raises(WeatherUnavailable) as exc_info:
        await fetch_current_conditions(_PARIS, api_key="YOUR_DEFAULT_API_KEY_IF_NOT_FOUND")
    assert exc_info.value.reason == "missing_api_key"


@pytest.mark.asyncio
async def test_http_status_error_maps_to_http_error():
    patcher, _ = _patch_httpx(_PAYLOAD, status_error=_status_error(401))
    with patcher, pytest.raises(WeatherUnavailable) as exc_info:
        await fetch_current_conditions(_PARIS, api_key="k")

    assert exc_info.value.reason == "http_error"
    assert "401" in str(exc_info.value)


@pytest.mark.asyncio
async def test_transport_error_maps_to_connection_error():
    patcher, _ = _patch_httpx(get_side_effect=httpx.ConnectError("no route"))
    with patcher, pytest.raises(WeatherUnavailable) as exc_info:
        await fetch_current_conditions(_PARIS, api_key="k")

    assert exc_info.value.reason == "connection_error"


@pytest.mark.asyncio
async def test_empty_body_maps_to_bad_response():
    patcher, _ = _patch_httpx(None)
    with patcher, pytest.raises(WeatherUnavailable) as exc_info:
        await fetch_current_conditions(_PARIS, api_key="k")

    assert exc_info.value.reason == "bad_response"


@pytest.mark.asyncio
async def test_missing_clouds_maps_to_bad_response():
    payload = {k: v for k, v in _PAYLOAD.items() if k != "clouds"}
    patcher, _ = _patch_httpx(payload)
    with patcher, pytest.raises(WeatherUnavailable) as exc_info:
        await fetch_current_conditions(_PARIS, api_key="k")

    assert exc_info.value.reason == "bad_response"


@pytest.mark.asyncio
async def test_missing_weather_list_uses_defaults():
    payload = {**_PAYLOAD, "weather": []}
    patcher, _ = _patch_httpx(payload)
    with patcher:
        obs = await fetch_current_conditions(_PARIS, api_key="k")

    assert obs.main_condition == "Unknown"
    assert obs.description == "No description"


# ---------------------------------------------------------------------------
# current_conditions_at
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_current_conditions_returns_observation_on_success():
    patcher, _ = _patch_httpx(_PAYLOAD)
    with patcher:
        obs = await current_conditions_at(_PARIS, api_key="k")
    assert obs is not None
    assert obs.cloud_cover_percentage == 40


@pytest.mark.asyncio
async def test_current_conditions_collapses_failures_to_none(caplog):
    patcher, _ = _patch_httpx(_PAYLOAD, status_error=_status_error(503))
    with patcher:
        obs = await current_conditions_at(_PARIS, api_key="k")

    assert obs is None
    assert "Weather unavailable" in caplog.text


def test_weather_unavailable_message_carries_detail():
    exc = WeatherUnavailable("http_error", "status 500")
    assert exc.reason == "http_error"
    assert str(exc) == "http_error: status 500"
    assert str(WeatherUnavailable("missing_api_key")) == "missing_api_key"
