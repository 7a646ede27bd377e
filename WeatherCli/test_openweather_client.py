"""Tests for the OpenWeatherMap client."""
import json
import pytest
import requests
from unittest.mock import patch

import openweather_client
from openweather_client import GeoCoordinates
from weather_errors import RequestError, ResponseReadError


@pytest.fixture
def sample_geocoding_response():
    """Sample Geocoding API response with two matches."""
    return json.dumps([
        {
            "name": "London",
            "local_names": {"en": "London"},
            "lat": 51.5073219,
            "lon": -0.1276474,
            "country": "GB",
            "state": "England"
        },
        {
            "name": "London",
            "lat": 42.9832406,
            "lon": -81.243372,
            "country": "CA",
            "state": "Ontario"
        }
    ])


def test_get_coordinates_success(sample_geocoding_response, make_response):
    with patch('weather_http.requests.get') as mock_get:
        mock_get.return_value = make_response(sample_geocoding_response)

        coordinates = openweather_client.get_coordinates_by_location("London", "test_key", limit=2)

        assert coordinates == [
            GeoCoordinates(latitude=51.5073219, longitude=-0.1276474),
            GeoCoordinates(latitude=42.9832406, longitude=-81.243372),
        ]
        url = mock_get.call_args[0][0]
        assert url == (
            "http://api.openweathermap.org/geo/1.0/direct?q=London&appid=test_key&limit=2"
        )


def test_get_coordinates_no_matches(make_response):
    with patch('weather_http.requests.get') as mock_get:
        mock_get.return_value = make_response("[]")

        assert openweather_client.get_coordinates_by_location("Nowhere", "test_key") == []


def test_get_coordinates_error_payload(make_response):
    """An error object instead of a list is reported with the body."""
    body = '{"cod": 401, "message": "Invalid API key."}'
    with patch('weather_http.requests.get') as mock_get:
        mock_get.return_value = make_response(body, status_code=401)

        with pytest.raises(ResponseReadError) as exc_info:
            openweather_client.get_coordinates_by_location("London", "bad_key")

        assert "Invalid API key." in str(exc_info.value)


def test_get_coordinates_not_json(make_response):
    with patch('weather_http.requests.get') as mock_get:
        mock_get.return_value = make_response("<html>Bad Gateway</html>", status_code=502)

        with pytest.raises(ResponseReadError):
            openweather_client.get_coordinates_by_location("London", "test_key")


def test_get_coordinates_network_error():
    with patch('weather_http.requests.get') as mock_get:
        mock_get.side_effect = requests.exceptions.ConnectionError("DNS failure")

        with pytest.raises(RequestError):
            openweather_client.get_coordinates_by_location("London", "test_key")


@pytest.mark.parametrize("limit", [0, 6, -1])
def test_get_coordinates_limit_out_of_range(limit):
    with patch('weather_http.requests.get') as mock_get:
        with pytest.raises(ValueError):
            openweather_client.get_coordinates_by_location("London", "test_key", limit=limit)

        mock_get.assert_not_called()


def test_parse_coordinates_missing_lon():
    with pytest.raises(ResponseReadError):
        openweather_client.parse_coordinates('[{"lat": 1.0}]')


def test_geo_coordinates_as_params():
    assert GeoCoordinates(51.5073219, -0.1276474).as_params() == ("51.5073219", "-0.1276474")


def test_get_historical_weather_data_url(make_response):
    with patch('weather_http.requests.get') as mock_get:
        mock_get.return_value = make_response('{"data": []}')

        response = openweather_client.get_historical_weather_data(
            ("39.099724", "-94.57833"), "1586468027", "test_key", timeout=5
        )

        assert response is mock_get.return_value
        mock_get.assert_called_once_with(
            "https://api.openweathermap.org/data/3.0/onecall/timemachine"
            "?lat=39.099724&lon=-94.57833&dt=1586468027&appid=test_key",
            timeout=5,
        )


def test_get_historical_weather_data_passes_error_status(make_response):
    with patch('weather_http.requests.get') as mock_get:
        mock_get.return_value = make_response('{"cod": 401}', status_code=401)

        response = openweather_client.get_historical_weather_data(
            ("1.0", "2.0"), "0", "bad_key"
        )

        assert response.status_code == 401
