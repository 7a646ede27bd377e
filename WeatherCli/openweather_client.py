"""
Thin client for the OpenWeatherMap APIs.

Historical data comes from One Call API 3.0 (https://openweathermap.org/api/one-call-3),
which only accepts coordinates, so addresses are first resolved through the
Geocoding API (https://openweathermap.org/api/geocoding-api).
"""
import json
import logging
from dataclasses import dataclass
from typing import List, Tuple

import requests

import weather_http
from weather_errors import ResponseReadError

GEOCODING_URL = "http://api.openweathermap.org/geo/1.0/direct"
ONE_CALL_URL = "https://api.openweathermap.org/data/3.0/onecall/timemachine"

MAX_GEOCODING_LIMIT = 5


@dataclass(frozen=True)
class GeoCoordinates:
    """A single geocoding match."""
    latitude: float
    longitude: float

    def as_params(self) -> Tuple[str, str]:
        """Latitude and longitude as decimal strings."""
        return str(self.latitude), str(self.longitude)


def get_coordinates_by_location(
    location: str,
    api_key: str,
    limit: int = 1,
    timeout: float = weather_http.DEFAULT_TIMEOUT,
) -> List[GeoCoordinates]:
    """
    Look up coordinates for a location.

    Args:
        location: City name, state code (US only) and ISO 3166 country code
            separated by commas, e.g. "London,GB"
        api_key: OpenWeatherMap API key
        limit: Number of matches to ask for (1 to 5)
        timeout: HTTP request timeout in seconds

    Returns:
        List[GeoCoordinates]: Matches in the order the API returned them;
            empty if the location is unknown

    Raises:
        UrlBuildError: If the request URL cannot be built
        RequestError: If the request fails
        ResponseReadError: If the body is not a list of coordinates
    """
    if not 1 <= limit <= MAX_GEOCODING_LIMIT:
        raise ValueError(f"limit must be between 1 and {MAX_GEOCODING_LIMIT}, got {limit}")

    url = weather_http.build_url(
        GEOCODING_URL,
        {"q": location, "appid": api_key, "limit": str(limit)},
    )
    response = weather_http.get(url, timeout=timeout)
    body = weather_http.read_text(response)
    coordinates = parse_coordinates(body)
    logging.debug(f"Geocoding returned {len(coordinates)} match(es) for {location!r}")
    return coordinates


def parse_coordinates(body: str) -> List[GeoCoordinates]:
    """Parse a Geocoding API body into coordinates, keeping upstream order."""
    try:
        data = json.loads(body)
        if not isinstance(data, list):
            raise TypeError(f"expected a JSON array, got {type(data).__name__}")
        return [
            GeoCoordinates(latitude=float(item["lat"]), longitude=float(item["lon"]))
            for item in data
        ]
    except (ValueError, KeyError, TypeError) as e:
        raise ResponseReadError(f"Unexpected geocoding response ({e}). Response: {body}") from e


def get_historical_weather_data(
    coordinates: Tuple[str, str],
    date: str,
    api_key: str,
    timeout: float = weather_http.DEFAULT_TIMEOUT,
) -> requests.Response:
    """
    Fetch historical weather for a point.

    Args:
        coordinates: (latitude, longitude) as decimal strings
        date: Unix timestamp (UTC) as decimal text; data starts at 1979-01-01
        api_key: OpenWeatherMap API key
        timeout: HTTP request timeout in seconds

    Returns:
        requests.Response: The raw response, whatever its status code

    Raises:
        UrlBuildError: If the request URL cannot be built
        RequestError: If the request fails
    """
    lat, lon = coordinates
    url = weather_http.build_url(
        ONE_CALL_URL,
        {"lat": lat, "lon": lon, "dt": date, "appid": api_key},
    )
    return weather_http.get(url, timeout=timeout)
