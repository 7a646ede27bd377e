"""Supported weather providers and the single place requests are routed to them."""
import logging
from enum import Enum

import openweather_client
import weather_http
import weatherapi_client
from weather_errors import NoCoordinatesFound, WeatherError


def _with_context(error: WeatherError, message: str) -> WeatherError:
    """Same error type carrying an extra layer of context."""
    return type(error)(message)


class Provider(Enum):
    """Weather providers. The value is the name used on the command line and in settings."""

    OPEN_WEATHER = "open-weather"
    WEATHER_API = "weather-api"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def names(cls):
        return [provider.value for provider in cls]

    @classmethod
    def from_name(cls, name: str) -> "Provider":
        try:
            return cls(name)
        except ValueError:
            raise ValueError(
                f"Unknown provider {name!r}, expected one of: {', '.join(cls.names())}"
            ) from None

    def get_weather(
        self,
        api_key: str,
        address: str,
        date: str,
        timeout: float = weather_http.DEFAULT_TIMEOUT,
    ) -> str:
        """
        Fetch weather for an address on a date.

        Args:
            api_key: API key for this provider
            address: Free-text address
            date: Unix timestamp (UTC) as decimal text
            timeout: HTTP request timeout in seconds

        Returns:
            str: Response body exactly as the provider sent it

        Raises:
            WeatherError: Any failure, with context for the step that failed
        """
        logging.info(f"Getting weather from {self} for {address!r} at {date}")
        if self is Provider.OPEN_WEATHER:
            return _get_open_weather(api_key, address, date, timeout)
        elif self is Provider.WEATHER_API:
            return _get_weather_api(api_key, address, date, timeout)
        raise AssertionError(f"Unhandled provider: {self!r}")


def _get_open_weather(api_key: str, address: str, date: str, timeout: float) -> str:
    try:
        matches = openweather_client.get_coordinates_by_location(
            address, api_key, limit=1, timeout=timeout
        )
    except WeatherError as e:
        raise _with_context(e, f"Failed to get coordinates for {address}") from e

    if not matches:
        raise NoCoordinatesFound(
            "No coordinates for specified address. Probably, specified location is wrong"
        )
    # First match wins.
    coordinates = matches[0]
    logging.debug(f"Using coordinates lat={coordinates.latitude} lon={coordinates.longitude}")

    try:
        response = openweather_client.get_historical_weather_data(
            coordinates.as_params(), date, api_key, timeout=timeout
        )
        return weather_http.read_text(response)
    except WeatherError as e:
        raise _with_context(e, "Failed to get weather") from e


def _get_weather_api(api_key: str, address: str, date: str, timeout: float) -> str:
    try:
        response = weatherapi_client.get_historical_weather_data(
            address, date, api_key, timeout=timeout
        )
        return weather_http.read_text(response)
    except WeatherError as e:
        raise _with_context(e, "Failed to get weather") from e
