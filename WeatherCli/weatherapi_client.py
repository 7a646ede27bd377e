"""Thin client for the WeatherAPI.com history endpoint (https://www.weatherapi.com/docs/)."""
import requests

import weather_http

HISTORY_URL = "http://api.weatherapi.com/v1/history.json"


def get_historical_weather_data(
    location: str,
    date: str,
    api_key: str,
    timeout: float = weather_http.DEFAULT_TIMEOUT,
) -> requests.Response:
    """
    Fetch historical weather for a location in a single request.

    Args:
        location: Free-text query (city, postcode, "lat,lon", ...)
        date: Unix timestamp (UTC) as decimal text
        api_key: WeatherAPI.com API key
        timeout: HTTP request timeout in seconds

    Raises:
        UrlBuildError: If the request URL cannot be built
        RequestError: If the request fails
    """
    url = weather_http.build_url(
        HISTORY_URL,
        {"key": api_key, "q": location, "unixdt": date},
    )
    return weather_http.get(url, timeout=timeout)
