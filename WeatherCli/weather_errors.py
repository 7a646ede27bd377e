"""Error types raised by the weather CLI."""


class WeatherError(Exception):
    """Base class for every failure the CLI reports to the user."""
    pass


class UrlBuildError(WeatherError):
    """Query parameters could not be encoded into a request URL."""
    pass


class RequestError(WeatherError):
    """The HTTP request failed at the transport level (DNS, connect, timeout)."""
    pass


class ResponseReadError(WeatherError):
    """The response body could not be decoded or understood."""
    pass


class NoCoordinatesFound(WeatherError):
    """Geocoding returned no matches for the address."""
    pass


class ConfigLoadError(WeatherError):
    pass


class ConfigStoreError(WeatherError):
    pass


class DateFormatError(WeatherError):
    """Date argument is not a valid yyyy-MM-dd calendar date."""
    pass


class StdinReadError(WeatherError):
    pass
