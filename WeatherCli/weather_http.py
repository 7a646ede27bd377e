"""Blocking HTTP helpers shared by the provider clients."""
import logging
from typing import Mapping

import requests

from weather_errors import RequestError, ResponseReadError, UrlBuildError

DEFAULT_TIMEOUT = 10.0


def build_url(base_url: str, params: Mapping[str, str]) -> str:
    """
    Encode query parameters onto a base URL.

    Args:
        base_url: Endpoint without a query string
        params: Query parameters, in the order they should appear

    Returns:
        str: Fully encoded URL

    Raises:
        UrlBuildError: If the URL or a parameter cannot be encoded
    """
    try:
        return requests.Request("GET", base_url, params=dict(params)).prepare().url
    except (requests.exceptions.RequestException, ValueError, TypeError) as e:
        # Message lists parameter names, not values.
        raise UrlBuildError(
            f"Failed to build URL from parameters {sorted(params)}: {e}"
        ) from e


def get(url: str, timeout: float = DEFAULT_TIMEOUT) -> requests.Response:
    """
    Issue a GET request and return the response as-is.

    Non-success status codes are not errors here; the body the server sent is
    returned so the caller can show it.

    Raises:
        RequestError: On transport failures (DNS, connection, timeout)
    """
    endpoint = url.split("?", 1)[0]
    logging.info(f"Making request: {endpoint}")
    try:
        response = requests.get(url, timeout=timeout)
    except requests.exceptions.RequestException as e:
        # Exception text embeds the full URL, query string included.
        logging.error(f"Network error during request to {endpoint}: {type(e).__name__}")
        raise RequestError(
            f"Failed to execute a request to {endpoint}: {type(e).__name__}"
        ) from None

    logging.info(f"Response status: {response.status_code}")
    if not response.ok:
        logging.warning(f"Upstream returned HTTP {response.status_code}, passing body through")
    return response


def read_text(response: requests.Response) -> str:
    """Decode the response body strictly, using the declared charset or UTF-8."""
    encoding = response.encoding or "utf-8"
    try:
        return response.content.decode(encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise ResponseReadError(f"Failed to decode response body as {encoding}: {e}") from e
