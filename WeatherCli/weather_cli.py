"""
Command-line tool that shows weather for an address.

Supports several weather providers; the API key for each one is stored
locally and one provider is selected as the default for `get`. Date ranges,
accepted addresses, response format and errors depend on the provider, see
each provider's API documentation.
"""
import argparse
import logging
import os
import re
import sys
from datetime import datetime, timezone
from typing import IO, List, Optional

from dotenv import load_dotenv

import weather_http
from weather_config import Settings, load_settings, store_settings
from weather_errors import DateFormatError, StdinReadError, WeatherError
from weather_provider import Provider

DATE_FORMAT = "%Y-%m-%d"
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

NO_PROVIDER_MESSAGE = "No selected provider. Please select a provider using the 'set' command"
NO_CREDENTIALS_MESSAGE = (
    "Credentials for the provider {provider} are not configured. "
    "Configure credentials using the 'configure' command"
)


def positive_float(value: str) -> float:
    """argparse type for timeouts: a finite number of seconds above zero."""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not a number") from None
    if not 0 < number < float("inf"):
        raise argparse.ArgumentTypeError(f"{value!r} must be greater than 0")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="weather", description="Command-line tool for showing weather"
    )
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument(
        "--timeout",
        type=positive_float,
        help=f"HTTP timeout in seconds (default: $WEATHER_HTTP_TIMEOUT or {weather_http.DEFAULT_TIMEOUT:g})",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    configure = subparsers.add_parser(
        "configure", help="Configure credentials for a provider (API key is read from stdin)"
    )
    configure.add_argument("provider", choices=Provider.names())

    get = subparsers.add_parser("get", help="Show weather for an address")
    get.add_argument("address")
    get.add_argument("date", nargs="?", help="yyyy-MM-dd format, defaults to now")

    set_ = subparsers.add_parser("set", help="Set a current provider")
    set_.add_argument("provider", choices=Provider.names())

    subparsers.add_parser("provider", help="Return current provider")
    return parser


def setup_logging(verbose: bool, log_file: Optional[str] = None) -> None:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def parse_date(value: str) -> int:
    """
    Convert a yyyy-MM-dd date to the Unix timestamp of midnight UTC.

    Raises:
        DateFormatError: If the value is not a valid date in that format
    """
    try:
        if not DATE_PATTERN.match(value):
            raise ValueError(f"{value!r} does not match yyyy-MM-dd")
        date = datetime.strptime(value, DATE_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError as e:
        raise DateFormatError(
            "Date in the wrong format. It has to be in yyyy-MM-dd format and has proper values"
        ) from e
    return int(date.timestamp())


def current_timestamp() -> int:
    return int(datetime.now(timezone.utc).timestamp())


def read_api_key(stdin: IO[str]) -> str:
    """Read a single line holding the API key, without its line ending."""
    try:
        line = stdin.readline()
    except (OSError, UnicodeDecodeError) as e:
        raise StdinReadError(f"Failed to read API key: {e}") from e
    key = line.rstrip("\r\n")
    if not key:
        raise StdinReadError("Failed to read API key: no key was entered")
    return key


def cmd_configure(settings: Settings, provider: Provider, stdin: IO[str], out: IO[str]) -> None:
    api_key = read_api_key(stdin)
    settings.set_api_key(provider, api_key)
    store_settings(settings)
    logging.info(f"Stored API key for {provider}")
    print("Credentials have been configured successfully", file=out)


def cmd_get(settings: Settings, address: str, date: int, timeout: float, out: IO[str]) -> None:
    selected = settings.get_selected_provider_api_key()
    if selected is None:
        print(NO_PROVIDER_MESSAGE, file=out)
        return

    provider, api_key = selected
    if api_key is None:
        print(NO_CREDENTIALS_MESSAGE.format(provider=provider), file=out)
        return

    print(provider.get_weather(api_key, address, str(date), timeout=timeout), file=out)


def cmd_set(settings: Settings, provider: Provider, out: IO[str]) -> None:
    settings.set_selected_provider(provider)
    store_settings(settings)
    logging.info(f"Selected provider {provider}")
    print("Provider has been selected successfully", file=out)


def cmd_provider(settings: Settings, out: IO[str]) -> None:
    provider = settings.get_selected_provider()
    if provider is None:
        print("No selected provider. Select a provider using the 'set' command", file=out)
    else:
        print(provider, file=out)


def format_error(error: BaseException) -> str:
    """Render an error and its chained causes, outermost first."""
    lines = [f"Error: {error}"]
    cause = error.__cause__
    if cause is not None:
        lines.extend(["", "Caused by:"])
    while cause is not None:
        lines.append(f"    {cause}")
        cause = cause.__cause__
    return "\n".join(lines)


def run(
    argv: Optional[List[str]] = None,
    stdin: Optional[IO[str]] = None,
    stdout: Optional[IO[str]] = None,
    stderr: Optional[IO[str]] = None,
) -> int:
    """Run one command and return the process exit code."""
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout
    stderr = sys.stderr if stderr is None else stderr

    parser = build_parser()
    args = parser.parse_args(argv)
    if args.timeout is None:
        env_timeout = os.getenv("WEATHER_HTTP_TIMEOUT")
        try:
            args.timeout = positive_float(env_timeout) if env_timeout else weather_http.DEFAULT_TIMEOUT
        except argparse.ArgumentTypeError as e:
            parser.error(f"invalid WEATHER_HTTP_TIMEOUT: {e}")

    try:
        setup_logging(args.verbose, args.log_file)
    except OSError as e:
        parser.error(f"cannot open log file {args.log_file}: {e}")

    try:
        # Date is parsed before settings are loaded.
        date = None
        if args.command == "get":
            date = parse_date(args.date) if args.date else current_timestamp()

        settings = load_settings()

        if args.command == "configure":
            cmd_configure(settings, Provider.from_name(args.provider), stdin, stdout)
        elif args.command == "get":
            cmd_get(settings, args.address, date, args.timeout, stdout)
        elif args.command == "set":
            cmd_set(settings, Provider.from_name(args.provider), stdout)
        elif args.command == "provider":
            cmd_provider(settings, stdout)
    except WeatherError as e:
        logging.debug("Command failed", exc_info=True)
        print(format_error(e), file=stderr)
        return 1
    return 0


def main() -> None:
    load_dotenv()
    sys.exit(run())


if __name__ == "__main__":
    main()
