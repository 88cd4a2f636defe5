"""get - send HTTP requests described with compact command-line tokens."""

import json
import logging
import sys
from builtins import print as builtin_print
from pathlib import Path
from typing import Annotated

import httpx
import tyro
from rich import print
from rich.console import Console
from rich.markup import escape

from getcli.config import GetConfig, get_config
from getcli.errors import ClassificationError, GetError
from getcli.parser import ParsedRequest
from getcli.request_builder import RequestBuilder
from getcli.types import LogLevel

logger = logging.getLogger(__name__)


def setup_logging(level: LogLevel = "WARNING") -> None:
    """Configure logging with 100-character text width."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)-20s - %(levelname)-8s - %(message).100s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger().setLevel(level)


def load_config(config_path: Path | None) -> GetConfig:
    if config_path is not None:
        return GetConfig.from_file(config_path)
    return get_config()


def create_client(timeout: float) -> httpx.Client:
    return httpx.Client(timeout=timeout)


def default_method(builder: RequestBuilder) -> str:
    """POST when the request carries a body, GET otherwise."""
    return "POST" if builder.body is not None else "GET"


def print_request(request: httpx.Request) -> None:
    """Print a request the way it would go over the wire."""
    builtin_print(f"{request.method} {request.url.raw_path.decode('ascii')} HTTP/1.1")
    for name, value in request.headers.raw:
        builtin_print(f"{name.decode('ascii')}: {value.decode('ascii')}")
    builtin_print()
    if request.content:
        builtin_print(request.content.decode("utf-8"))


def print_response(response: httpx.Response) -> None:
    """Print the response status line, headers and body."""
    builtin_print(f"{response.http_version} {response.status_code} {response.reason_phrase}")
    for name, value in response.headers.raw:
        builtin_print(f"{name.decode('latin-1')}: {value.decode('latin-1')}")
    builtin_print()

    if not response.content:
        return

    if "json" in response.headers.get("content-type", ""):
        try:
            Console().print_json(response.text)
            return
        except json.JSONDecodeError:
            logger.debug("Response declared JSON but did not parse, printing as text")

    builtin_print(response.text)


def main(
    url: Annotated[str, tyro.conf.Positional],
    components: Annotated[list[str] | None, tyro.conf.Positional] = None,
    *,
    method: Annotated[str | None, tyro.conf.arg(aliases=["-m"])] = None,
    data: Annotated[str | None, tyro.conf.arg(aliases=["-d"])] = None,
    config: Annotated[Path | None, tyro.conf.arg(help="Path to the config file")] = None,
    offline: bool = False,
    verbose: Annotated[bool, tyro.conf.arg(aliases=["-v"])] = False,
    timeout: float | None = None,
) -> None:
    """get - HTTP requests from the command line.

    Components are written as flat tokens: key==value adds a query
    parameter, Name:value adds a header, path=value sets a string in the
    JSON body and path:=json sets a raw JSON value. Paths nest with
    brackets and dots, e.g. user[tags][]=admin or user.age:=42.

    Args:
        url: Request URL, e.g. example.com/users, :8080/health or https://example.com.
        components: Query parameters, headers and body fragments.
        method: HTTP method (default: POST with a body, GET otherwise).
        data: Raw request body; cannot be combined with body fragments.
        config: Path to the config file.
        offline: Print the request instead of sending it.
        verbose: Enable debug logging.
        timeout: Request timeout in seconds (default from config).
    """
    setup_logging("DEBUG" if verbose else "WARNING")

    try:
        settings = load_config(config)
        if not verbose:
            logging.getLogger().setLevel(settings.log_level)

        parsed = ParsedRequest.from_inputs(components or [])
        builder = (
            RequestBuilder.from_input(url, settings)
            .add_query(parsed.query)
            .merge_headers(parsed.headers)
            .add_data(parsed.body, data)
        )
        request_method = method or default_method(builder)

        if offline:
            print_request(builder.build_request(request_method))
            return

        with create_client(timeout if timeout is not None else settings.timeout) as client:
            response = builder.send(request_method, client)

    except ClassificationError as e:
        print(f"[red]Error:[/red] {escape(str(e))}: {escape(repr(e.token))}", file=sys.stderr)
        sys.exit(1)
    except GetError as e:
        print(f"[red]Error:[/red] {escape(str(e))}", file=sys.stderr)
        sys.exit(1)
    except httpx.HTTPError as e:
        print(f"[red]Error:[/red] Request failed: {escape(str(e))}", file=sys.stderr)
        sys.exit(1)

    print_response(response)


def entry_point() -> None:
    """Entry point for the get command."""
    tyro.cli(main)


if __name__ == "__main__":
    entry_point()
