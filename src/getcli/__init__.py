"""getcli - HTTP requests from compact command-line tokens."""

from getcli.config import GetConfig, get_config
from getcli.errors import GetError
from getcli.json_builder import build, put_value
from getcli.parser import ParsedRequest, parse_component
from getcli.request_builder import RequestBuilder

__version__ = "0.1.0"
__all__ = [
    "GetConfig",
    "GetError",
    "ParsedRequest",
    "RequestBuilder",
    "build",
    "get_config",
    "parse_component",
    "put_value",
]
