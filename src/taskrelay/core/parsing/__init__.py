from .errors import ConfigMissingError, EmptyResponseError, NetworkError, OutputParserError, ParseError, UpstreamError
from .parser import OutputParser, parse_completion, strip_code_fence
from .schemas import ParsedField

__all__ = [
    "OutputParser",
    "ParsedField",
    "parse_completion",
    "strip_code_fence",
    "OutputParserError",
    "ConfigMissingError",
    "NetworkError",
    "UpstreamError",
    "EmptyResponseError",
    "ParseError",
]
