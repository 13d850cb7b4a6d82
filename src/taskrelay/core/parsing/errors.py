from __future__ import annotations


class OutputParserError(RuntimeError):
    """Base error for text-to-fields extraction."""


class ConfigMissingError(OutputParserError):
    pass


class NetworkError(OutputParserError):
    pass


class UpstreamError(OutputParserError):
    def __init__(self, status: int | None, body: str = "") -> None:
        super().__init__(f"Completion API error: {status} - {body}")
        self.status = status
        self.body = body


class EmptyResponseError(OutputParserError):
    pass


class ParseError(OutputParserError):
    def __init__(self, original_text: str) -> None:
        super().__init__(f"Failed to parse LLM response as JSON: {original_text}")
        self.original_text = original_text
