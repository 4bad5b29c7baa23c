from typing import Optional


class HttpJsonError(Exception):
    """Base class for errors raised by httpjson."""


class UnsupportedContentTypeError(HttpJsonError):
    """
    The request declares a content type that is not a JSON media type.
    Raised before the request body is read.
    """

    def __init__(self, content_type: Optional[str]) -> None:
        self.content_type = content_type
        super().__init__(
            "Unable to read the request as JSON because the request content "
            f"type '{content_type or ''}' is not a known JSON content type."
        )


class OptionsReadOnlyError(HttpJsonError):
    """Raised when a read-only JsonSerializerOptions is modified."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(
            f"Cannot set '{field}': serializer options are read-only. "
            "Use clone() to get a modifiable copy."
        )
