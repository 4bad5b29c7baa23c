from .config import HttpJsonConfig
from .content_type import JSON_CONTENT_TYPE
from .content_type import JSON_CONTENT_TYPE_WITH_CHARSET
from .content_type import MediaType
from .content_type import has_json_content_type
from .content_type import is_json_content_type
from .content_type import parse_media_type
from .errors import HttpJsonError
from .errors import OptionsReadOnlyError
from .errors import UnsupportedContentTypeError
from .options import DEFAULT_SERIALIZER_OPTIONS
from .options import JsonOptions
from .options import JsonSerializerOptions
from .options import NamingPolicy
from .options import options_from_request
from .options import resolve_options
from .request import read_from_json
from .response import json_response
from .response import json_response_for
from .response import write_as_json
from .response import write_as_json_without_charset

__all__ = [
    "HttpJsonConfig",
    "JSON_CONTENT_TYPE",
    "JSON_CONTENT_TYPE_WITH_CHARSET",
    "MediaType",
    "has_json_content_type",
    "is_json_content_type",
    "parse_media_type",
    "HttpJsonError",
    "OptionsReadOnlyError",
    "UnsupportedContentTypeError",
    "DEFAULT_SERIALIZER_OPTIONS",
    "JsonOptions",
    "JsonSerializerOptions",
    "NamingPolicy",
    "options_from_request",
    "resolve_options",
    "read_from_json",
    "json_response",
    "json_response_for",
    "write_as_json",
    "write_as_json_without_charset",
]
