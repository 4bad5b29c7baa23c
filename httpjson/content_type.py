import re
from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import Dict
from typing import Optional

JSON_CONTENT_TYPE = "application/json"
JSON_CONTENT_TYPE_WITH_CHARSET = "application/json; charset=utf-8"

# RFC 7230 token and quoted-string
_TOKEN = r"[!#$%&'*+.^_`|~0-9A-Za-z-]+"
_QUOTED = r'"(?:[^"\\]|\\.)*"'
_PARAMETER = rf"({_TOKEN})(?:=({_TOKEN}|{_QUOTED}))?"

# Every run of whitespace has exactly one place it can match, so a
# failed match backtracks in linear time.
_MEDIA_TYPE_RE = re.compile(
    rf"^[ \t]*({_TOKEN})/({_TOKEN})[ \t]*"
    rf"((?:;[ \t]*(?:{_PARAMETER}[ \t]*)?)*)$"
)
_PARAMETER_RE = re.compile(_PARAMETER)
_QUOTED_PAIR_RE = re.compile(r"\\(.)")


@dataclass(frozen=True)
class MediaType:
    """
    A parsed ``type/subtype; name=value`` media-type expression.
    """

    type: str
    subtype: str
    parameters: Dict[str, str] = field(default_factory=dict)

    @property
    def media_type(self) -> str:
        return f"{self.type}/{self.subtype}"

    @property
    def suffix(self) -> Optional[str]:
        """Structured syntax suffix, e.g. ``json`` for ``ld+json``."""
        _, plus, suffix = self.subtype.rpartition("+")
        return suffix if plus else None


def parse_media_type(value: Optional[str]) -> Optional[MediaType]:
    """
    Parse a Content-Type header value. Returns None when the value is
    missing or is not a valid media-type expression.
    """
    if not value:
        return None
    match = _MEDIA_TYPE_RE.match(value)
    if match is None:
        return None

    parameters: Dict[str, str] = {}
    for name, raw in _PARAMETER_RE.findall(match.group(3)):
        if raw.startswith('"'):
            raw = _QUOTED_PAIR_RE.sub(r"\1", raw[1:-1])
        parameters[name.lower()] = raw
    return MediaType(match.group(1), match.group(2), parameters)


def is_json_content_type(value: Optional[str]) -> bool:
    """
    True for ``application/json`` and any ``+json`` suffixed media type.
    ``text/json`` is not accepted.
    """
    mt = parse_media_type(value)
    if mt is None:
        return False

    # Matches application/json
    if mt.media_type.lower() == JSON_CONTENT_TYPE:
        return True

    # Matches +json, e.g. application/ld+json
    suffix = mt.suffix
    return suffix is not None and suffix.lower() == "json"


def has_json_content_type(request: Any) -> bool:
    """Apply is_json_content_type to a request's Content-Type header."""
    if request is None:
        raise ValueError("request must not be None")
    return is_json_content_type(request.headers.get("content-type"))
