import json
from typing import Any
from typing import List
from typing import Optional

from httpjson.options import DEFAULT_SERIALIZER_OPTIONS
from httpjson.options import JsonSerializerOptions
from httpjson.serializers.base import Serializer
from httpjson.serializers.naming import adapter
from httpjson.serializers.naming import match_property_names
from httpjson.serializers.naming import to_json_data

# Characters escaped on top of ensure_ascii when escaping is strict.
# None of them can occur outside a string literal in JSON output.
_HTML_ESCAPES = {
    "<": "\\u003C",
    ">": "\\u003E",
    "&": "\\u0026",
    "'": "\\u0027",
}


def strip_trailing_commas(text: str) -> str:
    """
    Drop commas that directly precede a closing ``]`` or ``}``.
    String literals are left untouched.
    """
    out: List[str] = []
    pending: Optional[int] = None
    last = ""
    in_string = escaped = False
    for ch in text:
        if in_string:
            out.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
            pending = None
        elif ch == ",":
            # "[," and ",," stay invalid
            pending = len(out) if last not in ("", "[", "{", ",") else None
        elif ch in "]}":
            if pending is not None:
                out[pending] = ""
            pending = None
        elif not ch.isspace():
            pending = None

        if not ch.isspace():
            last = ch
        out.append(ch)
    return "".join(out)


class JSONSerializer(Serializer):
    """
    JSON <-> bytes serializer. Parsing and encoding use the json module,
    typed conversion uses pydantic.
    """

    def serialize(
        self,
        obj: Any,
        type_: Any = None,
        options: Optional[JsonSerializerOptions] = None,
    ) -> bytes:
        opts = options or DEFAULT_SERIALIZER_OPTIONS
        data = to_json_data(obj, opts, type_)
        if opts.write_indented:
            text = json.dumps(
                data, ensure_ascii=not opts.relaxed_escaping, indent=2
            )
        else:
            text = json.dumps(
                data,
                ensure_ascii=not opts.relaxed_escaping,
                separators=(",", ":"),
            )
        if not opts.relaxed_escaping:
            for ch, escaped in _HTML_ESCAPES.items():
                text = text.replace(ch, escaped)
        # Uses utf-8 encoding
        return text.encode("utf-8")

    def deserialize(
        self,
        data: bytes,
        type_: Any = Any,
        options: Optional[JsonSerializerOptions] = None,
    ) -> Any:
        opts = options or DEFAULT_SERIALIZER_OPTIONS
        text = data.decode("utf-8-sig")
        if opts.allow_trailing_commas:
            text = strip_trailing_commas(text)

        # JSONDecodeError propagates as-is for empty or malformed input
        raw = json.loads(text)
        if type_ is Any:
            return raw
        return adapter(type_).validate_python(
            match_property_names(raw, type_, opts)
        )
