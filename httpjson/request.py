import asyncio
from typing import Any
from typing import Awaitable
from typing import Optional

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request

from httpjson.cancellation import run_cancellable
from httpjson.content_type import has_json_content_type
from httpjson.errors import UnsupportedContentTypeError
from httpjson.log_config import logger
from httpjson.options import JsonSerializerOptions
from httpjson.options import options_from_request
from httpjson.options import resolve_options
from httpjson.serializers.json_serializer import JSONSerializer

_serializer = JSONSerializer()


def read_from_json(
    request: Request,
    type_: Any = Any,
    options: Optional[JsonSerializerOptions] = None,
    *,
    cancel_event: Optional[asyncio.Event] = None,
) -> Awaitable[Any]:
    """
    Read the request body as JSON into a value of ``type_``.

    Arguments are checked when this is called, not when the result is
    awaited. The content type is checked before the body is read; a
    non-JSON content type raises UnsupportedContentTypeError. Parse and
    validation errors from the serializer propagate unchanged.
    """
    if request is None:
        raise ValueError("request must not be None")
    if type_ is None:
        raise ValueError("type_ must not be None")
    return _read_from_json(request, type_, options, cancel_event)


async def _read_from_json(
    request: Request,
    type_: Any,
    options: Optional[JsonSerializerOptions],
    cancel_event: Optional[asyncio.Event],
) -> Any:
    if not has_json_content_type(request):
        content_type = request.headers.get("content-type")
        logger.debug(
            "Rejected non-JSON content type %r",
            content_type,
            extra={"content_type": content_type},
        )
        raise UnsupportedContentTypeError(content_type)

    resolved = resolve_options(options, lambda: options_from_request(request))

    async def _read() -> Any:
        chunks = [chunk async for chunk in request.stream()]
        body = b"".join(chunks)
        logger.debug(
            "Read %d bytes of JSON from request body",
            len(body),
            extra={"json_bytes": len(body)},
        )
        return await run_in_threadpool(
            _serializer.deserialize, body, type_, resolved
        )

    return await run_cancellable(_read(), cancel_event)
