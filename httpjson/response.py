import asyncio
from typing import Any
from typing import Awaitable
from typing import Optional

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import Response

from httpjson.cancellation import run_cancellable
from httpjson.content_type import JSON_CONTENT_TYPE
from httpjson.content_type import JSON_CONTENT_TYPE_WITH_CHARSET
from httpjson.log_config import logger
from httpjson.options import JsonSerializerOptions
from httpjson.options import options_from_request
from httpjson.options import resolve_options
from httpjson.serializers.json_serializer import JSONSerializer

_serializer = JSONSerializer()


def write_as_json(
    response: Response,
    value: Any,
    type_: Any = None,
    options: Optional[JsonSerializerOptions] = None,
    content_type: Optional[str] = JSON_CONTENT_TYPE_WITH_CHARSET,
    *,
    cancel_event: Optional[asyncio.Event] = None,
) -> Awaitable[None]:
    """
    Write ``value`` as the JSON body of ``response``.

    Sets the content type (unless ``content_type`` is None) and a 200
    status before the body is written. ``type_`` defaults to the runtime
    type of ``value``.
    """
    if response is None:
        raise ValueError("response must not be None")
    return _write_as_json(
        response, value, type_, options, content_type, cancel_event
    )


def write_as_json_without_charset(
    response: Response,
    value: Any,
    type_: Any = None,
    options: Optional[JsonSerializerOptions] = None,
    content_type: Optional[str] = JSON_CONTENT_TYPE,
    *,
    cancel_event: Optional[asyncio.Event] = None,
) -> Awaitable[None]:
    """Like write_as_json, but defaults to a bare ``application/json``."""
    return write_as_json(
        response,
        value,
        type_,
        options,
        content_type,
        cancel_event=cancel_event,
    )


async def _write_as_json(
    response: Response,
    value: Any,
    type_: Any,
    options: Optional[JsonSerializerOptions],
    content_type: Optional[str],
    cancel_event: Optional[asyncio.Event],
) -> None:
    resolved = resolve_options(options)

    if content_type is not None:
        response.media_type = content_type
        response.headers["content-type"] = content_type
    response.status_code = 200

    async def _write() -> None:
        body = await run_in_threadpool(
            _serializer.serialize, value, type_, resolved
        )
        response.body = body
        response.headers["content-length"] = str(len(body))
        logger.debug(
            "Wrote %d bytes of JSON to response body",
            len(body),
            extra={"json_bytes": len(body)},
        )

    await run_cancellable(_write(), cancel_event)


async def json_response(
    value: Any,
    type_: Any = None,
    options: Optional[JsonSerializerOptions] = None,
    content_type: Optional[str] = JSON_CONTENT_TYPE_WITH_CHARSET,
) -> Response:
    """Build a new Response carrying ``value`` as JSON."""
    response = Response()
    await write_as_json(response, value, type_, options, content_type)
    return response


async def json_response_for(
    request: Request,
    value: Any,
    type_: Any = None,
    options: Optional[JsonSerializerOptions] = None,
    content_type: Optional[str] = JSON_CONTENT_TYPE_WITH_CHARSET,
) -> Response:
    """
    Like json_response, but falls back to the options attached to
    ``request`` (request-scoped, then application-wide) before the
    defaults.
    """
    resolved = resolve_options(options, lambda: options_from_request(request))
    return await json_response(value, type_, resolved, content_type)
