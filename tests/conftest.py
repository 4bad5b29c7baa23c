import asyncio
from typing import List
from typing import Optional

import pytest
from fastapi import Depends
from fastapi import FastAPI
from fastapi import Response
from pydantic import BaseModel
from starlette.requests import Request

from httpjson.config import HttpJsonConfig
from httpjson.fastapi_utils import add_exception_handlers
from httpjson.fastapi_utils import get_json_options
from httpjson.fastapi_utils import json_body
from httpjson.fastapi_utils import lifespan_manager
from httpjson.options import JsonOptions
from httpjson.request import read_from_json
from httpjson.response import json_response_for


class Person(BaseModel):
    first_name: str
    last_name: Optional[str] = None


def _scope(content_type, app=None):
    headers = []
    if content_type is not None:
        headers.append((b"content-type", content_type.encode("latin-1")))
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/",
        "query_string": b"",
        "headers": headers,
    }
    if app is not None:
        scope["app"] = app
    return scope


@pytest.fixture
def make_request():
    """Build a Request whose body is delivered in a single message."""

    def _make(body=b"", content_type="application/json", app=None):
        received = []

        async def receive():
            received.append(True)
            return {"type": "http.request", "body": body, "more_body": False}

        request = Request(_scope(content_type, app), receive)
        request.receive_calls = received
        return request

    return _make


@pytest.fixture
def stalled_request():
    """Build a Request whose body never arrives."""

    def _make(content_type="application/json"):
        async def receive():
            await asyncio.Event().wait()

        return Request(_scope(content_type), receive)

    return _make


@pytest.fixture
def fastapi_app():
    app = FastAPI(lifespan=lifespan_manager(HttpJsonConfig()))
    add_exception_handlers(app)

    @app.post("/people/")
    async def create_person(request: Request) -> Response:
        person = await read_from_json(request, Person)
        return await json_response_for(request, person)

    @app.post("/people/pretty")
    async def create_person_pretty(
        request: Request,
        person: Person = json_body(Person),
        options: JsonOptions = Depends(get_json_options),
    ) -> Response:
        options.serializer_options.write_indented = True
        return await json_response_for(request, person)

    @app.post("/numbers/")
    async def sum_numbers(request: Request) -> Response:
        numbers = await read_from_json(request, List[int])
        return await json_response_for(request, {"total": sum(numbers)})

    return app
