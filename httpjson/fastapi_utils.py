import json
from contextlib import asynccontextmanager
from typing import Any
from typing import AsyncContextManager
from typing import AsyncGenerator
from typing import Callable
from typing import Optional

from fastapi import Depends
from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from httpjson.config import HttpJsonConfig
from httpjson.errors import UnsupportedContentTypeError
from httpjson.log_config import configure_logging
from httpjson.log_config import logger
from httpjson.options import JsonOptions
from httpjson.options import JsonSerializerOptions
from httpjson.request import read_from_json


def configure_json_options(
    app: FastAPI,
    configure: Optional[Callable[[JsonSerializerOptions], None]] = None,
) -> JsonOptions:
    """
    Install application-wide JSON options on ``app.state``, seeded from
    the defaults and optionally adjusted by ``configure``.
    """
    options = JsonOptions()
    if configure is not None:
        configure(options.serializer_options)
    app.state.json_options = options
    logger.debug("Installed application JSON options")
    return options


def get_json_options(request: Request) -> JsonOptions:
    """
    Dependency returning options scoped to the current request.
    The first call per request copies the application-wide options, so
    changes made by a handler never leak into other requests.
    """
    scoped: Optional[JsonOptions] = getattr(
        request.state, "json_options", None
    )
    if scoped is None:
        app = request.scope.get("app")
        base: Optional[JsonOptions] = None
        if app is not None:
            base = getattr(app.state, "json_options", None)
        scoped = (
            JsonOptions.from_base(base) if base is not None else JsonOptions()
        )
        request.state.json_options = scoped
    return scoped


def json_body(type_: Any = Any) -> Any:
    """
    Dependency that reads the request body as JSON into ``type_``::

        async def create(item: Item = json_body(Item)): ...
    """

    async def _dependency(request: Request) -> Any:
        return await read_from_json(request, type_)

    return Depends(_dependency)


def add_exception_handlers(app: FastAPI) -> None:
    """
    Map JSON read failures to client errors. Without this they surface
    as server errors.
    """

    @app.exception_handler(UnsupportedContentTypeError)
    async def _unsupported_content_type(
        request: Request, exc: UnsupportedContentTypeError
    ) -> JSONResponse:
        logger.warning(
            "Unsupported content type: %s",
            exc.content_type,
            extra={"content_type": exc.content_type},
        )
        return JSONResponse(
            {"detail": str(exc)},
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
        )

    @app.exception_handler(json.JSONDecodeError)
    async def _malformed_json(
        request: Request, exc: json.JSONDecodeError
    ) -> JSONResponse:
        logger.warning("Malformed JSON body: %s", exc)
        return JSONResponse(
            {"detail": f"Malformed JSON: {exc}"},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    @app.exception_handler(ValidationError)
    async def _invalid_payload(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        logger.warning(
            "JSON body failed validation: %d errors", exc.error_count()
        )
        return JSONResponse(
            {"detail": exc.errors(include_url=False, include_context=False)},
            status_code=status.HTTP_400_BAD_REQUEST,
        )


def lifespan_manager(
    config: Optional[HttpJsonConfig] = None,
) -> Callable[[FastAPI], AsyncContextManager[None]]:
    """
    Returns a FastAPI lifespan function that:
      1) Configures logging from ``config``
      2) Installs the application-wide JSON options on startup, unless
         ``configure_json_options`` already did
      3) Removes the options it installed on shutdown
    """
    cfg = config or HttpJsonConfig()

    @asynccontextmanager
    async def _lifespan(app: FastAPI) -> AsyncGenerator[None, Any]:
        configure_logging(cfg.json_logging, cfg.log_level)
        installed = getattr(app.state, "json_options", None) is None
        if not installed:
            logger.debug("Keeping JSON options already set on the app")
        elif cfg.serializer_options is not None:
            app.state.json_options = JsonOptions(
                serializer_options=cfg.serializer_options.clone()
            )
        else:
            configure_json_options(app)
        logger.info("JSON helpers ready")
        try:
            yield
        finally:
            if installed:
                del app.state.json_options
            logger.info("JSON helpers shut down")

    return _lifespan
