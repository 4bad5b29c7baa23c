from enum import Enum
from typing import Any
from typing import Callable
from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import PrivateAttr

from httpjson.errors import OptionsReadOnlyError
from httpjson.log_config import logger


class NamingPolicy(str, Enum):
    CAMEL_CASE = "camelCase"
    PASCAL_CASE = "PascalCase"
    SNAKE_CASE = "snake_case"


class JsonSerializerOptions(BaseModel):
    """
    Options consumed by the JSON serializer when reading and writing
    HTTP bodies.
    """

    model_config = ConfigDict(validate_assignment=True)

    property_naming_policy: Optional[NamingPolicy] = None
    property_name_case_insensitive: bool = False
    relaxed_escaping: bool = False
    allow_trailing_commas: bool = False
    write_indented: bool = False
    ignore_null_values: bool = False

    _read_only: bool = PrivateAttr(default=False)

    def __setattr__(self, name: str, value: Any) -> None:
        if not name.startswith("_") and self._read_only:
            raise OptionsReadOnlyError(name)
        super().__setattr__(name, value)

    @property
    def is_read_only(self) -> bool:
        return self._read_only

    def make_read_only(self) -> "JsonSerializerOptions":
        self._read_only = True
        return self

    def clone(self) -> "JsonSerializerOptions":
        """Independent, modifiable copy of these options."""
        copied = self.model_copy(deep=True)
        copied._read_only = False
        return copied


# Built once at import and never modified afterwards.
DEFAULT_SERIALIZER_OPTIONS = JsonSerializerOptions(
    property_naming_policy=NamingPolicy.CAMEL_CASE,
    property_name_case_insensitive=True,
    relaxed_escaping=True,
).make_read_only()


class JsonOptions(BaseModel):
    """
    Holder for the serializer options of an application or a request.
    Each instance starts from its own copy of the defaults.
    """

    serializer_options: JsonSerializerOptions = Field(
        default_factory=DEFAULT_SERIALIZER_OPTIONS.clone
    )

    @classmethod
    def from_base(cls, base: "JsonOptions") -> "JsonOptions":
        """
        New options seeded from ``base``. Changes made to the result stay
        isolated from ``base``.
        """
        return cls(serializer_options=base.serializer_options.clone())


ContextSource = Callable[[], Optional[JsonSerializerOptions]]


def resolve_options(
    explicit: Optional[JsonSerializerOptions],
    context_source: Optional[ContextSource] = None,
) -> JsonSerializerOptions:
    """
    Pick the serializer options for a call: the caller's explicit choice,
    then whatever the request context supplies, then the defaults.
    """
    if explicit is not None:
        return explicit
    if context_source is not None:
        found = context_source()
        if found is not None:
            logger.debug("Using serializer options from request context")
            return found
    return DEFAULT_SERIALIZER_OPTIONS


def options_from_request(request: Any) -> Optional[JsonSerializerOptions]:
    """
    Request-scoped options if the request carries any, else the
    application-wide options, else None.
    """
    scoped: Optional[JsonOptions] = getattr(
        request.state, "json_options", None
    )
    if scoped is None:
        app = request.scope.get("app")
        if app is not None:
            scoped = getattr(app.state, "json_options", None)
    return scoped.serializer_options if scoped is not None else None
