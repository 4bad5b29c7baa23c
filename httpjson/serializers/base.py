from typing import Any
from typing import Optional
from typing import Protocol
from typing import runtime_checkable

from httpjson.options import JsonSerializerOptions


@runtime_checkable
class Serializer(Protocol):
    """
    Serializer protocol: must implement serialize() and deserialize().
    """

    def serialize(
        self,
        obj: Any,
        type_: Any = None,
        options: Optional[JsonSerializerOptions] = None,
    ) -> bytes:
        """
        Convert a Python value into bytes.
        """
        ...

    def deserialize(
        self,
        data: bytes,
        type_: Any = Any,
        options: Optional[JsonSerializerOptions] = None,
    ) -> Any:
        """
        Convert bytes back into a value of ``type_``.
        """
        ...
