"""
Property naming for JSON objects.

Naming policies and case-insensitive matching apply to the fields of
pydantic models and dataclasses only. Keys of plain dictionaries are data
and are never renamed.
"""
import collections.abc
import dataclasses
import types
from functools import lru_cache
from typing import Annotated
from typing import Any
from typing import Callable
from typing import Dict
from typing import List
from typing import Optional
from typing import Tuple
from typing import Union
from typing import get_args
from typing import get_origin
from typing import get_type_hints

from pydantic import BaseModel
from pydantic import TypeAdapter
from pydantic.alias_generators import to_camel
from pydantic.alias_generators import to_pascal
from pydantic.alias_generators import to_snake

from httpjson.options import JsonSerializerOptions
from httpjson.options import NamingPolicy

_NAMING: Dict[NamingPolicy, Callable[[str], str]] = {
    NamingPolicy.CAMEL_CASE: to_camel,
    NamingPolicy.PASCAL_CASE: to_pascal,
    NamingPolicy.SNAKE_CASE: to_snake,
}

_MAPPING_ORIGINS = (
    dict,
    collections.abc.Mapping,
    collections.abc.MutableMapping,
)
_SEQUENCE_ORIGINS = (
    list,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    collections.abc.Iterable,
    collections.abc.Collection,
)
_UNION_ORIGINS = (Union, types.UnionType)

# (json name, python-side key, annotation)
_Field = Tuple[str, str, Any]


@lru_cache(maxsize=256)
def _cached_adapter(type_: Any) -> TypeAdapter:
    return TypeAdapter(type_)


def adapter(type_: Any) -> TypeAdapter:
    try:
        return _cached_adapter(type_)
    except TypeError:
        # unhashable annotation
        return TypeAdapter(type_)


def json_name(name: str, policy: Optional[NamingPolicy]) -> str:
    if policy is None:
        return name
    # "userId" and "user_id" both map to "userId" under camelCase
    return _NAMING[policy](to_snake(name))


def _is_object_type(type_: Any) -> bool:
    return isinstance(type_, type) and (
        issubclass(type_, BaseModel) or dataclasses.is_dataclass(type_)
    )


@lru_cache(maxsize=256)
def _fields(cls: type, policy: Optional[NamingPolicy]) -> List[_Field]:
    """
    Property names of a model or dataclass. An explicit alias is used as
    is; otherwise the naming policy is applied to the field name.
    """
    out: List[_Field] = []
    if issubclass(cls, BaseModel):
        for name, info in cls.model_fields.items():
            key = info.validation_alias
            if not isinstance(key, str):
                key = info.alias or name
            explicit = info.alias is not None or key != name
            name_in_json = key if explicit else json_name(name, policy)
            out.append((name_in_json, key, info.annotation))
        return out

    try:
        hints = get_type_hints(cls)
    except NameError:
        # unresolvable forward reference
        hints = {}
    for f in dataclasses.fields(cls):
        annotation = hints.get(f.name, Any)
        out.append((json_name(f.name, policy), f.name, annotation))
    return out


@lru_cache(maxsize=256)
def _lookup(
    cls: type, policy: Optional[NamingPolicy], case_insensitive: bool
) -> Dict[str, Tuple[str, Any]]:
    table: Dict[str, Tuple[str, Any]] = {}
    for name, key, annotation in _fields(cls, policy):
        table.setdefault(
            name.casefold() if case_insensitive else name, (key, annotation)
        )
    return table


def _unwrap(type_: Any) -> Any:
    while get_origin(type_) is Annotated:
        type_ = get_args(type_)[0]
    return type_


def match_property_names(
    raw: Any, type_: Any, options: JsonSerializerOptions
) -> Any:
    """
    Rewrite the keys of JSON objects bound for model or dataclass fields to
    the names pydantic validates against, following ``type_`` through
    containers. Unknown keys and dictionary keys pass through unchanged.
    """
    type_ = _unwrap(type_)
    origin = get_origin(type_)

    if origin in _UNION_ORIGINS:
        for arg in get_args(type_):
            arg = _unwrap(arg)
            if isinstance(raw, dict) and (
                _is_object_type(arg) or get_origin(arg) in _MAPPING_ORIGINS
            ):
                return match_property_names(raw, arg, options)
            if isinstance(raw, list) and get_origin(arg) in (
                _SEQUENCE_ORIGINS + (tuple,)
            ):
                return match_property_names(raw, arg, options)
        return raw

    if isinstance(raw, dict):
        if _is_object_type(type_):
            return _match_object(raw, type_, options)
        if origin in _MAPPING_ORIGINS:
            args = get_args(type_)
            value_type = args[1] if len(args) == 2 else Any
            return {
                k: match_property_names(v, value_type, options)
                for k, v in raw.items()
            }
        return raw

    if isinstance(raw, list):
        args = get_args(type_)
        if origin in _SEQUENCE_ORIGINS:
            item = args[0] if args else Any
            return [match_property_names(v, item, options) for v in raw]
        if origin is tuple and args:
            if len(args) == 2 and args[1] is Ellipsis:
                return [
                    match_property_names(v, args[0], options) for v in raw
                ]
            return [
                match_property_names(v, args[i], options)
                if i < len(args)
                else v
                for i, v in enumerate(raw)
            ]
    return raw


def _match_object(
    raw: Dict[str, Any], cls: type, options: JsonSerializerOptions
) -> Dict[str, Any]:
    insensitive = options.property_name_case_insensitive
    table = _lookup(cls, options.property_naming_policy, insensitive)
    out: Dict[str, Any] = {}
    for key, value in raw.items():
        found = table.get(key.casefold() if insensitive else key)
        if found is None:
            out.setdefault(key, value)
            continue
        target, annotation = found
        out[target] = match_property_names(value, annotation, options)
    return out


def to_json_data(
    obj: Any, options: JsonSerializerOptions, type_: Any = None
) -> Any:
    """
    Turn ``obj`` into plain JSON data. Model and dataclass fields get
    their JSON property names; everything else is dumped by pydantic.
    """
    policy = options.property_naming_policy
    skip_none = options.ignore_null_values

    if isinstance(obj, BaseModel):
        cls = type(obj)
        data: Dict[str, Any] = {}
        for name, info in cls.model_fields.items():
            if info.exclude:
                continue
            value = getattr(obj, name)
            if value is None and skip_none:
                continue
            alias = info.serialization_alias or info.alias
            key = alias if alias is not None else json_name(name, policy)
            data[key] = to_json_data(value, options)
        for name, computed in cls.model_computed_fields.items():
            value = getattr(obj, name)
            if value is None and skip_none:
                continue
            key = computed.alias or json_name(name, policy)
            data[key] = to_json_data(value, options)
        for key, value in (obj.model_extra or {}).items():
            data[key] = to_json_data(value, options)
        return data

    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        data = {}
        for f in dataclasses.fields(obj):
            value = getattr(obj, f.name)
            if value is None and skip_none:
                continue
            data[json_name(f.name, policy)] = to_json_data(value, options)
        return data

    if isinstance(obj, dict):
        return {
            k if isinstance(k, str) else adapter(Any).dump_python(
                k, mode="json"
            ): to_json_data(v, options)
            for k, v in obj.items()
        }

    if isinstance(obj, (list, tuple, set, frozenset)):
        return [to_json_data(v, options) for v in obj]

    return adapter(Any if type_ is None else type_).dump_python(
        obj, mode="json"
    )
