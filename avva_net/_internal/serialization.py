"""JSON encoding and decoding of request and response bodies.

Decoding matches object keys to model fields case-insensitively, so a payload
``{"ID": 5, "Name": "x"}`` populates a model declaring ``id`` and ``name``.
Matching applies recursively through nested models, dataclasses, lists,
tuples, sets, dicts and optional/union fields.
"""

import dataclasses
import types
import typing
from collections.abc import Mapping, Sequence
from typing import Any, get_args, get_origin, get_type_hints

from pydantic import BaseModel, TypeAdapter
from pydantic_core import PydanticSerializationError, from_json, to_json

JSON_CONTENT_TYPE = "application/json"

_SEQUENCE_ORIGINS = (list, set, frozenset, Sequence, typing.Sequence)
_MAPPING_ORIGINS = (dict, Mapping, typing.Mapping)


def serialize(value: Any) -> bytes:
    """Serialize a request body to JSON bytes.

    Accepts anything pydantic can serialize: models, dataclasses, mappings,
    sequences and primitives. Models are dumped by alias.

    Raises:
        TypeError: If the value cannot be represented as JSON.
    """
    try:
        return to_json(value, by_alias=True)
    except PydanticSerializationError as e:
        raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable") from e


def deserialize(raw: bytes, response_type: Any = None) -> Any:
    """Decode JSON bytes into ``response_type``.

    Args:
        raw: The response body.
        response_type: Target type. ``None`` returns plain decoded JSON.

    Returns:
        The decoded value, or None for an empty body.

    Raises:
        ValueError: If the body is not valid JSON or does not fit the type.
            ``pydantic.ValidationError`` is a ValueError subclass.
    """
    if not raw.strip():
        return None
    decoded = from_json(raw)
    if response_type is None:
        return decoded
    return TypeAdapter(response_type).validate_python(match_keys(decoded, response_type))


def deserialize_text(text: str, response_type: Any = None) -> Any:
    """Decode a JSON document already read as text."""
    return deserialize(text.encode("utf-8"), response_type)


def match_keys(value: Any, annotation: Any) -> Any:
    """Rewrite object keys to the field names declared by ``annotation``.

    Exact key matches take precedence over case-insensitive ones. Keys that
    match no field are kept as-is so the model's own ``extra`` policy applies.
    """
    if annotation is None or annotation is Any:
        return value

    origin = get_origin(annotation)

    if origin is typing.Annotated:
        return match_keys(value, get_args(annotation)[0])

    if origin is typing.Union or origin is types.UnionType:
        for arm in get_args(annotation):
            if arm is type(None):
                continue
            if _fits(value, arm):
                return match_keys(value, arm)
        return value

    if isinstance(value, list):
        if origin in _SEQUENCE_ORIGINS:
            (item_type,) = get_args(annotation) or (Any,)
            return [match_keys(item, item_type) for item in value]
        if origin is tuple:
            args = get_args(annotation)
            if len(args) == 2 and args[1] is Ellipsis:
                return [match_keys(item, args[0]) for item in value]
            return [
                match_keys(item, args[i]) if i < len(args) else item
                for i, item in enumerate(value)
            ]
        return value

    if not isinstance(value, dict):
        return value

    if origin in _MAPPING_ORIGINS:
        args = get_args(annotation)
        value_type = args[1] if len(args) == 2 else Any
        return {key: match_keys(item, value_type) for key, item in value.items()}

    fields = _declared_fields(annotation)
    if fields is None:
        return value

    lookup = {key.lower(): (key, field_type) for key, field_type in fields.items()}
    result: dict[str, Any] = {}
    exact: set[str] = set()
    for key, item in value.items():
        if key in fields:
            result[key] = match_keys(item, fields[key])
            exact.add(key)
            continue
        match = lookup.get(key.lower()) if isinstance(key, str) else None
        if match is None:
            result[key] = item
            continue
        target, field_type = match
        if target in exact or target in result:
            continue
        result[target] = match_keys(item, field_type)
    return result


def _declared_fields(annotation: Any) -> dict[str, Any] | None:
    """Map the input keys a model accepts to their field types."""
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        fields: dict[str, Any] = {}
        for name, field in annotation.model_fields.items():
            alias = field.validation_alias
            if not isinstance(alias, str):
                alias = field.alias
            fields[alias or name] = field.annotation
        return fields
    if isinstance(annotation, type) and dataclasses.is_dataclass(annotation):
        hints = get_type_hints(annotation)
        return {field.name: hints.get(field.name, Any) for field in dataclasses.fields(annotation)}
    return None


def _fits(value: Any, arm: Any) -> bool:
    """Check whether a decoded JSON value could populate a union arm."""
    origin = get_origin(arm) or arm
    if isinstance(value, dict):
        return origin in _MAPPING_ORIGINS or _declared_fields(arm) is not None
    if isinstance(value, list):
        return origin in _SEQUENCE_ORIGINS or origin is tuple
    return False
