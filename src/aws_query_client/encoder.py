"""Encode request objects into EC2 Query API form parameters."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qsl, urlencode

from aws_query_client.exceptions import DecodeError, EncodingSchemaError
from aws_query_client.schema import COMPOSITE_KINDS, FieldKind, request_schema
from aws_query_client.values import OptionalValue, format_float64


if TYPE_CHECKING:
    from collections.abc import Callable


FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def format_scalar(value: Any) -> str:
    """Stringify a plain scalar the way the Query API expects it."""
    # bool before int, bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return format_float64(value)
    if isinstance(value, str):
        return value
    msg = f"unsupported scalar type {type(value).__name__}"
    raise EncodingSchemaError(msg)


def _encode_optional(name: str, value: Any, params: dict[str, str]) -> None:
    if not isinstance(value, OptionalValue):
        msg = f"{name}: expected an optional value, got {type(value).__name__}"
        raise EncodingSchemaError(msg)
    if value.present:
        params[name] = value.format()


def _encode_scalar(name: str, value: Any, params: dict[str, str]) -> None:
    try:
        params[name] = format_scalar(value)
    except EncodingSchemaError as e:
        msg = f"{name}: {e}"
        raise EncodingSchemaError(msg) from e


def _check_sequence(name: str, value: Any) -> list | tuple:
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        msg = f"{name}: expected a list, got {type(value).__name__}"
        raise EncodingSchemaError(msg)
    return value


def _encode_scalar_list(name: str, value: Any, params: dict[str, str]) -> None:
    for index, item in enumerate(_check_sequence(name, value), start=1):
        _encode_scalar(f"{name}.{index}", item, params)


def _encode_struct(name: str, value: Any, params: dict[str, str]) -> None:
    if value is None:
        return
    _encode_fields(value, f"{name}.", params, nested=True)


def _encode_struct_list(name: str, value: Any, params: dict[str, str]) -> None:
    for index, item in enumerate(_check_sequence(name, value), start=1):
        if item is None:
            msg = f"{name}.{index}: list items must not be None"
            raise EncodingSchemaError(msg)
        _encode_fields(item, f"{name}.{index}.", params, nested=True)


_ENCODERS: dict[FieldKind, Callable[[str, Any, dict[str, str]], None]] = {
    FieldKind.OPTIONAL_SCALAR: _encode_optional,
    FieldKind.SCALAR: _encode_scalar,
    FieldKind.SCALAR_LIST: _encode_scalar_list,
    FieldKind.STRUCT: _encode_struct,
    FieldKind.STRUCT_LIST: _encode_struct_list,
}


def _encode_fields(
    obj: Any, prefix: str, params: dict[str, str], *, nested: bool
) -> None:
    for field in request_schema(type(obj)):
        name = f"{prefix}{field.wire_name}"
        # nested structures are flat, one level only
        if nested and field.kind in COMPOSITE_KINDS:
            msg = f"{name}: nested structures may only contain scalar fields"
            raise EncodingSchemaError(msg)
        _ENCODERS[field.kind](name, getattr(obj, field.attribute), params)


def encode_request(action: str, version: str, request: Any) -> dict[str, str]:
    """Encode ``request`` into wire parameters, including Action and Version.

    Args:
        action: The API operation name, e.g. DescribeInstances
        version: The API version, e.g. 2016-11-15
        request: A dataclass instance declared with ec2 fields, or None

    Returns:
        dict[str, str]: The parameter set, keys unique

    Raises:
        EncodingSchemaError: If the request does not match its declared schema
    """
    params: dict[str, str] = {}
    if request is not None:
        _encode_fields(request, "", params, nested=False)
    params["Action"] = action
    params["Version"] = version
    return params


def serialize_form(params: dict[str, str]) -> bytes:
    """Form-encode ``params`` with keys in ascending order."""
    return urlencode(sorted(params.items())).encode("ascii")


def parse_form(body: bytes | str) -> dict[str, str]:
    """Decode a form-encoded body back into a parameter mapping.

    Raises:
        DecodeError: If the body is not valid form encoding or repeats a key
    """
    if isinstance(body, bytes):
        body = body.decode("utf-8")
    try:
        pairs = parse_qsl(body, keep_blank_values=True, strict_parsing=bool(body))
    except ValueError as e:
        msg = f"Invalid form body: {e}"
        raise DecodeError(msg) from e

    params: dict[str, str] = {}
    for key, value in pairs:
        if key in params:
            msg = f"Duplicate form parameter: {key}"
            raise DecodeError(msg)
        params[key] = value
    return params
