"""Decode EC2 Query API XML responses and faults."""

from __future__ import annotations

import dataclasses
import xml.etree.ElementTree as ET
from typing import Any, TypeVar

from aws_query_client.exceptions import ApiError, DecodeError
from aws_query_client.schema import XmlKind, response_schema


T = TypeVar("T")


def _local_name(tag: str) -> str:
    # "{http://ec2.amazonaws.com/doc/2016-11-15/}instanceId" -> "instanceId"
    return tag.rsplit("}", 1)[-1]


def _child(element: ET.Element, *names: str) -> ET.Element | None:
    for child in element:
        if _local_name(child.tag) in names:
            return child
    return None


def _children(element: ET.Element, name: str) -> list[ET.Element]:
    return [child for child in element if _local_name(child.tag) == name]


def _text(element: ET.Element | None) -> str:
    if element is None or element.text is None:
        return ""
    return element.text.strip()


def _parse(body: bytes | str, status_code: int | None = None) -> ET.Element:
    try:
        return ET.fromstring(body)  # noqa: S314
    # ValueError: str bodies carrying an encoding declaration
    except (ET.ParseError, ValueError) as e:
        msg = f"Malformed XML response: {e}"
        raise DecodeError(msg, status_code=status_code, body=_as_bytes(body)) from e


def _as_bytes(body: bytes | str) -> bytes:
    return body if isinstance(body, bytes) else body.encode("utf-8")


def _convert(converter: Any, element: ET.Element, path: str) -> Any:
    try:
        return converter(_text(element))
    except (TypeError, ValueError) as e:
        msg = f"Cannot decode {path}: {e}"
        raise DecodeError(msg) from e


def _decode_struct(element: ET.Element, cls: type[T], path: str) -> T:
    values: dict[str, Any] = {}
    for field in response_schema(cls):
        child = _child(element, field.tag)
        if child is None:
            continue
        field_path = f"{path}.{field.tag}"
        if field.kind is XmlKind.TEXT:
            values[field.attribute] = _convert(field.converter, child, field_path)
        elif field.kind is XmlKind.STRUCT:
            values[field.attribute] = _decode_struct(
                child, field.item_type, field_path
            )
        else:
            values[field.attribute] = [
                _decode_item(item, field.item_type, f"{field_path}[{index}]")
                for index, item in enumerate(_children(child, field.item_tag))
            ]

    try:
        return cls(**values)
    except TypeError as e:
        msg = f"Cannot build {cls.__name__} from {path}: {e}"
        raise DecodeError(msg) from e


def _decode_item(element: ET.Element, item_type: Any, path: str) -> Any:
    if isinstance(item_type, type) and dataclasses.is_dataclass(item_type):
        return _decode_struct(element, item_type, path)
    return _convert(item_type, element, path)


def decode_response(body: bytes | str, response_type: type[T] | None) -> T | None:
    """Decode a successful response body into ``response_type``.

    Fields are matched by tag against the children of the root element,
    ignoring XML namespaces. Tags that are absent leave the field default.

    Args:
        body: The raw XML response body
        response_type: A dataclass declared with xml fields, or None to skip decoding

    Returns:
        The populated ``response_type`` instance, or None

    Raises:
        DecodeError: If the body is not well formed or a value cannot be converted
    """
    if response_type is None:
        return None
    root = _parse(body)
    return _decode_struct(root, response_type, _local_name(root.tag))


def decode_error(body: bytes | str, status_code: int) -> ApiError:
    """Decode a fault body into an ApiError carrying its first error.

    Expected shape::

        <Response>
          <RequestId>...</RequestId>
          <Errors>
            <Error><Type/><Code/><Message/></Error>
          </Errors>
        </Response>

    Raises:
        DecodeError: If the body is not well formed or holds no Error element
    """
    root = _parse(body, status_code)
    errors = _child(root, "Errors")
    first = _child(errors, "Error") if errors is not None else None
    if first is None:
        msg = f"Fault body for status {status_code} contains no Error element"
        raise DecodeError(msg, status_code=status_code, body=_as_bytes(body))

    return ApiError(
        type=_text(_child(first, "Type")),
        code=_text(_child(first, "Code")),
        message=_text(_child(first, "Message")),
        request_id=_text(_child(root, "RequestId", "RequestID")),
        http_status_code=status_code,
    )
