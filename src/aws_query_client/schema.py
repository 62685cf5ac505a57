"""Field declarations for request and response types.

Request and response types are plain dataclasses. Each field carries its wire
name and kind in the dataclass field metadata, so encoding and decoding walk
an explicit schema instead of inspecting arbitrary objects.
"""

from __future__ import annotations

import dataclasses
import functools
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from aws_query_client.exceptions import EncodingSchemaError


if TYPE_CHECKING:
    from collections.abc import Callable


EC2_METADATA_KEY = "ec2"
XML_METADATA_KEY = "xml"


class FieldKind(Enum):
    """Closed set of request field shapes understood by the encoder."""

    OPTIONAL_SCALAR = "optional-scalar"
    SCALAR = "scalar"
    SCALAR_LIST = "scalar-list"
    STRUCT = "struct"
    STRUCT_LIST = "struct-list"


COMPOSITE_KINDS = frozenset(
    {FieldKind.SCALAR_LIST, FieldKind.STRUCT, FieldKind.STRUCT_LIST}
)


class XmlKind(Enum):
    TEXT = "text"
    STRUCT = "struct"
    LIST = "list"


@dataclass(frozen=True)
class RequestField:
    wire_name: str
    attribute: str
    kind: FieldKind


@dataclass(frozen=True)
class ResponseField:
    tag: str
    attribute: str
    kind: XmlKind
    converter: Callable[[str], Any] = str
    item_type: Any = None
    item_tag: str = "item"


# region Request declarations
def ec2_field(wire_name: str, kind: FieldKind, **kwargs: Any) -> Any:
    """Declare a request field sent as ``wire_name``."""
    metadata = {EC2_METADATA_KEY: (wire_name, kind)}
    return dataclasses.field(metadata=metadata, **kwargs)


def ec2_optional(wire_name: str, value_type: type) -> Any:
    """Optional scalar wrapper, absent unless set through a factory."""
    return ec2_field(wire_name, FieldKind.OPTIONAL_SCALAR, default_factory=value_type)


def ec2_scalar(wire_name: str, **kwargs: Any) -> Any:
    """Plain scalar, always sent."""
    return ec2_field(wire_name, FieldKind.SCALAR, **kwargs)


def ec2_list(wire_name: str) -> Any:
    return ec2_field(wire_name, FieldKind.SCALAR_LIST, default_factory=list)


def ec2_struct(wire_name: str) -> Any:
    return ec2_field(wire_name, FieldKind.STRUCT, default=None)


def ec2_struct_list(wire_name: str) -> Any:
    return ec2_field(wire_name, FieldKind.STRUCT_LIST, default_factory=list)


@functools.cache
def request_schema(cls: type) -> tuple[RequestField, ...]:
    """Return the declared request fields of ``cls`` in declaration order.

    Raises:
        EncodingSchemaError: If ``cls`` is not a dataclass or has an undeclared field
    """
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        msg = f"{cls!r} is not a request dataclass"
        raise EncodingSchemaError(msg)

    schema = []
    for field in dataclasses.fields(cls):
        declaration = field.metadata.get(EC2_METADATA_KEY)
        if declaration is None:
            msg = f"{cls.__name__}.{field.name} has no ec2 field declaration"
            raise EncodingSchemaError(msg)
        wire_name, kind = declaration
        if not isinstance(kind, FieldKind):
            msg = f"{cls.__name__}.{field.name} has unsupported kind {kind!r}"
            raise EncodingSchemaError(msg)
        schema.append(RequestField(wire_name, field.name, kind))
    return tuple(schema)


# endregion Request declarations


# region Response declarations
def parse_boolean(text: str) -> bool:
    normalized = text.strip().lower()
    if normalized == "true":
        return True
    if normalized == "false":
        return False
    msg = f"invalid boolean: {text!r}"
    raise ValueError(msg)


def xml_field(
    tag: str, converter: Callable[[str], Any] = str, default: Any = ""
) -> Any:
    """Declare a response field read from the text of child element ``tag``."""
    declaration = (XmlKind.TEXT, tag, converter, None, "item")
    return dataclasses.field(
        default=default, metadata={XML_METADATA_KEY: declaration}
    )


def xml_struct(tag: str, struct_type: type) -> Any:
    declaration = (XmlKind.STRUCT, tag, str, struct_type, "item")
    return dataclasses.field(default=None, metadata={XML_METADATA_KEY: declaration})


def xml_list(tag: str, item_type: Any = str, item_tag: str = "item") -> Any:
    """Declare a list read from ``<tag><item>..</item>..</tag>``.

    ``item_type`` is either a response dataclass or a text converter.
    """
    declaration = (XmlKind.LIST, tag, str, item_type, item_tag)
    return dataclasses.field(
        default_factory=list, metadata={XML_METADATA_KEY: declaration}
    )


@functools.cache
def response_schema(cls: type) -> tuple[ResponseField, ...]:
    """Return the declared response fields of ``cls``; undeclared fields are skipped."""
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        msg = f"{cls!r} is not a response dataclass"
        raise EncodingSchemaError(msg)

    schema = []
    for field in dataclasses.fields(cls):
        declaration = field.metadata.get(XML_METADATA_KEY)
        if declaration is None:
            continue
        kind, tag, converter, item_type, item_tag = declaration
        schema.append(
            ResponseField(tag, field.name, kind, converter, item_type, item_tag)
        )
    return tuple(schema)


# endregion Response declarations
