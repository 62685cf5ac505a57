"""Tests for XML response and fault decoding."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

import pytest

from aws_query_client.decoder import decode_error, decode_response
from aws_query_client.exceptions import ApiError, DecodeError
from aws_query_client.schema import parse_boolean, xml_field, xml_list, xml_struct


@dataclass
class FakeEC2Response:
    ip_address: str = xml_field("IpAddress")


@dataclass
class Placement:
    availability_zone: str = xml_field("availabilityZone")


@dataclass
class Instance:
    instance_id: str = xml_field("instanceId")
    ami_launch_index: int = xml_field("amiLaunchIndex", converter=int, default=0)
    ebs_optimized: bool = xml_field(
        "ebsOptimized", converter=parse_boolean, default=False
    )
    placement: Placement | None = xml_struct("placement", Placement)
    security_groups: list[str] = xml_list("groupSet")
    local_only: str = "untouched"


@dataclass
class RunInstancesResponse:
    request_id: str = xml_field("requestId")
    reservation_id: str = xml_field("reservationId")
    instances: list[Instance] = xml_list("instancesSet", Instance)


@dataclass
class RequiredFieldResponse:
    value: str = xml_field("value", default=dataclasses.MISSING)


RUN_INSTANCES_BODY = b"""<?xml version="1.0" encoding="UTF-8"?>
<RunInstancesResponse xmlns="http://ec2.amazonaws.com/doc/2016-11-15/">
  <requestId>req-1</requestId>
  <reservationId>r-1</reservationId>
  <instancesSet>
    <item>
      <instanceId>i-1</instanceId>
      <amiLaunchIndex>0</amiLaunchIndex>
      <ebsOptimized>true</ebsOptimized>
      <placement><availabilityZone>us-west-2a</availabilityZone></placement>
      <groupSet><item>sg-1</item><item>sg-2</item></groupSet>
    </item>
    <item>
      <instanceId>i-2</instanceId>
      <amiLaunchIndex>1</amiLaunchIndex>
    </item>
  </instancesSet>
</RunInstancesResponse>
"""

FAULT_BODY = b"""<Response>
<RequestId>woo</RequestId>
<Errors>
<Error>
<Type>Problem</Type>
<Code>Uh Oh</Code>
<Message>You done did it</Message>
</Error>
</Errors>
</Response>
"""


def test_decode_response_populates_tagged_fields():
    """Test that a tagged field is read from the matching child element."""
    result = decode_response(
        b"<Thing><IpAddress>woo</IpAddress></Thing>\n", FakeEC2Response
    )

    assert result == FakeEC2Response(ip_address="woo")


def test_decode_response_leaves_missing_tags_at_default():
    """Test that absent tags keep the field default."""
    result = decode_response(b"<Thing><Other>x</Other></Thing>", FakeEC2Response)

    assert result == FakeEC2Response(ip_address="")


def test_decode_response_none_type_skips_decoding():
    """Test that no response type means nothing is parsed."""
    assert decode_response(b"not xml at all", None) is None


def test_decode_response_handles_namespaces_structs_and_lists():
    """Test a namespaced EC2 style response with nested items."""
    result = decode_response(RUN_INSTANCES_BODY, RunInstancesResponse)

    assert result.request_id == "req-1"
    assert result.reservation_id == "r-1"
    assert [i.instance_id for i in result.instances] == ["i-1", "i-2"]

    first, second = result.instances
    assert first.ami_launch_index == 0
    assert first.ebs_optimized is True
    assert first.placement == Placement(availability_zone="us-west-2a")
    assert first.security_groups == ["sg-1", "sg-2"]
    assert first.local_only == "untouched"

    assert second.ami_launch_index == 1
    assert second.ebs_optimized is False
    assert second.placement is None
    assert second.security_groups == []


def test_decode_response_rejects_malformed_xml():
    """Test that malformed XML is a decode error."""
    with pytest.raises(DecodeError, match="Malformed XML"):
        decode_response(b"<Thing><IpAddress>woo</Thing>", FakeEC2Response)


def test_decode_response_rejects_unconvertible_text():
    """Test that text that cannot be converted is a decode error."""
    body = (
        b"<R><instancesSet><item><amiLaunchIndex>abc</amiLaunchIndex>"
        b"</item></instancesSet></R>"
    )

    with pytest.raises(DecodeError, match="amiLaunchIndex"):
        decode_response(body, RunInstancesResponse)


def test_decode_response_rejects_missing_required_field():
    """Test that a field without a default must be present in the body."""
    with pytest.raises(DecodeError, match="RequiredFieldResponse"):
        decode_response(b"<R></R>", RequiredFieldResponse)


def test_parse_boolean():
    """Test boolean text conversion."""
    assert parse_boolean("true") is True
    assert parse_boolean(" FALSE ") is False
    with pytest.raises(ValueError, match="invalid boolean"):
        parse_boolean("yes")


def test_decode_error_returns_first_error():
    """Test that the fault body becomes an ApiError with type, code and message."""
    error = decode_error(FAULT_BODY, 400)

    assert isinstance(error, ApiError)
    assert error.type == "Problem"
    assert error.code == "Uh Oh"
    assert error.message == "You done did it"
    assert error.request_id == "woo"
    assert error.http_status_code == 400


def test_decode_error_surfaces_only_the_first_of_many_errors():
    """Test that later errors in a multi-error fault are not surfaced."""
    body = b"""<Response><Errors>
    <Error><Type>Sender</Type><Code>First</Code><Message>one</Message></Error>
    <Error><Type>Sender</Type><Code>Second</Code><Message>two</Message></Error>
    </Errors><RequestID>req-9</RequestID></Response>"""

    error = decode_error(body, 503)

    assert error.code == "First"
    assert error.message == "one"
    assert error.request_id == "req-9"
    assert error.http_status_code == 503


def test_decode_error_missing_type_defaults_to_empty():
    """Test that real EC2 faults without a Type element still decode."""
    body = (
        b"<Response><Errors><Error><Code>InvalidInstanceID.NotFound</Code>"
        b"<Message>gone</Message></Error></Errors></Response>"
    )

    error = decode_error(body, 400)

    assert error.type == ""
    assert error.code == "InvalidInstanceID.NotFound"


def test_decode_error_rejects_malformed_xml():
    """Test that an unparseable fault body is a decode error, not an ApiError."""
    with pytest.raises(DecodeError) as exc_info:
        decode_error(b"Internal Server Error", 500)

    assert not isinstance(exc_info.value, ApiError)
    assert exc_info.value.status_code == 500
    assert exc_info.value.body == b"Internal Server Error"


def test_decode_error_rejects_body_without_errors():
    """Test that well formed XML without an Error element is a decode error."""
    with pytest.raises(DecodeError, match="no Error element"):
        decode_error(b"<Response><RequestId>x</RequestId></Response>", 400)
