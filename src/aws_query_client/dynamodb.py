"""Capability interface over the DynamoDB Query operation."""

from __future__ import annotations

from typing import Any, Protocol

import boto3
from boto3.dynamodb.types import TypeSerializer


class DynamoDBQuerier(Protocol):
    """Anything that can run a DynamoDB Query.

    A boto3 ``dynamodb`` client satisfies this as is; tests substitute a double.
    """

    # ignore cover because coverage doesn't understand elipses
    def query(self, **kwargs: Any) -> dict[str, Any]: ...  # pragma: no cover


def create_querier(
    region_name: str, endpoint_url: str | None = None
) -> DynamoDBQuerier:
    """Create with the boto dynamodb client."""
    return boto3.client("dynamodb", region_name=region_name, endpoint_url=endpoint_url)


def equals_condition(value: Any) -> dict[str, Any]:
    """Build a KeyConditions entry matching ``value`` exactly.

    >>> equals_condition("abc")
    {'ComparisonOperator': 'EQ', 'AttributeValueList': [{'S': 'abc'}]}
    """
    return {
        "ComparisonOperator": "EQ",
        "AttributeValueList": [TypeSerializer().serialize(value)],
    }
