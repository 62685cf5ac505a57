"""Helpers for the EC2 Query API and a DynamoDB query capability."""

from __future__ import annotations

from aws_query_client.client import USER_AGENT, EC2Client
from aws_query_client.config import ClientConfig, Context
from aws_query_client.dynamodb import DynamoDBQuerier, create_querier
from aws_query_client.exceptions import (
    ApiError,
    AwsQueryClientError,
    DecodeError,
    EncodingSchemaError,
    InvalidParameterValueError,
)
from aws_query_client.schema import (
    FieldKind,
    ec2_field,
    ec2_list,
    ec2_optional,
    ec2_scalar,
    ec2_struct,
    ec2_struct_list,
    xml_field,
    xml_list,
    xml_struct,
)
from aws_query_client.values import (
    BooleanValue,
    DoubleValue,
    FloatValue,
    IntegerValue,
    LongValue,
    StringValue,
    boolean_value,
    double_value,
    false_value,
    float_value,
    integer_value,
    long_value,
    string_value,
    true_value,
)


__all__ = [
    "USER_AGENT",
    "ApiError",
    "AwsQueryClientError",
    "BooleanValue",
    "ClientConfig",
    "Context",
    "DecodeError",
    "DoubleValue",
    "DynamoDBQuerier",
    "EC2Client",
    "EncodingSchemaError",
    "FieldKind",
    "FloatValue",
    "IntegerValue",
    "InvalidParameterValueError",
    "LongValue",
    "StringValue",
    "boolean_value",
    "create_querier",
    "double_value",
    "ec2_field",
    "ec2_list",
    "ec2_optional",
    "ec2_scalar",
    "ec2_struct",
    "ec2_struct_list",
    "false_value",
    "float_value",
    "integer_value",
    "long_value",
    "string_value",
    "true_value",
    "xml_field",
    "xml_list",
    "xml_struct",
]
