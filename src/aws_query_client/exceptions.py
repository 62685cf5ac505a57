"""Exceptions for the AWS Query Client.

Avoid any non-stdlib references in this module, it is at the bottom of the dependency chain.
"""

from __future__ import annotations

from typing import Any


class AwsQueryClientError(Exception):
    """Base class for AWS Query Client exceptions"""


class InvalidParameterValueError(AwsQueryClientError):
    pass


class EncodingSchemaError(AwsQueryClientError):
    """A request object does not match the shape its schema declares.

    This is a programming error in the request type, not a runtime data error.
    """


class DecodeError(AwsQueryClientError):
    """A response body could not be decoded."""

    def __init__(
        self, message: str, status_code: int | None = None, body: bytes | None = None
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ApiError(AwsQueryClientError):
    """Structured fault returned by the service in a non-2xx response.

    Only the first error of the fault body is surfaced.
    """

    def __init__(
        self,
        type: str,  # noqa: A002
        code: str,
        message: str,
        request_id: str = "",
        http_status_code: int = 400,
    ) -> None:
        super().__init__(f"{code}: {message}")
        self.type = type
        self.code = code
        self.message = message
        self.request_id = request_id
        self.http_status_code = http_status_code

    def to_dict(self) -> dict[str, Any]:
        return {
            "Type": self.type,
            "Code": self.code,
            "Message": self.message,
            "RequestId": self.request_id,
        }
