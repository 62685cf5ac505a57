"""Signed request dispatch for the EC2 Query API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol, TypeVar

import requests
from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest

from aws_query_client.config import ClientConfig, Context
from aws_query_client.decoder import decode_error, decode_response
from aws_query_client.encoder import (
    FORM_CONTENT_TYPE,
    encode_request,
    serialize_form,
)


if TYPE_CHECKING:
    from collections.abc import Mapping


logger = logging.getLogger(__name__)

T = TypeVar("T")

USER_AGENT = "aws-query-client"


class Transport(Protocol):
    """The slice of requests.Session the client sends through."""

    def request(
        self,
        method: str,
        url: str,
        *,
        data: bytes | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
        allow_redirects: bool = True,
    ) -> requests.Response: ...  # pragma: no cover


class EC2Client:
    """Dispatch EC2 Query API operations.

    One call is one signed HTTP round trip. The client keeps no state between
    calls; retries and timeouts belong to the caller and the transport.
    """

    def __init__(
        self,
        context: Context,
        endpoint: str,
        api_version: str,
        transport: Transport | None = None,
        timeout: float | None = None,
    ) -> None:
        self.context = context
        self.endpoint = endpoint
        self.api_version = api_version
        self.transport: Transport = transport or requests.Session()
        self.timeout = timeout

    @staticmethod
    def from_config(
        config: ClientConfig,
        context: Context | None = None,
        transport: Transport | None = None,
    ) -> EC2Client:
        """Create a client from configuration.

        When no context is given, credentials are resolved through boto3 for
        the configured service and region.
        """
        if context is None:
            context = Context.from_session(config.service, config.region)
        return EC2Client(
            context=context,
            endpoint=config.resolved_endpoint,
            api_version=config.api_version,
            transport=transport,
            timeout=config.timeout,
        )

    def build_request(
        self, operation_name: str, method: str, path: str, request: Any
    ) -> AWSRequest:
        """Encode and sign a request without sending it.

        Raises:
            EncodingSchemaError: If the request does not match its declared schema
        """
        params = encode_request(operation_name, self.api_version, request)
        aws_request = AWSRequest(
            method=method,
            url=f"{self.endpoint.rstrip('/')}{path}",
            data=serialize_form(params),
            headers={
                "Content-Type": FORM_CONTENT_TYPE,
                "User-Agent": USER_AGENT,
            },
        )
        SigV4Auth(
            self.context.credentials, self.context.service, self.context.region
        ).add_auth(aws_request)
        return aws_request

    def do(
        self,
        operation_name: str,
        method: str,
        path: str,
        request: Any,
        response_type: type[T] | None = None,
    ) -> T | None:
        """Send one operation and decode its response.

        Args:
            operation_name: The API action, sent as the Action parameter
            method: HTTP method, usually POST
            path: Path appended to the endpoint, usually "/"
            request: Request dataclass declared with ec2 fields, or None
            response_type: Response dataclass declared with xml fields, or None

        Returns:
            The decoded response, or None when no response_type is given

        Raises:
            EncodingSchemaError: If the request does not match its declared schema
            DecodeError: If the response body cannot be decoded
            ApiError: If the service answers with a non-2xx fault
            requests.RequestException: Transport failures, unmodified
        """
        prepared = self.build_request(operation_name, method, path, request).prepare()

        logger.debug(
            "Sending %s %s action=%s", prepared.method, prepared.url, operation_name
        )
        response = self.transport.request(
            prepared.method,
            prepared.url,
            data=prepared.body,
            headers=dict(prepared.headers.items()),
            timeout=self.timeout,
            # a redirect would be a second round trip
            allow_redirects=False,
        )
        logger.debug("Action %s returned %d", operation_name, response.status_code)

        if 200 <= response.status_code < 300:  # noqa: PLR2004
            return decode_response(response.content, response_type)
        raise decode_error(response.content, response.status_code)
