"""Execution context and client configuration."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass

import boto3
from botocore.credentials import Credentials

from aws_query_client.exceptions import InvalidParameterValueError


DEFAULT_API_VERSION = "2016-11-15"
DEFAULT_SERVICE = "ec2"
DEFAULT_REGION = "us-east-1"


@dataclass(frozen=True)
class Context:
    """Who is calling and where: signing service, region and credentials."""

    service: str
    region: str
    credentials: Credentials

    @classmethod
    def create(
        cls,
        service: str,
        region: str,
        access_key: str,
        secret_key: str,
        token: str | None = None,
    ) -> Context:
        """Create a context from static credentials."""
        return cls(
            service=service,
            region=region,
            credentials=Credentials(access_key, secret_key, token),
        )

    @classmethod
    def from_session(
        cls,
        service: str,
        region: str | None = None,
        session: boto3.Session | None = None,
    ) -> Context:
        """Resolve credentials and region through the boto3 credential chain.

        Raises:
            InvalidParameterValueError: If no credentials or region can be resolved
        """
        session = session or boto3.Session()
        credentials = session.get_credentials()
        if credentials is None:
            msg = "Unable to locate AWS credentials"
            raise InvalidParameterValueError(msg)

        region = region or session.region_name
        if not region:
            msg = "Unable to determine AWS region"
            raise InvalidParameterValueError(msg)

        # snapshot refreshable credentials so the context stays immutable
        frozen = credentials.get_frozen_credentials()
        return cls.create(
            service, region, frozen.access_key, frozen.secret_key, frozen.token
        )


def default_endpoint(service: str, region: str) -> str:
    return f"https://{service}.{region}.amazonaws.com"


@dataclass(frozen=True)
class ClientConfig:
    """Configuration for an EC2 Query API client."""

    endpoint: str = ""
    api_version: str = DEFAULT_API_VERSION
    service: str = DEFAULT_SERVICE
    region: str = DEFAULT_REGION
    timeout: float | None = None

    @property
    def resolved_endpoint(self) -> str:
        return self.endpoint or default_endpoint(self.service, self.region)

    @classmethod
    def from_environment(cls) -> ClientConfig:
        """Create configuration from environment variables with defaults.

        Reads AWS_QUERY_ENDPOINT, AWS_QUERY_API_VERSION, AWS_QUERY_SERVICE,
        AWS_QUERY_REGION (then AWS_REGION, AWS_DEFAULT_REGION) and
        AWS_QUERY_TIMEOUT.

        Raises:
            InvalidParameterValueError: If AWS_QUERY_TIMEOUT is not positive and finite
        """
        timeout: float | None = None
        if raw_timeout := os.environ.get("AWS_QUERY_TIMEOUT"):
            try:
                timeout = float(raw_timeout)
            except ValueError as e:
                msg = f"Invalid AWS_QUERY_TIMEOUT: {raw_timeout}"
                raise InvalidParameterValueError(msg) from e
            if not math.isfinite(timeout) or timeout <= 0:
                msg = f"AWS_QUERY_TIMEOUT must be positive and finite: {raw_timeout}"
                raise InvalidParameterValueError(msg)

        region = (
            os.environ.get("AWS_QUERY_REGION")
            or os.environ.get("AWS_REGION")
            or os.environ.get("AWS_DEFAULT_REGION")
            or DEFAULT_REGION
        )

        return cls(
            endpoint=os.environ.get("AWS_QUERY_ENDPOINT", ""),
            api_version=os.environ.get("AWS_QUERY_API_VERSION", DEFAULT_API_VERSION),
            service=os.environ.get("AWS_QUERY_SERVICE", DEFAULT_SERVICE),
            region=region,
            timeout=timeout,
        )
