"""
Connection factory for the fulfillment client.

Turns Settings into a gRPC channel and wires the reflection components into a
ready to use ResourceRegistry.
"""

import collections
import logging

import grpc

from .conf import ConfigurationError, Settings
from .reflection import OperationExecutor, ResourceRegistry, SchemaLoader

logger = logging.getLogger(__name__)


class _CallDetails(
    collections.namedtuple(
        "_CallDetails",
        ("method", "timeout", "metadata", "credentials", "wait_for_ready", "compression"),
    ),
    grpc.ClientCallDetails,
):
    pass


class TokenInterceptor(grpc.UnaryUnaryClientInterceptor):
    """
    Adds an ``authorization`` header to every unary call.

    Call credentials only work on TLS channels, so plaintext channels use this
    interceptor to send the token instead.
    """

    def __init__(self, token: str):
        self._header = ("authorization", f"Bearer {token}")

    def intercept_unary_unary(self, continuation, client_call_details, request):
        metadata = list(client_call_details.metadata or ())
        metadata.append(self._header)
        details = _CallDetails(
            client_call_details.method,
            client_call_details.timeout,
            metadata,
            client_call_details.credentials,
            client_call_details.wait_for_ready,
            client_call_details.compression,
        )
        return continuation(details, request)


def connect(settings: Settings) -> grpc.Channel:
    """
    Open a channel to the server described by the settings.

    Raises:
        ConfigurationError: If no address is configured
    """
    if not settings.address:
        raise ConfigurationError(
            "Server address is mandatory, set it in the config file or in the "
            "FULFILLMENT_ADDRESS environment variable"
        )

    if settings.plaintext:
        logger.debug(f"Opening plaintext channel to {settings.address}")
        channel = grpc.insecure_channel(settings.address)
        if settings.token:
            channel = grpc.intercept_channel(channel, TokenInterceptor(settings.token))
        return channel

    logger.debug(f"Opening TLS channel to {settings.address}")
    credentials = grpc.ssl_channel_credentials()
    if settings.token:
        credentials = grpc.composite_channel_credentials(
            credentials,
            grpc.access_token_call_credentials(settings.token),
        )
    return grpc.secure_channel(settings.address, credentials)


def build_registry(settings: Settings | None = None) -> ResourceRegistry:
    """
    Create a ResourceRegistry connected to the configured server.

    Args:
        settings: Settings to use, loaded from the config file and the
            environment when not given

    Examples:
        >>> registry = build_registry()
        >>> registry.lookup("clusters").list()
    """
    if settings is None:
        settings = Settings.load()
    executor = OperationExecutor(connect(settings), timeout=settings.timeout or None)
    schema = SchemaLoader().load_modules(settings.schema_modules)
    return ResourceRegistry(schema, executor)
