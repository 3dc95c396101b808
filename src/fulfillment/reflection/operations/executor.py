"""
Operation execution utilities for the reflection client.

This module provides the transport that performs one unary gRPC call for a
method path, without needing generated stubs.
"""

import logging
from typing import Sequence

import grpc
from google.protobuf.message import Message

from ..utils.errors import ErrorHandler

logger = logging.getLogger(__name__)

Metadata = Sequence[tuple[str, str]]


def _serialize(message: Message) -> bytes:
    return message.SerializeToString()


class OperationExecutor:
    """
    Executor for unary gRPC calls with error handling.

    Requests are serialized with the message's own serializer and responses
    are returned as raw bytes, then merged into the response message supplied
    by the caller. That way the same executor serves every method of every
    service.
    """

    def __init__(
        self,
        channel: grpc.Channel,
        error_handler: ErrorHandler | None = None,
        timeout: float | None = None,
    ):
        """
        Initialize the operation executor.

        Args:
            channel: The gRPC channel to use for calls
            error_handler: ErrorHandler for converting gRPC errors
            timeout: Deadline in seconds used when a call doesn't give one
        """
        self.channel = channel
        self.error_handler = error_handler or ErrorHandler()
        self.timeout = timeout

    def invoke(
        self,
        path: str,
        request: Message,
        response: Message,
        *,
        timeout: float | None = None,
        metadata: Metadata | None = None,
    ) -> Message:
        """
        Invoke a unary method and populate the response message.

        Args:
            path: Method path (e.g. "/fulfillment.v1.Clusters/Get")
            request: Request message, already populated
            response: Blank response message of the right type, populated in place
            timeout: Deadline in seconds for this call
            metadata: Extra call metadata as (key, value) pairs

        Returns:
            The response message

        Raises:
            TransportError: If the call fails

        Examples:
            >>> executor = OperationExecutor(channel)
            >>> executor.invoke("/fulfillment.v1.Clusters/Get", request, response)
        """
        if timeout is None:
            timeout = self.timeout
        logger.debug(f"Invoking method {path}")
        call = self.channel.unary_unary(
            path,
            request_serializer=_serialize,
            response_deserializer=None,
        )
        try:
            data = call(request, timeout=timeout, metadata=metadata)
        except grpc.RpcError as e:
            raise self.error_handler.handle_error(e, path) from e
        response.MergeFromString(data)
        return response
