"""
Error handling utilities for the reflection client.

This module defines the exceptions raised by the reflection layer and the
handler that converts gRPC failures into them.
"""

import grpc


class ReflectionError(Exception):
    """Base class for all errors raised by the reflection layer."""


class SchemaInconsistencyError(ReflectionError):
    """
    The schema registry contradicts itself.

    Raised when a message type that a registered method declares as its input
    or output can't be resolved by full name. This is a schema build defect and
    aborts discovery.
    """


class TransportError(ReflectionError):
    """
    A remote call failed.

    Attributes:
        code: The ``grpc.StatusCode`` reported by the server, if any
        details: The status details reported by the server, if any
    """

    def __init__(
        self,
        message: str,
        code: grpc.StatusCode | None = None,
        details: str | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.details = details

    def wrap(self, prefix: str) -> "TransportError":
        """
        Return a new error with operation context prepended to the message.

        The status code and details are preserved, so callers can still branch
        on ``code`` after the error has been wrapped.

        Examples:
            >>> error = TransportError("not found", code=grpc.StatusCode.NOT_FOUND)
            >>> str(error.wrap("failed to update object"))
            'failed to update object: not found'
        """
        return TransportError(f"{prefix}: {self}", code=self.code, details=self.details)


class ErrorHandler:
    """
    Handler for converting gRPC errors to TransportError.

    The gRPC runtime raises ``grpc.RpcError`` (usually also a ``grpc.Call``
    carrying a status code and details). Callers of the reflection layer only
    need to know about ``TransportError``.
    """

    @staticmethod
    def handle_error(error: grpc.RpcError, path: str) -> TransportError:
        """
        Convert a gRPC error raised while invoking ``path``.

        Args:
            error: The error raised by the gRPC runtime
            path: The method path that was invoked

        Returns:
            The equivalent TransportError. The caller is expected to raise it
            chained from the original error.

        Examples:
            >>> handler = ErrorHandler()
            >>> raise handler.handle_error(error, "/fulfillment.v1.Clusters/Get") from error
        """
        code = None
        details = None
        if isinstance(error, grpc.Call):
            code = error.code()
            details = error.details()

        if code is not None:
            message = f"call to '{path}' failed with status {code.name}"
            if details:
                message = f"{message}: {details}"
        else:
            message = f"call to '{path}' failed: {error}"

        return TransportError(message, code=code, details=details)
