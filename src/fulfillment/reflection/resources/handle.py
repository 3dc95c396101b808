"""
CRUD operations for discovered resource types.

This module provides the per type façade that builds requests from the
compiled ResourceDescriptor and sends them through the transport.
"""

from typing import TYPE_CHECKING

from google.protobuf.descriptor import Descriptor
from google.protobuf.message import Message

from ..utils.errors import TransportError
from .descriptor import ResourceDescriptor, clone

if TYPE_CHECKING:
    from ..operations.executor import Metadata, OperationExecutor


class ResourceHandle:
    """
    Get, List, Update and Delete operations for one resource type.

    Every operation clones the request and response templates of the method,
    so handles can be shared between threads. Every operation performs exactly
    one remote call and never retries.
    """

    def __init__(self, resource: ResourceDescriptor, executor: "OperationExecutor"):
        """
        Initialize the handle.

        Args:
            resource: Compiled descriptor of the resource type
            executor: OperationExecutor used to send the requests
        """
        self.resource = resource
        self.executor = executor

    @property
    def descriptor(self) -> Descriptor:
        """Descriptor of the object message type."""
        return self.resource.descriptor

    @property
    def full_name(self) -> str:
        return self.resource.full_name

    @property
    def supports_create(self) -> bool:
        return False

    def __str__(self) -> str:
        return self.full_name

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.full_name}>"

    def instance(self) -> Message:
        """Return a new blank object of the resource type."""
        return clone(self.resource.template)

    def list(
        self,
        filter: str | None = None,
        *,
        timeout: float | None = None,
        metadata: "Metadata | None" = None,
    ) -> list[Message]:
        """
        List objects.

        Args:
            filter: Optional filter expression, sent only when not empty
            timeout: Deadline in seconds for the call
            metadata: Extra call metadata

        Returns:
            The objects, in the order returned by the server

        Raises:
            TransportError: If the call fails

        Examples:
            >>> clusters = registry.lookup("clusters")
            >>> clusters.list(filter="this.status.state == 'READY'")
        """
        info = self.resource.list
        request = info.method.new_request()
        if filter:
            info.filter.set_string(request, filter)
        response = self.executor.invoke(
            info.method.path,
            request,
            info.method.new_response(),
            timeout=timeout,
            metadata=metadata,
        )
        return info.items.get_list(response)

    def get(
        self,
        id: str,
        *,
        timeout: float | None = None,
        metadata: "Metadata | None" = None,
    ) -> Message:
        """
        Get one object by identifier.

        Raises:
            TransportError: If the call fails, including when the object
                doesn't exist
        """
        info = self.resource.get
        request = info.method.new_request()
        info.id.set_string(request, id)
        response = self.executor.invoke(
            info.method.path,
            request,
            info.method.new_response(),
            timeout=timeout,
            metadata=metadata,
        )
        return info.object.get(response)

    def update(
        self,
        object: Message,
        *,
        timeout: float | None = None,
        metadata: "Metadata | None" = None,
    ) -> Message:
        """
        Send an updated object and return the object stored by the server.

        Raises:
            TransportError: If the call fails, with the message prefixed by
                "failed to update object"
        """
        info = self.resource.update
        request = info.method.new_request()
        info.request_object.set_message(request, object)
        try:
            response = self.executor.invoke(
                info.method.path,
                request,
                info.method.new_response(),
                timeout=timeout,
                metadata=metadata,
            )
        except TransportError as e:
            raise e.wrap("failed to update object") from e
        return info.response_object.get(response)

    def delete(
        self,
        id: str,
        *,
        timeout: float | None = None,
        metadata: "Metadata | None" = None,
    ) -> None:
        """
        Delete one object by identifier.

        Raises:
            TransportError: If the call fails
        """
        info = self.resource.delete
        request = info.method.new_request()
        info.id.set_string(request, id)
        self.executor.invoke(
            info.method.path,
            request,
            info.method.new_response(),
            timeout=timeout,
            metadata=metadata,
        )


class CreatableResourceHandle(ResourceHandle):
    """Handle for resource types whose service also has a Create method."""

    @property
    def supports_create(self) -> bool:
        return True

    def create(
        self,
        object: Message,
        *,
        timeout: float | None = None,
        metadata: "Metadata | None" = None,
    ) -> Message:
        """
        Create an object and return it as stored by the server.

        Raises:
            TransportError: If the call fails, with the message prefixed by
                "failed to create object"
        """
        info = self.resource.create
        request = info.method.new_request()
        info.request_object.set_message(request, object)
        try:
            response = self.executor.invoke(
                info.method.path,
                request,
                info.method.new_response(),
                timeout=timeout,
                metadata=metadata,
            )
        except TransportError as e:
            raise e.wrap("failed to create object") from e
        return info.response_object.get(response)


def build_handle(
    resource: ResourceDescriptor, executor: "OperationExecutor"
) -> ResourceHandle:
    """Return the handle class matching the methods the resource has."""
    if resource.create is not None:
        return CreatableResourceHandle(resource, executor)
    return ResourceHandle(resource, executor)
