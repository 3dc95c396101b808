"""
Schema registry for the reflection client.

This module wraps a protocol buffers descriptor pool so that the rest of the
reflection layer can enumerate services and create blank messages without
depending on where the descriptors came from.
"""

import logging
from typing import Iterator

from google.protobuf import descriptor_pool, message_factory
from google.protobuf.descriptor import Descriptor, FileDescriptor, ServiceDescriptor
from google.protobuf.descriptor_pb2 import FileDescriptorProto
from google.protobuf.message import Message

logger = logging.getLogger(__name__)


class SchemaRegistry:
    """
    Registry of the protocol buffers files known to a client.

    The descriptor pool can resolve any type by name, but it can't enumerate
    its contents, so the registry keeps the ordered list of files that were
    registered explicitly. Services are enumerated from those files only.

    Unlike a global cache, each registry is owned by whoever created it. Tests
    typically use a private pool so they don't pollute the default one.
    """

    def __init__(self, pool: descriptor_pool.DescriptorPool | None = None):
        """
        Initialize the schema registry.

        Args:
            pool: Descriptor pool used to resolve types. Defaults to the pool
                that generated ``*_pb2`` modules register into.
        """
        self.pool = pool if pool is not None else descriptor_pool.Default()
        self._files: list[FileDescriptor] = []

    def add_file(self, file_descriptor: FileDescriptor) -> FileDescriptor:
        """
        Register a file descriptor that already lives in the pool.

        Registering the same file twice is a no-op.

        Examples:
            >>> from fulfillment.api.v1 import clusters_pb2
            >>> registry.add_file(clusters_pb2.DESCRIPTOR)
        """
        if any(f.name == file_descriptor.name for f in self._files):
            return file_descriptor
        logger.debug(f"Registering file {file_descriptor.name}")
        self._files.append(file_descriptor)
        return file_descriptor

    def add_file_proto(self, file_proto: FileDescriptorProto) -> FileDescriptor:
        """
        Add a file descriptor proto to the pool and register it.

        Dependencies must have been added to the pool before.
        """
        try:
            file_descriptor = self.pool.FindFileByName(file_proto.name)
        except KeyError:
            self.pool.AddSerializedFile(file_proto.SerializeToString())
            file_descriptor = self.pool.FindFileByName(file_proto.name)
        return self.add_file(file_descriptor)

    @property
    def files(self) -> list[FileDescriptor]:
        return list(self._files)

    def services(self) -> Iterator[ServiceDescriptor]:
        """
        Iterate the services of all registered files.

        Files are visited in registration order and services in declaration
        order. A service is yielded once even if its file was reached twice.
        """
        seen = set()
        for file_descriptor in self._files:
            for service in file_descriptor.services_by_name.values():
                if service.full_name in seen:
                    continue
                seen.add(service.full_name)
                yield service

    def find_message(self, full_name: str) -> Descriptor:
        """
        Find a message descriptor by fully qualified name.

        Raises:
            KeyError: If the pool doesn't know the type
        """
        return self.pool.FindMessageTypeByName(full_name)

    def new_message(self, full_name: str) -> Message:
        """
        Create a blank message of the given fully qualified type.

        Raises:
            KeyError: If the pool doesn't know the type

        Examples:
            >>> cluster = registry.new_message("fulfillment.v1.Cluster")
            >>> cluster.id = "123"
        """
        message_class = message_factory.GetMessageClass(self.find_message(full_name))
        return message_class()
