"""
Schema loading utilities for the reflection client.

This module provides utilities for populating a SchemaRegistry from generated
``*_pb2`` modules or from serialized descriptor sets.
"""

import importlib
import logging
from pathlib import Path
from types import ModuleType
from typing import Iterable

from google.protobuf.descriptor_pb2 import FileDescriptorProto, FileDescriptorSet

from .registry import SchemaRegistry

logger = logging.getLogger(__name__)


class SchemaLoader:
    """
    Loader for protocol buffers schemas.

    Schemas can come from three places:
    - Generated ``*_pb2`` modules, imported by name. Importing them registers
      their descriptors in the default pool as a side effect.
    - A binary ``FileDescriptorSet``, as written by
      ``protoc --include_imports --descriptor_set_out=...``.
    - ``FileDescriptorProto`` objects built in memory.
    """

    def __init__(self, registry: SchemaRegistry | None = None):
        """
        Initialize the schema loader.

        Args:
            registry: Registry to populate. A new one over the default pool is
                created if not given.
        """
        self.registry = registry if registry is not None else SchemaRegistry()

    def load_modules(self, names: Iterable[str]) -> SchemaRegistry:
        """
        Import generated modules by name and register their files.

        Args:
            names: Dotted module names (e.g. "fulfillment.api.v1.clusters_pb2")

        Returns:
            The populated registry

        Raises:
            ImportError: If a module can't be imported
            ValueError: If a module isn't a generated protocol buffers module
        """
        for name in names:
            logger.debug(f"Importing schema module {name}")
            module = importlib.import_module(name)
            self.load_module(module)
        return self.registry

    def load_module(self, module: ModuleType) -> SchemaRegistry:
        """Register the file descriptor of an already imported ``*_pb2`` module."""
        file_descriptor = getattr(module, "DESCRIPTOR", None)
        if file_descriptor is None:
            raise ValueError(
                f"Module '{module.__name__}' doesn't look like a generated protocol "
                f"buffers module, it has no 'DESCRIPTOR' attribute"
            )
        self.registry.add_file(file_descriptor)
        return self.registry

    def load_descriptor_set(self, path: str | Path) -> SchemaRegistry:
        """
        Load a serialized FileDescriptorSet from disk.

        Files in the set must be in dependency order, which is what ``protoc``
        produces when ``--include_imports`` is used.
        """
        path = Path(path)
        logger.debug(f"Loading descriptor set from {path}")
        descriptor_set = FileDescriptorSet.FromString(path.read_bytes())
        return self.load_file_protos(descriptor_set.file)

    def load_file_protos(self, file_protos: Iterable[FileDescriptorProto]) -> SchemaRegistry:
        """Add file descriptor protos to the pool and register them, in order."""
        for file_proto in file_protos:
            self.registry.add_file_proto(file_proto)
        return self.registry
