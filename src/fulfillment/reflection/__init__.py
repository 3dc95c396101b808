"""
Generic client for resource oriented gRPC services.

This package discovers, from protocol buffers descriptors, which message types
are resources managed through the conventional Get, List, Update, Delete (and
optionally Create) methods, and offers those operations for every type without
resource specific code.

Main exports:
- ResourceRegistry: Name based access to the discovered resource types
- SchemaLoader, SchemaRegistry: Schema management
- OperationExecutor: gRPC transport

Components (for advanced usage):
- ResourceDiscoverer: Matching of services against the CRUD convention
- PluralizationService: English pluralization of resource names
- ResourceHandle, CreatableResourceHandle: CRUD operations
- ErrorHandler: Conversion of gRPC errors
"""

from .client import ResourceRegistry
from .operations.executor import OperationExecutor
from .resources.handle import CreatableResourceHandle, ResourceHandle
from .schema.loader import SchemaLoader
from .schema.registry import SchemaRegistry
from .utils.errors import (
    ReflectionError,
    SchemaInconsistencyError,
    TransportError,
)

__all__ = [
    "CreatableResourceHandle",
    "OperationExecutor",
    "ReflectionError",
    "ResourceHandle",
    "ResourceRegistry",
    "SchemaInconsistencyError",
    "SchemaLoader",
    "SchemaRegistry",
    "TransportError",
]
