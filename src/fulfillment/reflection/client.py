"""
Resource registry built on composition.

This module provides the ResourceRegistry, which composes the schema registry,
the resource discoverer, the pluralization service and the transport, and
gives consumers name based access to resource handles.
"""

import logging
import threading
from collections import defaultdict

from .operations.discovery import ResourceDiscoverer
from .operations.executor import OperationExecutor
from .operations.pluralization import PluralizationService
from .resources.descriptor import ResourceDescriptor
from .resources.handle import ResourceHandle, build_handle
from .schema.registry import SchemaRegistry

logger = logging.getLogger(__name__)


class ResourceRegistry:
    """
    Registry of the resource types supported by a server.

    Architecture:
    - SchemaRegistry: Enumerate the services and messages known to the client
    - ResourceDiscoverer: Find the services that follow the CRUD convention
    - PluralizationService: Compute the plural names of the resource types
    - OperationExecutor: Send requests over the gRPC channel
    - ResourceHandle: CRUD operations for one resource type

    Discovery happens once, the first time a read method is called. Concurrent
    first callers wait until it finishes and then all see the same resources.

    Usage:
        from fulfillment.reflection import ResourceRegistry, SchemaLoader
        from fulfillment.reflection.operations.executor import OperationExecutor

        schema = SchemaLoader().load_modules(["fulfillment.api.v1.clusters_pb2"])
        registry = ResourceRegistry(schema, OperationExecutor(channel))

        registry.plurals()  # ['clusters', ...]
        clusters = registry.lookup("clusters")
        cluster = clusters.get("123")
    """

    def __init__(
        self,
        schema: SchemaRegistry,
        executor: OperationExecutor,
        pluralizer: PluralizationService | None = None,
    ):
        """
        Initialize the resource registry.

        Args:
            schema: SchemaRegistry containing the services to scan
            executor: Transport used by the handles
            pluralizer: Optional PluralizationService

        Raises:
            ValueError: If the schema registry or the transport are missing
        """
        if schema is None:
            raise ValueError("schema registry is mandatory")
        if executor is None:
            raise ValueError("transport is mandatory")
        self.schema = schema
        self.executor = executor
        self._pluralizer = pluralizer or PluralizationService()

        # Published once by _discover_if_needed, never modified afterwards
        self._resources: tuple[ResourceDescriptor, ...] | None = None
        self._lock = threading.Lock()

    def _discover_if_needed(self) -> tuple[ResourceDescriptor, ...]:
        resources = self._resources
        if resources is not None:
            return resources
        with self._lock:
            if self._resources is None:
                discovered = ResourceDiscoverer(self.schema).discover()
                self._check_names(discovered)
                self._resources = tuple(discovered)
            return self._resources

    def _check_names(self, resources: list[ResourceDescriptor]) -> None:
        """Warn about names that more than one resource type answers to."""
        owners = defaultdict(list)
        for resource in resources:
            names = {resource.singular, self._pluralizer.pluralize(resource.singular)}
            for name in names:
                owners[name].append(resource.full_name)
        for name, full_names in sorted(owners.items()):
            if len(full_names) > 1:
                logger.warning(
                    f"Resource name '{name}' is ambiguous, it matches types "
                    f"{', '.join(full_names)}; lookups will return {full_names[0]}"
                )

    def singulars(self) -> list[str]:
        """
        Return the names of the resource types in singular.

        The names are in lower case, without duplicates and sorted.

        Examples:
            >>> registry.singulars()
            ['cluster', 'clusterorder', 'clustertemplate', 'hostclass']
        """
        return sorted({resource.singular for resource in self._discover_if_needed()})

    def plurals(self) -> list[str]:
        """
        Return the names of the resource types in plural.

        The names are in lower case, without duplicates and sorted.

        Examples:
            >>> registry.plurals()
            ['clusterorders', 'clusters', 'clustertemplates', 'hostclasses']
        """
        return sorted(
            {
                self._pluralizer.pluralize(resource.singular)
                for resource in self._discover_if_needed()
            }
        )

    def lookup(self, name: str) -> ResourceHandle | None:
        """
        Find a resource type by name, in singular or plural, ignoring case.

        Args:
            name: The name typed by the user (e.g. "cluster", "Clusters")

        Returns:
            A handle for the first matching resource type in discovery order,
            or None if there is no such type

        Examples:
            >>> registry.lookup("ClusterOrders").full_name
            'fulfillment.v1.ClusterOrder'
            >>> registry.lookup("junk") is None
            True
        """
        wanted = name.lower()
        for resource in self._discover_if_needed():
            singular = resource.singular
            if wanted == singular:
                return build_handle(resource, self.executor)
            if wanted == self._pluralizer.pluralize(singular):
                return build_handle(resource, self.executor)
        return None
