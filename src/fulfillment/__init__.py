"""
Client for resource oriented gRPC services.

Main exports:
- build_registry: Connect to the configured server and return a ResourceRegistry
- Settings: Connection settings
"""

from .conf import Settings
from .connection import build_registry

__all__ = ["Settings", "build_registry"]
