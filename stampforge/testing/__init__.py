"""Testing utilities for StampForge."""

from .factory import ActorFactory, CardDesignFactory, write_assets
from .fixtures import app_fixture, memory_app
from .test_client import TestClient

__all__ = [
    "ActorFactory",
    "CardDesignFactory",
    "write_assets",
    "app_fixture",
    "memory_app",
    "TestClient",
]
