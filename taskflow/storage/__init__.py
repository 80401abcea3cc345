"""Backend strategies for persisting task and category collections."""

from taskflow.storage.base import StorageBackend
from taskflow.storage.factory import build_backends
from taskflow.storage.local import LocalBackend
from taskflow.storage.remote import RemoteBackend


__all__ = [
    "LocalBackend",
    "RemoteBackend",
    "StorageBackend",
    "build_backends",
]
