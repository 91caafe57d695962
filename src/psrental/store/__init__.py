"""Persistence layer.

Backends store opaque string documents; :class:`RentalStore` maps the
two rental documents onto typed models.
"""

from psrental.store.backends import FileBackend, KeyValueBackend, MemoryBackend
from psrental.store.documents import RentalStore

__all__ = ["FileBackend", "KeyValueBackend", "MemoryBackend", "RentalStore"]
