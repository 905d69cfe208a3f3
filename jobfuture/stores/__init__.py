from __future__ import annotations

from .local import LocalStore
from .remote import RemoteStore

__all__ = ["LocalStore", "RemoteStore"]
