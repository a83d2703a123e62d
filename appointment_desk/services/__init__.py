"""Service package public API definitions.

The HTTP client imports ``appointment_desk.services.exceptions``, which runs
this module first. Importing the service implementations eagerly here would
pull ``appointment_desk.clients.gateway`` back in and cause a circular
import, so they are resolved lazily on first attribute access.
"""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

__all__ = [
    "AppointmentService",
    "AppointmentTableView",
    "CollectionStateStore",
    "FetchLifecycleController",
    "OptimisticDeleteCoordinator",
]

_SERVICE_MODULES = {
    "AppointmentService": "appointment",
    "AppointmentTableView": "table_view",
    "CollectionStateStore": "store",
    "FetchLifecycleController": "fetch",
    "OptimisticDeleteCoordinator": "deletion",
}


def __getattr__(name: str) -> Any:
    if name not in _SERVICE_MODULES:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module = import_module(f".{_SERVICE_MODULES[name]}", __name__)
    attr = getattr(module, name)
    globals()[name] = attr
    return attr


if TYPE_CHECKING:  # pragma: no cover - import for static analysis only
    from .appointment import AppointmentService as AppointmentService
    from .deletion import OptimisticDeleteCoordinator as OptimisticDeleteCoordinator
    from .fetch import FetchLifecycleController as FetchLifecycleController
    from .store import CollectionStateStore as CollectionStateStore
    from .table_view import AppointmentTableView as AppointmentTableView
