# relstore/__init__.py
"""relstore: keyed, valued relationships between integer vertices."""

from __future__ import annotations

from importlib import import_module
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version
from typing import Any

# Lazily exposed submodules (imported on first attribute access)
_lazy_submodules = {
    "core": "relstore.core",
}

# Curated top-level symbols (lazy). name -> (module, attribute)
_lazy_symbols: dict[str, tuple[str, str]] = {
    "RelationStore": ("relstore.core.store", "RelationStore"),
    "RelationEntry": ("relstore.core._helpers", "RelationEntry"),
    "RelationState": ("relstore.core._helpers", "RelationState"),
    "Direction": ("relstore.core._helpers", "Direction"),
    "EPSILON": ("relstore.core._helpers", "EPSILON"),
    "StoreDiff": ("relstore.core._StoreDiff", "StoreDiff"),
}

__all__ = sorted(set(list(_lazy_submodules) + list(_lazy_symbols)))


def __getattr__(name: str) -> Any:  # PEP 562: lazy attribute resolution
    if name in _lazy_submodules:
        return import_module(_lazy_submodules[name])
    if name in _lazy_symbols:
        mod, attr = _lazy_symbols[name]
        return getattr(import_module(mod), attr)
    raise AttributeError(name)


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(__all__))


try:
    __version__ = _pkg_version("relstore")
except PackageNotFoundError:
    __version__ = "0.0.0"
