from __future__ import annotations

import sys
from typing import Any


def is_exported(name: str) -> bool:
    """Private names start with an underscore.

    >>> is_exported("Node"), is_exported("_node"), is_exported("__init__")
    (True, False, False)
    """
    return not name.startswith("_")


def declared_name(v: Any) -> str:
    """The name a class or function is declared under in its module."""
    qualname: str = getattr(v, "__qualname__", v.__name__)
    if "<locals>" in qualname:
        return str(v.__name__)
    return qualname


def _resolve(module: str, name: str) -> Any:
    obj: Any = sys.modules.get(module)
    for part in name.split("."):
        if obj is None:
            return None
        obj = getattr(obj, part, None)
    return obj


def public_module(v: Any) -> str:
    """Find the shortest imported module that exposes *v*.

    Implementation modules are replaced by the public module re-exporting
    their objects. Nothing gets imported: only modules already present in
    :data:`sys.modules` are considered.

      >>> import collections
      >>> public_module(collections.OrderedDict)
      'collections'
    """
    module: str = v.__module__
    name = declared_name(v)
    if _resolve(module, name) is not v:
        return module
    parts = module.split(".")
    candidates = [".".join(parts[:i]) for i in range(1, len(parts))]
    if parts[0].startswith("_"):
        candidates.insert(0, parts[0].lstrip("_"))
    for candidate in candidates:
        if candidate and _resolve(candidate, name) is v:
            return candidate
    return module
