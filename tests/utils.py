from __future__ import annotations

import importlib
import sys
from typing import Any

import valsrc


def namespace(result, module=None):
    """The globals *result* needs to evaluate.

    Names from *module* (the module the output was rendered for) are in scope,
    and every module in the result's imports is bound to its short name.
    """
    ns = {}
    if module is not None:
        ns.update(vars(sys.modules[module]))
    for path in result.imports:
        ns[path.rsplit(".", 1)[-1]] = importlib.import_module(path)
    return ns


def evaluate(result, module=None) -> Any:
    return eval(result.text, namespace(result, module))


def roundtrip(value, module=None, **kwargs):
    """Render *value* and evaluate the output."""
    if module is not None:
        kwargs.setdefault("package_path", module)
    result = valsrc.render_result(value, valsrc.Options(**kwargs))
    return evaluate(result, module)


class InstanceOf:
    """Utility class to check that a given value is an instance of a class."""

    def __init__(self, ty):
        self.ty = ty

    def __eq__(self, x):
        return isinstance(x, self.ty)
