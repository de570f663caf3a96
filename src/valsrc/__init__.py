"""Print python values as python expressions

:mod:`valsrc` converts values to the source of an expression that evaluates
back to an equal value:

  >>> import dataclasses
  >>> @dataclasses.dataclass
  ... class Point:
  ...     x: int
  ...     y: float
  >>> print(render_with_options([Point(1, 2.5)], Options(unqualify=True)))
  [Point(x=1, y=2.5)]

Values that cannot be rebuilt (functions, queues, reference cycles and private
data when printing with ``exported_only``) are replaced by placeholders of the
right type instead of raising an error.
"""
from __future__ import annotations

from importlib import metadata

from .api import Result, render, render_result, render_with_options
from .kinds import Kind, UnsupportedKindError
from .options import Options
from .reducers import register

# https://packaging.python.org/en/latest/guides/single-sourcing-package-version/
__version__ = metadata.version(__name__)

__all__ = (
    "Kind",
    "Options",
    "Result",
    "UnsupportedKindError",
    "register",
    "render",
    "render_result",
    "render_with_options",
)
