from __future__ import annotations

import dataclasses
import logging
from typing import Any

from valsrc import qualify
from valsrc.formatter import Formatter
from valsrc.options import DEFAULT, Options

__all__ = ("Result", "render", "render_with_options", "render_result")

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class Result:
    """The output of :func:`render_result`.

    Attributes:
      text(str): The python expression.
      imports(tuple[str, ...]): Modules that need to be imported (under their
        short name) for *text* to evaluate.
      omitted_unexported(bool): Some private data was dropped or replaced.
      requires_unexported(bool): *text* refers to a private name.
    """

    text: str
    imports: tuple[str, ...] = ()
    omitted_unexported: bool = False
    requires_unexported: bool = False

    def source(self) -> str:
        """A python snippet with the imports and the expression.

          >>> import fractions
          >>> print(render_result([fractions.Fraction(1, 3)]).source())
          import fractions
          [fractions.Fraction(1, 3)]
        """
        lines = [qualify.import_statement(module) for module in self.imports]
        lines.append(self.text)
        return "\n".join(lines)

    # Display with syntax highlighting in ipython
    def _repr_html_(self) -> str:
        from valsrc import _ipy_utils

        style = _ipy_utils.get_highlight_style()
        return f"<style>{style}</style>{_ipy_utils.highlight(self.source())}"


def render_result(value: Any, options: Options | None = None) -> Result:
    """Like :func:`render_with_options` but also report what the text needs.

      >>> import collections
      >>> res = render_result(collections.OrderedDict(a=1))
      >>> res.text
      "collections.OrderedDict({'a': 1})"
      >>> res.imports
      ('collections',)
    """
    if options is None:
        options = DEFAULT
    formatter = Formatter(options)
    text = formatter.render(value)
    if formatter.omitted_unexported:
        logger.debug("Private data left out of the output")
    return Result(
        text=text,
        imports=tuple(sorted(formatter.imports)),
        omitted_unexported=formatter.omitted_unexported,
        requires_unexported=formatter.requires_unexported,
    )


def render_with_options(value: Any, options: Options | None = None) -> str:
    """Convert *value* to a python expression.

      >>> import ctypes
      >>> render_with_options(ctypes.c_int32(1234))
      'ctypes.c_int32(1234)'
      >>> render_with_options(ctypes.c_int32(1234), Options(unqualify=True))
      '1234'

    Args:
      value: The value to print.
      options(Options | None): ``None`` uses the default options.

    Raises:
      UnsupportedKindError: if *value* contains something we don't know how
        to print.
    """
    return render_result(value, options).text


def render(value: Any) -> str:
    """Convert *value* to a python expression using the default options.

      >>> render(True)
      'True'
      >>> print(render({"b": 2, "a": 1.5}))
      {'a': 1.5, 'b': 2}
    """
    return render_with_options(value, None)

