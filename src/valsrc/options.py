from __future__ import annotations

import dataclasses

__all__ = ("Options", "DEFAULT")


@dataclasses.dataclass(frozen=True, slots=True)
class Options:
    """Settings for :func:`valsrc.render_with_options`.

    Options are immutable and can be shared between threads.

    Attributes:

      unqualify(bool): Never prefix type names with their module. Values of
        the fixed width :mod:`ctypes` scalar types are printed as bare
        literals.

      package_name(str): Short name of the module the output is meant to be
        evaluated in. Only used when *package_path* is empty.

      package_path(str): Full dotted name of the module the output is meant to
        be evaluated in. Types defined in that module are printed without a
        prefix.

      exported_only(bool): Leave out struct fields, map entries and set
        elements that are private (their name starts with an underscore) or
        whose type is private.

      indent(int | None): Indentation used when a literal doesn't fit on one
        line. ``None`` prints everything on one line.

      width(int): Maximum line length.
    """

    unqualify: bool = False
    package_name: str = ""
    package_path: str = ""
    exported_only: bool = False
    indent: int | None = 4
    width: int = 80

    def __post_init__(self) -> None:
        if self.indent is not None and self.indent < 0:
            raise ValueError(f"indent must be positive, got {self.indent}")
        if self.width <= 0:
            raise ValueError(f"width must be positive, got {self.width}")


DEFAULT = Options()
