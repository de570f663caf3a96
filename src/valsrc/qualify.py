"""``valsrc.qualify``: Naming types
=================================

Decide how a type (or any other module level name) is spelled in the output:

  >>> import collections
  >>> from valsrc import kinds, options
  >>> info = kinds.describe(collections.OrderedDict)
  >>> qualify(info, options.DEFAULT)
  'collections.OrderedDict'
  >>> qualify(info, options.Options(unqualify=True))
  'OrderedDict'
  >>> qualify(info, options.Options(package_path="collections"))
  'OrderedDict'

Types from :mod:`builtins` never get a prefix:

  >>> qualify(kinds.describe(dict), options.DEFAULT)
  'dict'

"""

from __future__ import annotations

from valsrc import kinds, options

__all__ = ("qualify", "qualify_name", "short_module", "is_local")


def short_module(module: str) -> str:
    """The last segment of a dotted module path.

    >>> short_module("xml.etree.ElementTree")
    'ElementTree'
    """
    return module.rsplit(".", 1)[-1]


def import_statement(module: str) -> str:
    """The statement binding *module* to the name used in qualified names.

    >>> import_statement("ctypes")
    'import ctypes'
    >>> import_statement("xml.etree.ElementTree")
    'from xml.etree import ElementTree'
    """
    package, _, name = module.rpartition(".")
    if not package:
        return f"import {name}"
    return f"from {package} import {name}"


def is_local(module: str, opts: options.Options) -> bool:
    "Is *module* the module the output is evaluated in?"
    if opts.package_path:
        return module == opts.package_path
    if opts.package_name:
        return short_module(module) == opts.package_name
    return False


def needs_prefix(module: str, opts: options.Options) -> bool:
    return not (
        module in ("builtins", "")
        or opts.unqualify
        or is_local(module, opts)
    )


def qualify_name(module: str, name: str, opts: options.Options) -> str:
    """Spell *name*, defined in *module*, for the given options."""
    if needs_prefix(module, opts):
        return f"{short_module(module)}.{name}"
    return name


def qualify(info: kinds.TypeInfo, opts: options.Options) -> str:
    """Spell a named type.

    Anonymous types have no name to qualify, they are spelled out by the
    formatter.
    """
    assert not info.anonymous, info
    return qualify_name(info.module, info.name, opts)
