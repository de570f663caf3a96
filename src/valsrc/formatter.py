"""``valsrc.formatter``: From values to literals
=============================================

The :class:`Formatter` walks a value and builds a :class:`~valsrc.pretty.Doc`
that evaluates back to the value. One formatter is used per top level call: it
owns the :class:`~valsrc.guard.CycleGuard` and records which modules the text
refers to.

Python containers and attributes hold values of any type, the formatter prints
the dynamic type of what it finds there. :mod:`ctypes` structures and arrays
declare the type of their slots: plain values stored in them are printed
without any conversion.

"""

from __future__ import annotations

import builtins
import collections
import ctypes
import dataclasses
import keyword
import logging
import math
import struct
import types
from typing import Any, Callable, Iterable, Iterator

from valsrc import kinds, pretty, qualify, reducers, strings, utils
from valsrc.guard import CDATA, CycleGuard
from valsrc.kinds import Kind, TypeInfo
from valsrc.options import Options

__all__ = (
    "Formatter",
    "format_float",
    "format_float32",
    "format_complex",
)

logger = logging.getLogger(__name__)

NONE = pretty.text("None")
COL_SEP = pretty.text(",") + pretty.BREAK
FLAT_SEP = pretty.text(", ")

#: Functions cannot be rebuilt, they are replaced by a function that does
#: nothing.
FUNC_PLACEHOLDER = pretty.text("(lambda *args, **kwargs: None)")

# Python's builtin containers and their empty values.
_EMPTY = {
    list: "[]",
    tuple: "()",
    dict: "{}",
    set: "set()",
    frozenset: "frozenset()",
}


def format_float(x: float) -> str:
    """
    >>> format_float(0.1), format_float(-math.inf)
    ('0.1', '-float("inf")')
    """
    if math.isnan(x):
        return 'float("nan")'
    if math.isinf(x):
        return 'float("inf")' if x > 0 else '-float("inf")'
    return repr(x)


def _to_float32(x: float) -> float:
    res: float = struct.unpack("f", struct.pack("f", x))[0]
    return res


def format_float32(x: float) -> str:
    """The shortest literal that rounds to the single precision float *x*.

    >>> ctypes.c_float(1.234).value
    1.2339999675750732
    >>> format_float32(ctypes.c_float(1.234).value)
    '1.234'
    """
    if not math.isfinite(x):
        return format_float(x)
    # 9 significant digits are always enough for single precision floats
    for digits in range(1, 10):
        candidate = float(f"{x:.{digits}g}")
        try:
            if _to_float32(candidate) == x:
                return repr(candidate)
        except OverflowError:
            continue
    return repr(x)


def _plain(part: float) -> bool:
    "Can *part* be written in a native complex literal?"
    if not math.isfinite(part):
        return False
    # `-0.0 + 1j` evaluates to `0.0 + 1j`
    return part != 0 or math.copysign(1.0, part) > 0


def format_complex(
    c: complex, format_part: Callable[[float], str] = format_float
) -> str:
    """
    >>> format_complex(complex(1.5, -2))
    '(1.5-2.0j)'
    >>> format_complex(complex(-0.0, 1))
    'complex(-0.0, 1.0)'
    """
    re, im = c.real, c.imag
    if _plain(re) and _plain(im):
        sign = "+" if im >= 0 else "-"
        return f"({format_part(re)}{sign}{format_part(abs(im))}j)"
    return f"complex({format_part(re)}, {format_part(im)})"


def _ctypes_base(tp: type[Any]) -> type[Any] | None:
    "The fundamental ctypes type *tp* derives from"
    for cls in tp.__mro__:
        if cls.__module__ == "ctypes" and issubclass(cls, ctypes._SimpleCData):
            return cls
    return None


def _builtin_base(tp: type[Any]) -> type[Any]:
    "The builtin type *tp* derives from"
    for cls in tp.__mro__:
        if cls.__module__ == "builtins" and cls is not object:
            return cls
    return object


def _demotable(info: TypeInfo) -> bool:
    """Can values of this type be printed as a value of a public base type?"""
    if info.kind in kinds.SCALARS or info.kind in (
        Kind.INTERFACE,
        Kind.UNSAFE_POINTER,
    ):
        return True
    return info.kind in (
        Kind.ARRAY,
        Kind.SLICE,
        Kind.MAP,
        Kind.SET,
    ) and not issubclass(info.type, CDATA)


def _raw_scalar(value: Any, kind: Kind) -> Any:
    "Strip *value* down to a builtin python value"
    if isinstance(value, ctypes._SimpleCData):
        return value.value
    match kind:
        case Kind.BOOL:
            return bool(value)
        case Kind.FLOAT64:
            return float.__float__(value)
        case Kind.COMPLEX128:
            return complex(value.real, value.imag)
        case Kind.STRING:
            return str.__str__(value)
        case Kind.BYTES:
            return bytes(memoryview(value))
    assert kind in kinds.INTEGERS, kind
    return int.__int__(value)


def _is_kwarg(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name)


def _needs_arguments(value: Any) -> bool:
    "Does the dataclass *value* have fields without defaults?"
    return any(
        f.init
        and f.default is dataclasses.MISSING
        and f.default_factory is dataclasses.MISSING
        for f in dataclasses.fields(value)
    )


class Formatter:
    """Convert values to documents.

    Attributes:
      options(Options):
      guard(CycleGuard): The references on the current path.
      imports(set[str]): Modules referenced by the qualified names printed so
        far.
      omitted_unexported(bool): Some private data was left out.
      requires_unexported(bool): Some private name was printed.
    """

    options: Options
    guard: CycleGuard
    imports: set[str]
    omitted_unexported: bool
    requires_unexported: bool

    def __init__(self, options: Options) -> None:
        self.options = options
        self.guard = CycleGuard()
        self.imports = set()
        self.omitted_unexported = False
        self.requires_unexported = False

    def render(self, value: Any) -> str:
        doc = self.format(value)
        if self.options.indent is None:
            return pretty.flatten(doc)
        return doc.to_string(self.options.width)

    # Naming

    def spell(self, module: str, name: str) -> str:
        """Spell a module level name, recording the import it needs."""
        if qualify.needs_prefix(module, self.options):
            self.imports.add(module)
        return qualify.qualify_name(module, name, self.options)

    def name(self, info: TypeInfo) -> str:
        if not info.exported:
            self.requires_unexported = True
        if qualify.needs_prefix(info.module, self.options):
            self.imports.add(info.module)
        return qualify.qualify(info, self.options)

    def type_expr(self, info: TypeInfo) -> str:
        """An expression evaluating to the type described by *info*."""
        if not info.anonymous:
            return self.name(info)
        assert info.elem is not None, info
        elem = self.type_expr(info.elem)
        if info.kind is Kind.POINTER:
            return f"{self.spell('ctypes', 'POINTER')}({elem})"
        return f"({elem} * {info.length})"

    # Visibility

    def _is_private(self, v: Any) -> bool:
        if isinstance(v, type):
            parts = utils.declared_name(v).split(".")
            return not all(utils.is_exported(part) for part in parts)
        return not kinds.describe(type(v)).exported

    def _hidden(self, v: Any) -> bool:
        """Should *v* be left out altogether?"""
        if not self.options.exported_only:
            return False
        if isinstance(v, type):
            return self._is_private(v)
        info = kinds.describe(type(v))
        return not info.exported and not _demotable(info)

    def _omit(self, msg: str, *args: Any) -> None:
        logger.debug(msg, *args)
        self.omitted_unexported = True

    # Layout

    def bracket(
        self, opar: str, items: Iterable[pretty.Doc], cpar: str
    ) -> pretty.Doc:
        docs = list(items)
        if not docs:
            return pretty.text(opar + cpar)
        if self.options.indent is None:
            return (
                pretty.text(opar)
                + pretty.join(FLAT_SEP, docs)
                + pretty.text(cpar)
            )
        body = pretty.nest(
            self.options.indent,
            pretty.SOFT_BREAK + pretty.join(COL_SEP, docs),
        )
        return pretty.group(
            pretty.text(opar) + body + pretty.SOFT_BREAK + pretty.text(cpar)
        )

    def call(self, ctor: str, docs: Iterable[pretty.Doc]) -> pretty.Doc:
        return self.bracket(f"{ctor}(", docs, ")")

    # Formatting

    def format(self, value: Any, static: TypeInfo | None = None) -> pretty.Doc:
        """Convert *value* into a document.

        Args:
          value: The value to print.
          static: The declared type of the ctypes slot *value* was read from.
            ``None`` for python slots, which accept anything.
        """
        if static is None or static.kind is Kind.INTERFACE:
            return self._format_dynamic(value)
        if value is None:
            return NONE
        if isinstance(value, ctypes._Pointer) and not value:
            return NONE
        if static.kind is Kind.UNSAFE_POINTER and type(value) is int:
            return pretty.text(hex(value))
        if static.kind is Kind.FLOAT32 and type(value) is float:
            return pretty.text(format_float32(value))
        if static.kind is Kind.COMPLEX64 and type(value) is complex:
            return pretty.text(format_complex(value, format_float32))
        if (
            self.options.exported_only
            and static.kind in kinds.SCALARS
            and not static.exported
            and isinstance(value, ctypes._SimpleCData)
        ):
            # The slot only takes its own type or a plain value.
            self._omit("Printing private %s as a plain value", static.name)
            raw = _raw_scalar(value, static.kind)
            return pretty.text(self._literal(static.kind, raw))
        return self._format_dynamic(value)

    def _format_dynamic(self, value: Any, pointee: bool = False) -> pretty.Doc:
        info = kinds.describe(type(value))
        if self._hidden(value):
            self._omit("Replacing private %s value with None", info.name)
            return NONE
        demoted = self.options.exported_only and not info.exported
        if demoted:
            self._omit("Printing private %s as its base type", info.name)
        match info.kind:
            case Kind.NIL:
                return NONE
            case Kind.UNSAFE_POINTER:
                return self._format_unsafe_pointer(value, info, demoted)
            case Kind.INTERFACE:
                return self._format_box(value, info, demoted)
            case kind if kind in kinds.SCALARS:
                return self._format_scalar(value, info, demoted, pointee)
            case Kind.POINTER:
                return self._format_pointer(value, info)
            case Kind.STRUCT if isinstance(value, ctypes.Structure):
                if pointee:
                    # Already entered by the pointer
                    return self._format_struct(value, info)
                with self.guard.visiting(value) as cyclic:
                    if cyclic:
                        logger.debug("Cycle through a %s value", info.name)
                        return self._zero(value, info, demoted)
                    return self._format_struct(value, info)
            case Kind.ARRAY if isinstance(value, ctypes.Array):
                return self._format_ctypes_array(value, info)
            case kind if kind in kinds.REFERENCES:
                with self.guard.visiting(value) as cyclic:
                    if cyclic:
                        logger.debug("Cycle through a %s value", info.name)
                        return self._zero(value, info, demoted)
                    return self._format_reference(value, info, demoted)
            case Kind.CHANNEL:
                return self._format_channel(value, info)
            case Kind.FUNC:
                return FUNC_PLACEHOLDER
            case Kind.TYPE:
                return self._format_type(value)
            case Kind.ENUM:
                return self._format_enum(value, info)
            case Kind.CUSTOM:
                return self._format_custom(value)
        # classify only returns kinds handled above
        raise kinds.UnsupportedKindError(  # pragma: no cover
            f"unsupported kind: {info.kind.value}"
        )

    def _format_reference(
        self, value: Any, info: TypeInfo, demoted: bool
    ) -> pretty.Doc:
        match info.kind:
            case Kind.STRUCT:
                return self._format_struct(value, info)
            case Kind.ARRAY | Kind.SLICE:
                return self._format_sequence(value, info, demoted)
            case Kind.MAP:
                return self._format_map(value, info, demoted)
            case Kind.SET:
                return self._format_set(value, info, demoted)
        raise AssertionError(info)  # pragma: no cover

    def _zero(self, value: Any, info: TypeInfo, demoted: bool) -> pretty.Doc:
        """An empty value of the same type as *value*."""
        if info.builtin or demoted:
            return pretty.text(_EMPTY[_builtin_base(info.type)])
        name = self.name(info)
        if info.kind is Kind.STRUCT:
            if isinstance(value, tuple):
                return pretty.text(f"tuple.__new__({name})")
            if dataclasses.is_dataclass(value) and _needs_arguments(value):
                return pretty.text(f"{name}.__new__({name})")
        return pretty.text(f"{name}()")

    # Scalars

    def _literal(self, kind: Kind, raw: Any) -> str:
        if raw is None:
            # NULL c_char_p and c_wchar_p
            return "None"
        match kind:
            case Kind.BOOL:
                return repr(bool(raw))
            case Kind.FLOAT32:
                return format_float32(raw)
            case Kind.FLOAT64:
                return format_float(raw)
            case Kind.COMPLEX64:
                return format_complex(raw, format_float32)
            case Kind.COMPLEX128:
                return format_complex(raw)
            case Kind.STRING:
                return strings.render_string(raw)
            case Kind.BYTES:
                return strings.render_bytes(raw)
        assert kind in kinds.INTEGERS, kind
        return repr(int(raw))

    def _format_scalar(
        self, value: Any, info: TypeInfo, demoted: bool, pointee: bool
    ) -> pretty.Doc:
        lit = self._literal(info.kind, _raw_scalar(value, info.kind))
        target = info
        if demoted:
            base = _ctypes_base(info.type)
            if base is None:
                base = _builtin_base(info.type)
            target = kinds.describe(base)
        if target.builtin:
            if issubclass(target.type, bytearray):
                return pretty.text(f"bytearray({lit})")
            return pretty.text(lit)
        if target.predeclared and self.options.unqualify and not pointee:
            return pretty.text(lit)
        return pretty.text(f"{self.name(target)}({lit})")

    def _base_ctypes_name(self, info: TypeInfo, demoted: bool) -> str:
        if demoted:
            base = _ctypes_base(info.type)
            assert base is not None, info
            return self.name(kinds.describe(base))
        return self.name(info)

    def _format_unsafe_pointer(
        self, value: Any, info: TypeInfo, demoted: bool
    ) -> pretty.Doc:
        name = self._base_ctypes_name(info, demoted)
        return pretty.text(f"{name}({hex(value.value or 0)})")

    def _format_box(
        self, value: Any, info: TypeInfo, demoted: bool
    ) -> pretty.Doc:
        name = self._base_ctypes_name(info, demoted)
        try:
            inner = value.value
        except ValueError:
            # NULL: the typed nil of the box
            return pretty.text(f"{name}()")
        return self.call(name, [self._format_dynamic(inner)])

    # ctypes composites

    def _format_pointer(self, value: Any, info: TypeInfo) -> pretty.Doc:
        if not value:
            return pretty.text(f"{self.type_expr(info)}()")
        if info.anonymous:
            ctor = self.spell("ctypes", "pointer")
        else:
            ctor = self.name(info)
        contents = value.contents
        with self.guard.visiting(contents) as cyclic:
            if cyclic:
                elem = kinds.describe(type(contents))
                logger.debug("Cycle through a pointer to %s", elem.name)
                pointee = pretty.text(f"{self.type_expr(elem)}()")
            else:
                pointee = self._format_dynamic(contents, pointee=True)
        return self.call(ctor, [pointee])

    def _format_ctypes_array(self, value: Any, info: TypeInfo) -> pretty.Doc:
        elem = kinds.describe(type(value)._type_)
        docs = []
        for i in range(len(value)):
            try:
                item = value[i]
            except ValueError:
                # NULL py_object
                docs.append(NONE)
                continue
            docs.append(self.format(item, elem))
        return self.call(self.type_expr(info), docs)

    # Python composites

    def _format_sequence(
        self, value: Any, info: TypeInfo, demoted: bool
    ) -> pretty.Doc:
        docs = [self.format(v) for v in value]
        if isinstance(value, tuple):
            if len(docs) == 1:
                docs[0] += pretty.text(",")
            display = self.bracket("(", docs, ")")
        else:
            display = self.bracket("[", docs, "]")
        if info.builtin or demoted:
            return display
        return self.call(self.name(info), [display] if docs else [])

    def _dict_display(
        self, entries: list[tuple[pretty.Doc, pretty.Doc]]
    ) -> pretty.Doc:
        return self.bracket(
            "{", (k + pretty.text(": ") + v for k, v in entries), "}"
        )

    def _format_map(
        self, value: Any, info: TypeInfo, demoted: bool
    ) -> pretty.Doc:
        entries = []
        for k, v in value.items():
            if self.options.exported_only and (
                self._is_private(k) or self._is_private(v)
            ):
                self._omit("Omitting map entry of private type")
                continue
            entries.append((self.format(k), self.format(v)))
        if not isinstance(value, collections.OrderedDict):
            entries.sort(key=lambda kv: pretty.flatten(kv[0]))
        display = self._dict_display(entries)
        if info.builtin or demoted:
            return display
        name = self.name(info)
        if isinstance(value, collections.defaultdict):
            factory = self.format(value.default_factory)
            args = [factory, display] if entries else [factory]
            return self.call(name, args)
        return self.call(name, [display] if entries else [])

    def _format_set(
        self, value: Any, info: TypeInfo, demoted: bool
    ) -> pretty.Doc:
        docs = []
        for v in value:
            if self.options.exported_only and self._is_private(v):
                self._omit("Omitting set element of private type")
                continue
            docs.append(self.format(v))
        docs.sort(key=pretty.flatten)
        display = self.bracket("{", docs, "}")
        if info.builtin or demoted:
            base = _builtin_base(info.type)
            if base is set:
                return display if docs else pretty.text("set()")
            name = base.__name__
        else:
            name = self.name(info)
        return self.call(name, [display] if docs else [])

    def _struct_fields(
        self, value: Any
    ) -> Iterator[tuple[str, Any, TypeInfo | None]]:
        if isinstance(value, ctypes.Structure):
            for cls in reversed(type(value).__mro__):
                for field in cls.__dict__.get("_fields_", ()):
                    name, ctype = field[0], field[1]
                    try:
                        v = getattr(value, name)
                    except ValueError:
                        # NULL py_object, left to its zero value
                        continue
                    yield name, v, kinds.describe(ctype)
        elif dataclasses.is_dataclass(value):
            for f in dataclasses.fields(value):
                if f.init:
                    yield f.name, getattr(value, f.name), None
        elif isinstance(value, tuple):
            for name in value._fields:
                yield name, getattr(value, name), None
        else:
            for name, v in vars(value).items():
                yield name, v, None

    def _format_struct(self, value: Any, info: TypeInfo) -> pretty.Doc:
        name = self.name(info)
        docs: list[pretty.Doc] = []
        extra: list[tuple[pretty.Doc, pretty.Doc]] = []
        for field, v, static in self._struct_fields(value):
            exported = utils.is_exported(field)
            if self.options.exported_only and (
                not exported or self._hidden(v)
            ):
                self._omit("Omitting field %r of %s", field, info.name)
                continue
            if not exported:
                self.requires_unexported = True
            doc = self.format(v, static)
            if _is_kwarg(field):
                docs.append(pretty.text(f"{field}=") + doc)
            else:
                extra.append((pretty.text(repr(field)), doc))
        if extra:
            docs.append(pretty.text("**") + self._dict_display(extra))
        return self.call(name, docs)

    # Everything else

    def _format_channel(self, value: Any, info: TypeInfo) -> pretty.Doc:
        name = self.name(info)
        maxsize = getattr(value, "maxsize", 0)
        if maxsize > 0:
            return pretty.text(f"{name}(maxsize={maxsize})")
        return pretty.text(f"{name}()")

    def _format_type(self, cls: type[Any]) -> pretty.Doc:
        if cls is types.NoneType:
            return pretty.text("type(None)")
        if issubclass(cls, ctypes._Pointer | ctypes.Array) and hasattr(
            cls, "_type_"
        ):
            info = kinds.describe(cls)
            if info.anonymous:
                return pretty.text(self.type_expr(info))
        module = utils.public_module(cls)
        name = utils.declared_name(cls)
        if module == "builtins" and getattr(builtins, name, None) is not cls:
            for attr, v in vars(types).items():
                if v is cls:
                    return pretty.text(self.spell("types", attr))
            raise kinds.UnsupportedKindError(
                f"unsupported kind: no public name for {cls!r}"
            )
        if self._is_private(cls):
            self.requires_unexported = True
        return pretty.text(self.spell(module, name))

    def _format_enum(self, value: Any, info: TypeInfo) -> pretty.Doc:
        cls = self.name(info)
        if value.name is None:
            return self.call(cls, [self.format(value.value)])
        return pretty.text(
            " | ".join(f"{cls}.{part}" for part in value.name.split("|"))
        )

    def _format_custom(self, value: Any) -> pretty.Doc:
        reducer = reducers.get_reducer(type(value))
        fn, args, kwargs = reducer(value)
        ctor = self.spell(utils.public_module(fn), utils.declared_name(fn))
        docs = [self.format(arg) for arg in args]
        docs.extend(
            pretty.text(f"{k}=") + self.format(v) for k, v in kwargs.items()
        )
        return self.call(ctor, docs)
