"""TypeScript representations of built-in value types and containers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Sequence

MAX_TUPLE_ARITY = 10


@dataclass(frozen=True, order=True)
class Dependency:
    """A TypeScript type that another type depends on, used to build imports."""

    ts_name: str
    exported_to: str
    type_id: Any = field(default=None, compare=False)

    @classmethod
    def from_ty(cls, ty: TS) -> Dependency | None:
        """Build a dependency on ``ty``, or return None if it is not exportable."""
        exported_to = ty.export_to
        if exported_to is None:
            return None
        return cls(ts_name=ty.name(), exported_to=exported_to, type_id=ty)


def _collect(*types: TS) -> list[Dependency]:
    return [dep for dep in map(Dependency.from_ty, types) if dep is not None]


def _expect_args(args: Sequence[str], count: int, owner: str) -> None:
    if len(args) != count:
        raise ValueError(
            f"called {owner}.name_with_type_args with {len(args)} args"
        )


class TS(ABC):
    """A type that can be represented in TypeScript."""

    export_to: str | None = None

    def decl(self) -> str:
        """Declaration of this type, e.g. ``interface User { .. }``."""
        raise TypeError(f"{self.name()} cannot be declared")

    @abstractmethod
    def name(self) -> str:
        """Name of this type in TypeScript."""

    def name_with_type_args(self, args: Sequence[str]) -> str:
        """Name of this type with the given formatted type arguments."""
        return f"{self.name()}<{', '.join(args)}>"

    def inline(self) -> str:
        """The definition of this type written out in place."""
        raise TypeError(f"{self.name()} cannot be inlined")

    def inline_flattened(self) -> str:
        """The fields of this type, for flattening into another interface."""
        raise TypeError(f"{self.name()} cannot be flattened")

    @abstractmethod
    def dependencies(self) -> list[Dependency]:
        """Types this type depends on."""

    @abstractmethod
    def transparent(self) -> bool:
        """True for types such as tuples and lists that only carry others."""

    def type_args(self) -> tuple[TS, ...]:
        """The type arguments this type is written with, if any."""
        return ()


@dataclass(frozen=True)
class Primitive(TS):
    """A type that maps straight onto a TypeScript primitive."""

    rust_name: str
    ts_type: str

    def name(self) -> str:
        return self.ts_type

    def name_with_type_args(self, args: Sequence[str]) -> str:
        if args:
            raise ValueError("called name_with_type_args on primitive")
        return self.ts_type

    def inline(self) -> str:
        return self.ts_type

    def dependencies(self) -> list[Dependency]:
        return []

    def transparent(self) -> bool:
        return False


@dataclass(frozen=True)
class Dummy(TS):
    """A marker type with an empty TypeScript representation."""

    rust_name: str

    def name(self) -> str:
        return ""

    def inline(self) -> str:
        return ""

    def dependencies(self) -> list[Dependency]:
        return []

    def transparent(self) -> bool:
        return False


@dataclass(frozen=True)
class OptionType(TS):
    """An optional value: ``T | null``."""

    inner: TS

    def name(self) -> str:
        raise TypeError("Option has no name of its own")

    def name_with_type_args(self, args: Sequence[str]) -> str:
        _expect_args(args, 1, "Option")
        return f"{args[0]} | null"

    def inline(self) -> str:
        return f"{self.inner.inline()} | null"

    def dependencies(self) -> list[Dependency]:
        return _collect(self.inner)

    def transparent(self) -> bool:
        return True

    def type_args(self) -> tuple[TS, ...]:
        return (self.inner,)


@dataclass(frozen=True)
class VecType(TS):
    """A list: ``Array<T>``."""

    inner: TS

    def name(self) -> str:
        return "Array"

    def name_with_type_args(self, args: Sequence[str]) -> str:
        _expect_args(args, 1, "Vec")
        return f"Array<{args[0]}>"

    def inline(self) -> str:
        return f"Array<{self.inner.inline()}>"

    def dependencies(self) -> list[Dependency]:
        return _collect(self.inner)

    def transparent(self) -> bool:
        return True

    def type_args(self) -> tuple[TS, ...]:
        return (self.inner,)


@dataclass(frozen=True)
class ArrayType(VecType):
    """A fixed-size array, represented like a list."""

    size: int = 0


@dataclass(frozen=True)
class RecordType(TS):
    """A map: ``Record<K, V>``."""

    key: TS
    value: TS

    def name(self) -> str:
        return "Record"

    def name_with_type_args(self, args: Sequence[str]) -> str:
        _expect_args(args, 2, "HashMap")
        return f"Record<{args[0]}, {args[1]}>"

    def inline(self) -> str:
        return f"Record<{self.key.inline()}, {self.value.inline()}>"

    def dependencies(self) -> list[Dependency]:
        return _collect(self.key, self.value)

    def transparent(self) -> bool:
        return True

    def type_args(self) -> tuple[TS, ...]:
        return (self.key, self.value)


@dataclass(frozen=True)
class TupleType(TS):
    """A tuple: ``[A, B, ..]``."""

    elements: tuple[TS, ...]

    def name(self) -> str:
        return f"[{', '.join(e.name() for e in self.elements)}]"

    def name_with_type_args(self, args: Sequence[str]) -> str:
        _expect_args(args, len(self.elements), "tuple")
        return f"[{', '.join(args)}]"

    def inline(self) -> str:
        return f"[{', '.join(e.inline() for e in self.elements)}]"

    def dependencies(self) -> list[Dependency]:
        return _collect(*self.elements)

    def transparent(self) -> bool:
        return True

    def type_args(self) -> tuple[TS, ...]:
        return self.elements


@dataclass(frozen=True)
class WrapperType(TS):
    """A smart pointer or cell that is represented as its content."""

    inner: TS
    kind: str = "Box"

    def name(self) -> str:
        return self.inner.name()

    def name_with_type_args(self, args: Sequence[str]) -> str:
        if len(args) != 1:
            raise ValueError(
                f"called {self.kind}.name_with_type_args with {len(args)} args"
            )
        return args[0]

    def inline(self) -> str:
        return self.inner.inline()

    def inline_flattened(self) -> str:
        return self.inner.inline_flattened()

    def dependencies(self) -> list[Dependency]:
        return self.inner.dependencies()

    def transparent(self) -> bool:
        return self.inner.transparent()

    def type_args(self) -> tuple[TS, ...]:
        return (self.inner,)


@dataclass(frozen=True)
class DateTimeType(TS):
    """A date or timestamp bound to a time zone, represented as a string."""

    timezone: TS
    kind: str = "DateTime"

    def name(self) -> str:
        return "string"

    def name_with_type_args(self, args: Sequence[str]) -> str:
        return self.name()

    def inline(self) -> str:
        return "string"

    def dependencies(self) -> list[Dependency]:
        return []

    def transparent(self) -> bool:
        return False

    def type_args(self) -> tuple[TS, ...]:
        return (self.timezone,)


U8 = Primitive("u8", "number")
I8 = Primitive("i8", "number")
U16 = Primitive("u16", "number")
I16 = Primitive("i16", "number")
U32 = Primitive("u32", "number")
I32 = Primitive("i32", "number")
F32 = Primitive("f32", "number")
F64 = Primitive("f64", "number")
USIZE = Primitive("usize", "number")
ISIZE = Primitive("isize", "number")
U64 = Primitive("u64", "bigint")
I64 = Primitive("i64", "bigint")
U128 = Primitive("u128", "bigint")
I128 = Primitive("i128", "bigint")
BOOL = Primitive("bool", "boolean")
STRING = Primitive("String", "string")
STR = Primitive("&'static str", "string")
UNIT = Primitive("()", "null")

BIGDECIMAL = Primitive("BigDecimal", "string")
UUID = Primitive("Uuid", "string")

NAIVE_DATE_TIME = Primitive("NaiveDateTime", "string")
NAIVE_DATE = Primitive("NaiveDate", "string")
NAIVE_TIME = Primitive("NaiveTime", "string")
DURATION = Primitive("Duration", "string")

UTC = Dummy("Utc")
LOCAL = Dummy("Local")
FIXED_OFFSET = Dummy("FixedOffset")


def option(inner: TS) -> OptionType:
    """An optional ``inner``."""
    return OptionType(inner)


def vec(inner: TS) -> VecType:
    """A list of ``inner``."""
    return VecType(inner)


def array(inner: TS, size: int) -> ArrayType:
    """A fixed-size array of ``inner``."""
    return ArrayType(inner, size)


def hash_set(inner: TS) -> VecType:
    """A set of ``inner``, represented as a list."""
    return VecType(inner)


def btree_set(inner: TS) -> VecType:
    """An ordered set of ``inner``, represented as a list."""
    return VecType(inner)


def hash_map(key: TS, value: TS) -> RecordType:
    """A map from ``key`` to ``value``."""
    return RecordType(key, value)


def btree_map(key: TS, value: TS) -> RecordType:
    """An ordered map from ``key`` to ``value``, represented like any map."""
    return RecordType(key, value)


def tuple_of(*args: TS) -> TS:
    """A tuple of the given element types; the empty tuple is ``null``."""
    if not args:
        return UNIT
    if len(args) > MAX_TUPLE_ARITY:
        raise ValueError(f"tuples have at most {MAX_TUPLE_ARITY} elements")
    return TupleType(tuple(args))


def wrapper(inner: TS) -> WrapperType:
    """A transparent wrapper around ``inner``."""
    return WrapperType(inner)