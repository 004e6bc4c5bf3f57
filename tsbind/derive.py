"""Derivation of TypeScript declarations for struct-like type definitions."""

from __future__ import annotations

import copy
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple

from tsbind.attrs import DeriveError, FieldAttr, StructAttr, to_ts_ident
from tsbind.deps import Dependencies
from tsbind.types import TS, ArrayType, Dependency, OptionType, TupleType, VecType


@dataclass(frozen=True, eq=False)
class TypeParam(TS):
    """A generic type parameter, optionally with a default type."""

    ident: str
    default: Any = None

    def name(self) -> str:
        return self.ident

    def name_with_type_args(self, args: Sequence[str]) -> str:
        return self.ident

    def inline(self) -> str:
        return self.ident

    def dependencies(self) -> list[Dependency]:
        return []

    def transparent(self) -> bool:
        return False


class FieldsKind(Enum):
    """The shape of a struct's fields."""

    NAMED = "named"
    UNNAMED = "unnamed"
    UNIT = "unit"


@dataclass(frozen=True)
class Field:
    """A field of a struct or variant.

    ``ty`` is a TS type, or a callable returning one for types defined later.
    ``ts`` and ``serde`` hold the argument text of the field's attributes.
    """

    name: str | None
    ty: Any
    ts: tuple[str, ...] = ()
    serde: tuple[str, ...] = ()


@dataclass(frozen=True)
class StructDef:
    """A struct definition to derive a TypeScript declaration for."""

    ident: str
    fields: tuple[Field, ...] = ()
    kind: FieldsKind = FieldsKind.NAMED
    generics: tuple[TypeParam, ...] = ()
    ts: tuple[str, ...] = ()
    serde: tuple[str, ...] = ()


class _Rendered(NamedTuple):
    inline: str
    decl: str
    inline_flattened: str | None
    dependencies: Dependencies


def _resolve(ty: Any) -> TS:
    if isinstance(ty, TS):
        return ty
    if callable(ty):
        return ty()
    raise DeriveError(f"not a type: {ty!r}")


class DerivedTS(TS):
    """A type whose TypeScript representation was derived from its definition."""

    def __init__(
        self,
        name: str,
        render: Callable[[], _Rendered],
        *,
        export: bool = False,
        export_to: str | None = None,
        args: Sequence[TS] = (),
    ) -> None:
        self._name = name
        self._render = render
        self._cache: list[_Rendered] = []
        self._args = tuple(args)
        self.export = export
        self.export_to = export_to if export_to is not None else f"bindings/{name}.ts"

    def _rendered(self) -> _Rendered:
        if not self._cache:
            self._cache.append(self._render())
        return self._cache[0]

    def name(self) -> str:
        return self._name

    def inline(self) -> str:
        return self._rendered().inline

    def decl(self) -> str:
        return self._rendered().decl

    def inline_flattened(self) -> str:
        flattened = self._rendered().inline_flattened
        if flattened is None:
            return super().inline_flattened()
        return flattened

    def dependencies(self) -> list[Dependency]:
        return self._rendered().dependencies.resolve()

    def transparent(self) -> bool:
        return False

    def type_args(self) -> tuple[TS, ...]:
        return self._args

    def of(self, *args: TS) -> DerivedTS:
        """This type applied to the given type arguments."""
        clone = copy.copy(self)
        clone._args = tuple(args)
        return clone

    def __repr__(self) -> str:
        return f"DerivedTS({self._name!r})"


def format_generics(dependencies: Dependencies, generics: Sequence[TypeParam]) -> str:
    """Format type parameters as ``<A, B = x>``, or an empty string if there are none."""
    if not generics:
        return ""
    params = []
    for param in generics:
        if param.default is not None:
            default = format_type(param.default, dependencies, generics)
            params.append(f"{param.ident} = {default}")
        else:
            params.append(param.ident)
    return f"<{', '.join(params)}>"


def format_type(ty: Any, dependencies: Dependencies, generics: Sequence[TypeParam]) -> str:
    """Format a field type by name, recording what it depends on."""
    ty = _resolve(ty)
    if isinstance(ty, TypeParam) and any(p.ident == ty.ident for p in generics):
        return ty.ident
    if isinstance(ty, ArrayType):
        return format_type(VecType(ty.inner), dependencies, generics)
    if isinstance(ty, TupleType):
        fields = tuple(Field(None, element) for element in ty.elements)
        derived = type_def(StructAttr(), "_", fields, FieldsKind.UNNAMED, generics)
        rendered = derived._rendered()
        dependencies.append(rendered.dependencies)
        return rendered.inline

    dependencies.push_or_append_from(ty)
    args = ty.type_args()
    if not args:
        return ty.name()
    return ty.name_with_type_args([format_type(a, dependencies, generics) for a in args])


def type_def(
    attr: StructAttr,
    ident: str,
    fields: Sequence[Field],
    kind: FieldsKind,
    generics: Sequence[TypeParam],
) -> DerivedTS:
    """Derive the representation of a struct with the given fields."""
    name = attr.rename if attr.rename is not None else to_ts_ident(ident)
    fields = tuple(fields)
    generics = tuple(generics)
    match kind:
        case FieldsKind.NAMED if fields:
            return _named(attr, name, fields, generics)
        case FieldsKind.UNNAMED if len(fields) == 1:
            return _newtype(attr, name, fields[0], generics)
        case FieldsKind.UNNAMED if fields:
            return _tuple(attr, name, fields, generics)
        case _:
            return _unit(attr, name)


def struct_def(item: StructDef) -> DerivedTS:
    """Derive the representation of a struct definition."""
    attr = StructAttr.from_attrs(item.ts, item.serde)
    return type_def(attr, item.ident, item.fields, item.kind, item.generics)


def _make(attr: StructAttr, name: str, render: Callable[[], _Rendered]) -> DerivedTS:
    return DerivedTS(name, render, export=attr.export, export_to=attr.export_to)


def _unit(attr: StructAttr, name: str) -> DerivedTS:
    if attr.rename_all is not None:
        raise DeriveError("`rename_all` is not applicable to unit structs")

    def render() -> _Rendered:
        return _Rendered("null", f"type {name} = null;", None, Dependencies())

    return _make(attr, name, render)


def _extract_option_argument(ty: TS) -> TS:
    if not isinstance(ty, OptionType):
        raise DeriveError("`optional` can only be used on an Option<T> type")
    return ty.inner


def _named(
    attr: StructAttr, name: str, fields: tuple[Field, ...], generics: tuple[TypeParam, ...]
) -> DerivedTS:
    planned: list[tuple[Field, FieldAttr]] = []
    for f in fields:
        field_attr = FieldAttr.from_attrs(f.ts, f.serde)
        if field_attr.skip:
            continue
        if field_attr.flatten:
            if field_attr.type_override is not None:
                raise DeriveError("`type` is not compatible with `flatten`")
            if field_attr.rename is not None:
                raise DeriveError("`rename` is not compatible with `flatten`")
            if field_attr.inline:
                raise DeriveError("`inline` is not compatible with `flatten`")
        planned.append((f, field_attr))

    def format_field(f: Field, fa: FieldAttr, deps: Dependencies) -> str:
        marker = ""
        if fa.type_override is not None:
            ty = None
        else:
            ty = _resolve(f.ty)
        if fa.optional:
            ty = _extract_option_argument(_resolve(f.ty))
            marker = "?"
        if fa.flatten:
            deps.append_from(ty)
            return ty.inline_flattened()
        if fa.type_override is not None:
            formatted = fa.type_override
        elif fa.inline:
            deps.append_from(ty)
            formatted = ty.inline()
        else:
            formatted = format_type(ty, deps, generics)
        field_name = to_ts_ident(f.name or "")
        if fa.rename is not None:
            ts_name = fa.rename
        elif attr.rename_all is not None:
            ts_name = attr.rename_all.apply(field_name)
        else:
            ts_name = field_name
        return f"{ts_name}{marker}: {formatted},"

    def render() -> _Rendered:
        deps = Dependencies()
        body = " ".join(format_field(f, fa, deps) for f, fa in planned)
        generic_args = format_generics(deps, generics)
        inline = f"{{ {body} }}"
        return _Rendered(inline, f"interface {name}{generic_args} {inline}", body, deps)

    return _make(attr, name, render)


def _newtype(
    attr: StructAttr, name: str, inner: Field, generics: tuple[TypeParam, ...]
) -> DerivedTS:
    if attr.rename_all is not None:
        raise DeriveError("`rename_all` is not applicable to newtype structs")
    fa = FieldAttr.from_attrs(inner.ts, inner.serde)
    if fa.rename is not None:
        raise DeriveError("`rename` is not applicable to newtype fields")
    if fa.skip:
        raise DeriveError("`skip` is not applicable to newtype fields")
    if fa.optional:
        raise DeriveError("`optional` is not applicable to newtype fields")
    if fa.flatten:
        raise DeriveError("`flatten` is not applicable to newtype fields")

    def render() -> _Rendered:
        deps = Dependencies()
        if fa.type_override is not None:
            inline_def = fa.type_override
        else:
            ty = _resolve(inner.ty)
            if fa.inline:
                deps.append_from(ty)
                inline_def = ty.inline()
            else:
                deps.push_or_append_from(ty)
                inline_def = format_type(ty, deps, generics)
        generic_args = format_generics(deps, generics)
        return _Rendered(inline_def, f"type {name}{generic_args} = {inline_def};", None, deps)

    return _make(attr, name, render)


def _tuple(
    attr: StructAttr, name: str, fields: tuple[Field, ...], generics: tuple[TypeParam, ...]
) -> DerivedTS:
    if attr.rename_all is not None:
        raise DeriveError("`rename_all` is not applicable to tuple structs")
    planned: list[tuple[Field, FieldAttr]] = []
    for f in fields:
        fa = FieldAttr.from_attrs(f.ts, f.serde)
        if fa.skip:
            continue
        if fa.rename is not None:
            raise DeriveError("`rename` is not applicable to tuple structs")
        if fa.optional:
            raise DeriveError("`optional` is not applicable to tuple fields")
        if fa.flatten:
            raise DeriveError("`flatten` is not applicable to tuple fields")
        planned.append((f, fa))

    def render() -> _Rendered:
        deps = Dependencies()
        parts = []
        for f, fa in planned:
            if fa.type_override is not None:
                parts.append(fa.type_override)
                continue
            ty = _resolve(f.ty)
            if fa.inline:
                parts.append(ty.inline())
                deps.append_from(ty)
            else:
                parts.append(format_type(ty, deps, generics))
                deps.push_or_append_from(ty)
        generic_args = format_generics(deps, generics)
        inline = f"[{', '.join(parts)}]"
        return _Rendered(inline, f"type {name}{generic_args} = {inline};", None, deps)

    return _make(attr, name, render)