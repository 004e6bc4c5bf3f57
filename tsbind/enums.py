"""Derivation of TypeScript union declarations for enum definitions."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from tsbind.attrs import DeriveError, EnumAttr, FieldAttr, StructAttr, Tagged, Tagging
from tsbind.deps import Dependencies
from tsbind.derive import (
    DerivedTS,
    Field,
    FieldsKind,
    StructDef,
    TypeParam,
    _Rendered,
    format_generics,
    format_type,
    struct_def,
    type_def,
)


@dataclass(frozen=True)
class Variant:
    """A variant of an enum, with its fields and attribute argument texts."""

    ident: str
    fields: tuple[Field, ...] = ()
    kind: FieldsKind = FieldsKind.UNIT
    ts: tuple[str, ...] = ()
    serde: tuple[str, ...] = ()


@dataclass(frozen=True)
class EnumDef:
    """An enum definition to derive a TypeScript declaration for."""

    ident: str
    variants: tuple[Variant, ...] = ()
    generics: tuple[TypeParam, ...] = ()
    ts: tuple[str, ...] = ()
    serde: tuple[str, ...] = ()


_VariantFormatter = Callable[[Dependencies], str]


def enum_def(item: EnumDef) -> DerivedTS:
    """Derive the union type representing an enum definition."""
    attr = EnumAttr.from_attrs(item.ts, item.serde)
    name = attr.rename if attr.rename is not None else item.ident

    if not item.variants:
        return _empty_enum(name, attr)

    generics = tuple(item.generics)
    formatters = [
        formatter
        for formatter in (_plan_variant(attr, variant, generics) for variant in item.variants)
        if formatter is not None
    ]

    def render() -> _Rendered:
        deps = Dependencies()
        inline = " | ".join(formatter(deps) for formatter in formatters)
        generic_args = format_generics(deps, generics)
        return _Rendered(inline, f"type {name}{generic_args} = {inline};", None, deps)

    return DerivedTS(name, render, export=attr.export, export_to=attr.export_to)


def derive(item: StructDef | EnumDef) -> DerivedTS:
    """Derive the TypeScript representation of a struct or enum definition."""
    if isinstance(item, StructDef):
        return struct_def(item)
    if isinstance(item, EnumDef):
        return enum_def(item)
    raise DeriveError("unsupported item")


def _empty_enum(name: str, attr: EnumAttr) -> DerivedTS:
    def render() -> _Rendered:
        return _Rendered("never", f"type {name} = never;", None, Dependencies())

    return DerivedTS(name, render, export=attr.export, export_to=attr.export_to)


def _plan_variant(
    enum_attr: EnumAttr, variant: Variant, generics: tuple[TypeParam, ...]
) -> _VariantFormatter | None:
    field_attr = FieldAttr.from_attrs(variant.ts, variant.serde)
    if field_attr.skip:
        return None
    if field_attr.type_override is not None:
        raise DeriveError("`type` is not applicable to enum variants")
    if field_attr.optional:
        raise DeriveError("`optional` is not applicable to enum variants")
    if field_attr.flatten:
        raise DeriveError("`flatten` is not applicable to enum variants")

    if field_attr.rename is not None:
        name = field_attr.rename
    elif enum_attr.rename_all is not None:
        name = enum_attr.rename_all.apply(variant.ident)
    else:
        name = variant.ident

    # the variant is derived as an anonymous struct
    variant_type = type_def(StructAttr(), "_", variant.fields, variant.kind, generics)
    tagged = enum_attr.tagged()
    is_unit = variant.kind is FieldsKind.UNIT
    single = variant.kind is FieldsKind.UNNAMED and len(variant.fields) == 1

    def format_variant(deps: Dependencies) -> str:
        rendered = variant_type._rendered()
        match tagged:
            case Tagged(kind=Tagging.UNTAGGED):
                return rendered.inline
            case Tagged(kind=Tagging.EXTERNALLY):
                if is_unit:
                    return f'"{name}"'
                return f"{{ {name}: {rendered.inline} }}"
            case Tagged(kind=Tagging.ADJACENTLY, tag=tag, content=content):
                if single:
                    ty = format_type(variant.fields[0].ty, deps, generics)
                    return f'{{ {tag}: "{name}", {content}: {ty} }}'
                if is_unit:
                    return f'{{ {tag}: "{name}" }}'
                return f'{{ {tag}: "{name}", {content}: {rendered.inline} }}'
            case Tagged(kind=Tagging.INTERNALLY, tag=tag):
                if rendered.inline_flattened is not None:
                    return f'{{ {tag}: "{name}", {rendered.inline_flattened} }}'
                if single:
                    ty = format_type(variant.fields[0].ty, deps, generics)
                    return f'{{ {tag}: "{name}" }} & {ty}'
                if is_unit:
                    return f'{{ {tag}: "{name}" }}'
                deps.append(rendered.dependencies)
                return f'{{ {tag}: "{name}" }} & {rendered.inline}'
        raise DeriveError(f"unknown enum representation: {tagged!r}")

    return format_variant


__all__: Sequence[str] = ("Variant", "EnumDef", "enum_def", "derive")