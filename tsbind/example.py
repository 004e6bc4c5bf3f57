"""A sample set of type definitions and their TypeScript bindings."""

from __future__ import annotations

import os
from pathlib import Path

from tsbind.derive import DerivedTS, Field, FieldsKind, StructDef, TypeParam, struct_def
from tsbind.enums import EnumDef, Variant, enum_def
from tsbind.export import export_type
from tsbind.types import (
    F64,
    I32,
    NAIVE_DATE_TIME,
    STRING,
    U64,
    UUID,
    WrapperType,
    btree_set,
    option,
    vec,
)


def _named(ident: str, **fields) -> Variant:
    return Variant(ident, tuple(Field(k, v) for k, v in fields.items()), FieldsKind.NAMED)


def _newtype(ident: str, ty) -> Variant:
    return Variant(ident, (Field(None, ty),), FieldsKind.UNNAMED)


ROLE = enum_def(
    EnumDef(
        "Role",
        (Variant("User"), Variant("Admin", ts=('rename = "administrator"',))),
        ts=('rename_all = "lowercase"', 'export, export_to = "bindings/UserRole.ts"'),
    )
)

GENDER = enum_def(
    EnumDef(
        "Gender",
        (Variant("Male"), Variant("Female"), Variant("Other")),
        ts=("export",),
        serde=('rename_all = "UPPERCASE"',),
    )
)

USER: DerivedTS = struct_def(
    StructDef(
        "User",
        (
            Field("user_id", I32),
            Field("first_name", STRING),
            Field("last_name", STRING),
            Field("role", ROLE),
            Field("family", lambda: vec(USER)),
            Field("gender", GENDER, ts=("inline",)),
            Field("token", UUID),
            Field("created_at", NAIVE_DATE_TIME, ts=('type = "string"',)),
        ),
        ts=("export",),
    )
)

VEHICLE = enum_def(
    EnumDef(
        "Vehicle",
        (_named("Bicycle", color=STRING), _named("Car", brand=STRING, color=STRING)),
        ts=("export",),
        serde=('tag = "type", rename_all = "snake_case"',),
    )
)

POINT_T = TypeParam("T")

POINT = struct_def(
    StructDef(
        "Point",
        (Field("time", U64), Field("value", POINT_T)),
        generics=(POINT_T,),
        ts=("export",),
    )
)

SERIES = struct_def(StructDef("Series", (Field("points", vec(POINT.of(U64))),), ts=("export",)))

SIMPLE_ENUM = enum_def(
    EnumDef(
        "SimpleEnum",
        (Variant("A"), Variant("B")),
        ts=("export",),
        serde=('tag = "kind", content = "d"',),
    )
)

_COMPLEX_VARIANTS = (
    Variant("A"),
    _named("B", foo=STRING, bar=F64),
    _newtype("W", SIMPLE_ENUM),
    _named("F", nested=SIMPLE_ENUM),
    _newtype("V", vec(SERIES)),
    _newtype("U", WrapperType(USER, "Box")),
)

COMPLEX_ENUM = enum_def(
    EnumDef(
        "ComplexEnum",
        _COMPLEX_VARIANTS,
        ts=("export",),
        serde=('tag = "kind", content = "data"',),
    )
)

INLINE_COMPLEX_ENUM = enum_def(
    EnumDef("InlineComplexEnum", _COMPLEX_VARIANTS, ts=("export",), serde=('tag = "kind"',))
)

COMPLEX_STRUCT = struct_def(
    StructDef(
        "ComplexStruct",
        (
            Field(
                "string_tree",
                option(WrapperType(btree_set(STRING), "Rc")),
                serde=('skip_serializing_if = "Option::is_none"',),
            ),
        ),
        ts=("export",),
        serde=('rename_all = "camelCase"',),
    )
)


def example_types() -> tuple[DerivedTS, ...]:
    """All sample types, in declaration order."""
    return (
        ROLE,
        GENDER,
        USER,
        VEHICLE,
        POINT,
        SERIES,
        SIMPLE_ENUM,
        COMPLEX_ENUM,
        INLINE_COMPLEX_ENUM,
        COMPLEX_STRUCT,
    )


def export_all(manifest_dir: str | os.PathLike[str] | None = None) -> list[Path]:
    """Export every sample type marked for export; return the files written."""
    return [export_type(ty, manifest_dir) for ty in example_types() if ty.export]