import pytest

from tsbind.attrs import DeriveError
from tsbind.derive import Field, FieldsKind, StructDef, TypeParam, struct_def
from tsbind.enums import EnumDef, Variant, derive, enum_def
from tsbind.types import F64, I32, STRING, vec


def unit(name, *ts):
    return Variant(name, ts=ts)


def newtype(name, ty):
    return Variant(name, (Field(None, ty),), FieldsKind.UNNAMED)


def tuple_variant(name, *tys):
    return Variant(name, tuple(Field(None, t) for t in tys), FieldsKind.UNNAMED)


def named(name, **fields):
    return Variant(name, tuple(Field(k, v) for k, v in fields.items()), FieldsKind.NAMED)


def named_struct(ident, **fields):
    return struct_def(StructDef(ident, tuple(Field(k, v) for k, v in fields.items())))


SIMPLE = enum_def(EnumDef("SimpleEnum", (unit("A", 'rename = "asdf"'), unit("B"), unit("C"))))


def test_empty():
    empty = enum_def(EnumDef("Empty"))
    assert empty.decl() == "type Empty = never;"
    assert empty.inline() == "never"


def test_simple_enum():
    assert SIMPLE.decl() == 'type SimpleEnum = "asdf" | "B" | "C";'


def test_renamed_enum():
    renamed = enum_def(
        EnumDef(
            "RenamedEnum",
            (unit("A", 'rename = "ASDF"'), unit("B"), unit("C")),
            ts=('rename_all = "lowercase"', 'rename = "SimpleEnum"'),
        )
    )
    assert renamed.decl() == 'type SimpleEnum = "ASDF" | "b" | "c";'


def test_serde_enum():
    simple = enum_def(
        EnumDef("SimpleEnum", (unit("A"), unit("B")), serde=('tag = "kind", content = "d"',))
    )
    assert simple.decl() == 'type SimpleEnum = { kind: "A" } | { kind: "B" };'

    complex_enum = enum_def(
        EnumDef(
            "ComplexEnum",
            (
                unit("A"),
                named("B", foo=STRING, bar=F64),
                newtype("W", simple),
                named("F", nested=simple),
                tuple_variant("T", I32, simple),
            ),
            serde=('tag = "kind", content = "data"',),
        )
    )
    assert complex_enum.decl() == (
        'type ComplexEnum = { kind: "A" } | { kind: "B", data: { foo: string, bar: number, } }'
        ' | { kind: "W", data: SimpleEnum } | { kind: "F", data: { nested: SimpleEnum, } }'
        ' | { kind: "T", data: [number, SimpleEnum] };'
    )

    untagged = enum_def(
        EnumDef(
            "Untagged",
            (newtype("Foo", STRING), newtype("Bar", I32), unit("None")),
            serde=("untagged",),
        )
    )
    assert untagged.decl() == "type Untagged = string | number | null;"


def test_stateful_enum():
    bar = named_struct("Bar", field=I32)
    foo = named_struct("Foo", bar=bar)
    simple = enum_def(
        EnumDef(
            "SimpleEnum",
            (
                newtype("A", STRING),
                newtype("B", I32),
                unit("C"),
                tuple_variant("D", STRING, I32),
                newtype("E", foo),
                named("F", a=I32, b=STRING),
            ),
        )
    )
    assert foo.decl() == "interface Foo { bar: Bar, }"
    assert simple.decl() == (
        'type SimpleEnum = { A: string } | { B: number } | "C" | { D: [string, number] }'
        " | { E: Foo } | { F: { a: number, b: string, } };"
    )


def test_enums_with_internal_tags():
    first = enum_def(
        EnumDef(
            "EnumWithInternalTag",
            (named("A", foo=STRING), named("B", bar=I32)),
            serde=('tag = "type"',),
        )
    )
    assert first.decl() == (
        'type EnumWithInternalTag = { type: "A", foo: string, } | { type: "B", bar: number, };'
    )

    inner_a = named_struct("InnerA", foo=STRING)
    inner_b = named_struct("InnerB", bar=I32)
    second = enum_def(
        EnumDef(
            "EnumWithInternalTag2",
            (newtype("A", inner_a), newtype("B", inner_b)),
            serde=('tag = "type"',),
        )
    )
    assert second.decl() == (
        'type EnumWithInternalTag2 = { type: "A" } & InnerA | { type: "B" } & InnerB;'
    )
    assert sorted(dep.ts_name for dep in second.dependencies()) == ["InnerA", "InnerB"]


def test_generic_enum():
    a, b, c = TypeParam("A"), TypeParam("B"), TypeParam("C")
    generic = enum_def(
        EnumDef(
            "Generic",
            (
                newtype("A", a),
                tuple_variant("B", b, b, b),
                newtype("C", vec(c)),
                newtype("D", vec(vec(vec(a)))),
                named("E", a=a, b=b, c=c),
                newtype("X", vec(I32)),
                newtype("Y", I32),
                newtype("Z", vec(vec(I32))),
            ),
            generics=(a, b, c),
        )
    )
    assert generic.of(I32, I32, I32).decl() == (
        "type Generic<A, B, C> = { A: A } | { B: [B, B, B] } | { C: Array<C> }"
        " | { D: Array<Array<Array<A>>> } | { E: { a: A, b: B, c: C, } } | { X: Array<number> }"
        " | { Y: number } | { Z: Array<Array<number>> };"
    )


def test_trait_bounds():
    t, k = TypeParam("T"), TypeParam("K", I32)
    c = enum_def(
        EnumDef(
            "C",
            (named("A", t=t), newtype("B", t), unit("C"), tuple_variant("D", t, k)),
            generics=(t, k),
        )
    )
    assert c.decl() == 'type C<T, K = number> = { A: { t: T, } } | { B: T } | "C" | { D: [T, K] };'


def test_skipped_variant_is_left_out():
    skipped = enum_def(EnumDef("S", (unit("A"), unit("B", "skip"))))
    assert skipped.decl() == 'type S = "A";'


@pytest.mark.parametrize(
    "attribute, message",
    [
        ('type = "string"', "`type` is not applicable to enum variants"),
        ("optional", "`optional` is not applicable to enum variants"),
        ("flatten", "`flatten` is not applicable to enum variants"),
    ],
)
def test_invalid_variant_attributes(attribute, message):
    with pytest.raises(DeriveError, match=message):
        enum_def(EnumDef("E", (unit("A", attribute),)))


@pytest.mark.parametrize(
    "serde, message",
    [
        ('untagged, tag = "t"', "untagged cannot be used with tag"),
        ('untagged, content = "c"', "untagged cannot be used with content"),
        ('content = "c"', "content cannot be used without tag"),
    ],
)
def test_invalid_representations(serde, message):
    with pytest.raises(DeriveError, match=message):
        enum_def(EnumDef("E", (unit("A"),), serde=(serde,)))


def test_invalid_inflection():
    with pytest.raises(DeriveError, match="invalid inflection"):
        enum_def(EnumDef("E", (unit("A"),), ts=('rename_all = "kebab"',)))


def test_derive_dispatches_on_item_kind():
    assert derive(StructDef("Unit", kind=FieldsKind.UNIT)).decl() == "type Unit = null;"
    assert derive(EnumDef("Empty")).decl() == "type Empty = never;"
    with pytest.raises(DeriveError, match="unsupported item"):
        derive("not an item")


def test_export_settings():
    exported = enum_def(EnumDef("E", (unit("A"),), ts=('export, export_to = "out/E.ts"',)))
    assert exported.export is True
    assert exported.export_to == "out/E.ts"
    assert SIMPLE.export_to == "bindings/SimpleEnum.ts"