import io

import pytest

from tsbind.attrs import (
    DeriveError,
    EnumAttr,
    FieldAttr,
    Inflection,
    StructAttr,
    Tagged,
    Tagging,
    parse_attribute,
    print_warning,
    to_camel_case,
    to_pascal_case,
    to_screaming_snake_case,
    to_snake_case,
    to_ts_ident,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("lowercase", Inflection.LOWER),
        ("UPPERCASE", Inflection.UPPER),
        ("camelCase", Inflection.CAMEL),
        ("snake_case", Inflection.SNAKE),
        ("PascalCase", Inflection.PASCAL),
        ("SCREAMING_SNAKE_CASE", Inflection.SCREAMING_SNAKE),
    ],
)
def test_inflection_parse(text, expected):
    assert Inflection.parse(text) is expected


def test_inflection_parse_invalid():
    with pytest.raises(DeriveError, match="invalid inflection: 'kebab'"):
        Inflection.parse("kebab")


def test_inflection_upper_and_lower():
    assert Inflection.UPPER.apply("a") == "A"
    assert Inflection.LOWER.apply("B") == "b"


def test_camel_and_snake_examples():
    assert to_camel_case("first_name") == "firstName"
    assert to_snake_case("FirstName") == "first_name"


def test_inflection_apply_dispatches():
    assert Inflection.SNAKE.apply("Bicycle") == to_snake_case("Bicycle")
    assert Inflection.CAMEL.apply("string_tree") == to_camel_case("string_tree")


def test_to_ts_ident_strips_raw_prefix():
    assert to_ts_ident("r#type") == "type"
    assert to_ts_ident("enum") == "enum"


def test_parse_attribute_pairs():
    assert parse_attribute('rename = "x", export') == [("rename", "x"), ("export", None)]


def test_parse_attribute_escapes_and_raw_strings():
    assert parse_attribute('type = "a\\"b"') == [("type", 'a"b')]
    assert parse_attribute('type = r"0 | 1"') == [("type", "0 | 1")]


@pytest.mark.parametrize(
    "text, message",
    [
        ("", "unexpected end of input"),
        ("export,", "unexpected end of input"),
        ("rename = 5", "expected string"),
        ("rename = true", "expected string"),
        ("export export", "expected `,`"),
        ('= "x"', "expected identifier"),
    ],
)
def test_parse_attribute_errors(text, message):
    with pytest.raises(DeriveError, match=message):
        parse_attribute(text)


def test_struct_attr_parse():
    attr = StructAttr.parse('rename_all = "UPPERCASE", export, export_to = "bindings/X.ts"')
    assert attr.rename_all is Inflection.UPPER
    assert attr.export is True
    assert attr.export_to == "bindings/X.ts"


def test_struct_attr_rejects_unknown_and_malformed():
    with pytest.raises(DeriveError, match="unexpected attribute"):
        StructAttr.parse("tag")
    with pytest.raises(DeriveError, match="expected `=`"):
        StructAttr.parse("rename")
    with pytest.raises(DeriveError, match="expected `,`"):
        StructAttr.parse('export = "yes"')


def test_struct_attr_merge_keeps_first():
    attr = StructAttr.from_attrs(['rename = "First"'], ['rename = "Second"', 'rename_all = "camelCase"'])
    assert attr.rename == "First"
    assert attr.rename_all is Inflection.CAMEL


def test_struct_serde_unknown_warns_and_is_ignored(capsys):
    attr = StructAttr.from_attrs([], ["deny_unknown_fields"])
    assert attr == StructAttr()
    err = capsys.readouterr().err
    assert "failed to parse serde attribute" in err
    assert "#[serde(deny_unknown_fields)]" in err


def test_struct_ts_error_propagates():
    with pytest.raises(DeriveError):
        StructAttr.from_attrs(["unknown"], [])


def test_enum_attr_from_attrs():
    attr = EnumAttr.from_attrs(
        ['rename_all = "lowercase"', 'export_to = "bindings/UserRole.ts"'],
        ['tag = "kind", content = "data"'],
    )
    assert attr.rename_all is Inflection.LOWER
    assert attr.export_to == "bindings/UserRole.ts"
    assert attr.tagged() == Tagged(Tagging.ADJACENTLY, tag="kind", content="data")


def test_enum_tag_is_serde_only():
    with pytest.raises(DeriveError, match="unexpected attribute"):
        EnumAttr.parse('tag = "type"')


@pytest.mark.parametrize(
    "attr, expected",
    [
        (EnumAttr(), Tagged(Tagging.EXTERNALLY)),
        (EnumAttr(tag="type"), Tagged(Tagging.INTERNALLY, tag="type")),
        (EnumAttr(tag="kind", content="d"), Tagged(Tagging.ADJACENTLY, tag="kind", content="d")),
        (EnumAttr(untagged=True), Tagged(Tagging.UNTAGGED)),
    ],
)
def test_enum_tagged(attr, expected):
    assert attr.tagged() == expected


@pytest.mark.parametrize(
    "attr, message",
    [
        (EnumAttr(untagged=True, tag="t"), "untagged cannot be used with tag"),
        (EnumAttr(untagged=True, content="c"), "untagged cannot be used with content"),
        (EnumAttr(untagged=True, tag="t", content="c"), "untagged cannot be used with content"),
        (EnumAttr(content="c"), "content cannot be used without tag"),
    ],
)
def test_enum_tagged_errors(attr, message):
    with pytest.raises(DeriveError, match=message):
        attr.tagged()


def test_enum_serde_untagged():
    assert EnumAttr.from_attrs([], ["untagged"]).tagged() == Tagged(Tagging.UNTAGGED)


def test_field_attr_parse_flags():
    attr = FieldAttr.parse('type = "string", inline, skip, optional, flatten')
    assert attr == FieldAttr(
        type_override="string", inline=True, skip=True, optional=True, flatten=True
    )


def test_field_serde_skip_serializing_if():
    assert FieldAttr.parse_serde('skip_serializing_if = "Option::is_none"').optional is True
    assert FieldAttr.parse_serde('skip_serializing_if = "Vec::is_empty"').optional is False


@pytest.mark.parametrize("key", ["skip", "skip_serializing", "skip_deserializing"])
def test_field_serde_skips(key):
    assert FieldAttr.parse_serde(key).skip is True


def test_field_serde_default():
    assert FieldAttr.parse_serde('default = "make", rename = "x"').rename == "x"
    assert FieldAttr.parse_serde('rename = "x", default').rename == "x"
    with pytest.raises(DeriveError):
        FieldAttr.parse_serde('default, rename = "x"')


def test_field_merge_prefers_ts_values():
    attr = FieldAttr.from_attrs(['rename = "bb"'], ['rename = "cc", flatten'])
    assert attr.rename == "bb"
    assert attr.flatten is True


def test_print_warning_plain():
    stream = io.StringIO()
    print_warning("title", "content", "note", stream)
    assert stream.getvalue() == (
        "warning: title\n  | \n  | content\n  | \n  = note: note\n"
    )