"""Parsing of ``ts`` and ``serde`` attribute arguments and name inflections."""

from __future__ import annotations

import re
import sys
from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import TextIO


class DeriveError(Exception):
    """Raised when a type definition or one of its attributes is invalid."""


_WORD = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z0-9]+|[A-Z0-9]+")


def _words(string: str) -> list[str]:
    return _WORD.findall(string)


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def to_camel_case(string: str) -> str:
    """``first_name`` -> ``firstName``."""
    words = _words(string)
    if not words:
        return ""
    return words[0].lower() + "".join(_capitalize(w) for w in words[1:])


def to_pascal_case(string: str) -> str:
    """``first_name`` -> ``FirstName``."""
    return "".join(_capitalize(w) for w in _words(string))


def to_snake_case(string: str) -> str:
    """``FirstName`` -> ``first_name``."""
    return "_".join(w.lower() for w in _words(string))


def to_screaming_snake_case(string: str) -> str:
    """``firstName`` -> ``FIRST_NAME``."""
    return "_".join(w.upper() for w in _words(string))


class Inflection(Enum):
    """A renaming rule applied to all fields or variants of a type."""

    LOWER = "lowercase"
    UPPER = "UPPERCASE"
    CAMEL = "camelCase"
    SNAKE = "snake_case"
    PASCAL = "PascalCase"
    SCREAMING_SNAKE = "SCREAMING_SNAKE_CASE"

    def apply(self, string: str) -> str:
        """Rename ``string`` according to this rule."""
        match self:
            case Inflection.LOWER:
                return string.lower()
            case Inflection.UPPER:
                return string.upper()
            case Inflection.CAMEL:
                return to_camel_case(string)
            case Inflection.SNAKE:
                return to_snake_case(string)
            case Inflection.PASCAL:
                return to_pascal_case(string)
            case Inflection.SCREAMING_SNAKE:
                return to_screaming_snake_case(string)

    @classmethod
    def parse(cls, value: str) -> Inflection:
        """Parse a rule name such as ``camelCase``, ignoring case and underscores."""
        normalized = value.lower().replace("_", "")
        for member in cls:
            if member.value.lower().replace("_", "") == normalized:
                return member
        raise DeriveError(f"invalid inflection: '{value}'")


def to_ts_ident(ident: str) -> str:
    """Convert an identifier to a TypeScript identifier, dropping raw prefixes."""
    while ident.startswith("r#"):
        ident = ident[2:]
    return ident


_LEXEME = re.compile(
    r"""
    (?P<space>\s+)
  | (?P<raw>r(?P<hashes>\#*)"(?P<rawbody>.*?)"(?P=hashes))
  | (?P<bytes>b"(?:[^"\\]|\\.)*"|b'(?:[^'\\]|\\.)*')
  | (?P<ident>(?:r\#)?[A-Za-z_][A-Za-z0-9_]*)
  | (?P<string>"(?:[^"\\]|\\.)*")
  | (?P<literal>\d[\w.]*|'(?:[^'\\]|\\.)*')
  | (?P<punct>[=,])
    """,
    re.VERBOSE | re.DOTALL,
)

_ESCAPE = re.compile(r"\\(u\{[0-9a-fA-F_]+\}|x[0-9a-fA-F]{2}|\n\s*|.)", re.DOTALL)
_SIMPLE_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "\\": "\\", "0": "\0", "'": "'", '"': '"'}


def _unescape(body: str) -> str:
    def replace(match: re.Match[str]) -> str:
        escape = match.group(1)
        if escape.startswith("u{"):
            return chr(int(escape[2:-1].replace("_", ""), 16))
        if escape.startswith("x"):
            return chr(int(escape[1:], 16))
        if escape.startswith("\n"):
            return ""
        if escape in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[escape]
        raise DeriveError(f"unknown character escape: \\{escape}")

    return _ESCAPE.sub(replace, body)


def _tokenize(text: str) -> Iterator[tuple[str, str]]:
    position = 0
    while position < len(text):
        match = _LEXEME.match(text, position)
        if match is None:
            raise DeriveError(f"unexpected token: {text[position:]!r}")
        position = match.end()
        kind = match.lastgroup
        if kind == "space":
            continue
        if kind in ("raw", "hashes", "rawbody"):
            yield "string", match.group("rawbody")
        elif kind == "string":
            yield "string", _unescape(match.group()[1:-1])
        elif kind == "bytes":
            yield "literal", match.group()
        else:
            yield kind, match.group()


def _pop(queue: deque[tuple[str, str]]) -> tuple[str, str]:
    if not queue:
        raise DeriveError("unexpected end of input")
    return queue.popleft()


def _literal(queue: deque[tuple[str, str]]) -> str:
    kind, value = _pop(queue)
    if kind == "string":
        return value
    if kind == "literal" or (kind == "ident" and value in ("true", "false")):
        raise DeriveError("expected string")
    raise DeriveError("expected literal")


def parse_attribute(text: str) -> list[tuple[str, str | None]]:
    """Split attribute arguments like ``rename = "x", export`` into key/value pairs.

    A key without ``= "..."`` has the value None.
    """
    queue = deque(_tokenize(text))
    entries: list[tuple[str, str | None]] = []
    while True:
        kind, key = _pop(queue)
        if kind != "ident":
            raise DeriveError("expected identifier")
        value = None
        if queue and queue[0] == ("punct", "="):
            queue.popleft()
            value = _literal(queue)
        entries.append((key, value))
        if not queue:
            return entries
        if queue.popleft() != ("punct", ","):
            raise DeriveError("expected `,`")


def _entries(text: str) -> Iterator[tuple[str, str | None, bool]]:
    entries = parse_attribute(text)
    last = len(entries) - 1
    for position, (key, value) in enumerate(entries):
        yield key, value, position == last


def _value(value: str | None) -> str:
    if value is None:
        raise DeriveError("expected `=`")
    return value


def _flag(value: str | None) -> None:
    if value is not None:
        raise DeriveError("expected `,`")


def _unexpected() -> DeriveError:
    return DeriveError("unexpected attribute")


def print_warning(title: object, content: object, note: object, stream: TextIO | None = None) -> None:
    """Print a message shaped like a compiler warning, coloured on terminals."""
    stream = sys.stderr if stream is None else stream
    isatty = getattr(stream, "isatty", None)
    colored = bool(isatty and isatty())

    def paint(code: str, bold: bool) -> str:
        if not colored:
            return ""
        return "\x1b[0m" + ("\x1b[1m" if bold else "") + f"\x1b[{code}m"

    yellow_bold = paint("93", True)
    white_bold = paint("97", True)
    white = paint("97", False)
    blue = paint("94", True)
    reset = "\x1b[0m" if colored else ""

    stream.write(
        f"{yellow_bold}warning{white_bold}: {title}\n"
        f"{blue}  | \n"
        f"  | {white}{content}\n"
        f"{blue}  | \n"
        f"  = {white_bold}note: {white}{note}\n"
        f"{reset}"
    )
    stream.flush()


def _parse_serde_each(parse, texts: Iterable[str]):
    for text in texts:
        try:
            yield parse(text)
        except DeriveError:
            print_warning(
                "failed to parse serde attribute",
                f"#[serde({text})]",
                "ts-rs failed to parse this attribute. It will be ignored.",
            )


class Tagging(Enum):
    """How an enum's variant tag is represented."""

    EXTERNALLY = "externally"
    ADJACENTLY = "adjacently"
    INTERNALLY = "internally"
    UNTAGGED = "untagged"


@dataclass(frozen=True)
class Tagged:
    """An enum representation with its tag and content field names."""

    kind: Tagging
    tag: str | None = None
    content: str | None = None


@dataclass
class StructAttr:
    """Container attributes of a struct."""

    rename_all: Inflection | None = None
    rename: str | None = None
    export_to: str | None = None
    export: bool = False

    @classmethod
    def parse(cls, text: str) -> StructAttr:
        """Parse the arguments of one ``ts`` attribute."""
        out = cls()
        for key, value, _ in _entries(text):
            match key:
                case "rename":
                    out.rename = _value(value)
                case "rename_all":
                    out.rename_all = Inflection.parse(_value(value))
                case "export":
                    _flag(value)
                    out.export = True
                case "export_to":
                    out.export_to = _value(value)
                case _:
                    raise _unexpected()
        return out

    @classmethod
    def parse_serde(cls, text: str) -> StructAttr:
        """Parse the supported arguments of one ``serde`` attribute."""
        out = cls()
        for key, value, _ in _entries(text):
            match key:
                case "rename":
                    out.rename = _value(value)
                case "rename_all":
                    out.rename_all = Inflection.parse(_value(value))
                case _:
                    raise _unexpected()
        return out

    @classmethod
    def from_attrs(cls, ts: Iterable[str], serde: Iterable[str] = ()) -> StructAttr:
        """Combine ``ts`` attributes with supported ``serde`` attributes."""
        result = cls()
        for attr in [cls.parse(text) for text in ts]:
            result.merge(attr)
        for attr in _parse_serde_each(cls.parse_serde, serde):
            result.merge(attr)
        return result

    def merge(self, other: StructAttr) -> None:
        """Take settings from ``other`` that are not already set here."""
        self.rename = self.rename if self.rename is not None else other.rename
        self.rename_all = self.rename_all if self.rename_all is not None else other.rename_all
        self.export_to = self.export_to if self.export_to is not None else other.export_to
        self.export = self.export or other.export


@dataclass
class EnumAttr:
    """Container attributes of an enum."""

    rename_all: Inflection | None = None
    rename: str | None = None
    export_to: str | None = None
    export: bool = False
    tag: str | None = None
    untagged: bool = False
    content: str | None = None

    def tagged(self) -> Tagged:
        """The representation selected by ``tag``, ``content`` and ``untagged``."""
        match (self.untagged, self.tag, self.content):
            case (False, None, None):
                return Tagged(Tagging.EXTERNALLY)
            case (False, str() as tag, None):
                return Tagged(Tagging.INTERNALLY, tag=tag)
            case (False, str() as tag, str() as content):
                return Tagged(Tagging.ADJACENTLY, tag=tag, content=content)
            case (True, None, None):
                return Tagged(Tagging.UNTAGGED)
            case (True, str(), None):
                raise DeriveError("untagged cannot be used with tag")
            case (True, _, str()):
                raise DeriveError("untagged cannot be used with content")
            case _:
                raise DeriveError("content cannot be used without tag")

    @classmethod
    def parse(cls, text: str) -> EnumAttr:
        """Parse the arguments of one ``ts`` attribute."""
        out = cls()
        for key, value, _ in _entries(text):
            match key:
                case "rename":
                    out.rename = _value(value)
                case "rename_all":
                    out.rename_all = Inflection.parse(_value(value))
                case "export_to":
                    out.export_to = _value(value)
                case "export":
                    _flag(value)
                    out.export = True
                case _:
                    raise _unexpected()
        return out

    @classmethod
    def parse_serde(cls, text: str) -> EnumAttr:
        """Parse the supported arguments of one ``serde`` attribute."""
        out = cls()
        for key, value, _ in _entries(text):
            match key:
                case "rename":
                    out.rename = _value(value)
                case "rename_all":
                    out.rename_all = Inflection.parse(_value(value))
                case "tag":
                    out.tag = _value(value)
                case "content":
                    out.content = _value(value)
                case "untagged":
                    _flag(value)
                    out.untagged = True
                case _:
                    raise _unexpected()
        return out

    @classmethod
    def from_attrs(cls, ts: Iterable[str], serde: Iterable[str] = ()) -> EnumAttr:
        """Combine ``ts`` attributes with supported ``serde`` attributes."""
        result = cls()
        for attr in [cls.parse(text) for text in ts]:
            result.merge(attr)
        for attr in _parse_serde_each(cls.parse_serde, serde):
            result.merge(attr)
        return result

    def merge(self, other: EnumAttr) -> None:
        """Take settings from ``other`` that are not already set here."""
        self.rename = self.rename if self.rename is not None else other.rename
        self.rename_all = self.rename_all if self.rename_all is not None else other.rename_all
        self.tag = self.tag if self.tag is not None else other.tag
        self.untagged = self.untagged or other.untagged
        self.content = self.content if self.content is not None else other.content
        self.export = self.export or other.export
        self.export_to = self.export_to if self.export_to is not None else other.export_to


@dataclass
class FieldAttr:
    """Attributes of a struct field or enum variant."""

    type_override: str | None = None
    rename: str | None = None
    inline: bool = False
    skip: bool = False
    optional: bool = False
    flatten: bool = False

    @classmethod
    def parse(cls, text: str) -> FieldAttr:
        """Parse the arguments of one ``ts`` attribute."""
        out = cls()
        for key, value, _ in _entries(text):
            match key:
                case "type":
                    out.type_override = _value(value)
                case "rename":
                    out.rename = _value(value)
                case "inline" | "skip" | "optional" | "flatten":
                    _flag(value)
                    setattr(out, key, True)
                case _:
                    raise _unexpected()
        return out

    @classmethod
    def parse_serde(cls, text: str) -> FieldAttr:
        """Parse the supported arguments of one ``serde`` attribute."""
        out = cls()
        for key, value, last in _entries(text):
            match key:
                case "rename":
                    out.rename = _value(value)
                case "skip" | "skip_serializing" | "skip_deserializing":
                    _flag(value)
                    out.skip = True
                case "skip_serializing_if":
                    out.optional = _value(value) == "Option::is_none"
                case "flatten":
                    _flag(value)
                    out.flatten = True
                case "default":
                    # a bare `default` is only accepted as the last argument
                    if value is None and not last:
                        raise DeriveError("expected `=`")
                case _:
                    raise _unexpected()
        return out

    @classmethod
    def from_attrs(cls, ts: Iterable[str], serde: Iterable[str] = ()) -> FieldAttr:
        """Combine ``ts`` attributes with supported ``serde`` attributes."""
        result = cls()
        for attr in [cls.parse(text) for text in ts]:
            result.merge(attr)
        for attr in _parse_serde_each(cls.parse_serde, serde):
            result.merge(attr)
        return result

    def merge(self, other: FieldAttr) -> None:
        """Take settings from ``other`` that are not already set here."""
        self.rename = self.rename if self.rename is not None else other.rename
        self.type_override = (
            self.type_override if self.type_override is not None else other.type_override
        )
        self.inline = self.inline or other.inline
        self.skip = self.skip or other.skip
        self.optional = self.optional or other.optional
        self.flatten = self.flatten or other.flatten