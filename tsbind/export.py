"""Writing TypeScript declarations to files, with the imports they need."""

from __future__ import annotations

import json
import os
from pathlib import Path

from tsbind.types import TS

MANIFEST_DIR_VAR = "CARGO_MANIFEST_DIR"


class ExportError(Exception):
    """An error that occurred while exporting a type."""


class CannotBeExported(ExportError):
    """The type has no file to be exported to."""

    def __init__(self, message: str = "this type cannot be exported") -> None:
        super().__init__(message)


class FormattingError(ExportError):
    """The generated TypeScript could not be formatted."""


class ManifestDirNotSet(ExportError):
    """No output base directory was given or found in the environment."""

    def __init__(
        self, message: str = f"the environment variable {MANIFEST_DIR_VAR} is not set"
    ) -> None:
        super().__init__(message)


def export_type(ty: TS, manifest_dir: str | os.PathLike[str] | None = None) -> Path:
    """Write the declaration of ``ty`` with its imports; return the file written."""
    path = output_path(ty, manifest_dir)
    formatted = format_typescript(generate_imports(ty) + generate_decl(ty))
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(formatted, encoding="utf-8")
    except OSError as err:
        raise ExportError("an error occurred while performing IO") from err
    return path


def output_path(ty: TS, manifest_dir: str | os.PathLike[str] | None = None) -> Path:
    """The file ``ty`` is exported to, below ``manifest_dir`` or the environment's."""
    if manifest_dir is None:
        manifest_dir = os.environ.get(MANIFEST_DIR_VAR)
        if manifest_dir is None:
            raise ManifestDirNotSet()
    if ty.export_to is None:
        raise CannotBeExported()
    return Path(manifest_dir) / ty.export_to


def generate_decl(ty: TS) -> str:
    """The exported declaration of ``ty``."""
    return "export " + ty.decl()


def generate_imports(ty: TS) -> str:
    """Import statements for every dependency of ``ty``, then a blank line."""
    if ty.export_to is None:
        raise CannotBeExported()
    deps = sorted({dep for dep in ty.dependencies() if dep.type_id is not ty})
    lines = [
        f"import type {{ {dep.ts_name} }} from "
        f"{json.dumps(import_path(ty.export_to, dep.exported_to), ensure_ascii=False)};\n"
        for dep in deps
    ]
    return "".join(lines) + "\n"


def import_path(from_path: str | os.PathLike[str], import_path: str | os.PathLike[str]) -> str:
    """The module specifier for importing ``import_path`` from the file ``from_path``."""
    from_parts = _components(from_path)
    if not from_parts or from_parts == ["/"]:
        raise ValueError("failed to calculate import path")
    relative = diff_paths(import_path, _join(from_parts[:-1]))
    if relative is None:
        raise ValueError("failed to calculate import path")
    parts = _components(relative)
    if parts and parts[0] not in ("/", ".", ".."):
        relative = f"./{relative}"
    while relative.endswith(".ts"):
        relative = relative[: -len(".ts")]
    return relative


def diff_paths(path: str | os.PathLike[str], base: str | os.PathLike[str]) -> str | None:
    """A relative path from directory ``base`` to ``path``, or None if there is none."""
    path_parts = _components(path)
    base_parts = _components(base)
    path_absolute = _is_absolute(path_parts)
    if path_absolute != _is_absolute(base_parts):
        return _join(path_parts) if path_absolute else None

    ita, itb = iter(path_parts), iter(base_parts)
    comps: list[str] = []
    while True:
        a, b = next(ita, None), next(itb, None)
        if a is None and b is None:
            break
        if b is None:
            comps.append(a)
            comps.extend(ita)
            break
        if a is None:
            comps.append("..")
        elif not comps and a == b:
            continue
        elif b == ".":
            comps.append(a)
        elif b == "..":
            return None
        else:
            comps.append("..")
            comps.extend(".." for _ in itb)
            comps.append(a)
            comps.extend(ita)
            break
    return _join(comps)


def _components(path: str | os.PathLike[str]) -> list[str]:
    text = os.fspath(path).replace(os.sep, "/")
    parts = ["/"] if text.startswith("/") else []
    for position, piece in enumerate(text.split("/")):
        if not piece:
            continue
        if piece == ".":
            if position == 0:
                parts.append(".")
            continue
        parts.append(piece)
    return parts


def _is_absolute(parts: list[str]) -> bool:
    return bool(parts) and parts[0] == "/"


def _join(parts: list[str]) -> str:
    if _is_absolute(parts):
        return "/" + "/".join(parts[1:])
    return "/".join(parts)


_OPEN = "{[(<"
_CLOSE = "}])>"


def _string_end(text: str, start: int) -> int:
    position = start + 1
    while position < len(text):
        if text[position] == "\\":
            position += 2
            continue
        if text[position] == '"':
            return position + 1
        position += 1
    raise FormattingError("unterminated string literal")


def _matching_brace(text: str, start: int) -> int:
    depth = 0
    position = start
    while position < len(text):
        char = text[position]
        if char == '"':
            position = _string_end(text, position)
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return position
        position += 1
    raise FormattingError("unbalanced braces")


def _split_top(text: str) -> list[str]:
    pieces: list[str] = []
    depth = 0
    current = 0
    position = 0
    while position < len(text):
        char = text[position]
        if char == '"':
            position = _string_end(text, position)
            continue
        if char in _OPEN:
            depth += 1
        elif char in _CLOSE:
            depth -= 1
            if depth < 0:
                raise FormattingError("unbalanced brackets")
        elif char == "," and depth == 0:
            pieces.append(text[current:position])
            current = position + 1
        position += 1
    if depth != 0:
        raise FormattingError("unbalanced brackets")
    pieces.append(text[current:])
    return [piece.strip() for piece in pieces if piece.strip()]


def _normalize(text: str) -> str:
    out: list[str] = []
    position = 0
    while position < len(text):
        char = text[position]
        if char == '"':
            end = _string_end(text, position)
            out.append(text[position:end])
            position = end
        elif char == "{":
            end = _matching_brace(text, position)
            members = [_normalize(member) for member in _split_top(text[position + 1 : end])]
            out.append("{ " + "; ".join(members) + " }" if members else "{}")
            position = end + 1
        elif char == "}":
            raise FormattingError("unbalanced braces")
        else:
            out.append(char)
            position += 1
    return "".join(out)


def _body_start(line: str) -> int | None:
    position = 0
    while position < len(line):
        char = line[position]
        if char == '"':
            position = _string_end(line, position)
            continue
        if char == "{":
            end = _matching_brace(line, position)
            if end == len(line) - 1:
                return position
            position = end + 1
            continue
        position += 1
    return None


def _format_statement(line: str) -> list[str]:
    words = line.split()
    is_interface = "interface" in words[:2]
    if is_interface and line.endswith("}"):
        start = _body_start(line)
        if start is None:
            raise FormattingError("malformed interface declaration")
        head = line[:start].rstrip()
        members = [_normalize(member) for member in _split_top(line[start + 1 : -1])]
        if not members:
            return [f"{head} {{}}"]
        return [f"{head} {{", *(f"  {member};" for member in members), "}"]
    return [_normalize(line)]


def format_typescript(text: str) -> str:
    """Lay out generated TypeScript: imports first, interfaces one member per line."""
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    imports = [line for line in lines if line.startswith("import ")]
    statements = [line for line in lines if not line.startswith("import ")]
    out = list(imports)
    if imports and statements:
        out.append("")
    for statement in statements:
        out.extend(_format_statement(statement))
    return "\n".join(out) + "\n"