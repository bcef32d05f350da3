"""Canonical formatting for generated Go source.

Handles the declarations the generator emits:
- package clause
- import declarations (single or grouped)
- struct type declarations with comment lines, fields and raw-string tags

Output follows gofmt layout: tab indentation, one blank line between
declarations, sorted and de-duplicated import specs inside a group, and
struct fields aligned into name/type/tag columns the way text/tabwriter
aligns them. Anything outside that grammar raises FormatError.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .errors import FormatError

GO_KEYWORDS = frozenset({
    "break", "case", "chan", "const", "continue", "default", "defer", "else",
    "fallthrough", "for", "func", "go", "goto", "if", "import", "interface",
    "map", "package", "range", "return", "select", "struct", "switch", "type",
    "var",
})

_IDENT = r"[^\W\d]\w*"
_TYPE_NAME = rf"(?:\[\])?\*?{_IDENT}(?:\.{_IDENT})?"

_PACKAGE_RE = re.compile(rf"^package\s+({_IDENT})$")
_IMPORT_SINGLE_RE = re.compile(r'^import\s+"([^"\\\s]+)"$')
_IMPORT_GROUP_RE = re.compile(r"^import\s*\($")
_IMPORT_SPEC_RE = re.compile(r'^"([^"\\\s]+)"$')
_STRUCT_OPEN_RE = re.compile(rf"^type\s+({_IDENT})\s+struct\s*\{{$")
_FIELD_RE = re.compile(rf"^({_IDENT})\s+({_TYPE_NAME})(?:\s+(`[^`]*`))?$")
_COMMENT_RE = re.compile(r"^//.*$")


@dataclass
class _ImportDecl:
    grouped: bool
    paths: list[str] = field(default_factory=list)


@dataclass
class _StructDecl:
    name: str
    comments: list[str] = field(default_factory=list)
    rows: list[list[str]] = field(default_factory=list)


def _check_ident(name: str, lineno: int) -> None:
    """Reject Go keywords used as identifiers."""
    if name in GO_KEYWORDS:
        raise FormatError(f"expected identifier, found keyword {name!r}", lineno)


def _align(rows: list[list[str]]) -> list[str]:
    """Pad cells so each column lines up within a run of consecutive rows.

    A cell takes part in alignment only when another cell follows it on the
    same row; a row with fewer cells ends the run for the columns it lacks.
    """
    widths = [[0] * len(row) for row in rows]
    ncols = max((len(row) for row in rows), default=0)

    for col in range(ncols - 1):
        start: int | None = None
        for i in range(len(rows) + 1):
            inside = i < len(rows) and len(rows[i]) > col + 1
            if inside and start is None:
                start = i
            elif not inside and start is not None:
                width = max(len(rows[k][col]) for k in range(start, i)) + 1
                for k in range(start, i):
                    widths[k][col] = width
                start = None

    lines = []
    for row, row_widths in zip(rows, widths):
        cells = [cell.ljust(row_widths[c]) for c, cell in enumerate(row[:-1])]
        cells.append(row[-1])
        lines.append("\t" + "".join(cells))
    return lines


def format_source(src: str) -> str:
    """Validate generated Go source and return it in canonical layout."""
    package: str | None = None
    imports: list[_ImportDecl] = []
    structs: list[_StructDecl] = []
    pending_comments: list[str] = []
    import_group: _ImportDecl | None = None
    struct: _StructDecl | None = None
    lineno = 0

    for lineno, raw in enumerate(src.splitlines(), start=1):
        line = raw.strip()

        if import_group is not None:
            if not line:
                continue
            if line == ")":
                imports.append(import_group)
                import_group = None
                continue
            m = _IMPORT_SPEC_RE.match(line)
            if not m:
                raise FormatError(f"expected import path, found {line!r}", lineno)
            import_group.paths.append(m.group(1))
            continue

        if struct is not None:
            if not line:
                continue
            if line == "}":
                structs.append(struct)
                struct = None
                continue
            if _COMMENT_RE.match(line):
                struct.rows.append([line])
                continue
            m = _FIELD_RE.match(line)
            if not m:
                raise FormatError(f"expected struct field, found {line!r}", lineno)
            _check_ident(m.group(1), lineno)
            struct.rows.append([c for c in m.groups() if c])
            continue

        if not line:
            continue

        if package is None:
            m = _PACKAGE_RE.match(line)
            if not m:
                raise FormatError(f"expected 'package', found {line!r}", lineno)
            _check_ident(m.group(1), lineno)
            package = m.group(1)
            continue

        if _COMMENT_RE.match(line):
            pending_comments.append(line)
            continue

        if line.startswith("import"):
            if structs or pending_comments:
                raise FormatError("imports must appear before other declarations", lineno)
            m = _IMPORT_SINGLE_RE.match(line)
            if m:
                imports.append(_ImportDecl(grouped=False, paths=[m.group(1)]))
                continue
            if _IMPORT_GROUP_RE.match(line):
                import_group = _ImportDecl(grouped=True)
                continue
            raise FormatError(f"malformed import declaration {line!r}", lineno)

        m = _STRUCT_OPEN_RE.match(line)
        if m:
            _check_ident(m.group(1), lineno)
            struct = _StructDecl(name=m.group(1), comments=pending_comments)
            pending_comments = []
            continue

        raise FormatError(f"expected declaration, found {line!r}", lineno)

    if import_group is not None or struct is not None:
        raise FormatError("unexpected EOF", lineno)
    if package is None:
        raise FormatError("expected 'package', found EOF", lineno)

    out = [f"package {package}"]
    for decl in imports:
        out.append("")
        if decl.grouped:
            out.append("import (")
            out.extend(f'\t"{path}"' for path in sorted(set(decl.paths)))
            out.append(")")
        else:
            out.append(f'import "{decl.paths[0]}"')
    for decl in structs:
        out.append("")
        out.extend(decl.comments)
        out.append(f"type {decl.name} struct {{")
        out.extend(_align(decl.rows))
        out.append("}")
    if pending_comments:
        out.append("")
        out.extend(pending_comments)

    return "\n".join(out) + "\n"
