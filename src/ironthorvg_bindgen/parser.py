"""Recursive-descent parser for the ThorVG C API header.

Top-level productions are tried in order at every position:

1. ``typedef enum {...} Name;``
2. ``typedef struct _Tag* Name;`` (opaque handle), else ``typedef struct {...} Name;``
3. ``<export macro> <ret> name(<params>);``
4. anything else is skipped through the next ``;``
"""

from __future__ import annotations

import re
from typing import Iterator

from .config import DEFAULT_CONFIG, GeneratorConfig
from .ctext import (
    count_leading_stars,
    detach_pointer_markers,
    normalize_ws,
    sanitize_c_decl_text,
    strip_c_comments,
    strip_plain_comments,
)
from .docs import DocComment, extract_inline_summary, has_inline_doc, parse_doc_comment, strip_inline_comment
from .errors import BindgenError
from .model import (
    Declaration,
    EnumDeclaration,
    EnumValue,
    FunctionDeclaration,
    HandleDeclaration,
    HeaderModel,
    ParameterDeclaration,
    StructDeclaration,
    StructField,
)
from .naming import to_enum_member_name, to_field_name, to_handle_name, to_type_name
from .scanner import Cursor, split_top_level
from .type_mapping import normalize_c_type, resolve_field_type

_TYPEDEF_ENUM_RE = re.compile(r"typedef\s+enum\b")
_TYPEDEF_STRUCT_RE = re.compile(r"typedef\s+struct\b")
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_FIELD_NAME_RE = re.compile(r"^(?P<name>\**\s*[A-Za-z_][A-Za-z0-9_]*)\s*(?P<dims>(?:\[[^\]]*\])*)$")
_FUNCTION_POINTER_RE = re.compile(r"\(\s*\*\s*(?P<name>[A-Za-z_][A-Za-z0-9_]*)?\s*\)")
_ARRAY_PARAM_RE = re.compile(r"^(?P<decl>.*?)\s*(?P<dims>(?:\[[^\]]*\])+)$")
_LEADING_DOC_RE = re.compile(r"/\*\*(?!<).*?\*/", flags=re.S)
_LEADING_DOC_SPLIT_RE = re.compile(f"({_LEADING_DOC_RE.pattern})", flags=re.S)

# Trailing words that belong to the type of an unnamed parameter.
_TYPE_WORDS = frozenset(
    {"void", "bool", "char", "short", "int", "long", "float", "double", "signed", "unsigned", "const"}
)


def parse_header(text: str, config: GeneratorConfig = DEFAULT_CONFIG) -> HeaderModel:
    cursor = Cursor(text)
    declarations: list[Declaration] = []
    handles: list[HandleDeclaration] = []

    while True:
        cursor.skip_whitespace()
        if cursor.eof:
            break
        if cursor.try_consume_doc_comment():
            continue
        if cursor.try_consume_comment() or cursor.try_consume_preprocessor():
            continue

        declaration = parse_declaration(cursor, handles, config)
        if declaration is None:
            cursor.skip_statement()
            cursor.take_pending_doc()
            continue

        declarations.append(declaration)
        if isinstance(declaration, HandleDeclaration):
            handles.append(declaration)

    return HeaderModel.from_declarations(declarations)


def parse_declaration(
    cursor: Cursor,
    handles: list[HandleDeclaration],
    config: GeneratorConfig,
) -> Declaration | None:
    if cursor.peek_match(_TYPEDEF_ENUM_RE):
        return parse_enum(cursor, config)
    if cursor.peek_match(_TYPEDEF_STRUCT_RE):
        handle = try_parse_handle(cursor, config)
        if handle is not None:
            return handle
        return parse_struct(cursor, handles, config)
    if cursor.peek_keyword(config.export_macro):
        return parse_function(cursor, config)
    return None


def _read_name(cursor: Cursor) -> str:
    name = cursor.read_identifier()
    if not name:
        raise cursor.error("Expected identifier")
    return name


def _skip_optional_tag(cursor: Cursor) -> None:
    if not cursor.peek_startswith("{"):
        cursor.read_identifier()


def parse_enum(cursor: Cursor, config: GeneratorConfig) -> EnumDeclaration:
    cursor.expect_words("typedef", "enum")
    _skip_optional_tag(cursor)
    cursor.expect("{")
    body = cursor.read_block("{", "}")
    native_name = _read_name(cursor)
    cursor.expect(";")
    doc = parse_doc_comment(cursor.take_pending_doc())

    values = parse_enum_values(native_name, body, config)
    is_flags = any(value.value is not None and "<<" in value.value for value in values)
    return EnumDeclaration(
        name=to_type_name(native_name, config.naming),
        native_name=native_name,
        summary=doc.summary,
        values=values,
        is_flags=is_flags,
    )


def parse_enum_values(enum_native_name: str, body: str, config: GeneratorConfig) -> tuple[EnumValue, ...]:
    values: list[EnumValue] = []
    seen: dict[str, str] = {}
    # A `/** */` block documents the next enumerator unless it has its own `///<`.
    pending: str | None = None

    for position, chunk in enumerate(_LEADING_DOC_SPLIT_RE.split(body)):
        if position % 2:
            pending = parse_doc_comment(chunk).summary
            continue
        for piece, summary in _enum_entries(chunk):
            native, _, literal = piece.partition("=")
            native = native.strip()
            if not _IDENTIFIER_RE.match(native):
                continue
            name = to_enum_member_name(enum_native_name, native, config.naming)
            if name in seen:
                raise BindgenError(
                    f"Enum '{enum_native_name}' maps both '{seen[name]}' and '{native}' to member '{name}'"
                )
            seen[name] = native
            values.append(
                EnumValue(
                    name=name,
                    native_name=native,
                    value=normalize_ws(literal) or None,
                    summary=summary or pending,
                )
            )
            pending = None

    return tuple(values)


def _enum_entries(chunk: str) -> Iterator[tuple[str, str | None]]:
    for raw_line in strip_plain_comments(chunk).split("\n"):
        line = raw_line.strip()
        if not line:
            continue
        summary = extract_inline_summary(line)
        entry = strip_inline_comment(line)
        if has_inline_doc(line) and not entry.strip():
            continue
        for piece in split_top_level(entry, ","):
            yield piece, summary


def try_parse_handle(cursor: Cursor, config: GeneratorConfig) -> HandleDeclaration | None:
    start = cursor.mark()
    cursor.expect_words("typedef", "struct")
    if not cursor.peek_startswith("_"):
        cursor.reset(start)
        return None
    tag = cursor.read_identifier()
    if not cursor.try_consume("*"):
        cursor.reset(start)
        return None
    native_name = cursor.read_identifier()
    if not native_name or not cursor.try_consume(";"):
        cursor.reset(start)
        return None

    cursor.take_pending_doc()
    return HandleDeclaration(
        name=to_handle_name(native_name, config.naming),
        native_name=native_name,
        tag=tag,
    )


def parse_struct(
    cursor: Cursor,
    handles: list[HandleDeclaration],
    config: GeneratorConfig,
) -> StructDeclaration:
    cursor.expect_words("typedef", "struct")
    _skip_optional_tag(cursor)
    cursor.expect("{")
    body = cursor.read_block("{", "}")
    native_name = _read_name(cursor)
    cursor.expect(";")
    doc = parse_doc_comment(cursor.take_pending_doc())

    fields: list[StructField] = []
    for statement in split_struct_fields(body):
        fields.extend(parse_field_statement(statement, handles, config))

    return StructDeclaration(
        name=to_type_name(native_name, config.naming),
        native_name=native_name,
        summary=doc.summary,
        fields=tuple(fields),
    )


def _comment_end(text: str, start: int) -> int:
    if text.startswith("//", start):
        end = text.find("\n", start)
        return len(text) if end < 0 else end
    end = text.find("*/", start + 2)
    return len(text) if end < 0 else end + 2


def _is_trailing_comment(text: str, start: int) -> bool:
    # A `/** */` block after `;` documents the next field, not this one.
    if text.startswith("/**", start) and not text.startswith("/**<", start):
        return False
    return text.startswith("//", start) or text.startswith("/*", start)


def split_struct_fields(body: str) -> list[str]:
    """Split a struct body on top-level `;`, keeping a same-line trailing comment with its field."""
    statements: list[str] = []
    token: list[str] = []
    depth = 0
    index = 0
    size = len(body)

    while index < size:
        if body.startswith("//", index) or body.startswith("/*", index):
            end = _comment_end(body, index)
            token.append(body[index:end])
            index = end
            continue

        ch = body[index]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth = max(0, depth - 1)
        elif ch == ";" and depth == 0:
            token.append(ch)
            index += 1
            lookahead = index
            while lookahead < size and body[lookahead] in " \t":
                lookahead += 1
            if _is_trailing_comment(body, lookahead):
                end = _comment_end(body, lookahead)
                token.append(body[index:end])
                index = end
            statements.append("".join(token))
            token = []
            continue

        token.append(ch)
        index += 1

    tail = "".join(token)
    if tail.strip():
        statements.append(tail)
    return statements


def parse_field_statement(
    statement: str,
    handles: list[HandleDeclaration],
    config: GeneratorConfig,
) -> list[StructField]:
    summary: str | None = None
    kept: list[str] = []
    for line in statement.split("\n"):
        if summary is None:
            summary = extract_inline_summary(line)
        kept.append(strip_inline_comment(line))
    text = "\n".join(kept)

    if summary is None:
        leading = _LEADING_DOC_RE.search(text)
        if leading:
            summary = parse_doc_comment(leading.group(0)).summary

    text = normalize_ws(strip_c_comments(text)).rstrip(";").strip()
    if not text:
        return []

    type_part, declarators = split_field_declaration(text)
    fields: list[StructField] = []
    for declarator in declarators:
        match = _FIELD_NAME_RE.match(declarator)
        if not match:
            continue
        name, depth = count_leading_stars(match.group("name").replace(" ", ""))
        native_type = normalize_c_type(type_part + "*" * depth)
        array_length = _array_length(match.group("dims"))
        if match.group("dims") and array_length is None:
            # Unsized or symbolic dimensions decay to a pointer.
            native_type = normalize_c_type(native_type + "*")

        resolved = resolve_field_type(native_type, handles, config.types)
        type_name = f"{resolved.name}[]" if array_length is not None else resolved.name
        fields.append(
            StructField(
                name=to_field_name(name),
                type_name=type_name,
                summary=summary,
                native_type=native_type,
                array_length=array_length,
            )
        )
    return fields


def split_field_declaration(text: str) -> tuple[str, list[str]]:
    """Split ``float x, *y`` into the shared type ``float`` and its declarators."""
    parts = [part.strip() for part in split_top_level(text, ",") if part.strip()]
    if not parts:
        return "", []

    first = detach_pointer_markers(parts[0])
    dims_index = first.find("[")
    head = first if dims_index < 0 else first[:dims_index].rstrip()
    dims = "" if dims_index < 0 else first[dims_index:]

    split_at = max(head.rfind(" "), head.rfind("*"))
    if split_at < 0:
        return "", [parts[0]]
    type_part = head[:split_at + 1].strip()
    base_type = type_part.rstrip("* ").strip()
    # Pointer markers bind to the first declarator only.
    stars = type_part[len(base_type):].count("*")
    first_name = "*" * stars + head[split_at + 1:].strip() + dims
    return base_type, [first_name, *parts[1:]]


def _array_length(dims: str) -> int | None:
    if not dims:
        return None
    length = 1
    for raw in re.findall(r"\[([^\]]*)\]", dims):
        raw = raw.strip()
        if not raw.isdigit():
            return None
        length *= int(raw)
    return length


def parse_function(cursor: Cursor, config: GeneratorConfig) -> FunctionDeclaration:
    start = cursor.mark()
    cursor.expect(config.export_macro)
    declaration = cursor.read_until(";")
    cursor.expect(";")
    doc = parse_doc_comment(cursor.take_pending_doc())

    declaration = sanitize_c_decl_text(declaration)
    open_paren = declaration.find("(")
    close_paren = declaration.rfind(")")
    if open_paren < 0 or close_paren < open_paren:
        raise cursor.error("Expected '('", start)

    signature = detach_pointer_markers(declaration[:open_paren].strip())
    tokens = signature.split()
    if len(tokens) < 2:
        raise cursor.error("Expected return type and function name", start)
    name, depth = count_leading_stars(tokens[-1])
    return_type = normalize_c_type(" ".join(tokens[:-1]) + "*" * depth)

    parameters: list[ParameterDeclaration] = []
    raw_params = [part.strip() for part in split_top_level(declaration[open_paren + 1:close_paren], ",")]
    if raw_params != ["void"]:
        for index, raw in enumerate(raw_params):
            if raw:
                parameters.append(parse_parameter(raw, index, doc))

    return FunctionDeclaration(
        name=name,
        return_type=return_type,
        summary=doc.summary,
        returns=doc.returns,
        parameters=tuple(parameters),
    )


def parse_parameter(raw: str, index: int, doc: DocComment) -> ParameterDeclaration:
    text = normalize_ws(raw)

    callback = _FUNCTION_POINTER_RE.search(text)
    if callback:
        name = callback.group("name") or f"arg{index}"
        if callback.group("name"):
            text = text[: callback.start("name")] + text[callback.end("name") :]
        return ParameterDeclaration(
            name=name,
            native_type=normalize_c_type(text),
            summary=doc.summary_of(name),
            direction=doc.direction_of(name),
            is_const=False,
            is_pointer=True,
            pointer_depth=1,
            is_callback=True,
        )

    array = _ARRAY_PARAM_RE.match(text)
    if array:
        text = _decay_array(array.group("decl"), array.group("dims").count("["))

    tokens = detach_pointer_markers(text).split()
    last = tokens[-1] if tokens else ""
    if len(tokens) < 2 or last.endswith("*") or last in _TYPE_WORDS:
        name = f"arg{index}"
        native_type = normalize_c_type(text)
    else:
        name, depth = count_leading_stars(last)
        native_type = normalize_c_type(" ".join(tokens[:-1]) + "*" * depth)

    return ParameterDeclaration(
        name=name,
        native_type=native_type,
        summary=doc.summary_of(name),
        direction=doc.direction_of(name),
        is_const=re.search(r"\bconst\b", native_type) is not None,
        is_pointer="*" in native_type,
        pointer_depth=native_type.count("*"),
    )


def _decay_array(decl: str, dims: int) -> str:
    # "float v[]" -> "float* v"; unnamed "float[]" -> "float*"
    type_part, sep, name = decl.rpartition(" ")
    if not sep or name in _TYPE_WORDS:
        return f"{decl}{'*' * dims}"
    return f"{type_part}{'*' * dims} {name}"
