from __future__ import annotations

import html

from .config import DEFAULT_CONFIG, GeneratorConfig
from .model import (
    EnumDeclaration,
    FunctionDeclaration,
    HandleDeclaration,
    HeaderModel,
    ParamDirection,
    ParameterDeclaration,
    StructDeclaration,
    StructField,
)
from .type_mapping import (
    POINTER_TYPE,
    ManagedType,
    TypeKind,
    resolve_parameter_type,
    resolve_return_type,
    split_native_type,
)

GENERATED_BANNER = "// <auto-generated />"
GENERATOR_NOTE = "// Generated by ironthorvg-bindgen. Do not edit."

CSHARP_KEYWORDS = frozenset(
    {
        "abstract", "as", "base", "bool", "break", "byte", "case", "catch", "char", "checked",
        "class", "const", "continue", "decimal", "default", "delegate", "do", "double", "else",
        "enum", "event", "explicit", "extern", "false", "finally", "fixed", "float", "for",
        "foreach", "goto", "if", "implicit", "in", "int", "interface", "internal", "is", "lock",
        "long", "namespace", "new", "null", "object", "operator", "out", "override", "params",
        "private", "protected", "public", "readonly", "ref", "return", "sbyte", "sealed", "short",
        "sizeof", "stackalloc", "static", "string", "struct", "switch", "this", "throw", "true",
        "try", "typeof", "uint", "ulong", "unchecked", "unsafe", "ushort", "using", "virtual",
        "void", "volatile", "while",
    }
)

MARSHAL_BOOL = "MarshalAs(UnmanagedType.I1)"
MARSHAL_TEXT = "MarshalAs(UnmanagedType.LPUTF8Str)"
MARSHAL_BUFFER = "MarshalAs(UnmanagedType.LPArray)"


def escape_xml(value: str) -> str:
    return html.escape(value, quote=False)


def escape_identifier(name: str) -> str:
    return f"@{name}" if name in CSHARP_KEYWORDS else name


def render_summary(summary: str | None, indent: str = "") -> list[str]:
    if not summary:
        return []
    return [
        f"{indent}/// <summary>",
        f"{indent}/// {escape_xml(summary)}",
        f"{indent}/// </summary>",
    ]


def file_header(usings: list[str], namespace: str) -> list[str]:
    lines = [GENERATED_BANNER, GENERATOR_NOTE]
    lines.extend(f"using {item};" for item in usings)
    lines.append("")
    lines.append(f"namespace {namespace};")
    lines.append("")
    return lines


def finish(lines: list[str]) -> str:
    while lines and lines[-1] == "":
        lines.pop()
    return "\n".join(lines) + "\n"


# Enums


def render_enum(enum: EnumDeclaration) -> list[str]:
    lines = render_summary(enum.summary)
    if enum.is_flags:
        lines.append("[Flags]")
    lines.append(f"public enum {enum.name}")
    lines.append("{")
    for value in enum.values:
        lines.extend(render_summary(value.summary, "    "))
        if value.value is None:
            lines.append(f"    {value.name},")
        else:
            lines.append(f"    {value.name} = {value.value},")
    lines.append("}")
    lines.append("")
    return lines


def render_enums(model: HeaderModel, config: GeneratorConfig = DEFAULT_CONFIG) -> str:
    lines = file_header(["System"], config.output.namespace)
    for enum in model.enums:
        lines.extend(render_enum(enum))
    return finish(lines)


# Structs


def _is_bool(native_type: str) -> bool:
    parsed = split_native_type(native_type)
    return parsed.base == "bool" and parsed.pointer_depth == 0


def render_field(field: StructField) -> list[str]:
    lines = render_summary(field.summary, "    ")
    if field.array_length is not None:
        lines.append(f"    [MarshalAs(UnmanagedType.ByValArray, SizeConst = {field.array_length})]")
    elif _is_bool(field.native_type):
        lines.append(f"    [{MARSHAL_BOOL}]")
    lines.append(f"    public {field.type_name} {escape_identifier(field.name)};")
    return lines


def render_struct(struct: StructDeclaration, config: GeneratorConfig = DEFAULT_CONFIG) -> list[str]:
    lines = render_summary(struct.summary)
    pack = config.output.struct_pack.get(struct.native_name)
    if pack is None:
        lines.append("[StructLayout(LayoutKind.Sequential)]")
    else:
        lines.append(f"[StructLayout(LayoutKind.Sequential, Pack = {pack})]")
    lines.append(f"public partial struct {struct.name}")
    lines.append("{")
    for index, field in enumerate(struct.fields):
        if index:
            lines.append("")
        lines.extend(render_field(field))
    lines.append("}")
    lines.append("")
    return lines


def render_structs(model: HeaderModel, config: GeneratorConfig = DEFAULT_CONFIG) -> str:
    lines = file_header(["System.Runtime.InteropServices"], config.output.namespace)
    for struct in model.structs:
        lines.extend(render_struct(struct, config))
    return finish(lines)


# Native methods


def parameter_modifier(param: ParameterDeclaration, managed: ManagedType) -> str:
    by_reference = param.pointer_depth >= 1 and not managed.is_pointer_shaped
    if param.direction is ParamDirection.OUT and by_reference:
        return "out"
    if param.direction is ParamDirection.IN_OUT and by_reference:
        return "ref"
    if managed.kind in (TypeKind.AGGREGATE, TypeKind.ALIAS) and param.pointer_depth == 1:
        return "in" if param.is_const else "ref"
    return ""


def parameter_attribute(managed: ManagedType) -> str:
    if managed.kind is TypeKind.TEXT:
        return f"[{MARSHAL_TEXT}]"
    if managed.kind is TypeKind.BUFFER:
        return f"[{MARSHAL_BUFFER}]"
    if managed.name == "bool" and managed.kind is TypeKind.PRIMITIVE:
        return f"[{MARSHAL_BOOL}]"
    return ""


def render_parameter(
    param: ParameterDeclaration,
    handles: tuple[HandleDeclaration, ...],
    config: GeneratorConfig = DEFAULT_CONFIG,
) -> str:
    managed = resolve_parameter_type(param, handles, config.types)
    parts = [
        parameter_attribute(managed),
        parameter_modifier(param, managed),
        managed.name,
        escape_identifier(param.name),
    ]
    return " ".join(part for part in parts if part)


def render_function_docs(function: FunctionDeclaration) -> list[str]:
    lines = render_summary(function.summary, "    ")
    for param in function.parameters:
        if param.summary:
            lines.append(f'    /// <param name="{param.name}">{escape_xml(param.summary)}</param>')
    if function.returns:
        lines.append(f"    /// <returns>{escape_xml(function.returns)}</returns>")
    return lines


def render_function(
    function: FunctionDeclaration,
    handles: tuple[HandleDeclaration, ...],
    config: GeneratorConfig = DEFAULT_CONFIG,
) -> list[str]:
    output = config.output
    returns = resolve_return_type(function.return_type, handles, config.types)
    params = ", ".join(render_parameter(param, handles, config) for param in function.parameters)

    lines = render_function_docs(function)
    lines.append(
        f"    [DllImport(LibraryName, CallingConvention = CallingConvention.{output.calling_convention}, "
        f'EntryPoint = "{function.name}")]'
    )
    if returns.kind is TypeKind.PRIMITIVE and returns.name == "bool":
        lines.append(f"    [return: {MARSHAL_BOOL}]")
    # Returned strings are owned by the library; the marshaller must not free them.
    return_name = POINTER_TYPE if returns.kind is TypeKind.TEXT else returns.name
    lines.append(f"    {output.access_modifier} static extern {return_name} {function.name}({params});")
    lines.append("")
    return lines


def render_native_methods(model: HeaderModel, config: GeneratorConfig = DEFAULT_CONFIG) -> str:
    output = config.output
    usings = ["System", "System.Runtime.InteropServices"]
    if output.namespace != output.native_namespace:
        usings.append(output.namespace)

    lines = file_header(usings, output.native_namespace)
    lines.append(f"{output.access_modifier} static partial class {output.class_name}")
    lines.append("{")
    lines.append(f'    private const string LibraryName = "{output.library_name}";')
    lines.append("")
    for function in model.functions:
        lines.extend(render_function(function, model.handles, config))
    while lines and lines[-1] == "":
        lines.pop()
    lines.append("}")
    return finish(lines)


def render_all(model: HeaderModel, config: GeneratorConfig = DEFAULT_CONFIG) -> dict[str, str]:
    """Render every artifact in memory, keyed by output file name."""
    output = config.output
    return {
        output.enums_file: render_enums(model, config),
        output.structs_file: render_structs(model, config),
        output.native_methods_file: render_native_methods(model, config),
    }
