from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from .model import HandleDeclaration, ParamDirection, ParameterDeclaration
from .naming import DEFAULT_NAMING, NamingRules, has_record_prefix, to_type_name

POINTER_TYPE = "nint"
TEXT_TYPE = "string"
BUFFER_TYPE = "byte[]"

PRIMITIVE_TYPES: Mapping[str, str] = MappingProxyType(
    {
        "void": "void",
        "bool": "bool",
        "char": "sbyte",
        "signed char": "sbyte",
        "unsigned char": "byte",
        "short": "short",
        "unsigned short": "ushort",
        "int": "int",
        "unsigned": "uint",
        "unsigned int": "uint",
        "long long": "long",
        "unsigned long long": "ulong",
        "int8_t": "sbyte",
        "uint8_t": "byte",
        "int16_t": "short",
        "uint16_t": "ushort",
        "int32_t": "int",
        "uint32_t": "uint",
        "int64_t": "long",
        "uint64_t": "ulong",
        "size_t": "nuint",
        "float": "float",
        "double": "double",
    }
)

DEFAULT_TYPEDEF_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "Tvg_Path_Command": "byte",
        "Tvg_Picture_Asset_Resolver": "nint",
    }
)

DEFAULT_BY_VALUE_AGGREGATES: tuple[str, ...] = ("Tvg_Point", "Tvg_Matrix", "Tvg_Color_Stop")

DEFAULT_BUFFER_PARAMETER_NAMES: tuple[str, ...] = ("data",)

_QUALIFIER_RE = re.compile(r"\b(?:const|volatile|restrict|struct|enum)\b")


class TypeKind(enum.Enum):
    VOID = "void"
    PRIMITIVE = "primitive"
    AGGREGATE = "aggregate"
    HANDLE = "handle"
    TEXT = "text"
    BUFFER = "buffer"
    ALIAS = "alias"
    RECORD = "record"
    POINTER = "pointer"
    CALLBACK = "callback"


@dataclass(frozen=True)
class ManagedType:
    name: str
    kind: TypeKind
    by_reference: bool = False

    @property
    def is_pointer_shaped(self) -> bool:
        return self.kind in (TypeKind.HANDLE, TypeKind.TEXT, TypeKind.BUFFER, TypeKind.CALLBACK)

    def __str__(self) -> str:
        return self.name


FALLBACK = ManagedType(POINTER_TYPE, TypeKind.POINTER)
CALLBACK = ManagedType(POINTER_TYPE, TypeKind.CALLBACK)
VOID = ManagedType("void", TypeKind.VOID)


@dataclass(frozen=True)
class NativeType:
    base: str
    pointer_depth: int
    is_const: bool


@dataclass(frozen=True)
class TypeRules:
    naming: NamingRules = DEFAULT_NAMING
    primitives: Mapping[str, str] = field(default_factory=lambda: PRIMITIVE_TYPES)
    typedef_aliases: Mapping[str, str] = field(default_factory=lambda: DEFAULT_TYPEDEF_ALIASES)
    by_value_aggregates: tuple[str, ...] = DEFAULT_BY_VALUE_AGGREGATES
    buffer_parameter_names: tuple[str, ...] = DEFAULT_BUFFER_PARAMETER_NAMES


DEFAULT_TYPE_RULES = TypeRules()


def normalize_c_type(value: str) -> str:
    text = " ".join(value.replace("\t", " ").split())
    text = re.sub(r"\s*\*\s*", "*", text)
    return text.strip()


def split_native_type(value: str) -> NativeType:
    text = normalize_c_type(value)
    is_const = re.search(r"\bconst\b", text) is not None
    depth = text.count("*")
    base = _QUALIFIER_RE.sub(" ", text.replace("*", " "))
    return NativeType(base=" ".join(base.split()), pointer_depth=depth, is_const=is_const)


def find_handle(handles: Iterable[HandleDeclaration], base: str) -> HandleDeclaration | None:
    for handle in handles:
        if handle.matches(base):
            return handle
    return None


def resolve_parameter_type(
    param: ParameterDeclaration,
    handles: Iterable[HandleDeclaration],
    rules: TypeRules = DEFAULT_TYPE_RULES,
) -> ManagedType:
    if param.is_callback:
        return CALLBACK
    base = split_native_type(param.native_type).base
    return _resolve(
        base=base,
        pointer_depth=param.pointer_depth,
        is_const=param.is_const,
        direction=param.direction,
        name=param.name,
        handles=handles,
        rules=rules,
    )


def resolve_return_type(
    native_type: str,
    handles: Iterable[HandleDeclaration],
    rules: TypeRules = DEFAULT_TYPE_RULES,
) -> ManagedType:
    parsed = split_native_type(native_type)
    if parsed.base == "void" and parsed.pointer_depth == 0:
        return VOID
    return _resolve(
        base=parsed.base,
        pointer_depth=parsed.pointer_depth,
        is_const=parsed.is_const,
        direction=ParamDirection.UNKNOWN,
        name=None,
        handles=handles,
        rules=rules,
    )


def resolve_field_type(
    native_type: str,
    handles: Iterable[HandleDeclaration],
    rules: TypeRules = DEFAULT_TYPE_RULES,
) -> ManagedType:
    parsed = split_native_type(native_type)
    handle = find_handle(handles, parsed.base)
    if parsed.pointer_depth > 0 and handle is None:
        return FALLBACK
    return _resolve(
        base=parsed.base,
        pointer_depth=parsed.pointer_depth,
        is_const=parsed.is_const,
        direction=ParamDirection.UNKNOWN,
        name=None,
        handles=handles,
        rules=rules,
    )


def _resolve(
    base: str,
    pointer_depth: int,
    is_const: bool,
    direction: ParamDirection,
    name: str | None,
    handles: Iterable[HandleDeclaration],
    rules: TypeRules,
) -> ManagedType:
    if pointer_depth > 1:
        return FALLBACK

    handle = find_handle(handles, base)
    if handle is not None:
        return ManagedType(handle.name, TypeKind.HANDLE)

    if base == "char" and pointer_depth == 1 and is_const:
        if name is not None and name in rules.buffer_parameter_names:
            return ManagedType(BUFFER_TYPE, TypeKind.BUFFER)
        return ManagedType(TEXT_TYPE, TypeKind.TEXT)

    if base in rules.by_value_aggregates:
        return ManagedType(to_type_name(base, rules.naming), TypeKind.AGGREGATE)

    primitive = rules.primitives.get(base)
    if primitive is not None:
        if pointer_depth == 0:
            if primitive == "void":
                return VOID
            return ManagedType(primitive, TypeKind.PRIMITIVE)
        if primitive != "void" and direction in (ParamDirection.OUT, ParamDirection.IN_OUT):
            return ManagedType(primitive, TypeKind.PRIMITIVE, by_reference=True)
        return FALLBACK

    alias = rules.typedef_aliases.get(base)
    if alias is not None:
        return ManagedType(alias, TypeKind.ALIAS)

    if has_record_prefix(base, rules.naming):
        return ManagedType(to_type_name(base, rules.naming), TypeKind.RECORD)

    return FALLBACK
