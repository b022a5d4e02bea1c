from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Union


class ParamDirection(enum.Enum):
    IN = "in"
    OUT = "out"
    IN_OUT = "in,out"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class EnumValue:
    name: str
    native_name: str
    value: str | None = None
    summary: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "native_name": self.native_name,
            "value": self.value,
            "summary": self.summary,
        }


@dataclass(frozen=True)
class EnumDeclaration:
    name: str
    native_name: str
    summary: str | None
    values: tuple[EnumValue, ...]
    is_flags: bool = False

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "native_name": self.native_name,
            "summary": self.summary,
            "is_flags": self.is_flags,
            "values": [value.as_dict() for value in self.values],
        }


@dataclass(frozen=True)
class StructField:
    name: str
    type_name: str
    summary: str | None = None
    native_type: str = ""
    array_length: int | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type_name,
            "native_type": self.native_type,
            "array_length": self.array_length,
            "summary": self.summary,
        }


@dataclass(frozen=True)
class StructDeclaration:
    name: str
    native_name: str
    summary: str | None
    fields: tuple[StructField, ...]

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "native_name": self.native_name,
            "summary": self.summary,
            "fields": [item.as_dict() for item in self.fields],
        }


@dataclass(frozen=True)
class HandleDeclaration:
    name: str
    native_name: str
    tag: str = ""

    def matches(self, type_name: str) -> bool:
        return type_name == self.native_name or (bool(self.tag) and type_name == self.tag)

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "native_name": self.native_name,
            "tag": self.tag,
        }


@dataclass(frozen=True)
class ParameterDeclaration:
    name: str
    native_type: str
    summary: str | None = None
    direction: ParamDirection = ParamDirection.UNKNOWN
    is_const: bool = False
    is_pointer: bool = False
    pointer_depth: int = 0
    is_callback: bool = False

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "native_type": self.native_type,
            "summary": self.summary,
            "direction": self.direction.value,
            "is_const": self.is_const,
            "is_pointer": self.is_pointer,
            "pointer_depth": self.pointer_depth,
            "is_callback": self.is_callback,
        }


@dataclass(frozen=True)
class FunctionDeclaration:
    name: str
    return_type: str
    summary: str | None
    returns: str | None
    parameters: tuple[ParameterDeclaration, ...]

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "return_type": self.return_type,
            "summary": self.summary,
            "returns": self.returns,
            "parameters": [param.as_dict() for param in self.parameters],
        }


Declaration = Union[EnumDeclaration, StructDeclaration, HandleDeclaration, FunctionDeclaration]


@dataclass(frozen=True)
class HeaderModel:
    enums: tuple[EnumDeclaration, ...] = field(default_factory=tuple)
    structs: tuple[StructDeclaration, ...] = field(default_factory=tuple)
    handles: tuple[HandleDeclaration, ...] = field(default_factory=tuple)
    functions: tuple[FunctionDeclaration, ...] = field(default_factory=tuple)

    @classmethod
    def from_declarations(cls, declarations: list[Declaration]) -> HeaderModel:
        return cls(
            enums=tuple(item for item in declarations if isinstance(item, EnumDeclaration)),
            structs=tuple(item for item in declarations if isinstance(item, StructDeclaration)),
            handles=tuple(item for item in declarations if isinstance(item, HandleDeclaration)),
            functions=tuple(item for item in declarations if isinstance(item, FunctionDeclaration)),
        )

    def counts(self) -> dict[str, int]:
        return {
            "enums": len(self.enums),
            "structs": len(self.structs),
            "handles": len(self.handles),
            "functions": len(self.functions),
        }

    def as_dict(self) -> dict[str, Any]:
        return {
            "enums": [item.as_dict() for item in self.enums],
            "structs": [item.as_dict() for item in self.structs],
            "handles": [item.as_dict() for item in self.handles],
            "functions": [item.as_dict() for item in self.functions],
        }
