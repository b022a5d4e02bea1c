from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

DEFAULT_RECORD_PREFIX = "Tvg_"
DEFAULT_ENUM_VALUE_PREFIX = "TVG_"
DEFAULT_HANDLE_SUFFIX = "Handle"

# Names whose mechanical transform reads poorly or collides with other types.
DEFAULT_TYPE_RENAMES: Mapping[str, str] = MappingProxyType(
    {
        "Engine_Option": "EngineOptions",
        "Type": "PaintType",
    }
)


@dataclass(frozen=True)
class NamingRules:
    record_prefix: str = DEFAULT_RECORD_PREFIX
    enum_value_prefix: str = DEFAULT_ENUM_VALUE_PREFIX
    handle_suffix: str = DEFAULT_HANDLE_SUFFIX
    type_renames: Mapping[str, str] = field(default_factory=lambda: DEFAULT_TYPE_RENAMES)


DEFAULT_NAMING = NamingRules()


def to_pascal_case(value: str) -> str:
    parts = [part for part in value.replace("_", " ").split(" ") if part]
    return "".join(part[:1].upper() + part[1:].lower() for part in parts)


def strip_record_prefix(native_name: str, rules: NamingRules = DEFAULT_NAMING) -> str:
    trimmed = native_name.lstrip("_")
    if rules.record_prefix and trimmed.startswith(rules.record_prefix):
        trimmed = trimmed[len(rules.record_prefix):]
    return trimmed


def has_record_prefix(native_name: str, rules: NamingRules = DEFAULT_NAMING) -> bool:
    return bool(rules.record_prefix) and native_name.lstrip("_").startswith(rules.record_prefix)


def to_type_name(native_name: str, rules: NamingRules = DEFAULT_NAMING) -> str:
    trimmed = strip_record_prefix(native_name, rules)
    renamed = rules.type_renames.get(trimmed)
    if renamed:
        return renamed
    return to_pascal_case(trimmed)


def to_field_name(native_name: str) -> str:
    if not native_name.strip():
        return native_name
    return to_pascal_case(native_name.lstrip("_"))


def to_handle_name(native_name: str, rules: NamingRules = DEFAULT_NAMING) -> str:
    return f"{to_type_name(native_name, rules)}{rules.handle_suffix}"


def to_enum_prefix(enum_native_name: str, rules: NamingRules = DEFAULT_NAMING) -> str:
    trimmed = strip_record_prefix(enum_native_name, rules)
    chars: list[str] = [rules.enum_value_prefix]
    for index, ch in enumerate(trimmed):
        if ch.isupper() and index > 0 and trimmed[index - 1] != "_":
            chars.append("_")
        chars.append(ch.upper())
    chars.append("_")
    return "".join(chars)


def to_enum_member_name(enum_native_name: str, value_native_name: str, rules: NamingRules = DEFAULT_NAMING) -> str:
    prefix = to_enum_prefix(enum_native_name, rules)
    trimmed = value_native_name
    if trimmed.startswith(prefix):
        trimmed = trimmed[len(prefix):]
    elif rules.enum_value_prefix and trimmed.startswith(rules.enum_value_prefix):
        trimmed = trimmed[len(rules.enum_value_prefix):]

    name = to_pascal_case(trimmed)
    if not name:
        name = to_pascal_case(value_native_name)
    if name[:1].isdigit():
        name = f"_{name}"
    return name
