from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import jsonschema

from .common import load_json_object
from .errors import BindgenConfigError
from .naming import DEFAULT_TYPE_RENAMES, NamingRules
from .type_mapping import (
    DEFAULT_BUFFER_PARAMETER_NAMES,
    DEFAULT_BY_VALUE_AGGREGATES,
    DEFAULT_TYPEDEF_ALIASES,
    PRIMITIVE_TYPES,
    TypeRules,
)

DEFAULT_EXPORT_MACRO = "TVG_API"


@dataclass(frozen=True)
class OutputOptions:
    namespace: str = "IronThorVG"
    native_namespace: str = "IronThorVG.Native"
    class_name: str = "ThorVGNative"
    library_name: str = "thorvg"
    access_modifier: str = "internal"
    calling_convention: str = "Cdecl"
    enums_file: str = "Enums.g.cs"
    structs_file: str = "Structs.g.cs"
    native_methods_file: str = "NativeMethods.g.cs"
    struct_pack: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class GeneratorConfig:
    export_macro: str = DEFAULT_EXPORT_MACRO
    types: TypeRules = field(default_factory=TypeRules)
    output: OutputOptions = field(default_factory=OutputOptions)

    @property
    def naming(self) -> NamingRules:
        return self.types.naming


DEFAULT_CONFIG = GeneratorConfig()


def get_schema_path() -> Path:
    return Path(__file__).resolve().parent / "schemas" / "config.schema.json"


def validate_config_payload(payload: dict[str, Any], label: str) -> None:
    schema = load_json_object(get_schema_path())
    try:
        jsonschema.validate(payload, schema)
    except jsonschema.ValidationError as exc:
        location = "/".join(str(part) for part in exc.absolute_path) or "<root>"
        raise BindgenConfigError(f"Invalid config '{label}' at {location}: {exc.message}") from exc


def _merged(defaults: Mapping[str, str], overrides: Any) -> Mapping[str, str]:
    merged = dict(defaults)
    if isinstance(overrides, dict):
        merged.update({str(k): str(v) for k, v in overrides.items()})
    return MappingProxyType(merged)


def config_from_payload(payload: dict[str, Any]) -> GeneratorConfig:
    naming_defaults = NamingRules()
    naming = NamingRules(
        record_prefix=str(payload.get("record_prefix", naming_defaults.record_prefix)),
        enum_value_prefix=str(payload.get("enum_value_prefix", naming_defaults.enum_value_prefix)),
        handle_suffix=str(payload.get("handle_suffix", naming_defaults.handle_suffix)),
        type_renames=_merged(DEFAULT_TYPE_RENAMES, payload.get("type_renames")),
    )
    types = TypeRules(
        naming=naming,
        primitives=_merged(PRIMITIVE_TYPES, payload.get("primitive_types")),
        typedef_aliases=_merged(DEFAULT_TYPEDEF_ALIASES, payload.get("typedef_aliases")),
        by_value_aggregates=tuple(payload.get("by_value_aggregates", DEFAULT_BY_VALUE_AGGREGATES)),
        buffer_parameter_names=tuple(payload.get("buffer_parameter_names", DEFAULT_BUFFER_PARAMETER_NAMES)),
    )

    output_cfg = payload.get("output") or {}
    output_defaults = OutputOptions()
    output = OutputOptions(
        namespace=str(output_cfg.get("namespace", output_defaults.namespace)),
        native_namespace=str(output_cfg.get("native_namespace", output_defaults.native_namespace)),
        class_name=str(output_cfg.get("class_name", output_defaults.class_name)),
        library_name=str(output_cfg.get("library_name", output_defaults.library_name)),
        access_modifier=str(output_cfg.get("access_modifier", output_defaults.access_modifier)),
        calling_convention=str(output_cfg.get("calling_convention", output_defaults.calling_convention)),
        enums_file=str(output_cfg.get("enums_file", output_defaults.enums_file)),
        structs_file=str(output_cfg.get("structs_file", output_defaults.structs_file)),
        native_methods_file=str(output_cfg.get("native_methods_file", output_defaults.native_methods_file)),
        struct_pack=MappingProxyType({str(k): int(v) for k, v in (output_cfg.get("struct_pack") or {}).items()}),
    )

    return GeneratorConfig(
        export_macro=str(payload.get("export_macro", DEFAULT_EXPORT_MACRO)),
        types=types,
        output=output,
    )


def load_config(path: Path | None) -> GeneratorConfig:
    if path is None:
        return DEFAULT_CONFIG
    payload = load_json_object(path)
    validate_config_payload(payload, str(path))
    return config_from_payload(payload)
