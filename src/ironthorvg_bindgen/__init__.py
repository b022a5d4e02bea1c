from .config import DEFAULT_CONFIG, GeneratorConfig, OutputOptions, load_config
from .emitters import render_all, render_enums, render_native_methods, render_structs
from .errors import BindgenConfigError, BindgenError, HeaderParseError
from .model import (
    EnumDeclaration,
    EnumValue,
    FunctionDeclaration,
    HandleDeclaration,
    HeaderModel,
    ParamDirection,
    ParameterDeclaration,
    StructDeclaration,
    StructField,
)
from .parser import parse_header

__all__ = [
    "BindgenConfigError",
    "BindgenError",
    "DEFAULT_CONFIG",
    "EnumDeclaration",
    "EnumValue",
    "FunctionDeclaration",
    "GeneratorConfig",
    "HandleDeclaration",
    "HeaderModel",
    "HeaderParseError",
    "OutputOptions",
    "ParamDirection",
    "ParameterDeclaration",
    "StructDeclaration",
    "StructField",
    "load_config",
    "parse_header",
    "render_all",
    "render_enums",
    "render_native_methods",
    "render_structs",
]
