from __future__ import annotations

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = REPO_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from ironthorvg_bindgen.model import HandleDeclaration, ParamDirection, ParameterDeclaration
from ironthorvg_bindgen.type_mapping import (
    TypeKind,
    TypeRules,
    resolve_field_type,
    resolve_parameter_type,
    resolve_return_type,
    split_native_type,
)

HANDLES = (
    HandleDeclaration(name="CanvasHandle", native_name="Tvg_Canvas", tag="_Tvg_Canvas"),
    HandleDeclaration(name="PaintHandle", native_name="Tvg_Paint", tag="_Tvg_Paint"),
)


def param(name: str, native_type: str, direction: ParamDirection = ParamDirection.UNKNOWN) -> ParameterDeclaration:
    parsed = split_native_type(native_type)
    return ParameterDeclaration(
        name=name,
        native_type=native_type,
        direction=direction,
        is_const=parsed.is_const,
        is_pointer=parsed.pointer_depth > 0,
        pointer_depth=parsed.pointer_depth,
    )


class SplitNativeTypeTests(unittest.TestCase):
    def test_qualifiers_and_depth(self) -> None:
        parsed = split_native_type("const  struct _Tvg_Paint * *")
        self.assertEqual(parsed.base, "_Tvg_Paint")
        self.assertEqual(parsed.pointer_depth, 2)
        self.assertTrue(parsed.is_const)

    def test_multi_word_primitive(self) -> None:
        parsed = split_native_type("unsigned int*")
        self.assertEqual(parsed.base, "unsigned int")
        self.assertEqual(parsed.pointer_depth, 1)
        self.assertFalse(parsed.is_const)


class ParameterTypeTests(unittest.TestCase):
    def test_out_unsigned_int_is_by_reference_scalar(self) -> None:
        managed = resolve_parameter_type(param("count", "unsigned int*", ParamDirection.OUT), HANDLES)
        self.assertEqual(managed.name, "uint")
        self.assertEqual(managed.kind, TypeKind.PRIMITIVE)
        self.assertTrue(managed.by_reference)

    def test_unknown_direction_scalar_pointer_falls_back(self) -> None:
        managed = resolve_parameter_type(param("count", "unsigned int*"), HANDLES)
        self.assertEqual(managed.name, "nint")
        self.assertEqual(managed.kind, TypeKind.POINTER)

    def test_data_is_buffer_and_path_is_text(self) -> None:
        data = resolve_parameter_type(param("data", "const char*"), HANDLES)
        path = resolve_parameter_type(param("path", "const char*"), HANDLES)
        self.assertEqual((data.name, data.kind), ("byte[]", TypeKind.BUFFER))
        self.assertEqual((path.name, path.kind), ("string", TypeKind.TEXT))

    def test_mutable_char_pointer_is_not_text(self) -> None:
        managed = resolve_parameter_type(param("name", "char*"), HANDLES)
        self.assertEqual(managed.name, "nint")

    def test_handle_matches_tag_and_typedef_name(self) -> None:
        by_name = resolve_parameter_type(param("canvas", "Tvg_Canvas"), HANDLES)
        by_tag = resolve_parameter_type(param("paint", "struct _Tvg_Paint*"), HANDLES)
        self.assertEqual(by_name.name, "CanvasHandle")
        self.assertEqual(by_tag.name, "PaintHandle")
        self.assertTrue(by_tag.is_pointer_shaped)

    def test_double_pointer_always_falls_back(self) -> None:
        managed = resolve_parameter_type(param("paints", "Tvg_Paint**", ParamDirection.OUT), HANDLES)
        self.assertEqual(managed.name, "nint")

    def test_aggregates_aliases_and_records(self) -> None:
        matrix = resolve_parameter_type(param("m", "const Tvg_Matrix*"), HANDLES)
        command = resolve_parameter_type(param("cmd", "Tvg_Path_Command"), HANDLES)
        join = resolve_parameter_type(param("join", "Tvg_Stroke_Join"), HANDLES)
        self.assertEqual((matrix.name, matrix.kind), ("Matrix", TypeKind.AGGREGATE))
        self.assertEqual((command.name, command.kind), ("byte", TypeKind.ALIAS))
        self.assertEqual((join.name, join.kind), ("StrokeJoin", TypeKind.RECORD))

    def test_function_pointer_is_opaque_pointer(self) -> None:
        callback = ParameterDeclaration(
            name="cb",
            native_type="Tvg_Paint (*)(Tvg_Canvas canvas)",
            direction=ParamDirection.OUT,
            is_pointer=True,
            pointer_depth=1,
            is_callback=True,
        )
        managed = resolve_parameter_type(callback, HANDLES)
        self.assertEqual((managed.name, managed.kind), ("nint", TypeKind.CALLBACK))
        self.assertTrue(managed.is_pointer_shaped)

    def test_unknown_type_falls_back(self) -> None:
        managed = resolve_parameter_type(param("x", "wchar_t"), HANDLES)
        self.assertEqual(managed.name, "nint")

    def test_custom_buffer_names(self) -> None:
        rules = TypeRules(buffer_parameter_names=("data", "bytes"))
        managed = resolve_parameter_type(param("bytes", "const char*"), HANDLES, rules)
        self.assertEqual(managed.kind, TypeKind.BUFFER)


class ReturnAndFieldTypeTests(unittest.TestCase):
    def test_return_types(self) -> None:
        self.assertEqual(resolve_return_type("void", HANDLES).kind, TypeKind.VOID)
        self.assertEqual(resolve_return_type("Tvg_Result", HANDLES).name, "Result")
        self.assertEqual(resolve_return_type("Tvg_Paint", HANDLES).name, "PaintHandle")
        self.assertEqual(resolve_return_type("const char*", HANDLES).kind, TypeKind.TEXT)
        self.assertEqual(resolve_return_type("void*", HANDLES).name, "nint")

    def test_field_types(self) -> None:
        self.assertEqual(resolve_field_type("float", HANDLES).name, "float")
        self.assertEqual(resolve_field_type("float*", HANDLES).name, "nint")
        self.assertEqual(resolve_field_type("uint8_t", HANDLES).name, "byte")
        self.assertEqual(resolve_field_type("Tvg_Point", HANDLES).name, "Point")


if __name__ == "__main__":
    unittest.main()
