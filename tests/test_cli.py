from __future__ import annotations

import contextlib
import io
import json
import sys
import tempfile
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = REPO_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from ironthorvg_bindgen.cli import main

ROUND_TRIP_HEADER = """
#pragma once

typedef enum {
    FOO_A,
    FOO_B = 1 << 1
} Tvg_Foo;

typedef struct {
    float x;
    float y;
} Tvg_Point;

typedef struct _Tvg_Canvas* Tvg_Canvas;

/**
 * @param[in] canvas The canvas.
 * @param[out] value The value.
 */
TVG_API Tvg_Result tvg_canvas_get_value(Tvg_Canvas canvas, float* value);
"""

OUTPUT_FILES = ["Enums.g.cs", "NativeMethods.g.cs", "Structs.g.cs"]


def run_cli(argv: list[str]) -> tuple[int, str, str]:
    stdout = io.StringIO()
    stderr = io.StringIO()
    with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
        code = main(argv)
    return code, stdout.getvalue(), stderr.getvalue()


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.header = self.root / "thorvg_capi.h"
        self.header.write_text(ROUND_TRIP_HEADER, encoding="utf-8")
        self.out_dir = self.root / "generated" / "Native"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_no_arguments_prints_usage(self) -> None:
        code, stdout, _ = run_cli([])
        self.assertEqual(code, 0)
        self.assertIn("--header", stdout)

    def test_missing_required_argument(self) -> None:
        code, _, stderr = run_cli(["--header", str(self.header)])
        self.assertEqual(code, 1)
        self.assertIn("Missing required arguments: --header and --output", stderr)
        self.assertFalse(self.out_dir.exists())

    def test_round_trip_generation(self) -> None:
        code, stdout, _ = run_cli(["--header", str(self.header), "--output", str(self.out_dir)])
        self.assertEqual(code, 0)
        self.assertEqual(sorted(path.name for path in self.out_dir.iterdir()), OUTPUT_FILES)
        self.assertIn("[thorvg_capi.h] parsed: enums=1 structs=1 handles=1 functions=1", stdout)
        self.assertIn("[thorvg_capi.h] Enums.g.cs: written", stdout)

        enums = (self.out_dir / "Enums.g.cs").read_text(encoding="utf-8")
        self.assertIn("[Flags]\npublic enum Foo\n{\n    FooA,\n    FooB = 1 << 1,\n}", enums)

        structs = (self.out_dir / "Structs.g.cs").read_text(encoding="utf-8")
        self.assertIn("public partial struct Point\n{\n    public float X;\n\n    public float Y;\n}", structs)
        self.assertEqual(structs.count("public partial struct"), 1)

        natives = (self.out_dir / "NativeMethods.g.cs").read_text(encoding="utf-8")
        self.assertIn("tvg_canvas_get_value(CanvasHandle canvas, out float value);", natives)

    def test_second_run_is_unchanged_and_check_passes(self) -> None:
        run_cli(["--header", str(self.header), "--output", str(self.out_dir)])
        code, stdout, _ = run_cli(["--header", str(self.header), "--output", str(self.out_dir), "--check"])
        self.assertEqual(code, 0)
        self.assertEqual(stdout.count(": unchanged"), 3)

    def test_check_reports_drift_without_writing(self) -> None:
        run_cli(["--header", str(self.header), "--output", str(self.out_dir)])
        enums_path = self.out_dir / "Enums.g.cs"
        enums_path.write_text("// stale\n", encoding="utf-8")

        code, stdout, _ = run_cli(["--header", str(self.header), "--output", str(self.out_dir), "--check"])
        self.assertEqual(code, 1)
        self.assertIn("[thorvg_capi.h] Enums.g.cs: drift", stdout)
        self.assertIn(f"--- a/{enums_path}", stdout)
        self.assertEqual(enums_path.read_text(encoding="utf-8"), "// stale\n")

    def test_dry_run_writes_nothing(self) -> None:
        code, stdout, _ = run_cli(["--header", str(self.header), "--output", str(self.out_dir), "--dry-run"])
        self.assertEqual(code, 0)
        self.assertIn("Structs.g.cs: would_write", stdout)
        self.assertFalse(self.out_dir.exists())

    def test_malformed_header_writes_nothing(self) -> None:
        self.header.write_text("typedef enum {\n    FOO_A,\n    FOO_B\n", encoding="utf-8")
        code, stdout, stderr = run_cli(["--header", str(self.header), "--output", str(self.out_dir)])
        self.assertEqual(code, 2)
        self.assertIn("ironthorvg_bindgen error: Expected '}'", stderr)
        self.assertIn("(line 1, column 14)", stderr)
        self.assertEqual(stdout, "")
        self.assertFalse(self.out_dir.exists())

    def test_missing_header_file(self) -> None:
        code, _, stderr = run_cli(["--header", str(self.root / "nope.h"), "--output", str(self.out_dir)])
        self.assertEqual(code, 2)
        self.assertIn("Unable to read file", stderr)

    def test_model_output(self) -> None:
        model_path = self.root / "model.json"
        code, _, _ = run_cli(
            ["--header", str(self.header), "--output", str(self.out_dir), "--model-output", str(model_path)]
        )
        self.assertEqual(code, 0)
        payload = json.loads(model_path.read_text(encoding="utf-8"))
        self.assertEqual(payload["handles"], [{"name": "CanvasHandle", "native_name": "Tvg_Canvas", "tag": "_Tvg_Canvas"}])
        self.assertEqual(payload["functions"][0]["parameters"][1]["direction"], "out")

    def test_config_overrides_namespace(self) -> None:
        config_path = self.root / "bindgen.json"
        config_path.write_text(json.dumps({"output": {"namespace": "Vendor.Vg"}}), encoding="utf-8")
        code, _, _ = run_cli(
            ["--header", str(self.header), "--output", str(self.out_dir), "--config", str(config_path)]
        )
        self.assertEqual(code, 0)
        self.assertIn("namespace Vendor.Vg;", (self.out_dir / "Enums.g.cs").read_text(encoding="utf-8"))

    def test_invalid_config_is_reported(self) -> None:
        config_path = self.root / "bindgen.json"
        config_path.write_text(json.dumps({"output": {"struct_pack": {"Tvg_Point": 3}}}), encoding="utf-8")
        code, _, stderr = run_cli(
            ["--header", str(self.header), "--output", str(self.out_dir), "--config", str(config_path)]
        )
        self.assertEqual(code, 2)
        self.assertIn("ironthorvg_bindgen error: Invalid config", stderr)
        self.assertFalse(self.out_dir.exists())


if __name__ == "__main__":
    unittest.main()
