from __future__ import annotations

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = REPO_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from ironthorvg_bindgen.docs import (
    EMPTY_DOC,
    extract_inline_summary,
    parse_doc_comment,
    strip_inline_comment,
)
from ironthorvg_bindgen.model import ParamDirection

FUNCTION_DOC = """/**
 * @brief Gets the size of the canvas.
 *
 * Call after the target is set.
 *
 * @param[in] canvas The canvas object.
 * @param[out] w The width.
 * @param[in, out] h The height.
 * @param flags Untagged parameter.
 *
 * @return Tvg_Result enumeration.
 * @retval TVG_RESULT_INVALID_ARGUMENT An invalid pointer.
 */"""


class DocCommentTests(unittest.TestCase):
    def test_summary_joins_brief_and_plain_lines(self) -> None:
        doc = parse_doc_comment(FUNCTION_DOC)
        self.assertEqual(doc.summary, "Gets the size of the canvas. Call after the target is set.")

    def test_param_directions(self) -> None:
        doc = parse_doc_comment(FUNCTION_DOC)
        self.assertEqual(doc.direction_of("canvas"), ParamDirection.IN)
        self.assertEqual(doc.direction_of("w"), ParamDirection.OUT)
        self.assertEqual(doc.direction_of("h"), ParamDirection.IN_OUT)
        self.assertEqual(doc.direction_of("flags"), ParamDirection.UNKNOWN)
        self.assertEqual(doc.direction_of("missing"), ParamDirection.UNKNOWN)
        self.assertEqual(doc.summary_of("w"), "The width.")

    def test_return_kept_and_retval_discarded(self) -> None:
        doc = parse_doc_comment(FUNCTION_DOC)
        self.assertEqual(doc.returns, "Tvg_Result enumeration.")
        self.assertNotIn("TVG_RESULT_INVALID_ARGUMENT", doc.summary or "")

    def test_missing_or_empty_doc(self) -> None:
        self.assertIs(parse_doc_comment(None), EMPTY_DOC)
        self.assertIs(parse_doc_comment("   "), EMPTY_DOC)
        doc = parse_doc_comment("/** */")
        self.assertIsNone(doc.summary)
        self.assertIsNone(doc.returns)

    def test_malformed_param_does_not_raise(self) -> None:
        doc = parse_doc_comment("/**\n * @param[out\n * @param\n */")
        self.assertEqual(doc.params, {})

    def test_crlf_line_endings(self) -> None:
        doc = parse_doc_comment("/**\r\n * First line.\r\n * Second line.\r\n */")
        self.assertEqual(doc.summary, "First line. Second line.")


class InlineDocTests(unittest.TestCase):
    def test_triple_slash_form(self) -> None:
        line = "    TVG_BLEND_METHOD_NORMAL = 0, ///< Normal blending."
        self.assertEqual(extract_inline_summary(line), "Normal blending.")
        self.assertEqual(strip_inline_comment(line).strip(), "TVG_BLEND_METHOD_NORMAL = 0,")

    def test_block_form(self) -> None:
        line = "float x; /**< Horizontal coordinate. */"
        self.assertEqual(extract_inline_summary(line), "Horizontal coordinate.")
        self.assertEqual(strip_inline_comment(line).strip(), "float x;")

    def test_line_without_inline_doc(self) -> None:
        self.assertIsNone(extract_inline_summary("float y;"))
        self.assertEqual(strip_inline_comment("float y;"), "float y;")


if __name__ == "__main__":
    unittest.main()
