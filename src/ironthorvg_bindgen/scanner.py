"""Read cursor over header text.

The cursor owns the scan position and the single pending documentation slot.
Lookaheads (`peek_startswith`, `expect`, ...) skip leading whitespace first.
"""

from __future__ import annotations

import re

from .errors import HeaderParseError

_OPENERS = "{(["
_CLOSERS = "})]"


class Cursor:
    def __init__(self, text: str) -> None:
        self.text = text
        self.index = 0
        self.pending_doc: str | None = None

    @property
    def eof(self) -> bool:
        return self.index >= len(self.text)

    def mark(self) -> int:
        return self.index

    def reset(self, mark: int) -> None:
        self.index = mark

    def location(self, position: int | None = None) -> tuple[int, int]:
        pos = self.index if position is None else position
        line = self.text.count("\n", 0, pos) + 1
        column = pos - (self.text.rfind("\n", 0, pos) + 1) + 1
        return line, column

    def error(self, message: str, position: int | None = None) -> HeaderParseError:
        pos = self.index if position is None else position
        line, column = self.location(pos)
        return HeaderParseError(message, pos, line, column)

    def skip_whitespace(self) -> None:
        text = self.text
        while self.index < len(text) and text[self.index].isspace():
            self.index += 1

    def peek_startswith(self, value: str) -> bool:
        self.skip_whitespace()
        return self.text.startswith(value, self.index)

    def peek_match(self, pattern: re.Pattern[str]) -> re.Match[str] | None:
        self.skip_whitespace()
        return pattern.match(self.text, self.index)

    def peek_keyword(self, value: str) -> bool:
        if not self.peek_startswith(value):
            return False
        end = self.index + len(value)
        return end >= len(self.text) or not _is_ident_char(self.text[end])

    def expect(self, value: str) -> None:
        self.skip_whitespace()
        if not self.text.startswith(value, self.index):
            raise self.error(f"Expected '{value}'")
        self.index += len(value)

    def expect_words(self, *words: str) -> None:
        for word in words:
            self.expect(word)

    def try_consume(self, ch: str) -> bool:
        self.skip_whitespace()
        if not self.eof and self.text[self.index] == ch:
            self.index += 1
            return True
        return False

    def read_identifier(self) -> str:
        self.skip_whitespace()
        start = self.index
        while not self.eof and _is_ident_char(self.text[self.index]):
            self.index += 1
        return self.text[start:self.index]

    def read_block(self, open_ch: str, close_ch: str) -> str:
        # Cursor sits just past the opening character.
        start = self.index
        depth = 1
        while not self.eof:
            ch = self.text[self.index]
            self.index += 1
            if ch == open_ch:
                depth += 1
            elif ch == close_ch:
                depth -= 1
                if depth == 0:
                    return self.text[start:self.index - 1]
        raise self.error(f"Expected '{close_ch}' to close '{open_ch}' opened", start - 1)

    def read_until(self, end_ch: str) -> str:
        start = self.index
        depth = 0
        while not self.eof:
            ch = self.text[self.index]
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
            elif ch == end_ch and depth == 0:
                break
            self.index += 1
        return self.text[start:self.index]

    def skip_statement(self) -> None:
        end = self.text.find(";", self.index)
        self.index = len(self.text) if end < 0 else end + 1

    def try_consume_doc_comment(self) -> bool:
        if not self.peek_startswith("/**"):
            return False
        start = self.index
        end = self.text.find("*/", start + 3)
        if end < 0:
            return False
        self.index = end + 2
        self.pending_doc = self.text[start:self.index]
        return True

    def try_consume_comment(self) -> bool:
        if self.peek_startswith("//"):
            end = self.text.find("\n", self.index)
            self.index = len(self.text) if end < 0 else end
            return True
        if self.peek_startswith("/*"):
            end = self.text.find("*/", self.index + 2)
            self.index = len(self.text) if end < 0 else end + 2
            return True
        return False

    def try_consume_preprocessor(self) -> bool:
        self.skip_whitespace()
        if self.eof:
            return False
        if self.text[self.index] == "#":
            self._skip_directive()
            return True
        if self.text.startswith('extern "C"', self.index):
            self._skip_line()
            return True
        if self.text[self.index] == "}":
            # closing brace of an extern "C" block
            self.index += 1
            return True
        return False

    def take_pending_doc(self) -> str | None:
        doc = self.pending_doc
        self.pending_doc = None
        return doc

    def _skip_line(self) -> None:
        end = self.text.find("\n", self.index)
        self.index = len(self.text) if end < 0 else end

    def _skip_directive(self) -> None:
        while True:
            end = self.text.find("\n", self.index)
            if end < 0:
                self.index = len(self.text)
                return
            continued = self.text[self.index:end].rstrip().endswith("\\")
            self.index = end + 1
            if not continued:
                return


def split_top_level(text: str, separator: str) -> list[str]:
    parts: list[str] = []
    token: list[str] = []
    depth = 0
    for ch in text:
        if ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS:
            depth = max(0, depth - 1)
        if ch == separator and depth == 0:
            parts.append("".join(token))
            token = []
            continue
        token.append(ch)
    if token:
        parts.append("".join(token))
    return parts


def _is_ident_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"
