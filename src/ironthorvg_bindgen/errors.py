from __future__ import annotations


class BindgenError(Exception):
    pass


class BindgenConfigError(BindgenError):
    pass


class HeaderParseError(BindgenError):
    def __init__(self, message: str, position: int, line: int, column: int) -> None:
        super().__init__(f"{message} at position {position} (line {line}, column {column}).")
        self.position = position
        self.line = line
        self.column = column
