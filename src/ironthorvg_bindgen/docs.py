"""Doxygen comment extraction.

Extraction never raises: missing or malformed documentation yields empty
results (no summary, unknown directions, no return text).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .model import ParamDirection

_INLINE_MARKERS = ("///<", "/**<")


@dataclass(frozen=True)
class ParamDoc:
    name: str
    direction: ParamDirection = ParamDirection.UNKNOWN
    summary: str | None = None


@dataclass(frozen=True)
class DocComment:
    summary: str | None = None
    params: dict[str, ParamDoc] = field(default_factory=dict)
    returns: str | None = None

    def direction_of(self, name: str) -> ParamDirection:
        param = self.params.get(name)
        return param.direction if param else ParamDirection.UNKNOWN

    def summary_of(self, name: str) -> str | None:
        param = self.params.get(name)
        return param.summary if param else None


EMPTY_DOC = DocComment()


def normalize_comment(raw: str) -> list[str]:
    text = raw.replace("\r", "")
    text = text.replace("/**", "").replace("*/", "")
    lines = [line.strip().lstrip("*").strip() for line in text.split("\n")]
    return [line for line in lines if line]


def parse_doc_comment(raw: str | None) -> DocComment:
    if raw is None or not raw.strip():
        return EMPTY_DOC

    summary_lines: list[str] = []
    params: dict[str, ParamDoc] = {}
    returns: str | None = None

    for line in normalize_comment(raw):
        if line.startswith("@param"):
            param = parse_param_line(line)
            if param is not None:
                params[param.name] = param
        elif line.startswith("@retval"):
            continue
        elif line.startswith("@return"):
            returns = line[len("@returns") if line.startswith("@returns") else len("@return"):].strip() or None
        elif line.startswith("@brief"):
            text = line[len("@brief"):].strip()
            if text:
                summary_lines.append(text)
        elif not line.startswith("@"):
            summary_lines.append(line)

    summary = " ".join(summary_lines) if summary_lines else None
    return DocComment(summary=summary, params=params, returns=returns)


def parse_param_line(line: str) -> ParamDoc | None:
    remainder = line[len("@param"):].strip()
    direction = ParamDirection.UNKNOWN
    if remainder.startswith("["):
        end = remainder.find("]")
        if end < 0:
            return None
        direction = _parse_direction(remainder[1:end])
        remainder = remainder[end + 1:].strip()

    parts = remainder.split(None, 1)
    if not parts:
        return None
    summary = parts[1].strip() if len(parts) > 1 else None
    return ParamDoc(name=parts[0], direction=direction, summary=summary or None)


def _parse_direction(token: str) -> ParamDirection:
    compact = token.replace(" ", "")
    if "in,out" in compact:
        return ParamDirection.IN_OUT
    if "out" in compact:
        return ParamDirection.OUT
    if "in" in compact:
        return ParamDirection.IN
    return ParamDirection.UNKNOWN


def extract_inline_summary(line: str) -> str | None:
    index = line.find("///<")
    if index >= 0:
        return line[index + 4:].strip() or None

    index = line.find("/**<")
    if index >= 0:
        summary = line[index + 4:]
        end = summary.find("*/")
        if end >= 0:
            summary = summary[:end]
        return summary.strip() or None

    return None


def strip_inline_comment(line: str) -> str:
    index = line.find("///<")
    if index >= 0:
        return line[:index]

    index = line.find("/**<")
    if index >= 0:
        end = line.find("*/", index)
        if end >= 0:
            return line[:index] + line[end + 2:]
        return line[:index]

    return line


def has_inline_doc(line: str) -> bool:
    return any(marker in line for marker in _INLINE_MARKERS)
