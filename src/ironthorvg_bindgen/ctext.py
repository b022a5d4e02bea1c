from __future__ import annotations

import re

_CALLCONV_RE = re.compile(r"\b(?:__cdecl|__stdcall|__fastcall|__vectorcall|__thiscall)\b")
_PLAIN_BLOCK_COMMENT_RE = re.compile(r"/\*(?!\*<).*?\*/", flags=re.S)
_LINE_COMMENT_RE = re.compile(r"(?<!/)//(?!/<).*?$", flags=re.M)
_POINTER_NAME_RE = re.compile(r"\*(?=[A-Za-z_])")


def normalize_ws(value: str) -> str:
    return re.sub(r"\s+", " ", value).strip()


def strip_c_comments(content: str) -> str:
    content = re.sub(r"/\*.*?\*/", "", content, flags=re.S)
    content = re.sub(r"//.*?$", "", content, flags=re.M)
    return content


def strip_plain_comments(content: str) -> str:
    """Remove ordinary comments but keep trailing member docs (`///<`, `/**<`)."""
    content = _PLAIN_BLOCK_COMMENT_RE.sub("", content)
    return _LINE_COMMENT_RE.sub("", content)


def _strip_balanced_macro_calls(payload: str, token_pattern: str) -> str:
    out = payload
    token_re = re.compile(token_pattern)
    while True:
        match = token_re.search(out)
        if not match:
            break
        open_idx = out.find("(", match.end())
        if open_idx < 0:
            out = f"{out[:match.start()]} {out[match.end():]}"
            continue
        depth = 0
        end_idx = None
        for idx in range(open_idx, len(out)):
            ch = out[idx]
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
                if depth == 0:
                    end_idx = idx + 1
                    break
        if end_idx is None:
            out = f"{out[:match.start()]} {out[match.end():]}"
            continue
        out = f"{out[:match.start()]} {out[end_idx:]}"
    return out


def strip_c_decl_attributes(value: str) -> str:
    text = _strip_balanced_macro_calls(value, r"\b__attribute__\b")
    text = _strip_balanced_macro_calls(text, r"\b__declspec\b")
    text = _CALLCONV_RE.sub(" ", text)
    return normalize_ws(text)


def sanitize_c_decl_text(value: str) -> str:
    text = strip_c_decl_attributes(strip_c_comments(value))
    text = re.sub(r"\b_Bool\b", "bool", text)
    return normalize_ws(text)


def detach_pointer_markers(value: str) -> str:
    # "float *x" / "float*x" -> "float * x" / "float* x"
    return _POINTER_NAME_RE.sub("* ", value)


def count_leading_stars(token: str) -> tuple[str, int]:
    stripped = token.lstrip("*")
    return stripped, len(token) - len(stripped)
