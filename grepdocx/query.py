# query.py - find settings derived from the search text

import re
from dataclasses import dataclass
from typing import Pattern

from .errors import SearchError

WD_FIND_STOP = 0
WILDCARD_MARKER = "*"


@dataclass(frozen=True)
class FindOptions:
    text: str
    forward: bool = True
    wrap: int = WD_FIND_STOP
    format: bool = False
    match_case: bool = False
    match_wildcards: bool = False


def build_find_options(text: str) -> FindOptions:
    # ワイルドカードを有効にすると MatchCase の設定が無効となる (常に大文字小文字を区別する) ため
    # サーチテキストに * が含まれている場合のみ有効にする.
    return FindOptions(text=text, match_wildcards=WILDCARD_MARKER in text)


def _translate_class(body: str) -> str:
    negate = body.startswith("!")
    if negate:
        body = body[1:]
    if not body:
        raise SearchError("wildcard", "empty character class")
    out = []
    for i, ch in enumerate(body):
        if ch == "-" and 0 < i < len(body) - 1:
            out.append("-")
        elif ch in "\\^[]-":
            out.append("\\" + ch)
        else:
            out.append(ch)
    return "[" + ("^" if negate else "") + "".join(out) + "]"


def wildcard_to_regex(pattern: str) -> str:
    """Translate Word's wildcard search syntax into a Python regex."""

    out = []
    i = 0
    n = len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "\\":
            if i + 1 >= n:
                raise SearchError("wildcard", "dangling escape at end of pattern")
            out.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        if ch == "?":
            out.append(".")
        elif ch == "*":
            out.append(".*?")
        elif ch == "@":
            out.append("+")
        elif ch == "<":
            out.append(r"\b(?=\w)")
        elif ch == ">":
            out.append(r"\b(?<=\w)")
        elif ch in "()":
            out.append(ch)
        elif ch == "[":
            end = pattern.find("]", i + 2)
            if end < 0:
                raise SearchError("wildcard", f"unclosed '[' at {i}")
            out.append(_translate_class(pattern[i + 1:end]))
            i = end + 1
            continue
        elif ch == "{":
            end = pattern.find("}", i)
            if end < 0:
                raise SearchError("wildcard", f"unclosed '{{' at {i}")
            count = pattern[i + 1:end]
            if not re.fullmatch(r"\d+(,\d*)?", count):
                raise SearchError("wildcard", f"bad repeat count '{{{count}}}'")
            out.append("{" + count + "}")
            i = end + 1
            continue
        else:
            out.append(re.escape(ch))
        i += 1
    return "".join(out)


def compile_pattern(options: FindOptions) -> Pattern[str]:
    if options.match_wildcards:
        source = wildcard_to_regex(options.text)
        flags = re.DOTALL
    else:
        source = re.escape(options.text)
        flags = 0 if options.match_case else re.IGNORECASE
    try:
        return re.compile(source, flags)
    except re.error as exc:
        raise SearchError("wildcard", f"{options.text!r}: {exc}")
