# results.py - per-document and per-match output records

import json
from dataclasses import asdict, dataclass

HIT = "HIT"
NO_HIT = "NO HIT"


@dataclass(frozen=True)
class Match:
    """One occurrence as reported by a search engine."""

    page: int
    line: int
    text: str


@dataclass
class SimpleResult:
    path: str
    text: str


@dataclass
class DetailResult:
    path: str
    page: int
    line: int
    text: str


def quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def to_json(result) -> str:
    return json.dumps(asdict(result), ensure_ascii=False, separators=(",", ":"))


def format_simple(result: SimpleResult, as_json: bool = False) -> str:
    if as_json:
        return to_json(result)
    return f"{result.path}: {result.text}"


def format_detail(result: DetailResult, as_json: bool = False) -> str:
    if as_json:
        return to_json(result)
    return f"{result.path} ({result.page:3d},{result.line:3d}): {quote(result.text)}"
