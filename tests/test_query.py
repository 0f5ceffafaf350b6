import re

import pytest

from grepdocx.errors import SearchError
from grepdocx.query import WD_FIND_STOP, build_find_options, compile_pattern, wildcard_to_regex


@pytest.mark.parametrize(
    "text, wildcards",
    [
        ("report", False),
        ("a?c", False),
        ("[abc]", False),
        ("rep*rt", True),
        ("*", True),
    ],
)
def test_wildcards_only_with_asterisk(text: str, wildcards: bool) -> None:
    assert build_find_options(text).match_wildcards is wildcards


def test_find_defaults() -> None:
    options = build_find_options("needle")
    assert options.forward is True
    assert options.wrap == WD_FIND_STOP
    assert options.format is False
    assert options.match_case is False


def test_literal_search_ignores_case() -> None:
    pattern = compile_pattern(build_find_options("Hello (World)"))
    assert pattern.search("say hello (world)!").group(0) == "hello (world)"


def test_wildcard_search_is_case_sensitive() -> None:
    pattern = compile_pattern(build_find_options("T*t"))
    assert pattern.search("Target test").group(0) == "Target"
    assert pattern.search("target test") is None


def test_asterisk_matches_shortest_run() -> None:
    pattern = compile_pattern(build_find_options("b*d"))
    assert pattern.search("abcdbd").group(0) == "bcd"


def test_translate_simple_tokens() -> None:
    assert wildcard_to_regex("a?c") == "a.c"
    assert wildcard_to_regex("lo@k") == "lo+k"
    assert wildcard_to_regex(r"\*\?") == r"\*\?"
    assert wildcard_to_regex("1.5") == r"1\.5"


def test_translate_character_classes() -> None:
    assert wildcard_to_regex("[a-c]x") == "[a-c]x"
    assert wildcard_to_regex("[!a-c]x") == "[^a-c]x"
    assert re.fullmatch(wildcard_to_regex("[-^]"), "^")


def test_translate_repeat_counts() -> None:
    regex = wildcard_to_regex("0{2,3}1")
    assert re.fullmatch(regex, "0001")
    assert not re.fullmatch(regex, "01")


def test_word_boundaries() -> None:
    regex = wildcard_to_regex("<cat>")
    assert re.search(regex, "a cat sat")
    assert not re.search(regex, "concatenate")


@pytest.mark.parametrize("pattern", ["[abc", "a{2", "a{x}", "abc\\", "[!]"])
def test_malformed_patterns_raise(pattern: str) -> None:
    with pytest.raises(SearchError):
        wildcard_to_regex(pattern)


def test_unbalanced_group_raises_search_error() -> None:
    with pytest.raises(SearchError) as excinfo:
        compile_pattern(build_find_options("(a*"))
    assert excinfo.value.stage == "wildcard"
