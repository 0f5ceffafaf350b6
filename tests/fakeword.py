"""A small stand-in for Word's COM object model (Documents/Range/Find)."""

from typing import Dict, List, Optional, Tuple

from grepdocx.word import WD_ACTIVE_END_PAGE_NUMBER, WD_FIRST_CHARACTER_LINE_NUMBER


class FakeFind:
    def __init__(self, found_range: "FakeRange", hits: List[Tuple[int, int, str]], fail_on: Optional[int] = None):
        self._range = found_range
        self._hits = hits
        self._fail_on = fail_on
        self.executed = 0

    def Execute(self) -> bool:
        self.executed += 1
        if self._fail_on == self.executed:
            raise RuntimeError("Execute exploded")
        if self.executed > len(self._hits):
            return False
        page, line, text = self._hits[self.executed - 1]
        self._range.page, self._range.line, self._range.Text = page, line, text
        return True


class FakeRange:
    def __init__(self, hits, fail_on=None):
        self.page = 1
        self.line = 1
        self.Text = "whole document"
        self.Find = FakeFind(self, hits, fail_on)

    def Information(self, kind: int) -> int:
        if kind == WD_ACTIVE_END_PAGE_NUMBER:
            return self.page
        if kind == WD_FIRST_CHARACTER_LINE_NUMBER:
            return self.line
        raise ValueError(kind)


class FakeDocument:
    def __init__(self, hits, fail_on=None):
        self.Content = FakeRange(hits, fail_on)
        self.closed_with = None

    def Close(self, save_changes) -> None:
        self.closed_with = save_changes


class FakeDocuments:
    def __init__(self, word: "FakeWord"):
        self._word = word

    def Open(self, **kwargs) -> FakeDocument:
        self._word.open_calls.append(kwargs)
        name = kwargs["FileName"]
        if name in self._word.broken:
            raise OSError(f"cannot open {name}")
        doc = FakeDocument(self._word.hits_for(name), self._word.fail_on)
        self._word.opened.append(doc)
        return doc


class FakeWord:
    def __init__(self, hits: Optional[Dict[str, list]] = None, broken=(), fail_on=None):
        self._hits = hits or {}
        self.broken = set(broken)
        self.fail_on = fail_on
        self.open_calls: List[dict] = []
        self.opened: List[FakeDocument] = []
        self.quit_with = None
        self.Documents = FakeDocuments(self)
        self.Visible = False
        self.DisplayAlerts = -1
        self.AutomationSecurity = 1

    def hits_for(self, name: str) -> list:
        for suffix, hits in self._hits.items():
            if name.endswith(suffix):
                return list(hits)
        return []

    def Quit(self, save_changes) -> None:
        self.quit_with = save_changes

    def dispatch(self, progid: str) -> "FakeWord":
        assert progid == "Word.Application"
        return self
