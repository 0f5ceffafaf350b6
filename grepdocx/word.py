# word.py - search documents with Microsoft Word's own Find via COM automation

import os
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from .errors import SearchError, error_text, format_com_exception, wrap
from .log import log_error, warn_once
from .query import FindOptions
from .results import Match

try:  # pywin32 for Word COM (Office と Python のビット数 32/64 を一致させる必要あり)
    import pythoncom  # type: ignore
    import win32com.client  # type: ignore
except Exception:  # pragma: no cover - dependency may be missing
    pythoncom = None  # type: ignore
    win32com = None  # type: ignore

WD_DO_NOT_SAVE_CHANGES = 0
WD_ALERTS_NONE = 0
WD_ACTIVE_END_PAGE_NUMBER = 3
WD_FIRST_CHARACTER_LINE_NUMBER = 10
MSO_AUTOMATION_SECURITY_FORCE_DISABLE = 3


def com_available() -> bool:
    return os.name == "nt" and pythoncom is not None and win32com is not None


def detect_word(dispatch: Optional[Callable] = None) -> str:
    """Return "OK" when Word.Application can be started (and quit), else "NG"."""

    coinitialized = False
    if dispatch is None:
        if not com_available():
            return "NG"
        try:
            pythoncom.CoInitialize()
        except Exception:
            return "NG"
        coinitialized = True
        dispatch = win32com.client.gencache.EnsureDispatch
    try:
        try:
            word = dispatch("Word.Application")
        except Exception:
            return "NG"
        try:
            word.Quit(WD_DO_NOT_SAVE_CHANGES)
        except Exception as exc:
            warn_once("word_detect_quit", f"Word.Quit で例外: {error_text(exc)}")
        return "OK"
    finally:
        if coinitialized:
            try:
                pythoncom.CoUninitialize()
            except Exception as exc:
                warn_once("coinitialize_cleanup", f"CoUninitialize で例外: {error_text(exc)}")


def describe_launch_failure(exc: Exception) -> str:
    reason = "Word を起動できません。Word がインストールされていない、または Office と Python のビット数 (32/64) が一致していない可能性があります。"
    text = error_text(exc).lower()
    hresult = getattr(exc, "hresult", None)
    if hresult in {-2147221005, -2147221164} or "class not registered" in text:
        reason = "Word がインストールされていないか、Office と Python のビット数 (32/64) が一致していません。"
    elif "server execution failed" in text or hresult in {-2146959355}:
        reason = "Word の COM 自動化を開始できません。Office と Python のビット数 (32/64) を確認してください。"
    return reason


def _call(stage: str, func: Callable, *args):
    try:
        return func(*args)
    except Exception as exc:
        raise wrap(stage, exc)


def _set(obj, stage: str, prop: str, value) -> None:
    try:
        setattr(obj, prop, value)
    except Exception as exc:
        raise wrap(stage, exc)


def _try_set(word, prop: str, value) -> None:
    try:
        setattr(word, prop, value)
    except Exception as exc:
        warn_once(
            f"word_{prop}",
            f"Word.{prop} を設定できません: {error_text(exc)}",
        )


class WordDocument:
    def __init__(self, doc):
        self._doc = doc

    def iter_matches(self, options: FindOptions) -> Iterator[Match]:
        """Run Find over the whole document, yielding every occurrence in order.

        Execute() redefines the searched range to the text it found, so the
        same range object is read after each successful call.
        """

        found_range = _call("Document.Content", lambda: self._doc.Content)
        find = _call("Range.Find", lambda: found_range.Find)

        _set(find, "Find.Forward()", "Forward", options.forward)
        _set(find, "Find.Wrap()", "Wrap", options.wrap)
        _set(find, "Find.Format()", "Format", options.format)
        _set(find, "Find.MatchCase()", "MatchCase", options.match_case)
        # A wildcard search is always case-sensitive: Word greys out "Match case"
        # as soon as "Use wildcards" is ticked.
        if options.match_wildcards:
            _set(find, "Find.MatchWildcards()", "MatchWildcards", True)
        _set(find, "Find.Text()", "Text", options.text)

        found = _call("Find.Execute() [first time]", find.Execute)
        while found:
            yield self._to_match(found_range)
            found = _call("Find.Execute() [after the second time]", find.Execute)

    @staticmethod
    def _to_match(found_range) -> Match:
        page = _call("Range.Information(wdActiveEndPageNumber)", found_range.Information, WD_ACTIVE_END_PAGE_NUMBER)
        line = _call("Range.Information(wdFirstCharacterLineNumber)", found_range.Information, WD_FIRST_CHARACTER_LINE_NUMBER)
        text = _call("Range.Text", lambda: found_range.Text)
        return Match(int(page), int(line), text or "")


class WordEngine:
    """One Word instance shared by every document of a run."""

    name = "com"

    def __init__(self, dispatch: Optional[Callable] = None):
        self._dispatch = dispatch
        self._coinitialized = False
        self.word = None

    def __enter__(self) -> "WordEngine":
        try:
            self.start()
        except BaseException:
            self.quit()
            raise
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.quit()

    def start(self) -> None:
        dispatch = self._dispatch
        if dispatch is None:
            if not com_available():
                raise SearchError(
                    "Init",
                    "pywin32 がインストールされていないため Word COM を利用できません (必要に応じて 'python -m pywin32_postinstall -install' を実行してください)",
                )
            try:
                pythoncom.CoInitialize()
            except Exception as exc:
                raise SearchError("Init", format_com_exception(exc) or str(exc))
            self._coinitialized = True
            dispatch = win32com.client.gencache.EnsureDispatch

        try:
            self.word = dispatch("Word.Application")
        except Exception as exc:  # pragma: no cover - depends on Word availability
            detail = ", ".join(part for part in [describe_launch_failure(exc), format_com_exception(exc)] if part)
            raise SearchError("Launch", detail)

        _try_set(self.word, "Visible", True)
        _try_set(self.word, "DisplayAlerts", WD_ALERTS_NONE)
        _try_set(self.word, "AutomationSecurity", MSO_AUTOMATION_SECURITY_FORCE_DISABLE)

    def quit(self) -> None:
        if self.word is not None:
            try:
                self.word.Quit(WD_DO_NOT_SAVE_CHANGES)
            except Exception as exc:
                log_error(f"Word.Quit ({format_com_exception(exc)})")
            self.word = None
        if self._coinitialized:
            try:
                pythoncom.CoUninitialize()
            except Exception as exc:
                warn_once("coinitialize_cleanup", f"CoUninitialize で例外: {error_text(exc)}")
            self._coinitialized = False

    @contextmanager
    def open_document(self, path: str) -> Iterator[WordDocument]:
        if self.word is None:
            raise SearchError("Documents.Open", "Word is not running")
        documents = _call("Word.Documents", lambda: self.word.Documents)
        doc = _call(
            "Documents.Open",
            lambda: documents.Open(
                FileName=path,
                ReadOnly=True,
                AddToRecentFiles=False,
                ConfirmConversions=False,
                Visible=True,
                Revert=True,
            ),
        )
        try:
            yield WordDocument(doc)
        finally:
            try:
                doc.Close(WD_DO_NOT_SAVE_CHANGES)
            except Exception as exc:
                log_error(f"Document.Close {path} ({format_com_exception(exc)})")
