# errors.py - error type shared by the walker, the engines and the CLI

from typing import Optional

try:  # pywin32 is only present on Windows
    import pywintypes  # type: ignore
except Exception:  # pragma: no cover - dependency may be missing
    pywintypes = None  # type: ignore


class SearchError(Exception):
    """A failed step while walking, opening or searching a document.

    ``stage`` names the operation that failed (``Documents.Open``,
    ``Find.Execute() [first time]``, ...) and ``detail`` carries the cause.
    """

    def __init__(self, stage: str, detail: Optional[str] = None):
        self.stage = stage
        self.detail = detail or ""
        super().__init__(f"{stage} failed: {self.detail}" if self.detail else f"{stage} failed")


def clean_detail(detail: Optional[str]) -> Optional[str]:
    if not detail:
        return None
    cleaned = " ".join(str(detail).split())
    if len(cleaned) > 500:
        cleaned = cleaned[:497] + "..."
    return cleaned


def error_text(exc: BaseException) -> str:
    if pywintypes is not None and isinstance(exc, pywintypes.com_error):
        if len(exc.args) >= 2 and isinstance(exc.args[1], str) and exc.args[1]:
            return exc.args[1]
    return str(exc)


def format_com_exception(exc: BaseException) -> str:
    parts = []
    hresult = getattr(exc, "hresult", None)
    if isinstance(hresult, int):
        value = hresult if hresult >= 0 else (hresult & 0xFFFFFFFF)
        parts.append(f"hresult=0x{value:08X}")
    excepinfo = getattr(exc, "excepinfo", None)
    if excepinfo:
        cleaned = ",".join(clean_detail(str(part)) or "" for part in excepinfo if part)
        if cleaned:
            parts.append(f"excepinfo={cleaned}")
    text = error_text(exc)
    if text:
        parts.append(f"msg={clean_detail(text)}")
    return ", ".join(parts)


def wrap(stage: str, exc: BaseException) -> SearchError:
    """Return ``exc`` as a SearchError for ``stage``, unless it already is one."""

    if isinstance(exc, SearchError):
        return exc
    if getattr(exc, "hresult", None) is None and not getattr(exc, "excepinfo", None):
        detail = clean_detail(error_text(exc))
    else:
        detail = format_com_exception(exc)
    return SearchError(stage, detail or type(exc).__name__)
