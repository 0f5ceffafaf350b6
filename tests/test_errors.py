from grepdocx.errors import SearchError, wrap


class FakeComError(Exception):
    def __init__(self, hresult: int, message: str):
        super().__init__(message)
        self.hresult = hresult
        self.excepinfo = None


def test_plain_exception_keeps_its_message() -> None:
    err = wrap("Document.Open", ValueError("Package not found at 'x.docx'"))
    assert str(err) == "Document.Open failed: Package not found at 'x.docx'"


def test_com_error_carries_hresult() -> None:
    err = wrap("Documents.Open", FakeComError(-2147024864, "sharing violation"))
    assert err.stage == "Documents.Open"
    assert "hresult=0x80070020" in err.detail
    assert "msg=sharing violation" in err.detail


def test_empty_message_falls_back_to_type_name() -> None:
    assert str(wrap("Range.Text", KeyError())) == "Range.Text failed: KeyError"


def test_search_error_passes_through() -> None:
    original = SearchError("walk", "boom")
    assert wrap("other", original) is original
