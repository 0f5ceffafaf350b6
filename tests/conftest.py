from pathlib import Path
from typing import Callable, Sequence

import pytest
from docx import Document

PAGE_BREAK = object()


@pytest.fixture
def make_docx(tmp_path: Path) -> Callable[..., Path]:
    """Write a .docx under tmp_path; ``PAGE_BREAK`` items insert a hard page break."""

    def _make(relpath: str, paragraphs: Sequence = ()) -> Path:
        path = tmp_path / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        doc = Document()
        for item in paragraphs:
            if item is PAGE_BREAK:
                doc.add_page_break()
            else:
                doc.add_paragraph(item)
        doc.save(str(path))
        return path

    return _make
