# docx_engine.py - Word-compatible Find over .docx packages with python-docx
#
# Used where Word itself is not available. Page and line numbers come from the
# break markup stored in the file, not from a real layout, so they only match
# Word's numbers for documents whose pages end at explicit or rendered breaks.

from bisect import bisect_right
from contextlib import contextmanager
from typing import Iterator, List, Tuple

from docx import Document
from docx.oxml.ns import qn

from .errors import wrap
from .query import FindOptions, compile_pattern
from .results import Match

W_P = qn("w:p")
W_T = qn("w:t")
W_TAB = qn("w:tab")
W_BR = qn("w:br")
W_CR = qn("w:cr")
W_TYPE = qn("w:type")
W_VAL = qn("w:val")
W_NO_BREAK_HYPHEN = qn("w:noBreakHyphen")
W_RENDERED_BREAK = qn("w:lastRenderedPageBreak")
W_TXBX_CONTENT = qn("w:txbxContent")
W_PAGE_BREAK_BEFORE = qn("w:pageBreakBefore")
W_SECT_PR = qn("w:sectPr")

CONTENT_TAGS = (W_T, W_TAB, W_BR, W_CR, W_NO_BREAK_HYPHEN, W_RENDERED_BREAK)


def _is_on(element) -> bool:
    if element is None:
        return False
    return element.get(W_VAL, "true").lower() not in ("0", "false", "off")


def _starts_new_page(sect) -> bool:
    kind = sect.find(W_TYPE)
    if kind is None:
        return True
    return kind.get(W_VAL) not in ("continuous", "nextColumn")


def _section_breaks(body) -> dict:
    """Map each paragraph-level sectPr to whether the section after it starts a page.

    A sectPr describes the section it closes; how the following section starts
    is stored on the next sectPr in document order (the last one is the body's).
    """

    sections = list(body.iter(W_SECT_PR))
    return {sect: _starts_new_page(nxt) for sect, nxt in zip(sections, sections[1:])}


def _ends_section(p, breaks: dict) -> bool:
    ppr = p.pPr
    if ppr is None:
        return False
    sect = ppr.find(W_SECT_PR)
    if sect is None:
        return False
    return breaks.get(sect, False)


class _Layout:
    """Running page/line position while walking paragraphs in order."""

    def __init__(self):
        self.page = 1
        self.line = 1
        self.at_top = True

    def new_page(self) -> None:
        self.page += 1
        self.line = 1
        self.at_top = True

    def new_line(self) -> None:
        self.line += 1
        self.at_top = False

    def new_paragraph(self) -> None:
        if self.at_top:
            self.at_top = False
        else:
            self.line += 1


class DocxDocument:
    def __init__(self, doc):
        self._body = doc.element.body

    def _paragraphs(self) -> Iterator:
        for p in self._body.iter(W_P):
            if next(p.iterancestors(W_TXBX_CONTENT), None) is not None:
                continue
            yield p

    def iter_paragraphs(self) -> Iterator[Tuple[str, List[int], List[Tuple[int, int]]]]:
        """Yield ``(text, offsets, positions)`` for every body paragraph.

        ``positions[i]`` is the ``(page, line)`` in effect from character
        ``offsets[i]`` of ``text`` onwards.
        """

        rendered = next(self._body.iter(W_RENDERED_BREAK), None) is not None
        breaks = _section_breaks(self._body)
        layout = _Layout()
        first = True
        pending_section_break = False

        for p in self._paragraphs():
            if not first:
                ppr = p.pPr
                explicit_before = (
                    not rendered
                    and ppr is not None
                    and _is_on(ppr.find(W_PAGE_BREAK_BEFORE))
                )
                if pending_section_break or explicit_before:
                    layout.new_page()
            first = False
            pending_section_break = not rendered and _ends_section(p, breaks)
            layout.new_paragraph()

            chunks: List[str] = []
            length = 0
            offsets = [0]
            positions = [(layout.page, layout.line)]

            def _mark() -> None:
                if offsets[-1] == length:
                    positions[-1] = (layout.page, layout.line)
                else:
                    offsets.append(length)
                    positions.append((layout.page, layout.line))

            for el in p.iter(*CONTENT_TAGS):
                if next(el.iterancestors(W_P)) is not p:
                    continue
                tag = el.tag
                if tag == W_T:
                    text = el.text or ""
                elif tag == W_TAB:
                    text = "\t"
                elif tag == W_NO_BREAK_HYPHEN:
                    text = "-"
                elif tag == W_RENDERED_BREAK:
                    if rendered:
                        layout.new_page()
                        _mark()
                    continue
                elif tag == W_BR and el.get(W_TYPE) == "page":
                    if not rendered:
                        layout.new_page()
                        _mark()
                    continue
                elif tag == W_BR and el.get(W_TYPE) == "column":
                    continue
                else:
                    # Word reports manual line breaks as vertical tab
                    chunks.append("\x0b")
                    length += 1
                    layout.new_line()
                    _mark()
                    continue
                if text:
                    chunks.append(text)
                    length += len(text)
                    layout.at_top = False

            yield "".join(chunks), offsets, positions

    def iter_matches(self, options: FindOptions) -> Iterator[Match]:
        pattern = compile_pattern(options)
        for text, offsets, positions in self.iter_paragraphs():
            if not text:
                continue
            for m in pattern.finditer(text):
                if m.start() == m.end():
                    continue
                page, line = positions[bisect_right(offsets, m.start()) - 1]
                yield Match(page, line, m.group(0))


class DocxEngine:
    name = "docx"

    def __enter__(self) -> "DocxEngine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        return None

    @contextmanager
    def open_document(self, path: str) -> Iterator[DocxDocument]:
        try:
            doc = Document(path)
        except Exception as exc:
            raise wrap("Document.Open", exc)
        yield DocxDocument(doc)
