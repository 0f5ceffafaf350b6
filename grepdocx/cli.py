# cli.py - grep through the Word documents of a folder tree
# Outputs one line per document ("path: HIT") or, with --verbose, one line per
# occurrence ('path (page,line): "text"'); --json switches to JSON objects.

import argparse
import os
import platform
import sys
from typing import List, Optional

from .errors import SearchError
from .log import emit, log_error, log_stage, reconfigure_streams
from .query import FindOptions, build_find_options
from .results import (
    HIT,
    NO_HIT,
    DetailResult,
    SimpleResult,
    format_detail,
    format_simple,
)
from .walk import DEFAULT_EXTS, iter_documents, parse_exts, parse_list
from .word import WordEngine, com_available, detect_word

ENGINES = ("auto", "com", "docx")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="grepdocx",
        description="Search the Word documents under a directory for a text or wildcard pattern.",
    )
    ap.add_argument("--dir", default=".", help="directory")
    ap.add_argument("--text", default="", help="search text")
    ap.add_argument("--json", action="store_true", help="output as JSON")
    ap.add_argument(
        "--only-hit",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="show ONLY HIT",
    )
    ap.add_argument("--verbose", action="store_true", help="verbose mode")
    ap.add_argument("--debug", action="store_true", help="debug mode")
    ap.add_argument("--engine", choices=ENGINES, default="auto", help="search engine")
    ap.add_argument("--exts", default=DEFAULT_EXTS, help="document extensions (; or , separated)")
    ap.add_argument("--exclude-folders", default="", help="folder names to skip (; or , separated)")
    ap.add_argument("--keep-going", action="store_true", help="report failing documents and continue")
    ap.add_argument("--diag", action="store_true", help="print diagnostics to stderr")
    return ap


def create_engine(name: str):
    if name == "auto":
        name = "com" if com_available() else "docx"
    if name == "com":
        return WordEngine()
    # python-docx is only loaded when it is actually used
    from .docx_engine import DocxEngine

    return DocxEngine()


def _emit_startup_diag(args, engine) -> None:
    arch = platform.architecture()[0]
    if "64" in arch:
        py_bits = "64"
    elif "32" in arch:
        py_bits = "32"
    else:
        py_bits = arch
    word_detect = detect_word()
    exts_display = ";".join(sorted(parse_exts(args.exts)))
    sys.stderr.write(
        f"diag: py={py_bits}, engine={engine.name}, word-detect={word_detect}, "
        f"exts={exts_display}, keep-going={bool(args.keep_going)}\n"
    )
    sys.stderr.flush()


def search_document(engine, root_dir: str, path: str, options: FindOptions, args) -> None:
    with engine.open_document(path) as doc:
        if args.debug:
            log_stage("Document Open", path)

        rel_path = os.path.relpath(path, root_dir)
        matches = doc.iter_matches(options)
        first = next(matches, None)

        if first is None:
            if not args.only_hit:
                emit(format_simple(SimpleResult(rel_path, NO_HIT), args.json))
            return

        if not args.verbose:
            emit(format_simple(SimpleResult(rel_path, HIT), args.json))
            return

        emit(format_detail(DetailResult(rel_path, first.page, first.line, first.text), args.json))
        for match in matches:
            emit(format_detail(DetailResult(rel_path, match.page, match.line, match.text), args.json))


def run(args, engine=None) -> int:
    root_dir = os.path.abspath(args.dir or ".")
    options = build_find_options(args.text)
    exts = parse_exts(args.exts)
    excluded = parse_list(args.exclude_folders)
    if engine is None:
        engine = create_engine(args.engine)

    if args.diag:
        _emit_startup_diag(args, engine)

    failed = 0
    with engine:
        for path in iter_documents(root_dir, exts, excluded):
            try:
                search_document(engine, root_dir, path, options, args)
            except (SearchError, OSError) as exc:
                if not args.keep_going:
                    raise
                log_error(f"{path} ({exc})")
                failed += 1
    return 1 if failed else 0


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    if not args.text:
        ap.print_help(sys.stderr)
        return 1

    reconfigure_streams()
    try:
        return run(args)
    except (SearchError, OSError) as exc:
        log_error(str(exc))
        return 1
    finally:
        try:
            sys.stdout.flush()
        except OSError:
            pass


if __name__ == "__main__":
    sys.exit(main())
