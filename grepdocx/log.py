# log.py - stdout result lines and stderr diagnostics

import sys

warned = set()


def reconfigure_streams() -> None:
    """Force UTF-8 on stdout/stderr so document text survives the console."""

    for stream in (sys.stdout, sys.stderr):
        if not hasattr(stream, "reconfigure"):
            continue
        try:
            stream.reconfigure(encoding="utf-8", errors="replace", line_buffering=True)
        except (OSError, ValueError):
            continue


def emit(line: str) -> None:
    print(line, flush=True)


def log_stage(stage: str, detail: str) -> None:
    sys.stderr.write(f"{stage}: {detail}\n")
    sys.stderr.flush()


def log_error(message: str) -> None:
    sys.stderr.write(f"ERR {message}\n")
    sys.stderr.flush()


def warn_once(kind: str, message: str) -> None:
    if kind in warned:
        return
    warned.add(kind)
    sys.stderr.write(message + "\n")
    sys.stderr.flush()
