"""Atomic file writes for the published artifacts."""

from __future__ import annotations

import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, TextIO


@contextmanager
def atomic_write(path: str | Path) -> Generator[TextIO, None, None]:
    """Open a temp file beside *path* for writing.

    Replaces *path* on clean exit, discards the temp file on exception, and
    always closes. Readers never see a half-written artifact.
    """
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    f = os.fdopen(fd, "w", encoding="utf-8")
    try:
        yield f
        f.close()
        os.replace(tmp_name, path)
    except BaseException:
        f.close()
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
