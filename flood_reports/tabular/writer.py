from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

import pandas as pd

"""Report writers.

Each artifact is written to a temporary file next to its destination and
moved into place with ``os.replace``; a failed write leaves no partial file
behind.
"""

__all__ = [
    "TableWriteError",
    "write_csv_report",
    "write_json_document",
]


class TableWriteError(Exception):
    """Raised when an output artifact cannot be written."""


def _umask_file_mode() -> int:
    # mkstemp は 0600 で作るので open() と同じ 0666 & ~umask に揃える
    mask = os.umask(0)
    os.umask(mask)
    return 0o666 & ~mask


@contextmanager
def _atomic_target(path: Path) -> Iterator[Path]:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        os.close(fd)
    except OSError as e:
        raise TableWriteError(f"cannot prepare {path}: {e}") from e
    tmp = Path(tmp_name)
    try:
        yield tmp
        os.chmod(tmp, _umask_file_mode())
        os.replace(tmp, path)
    except OSError as e:
        raise TableWriteError(f"cannot write {path}: {e}") from e
    finally:
        if tmp.exists():
            tmp.unlink()


def write_csv_report(path: Path, columns: Sequence[str], rows: Sequence[dict[str, Any]]) -> Path:
    """Write rows with a header line (header only when rows is empty)."""
    df = pd.DataFrame(list(rows), columns=list(columns))
    with _atomic_target(path) as tmp:
        df.to_csv(tmp, index=False, encoding="utf-8", lineterminator="\n")
    return path


def write_json_document(path: Path, document: dict[str, Any]) -> Path:
    with _atomic_target(path) as tmp:
        tmp.write_text(json.dumps(document, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    return path
