from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

"""CSV reader.

The source table is read with pandas with every column kept as text and
NA conversion disabled, so each data row reaches the normalizer as a plain
``dict[str, str]`` (RawRow) exactly as it appears in the file.
"""

__all__ = [
    "RawRow",
    "TableData",
    "TableReadError",
    "MissingColumnsError",
    "read_csv_file",
    "normalize_table",
]

RawRow = dict[str, str]


class TableReadError(Exception):
    """Raised when the source file is missing, unreadable or not valid CSV."""


class MissingColumnsError(Exception):
    """Raised when expected columns are missing from the header row."""


@dataclass
class TableData:
    source: str
    columns: list[str]
    rows: list[RawRow]
    skipped_lines: int = 0  # フィールド数超過で読み飛ばした行


def read_csv_file(path: Path, encoding: str = "utf-8") -> pd.DataFrame:
    """Read a CSV file into a DataFrame of strings.

    Lines with more fields than the header (an unquoted comma inside a
    contractor name, for instance) are dropped rather than aborting the
    whole read; their count is left in ``df.attrs["skipped_lines"]``.

    Parameters
    ----------
    path: CSV ファイルパス
    encoding: ファイルエンコーディング (既定 utf-8)

    Raises
    ------
    TableReadError: file absent, unreadable, empty or malformed
    """
    if not path.exists():
        raise TableReadError(f"input file not found: {path}")

    skipped: list[list[str]] = []

    def _skip_bad_line(fields: list[str]) -> None:
        skipped.append(fields)
        return None

    try:
        # 文字列のまま読む (NaN 変換なし、"NA" 等もそのまま)
        df = pd.read_csv(
            path,
            dtype=str,
            keep_default_na=False,
            encoding=encoding,
            skip_blank_lines=True,
            engine="python",
            on_bad_lines=_skip_bad_line,
        )
    except pd.errors.EmptyDataError as e:
        raise TableReadError(f"input file is empty: {path}") from e
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise TableReadError(f"cannot parse {path}: {e}") from e
    except OSError as e:
        raise TableReadError(f"cannot read {path}: {e}") from e
    df.attrs["skipped_lines"] = len(skipped)
    return df


def normalize_table(
    df: pd.DataFrame,
    source: str,
    expected_columns: Iterable[str] | None = None,
) -> TableData:
    """Convert a raw DataFrame into header + RawRow list.

    Steps:
    1. Strip whitespace around header names
    2. Validate expected columns subset
    3. Build one dict per row, skipping rows whose cells are all blank
    """
    columns = [str(c).strip() for c in df.columns.tolist()]

    if expected_columns is not None:
        missing = set(expected_columns) - set(columns)
        if missing:
            raise MissingColumnsError(f"'{source}' missing columns: {sorted(missing)}")

    rows: list[RawRow] = []
    for values in df.itertuples(index=False, name=None):
        # 列数不足の行は NaN で埋められるため空文字に戻す
        cells = ["" if pd.isna(v) else str(v) for v in values]
        if all(c.strip() == "" for c in cells):
            continue
        rows.append(dict(zip(columns, cells, strict=False)))
    return TableData(
        source=source,
        columns=columns,
        rows=rows,
        skipped_lines=int(df.attrs.get("skipped_lines", 0)),
    )
