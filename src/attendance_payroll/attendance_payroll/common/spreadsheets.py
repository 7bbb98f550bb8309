from __future__ import annotations

import csv
import logging
from io import BytesIO, StringIO
from pathlib import PurePath
from typing import Any

import pandas as pd

from ..core.exceptions import FormatError

_logger = logging.getLogger(__name__)

_EXCEL_SUFFIXES = {".xlsx", ".xlsm", ".xls"}


def _clean(value: Any) -> Any:
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    return value


def read_table(content: bytes, file_name: str, *, header: Any = None) -> pd.DataFrame:
    """Read the first sheet (or the CSV body) into a DataFrame of raw objects."""
    suffix = PurePath(file_name).suffix.lower()
    try:
        if suffix == ".csv":
            return pd.read_csv(BytesIO(content), header=header, dtype=object, keep_default_na=True)
        if suffix in _EXCEL_SUFFIXES or not suffix:
            return pd.read_excel(BytesIO(content), sheet_name=0, header=header, dtype=object)
    except Exception as e:
        _logger.warning("could not decode %s: %s", file_name, e)
        raise FormatError(f"No se pudo leer el archivo {file_name}: {e}") from e
    raise FormatError(f"Tipo de archivo no soportado: {file_name}")


def _decode_csv(content: bytes, file_name: str) -> list[list[Any]]:
    # Rows above the header are shorter than the table, which read_csv rejects.
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        text = content.decode("latin-1")
    try:
        rows = list(csv.reader(StringIO(text)))
    except csv.Error as e:
        _logger.warning("could not decode %s: %s", file_name, e)
        raise FormatError(f"No se pudo leer el archivo {file_name}: {e}") from e
    return [[v if v.strip() else None for v in row] for row in rows]


def decode_workbook(content: bytes, file_name: str) -> list[list[Any]]:
    """Decode an uploaded spreadsheet into a 2-D grid (NaN cells become None)."""
    if PurePath(file_name).suffix.lower() == ".csv":
        return _decode_csv(content, file_name)
    df = read_table(content, file_name, header=None)
    return [[_clean(v) for v in row] for row in df.itertuples(index=False, name=None)]
