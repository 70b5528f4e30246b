"""Load verified form values from the master spreadsheet."""
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterator, Optional, Sequence, Tuple

import openpyxl
from openpyxl.utils import column_index_from_string

from form_schemas.form_config import FormConfig

from .reconcile import Dataset, build_dataset

logger = logging.getLogger(__name__)


def cell_to_string(value: Any) -> Optional[str]:
    """Render a cell value the way it was typed on the form.

    Numbers are cast to integers (codes and counts, never fractions) and
    dates are written day/month/two-digit-year.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, (int, float)):
        return str(int(value))
    if isinstance(value, (datetime, date)):
        return f"{value.day:02d}/{value.month:02d}/{value.year % 100:02d}"
    return str(value)


def column_value(row: Tuple[Any, ...], column: str) -> Optional[str]:
    """Get the string content of the cell in ``column`` (e.g. "BD")."""
    index = column_index_from_string(column) - 1
    if index >= len(row):
        return None
    return cell_to_string(row[index])


def iter_sheet_rows(
    workbook_path: Path,
    sheets: Sequence[str],
    header_rows: int = 1,
) -> Iterator[Tuple[Any, ...]]:
    """
    Yield the raw cell values of every data row in the given sheets.

    Header rows and completely empty rows are skipped.

    Raises:
        FileNotFoundError: if the workbook does not exist
        KeyError: if a sheet is missing from the workbook
    """
    workbook_path = Path(workbook_path)
    if not workbook_path.exists():
        raise FileNotFoundError(f"Workbook not found: {workbook_path}")

    wb = openpyxl.load_workbook(str(workbook_path), read_only=True, data_only=True)
    try:
        for sheet_name in sheets:
            if sheet_name not in wb.sheetnames:
                raise KeyError(f"Sheet '{sheet_name}' not found in {workbook_path.name}")
            ws = wb[sheet_name]
            for row in ws.iter_rows(min_row=header_rows + 1, values_only=True):
                if all(v is None or (isinstance(v, str) and not v.strip()) for v in row):
                    continue
                yield row
    finally:
        wb.close()


def load_ground_truth(
    workbook_path: Path,
    sheets: Sequence[str],
    columns: Sequence[str],
    id_column: str,
    header_rows: int = 1,
) -> Dataset:
    """
    Read the expected value of every field for every client.

    Args:
        workbook_path: Path to the .xlsx ground truth
        sheets: Sheet names to read
        columns: Column letters to extract, in field order
        id_column: Column letters of the client identifier used as key
        header_rows: Leading rows of each sheet that hold no data

    Returns:
        Dict mapping normalized client ID to the list of expected values.
        Client IDs that appear on more than one row are excluded.
    """
    def rows():
        for row in iter_sheet_rows(workbook_path, sheets, header_rows):
            record = [column_value(row, column) for column in columns]
            yield column_value(row, id_column), record

    data = build_dataset(rows(), source="ground truth")
    logger.info(f"Loaded {len(data)} ground truth records from {Path(workbook_path).name}")
    return data


def load_form_workbook(workbook_path: Path, config: FormConfig) -> Dataset:
    """Load ground truth using the columns and sheets of a FormConfig."""
    return load_ground_truth(
        workbook_path,
        sheets=config.sheets,
        columns=config.columns,
        id_column=config.client_id_column,
        header_rows=config.header_rows,
    )
