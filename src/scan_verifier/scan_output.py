"""Collect the values the scanner read from each processed form.

The scanner writes one folder per form:

    <root>/<form folder>/
        clientID.txt   client identifier (first token)
        output.json    {"fields": [{"value": ...}, ...]}
"""
import json
import logging
from pathlib import Path
from typing import Iterator, Optional, Sequence, Tuple

from form_schemas.form_config import FormConfig

from .reconcile import Dataset, FormRecord, build_dataset

logger = logging.getLogger(__name__)


class ScanOutputError(ValueError):
    """A scanner output document does not have the expected layout."""


def read_client_id(path: Path) -> Optional[str]:
    """Return the first whitespace-delimited token of an identifier file."""
    tokens = Path(path).read_text(encoding="utf-8").split()
    return tokens[0] if tokens else None


def parse_scan_output(path: Path, indexes: Sequence[int]) -> FormRecord:
    """
    Extract the configured field values from one output document.

    Args:
        path: Path to the scanner's JSON output
        indexes: Zero-based positions in the "fields" array, in field order

    Returns:
        One value per index; None where the entry carries no value

    Raises:
        ScanOutputError: if "fields" is missing or an index is out of range
    """
    with open(path, encoding="utf-8") as f:
        document = json.load(f)

    fields = document.get("fields") if isinstance(document, dict) else None
    if not isinstance(fields, list):
        raise ScanOutputError(f"{path}: no 'fields' array")

    values: FormRecord = []
    for index in indexes:
        if index >= len(fields):
            raise ScanOutputError(f"{path}: field index {index} out of range ({len(fields)} fields)")
        entry = fields[index]
        value = entry.get("value") if isinstance(entry, dict) else None
        values.append(None if value is None else str(value))
    return values


def iter_form_folders(root: Path) -> Iterator[Path]:
    """Yield the immediate subdirectories of root, sorted by name."""
    root = Path(root)
    if not root.is_dir():
        raise FileNotFoundError(f"Scan output directory not found: {root}")
    for entry in sorted(root.iterdir()):
        if entry.is_dir():
            yield entry


def crawl_scan_output(
    root: Path,
    indexes: Sequence[int],
    identifier_file: str = "clientID.txt",
    output_file: str = "output.json",
) -> Dataset:
    """
    Read every form folder under root.

    Folders missing either file, or whose output cannot be parsed, are
    logged and skipped. Client IDs shared by several folders are excluded.

    Returns:
        Dict mapping normalized client ID to the list of scanned values
    """
    def rows() -> Iterator[Tuple[Optional[str], FormRecord]]:
        for folder in iter_form_folders(root):
            id_path = folder / identifier_file
            output_path = folder / output_file
            if not id_path.exists() or not output_path.exists():
                logger.warning(f"Skipping {folder.name}: missing {identifier_file} or {output_file}")
                continue
            try:
                client_id = read_client_id(id_path)
                values = parse_scan_output(output_path, indexes)
            except (ScanOutputError, json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
                logger.warning(f"Skipping {folder.name}: {e}")
                continue
            logger.debug(f"Folder: {folder.name}\tClient ID: {client_id}")
            yield client_id, values

    data = build_dataset(rows(), source="scan output")
    logger.info(f"Loaded {len(data)} scanned forms from {Path(root)}")
    return data


def load_scan_output(root: Path, config: FormConfig) -> Dataset:
    """Crawl scan output using the positions and file names of a FormConfig."""
    return crawl_scan_output(
        root,
        indexes=config.json_indexes,
        identifier_file=config.identifier_file,
        output_file=config.output_file,
    )
