"""Shared test fixtures and configuration."""
import json
from pathlib import Path

import openpyxl
import pytest
import yaml

from form_schemas import BubbleOption, FieldSpec, FormConfig


HEALTH_CONDITIONS = [
    ("1", "hypertension/pre-eclampsia"),
    ("2", "diabetes"),
    ("3", "under the age of 20"),
    ("4", "underweight"),
    ("5", "carrying twins or triplets"),
    ("6", "history of preterm delivery"),
    ("7", "history of stillbirth or neonatal birth"),
    ("8", "other1"),
    ("9", "other2"),
]

# Small form: client_id, age, EDD, regCCPF, health_cond
SMALL_CONFIG = {
    "sheets": ["#3"],
    "client_id_column": "A",
    "header_rows": 1,
    "fields": [
        {"name": "client_id", "column": "A", "json_index": 0, "kind": "digits", "pad_width": 5},
        {"name": "age", "column": "B", "json_index": 1, "kind": "digits"},
        {"name": "EDD", "column": "C", "json_index": 2, "kind": "date"},
        {"name": "regCCPF", "column": "D", "json_index": 3, "kind": "categorical"},
        {
            "name": "health_cond", "column": "E", "json_index": 4, "kind": "bubble",
            "options": [{"code": code, "label": label} for code, label in HEALTH_CONDITIONS],
        },
    ],
    "alignment_columns": ["F", "G"],
}

GROUND_TRUTH_ROWS = [
    ["client_id", "age", "EDD", "regCCPF", "health_cond", "align_1", "align_2"],
    ["10234", 25, "05/07/15", "yes", "3,6", "small", "none"],
    ["10567", 31, "12/01/16", "no", "1,6", "large", "Misalignment"],
    ["10999", 19, "01/02/16", "no", "null", None, None],
    ["20001", 22, "03/03/16", "yes", "2", "none", "none"],
    ["20001", 23, "04/03/16", "no", "4", "small", "small"],
]

# folder name -> (clientID.txt content, scanned values in field order)
SCAN_FOLDERS = {
    "form_a_id_10234": ("10234", ["10234", "25", "5/7/2015", "yes", "under the age of 20 history of preterm delivery"]),
    "form_b_id_10567": ("10567", ["10567", "37", "12/01/16", "yes", "hypertension/pre-eclampsia diabetes under the age of 20"]),
    "form_c_id_30000": ("30000", ["30000", "40", "01/01/16", "no", ""]),
    "form_d_id_20001": ("20001", ["20001", "22", "03/03/16", "yes", "diabetes"]),
}


def write_workbook(path: Path, rows, sheet: str = "#3") -> Path:
    """Write rows to a single-sheet .xlsx workbook."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = sheet
    for row in rows:
        ws.append(row)
    wb.save(path)
    return path


def write_scan_folder(root: Path, name: str, client_id: str, values) -> Path:
    """Create one scanner output folder holding the given values at fields[0..n]."""
    folder = root / name
    folder.mkdir(parents=True)
    (folder / "clientID.txt").write_text(f"{client_id}\n")
    fields = [{"name": f"field{i}", "value": value} for i, value in enumerate(values)]
    (folder / "output.json").write_text(json.dumps({"fields": fields}))
    return folder


@pytest.fixture
def health_options():
    return [BubbleOption(code=code, label=label) for code, label in HEALTH_CONDITIONS]


@pytest.fixture
def health_spec(health_options):
    return FieldSpec(name="health_cond", options=health_options)


@pytest.fixture
def small_config():
    return FormConfig.model_validate(SMALL_CONFIG)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "form.yaml"
    path.write_text(yaml.safe_dump(SMALL_CONFIG))
    return path


@pytest.fixture
def workbook(tmp_path):
    return write_workbook(tmp_path / "master.xlsx", GROUND_TRUTH_ROWS)


@pytest.fixture
def scan_root(tmp_path):
    root = tmp_path / "scan-output"
    root.mkdir()
    for name, (client_id, values) in SCAN_FOLDERS.items():
        write_scan_folder(root, name, client_id, values)
    return root
