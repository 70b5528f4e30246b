"""Misalignment scores from the reviewers' per-section alignment ratings.

Each form section was rated none/small/medium/large for how far the scan
was shifted from the template. A form's score is the mean weight of its
rated sections; higher means worse alignment.
"""
import logging
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence

from form_schemas.form_config import FormConfig

from .ground_truth import column_value, iter_sheet_rows
from .reconcile import build_dataset

logger = logging.getLogger(__name__)


def score_alignment_ratings(
    ratings: Sequence[Optional[str]],
    weights: Mapping[str, int],
    header: str = "Misalignment",
) -> Optional[float]:
    """
    Average the weights of the recognised ratings.

    Returns:
        Mean weight, or None when no rating was recognised
    """
    points = 0
    count = 0
    for rating in ratings:
        if rating is None or not rating.strip():
            continue
        rating = rating.strip()
        if rating in weights:
            points += weights[rating]
            count += 1
        elif rating != header:
            logger.warning(f"Non-standardized value! {rating}")
    if count == 0:
        return None
    return points / count


def compute_alignment_scores(
    workbook_path: Path,
    sheets: Sequence[str],
    columns: Sequence[str],
    id_column: str,
    weights: Mapping[str, int],
    header: str = "Misalignment",
    header_rows: int = 1,
) -> Dict[str, Optional[float]]:
    """
    Score every client's form from the alignment columns of the workbook.

    Returns:
        Dict mapping normalized client ID to misalignment score. Client IDs
        on more than one row are excluded.
    """
    def rows():
        for row in iter_sheet_rows(workbook_path, sheets, header_rows):
            ratings = [column_value(row, column) for column in columns]
            yield column_value(row, id_column), [score_alignment_ratings(ratings, weights, header)]

    return {client_id: record[0] for client_id, record in build_dataset(rows(), source="alignment").items()}


def load_alignment_scores(workbook_path: Path, config: FormConfig) -> Dict[str, Optional[float]]:
    """Compute alignment scores using the columns and weights of a FormConfig."""
    return compute_alignment_scores(
        workbook_path,
        sheets=config.sheets,
        columns=config.alignment_columns,
        id_column=config.client_id_column,
        weights=config.misalignment_weights,
        header=config.misalignment_header,
        header_rows=config.header_rows,
    )


def rank_folders_by_alignment(
    scores: Mapping[str, Optional[float]],
    id_to_folder: Mapping[str, str],
) -> Dict[str, float]:
    """Join scores with folder names; result is ordered by folder name."""
    by_folder = {}
    for client_id, folder in id_to_folder.items():
        score = scores.get(client_id)
        if score is None:
            logger.debug(f"No alignment score for client {client_id} ({folder})")
            continue
        by_folder[folder] = score
    return dict(sorted(by_folder.items()))
