"""Find scanned-form folders by the client ID embedded in their names.

Folders are named ``<anything>_id_<client id>``, e.g. ``form_0412_id_10234``.
"""
import logging
import shutil
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

from .normalize import normalize_identifier
from .reconcile import build_dataset

logger = logging.getLogger(__name__)


def client_id_from_folder_name(name: str) -> Optional[str]:
    """Return the client ID in a folder name, or None if it has none."""
    parts = name.split("_")
    if len(parts) < 2 or parts[-2] != "id":
        return None
    return parts[-1]


def map_ids_to_folders(paths: Iterable[Path], full_path: bool = False) -> Dict[str, str]:
    """
    Map client IDs to the folders that hold their scans.

    Args:
        paths: Directories whose subfolders are searched
        full_path: Map to the full folder path instead of its name

    Returns:
        Dict mapping client ID to folder name (or path). IDs found in more
        than one folder are left out.
    """
    def rows():
        for path in paths:
            path = Path(path)
            if not path.is_dir():
                logger.warning(f"Not a directory: {path}")
                continue
            for entry in sorted(path.iterdir()):
                if not entry.is_dir():
                    continue
                client_id = client_id_from_folder_name(entry.name)
                if client_id is None:
                    continue
                yield client_id, [str(entry) if full_path else entry.name]

    return {client_id: folders[0] for client_id, folders in build_dataset(rows(), source="folders").items()}


def list_client_ids(path: Path) -> Set[str]:
    """Client IDs of the scanned-form folders directly under path."""
    return set(map_ids_to_folders([path]))


def copy_subset(client_ids: Iterable[str], source_paths: Iterable[Path], destination: Path) -> List[str]:
    """
    Copy the folder of each client ID into destination.

    Existing folders in destination are merged into, not replaced.

    Returns:
        Client IDs for which no folder was found
    """
    id_to_folder = map_ids_to_folders(source_paths, full_path=True)
    destination = Path(destination)
    destination.mkdir(parents=True, exist_ok=True)

    missing = []
    for client_id in sorted({normalize_identifier(c) for c in client_ids}):
        folder = id_to_folder.get(client_id)
        if folder is None:
            logger.warning(f"Client id {client_id} not found")
            missing.append(client_id)
            continue
        source = Path(folder)
        shutil.copytree(source, destination / source.name, dirs_exist_ok=True)
        logger.debug(f"Copied {source} -> {destination / source.name}")
    return missing
