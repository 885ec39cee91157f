"""Filesystem access for schema definitions and dataset dumps."""

import json
import logging
from pathlib import Path
from typing import Any

from blacklist_registry.exceptions import DatasetError

logger = logging.getLogger(__name__)


def load_json(path: str | Path, kind: str = "file") -> Any:
    """Read and parse a JSON file.

    Args:
        path: Location of the file.
        kind: What the file is, used in error messages ("schema", "dataset").

    Raises:
        DatasetError: If the file cannot be read or is not valid JSON.
    """
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as fh:
            data = json.load(fh)
    except OSError as e:
        raise DatasetError(f"Cannot read {kind} {path}: {e.strerror or e}") from e
    except json.JSONDecodeError as e:
        raise DatasetError(f"Cannot parse {kind} {path}: {e}") from e
    logger.debug(f"Loaded {kind} from {path}")
    return data


def load_dataset(path: str | Path) -> list[Any]:
    """Read a full dataset dump. The top level must be a JSON array."""
    data = load_json(path, "dataset")
    if not isinstance(data, list):
        raise DatasetError(
            f"Dataset {path} must contain a JSON array, got {type(data).__name__}"
        )
    return data
