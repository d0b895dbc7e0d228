"""Record sources for the report CLI: a JSON export file or the live API."""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from src.connectors.sqcb_api_connector import SqcbApiConnector
from src.transformers.sqcb_transformer import unwrap_payload

logger = logging.getLogger(__name__)


class RecordSourceError(Exception):
    """Raised when a record file cannot be read or decoded."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


def load_records_from_file(path: Path) -> List[Dict[str, Any]]:
    """
    Load raw SQCB records from a JSON file.

    The file holds the list endpoint's response: a list of records or
    {"data": [...]}.

    Args:
        path: JSON file path

    Returns:
        Raw record dicts

    Raises:
        RecordSourceError: If the file is missing or not valid JSON
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            payload = json.load(f)
    except FileNotFoundError as e:
        raise RecordSourceError(f'Record file not found: {path}', path=path) from e
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise RecordSourceError(f'Cannot read record file {path}: {str(e)}', path=path) from e

    records = unwrap_payload(payload)
    logger.info(f'Loaded {len(records)} records from {path}')
    return records


def load_records_from_api(connector: Optional[SqcbApiConnector] = None) -> List[Dict[str, Any]]:
    """
    Fetch raw SQCB records from the API.

    Raises:
        SqcbApiError: If the request fails
    """
    with (connector or SqcbApiConnector()) as api:
        return api.list_records()
