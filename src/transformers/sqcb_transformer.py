"""Transformer for SQCB API payloads."""
from typing import Any, Iterable, List, Mapping
import logging

from pydantic import ValidationError

from schemas.sqcb import SqcbRecord

logger = logging.getLogger(__name__)


def unwrap_payload(payload: Any) -> List[Any]:
    """
    Extract the record list from a "list SQCB records" response.

    The endpoint answers either with a bare list or with {"data": [...]}.

    Args:
        payload: Decoded JSON response

    Returns:
        The record list, or [] for any other shape
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping):
        data = payload.get('data')
        if isinstance(data, list):
            return data
    logger.warning(f'Unexpected SQCB payload shape: {type(payload).__name__}')
    return []


class SqcbTransformer:
    """Validate raw SQCB dicts into immutable SqcbRecord instances."""

    def __init__(self):
        """Initialize SQCB transformer."""
        self.name = 'sqcb'
        self.logger = logging.getLogger(f'{__name__}.{self.name}')

    def transform(self, data: Iterable[Any]) -> List[SqcbRecord]:
        """
        Transform raw API records.

        Tasks:
        - Coerce numeric identifiers to text
        - Drop non-dict entries from nested lists
        - Keep unknown keys as record extras

        Records that are already SqcbRecord instances pass through.

        Args:
            data: Raw SQCB API response records

        Returns:
            Validated records, input order
        """
        data = list(data)
        self.logger.debug(f'Transforming {len(data)} SQCB records...')

        transformed = []
        for idx, record in enumerate(data):
            if isinstance(record, SqcbRecord):
                transformed.append(record)
                continue
            if not isinstance(record, Mapping):
                self.logger.error(f'Skipping record {idx}: expected an object, got {type(record).__name__}')
                continue
            try:
                transformed.append(SqcbRecord.model_validate(dict(record)))
            except ValidationError as e:
                self.logger.error(f'Failed to transform record {idx}: {str(e)}')
                continue

        self.logger.debug(f'Successfully transformed {len(transformed)} records')
        return transformed

    def validate_transformation(self, data: Iterable[SqcbRecord]) -> bool:
        """
        Validate transformed records carry an identifier.

        Args:
            data: Transformed records to validate

        Returns:
            True if every record has sqcb_id or sqcb
        """
        data = list(data)
        for idx, record in enumerate(data):
            if not (record.sqcb_id or record.sqcb):
                self.logger.error(f'Record {idx} has neither sqcb_id nor sqcb')
                return False

        self.logger.info(f'Validated {len(data)} transformed records')
        return True
