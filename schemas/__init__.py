"""
Data schemas for the SQCB tracker.

This module defines Pydantic models for the records read from the SQCB API
and for the aggregates the classifier hands to the dashboard.

Usage:
    from schemas import SqcbRecord, AggregateResult

    record = SqcbRecord.model_validate(raw_dict)
"""

from .sqcb import SqcbRecord, SqcbPart, SqcbAttachment, SqcbPicture
from .aggregates import AggregateResult, CategoryResult, ChartPoint, TableRow

__all__ = [
    'SqcbRecord',
    'SqcbPart',
    'SqcbAttachment',
    'SqcbPicture',
    'AggregateResult',
    'CategoryResult',
    'ChartPoint',
    'TableRow',
]
