"""
Chart groupings and table projections for classified SQCB records.

Groupings count records per key and keep keys in first-seen order, so a
chart lists dates or handlers in the order the records came in.
"""

from typing import Callable, Dict, List, Optional, Sequence

import pandas as pd

from schemas.aggregates import ChartPoint, TableRow
from schemas.sqcb import SqcbRecord
from src.classifiers.predicates import status_matches
from src.utils.normalization import normalize_date

NO_DATE = 'NoDate'
UNKNOWN_HANDLER = 'Unknown'

# Table detail columns
DETAIL_MODIFIED = 'modified'
DETAIL_RMA_NO = 'rma_no'


def count_by_key(keys: Sequence[str]) -> List[ChartPoint]:
    """
    Count occurrences of each key.

    Args:
        keys: One key per record

    Returns:
        ChartPoints in first-seen key order
    """
    if not keys:
        return []

    series = pd.Series(list(keys), dtype=object)
    counts = series.groupby(series, sort=False).size()
    return [ChartPoint(key=str(key), value=int(value)) for key, value in counts.items()]


def group_by_feedback_date(records: Sequence[SqcbRecord]) -> List[ChartPoint]:
    """Count by raw feedback_date string; records without one are skipped."""
    return count_by_key([record.feedback_date for record in records if record.feedback_date])


def group_by_modified_date(records: Sequence[SqcbRecord]) -> List[ChartPoint]:
    """Count by UTC calendar date of `modified`; unparseable dates go to 'NoDate'."""
    return count_by_key([normalize_date(record.modified) or NO_DATE for record in records])


def group_by_hd_incharge(records: Sequence[SqcbRecord]) -> List[ChartPoint]:
    """Count by handler name; records without one go to 'Unknown'."""
    return count_by_key([record.hd_incharge or UNKNOWN_HANDLER for record in records])


GROUPINGS: Dict[str, Callable[[Sequence[SqcbRecord]], List[ChartPoint]]] = {
    'feedback_date': group_by_feedback_date,
    'modified_date': group_by_modified_date,
    'hd_incharge': group_by_hd_incharge,
}


def status_breakdown(records: Sequence[SqcbRecord]) -> List[ChartPoint]:
    """Open / Closed counts for the status pie chart (case-insensitive)."""
    return [
        ChartPoint(key=label, value=sum(1 for record in records if status_matches(record.status, label)))
        for label in ('Open', 'Closed')
    ]


def project_table_row(record: SqcbRecord, detail_column: Optional[str] = None) -> TableRow:
    """Flatten one record into a table row; missing values become ''."""
    row = {
        'id': record.sqcb_id or '',
        'disposition': record.disposition or '',
        'supplier': record.supplier_name or '',
        'comment': record.comments or '',
    }
    if detail_column == DETAIL_MODIFIED:
        row['modified'] = record.modified or ''
    elif detail_column == DETAIL_RMA_NO:
        row['rma_no'] = record.rma_no or ''
    return TableRow(**row)


def project_table_rows(records: Sequence[SqcbRecord], detail_column: Optional[str] = None) -> List[TableRow]:
    """Flatten records into table rows, preserving order."""
    return [project_table_row(record, detail_column) for record in records]
