"""
SQCB Classifier for the supplier-quality dashboard

Buckets SQCB records into the dashboard's operational categories from their
disposition, RMA/PO/OBD numbers, status and age, then builds the chart
series and table rows each category is shown with.

Usage:
    from src.classifiers import SqcbClassifier

    classifier = SqcbClassifier()
    result = classifier.classify(records, now='2025-03-10T00:00:00Z', site='York')
    result['Waiting RMA'].count
    # 3

Categories overlap: a WAITING FEEDBACK record is both "New SQCB" and one of
"New Coming NCM" / "Pending Inform".
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

import pandas as pd

from schemas.aggregates import AggregateResult, CategoryResult, ChartPoint
from schemas.sqcb import SqcbRecord
from src.classifiers.aggregations import (
    DETAIL_MODIFIED,
    DETAIL_RMA_NO,
    GROUPINGS,
    group_by_feedback_date,
    project_table_rows,
    status_breakdown,
)
from src.classifiers.filters import ALL_SITES, apply_filters
from src.classifiers.predicates import (
    is_rma_no_null,
    is_within_n_days,
    status_is,
    status_matches,
)
from src.config.settings import settings
from src.transformers.sqcb_transformer import SqcbTransformer
from src.utils.normalization import resolve_now

logger = logging.getLogger(__name__)

# Disposition vocabulary (compared lower-cased)
WAITING_FEEDBACK = 'waiting feedback'
FEEDBACK = 'feedback'
SCRAP_SUPPLIER = 'scrap supplier'
RETURN_TO_SUPPLIER = 'return to supplier'
SUPPLIER_REJECT = 'supplier reject'

RMA_DISPOSITIONS = (SCRAP_SUPPLIER, RETURN_TO_SUPPLIER)


@dataclass(frozen=True)
class CategoryRule:
    """
    One dashboard category.

    Attributes:
        name: Display name, also the key in AggregateResult
        predicate: (record, now, window_days) -> bool
        grouping: Key into GROUPINGS for the category chart
        detail_column: Extra table column ('modified', 'rma_no' or None)
        description: Human-readable rule
    """
    name: str
    predicate: Callable[[SqcbRecord, pd.Timestamp, int], bool]
    grouping: str
    detail_column: Optional[str]
    description: str


def _new_coming_ncm(record: SqcbRecord, now: pd.Timestamp, window_days: int) -> bool:
    return record.disposition_key == WAITING_FEEDBACK and is_within_n_days(record.modified, window_days, now)


def _pending_inform(record: SqcbRecord, now: pd.Timestamp, window_days: int) -> bool:
    return record.disposition_key == WAITING_FEEDBACK and not is_within_n_days(record.modified, window_days, now)


def _waiting_rma(record: SqcbRecord, now: pd.Timestamp, window_days: int) -> bool:
    return record.disposition_key == FEEDBACK and is_rma_no_null(record.rma_no)


def _received_rma_waiting_po(record: SqcbRecord, now: pd.Timestamp, window_days: int) -> bool:
    # Status compared with exact case here
    return (
        record.disposition_key == SCRAP_SUPPLIER
        and not is_rma_no_null(record.rma_no)
        and status_is(record.status, 'Open', 'Pending')
    )


def _waiting_rtv(record: SqcbRecord, now: pd.Timestamp, window_days: int) -> bool:
    return record.disposition_key == RETURN_TO_SUPPLIER and not is_rma_no_null(record.rma_no)


def _supplier_reject(record: SqcbRecord, now: pd.Timestamp, window_days: int) -> bool:
    return record.disposition_key == SUPPLIER_REJECT


def _new_sqcb(record: SqcbRecord, now: pd.Timestamp, window_days: int) -> bool:
    return record.disposition_key == WAITING_FEEDBACK


def _feedback(record: SqcbRecord, now: pd.Timestamp, window_days: int) -> bool:
    return record.disposition_key == FEEDBACK


def _received_rma(record: SqcbRecord, now: pd.Timestamp, window_days: int) -> bool:
    return (
        record.disposition_key in RMA_DISPOSITIONS
        and bool(record.rma_no)
        and not record.po_no
        and not record.obd_no
    )


def _completed(record: SqcbRecord, now: pd.Timestamp, window_days: int) -> bool:
    # Status compared case-insensitively here
    return (
        record.disposition_key in RMA_DISPOSITIONS
        and all((record.rma_no, record.po_no, record.obd_no))
        and status_matches(record.status, 'closed')
    )


class SqcbClassifier:
    """Classifier for SQCB records based on disposition workflow rules."""

    # Category names
    NEW_COMING_NCM = 'New Coming NCM'
    PENDING_INFORM = 'Pending Inform'
    WAITING_RMA = 'Waiting RMA'
    RECEIVED_RMA_WAITING_PO = 'Received RMA Waiting PO'
    WAITING_RTV = 'Waiting RTV'
    SUPPLIER_REJECT = 'Supplier Reject'
    NEW_SQCB = 'New SQCB'
    FEEDBACK = 'Feedback'
    RECEIVED_RMA = 'Received RMA'
    COMPLETED = 'Completed'

    # Summary report tabs first, then overview tiles
    RULES = (
        CategoryRule(NEW_COMING_NCM, _new_coming_ncm, 'modified_date', DETAIL_MODIFIED,
                     'WAITING FEEDBACK, modified within the target window'),
        CategoryRule(PENDING_INFORM, _pending_inform, 'modified_date', DETAIL_MODIFIED,
                     'WAITING FEEDBACK, not modified within the target window'),
        CategoryRule(WAITING_RMA, _waiting_rma, 'hd_incharge', DETAIL_RMA_NO,
                     'FEEDBACK without an RMA number'),
        CategoryRule(RECEIVED_RMA_WAITING_PO, _received_rma_waiting_po, 'hd_incharge', DETAIL_RMA_NO,
                     'SCRAP SUPPLIER with an RMA number, status Open or Pending'),
        CategoryRule(WAITING_RTV, _waiting_rtv, 'hd_incharge', DETAIL_RMA_NO,
                     'RETURN TO SUPPLIER with an RMA number'),
        CategoryRule(SUPPLIER_REJECT, _supplier_reject, 'hd_incharge', None,
                     'SUPPLIER REJECT'),
        CategoryRule(NEW_SQCB, _new_sqcb, 'modified_date', DETAIL_MODIFIED,
                     'WAITING FEEDBACK'),
        CategoryRule(FEEDBACK, _feedback, 'hd_incharge', DETAIL_RMA_NO,
                     'FEEDBACK'),
        CategoryRule(RECEIVED_RMA, _received_rma, 'hd_incharge', DETAIL_RMA_NO,
                     'SCRAP / RETURN TO SUPPLIER with RMA, no PO and no OBD'),
        CategoryRule(COMPLETED, _completed, 'hd_incharge', DETAIL_RMA_NO,
                     'SCRAP / RETURN TO SUPPLIER with RMA, PO and OBD, status closed'),
    )

    # Bar chart of open work on the overview page
    DEFECT_QUANTITY = (NEW_SQCB, WAITING_RMA, RECEIVED_RMA)

    def __init__(self, window_days: Optional[int] = None):
        """
        Initialize the classifier.

        Args:
            window_days: Target window in calendar days
                (default: settings.SQCB_TARGET_WINDOW_DAYS)
        """
        self.window_days = settings.SQCB_TARGET_WINDOW_DAYS if window_days is None else window_days
        self.transformer = SqcbTransformer()
        self.logger = logging.getLogger(f'{__name__}.{self.__class__.__name__}')
        self._rules: Dict[str, CategoryRule] = {rule.name: rule for rule in self.RULES}

    @property
    def category_names(self) -> List[str]:
        return [rule.name for rule in self.RULES]

    def get_rule(self, name: str) -> CategoryRule:
        """
        Look up a category rule by name.

        Raises:
            KeyError: If no category has that name
        """
        try:
            return self._rules[name]
        except KeyError:
            raise KeyError(f'Unknown category: {name!r}') from None

    def categorize(self, record: SqcbRecord, now: Any = None) -> List[str]:
        """
        Return the names of every category a record falls into.

        Args:
            record: Record to classify
            now: Evaluation time (default: current time)

        Returns:
            Category names in rule order, possibly empty
        """
        now_ts = resolve_now(now)
        return [rule.name for rule in self.RULES if rule.predicate(record, now_ts, self.window_days)]

    def select(self, records: Iterable[SqcbRecord], name: str, now: Any = None) -> List[SqcbRecord]:
        """Records matching one category, input order."""
        rule = self.get_rule(name)
        now_ts = resolve_now(now)
        return [record for record in records if rule.predicate(record, now_ts, self.window_days)]

    def classify(
        self,
        records: Iterable[Any],
        now: Any = None,
        site: str = ALL_SITES,
        search: Optional[str] = None,
    ) -> AggregateResult:
        """
        Classify a record set into every dashboard category.

        Args:
            records: SqcbRecord instances or raw API dicts
            now: Evaluation time; naive values are read as UTC
                (default: current time)
            site: Plant site filter applied first ('all' for none)
            search: Free-text filter applied after the site filter

        Returns:
            AggregateResult with one CategoryResult per rule plus the
            overview widgets
        """
        now_ts = resolve_now(now)
        filtered = apply_filters(self.transformer.transform(records), site, search)

        categories: Dict[str, CategoryResult] = {}
        for rule in self.RULES:
            matched = [record for record in filtered if rule.predicate(record, now_ts, self.window_days)]
            categories[rule.name] = CategoryResult(
                name=rule.name,
                count=len(matched),
                records=matched,
                chart_series=GROUPINGS[rule.grouping](matched),
                table_rows=project_table_rows(matched, rule.detail_column),
            )

        overview = {name: result.count for name, result in categories.items()}
        self.logger.debug(f'Classified {len(filtered)} records at {now_ts.isoformat()}: {overview}')

        return AggregateResult(
            evaluated_at=now_ts.to_pydatetime(),
            total_records=len(filtered),
            categories=categories,
            overview=overview,
            feedback_date_series=group_by_feedback_date(filtered),
            status_series=status_breakdown(filtered),
            defect_quantity_series=[
                ChartPoint(key=name, value=overview[name]) for name in self.DEFECT_QUANTITY
            ],
        )


def classify(
    records: Iterable[Any],
    now: Any = None,
    site: str = ALL_SITES,
    search: Optional[str] = None,
) -> AggregateResult:
    """Classify records with the default classifier settings."""
    return SqcbClassifier().classify(records, now=now, site=site, search=search)
