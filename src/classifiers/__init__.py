"""SQCB classification and aggregation."""

from .predicates import is_rma_no_null, is_within_n_days
from .filters import PLANT_SITES, apply_filters, filter_by_plant, filter_by_search
from .sqcb_classifier import CategoryRule, SqcbClassifier, classify

__all__ = [
    'is_rma_no_null',
    'is_within_n_days',
    'PLANT_SITES',
    'apply_filters',
    'filter_by_plant',
    'filter_by_search',
    'CategoryRule',
    'SqcbClassifier',
    'classify',
]
