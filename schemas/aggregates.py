"""
Dashboard aggregate schemas.

These schemas define the output of the SQCB classifier: per-category counts,
record subsets, chart series and table rows, plus the overview widgets.
"""

from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from .sqcb import SqcbRecord


class ChartPoint(BaseModel):
    """One bar/slice/point of a chart series."""

    key: str = Field(description="Group key (date, handler name or label)")
    value: int = Field(description="Number of records in the group")


class TableRow(BaseModel):
    """
    Flattened table row for a category.

    Exactly one of modified / rma_no is filled, depending on the category;
    neither is filled for Supplier Reject.
    """

    model_config = {'populate_by_name': True}

    id: str = Field(default='', alias='ID', description="SQCB ID")
    disposition: str = Field(default='', alias='DISPOSITION', description="Disposition as entered")
    modified: Optional[str] = Field(default=None, alias='MODIFIED', description="Last modification timestamp")
    rma_no: Optional[str] = Field(default=None, alias='RMA_NO', description="RMA number")
    supplier: str = Field(default='', alias='SUPPLIER', description="Supplier name")
    comment: str = Field(default='', alias='COMMENT', description="Comment")

    def to_columns(self) -> Dict[str, str]:
        """Row keyed by its display headers, detail column only when set."""
        return self.model_dump(by_alias=True, exclude_none=True)


class CategoryResult(BaseModel):
    """Records matching one category and their chart/table projections."""

    name: str = Field(description="Category display name")
    count: int = Field(description="Number of matching records")
    records: List[SqcbRecord] = Field(default_factory=list, description="Matching records, input order")
    chart_series: List[ChartPoint] = Field(default_factory=list, description="Grouped counts, first-seen key order")
    table_rows: List[TableRow] = Field(default_factory=list, description="Flattened rows, input order")


class AggregateResult(BaseModel):
    """
    Complete classifier output for one evaluation.

    Indexable by category name: result['Waiting RMA'].count
    """

    evaluated_at: datetime = Field(description="Evaluation time (UTC)")
    total_records: int = Field(description="Records after site/search filtering")
    categories: Dict[str, CategoryResult] = Field(default_factory=dict, description="Results by category name")
    overview: Dict[str, int] = Field(default_factory=dict, description="Counter per category name")
    feedback_date_series: List[ChartPoint] = Field(default_factory=list, description="Counts by raw feedback_date")
    status_series: List[ChartPoint] = Field(default_factory=list, description="Open / Closed counts")
    defect_quantity_series: List[ChartPoint] = Field(default_factory=list, description="New SQCB / Waiting RMA / Received RMA counts")

    def __getitem__(self, name: str) -> CategoryResult:
        return self.categories[name]

    def __contains__(self, name: object) -> bool:
        return name in self.categories

    def category_names(self) -> List[str]:
        return list(self.categories)
