"""
SQCB (Supplier Quality Chargeback) record schemas.

These schemas define the ingestion boundary for records returned by the
SQCB REST API ("list SQCB records"). Every field is optional: the API and
the dashboard forms both leave fields blank, and classification treats a
missing value as "no match" rather than an error.

Source: GET {SQCB_API_BASE_URL}/sqcb
"""

from typing import Any, List, Optional, Union
from pydantic import BaseModel, Field, field_validator

from src.utils.normalization import to_text


def _dict_items(value: Any) -> List[dict]:
    """Keep only the dict entries of a list-valued field."""
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, dict)]


class SqcbPicture(BaseModel):
    """Picture attached to a part row."""

    model_config = {'extra': 'allow', 'frozen': True}

    id: Optional[str] = Field(default=None, description="Picture ID")
    picture_name: Optional[str] = Field(default=None, description="Original file name")
    picture_address: Optional[str] = Field(default=None, description="Public URL of the picture")

    @field_validator('id', 'picture_name', 'picture_address', mode='before')
    @classmethod
    def _coerce_text(cls, value: Any) -> Optional[str]:
        return to_text(value)


class SqcbAttachment(BaseModel):
    """File attached to an SQCB record."""

    model_config = {'extra': 'allow', 'frozen': True}

    attachment_id: Optional[str] = Field(default=None, description="Attachment ID")
    attachment_name: Optional[str] = Field(default=None, description="Original file name")
    attachment_address: Optional[str] = Field(default=None, description="Public URL of the file")

    @field_validator('attachment_id', 'attachment_name', 'attachment_address', mode='before')
    @classmethod
    def _coerce_text(cls, value: Any) -> Optional[str]:
        return to_text(value)


class SqcbPart(BaseModel):
    """
    Part line of an SQCB record.

    Parts are carried through untouched; they take no part in classification.
    """

    model_config = {'extra': 'allow', 'frozen': True}

    item_number: Optional[str] = Field(default=None, description="1-based line number")
    part_number: Optional[str] = Field(default=None, description="Part number")
    part_name: Optional[str] = Field(default=None, description="Part description")
    notification_number: Optional[str] = Field(default=None, description="QM notification number")
    qty: Optional[Union[float, str]] = Field(default=None, description="Rejected quantity; free text kept as entered")
    pictures: List[SqcbPicture] = Field(default_factory=list, description="Part pictures")

    @field_validator('item_number', 'part_number', 'part_name', 'notification_number', mode='before')
    @classmethod
    def _coerce_text(cls, value: Any) -> Optional[str]:
        return to_text(value)

    @field_validator('qty', mode='before')
    @classmethod
    def _coerce_qty(cls, value: Any) -> Optional[Union[float, str]]:
        if value is None:
            return None
        if isinstance(value, bool):
            return to_text(value)
        try:
            return float(value)
        except (TypeError, ValueError):
            return to_text(value)

    @field_validator('pictures', mode='before')
    @classmethod
    def _coerce_pictures(cls, value: Any) -> List[dict]:
        return _dict_items(value)


# Scalar fields coerced to text at ingestion
TEXT_FIELDS = (
    'sqcb_id', 'sqcb', 'status', 'disposition',
    'plant_id', 'hd_incharge', 'supplier_code', 'supplier_name',
    'rma_no', 'po_no', 'obd_no', 'second_po_no', 'second_obd_no', 'rqmr_no',
    'modified', 'feedback_date', 'target_date', 'qm10_complete_date', 'dn_issued_date',
    'return_type', 'sqcb_amount', 'scrap_week', 'comments',
)


class SqcbRecord(BaseModel):
    """
    SQCB record schema.

    Records: one per supplier chargeback
    Source: SQCB REST API list endpoint
    Purpose: Input to the dashboard classifier (src.classifiers).

    Note: identifiers and numbers arrive from the API as JSON numbers or
    strings; they are stored as text. Keys the API adds beyond these fields
    are kept as extras so free-text search still sees them.
    """

    model_config = {'extra': 'allow', 'frozen': True, 'populate_by_name': True}

    # Identification
    sqcb_id: Optional[str] = Field(default=None, description="Primary key")
    sqcb: Optional[str] = Field(default=None, description="SQCB title / document number")

    # Workflow
    status: Optional[str] = Field(default=None, description="Open, Closed or Pending")
    disposition: Optional[str] = Field(default=None, description="WAITING FEEDBACK, FEEDBACK, WAIT RMA, SCRAP SUPPLIER, RETURN TO SUPPLIER, SUPPLIER REJECT, CANCEL")

    # Ownership
    plant_id: Optional[str] = Field(default=None, description="Plant code (3047, 1001, ...)")
    hd_incharge: Optional[str] = Field(default=None, description="Assigned help-desk handler full name")
    supplier_code: Optional[str] = Field(default=None, description="Supplier code")
    supplier_name: Optional[str] = Field(default=None, description="Supplier name")

    # Completion signals
    rma_no: Optional[str] = Field(default=None, description="Return Merchandise Authorization number")
    po_no: Optional[str] = Field(default=None, description="Purchase order number")
    obd_no: Optional[str] = Field(default=None, description="Outbound delivery number")
    second_po_no: Optional[str] = Field(default=None, description="Second purchase order number")
    second_obd_no: Optional[str] = Field(default=None, description="Second outbound delivery number")
    rqmr_no: Optional[str] = Field(default=None, description="RQMR number")

    # Dates
    modified: Optional[str] = Field(default=None, description="Last modification timestamp")
    feedback_date: Optional[str] = Field(default=None, description="Supplier feedback date")
    target_date: Optional[str] = Field(default=None, description="Target date (feedback + 6 days)")
    qm10_complete_date: Optional[str] = Field(default=None, description="QM10 completion date")
    dn_issued_date: Optional[str] = Field(default=None, description="Debit note issue date")

    # Descriptive
    return_type: Optional[str] = Field(default=None, description="Return type")
    sqcb_amount: Optional[str] = Field(default=None, description="Chargeback amount")
    scrap_week: Optional[str] = Field(default=None, description="Scrap week")
    comments: Optional[str] = Field(default=None, description="Free-text comment")

    # Nested
    parts: List[SqcbPart] = Field(default_factory=list, description="Part lines, in order")
    attachments: List[SqcbAttachment] = Field(default_factory=list, description="Record attachments")
    pictures: List[SqcbPicture] = Field(default_factory=list, description="Record pictures")

    @field_validator(*TEXT_FIELDS, mode='before')
    @classmethod
    def _coerce_text(cls, value: Any) -> Optional[str]:
        return to_text(value)

    @field_validator('parts', 'attachments', 'pictures', mode='before')
    @classmethod
    def _coerce_nested(cls, value: Any) -> List[dict]:
        return _dict_items(value)

    @property
    def disposition_key(self) -> str:
        """Lower-cased disposition, '' when absent."""
        return (self.disposition or '').lower()

    def field_values(self) -> dict:
        """All field values, extras included, as plain Python data."""
        return self.model_dump()
