"""Pytest configuration and fixtures."""
import pytest
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List
from unittest.mock import MagicMock

# Frozen evaluation time shared by the classifier tests
NOW = datetime(2025, 3, 10, 12, 0, 0, tzinfo=timezone.utc)


def days_ago(days: float) -> str:
    """ISO timestamp `days` before NOW."""
    return (NOW - timedelta(days=days)).isoformat()


@pytest.fixture
def now() -> datetime:
    """Frozen evaluation time."""
    return NOW


@pytest.fixture
def make_record() -> Callable[..., Dict[str, Any]]:
    """Factory for raw API records with sensible defaults."""
    counter = {'next_id': 1}

    def _make(**fields: Any) -> Dict[str, Any]:
        record = {
            'sqcb_id': counter['next_id'],
            'sqcb': f'SQCB-{counter["next_id"]:04d}',
            'status': 'Open',
            'disposition': 'WAITING FEEDBACK',
            'plant_id': 3047,
            'hd_incharge': 'Somchai Jaidee',
            'supplier_code': 'S100',
            'supplier_name': 'ACME Components',
            'rma_no': None,
            'po_no': None,
            'obd_no': None,
            'modified': days_ago(1),
            'feedback_date': '2025-03-01',
            'comments': '',
            'parts': [],
        }
        counter['next_id'] += 1
        record.update(fields)
        return record

    return _make


@pytest.fixture
def sample_records(make_record) -> List[Dict[str, Any]]:
    """A small mixed record set covering every category."""
    return [
        make_record(disposition='Waiting Feedback', modified=days_ago(2), plant_id=1001),
        make_record(disposition='WAITING FEEDBACK', modified=days_ago(10)),
        make_record(disposition='FEEDBACK', rma_no=None, hd_incharge='Jane Doe'),
        make_record(disposition='SCRAP SUPPLIER', rma_no='RMA1', status='Open'),
        make_record(disposition='RETURN TO SUPPLIER', rma_no='RMA2', status='Pending', plant_id='1003'),
        make_record(disposition='supplier reject', hd_incharge=None),
        make_record(
            disposition='Scrap Supplier', rma_no='RMA3', po_no='PO3', obd_no='OBD3', status='CLOSED',
            feedback_date='2025-03-02',
        ),
        make_record(disposition='CANCEL', status='Closed', feedback_date=None),
    ]


@pytest.fixture
def mock_session():
    """Mock requests session returning a JSON payload."""
    session = MagicMock()
    response = MagicMock()
    response.status_code = 200
    response.raise_for_status.return_value = None
    response.json.return_value = []
    session.get.return_value = response
    return session
