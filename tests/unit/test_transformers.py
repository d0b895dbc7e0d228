"""Unit tests for the SQCB ingestion boundary."""
import pytest
from pydantic import BaseModel, ValidationError

from schemas import AggregateResult, CategoryResult, SqcbRecord, TableRow
from src.transformers.sqcb_transformer import SqcbTransformer, unwrap_payload


class TestSqcbTransformer:
    """Test SQCB transformer."""

    def test_transformer_initialization(self):
        """Test transformer initialization."""
        transformer = SqcbTransformer()
        assert transformer.name == 'sqcb'

    def test_transform_record(self):
        """Test transforming a single record."""
        transformer = SqcbTransformer()
        raw_data = [
            {
                'sqcb_id': 123,
                'sqcb': 'SQCB-0123',
                'plant_id': 3047.0,
                'disposition': 'FEEDBACK',
                'rma_no': None,
            }
        ]
        transformed = transformer.transform(raw_data)
        assert len(transformed) == 1
        record = transformed[0]
        assert isinstance(record, SqcbRecord)
        assert record.sqcb_id == '123'
        assert record.plant_id == '3047'
        assert record.rma_no is None
        assert record.parts == []

    def test_literal_null_rma_is_kept(self):
        record = SqcbTransformer().transform([{'rma_no': 'null'}])[0]
        assert record.rma_no == 'null'

    def test_unknown_fields_kept_as_extras(self):
        record = SqcbTransformer().transform([{'sqcb_id': 1, 'tracking_ref': 'TRK-1'}])[0]
        assert record.field_values()['tracking_ref'] == 'TRK-1'

    def test_nested_parts(self):
        raw = {
            'sqcb_id': 1,
            'parts': [
                {'item_number': 1, 'part_number': 4455, 'part_name': 'Bracket', 'qty': '3'},
                'junk',
                {'part_number': 'PN-2', 'qty': 'many', 'pictures': [{'id': 9, 'picture_name': 'a.jpg'}]},
            ],
            'attachments': [{'attachment_id': 5, 'attachment_name': 'report.pdf'}],
            'pictures': None,
        }
        record = SqcbTransformer().transform([raw])[0]
        assert [p.part_number for p in record.parts] == ['4455', 'PN-2']
        assert record.parts[0].item_number == '1'
        assert record.parts[0].qty == 3.0
        assert record.parts[1].qty == 'many'
        assert record.parts[1].pictures[0].id == '9'
        assert record.attachments[0].attachment_id == '5'
        assert record.pictures == []

    def test_skips_non_dict_entries(self):
        transformed = SqcbTransformer().transform([None, 'text', 42, {'sqcb_id': 1}])
        assert [r.sqcb_id for r in transformed] == ['1']

    def test_passes_through_records(self):
        record = SqcbRecord(sqcb_id='1')
        assert SqcbTransformer().transform([record])[0] is record

    def test_records_are_immutable(self):
        record = SqcbTransformer().transform([{'disposition': 'FEEDBACK'}])[0]
        with pytest.raises(ValidationError):
            record.disposition = 'SCRAP SUPPLIER'

    def test_input_not_mutated(self):
        raw = {'sqcb_id': 7, 'plant_id': 1001}
        SqcbTransformer().transform([raw])
        assert raw == {'sqcb_id': 7, 'plant_id': 1001}

    def test_validate_transformation(self):
        transformer = SqcbTransformer()
        assert transformer.validate_transformation(transformer.transform([{'sqcb_id': 1}, {'sqcb': 'X'}]))
        assert transformer.validate_transformation(transformer.transform([{'disposition': 'FEEDBACK'}])) is False


class TestUnwrapPayload:
    """Test list endpoint payload handling."""

    def test_bare_list(self):
        assert unwrap_payload([{'sqcb_id': 1}]) == [{'sqcb_id': 1}]

    def test_data_envelope(self):
        assert unwrap_payload({'data': [{'sqcb_id': 1}]}) == [{'sqcb_id': 1}]

    @pytest.mark.parametrize('payload', [None, {}, {'data': None}, {'error': 'x'}, 'text'])
    def test_other_shapes(self, payload):
        assert unwrap_payload(payload) == []


class TestSchemaDefinitions:
    """Test that schema definitions are valid Pydantic models."""

    @pytest.mark.parametrize('schema', [SqcbRecord, TableRow, CategoryResult, AggregateResult])
    def test_schema_is_pydantic_model(self, schema):
        assert issubclass(schema, BaseModel)

    def test_table_row_accepts_headers(self):
        row = TableRow.model_validate({'ID': '1', 'DISPOSITION': 'FEEDBACK', 'RMA_NO': 'R1'})
        assert row.id == '1'
        assert row.to_columns()['RMA_NO'] == 'R1'
