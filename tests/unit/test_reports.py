"""Unit tests for the report CLI, record sources and formatters."""
import json
import logging
from unittest.mock import patch

import pytest

from conftest import NOW
from src.classifiers import SqcbClassifier
from src.config.settings import Settings
from src.connectors.sqcb_api_connector import SqcbApiConnector, SqcbApiError
from src.reports import cli
from src.reports.formatters import format_category, format_overview
from src.reports.sources import RecordSourceError, load_records_from_api, load_records_from_file


@pytest.fixture(autouse=True)
def reset_logging():
    """CLI runs attach handlers to the 'src' logger; drop them between tests."""
    yield
    logging.getLogger('src').handlers.clear()


@pytest.fixture
def records_file(tmp_path, sample_records):
    path = tmp_path / 'sqcb.json'
    path.write_text(json.dumps({'data': sample_records}), encoding='utf-8')
    return path


class TestRecordSources:
    """Test loading records from files and the API."""

    def test_load_envelope_file(self, records_file, sample_records):
        assert load_records_from_file(records_file) == sample_records

    def test_load_list_file(self, tmp_path):
        path = tmp_path / 'list.json'
        path.write_text('[{"sqcb_id": 1}]', encoding='utf-8')
        assert load_records_from_file(path) == [{'sqcb_id': 1}]

    def test_missing_file(self, tmp_path):
        with pytest.raises(RecordSourceError) as exc_info:
            load_records_from_file(tmp_path / 'missing.json')
        assert exc_info.value.path == tmp_path / 'missing.json'

    def test_invalid_json(self, tmp_path):
        path = tmp_path / 'bad.json'
        path.write_text('{not json', encoding='utf-8')
        with pytest.raises(RecordSourceError):
            load_records_from_file(path)

    def test_load_from_api_closes_connector(self, mock_session):
        api = SqcbApiConnector(base_url='https://sqcb.example.com', api_token='')
        api.session = mock_session
        mock_session.get.return_value.json.return_value = [{'sqcb_id': 1}]

        assert load_records_from_api(api) == [{'sqcb_id': 1}]
        mock_session.close.assert_called_once()


class TestFormatters:
    """Test console output."""

    def test_overview(self, sample_records):
        result = SqcbClassifier().classify(sample_records, now=NOW)
        text = format_overview(result, site='all')
        assert 'SQCB SUMMARY REPORT' in text
        assert '2025-03-10 12:00 UTC' in text
        assert 'Received RMA Waiting PO' in text
        assert 'Records: 8' in text

    def test_category_table(self, sample_records):
        result = SqcbClassifier().classify(sample_records, now=NOW)
        text = format_category(result, 'Waiting RMA')
        assert 'WAITING RMA (1)' in text
        assert 'Jane Doe' in text
        assert 'RMA_NO' in text

    def test_empty_category(self):
        result = SqcbClassifier().classify([], now=NOW)
        assert 'No records.' in format_category(result, 'Completed')


class TestCli:
    """Test the command-line entry point."""

    def test_json_output(self, records_file, capsys):
        code = cli.main(['--input', str(records_file), '--now', '2025-03-10T12:00:00Z', '--format', 'json'])
        assert code == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload['total_records'] == 8
        assert payload['overview']['New Coming NCM'] == 1
        assert payload['overview']['Pending Inform'] == 1

    def test_site_filter(self, records_file, capsys):
        code = cli.main(['-i', str(records_file), '--now', '2025-03-10T12:00:00Z', '-f', 'json', '--site', 'York'])
        assert code == 0
        assert json.loads(capsys.readouterr().out)['total_records'] == 1

    def test_category_json(self, records_file, capsys):
        code = cli.main([
            '-i', str(records_file), '--now', '2025-03-10T12:00:00Z', '-f', 'json', '-c', 'Supplier Reject',
        ])
        assert code == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload['name'] == 'Supplier Reject'
        assert payload['count'] == 1

    def test_text_output(self, records_file, capsys):
        assert cli.main(['-i', str(records_file), '--now', '2025-03-10T12:00:00Z']) == 0
        assert 'SQCB SUMMARY REPORT' in capsys.readouterr().out

    def test_missing_file_exits_1(self, tmp_path):
        assert cli.main(['-i', str(tmp_path / 'nope.json')]) == 1

    def test_invalid_now_exits_1(self, records_file):
        assert cli.main(['-i', str(records_file), '--now', 'not-a-time']) == 1

    def test_unknown_category_exits_1(self, records_file):
        assert cli.main(['-i', str(records_file), '-c', 'Nope']) == 1

    def test_api_error_exits_1(self):
        with patch.object(cli, 'load_records_from_api', side_effect=SqcbApiError('down', endpoint='/sqcb')):
            assert cli.main([]) == 1

    def test_fetches_from_api_without_input(self, sample_records, capsys):
        with patch.object(cli, 'load_records_from_api', return_value=sample_records) as fetch:
            assert cli.main(['--now', '2025-03-10T12:00:00Z', '-f', 'json']) == 0
        fetch.assert_called_once()
        assert json.loads(capsys.readouterr().out)['overview']['Completed'] == 1

    def test_missing_base_url_exits_1(self, monkeypatch):
        monkeypatch.setattr(Settings, 'SQCB_API_BASE_URL', '')
        with patch.object(cli, 'load_records_from_api') as fetch:
            assert cli.main([]) == 1
        fetch.assert_not_called()

    def test_validate_required_settings(self, monkeypatch):
        monkeypatch.setattr(Settings, 'SQCB_API_BASE_URL', 'https://sqcb.example.com')
        assert Settings.validate_required_settings() == []
        monkeypatch.setattr(Settings, 'SQCB_API_BASE_URL', '')
        assert Settings.validate_required_settings() == ['SQCB_API_BASE_URL']
