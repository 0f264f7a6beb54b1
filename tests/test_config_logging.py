"""
Tests for Configuration & Logging
=================================
Environment configuration, the error taxonomy and structured logging.
"""

import json
import logging

import pytest

from writing_assessment.config_logging import (
    DEFAULT_PROOF_ENDPOINT,
    EngineConfig,
    JsonFormatter,
    ProofingUpstreamError,
    StructuredLogger,
    ValidationError,
    get_config,
    get_logger,
    reset_config,
    validate_endpoint,
    validate_language,
)


class TestEngineConfig:
    """Tests for EngineConfig"""

    def test_defaults(self):
        config = EngineConfig.from_env()
        assert config.proof_endpoint == DEFAULT_PROOF_ENDPOINT
        assert config.proof_language == "en-GB"
        assert config.proof_timeout == 10.0
        assert config.debounce_ms == 600
        assert config.proof_enabled
        assert config.dictionary_path is None
        assert config.validate() == (True, [])

    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv('WA_PROOF_ENDPOINT', 'http://localhost:8081/v2/check')
        monkeypatch.setenv('WA_PROOF_LANGUAGE', 'en-US')
        monkeypatch.setenv('WA_PROOF_TIMEOUT', '2.5')
        monkeypatch.setenv('WA_PROOF_ENABLED', 'no')
        monkeypatch.setenv('WA_DEBOUNCE_MS', '250')
        monkeypatch.setenv('WA_DICTIONARY', str(tmp_path / 'words.txt'))
        monkeypatch.setenv('WA_LOG_FORMAT', 'json')

        config = EngineConfig.from_env()
        assert config.proof_endpoint == 'http://localhost:8081/v2/check'
        assert config.proof_language == 'en-US'
        assert config.proof_timeout == 2.5
        assert not config.proof_enabled
        assert config.debounce_ms == 250
        assert config.dictionary_path == tmp_path / 'words.txt'
        assert config.log_format == 'json'

    def test_unparseable_number_keeps_default(self, monkeypatch):
        monkeypatch.setenv('WA_PROOF_TIMEOUT', 'soon')
        assert EngineConfig.from_env().proof_timeout == 10.0

    def test_validate_errors(self):
        config = EngineConfig(proof_endpoint='localhost:8081', proof_language='fr-FR',
                              proof_timeout=0, debounce_ms=-1, log_format='xml')
        is_valid, errors = config.validate()
        assert not is_valid
        assert len(errors) == 5

    def test_global_config(self, monkeypatch):
        first = get_config()
        assert get_config() is first
        monkeypatch.setenv('WA_PROOF_LANGUAGE', 'en-AU')
        reset_config()
        assert get_config().proof_language == 'en-AU'


class TestValidators:
    """Tests for endpoint and language validation"""

    @pytest.mark.parametrize("endpoint", [
        "https://api.languagetool.org/v2/check",
        "http://127.0.0.1:8081/v2/check",
    ])
    def test_valid_endpoints(self, endpoint):
        assert validate_endpoint(endpoint) is None

    @pytest.mark.parametrize("endpoint", ["", "   ", "localhost:8081", "ftp://x/y", None])
    def test_invalid_endpoints(self, endpoint):
        assert validate_endpoint(endpoint)

    def test_languages(self):
        assert validate_language("en-GB") is None
        assert "Unsupported language" in validate_language("de-DE")


class TestErrors:
    """Tests for the error taxonomy"""

    def test_validation_error(self):
        error = ValidationError("Bad text", field='text')
        assert error.status_code == 400
        assert error.to_dict() == {
            'success': False,
            'error': {'code': 'VALIDATION_ERROR', 'message': 'Bad text',
                      'details': {'field': 'text'}},
        }

    def test_upstream_error(self):
        error = ProofingUpstreamError(429)
        assert error.upstream_status == 429
        assert error.status_code == 429
        assert error.message == "Proofing service returned HTTP 429"


class TestStructuredLogging:
    """Tests for StructuredLogger and JsonFormatter"""

    def test_json_payload(self, caplog):
        logger = StructuredLogger('wa.test.json', EngineConfig(log_format='json',
                                                                log_level='DEBUG',
                                                                log_to_console=False))
        with caplog.at_level(logging.DEBUG, logger='wa.test.json'):
            logger.info("Task evaluated", task_id='t1')
        record = json.loads(caplog.records[-1].getMessage())
        assert record['message'] == "Task evaluated"
        assert record['task_id'] == 't1'
        assert record['level'] == 'INFO'

    def test_level_filtering(self, caplog):
        logger = StructuredLogger('wa.test.level', EngineConfig(log_level='WARNING',
                                                                 log_to_console=False))
        logger.info("hidden")
        logger.warning("shown")
        messages = [r.getMessage() for r in caplog.records if r.name == 'wa.test.level']
        assert messages == ["shown"]

    def test_log_operation_reraises(self):
        logger = StructuredLogger('wa.test.op', EngineConfig(log_to_console=False))
        with pytest.raises(ValueError):
            with logger.log_operation('parse', task_id='t1'):
                raise ValueError("bad")

    def test_correlation_id(self):
        correlation_id = StructuredLogger.new_correlation_id()
        assert StructuredLogger.get_correlation_id() == correlation_id

    def test_json_formatter_context(self):
        record = logging.LogRecord('wa', logging.INFO, __file__, 1, "plain", None, None)
        record.context = {'task_id': 't2'}
        data = json.loads(JsonFormatter().format(record))
        assert data['message'] == "plain"
        assert data['task_id'] == 't2'

    def test_get_logger_cached(self):
        assert get_logger('wa.test.cache') is get_logger('wa.test.cache')
