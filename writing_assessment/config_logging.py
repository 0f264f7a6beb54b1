#!/usr/bin/env python3
"""
Writing Assessment Configuration & Logging Module
=================================================
Centralized configuration, structured logging, and the error taxonomy
shared by the assessment engine, the proofing adapter and the HTTP/CLI
front ends.
"""

import os
import sys
import json
import logging
import uuid
import time
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List, Tuple
from pathlib import Path
from dataclasses import dataclass, field
from contextlib import contextmanager
from urllib.parse import urlparse
import threading

# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================
DEFAULT_PROOF_ENDPOINT = "https://api.languagetool.org/v2/check"
DEFAULT_PROOF_LANGUAGE = "en-GB"
DEFAULT_PROOF_TIMEOUT = 10.0        # seconds
DEFAULT_DEBOUNCE_MS = 600           # quiet period before live proofing fires
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 5

SUPPORTED_LANGUAGES = ("en-GB", "en-US", "en-AU", "en-CA", "en-NZ", "en-ZA")

__version__ = "1.2.0"
APP_NAME = "WritingAssessment"

_bootstrap_logger = logging.getLogger(APP_NAME)


# =============================================================================
# ERROR HANDLING
# =============================================================================

class WritingAssessmentError(Exception):
    """Base exception for the writing assessment engine."""

    def __init__(self, message: str, code: str = "UNKNOWN_ERROR",
                 status_code: int = 500, details: Optional[Dict] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to API response dict."""
        return {
            'success': False,
            'error': {
                'code': self.code,
                'message': self.message,
                'details': self.details
            }
        }


class ValidationError(WritingAssessmentError):
    """Caller input rejected at a boundary (HTTP body, CLI args, catalog)."""
    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        super().__init__(message, code="VALIDATION_ERROR", status_code=400,
                         details={'field': field, **kwargs})


class ConfigurationError(WritingAssessmentError):
    """Invalid endpoint or unsupported language for the proofing service."""
    def __init__(self, message: str, setting: Optional[str] = None, **kwargs):
        super().__init__(message, code="CONFIGURATION_ERROR", status_code=500,
                         details={'setting': setting, **kwargs})


class ProofingUnavailableError(WritingAssessmentError):
    """Proofing service could not be reached."""
    def __init__(self, message: str = "Proofing service unavailable", **kwargs):
        super().__init__(message, code="PROOFING_UNAVAILABLE", status_code=503,
                         details=kwargs)


class ProofingUpstreamError(WritingAssessmentError):
    """Proofing service answered with a non-success status."""
    def __init__(self, upstream_status: int, message: str = "", **kwargs):
        super().__init__(
            message or f"Proofing service returned HTTP {upstream_status}",
            code="UPSTREAM_ERROR",
            status_code=upstream_status,
            details={'upstream_status': upstream_status, **kwargs}
        )
        self.upstream_status = upstream_status


class MalformedProofResponseError(WritingAssessmentError):
    """Proofing service payload did not have the expected shape."""
    def __init__(self, message: str = "Malformed proofing response", **kwargs):
        super().__init__(message, code="MALFORMED_RESPONSE", status_code=502,
                         details=kwargs)


# =============================================================================
# ENVIRONMENT CONFIGURATION
# =============================================================================

def _parse_bool(value: str) -> bool:
    """Parse boolean from string."""
    return value.strip().lower() in ('true', '1', 'yes', 'on')


def _env_number(name: str, default, converter):
    """Read a numeric env var, keeping the default when it does not parse."""
    raw = os.environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return converter(raw)
    except ValueError:
        _bootstrap_logger.warning(f"Invalid env var {name}={raw!r}, using {default}")
        return default


def validate_endpoint(endpoint: str) -> Optional[str]:
    """Return an error message when the endpoint is not an absolute http(s) URL."""
    if not isinstance(endpoint, str) or not endpoint.strip():
        return "Proofing endpoint must be a non-empty URL"
    parsed = urlparse(endpoint.strip())
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        return f"Proofing endpoint must be an absolute http(s) URL: {endpoint!r}"
    return None


def validate_language(language: str) -> Optional[str]:
    """Return an error message when the language code is not supported."""
    if language not in SUPPORTED_LANGUAGES:
        return (f"Unsupported language {language!r}; "
                f"expected one of {', '.join(SUPPORTED_LANGUAGES)}")
    return None


@dataclass
class EngineConfig:
    """Engine configuration with defaults suitable for local use."""

    # Proofing service
    proof_endpoint: str = DEFAULT_PROOF_ENDPOINT
    proof_language: str = DEFAULT_PROOF_LANGUAGE
    proof_timeout: float = DEFAULT_PROOF_TIMEOUT
    proof_enabled: bool = True

    # Live editing
    debounce_ms: int = DEFAULT_DEBOUNCE_MS

    # Static data
    dictionary_path: Optional[Path] = None
    task_catalog_path: Optional[Path] = None

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # Options: json, text
    log_to_file: bool = False
    log_to_console: bool = True
    log_dir: Path = field(default_factory=lambda: Path.cwd() / 'logs')

    @classmethod
    def from_env(cls) -> 'EngineConfig':
        """Load configuration from environment variables."""
        dictionary = os.environ.get('WA_DICTIONARY')
        catalog = os.environ.get('WA_TASK_CATALOG')
        return cls(
            proof_endpoint=os.environ.get('WA_PROOF_ENDPOINT', DEFAULT_PROOF_ENDPOINT),
            proof_language=os.environ.get('WA_PROOF_LANGUAGE', DEFAULT_PROOF_LANGUAGE),
            proof_timeout=_env_number('WA_PROOF_TIMEOUT', DEFAULT_PROOF_TIMEOUT, float),
            proof_enabled=_parse_bool(os.environ.get('WA_PROOF_ENABLED', 'true')),
            debounce_ms=_env_number('WA_DEBOUNCE_MS', DEFAULT_DEBOUNCE_MS, int),
            dictionary_path=Path(dictionary) if dictionary else None,
            task_catalog_path=Path(catalog) if catalog else None,
            log_level=os.environ.get('WA_LOG_LEVEL', 'INFO'),
            log_format=os.environ.get('WA_LOG_FORMAT', 'text'),
            log_to_file=_parse_bool(os.environ.get('WA_LOG_TO_FILE', 'false')),
        )

    def validate(self) -> Tuple[bool, List[str]]:
        """Validate configuration and return (is_valid, errors)."""
        errors = []

        endpoint_error = validate_endpoint(self.proof_endpoint)
        if endpoint_error:
            errors.append(endpoint_error)

        language_error = validate_language(self.proof_language)
        if language_error:
            errors.append(language_error)

        if self.proof_timeout <= 0:
            errors.append("Proofing timeout must be positive")

        if self.debounce_ms < 0:
            errors.append("Debounce period cannot be negative")

        if self.log_format not in ('json', 'text'):
            errors.append(f"Invalid log_format: {self.log_format}. Must be 'json' or 'text'")

        return (len(errors) == 0, errors)


# Global config instance
_config: Optional[EngineConfig] = None


def get_config() -> EngineConfig:
    """Get or create the global configuration."""
    global _config
    if _config is None:
        _config = EngineConfig.from_env()
    return _config


def reset_config():
    """Reset the global configuration (for testing)."""
    global _config
    _config = None


# =============================================================================
# STRUCTURED LOGGING
# =============================================================================

class StructuredLogger:
    """Thread-safe structured logger with correlation IDs."""

    _local = threading.local()

    def __init__(self, name: str, config: Optional[EngineConfig] = None):
        self.name = name
        self.config = config or get_config()
        self._setup_logger()

    def _setup_logger(self):
        """Configure the underlying Python logger."""
        self.logger = logging.getLogger(self.name)
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)
        self.logger.setLevel(level)
        self.logger.handlers.clear()
        self.logger.propagate = True

        if self.config.log_format == 'json':
            formatter = JsonFormatter()
        else:
            formatter = logging.Formatter(
                '%(asctime)s [%(levelname)s] %(name)s - %(message)s'
            )

        if self.config.log_to_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

        if self.config.log_to_file:
            from logging.handlers import RotatingFileHandler
            self.config.log_dir.mkdir(parents=True, exist_ok=True)
            log_file = self.config.log_dir / f"{self.name.lower()}.log"
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_BACKUP_COUNT,
                encoding='utf-8'
            )
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    @classmethod
    def set_correlation_id(cls, correlation_id: str):
        """Set correlation ID for current thread."""
        cls._local.correlation_id = correlation_id

    @classmethod
    def get_correlation_id(cls) -> str:
        """Get correlation ID for current thread."""
        return getattr(cls._local, 'correlation_id', None) or str(uuid.uuid4())[:8]

    @classmethod
    def new_correlation_id(cls) -> str:
        """Generate and set a new correlation ID."""
        correlation_id = str(uuid.uuid4())[:12]
        cls.set_correlation_id(correlation_id)
        return correlation_id

    def _build_log_record(self, level: str, message: str, **kwargs) -> Dict[str, Any]:
        return {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': level,
            'logger': self.name,
            'correlation_id': self.get_correlation_id(),
            'message': message,
            **kwargs
        }

    def _emit(self, level: int, level_name: str, message: str, exc_info: bool = False, **kwargs):
        if not self.logger.isEnabledFor(level):
            return
        if self.config.log_format == 'json':
            record = self._build_log_record(level_name, message, **kwargs)
            if exc_info:
                import traceback
                record['traceback'] = traceback.format_exc()
            payload = json.dumps(record, default=str)
        else:
            payload = message
        self.logger.log(level, payload, exc_info=exc_info, extra={'context': kwargs})

    def debug(self, message: str, **kwargs):
        """Log debug message."""
        self._emit(logging.DEBUG, 'DEBUG', message, **kwargs)

    def info(self, message: str, **kwargs):
        """Log info message."""
        self._emit(logging.INFO, 'INFO', message, **kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message."""
        self._emit(logging.WARNING, 'WARNING', message, **kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs):
        """Log error message with optional exception info."""
        self._emit(logging.ERROR, 'ERROR', message, exc_info=exc_info, **kwargs)

    def exception(self, message: str, **kwargs):
        """Log exception with full traceback."""
        self.error(message, exc_info=True, **kwargs)

    @contextmanager
    def log_operation(self, operation: str, **context):
        """Context manager for logging operation start/end with timing."""
        start_time = time.time()
        self.debug(f"{operation} started", operation=operation, status='started', **context)
        try:
            yield
            duration_ms = (time.time() - start_time) * 1000
            self.debug(f"{operation} completed", operation=operation, status='completed',
                       duration_ms=round(duration_ms, 2), **context)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            self.error(f"{operation} failed: {e}", operation=operation, status='failed',
                       duration_ms=round(duration_ms, 2), exc_info=True, **context)
            raise


class JsonFormatter(logging.Formatter):
    """JSON log formatter."""

    _RESERVED = frozenset((
        'name', 'msg', 'args', 'created', 'filename', 'funcName',
        'levelname', 'levelno', 'lineno', 'module', 'msecs',
        'pathname', 'process', 'processName', 'relativeCreated',
        'stack_info', 'thread', 'threadName', 'exc_info', 'exc_text',
        'message', 'taskName', 'context',
    ))

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        # StructuredLogger already serialized the record
        if message.startswith('{'):
            return message

        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': message,
        }

        if record.exc_info:
            log_data['traceback'] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in self._RESERVED:
                log_data[key] = value
        log_data.update(getattr(record, 'context', None) or {})

        return json.dumps(log_data, default=str)


_loggers: Dict[str, StructuredLogger] = {}
_loggers_lock = threading.Lock()


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance (one per name)."""
    with _loggers_lock:
        logger = _loggers.get(name)
        if logger is None or logger.config is not get_config():
            logger = StructuredLogger(name, get_config())
            _loggers[name] = logger
        return logger
