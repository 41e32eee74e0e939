#!/usr/bin/env python3
"""
WikiQuickCheck Configuration & Logging Module
=============================================
Centralized configuration, structured logging, and error types.

Version: 1.0.0
"""

import os
import sys
import json
import logging
import uuid
import time
from datetime import datetime, timezone
from typing import Optional, Dict, Any
from pathlib import Path
from dataclasses import dataclass, field
from contextlib import contextmanager
import threading

# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================
DEFAULT_HTTP_TIMEOUT = 30           # Seconds to wait for the MediaWiki API
DEFAULT_CONTEXT_RADIUS = 50         # Characters shown around a match
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024  # 5MB max per log file
LOG_BACKUP_COUNT = 5                # Number of log backup files to keep

__version__ = "1.0.0"
VERSION = __version__
APP_NAME = "WikiQuickCheck"

DEFAULT_USER_AGENT = f"{APP_NAME}/{VERSION} (https://www.mediawiki.org/wiki/API:Etiquette)"

# =============================================================================
# ENVIRONMENT CONFIGURATION
# =============================================================================

@dataclass
class AppConfig:
    """Application configuration with sane defaults."""

    # HTTP settings
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT

    # Output
    context_radius: int = DEFAULT_CONTEXT_RADIUS

    # Paths
    log_dir: Path = field(default_factory=lambda: Path.cwd() / 'logs')

    # Logging
    log_level: str = "WARNING"
    log_format: str = "text"  # Options: json, text
    log_to_file: bool = False
    log_to_console: bool = True

    def __post_init__(self):
        """Validate configuration."""
        if self.log_to_file:
            self.log_dir.mkdir(parents=True, exist_ok=True)

    @classmethod
    def from_env(cls) -> 'AppConfig':
        """Load configuration from environment variables."""
        log_dir = os.environ.get('WIKICHECK_LOG_DIR')
        return cls(
            http_timeout=float(os.environ.get('WIKICHECK_HTTP_TIMEOUT', str(DEFAULT_HTTP_TIMEOUT))),
            user_agent=os.environ.get('WIKICHECK_USER_AGENT', DEFAULT_USER_AGENT),
            context_radius=int(os.environ.get('WIKICHECK_CONTEXT_RADIUS', str(DEFAULT_CONTEXT_RADIUS))),
            log_dir=Path(log_dir) if log_dir else Path.cwd() / 'logs',
            log_level=os.environ.get('WIKICHECK_LOG_LEVEL', 'WARNING'),
            log_format=os.environ.get('WIKICHECK_LOG_FORMAT', 'text'),
            log_to_file=os.environ.get('WIKICHECK_LOG_TO_FILE', 'false').lower() == 'true',
        )

    def validate(self) -> tuple:
        """Validate configuration and return (is_valid, errors)."""
        errors = []

        if self.http_timeout <= 0:
            errors.append("HTTP timeout must be positive")

        if self.context_radius < 0:
            errors.append("Context radius cannot be negative")

        if self.log_format not in ('json', 'text'):
            errors.append(f"Invalid log_format: {self.log_format}. Must be 'json' or 'text'")

        if not hasattr(logging, self.log_level.upper()):
            errors.append(f"Invalid log_level: {self.log_level}")

        return (len(errors) == 0, errors)


# Global config instance
_config: Optional[AppConfig] = None

def get_config() -> AppConfig:
    """Get or create the global configuration."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
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

    def __init__(self, name: str, config: Optional[AppConfig] = None):
        self.name = name
        self.config = config or get_config()
        self._setup_logger()

    def _setup_logger(self):
        """Configure the underlying Python logger."""
        self.logger = logging.getLogger(self.name)
        self.logger.setLevel(getattr(logging, self.config.log_level.upper()))
        self.logger.handlers.clear()

        if self.config.log_format == 'json':
            formatter = JsonFormatter()
        else:
            formatter = logging.Formatter(
                '%(asctime)s [%(levelname)s] %(name)s - %(message)s'
            )

        # Console goes to stderr so CLI output on stdout stays clean
        if self.config.log_to_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

        if self.config.log_to_file:
            from logging.handlers import RotatingFileHandler
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
        """Build a structured log record."""
        return {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': level,
            'logger': self.name,
            'correlation_id': self.get_correlation_id(),
            'message': message,
            **kwargs
        }

    def _render(self, level: str, message: str, **kwargs) -> str:
        if self.config.log_format == 'json':
            return json.dumps(self._build_log_record(level, message, **kwargs), default=str)
        return message

    def debug(self, message: str, **kwargs):
        """Log debug message."""
        self.logger.debug(self._render('DEBUG', message, **kwargs), extra=kwargs)

    def info(self, message: str, **kwargs):
        """Log info message."""
        self.logger.info(self._render('INFO', message, **kwargs), extra=kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message."""
        self.logger.warning(self._render('WARNING', message, **kwargs), extra=kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs):
        """Log error message with optional exception info."""
        if exc_info and self.config.log_format == 'json':
            import traceback
            kwargs['traceback'] = traceback.format_exc()
        self.logger.error(self._render('ERROR', message, **kwargs), exc_info=exc_info, extra=kwargs)

    def exception(self, message: str, **kwargs):
        """Log exception with full traceback."""
        self.error(message, exc_info=True, **kwargs)

    @contextmanager
    def log_operation(self, operation: str, **context):
        """Context manager for logging operation start/end with timing."""
        start_time = time.time()
        self.info(f"{operation} started", operation=operation, status='started', **context)
        try:
            yield
            duration_ms = (time.time() - start_time) * 1000
            self.info(f"{operation} completed", operation=operation, status='completed',
                      duration_ms=round(duration_ms, 2), **context)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            self.error(f"{operation} failed: {e}", operation=operation, status='failed',
                       duration_ms=round(duration_ms, 2), **context)
            raise


class JsonFormatter(logging.Formatter):
    """JSON log formatter."""

    RESERVED = frozenset((
        'name', 'msg', 'args', 'created', 'filename', 'funcName',
        'levelname', 'levelno', 'lineno', 'module', 'msecs',
        'pathname', 'process', 'processName', 'relativeCreated',
        'stack_info', 'thread', 'threadName', 'exc_info', 'exc_text',
        'message', 'taskName',
    ))

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        if record.exc_info:
            log_data['traceback'] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in self.RESERVED:
                log_data[key] = value

        return json.dumps(log_data, default=str)


# Loggers are cached per name so handlers are configured once
_loggers: Dict[str, StructuredLogger] = {}
_loggers_lock = threading.Lock()


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance."""
    with _loggers_lock:
        logger = _loggers.get(name)
        if logger is None:
            logger = StructuredLogger(name, get_config())
            _loggers[name] = logger
        return logger


# =============================================================================
# ERROR HANDLING
# =============================================================================

class WikiCheckError(Exception):
    """Base exception for WikiQuickCheck."""

    def __init__(self, message: str, code: str = "UNKNOWN_ERROR",
                 details: Optional[Dict] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a serializable error payload."""
        return {
            'success': False,
            'error': {
                'code': self.code,
                'message': self.message,
                'details': self.details
            }
        }


class InvalidLocatorError(WikiCheckError):
    """The URL is not a recognized Wikipedia page URL."""
    def __init__(self, message: str, url: Optional[str] = None, **kwargs):
        super().__init__(message, code="INVALID_LOCATOR",
                         details={'url': url, **kwargs})


class FetchError(WikiCheckError):
    """Retrieving the API payload failed."""
    def __init__(self, message: str, url: Optional[str] = None,
                 status_code: Optional[int] = None, **kwargs):
        super().__init__(message, code="FETCH_ERROR",
                         details={'url': url, 'status_code': status_code, **kwargs})


class MalformedPayloadError(WikiCheckError):
    """The API response is not well-formed XML."""
    def __init__(self, message: str, **kwargs):
        super().__init__(message, code="MALFORMED_PAYLOAD", details=kwargs)


class PageNotFoundError(WikiCheckError):
    """The page has no content or is only a redirect."""
    def __init__(self, message: str, reason: str = "empty", url: Optional[str] = None, **kwargs):
        super().__init__(message, code="PAGE_NOT_FOUND",
                         details={'reason': reason, 'url': url, **kwargs})
        self.reason = reason

    @property
    def is_redirect(self) -> bool:
        return self.reason == "redirect"


class UnmappableOffsetError(WikiCheckError):
    """Plain-text offsets cannot be related to the original markup."""
    def __init__(self, message: str, offset: Optional[int] = None, **kwargs):
        super().__init__(message, code="UNMAPPABLE_OFFSET",
                         details={'offset': offset, **kwargs})


class RuleEngineError(WikiCheckError):
    """The grammar engine could not be started or failed while checking."""
    def __init__(self, message: str, language: Optional[str] = None, **kwargs):
        super().__init__(message, code="RULE_ENGINE_ERROR",
                         details={'language': language, **kwargs})
