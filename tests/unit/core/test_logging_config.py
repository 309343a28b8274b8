"""
Tests for logging infrastructure.
"""

import json
import logging
import sys

import pytest

from picton.core.config_manager import LoggingConfig, REDACTED
from picton.core.logging_config import (
    JSONFormatter,
    SensitiveDataFilter,
    correlation_id,
    log_with_context,
    parse_size,
    redact,
    set_correlation_id,
    setup_logging,
)

ACCOUNT_KEY_STRING = "DefaultEndpointsProtocol=https;AccountName=test;AccountKey=secretkey123;EndpointSuffix=core.windows.net"
SAS_URI = "https://acct.blob.core.windows.net/jobs/lock?sp=r&sig=base64signature&se=2025-12-31"


def _record(msg, args=(), level=logging.INFO, exc_info=None, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="picton.blob.leases",
        level=level,
        pathname="",
        lineno=0,
        msg=msg,
        args=args,
        exc_info=exc_info
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging replaces root handlers; put them back afterwards."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.fixture(autouse=True)
def no_correlation_id():
    token = set_correlation_id(None)
    yield
    correlation_id.reset(token)


@pytest.fixture
def bound_correlation_id():
    token = set_correlation_id("run-42")
    yield "run-42"
    correlation_id.reset(token)


class TestSetupLogging:

    def test_defaults_to_info_on_stderr(self):
        setup_logging()

        root_logger = logging.getLogger()
        assert root_logger.level == logging.INFO
        assert len(root_logger.handlers) == 1
        handler = root_logger.handlers[0]
        assert handler.stream is sys.stderr
        assert isinstance(handler.formatter, JSONFormatter)
        assert any(isinstance(f, SensitiveDataFilter) for f in handler.filters)

    def test_level_and_text_format_from_config(self):
        setup_logging(LoggingConfig(level="DEBUG", format="text"))

        root_logger = logging.getLogger()
        assert root_logger.level == logging.DEBUG
        assert not isinstance(root_logger.handlers[0].formatter, JSONFormatter)

    def test_module_levels(self):
        setup_logging(LoggingConfig(module_levels={"picton.blob.leases": "debug", "azure": "WARNING"}))

        assert logging.getLogger("picton.blob.leases").isEnabledFor(logging.DEBUG)
        assert logging.getLogger("azure").level == logging.WARNING
        assert not logging.getLogger("picton.cli").isEnabledFor(logging.DEBUG)

    def test_file_output_is_redacted(self, tmp_path):
        log_file = tmp_path / "logs" / "picton.log"
        setup_logging(LoggingConfig(file=str(log_file), rotation_size="1KB", rotation_count=2))

        file_handler = logging.getLogger().handlers[1]
        assert file_handler.maxBytes == 1024
        assert file_handler.backupCount == 2

        logging.getLogger("picton.cli").info("Connecting with %s", ACCOUNT_KEY_STRING)
        file_handler.flush()

        entry = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert "secretkey123" not in entry["message"]
        assert f"AccountKey={REDACTED}" in entry["message"]
        assert entry["logger"] == "picton.cli"

    def test_invalid_rotation_size(self, tmp_path):
        with pytest.raises(ValueError, match="Invalid size"):
            setup_logging(LoggingConfig(file=str(tmp_path / "picton.log"), rotation_size="lots"))


class TestJSONFormatter:

    def test_basic_fields(self):
        data = json.loads(JSONFormatter().format(_record("Acquired lease %s", ("abc123",))))

        assert data["level"] == "INFO"
        assert data["logger"] == "picton.blob.leases"
        assert data["message"] == "Acquired lease abc123"
        assert "timestamp" in data
        assert "correlation_id" not in data
        assert "context" not in data

    def test_correlation_id(self, bound_correlation_id):
        data = json.loads(JSONFormatter().format(_record("Renewed lease")))

        assert data["correlation_id"] == "run-42"

    def test_context_is_serialized(self):
        record = _record("Lease not acquired", context={"attempts": 3, "lease_duration": 15})

        data = json.loads(JSONFormatter().format(record))

        assert data["context"] == {"attempts": 3, "lease_duration": 15}

    def test_exception(self):
        try:
            raise RuntimeError("connection reset")
        except RuntimeError:
            record = _record("Failed to renew lease", level=logging.WARNING, exc_info=sys.exc_info())

        data = json.loads(JSONFormatter().format(record))

        assert "RuntimeError: connection reset" in data["exception"]


class TestSensitiveDataFilter:

    @pytest.mark.parametrize("text,secret", [
        ("Authorization: SharedKey devstoreaccount1:signature==", "devstoreaccount1:signature=="),
        ("Authorization: Bearer eyJ0eXAi.token", "eyJ0eXAi.token"),
        (ACCOUNT_KEY_STRING, "secretkey123"),
        ("BlobEndpoint=https://x;SharedAccessSignature=sv=2020&sig=abc", "sv=2020"),
        (SAS_URI, "base64signature"),
        ('{"account_key": "topsecret"}', "topsecret"),
    ])
    def test_redact(self, text, secret):
        redacted = redact(text)

        assert secret not in redacted
        assert REDACTED in redacted

    def test_redact_leaves_other_values(self):
        assert redact("Acquired lease abc123 on https://acct.blob.core.windows.net/c/b") == (
            "Acquired lease abc123 on https://acct.blob.core.windows.net/c/b"
        )
        assert redact(15) == 15

    def test_filters_message_args(self):
        record = _record("Shared %s for %d minutes", (SAS_URI, 15))

        assert SensitiveDataFilter().filter(record) is True
        assert "base64signature" not in record.getMessage()
        assert record.args[1] == 15

    def test_filters_mapping_args(self):
        record = _record("Using %(conn)s", ({"conn": ACCOUNT_KEY_STRING},))

        SensitiveDataFilter().filter(record)

        assert "secretkey123" not in record.getMessage()

    def test_filters_context(self):
        record = _record("Lease not acquired", context={"uri": SAS_URI, "attempts": 2})

        SensitiveDataFilter().filter(record)

        assert "base64signature" not in record.context["uri"]
        assert record.context["attempts"] == 2


class TestLogWithContext:

    def test_attaches_context(self, caplog):
        logger = logging.getLogger("picton.blob.leases")

        with caplog.at_level(logging.INFO, logger="picton.blob.leases"):
            log_with_context(logger, logging.INFO, "Lease not acquired", attempts=2, lease_duration=15)

        assert caplog.records[-1].context == {"attempts": 2, "lease_duration": 15}

    def test_no_context(self, caplog):
        logger = logging.getLogger("picton.blob.leases")

        with caplog.at_level(logging.INFO, logger="picton.blob.leases"):
            log_with_context(logger, logging.INFO, "Lease released")

        assert not hasattr(caplog.records[-1], "context")

    def test_correlation_id_reset(self):
        token = set_correlation_id("run-7")
        assert correlation_id.get() == "run-7"

        correlation_id.reset(token)
        assert correlation_id.get() is None


class TestParseSize:

    @pytest.mark.parametrize("size,expected", [
        ("100", 100),
        ("100B", 100),
        ("10KB", 10240),
        ("5kb", 5120),
        (" 10 MB ", 10485760),
        ("1.5MB", int(1.5 * 1048576)),
        ("1GB", 1073741824),
    ])
    def test_valid(self, size, expected):
        assert parse_size(size) == expected

    @pytest.mark.parametrize("size", ["", "MB", "ten MB", "10TB"])
    def test_invalid(self, size):
        with pytest.raises(ValueError):
            parse_size(size)
