"""Tests for the PII auto-redaction structlog processor and masking helpers."""

import pytest

from signon.core.logging_config import (
    mask_email,
    mask_ip,
    mask_subject,
    pii_redaction_processor,
)


@pytest.mark.unit
class TestPiiRedactionProcessor:
    """Tests for pii_redaction_processor inserted into the structlog chain."""

    def _run(self, event_dict: dict) -> dict:
        """Invoke the processor and return the modified event_dict."""
        return pii_redaction_processor(None, "info", event_dict)

    # ── Claims ───────────────────────────────────────────────────────────────

    def test_email_key_is_masked(self):
        result = self._run({"event": "auth_completed", "email": "h.wurst@finn.de"})
        assert result["email"] == "h***@finn.de"

    def test_email_inside_message_is_masked(self):
        result = self._run({"event": "Provisioned account for h.wurst@finn.de"})
        assert result["event"] == "Provisioned account for h***@finn.de"

    def test_subject_keeps_last_four(self):
        result = self._run({"event": "auth_completed", "subject": "87117114115116"})
        assert result["subject"] == "***6116"

    # ── Client addresses ─────────────────────────────────────────────────────

    def test_ip_key_reduced_to_network(self):
        result = self._run({"event": "request", "client_ip": "192.168.1.100"})
        assert result["client_ip"] == "192.168.1.0/24"

    def test_ipv4_inside_message_reduced_to_network(self):
        result = self._run({"event": "Request from 10.20.30.40"})
        assert result["event"] == "Request from 10.20.30.0/24"

    # ── Provider secrets ─────────────────────────────────────────────────────

    @pytest.mark.parametrize("key", ["access_token", "client_secret", "secret", "code", "state"])
    def test_secret_keys_are_masked(self, key):
        result = self._run({"event": "auth_callback", key: "foo bar baz"})
        assert result[key] == "[REDACTED]"

    def test_empty_values_left_alone(self):
        result = self._run({"event": "auth_callback", "code": None, "email": ""})
        assert result["code"] is None
        assert result["email"] == ""

    # ── Non-PII passthrough ──────────────────────────────────────────────────

    def test_plain_fields_unchanged(self):
        result = self._run({"event": "auth_initiated", "provider": "google", "count": 3})
        assert result == {"event": "auth_initiated", "provider": "google", "count": 3}


@pytest.mark.unit
class TestMaskingHelpers:
    """Tests for mask_email(), mask_subject() and mask_ip()."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("h.wurst@finn.de", "h***@finn.de"),
            ("not-an-email", "[EMAIL]"),
            ("@finn.de", "[EMAIL]"),
            (None, "N/A"),
        ],
    )
    def test_mask_email(self, value, expected):
        assert mask_email(value) == expected

    def test_short_subject_fully_hidden(self):
        assert mask_subject("1234") == "***"
        assert mask_subject(None) == "N/A"

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("10.1.2.3", "10.1.2.0/24"),
            ("2001:db8:85a3::8a2e:370:7334", "2001:db8:85a3::/48"),
            ("testclient", "unknown"),
            (None, "N/A"),
        ],
    )
    def test_mask_ip(self, value, expected):
        assert mask_ip(value) == expected
