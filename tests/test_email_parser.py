"""
Email parser tests: .eml files and webhook payloads
"""

import json

import pytest

from cybershield.core.email_analyzer import Attachment, AuthResult
from cybershield.utils.email_parser import (
    EmailParseError,
    get_email_parser,
    parse_authentication_results,
    split_display_address,
)

HTML_ONLY_EML = b"""From: news@example.com
To: user@example.com
Subject: Weekly digest
Received-SPF: Pass (example.com: domain of news@example.com designates 192.0.2.1 as permitted sender)
Content-Type: text/html; charset="utf-8"

<html><head><style>p {color: red}</style></head><body><p>Hello   there</p></body></html>
"""


@pytest.fixture
def parser():
    return get_email_parser()


class TestParseEml:
    def test_headers_and_auth(self, parser, phishing_eml):
        record = parser.parse_eml(phishing_eml)
        assert record.sender == "service@paypa1-alerts.com"
        assert record.sender_name == "PayPal Service"
        assert record.recipient == "victim@example.com"
        assert record.reply_to == "collect@evil.example"
        assert record.subject == "Account suspended"
        assert record.spf_result == AuthResult.FAIL
        assert record.dkim_result == AuthResult.NONE
        assert record.dmarc_result == AuthResult.FAIL
        assert record.client_ip == "203.0.113.7"

    def test_parts(self, parser, phishing_eml):
        record = parser.parse_eml(phishing_eml)
        assert "suspended" in record.body
        assert "<form>" in record.html_body
        assert record.attachments == (Attachment("invoice.pdf.exe", "application/x-msdownload"),)

    def test_html_only_body_is_stripped(self, parser):
        record = parser.parse_eml(HTML_ONLY_EML)
        assert record.body == "Hello there"
        assert record.sender_name is None
        assert record.reply_to is None
        assert record.spf_result == AuthResult.PASS
        assert record.dkim_result is None

    def test_no_headers(self, parser):
        with pytest.raises(EmailParseError):
            parser.parse_eml(b"")


class TestParseWebhook:
    def test_display_name_and_envelope(self, parser):
        envelope = json.dumps({"spf": "fail", "dkim": "pass", "dmarc": "fail", "from_ip": "198.51.100.4"})
        record = parser.parse_webhook(
            sender="Amazon Support <help@amazn-support.com>",
            recipient="user@example.com",
            subject="Verify your account",
            text="Click the link",
            envelope=envelope,
        )
        assert record.sender == "help@amazn-support.com"
        assert record.sender_name == "Amazon Support"
        assert record.spf_result == AuthResult.FAIL
        assert record.dkim_result == AuthResult.PASS
        assert record.dmarc_result == AuthResult.FAIL
        assert record.client_ip == "198.51.100.4"
        assert record.html_body is None

    def test_malformed_envelope_is_ignored(self, parser):
        record = parser.parse_webhook("a@example.com", "b@example.com", "s", "t", envelope="not-json")
        assert record.spf_result is None
        assert record.client_ip is None


@pytest.mark.parametrize("value,expected", [
    ('"Bank" <a@b.com>', ("Bank", "a@b.com")),
    ("Bank Support <a@b.com>", ("Bank Support", "a@b.com")),
    ("<a@b.com>", (None, "a@b.com")),
    ("a@b.com", (None, "a@b.com")),
])
def test_split_display_address(value, expected):
    assert split_display_address(value) == expected


def test_parse_authentication_results_first_wins():
    header = "mx; dkim=pass header.d=a.com; dkim=fail header.d=b.com; spf=softfail"
    assert parse_authentication_results(header) == {"dkim": "pass", "spf": "softfail"}
