"""
Shared fixtures for the engine, parser and API tests
"""

import pytest
from fastapi.testclient import TestClient

from cybershield.api.limiter import limiter
from cybershield.core.email_analyzer import AuthResult, EmailRecord, EmailRiskEngine
from cybershield.core.website_analyzer import WebsiteRiskEngine

PHISHING_EML = b"""From: "PayPal Service" <service@paypa1-alerts.com>
To: victim@example.com
Reply-To: collect@evil.example
Subject: Account suspended
Authentication-Results: mx.example.com; spf=fail smtp.mailfrom=paypa1-alerts.com; dkim=none; dmarc=fail header.from=paypa1-alerts.com
X-Originating-IP: [203.0.113.7]
MIME-Version: 1.0
Content-Type: multipart/mixed; boundary="XYZ"

--XYZ
Content-Type: text/plain; charset="utf-8"

Your account is suspended. Verify at http://203.0.113.7/login
--XYZ
Content-Type: text/html; charset="utf-8"

<html><body><form><input type="password"></form></body></html>
--XYZ
Content-Type: application/x-msdownload
Content-Disposition: attachment; filename="invoice.pdf.exe"
Content-Transfer-Encoding: base64

TVqQAAMAAAAEAAAA
--XYZ--
"""


@pytest.fixture
def email_engine():
    return EmailRiskEngine()


@pytest.fixture
def website_engine():
    return WebsiteRiskEngine()


@pytest.fixture
def phishing_email():
    return EmailRecord(
        sender="security@amaz0n-verify.com",
        sender_name="Amazon Security",
        subject="URGENT: Verify Your Account or Face Suspension",
        body=(
            "Dear customer, we detected unusual activity on your Amazon account. "
            "Verify account ownership or your account will be suspended. "
            "Click here immediately: http://amaz0n-verify.com/login to confirm identity."
        ),
        recipient="user@example.com",
    )


@pytest.fixture
def safe_email():
    return EmailRecord(
        sender="newsletter@legitimate-company.com",
        subject="Monthly product newsletter",
        body=(
            "Hello! Here is the monthly product newsletter with new releases "
            "and stories from the team. Thanks for reading."
        ),
        recipient="user@example.com",
        spf_result=AuthResult.PASS,
        dkim_result=AuthResult.PASS,
        dmarc_result=AuthResult.PASS,
    )


@pytest.fixture
def client():
    from main import app

    limiter.enabled = False
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        limiter.enabled = True


@pytest.fixture
def phishing_eml():
    return PHISHING_EML
