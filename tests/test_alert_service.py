"""
Threat alert construction and dispatch
"""

import logging

from cybershield.core.config import settings
from cybershield.core.email_analyzer import analyze_email
from cybershield.core.website_analyzer import analyze_url
from cybershield.services.alert_service import (
    build_email_alert,
    build_website_alert,
    dispatch_alert,
    should_dispatch,
    website_severity,
)


def test_email_alert_for_phishing(phishing_email):
    result = analyze_email(phishing_email)
    alert = build_email_alert(phishing_email, result)

    assert alert.threat_id.startswith("PHI-")
    assert alert.threat_type == "phishing"
    assert alert.source == phishing_email.sender
    assert alert.severity == "critical"
    assert alert.score == result.risk_score
    assert alert.classification == result.classification
    assert alert.quarantined
    assert alert.indicators == result.indicators


def test_no_alert_for_safe_email(safe_email):
    alert = build_email_alert(safe_email, analyze_email(safe_email))
    assert alert is None
    assert not dispatch_alert(alert)


def test_website_alert_confidence_is_complement():
    url = "http://example.com"
    result = analyze_url(url)
    alert = build_website_alert(url, result)

    assert alert.threat_id.startswith("WEB-")
    assert alert.threat_type == "malware"
    assert alert.target == url
    assert alert.severity == "medium"
    assert alert.confidence == 60
    assert alert.classification == "Unencrypted Connection"


def test_no_alert_for_safe_website():
    assert build_website_alert("https://www.google.com", analyze_url("https://www.google.com")) is None


def test_website_severity():
    assert website_severity(analyze_url("http://192.168.0.1/login")) == "critical"
    assert website_severity(analyze_url("https://downloads.example.com/files/trojan.exe")) == "high"
    assert website_severity(analyze_url("https://www.google.com")) == "none"


def test_threshold():
    medium = build_website_alert("http://example.com", analyze_url("http://example.com"))
    assert not should_dispatch(medium)
    assert should_dispatch(medium, min_severity="medium")
    assert not should_dispatch(None, min_severity="low")


def test_dispatch_logs_warning(phishing_email, caplog):
    alert = build_email_alert(phishing_email, analyze_email(phishing_email))
    with caplog.at_level(logging.WARNING, logger="cybershield.services.alert_service"):
        assert dispatch_alert(alert)
    assert f"THREAT_ALERT: {alert.threat_id}" in caplog.text


def test_alerts_disabled(phishing_email, monkeypatch):
    monkeypatch.setattr(settings, "ALERTS_ENABLED", False)
    alert = build_email_alert(phishing_email, analyze_email(phishing_email))
    assert not dispatch_alert(alert)


def test_to_dict_round_trips_fields(phishing_email):
    alert = build_email_alert(phishing_email, analyze_email(phishing_email))
    data = alert.to_dict()
    assert data["threat_id"] == alert.threat_id
    assert data["timestamp"]
