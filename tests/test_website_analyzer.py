"""
Website risk engine tests
"""

import pytest

from cybershield.core.website_analyzer import (
    analyze_url,
    is_brand_spoofing,
    is_trusted_domain,
)


def test_trusted_site_is_safe(website_engine):
    result = website_engine.analyze("https://www.google.com")
    assert not result.is_malicious
    assert result.is_trusted_domain
    assert result.security_score == 100
    assert result.risk_level == "safe"
    assert result.category == "Legitimate Service"
    assert result.uses_https
    assert result.has_security_certificate


def test_plain_http_is_penalized(website_engine):
    insecure = website_engine.analyze("http://example.com")
    secure = website_engine.analyze("https://example.com")

    assert insecure.security_score == 40
    assert insecure.risk_level == "medium"
    assert insecure.is_malicious
    assert insecure.category == "Unencrypted Connection"
    assert not insecure.has_security_certificate

    assert secure.security_score == 80
    assert not secure.is_malicious
    assert secure.security_score > insecure.security_score


def test_untagged_result_uses_tier_as_category(website_engine):
    result = website_engine.analyze("https://example.com")
    assert result.category == "safe"
    assert result.description == "This website appears to be safe and secure."


def test_ip_literal_login(website_engine):
    result = website_engine.analyze("http://192.168.0.1/login")
    assert result.is_malicious
    assert result.security_score == 0
    assert result.risk_level == "critical"
    assert result.category == "IP-based Phishing"
    assert "Admin/login path on untrusted domain" in result.indicators


@pytest.mark.parametrize("url", ["not a url", "", "   ", "http://", "example.com", "http://exa mple.com"])
def test_invalid_urls(website_engine, url):
    result = website_engine.analyze(url)
    assert result.is_malicious
    assert result.risk_level == "critical"
    assert result.security_score == 0
    assert result.indicators == ["Invalid URL format"]
    assert result.category == "Invalid URL"


def test_brand_spoofing(website_engine):
    result = website_engine.analyze("https://paypal-secure-login.com")
    assert result.security_score == 10
    assert result.risk_level == "critical"
    assert result.category == "Phishing/Domain Spoofing"
    assert "Multiple suspicious keywords in domain (3)" in result.indicators


def test_brand_as_own_label_is_not_spoofing(website_engine):
    result = website_engine.analyze("https://paypal.example.net")
    assert result.security_score == 80
    assert not result.is_malicious


def test_suspicious_tld(website_engine):
    result = website_engine.analyze("https://free-stuff.tk")
    assert result.security_score == 50
    assert result.risk_level == "medium"
    assert result.category == "Suspicious TLD"
    assert "Suspicious top-level domain (.tk)" in result.indicators


def test_malware_path(website_engine):
    result = website_engine.analyze("https://downloads.example.com/files/trojan.exe")
    assert result.security_score == 30
    assert result.risk_level == "high"
    assert result.category == "Malware Distribution"


def test_malware_category_overrides_earlier_ones(website_engine):
    result = website_engine.analyze("http://free-stuff.tk/ransomware")
    assert result.security_score == 0
    assert result.category == "Malware Distribution"


def test_long_host(website_engine):
    result = website_engine.analyze("https://this-is-a-really-long-hostname-for-testing.example.com")
    assert result.security_score == 70
    assert result.risk_level == "low"
    assert not result.is_malicious
    assert "Suspiciously long domain name" in result.indicators


def test_many_subdomains(website_engine):
    result = website_engine.analyze("https://a.b.c.example.org")
    assert result.security_score == 65
    assert result.risk_level == "low"


def test_trusted_subdomain_skips_path_and_keyword_rules(website_engine):
    result = website_engine.analyze("https://accounts.google.com/login")
    assert result.is_trusted_domain
    assert result.security_score == 100


def test_scheme_and_host_are_case_insensitive(website_engine):
    result = website_engine.analyze("HTTPS://WWW.GOOGLE.COM")
    assert result.is_trusted_domain
    assert result.security_score == 100


def test_results_are_bounded_and_explained():
    urls = [
        "https://www.google.com", "http://example.com", "http://192.168.0.1/login",
        "https://paypal-secure-login.com", "http://free-stuff.tk/ransomware", "nonsense",
    ]
    for url in urls:
        result = analyze_url(url)
        assert 0 <= result.security_score <= 100
        assert result.is_malicious == (result.security_score < 60)
        assert result.indicators
        assert analyze_url(url) == result


@pytest.mark.parametrize("host,expected", [
    ("google.com", True),
    ("mail.google.com", True),
    ("notgoogle.com", False),
    ("google.com.evil.net", False),
])
def test_is_trusted_domain(host, expected):
    assert is_trusted_domain(host) is expected


@pytest.mark.parametrize("host,expected", [
    ("paypal-login.net", True),
    ("mybank-online.com", True),
    ("paypal.example.net", False),
    ("localhost", False),
    ("example.com", False),
])
def test_is_brand_spoofing(host, expected):
    assert is_brand_spoofing(host) is expected
