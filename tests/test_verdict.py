"""
Score clamping, tiering and category selection
"""

import pytest

from cybershield.core.domain_utils import (
    extract_sender_domain,
    extract_urls,
    is_ipv4_literal,
    parse_url,
)
from cybershield.core.verdict import (
    CategoryHint,
    IndicatorResult,
    clamp_score,
    dedupe_indicators,
    select_category,
    tier_for_score,
)


@pytest.mark.parametrize("raw,expected", [(-5, 0), (0, 0), (42.6, 43), (100, 100), (150, 100)])
def test_clamp_score(raw, expected):
    assert clamp_score(raw) == expected


@pytest.mark.parametrize("score,tier", [
    (100, "safe"), (80, "safe"), (79, "low"), (60, "low"),
    (59, "medium"), (40, "medium"), (20, "high"), (19, "critical"), (0, "critical"),
])
def test_tier_for_score(score, tier):
    assert tier_for_score(score) == tier


def test_dedupe_keeps_first_seen_order():
    assert dedupe_indicators(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]


def test_indicator_result_accumulates():
    result = IndicatorResult()
    result.add(10, "first")
    result.add(5, "second", CategoryHint("credential_theft", 5))
    assert result.score == 15
    assert result.indicators == ["first", "second"]
    assert result.hints == [CategoryHint("credential_theft", 5)]


class TestSelectCategory:
    def test_highest_weight_wins(self):
        hints = [CategoryHint("business_email_compromise", 2), CategoryHint("credential_theft", 5)]
        assert select_category(hints) == "credential_theft"

    def test_tie_goes_to_first_hint(self):
        hints = [CategoryHint("first", 3), CategoryHint("second", 3)]
        assert select_category(hints) == "first"

    def test_default_when_no_hints(self):
        assert select_category([], default="social_engineering") == "social_engineering"
        assert select_category([]) is None


class TestDomainUtils:
    def test_parse_url(self):
        parsed = parse_url("HTTPS://Example.COM:8443/Login?next=/")
        assert parsed.scheme == "https"
        assert parsed.host == "example.com"
        assert parsed.path == "/login"

    def test_parse_url_defaults_path(self):
        assert parse_url("https://example.com").path == "/"

    @pytest.mark.parametrize("url", ["", "example.com", "https://", "http://example.com:99999/", "http://bad host/"])
    def test_parse_url_rejects(self, url):
        assert parse_url(url) is None

    @pytest.mark.parametrize("address,domain", [
        ("user@Example.COM", "example.com"),
        ("user@ example.com ", "example.com"),
        ("no-at-sign", ""),
        ("", ""),
    ])
    def test_extract_sender_domain(self, address, domain):
        assert extract_sender_domain(address) == domain

    def test_extract_urls_strips_trailing_punctuation(self):
        text = "Go to http://example.com/path. Or https://bit.ly/x, today"
        assert extract_urls(text) == ["http://example.com/path", "https://bit.ly/x"]

    @pytest.mark.parametrize("host,expected", [
        ("192.168.0.1", True),
        ("8.8.8.8", True),
        ("999.1.1.1", False),
        ("1.2.3", False),
        ("example.com", False),
    ])
    def test_is_ipv4_literal(self, host, expected):
        assert is_ipv4_literal(host) is expected
