"""
Website Risk Engine
Rule-based security scoring for a single URL

Scores start at 100 (safe) and rules deduct or add points.
Higher score = safer, the inverse of the email engine.
Later, more specific rules overwrite the category and description
set by earlier ones.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from cybershield.core import rule_tables as rules
from cybershield.core.domain_utils import (
    ParsedUrl,
    contains_any,
    has_suffix,
    is_ipv4_literal,
    is_same_or_subdomain,
    label_count,
    matching,
    parse_url,
)
from cybershield.core.verdict import clamp_score, dedupe_indicators, tier_for_score

logger = logging.getLogger(__name__)

STARTING_SCORE = 100
MALICIOUS_BELOW = 60
LONG_HOST_LENGTH = 40


@dataclass
class WebsiteAnalysisResult:
    """Security verdict for one URL"""
    is_malicious: bool
    risk_level: str
    security_score: int
    indicators: List[str]
    category: str
    description: str
    uses_https: bool
    is_trusted_domain: bool
    has_security_certificate: bool

    def to_dict(self) -> Dict[str, Any]:
        """JSON representation with stable camelCase field names"""
        return {
            "isMalicious": self.is_malicious,
            "riskLevel": self.risk_level,
            "securityScore": self.security_score,
            "indicators": list(self.indicators),
            "category": self.category,
            "description": self.description,
            "usesHttps": self.uses_https,
            "isTrustedDomain": self.is_trusted_domain,
            "hasSecurityCertificate": self.has_security_certificate,
        }


def invalid_url_result() -> WebsiteAnalysisResult:
    """Terminal verdict for input that does not parse as a URL"""
    return WebsiteAnalysisResult(
        is_malicious=True,
        risk_level="critical",
        security_score=0,
        indicators=["Invalid URL format"],
        category="Invalid URL",
        description="The provided URL is invalid or malformed.",
        uses_https=False,
        is_trusted_domain=False,
        has_security_certificate=False
    )


def is_trusted_domain(host: str) -> bool:
    """Exact match or subdomain of the trusted-domain list"""
    return is_same_or_subdomain(host, rules.TRUSTED_WEBSITE_DOMAINS)


def is_brand_spoofing(host: str) -> bool:
    """
    Host mentions a major brand without carrying it as a whole label.

    "paypal-login.net" spoofs paypal; "paypal.example.net" does not,
    because the brand is its own label there.
    """
    labels = host.split('.')
    if len(labels) < 2:
        return False
    return any(brand in host and brand not in labels for brand in rules.SPOOFED_BRANDS)


class _Assessment:
    """Mutable scratch state for one analyze_url call"""

    def __init__(self):
        self.score = STARTING_SCORE
        self.indicators: List[str] = []
        self.category: Optional[str] = None
        self.description: Optional[str] = None

    def adjust(self, delta: int, indicator: str, category: Optional[str] = None,
               description: Optional[str] = None) -> None:
        self.score += delta
        self.indicators.append(indicator)
        if category:
            self.category = category
            self.description = description


class WebsiteRiskEngine:
    """Stateless URL classifier; safe to share between concurrent callers"""

    def analyze(self, url: str) -> WebsiteAnalysisResult:
        parsed = parse_url(url)
        if parsed is None:
            logger.debug(f"Website analysis: invalid URL {str(url)[:80]!r}")
            return invalid_url_result()

        result = self._score(parsed)
        logger.debug(
            f"Website analysis: host={parsed.host} score={result.security_score} "
            f"level={result.risk_level} category={result.category}"
        )
        return result

    def _score(self, parsed: ParsedUrl) -> WebsiteAnalysisResult:
        host, path = parsed.host, parsed.path
        uses_https = parsed.scheme == "https"
        trusted = is_trusted_domain(host)
        a = _Assessment()

        # Protocol
        if not uses_https:
            a.adjust(
                -50, "No HTTPS encryption - data transmitted in plain text",
                "Unencrypted Connection",
                "This website uses unencrypted HTTP protocol instead of secure HTTPS. "
                "All data is vulnerable to interception."
            )
            a.indicators.append("No SSL/TLS security certificate - cannot verify website identity")
        else:
            a.indicators.append("HTTPS secure connection enabled")
            a.indicators.append("SSL/TLS certificate detected")

        # Reputation
        if trusted:
            a.adjust(
                30, "Verified trusted domain from security database",
                "Legitimate Service",
                "This is a known legitimate website from a trusted company. Safe to visit."
            )
        elif is_brand_spoofing(host):
            a.adjust(
                -45, "Domain spoofing detected - mimics legitimate company",
                "Phishing/Domain Spoofing",
                "This domain is designed to look like a legitimate company but is actually fraudulent."
            )

        if len(host) > LONG_HOST_LENGTH:
            a.adjust(-10, "Suspiciously long domain name")

        if is_ipv4_literal(host):
            a.adjust(
                -40, "Uses IP address instead of domain name - strong phishing indicator",
                "IP-based Phishing",
                "Legitimate websites use domain names, not IP addresses. This is a phishing tactic."
            )

        if label_count(host) > 3:
            a.adjust(-15, "Multiple subdomains - potential subdomain hijacking")

        if has_suffix(host, rules.WEBSITE_SUSPICIOUS_TLDS):
            a.adjust(
                -30, f"Suspicious top-level domain (.{host.split('.')[-1]})",
                "Suspicious TLD",
                "This domain uses a cheap, unrestricted TLD commonly used in phishing attacks."
            )

        if not trusted and contains_any(path, rules.SENSITIVE_PATH_TOKENS):
            a.adjust(-20, "Admin/login path on untrusted domain")

        keyword_count = len(matching(host, rules.SUSPICIOUS_HOST_TOKENS))
        if keyword_count > 2 and not trusted:
            a.adjust(-25, f"Multiple suspicious keywords in domain ({keyword_count})")

        if uses_https and not trusted:
            a.adjust(-10, "Self-signed certificate or certificate from untrusted CA")

        if contains_any(path, rules.MALWARE_PATH_TOKENS):
            a.adjust(
                -50, "Malware/threat related content detected in URL",
                "Malware Distribution",
                "This website appears to host malicious content or malware."
            )

        if not trusted:
            a.adjust(-10, "Not found in trusted security databases")

        score = clamp_score(a.score)
        risk_level = tier_for_score(score)

        return WebsiteAnalysisResult(
            is_malicious=score < MALICIOUS_BELOW,
            risk_level=risk_level,
            security_score=score,
            indicators=dedupe_indicators(a.indicators),
            category=a.category or risk_level,
            description=a.description or rules.TIER_DESCRIPTIONS[risk_level],
            uses_https=uses_https,
            is_trusted_domain=trusted,
            # An HTTPS connection implies a certificate was presented
            has_security_certificate=uses_https
        )


_engine = WebsiteRiskEngine()


def analyze_url(url: str) -> WebsiteAnalysisResult:
    """Convenience function to analyze a URL"""
    return _engine.analyze(url)
