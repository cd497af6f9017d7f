"""
Email Risk Engine
Rule-based phishing scoring for inbound email records

Each analyzer inspects one facet of the record and returns an
IndicatorResult (score delta, indicator labels, category hints).
Deltas are summed, clamped to 0-100 and mapped to a verdict.
Higher score = more dangerous.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from cybershield.core import rule_tables as rules
from cybershield.core.domain_utils import (
    contains_any,
    extract_sender_domain,
    extract_urls,
    has_suffix,
    is_ipv4_literal,
    is_same_or_subdomain,
    label_count,
    matching,
    parse_url,
)
from cybershield.core.verdict import (
    CategoryHint,
    IndicatorResult,
    clamp_score,
    dedupe_indicators,
    select_category,
)

logger = logging.getLogger(__name__)

PHISHING_THRESHOLD = 30
CLASSIFICATION_THRESHOLD = 70

# Severity floors used when a phishing verdict is escalated
SEVERITY_THRESHOLDS = {
    "critical": 80,
    "high": 60,
}

CREDENTIAL_THEFT = CategoryHint("credential_theft", 5)
MALWARE_DELIVERY = CategoryHint("malware_delivery", 4)
FINANCIAL_FRAUD = CategoryHint("financial_fraud", 3)
BUSINESS_EMAIL_COMPROMISE = CategoryHint("business_email_compromise", 2)
DEFAULT_CLASSIFICATION = "social_engineering"

HINTS_BY_CATEGORY = {
    hint.category: hint
    for hint in (CREDENTIAL_THEFT, MALWARE_DELIVERY, FINANCIAL_FRAUD, BUSINESS_EMAIL_COMPROMISE)
}

DOUBLE_EXTENSION_PATTERN = re.compile(r'\.\w+\.\w+$')


class AuthResult(str, Enum):
    """SPF / DKIM / DMARC evaluation result"""
    PASS = "pass"
    FAIL = "fail"
    NEUTRAL = "neutral"
    NONE = "none"


def normalize_auth_result(value: Union[AuthResult, str, None]) -> Optional[AuthResult]:
    """Coerce a header value to AuthResult; unknown or absent values become None"""
    if value is None or isinstance(value, AuthResult):
        return value
    try:
        return AuthResult(str(value).strip().lower())
    except ValueError:
        return None


@dataclass(frozen=True)
class Attachment:
    """Email attachment metadata"""
    filename: str
    mime_type: str = ""


@dataclass(frozen=True)
class EmailRecord:
    """Inbound email as seen by the engine"""
    sender: str
    subject: str
    body: str
    recipient: str = ""
    sender_name: Optional[str] = None
    html_body: Optional[str] = None
    client_ip: Optional[str] = None
    spf_result: Optional[AuthResult] = None
    dkim_result: Optional[AuthResult] = None
    dmarc_result: Optional[AuthResult] = None
    attachments: Tuple[Attachment, ...] = ()
    reply_to: Optional[str] = None

    def __post_init__(self):
        for name in ("sender", "subject", "body", "recipient"):
            if getattr(self, name) is None:
                object.__setattr__(self, name, "")
        for name in ("spf_result", "dkim_result", "dmarc_result"):
            object.__setattr__(self, name, normalize_auth_result(getattr(self, name)))
        object.__setattr__(self, "attachments", tuple(self.attachments or ()))


@dataclass
class EmailAnalysisResult:
    """Phishing verdict for one email"""
    is_phishing: bool
    risk_score: int
    indicators: List[str]
    confidence: int
    classification: Optional[str]
    domain_reputation: str

    @property
    def risk_tier(self) -> str:
        return "phishing" if self.is_phishing else "safe"

    @property
    def severity(self) -> str:
        if not self.is_phishing:
            return "none"
        if self.risk_score >= SEVERITY_THRESHOLDS["critical"]:
            return "critical"
        if self.risk_score >= SEVERITY_THRESHOLDS["high"]:
            return "high"
        return "medium"

    def to_dict(self) -> Dict[str, Any]:
        """JSON representation with stable camelCase field names"""
        return {
            "isPhishing": self.is_phishing,
            "riskScore": self.risk_score,
            "indicators": list(self.indicators),
            "confidence": self.confidence,
            "classification": self.classification,
            "domainReputation": self.domain_reputation,
            "riskTier": self.risk_tier,
            "severity": self.severity,
        }


class EmailRiskEngine:
    """
    Stateless phishing classifier.

    Every call builds its own IndicatorResult objects; the engine holds
    nothing but references to the immutable rule tables, so a single
    instance can be shared by concurrent callers.
    """

    def analyze(self, record: EmailRecord) -> EmailAnalysisResult:
        """Run all analyzers over the record and aggregate the verdict"""
        sender_domain = extract_sender_domain(record.sender)

        domain_result, reputation = self.analyze_domain(sender_domain)
        results = [
            domain_result,
            self.analyze_content(record.subject, record.body),
            self.analyze_urls(record.body, record.html_body),
            self.analyze_authentication(record),
            self.analyze_sender(record.sender, record.sender_name, record.reply_to),
            self.analyze_attachments(record.attachments),
            self.analyze_behavior(record.subject, record.body),
            self.analyze_html_template(record.html_body),
        ]

        raw_score = sum(r.score for r in results)
        indicators = dedupe_indicators(i for r in results for i in r.indicators)
        risk_score = clamp_score(raw_score)

        classification = None
        if risk_score >= CLASSIFICATION_THRESHOLD:
            classification = select_category(
                (h for r in results for h in r.hints),
                default=DEFAULT_CLASSIFICATION
            )

        result = EmailAnalysisResult(
            is_phishing=risk_score >= PHISHING_THRESHOLD,
            risk_score=risk_score,
            indicators=indicators,
            # Mirrors the unclamped score; there is no separate confidence model
            confidence=clamp_score(raw_score),
            classification=classification,
            domain_reputation=reputation
        )

        logger.debug(
            f"Email analysis: domain={sender_domain or '-'} raw={raw_score} "
            f"score={result.risk_score} phishing={result.is_phishing} "
            f"classification={result.classification}"
        )
        return result

    # ------------------------------------------------------------------
    # Analyzers
    # ------------------------------------------------------------------

    def analyze_domain(self, domain: str) -> Tuple[IndicatorResult, str]:
        """Sender domain reputation; returns (result, reputation label)"""
        result = IndicatorResult()
        reputation = "unknown"

        if not domain:
            result.add(20, "Invalid sender domain")
            return result, "malicious"

        if domain in rules.KNOWN_MALICIOUS_DOMAINS:
            result.add(40, "Known phishing domain detected")
            return result, "malicious"

        if any(legit in domain and domain != legit for legit in rules.LEGITIMATE_EMAIL_DOMAINS):
            result.add(35, "Domain spoofing detected - mimics legitimate domain")
            return result, "suspicious"

        if domain in rules.LEGITIMATE_EMAIL_DOMAINS:
            return result, "trusted"

        if '-' in domain and contains_any(domain, rules.SECURITY_THEMED_DOMAIN_WORDS):
            result.add(28, "Suspicious domain pattern detected")
            reputation = "suspicious"

        if len(domain) > 25:
            result.add(18, "Unusually long domain name")

        if re.search(r'\d{2,}', domain) and '.' in domain:
            result.add(22, "Multiple numbers in domain - suspicious pattern")

        if contains_any(domain, rules.TYPOSQUAT_PATTERNS):
            result.add(38, "Typosquatting domain detected")
            reputation = "malicious"

        if has_suffix(domain, rules.EMAIL_SUSPICIOUS_TLDS):
            result.add(25, "Suspicious top-level domain used")
            reputation = "suspicious"

        if label_count(domain) > 3:
            result.add(15, "Multiple subdomains - potential subdomain spoofing")

        return result, reputation

    def analyze_content(self, subject: str, body: str) -> IndicatorResult:
        """Keyword, urgency, credential and tone heuristics over subject + body"""
        result = IndicatorResult()
        content = f"{subject} {body}".lower()

        keywords = matching(content, rules.PHISHING_KEYWORDS)
        if len(keywords) >= 3:
            cited = keywords[:3]
            result.add(
                15 * len(keywords),
                f"Multiple phishing keywords detected ({len(keywords)}): {', '.join(cited)}",
                *self._term_hints(", ".join(cited))
            )
        elif keywords:
            result.add(
                12 * len(keywords),
                f'Phishing keyword detected: "{keywords[0]}"',
                *self._term_hints(keywords[0])
            )

        urgency_count = len(matching(content, rules.URGENCY_WORDS))
        if urgency_count >= 3:
            result.add(28, "Excessive urgency tactics - hallmark of phishing")
        elif urgency_count == 2:
            result.add(18, "Multiple urgency indicators detected")

        if contains_any(content, rules.CREDENTIAL_WORDS) and contains_any(content, rules.VERIFY_WORDS):
            result.add(32, "Credential harvesting attempt detected", CREDENTIAL_THEFT)

        if 'account' in content and contains_any(content, rules.ACCOUNT_THREAT_WORDS):
            result.add(30, "Account threat detected - common phishing tactic")

        misspelling_count = len(matching(content, rules.COMMON_MISSPELLINGS))
        if misspelling_count:
            result.add(
                6 * misspelling_count,
                f"Poor spelling/grammar detected ({misspelling_count}) - professional emails are spell-checked"
            )

        if contains_any(content, rules.INFORMAL_MARKERS):
            result.add(12, "Informal/poor language usage detected")

        if contains_any(content, rules.GENERIC_GREETINGS):
            result.add(15, "Generic greeting instead of personalized - phishing indicator")

        return result

    def analyze_urls(self, body: str, html_body: Optional[str] = None) -> IndicatorResult:
        """Per-link checks for every http(s) URL in the plain and HTML bodies"""
        result = IndicatorResult()
        urls = extract_urls(f"{body}\n{html_body or ''}")
        if not urls:
            return result

        body_lower = body.lower()
        claimed_brand = next((b for b in rules.LINK_CLAIMED_BRANDS if b in body_lower), None)

        for url in urls:
            parsed = parse_url(url)
            if parsed is None:
                result.add(12, "Malformed URL detected")
                continue

            host = parsed.host

            if is_same_or_subdomain(host, rules.URL_SHORTENERS):
                result.add(35, "URL shortener detected - hides real destination")

            if claimed_brand and claimed_brand not in host:
                result.add(
                    45,
                    f"URL domain mismatch - claims to be {claimed_brand} but links to {host}",
                    *self._term_hints(host)
                )

            if has_suffix(host, rules.EMAIL_SUSPICIOUS_TLDS):
                result.add(35, "Suspicious TLD in URL")

            if is_ipv4_literal(host):
                result.add(40, "URL uses IP address - strong phishing indicator")

            if label_count(host) > 3:
                result.add(12, "Complex subdomain structure - potential phishing")

        return result

    def analyze_authentication(self, record: EmailRecord) -> IndicatorResult:
        """SPF / DKIM / DMARC failures; absent results contribute nothing"""
        result = IndicatorResult()
        spf_failed = record.spf_result == AuthResult.FAIL
        dkim_failed = record.dkim_result == AuthResult.FAIL
        dmarc_failed = record.dmarc_result == AuthResult.FAIL

        if spf_failed:
            result.add(28, "SPF authentication failed - spoofing likely")
        if dkim_failed:
            result.add(22, "DKIM signature invalid - email not from legitimate sender")
        if dmarc_failed:
            result.add(32, "DMARC policy violation - email failed authentication checks")
        if spf_failed and dkim_failed and dmarc_failed:
            result.add(15, "All email authentication methods failed")

        return result

    def analyze_sender(self, sender: str, sender_name: Optional[str] = None,
                       reply_to: Optional[str] = None) -> IndicatorResult:
        """Reply-To mismatch, display-name impersonation and sender address patterns"""
        result = IndicatorResult()
        domain = extract_sender_domain(sender)

        if reply_to and reply_to.strip().lower() != sender.strip().lower():
            result.add(20, "Reply-To address differs from sender - potential phishing")

        if sender_name and sender:
            name_lower = sender_name.lower()
            brand = next((b for b in rules.DISPLAY_NAME_BRANDS if b in name_lower), None)
            if brand and brand not in domain:
                result.add(
                    40,
                    f"Brand impersonation: Claims to be {brand} but from {domain}",
                    BUSINESS_EMAIL_COMPROMISE,
                    *self._term_hints(domain)
                )

        if contains_any(sender, rules.SUSPICIOUS_SENDER_MARKERS):
            result.add(12, "Suspicious sender pattern detected")

        if domain in rules.FREE_EMAIL_DOMAINS:
            identity = (sender + (sender_name or '')).lower()
            if contains_any(identity, rules.BUSINESS_ENTITY_WORDS):
                result.add(25, "Free email service impersonating business entity")

        return result

    def analyze_attachments(self, attachments: Sequence[Attachment]) -> IndicatorResult:
        """Dangerous extensions, double extensions and executable MIME types"""
        result = IndicatorResult()

        for attachment in attachments or ():
            filename = attachment.filename or ''
            ext = '.' + filename.split('.')[-1].lower() if '.' in filename else ''

            if ext in rules.DANGEROUS_ATTACHMENT_EXTENSIONS:
                result.add(35, f"Malicious attachment detected: {ext} file", MALWARE_DELIVERY)

            if DOUBLE_EXTENSION_PATTERN.search(filename):
                result.add(20, "Double file extension detected - potential malware", MALWARE_DELIVERY)

            mime_type = (attachment.mime_type or '').lower()
            if contains_any(mime_type, rules.EXECUTABLE_MIME_MARKERS):
                result.add(30, "Executable file disguised as document")

        return result

    def analyze_behavior(self, subject: str, body: str) -> IndicatorResult:
        """Scam narratives: fake invoices, fake support, prizes, CEO fraud"""
        result = IndicatorResult()
        content = f"{subject} {body}".lower()

        if contains_any(content, rules.INVOICE_WORDS) and contains_any(content, rules.INVOICE_ACTION_WORDS):
            result.add(25, "Fake invoice/receipt with action request")

        if contains_any(content, rules.SUPPORT_WORDS) and contains_any(content, rules.SUPPORT_ACTION_WORDS):
            result.add(20, "Fake support message with action request")

        if contains_any(content, rules.PRIZE_WORDS) and contains_any(content, rules.PRIZE_ACTION_WORDS):
            result.add(32, "Prize/reward scam detected")

        if contains_any(content, rules.SECRECY_WORDS) and contains_any(content, rules.MONEY_MOVEMENT_WORDS):
            result.add(28, "CEO fraud / business email compromise pattern")

        return result

    def analyze_html_template(self, html_body: Optional[str]) -> IndicatorResult:
        """Credential forms, hidden content and inline script handlers in HTML"""
        result = IndicatorResult()
        if not html_body:
            return result

        html = html_body.lower()

        if '<form' in html and 'password' in html:
            result.add(38, "HTML form for credential harvesting detected", CREDENTIAL_THEFT)

        if 'username' in html and 'password' in html and '<input' in html:
            result.add(35, "Login form injection detected")

        if contains_any(html, rules.HIDDEN_CONTENT_MARKERS):
            result.add(15, "Hidden content in HTML - potential phishing")

        if contains_any(html, rules.INLINE_EVENT_HANDLERS):
            result.add(20, "Event handlers in HTML - potential malicious behavior")

        return result

    @staticmethod
    def _term_hints(cited: str) -> List[CategoryHint]:
        """
        Category hints for the keyword, host or domain an indicator cites.

        "links to payment-center.com" names financial fraud just as
        the keyword "update payment" does.
        """
        cited = cited.lower()
        return [
            HINTS_BY_CATEGORY[category]
            for category, terms in rules.CATEGORY_HINT_TERMS
            if contains_any(cited, terms)
        ]


_engine = EmailRiskEngine()


def analyze_email(record: EmailRecord) -> EmailAnalysisResult:
    """Convenience function to analyze an email"""
    return _engine.analyze(record)
