"""
Threat Alert Service
Turns positive engine verdicts into alert notifications

The engines return everything an alert needs (score, indicators,
classification); this module only decides severity and whether the
alert clears the configured threshold. Delivery is a log line; no
mail transport is wired in.
"""

import logging
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from cybershield.core.config import settings
from cybershield.core.email_analyzer import EmailAnalysisResult, EmailRecord
from cybershield.core.website_analyzer import WebsiteAnalysisResult

logger = logging.getLogger(__name__)

SEVERITY_ORDER = {
    "none": 0,
    "low": 1,
    "medium": 2,
    "high": 3,
    "critical": 4,
}


@dataclass
class ThreatAlert:
    """Notification payload for a detected threat"""
    threat_id: str
    threat_type: str
    source: str
    target: str
    severity: str
    confidence: int
    score: int
    description: str
    indicators: List[str]
    classification: Optional[str] = None
    quarantined: bool = False
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _threat_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:6].upper()}"


def website_severity(result: WebsiteAnalysisResult) -> str:
    """Alert severity for a website verdict"""
    if not result.is_malicious:
        return "none"
    if result.risk_level in ("critical", "high"):
        return result.risk_level
    return "medium"


def build_email_alert(record: EmailRecord, result: EmailAnalysisResult) -> Optional[ThreatAlert]:
    """Alert for a phishing verdict, or None for a safe email"""
    if not result.is_phishing:
        return None

    return ThreatAlert(
        threat_id=_threat_id("PHI"),
        threat_type="phishing",
        source=record.sender,
        target="Email System",
        severity=result.severity,
        confidence=result.confidence,
        score=result.risk_score,
        description=f"Phishing email detected from {record.sender}: {record.subject}",
        indicators=list(result.indicators),
        classification=result.classification,
        quarantined=True
    )


def build_website_alert(url: str, result: WebsiteAnalysisResult) -> Optional[ThreatAlert]:
    """Alert for a malicious website verdict, or None for a safe one"""
    if not result.is_malicious:
        return None

    return ThreatAlert(
        threat_id=_threat_id("WEB"),
        threat_type="malware",
        source="Website Security Analyzer",
        target=url,
        severity=website_severity(result),
        # Website scores measure safety, so confidence in the threat is the complement
        confidence=100 - result.security_score,
        score=result.security_score,
        description=f"Malicious website detected: {result.category} - {result.description}",
        indicators=list(result.indicators),
        classification=result.category
    )


def should_dispatch(alert: Optional[ThreatAlert], min_severity: Optional[str] = None) -> bool:
    """True if alerting is enabled and the alert meets the severity threshold"""
    if alert is None or not settings.ALERTS_ENABLED:
        return False
    threshold = SEVERITY_ORDER.get((min_severity or settings.ALERT_MIN_SEVERITY).lower(), SEVERITY_ORDER["high"])
    return SEVERITY_ORDER.get(alert.severity, 0) >= threshold


def dispatch_alert(alert: Optional[ThreatAlert]) -> bool:
    """
    Emit an alert if it clears the severity threshold.

    Returns:
        True if the alert was emitted
    """
    if not should_dispatch(alert):
        return False

    logger.warning(
        f"THREAT_ALERT: {alert.threat_id} | {alert.severity.upper()} {alert.threat_type} "
        f"| score={alert.score} confidence={alert.confidence} | source={alert.source} "
        f"| indicators={'; '.join(alert.indicators[:5])}"
    )
    return True
