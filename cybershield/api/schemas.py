"""
Response models shared by the analysis routers
JSON field names are camelCase (isPhishing, riskScore, securityScore, ...)
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts snake_case or camelCase input, serializes camelCase"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EmailVerdict(CamelModel):
    """Email risk engine output"""
    is_phishing: bool
    risk_score: int
    indicators: List[str]
    confidence: int
    classification: Optional[str] = None
    domain_reputation: str
    risk_tier: str
    severity: str


class WebsiteVerdict(CamelModel):
    """Website risk engine output"""
    is_malicious: bool
    risk_level: str
    security_score: int
    indicators: List[str]
    category: str
    description: str
    uses_https: bool
    is_trusted_domain: bool
    has_security_certificate: bool


class ThreatAlertModel(CamelModel):
    """Alert raised for a positive verdict"""
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
    timestamp: str
