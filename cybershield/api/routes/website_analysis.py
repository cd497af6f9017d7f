"""
Website Security Analysis API Endpoint
Scores a URL with the website risk engine
"""

from typing import Optional
from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel
import logging

from cybershield.api.limiter import limiter
from cybershield.api.schemas import ThreatAlertModel, WebsiteVerdict
from cybershield.core.config import settings
from cybershield.core.input_sanitizer import ensure_scheme, log_security_event, sanitize_url_input
from cybershield.core.website_analyzer import analyze_url
from cybershield.services.alert_service import build_website_alert, dispatch_alert

logger = logging.getLogger(__name__)

router = APIRouter()


class WebsiteAnalysisRequest(BaseModel):
    """URL submitted for analysis; a missing scheme defaults to https"""
    url: str


class WebsiteAnalysisResponse(BaseModel):
    """Response model for website analysis"""
    success: bool
    url: str
    analysis: WebsiteVerdict
    alert: Optional[ThreatAlertModel] = None


@router.post("/analyze-website", response_model=WebsiteAnalysisResponse)
@limiter.limit(settings.ANALYZE_RATE_LIMIT)
async def analyze_website(request: Request, payload: WebsiteAnalysisRequest) -> WebsiteAnalysisResponse:
    """
    Analyze a website URL for security risks

    Invalid URLs are not an error: they come back as a critical
    "Invalid URL" verdict with a security score of 0.
    """
    client_ip = request.client.host if request.client else "unknown"

    url, error = sanitize_url_input(payload.url, max_length=settings.MAX_URL_LENGTH)
    if error:
        log_security_event("INVALID_URL_INPUT", error, client_ip)
        raise HTTPException(status_code=400, detail=error)

    url = ensure_scheme(url, settings.DEFAULT_URL_SCHEME)
    result = analyze_url(url)

    alert = build_website_alert(url, result)
    dispatch_alert(alert)

    if result.is_malicious:
        logger.info(f"Malicious website detected: {result.category} ({result.security_score}) {url}")
    else:
        logger.info(f"Website analyzed as {result.risk_level}: {url}")

    return WebsiteAnalysisResponse(
        success=True,
        url=url,
        analysis=WebsiteVerdict.model_validate(result.to_dict()),
        alert=ThreatAlertModel.model_validate(alert.to_dict()) if alert else None
    )
