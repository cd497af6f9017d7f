"""
Email Phishing Analysis API Endpoints
Runs the email risk engine on JSON records, .eml uploads and inbound-mail webhooks

Rate limiting: uploads and webhooks use the stricter upload limit
"""

from typing import List, Optional
from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile
from pydantic import BaseModel
import logging

from cybershield.api.limiter import limiter
from cybershield.api.schemas import CamelModel, EmailVerdict, ThreatAlertModel
from cybershield.core.config import settings
from cybershield.core.email_analyzer import (
    Attachment,
    EmailAnalysisResult,
    EmailRecord,
    analyze_email,
)
from cybershield.core.input_sanitizer import (
    log_security_event,
    sanitize_email_content,
    validate_uploaded_file,
)
from cybershield.services.alert_service import build_email_alert, dispatch_alert
from cybershield.utils.email_parser import EmailParseError, get_email_parser

logger = logging.getLogger(__name__)

router = APIRouter()


class AttachmentInput(CamelModel):
    """Attachment metadata"""
    filename: str
    mime_type: str = ""


class EmailAnalysisRequest(CamelModel):
    """Email record submitted for analysis"""
    sender: str
    subject: str = ""
    body: str = ""
    recipient: str = ""
    sender_name: Optional[str] = None
    html_body: Optional[str] = None
    client_ip: Optional[str] = None
    spf_result: Optional[str] = None
    dkim_result: Optional[str] = None
    dmarc_result: Optional[str] = None
    attachments: List[AttachmentInput] = []
    reply_to: Optional[str] = None


class EmailMetadata(CamelModel):
    """Summary of a parsed .eml file"""
    sender: str
    sender_name: Optional[str] = None
    recipient: str
    subject: str
    reply_to: Optional[str] = None
    has_html: bool
    attachments: List[str]


class EmailAnalysisResponse(CamelModel):
    """Verdict plus quarantine decision and alert"""
    analysis: EmailVerdict
    quarantined: bool
    alert: Optional[ThreatAlertModel] = None
    email_metadata: Optional[EmailMetadata] = None


class WebhookAnalysis(CamelModel):
    is_phishing: bool
    risk_score: int
    quarantined: bool


class WebhookResponse(BaseModel):
    """Acknowledgement returned to the mail provider"""
    success: bool
    message: str
    analysis: WebhookAnalysis


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def _check_content(record: EmailRecord, client_ip: str):
    """Reject empty or oversized content before analysis"""
    if not record.subject and not record.body:
        raise HTTPException(
            status_code=400,
            detail="Please provide at least subject or body content"
        )

    checks = [(f"{record.subject}\n{record.body}", settings.MAX_EMAIL_CONTENT_LENGTH)]
    if record.html_body:
        # HTML has its own, larger limit
        checks.append((record.html_body, settings.MAX_HTML_CONTENT_LENGTH))

    for content, max_length in checks:
        _, error = sanitize_email_content(content, max_length=max_length)
        if error:
            log_security_event("INVALID_EMAIL_CONTENT", error, client_ip)
            raise HTTPException(status_code=400, detail=error)


def _analyze(record: EmailRecord) -> tuple:
    """Run the engine and raise an alert for positive verdicts"""
    result: EmailAnalysisResult = analyze_email(record)
    alert = build_email_alert(record, result)
    dispatch_alert(alert)

    if result.is_phishing:
        logger.info(
            f"Phishing email quarantined: {record.subject[:60]!r} from {record.sender} "
            f"(score {result.risk_score}, {result.classification or 'unclassified'})"
        )
    else:
        logger.info(f"Email processed safely: {record.subject[:60]!r} from {record.sender}")

    return result, alert


@router.post("/emails/analyze", response_model=EmailAnalysisResponse)
@limiter.limit(settings.ANALYZE_RATE_LIMIT)
async def analyze_email_record(request: Request, payload: EmailAnalysisRequest) -> EmailAnalysisResponse:
    """
    Analyze an email record for phishing indicators

    Returns the risk score, indicators, classification and
    whether the email should be quarantined.
    """
    record = EmailRecord(
        sender=payload.sender,
        sender_name=payload.sender_name,
        subject=payload.subject,
        body=payload.body,
        html_body=payload.html_body,
        recipient=payload.recipient,
        client_ip=payload.client_ip,
        spf_result=payload.spf_result,
        dkim_result=payload.dkim_result,
        dmarc_result=payload.dmarc_result,
        attachments=tuple(Attachment(a.filename, a.mime_type) for a in payload.attachments),
        reply_to=payload.reply_to,
    )
    _check_content(record, _client_ip(request))

    result, alert = _analyze(record)

    return EmailAnalysisResponse(
        analysis=EmailVerdict.model_validate(result.to_dict()),
        quarantined=result.is_phishing,
        alert=ThreatAlertModel.model_validate(alert.to_dict()) if alert else None
    )


@router.post("/emails/analyze-eml", response_model=EmailAnalysisResponse)
@limiter.limit(settings.UPLOAD_RATE_LIMIT)
async def analyze_eml_upload(request: Request, file: UploadFile = File(...)) -> EmailAnalysisResponse:
    """
    Analyze an uploaded .eml file

    The file is validated (size, extension, magic bytes, headers),
    parsed into a record and scored.
    """
    client_ip = _client_ip(request)
    content = await file.read()
    filename = file.filename or "unknown.eml"

    is_valid, error_msg = validate_uploaded_file(content, filename, max_size=settings.MAX_UPLOAD_BYTES)
    if not is_valid:
        log_security_event("FILE_REJECTED", f"{error_msg} - Filename: {filename}", client_ip)
        raise HTTPException(status_code=400, detail=error_msg)

    try:
        record = get_email_parser().parse_eml(content)
    except EmailParseError as e:
        raise HTTPException(status_code=400, detail=f"Failed to parse email: {e}")

    _check_content(record, client_ip)
    result, alert = _analyze(record)

    return EmailAnalysisResponse(
        analysis=EmailVerdict.model_validate(result.to_dict()),
        quarantined=result.is_phishing,
        alert=ThreatAlertModel.model_validate(alert.to_dict()) if alert else None,
        email_metadata=EmailMetadata(
            sender=record.sender,
            sender_name=record.sender_name,
            recipient=record.recipient,
            subject=record.subject,
            reply_to=record.reply_to,
            has_html=bool(record.html_body),
            attachments=[a.filename for a in record.attachments]
        )
    )


@router.post("/emails/webhook", response_model=WebhookResponse)
@limiter.limit(settings.UPLOAD_RATE_LIMIT)
async def inbound_email_webhook(
    request: Request,
    sender: str = Form("", alias="from"),
    to: str = Form(""),
    subject: str = Form(""),
    text: str = Form(""),
    html: Optional[str] = Form(None),
    envelope: Optional[str] = Form(None)
) -> WebhookResponse:
    """
    Inbound-mail webhook

    Accepts the provider's form payload (from, to, subject, text, html,
    envelope JSON with spf / dkim / dmarc / from_ip), scores the email
    and reports whether it was quarantined.
    """
    if not sender or not to or not subject or not text:
        raise HTTPException(status_code=400, detail="Missing required email fields")

    record = get_email_parser().parse_webhook(
        sender=sender, recipient=to, subject=subject, text=text, html=html, envelope=envelope
    )
    _check_content(record, _client_ip(request))

    result, _ = _analyze(record)

    return WebhookResponse(
        success=True,
        message="Email processed successfully",
        analysis=WebhookAnalysis(
            is_phishing=result.is_phishing,
            risk_score=result.risk_score,
            quarantined=result.is_phishing
        )
    )
