"""
Email Parser Utility
Builds EmailRecord objects from .eml files and inbound webhook payloads
"""

import email
import email.header
import json
import re
from email import policy
from email.message import EmailMessage
from email.parser import BytesParser
from email.utils import parseaddr
from typing import Dict, List, Optional, Tuple
import logging

from cybershield.core.email_analyzer import Attachment, EmailRecord

logger = logging.getLogger(__name__)

# spf=pass / dkim=fail / dmarc=none inside Authentication-Results
AUTH_RESULT_PATTERN = re.compile(r'\b(spf|dkim|dmarc)\s*=\s*([a-z]+)', re.IGNORECASE)

# Leading verdict of a Received-SPF header ("Pass (domain of ...)")
RECEIVED_SPF_PATTERN = re.compile(r'^\s*([a-z]+)', re.IGNORECASE)

# "Display Name <address>"
DISPLAY_ADDRESS_PATTERN = re.compile(r'^(.*?)\s*<(.+?)>$')


class EmailParseError(ValueError):
    """Raised when an inbound email cannot be turned into an EmailRecord"""


def split_display_address(value: str) -> Tuple[Optional[str], str]:
    """Split 'Name <addr>' into (name, addr); plain addresses have no name"""
    value = (value or "").strip()
    match = DISPLAY_ADDRESS_PATTERN.match(value)
    if not match:
        return None, value
    name = match.group(1).strip().strip('"').strip() or None
    return name, match.group(2).strip()


def parse_authentication_results(header_value: str) -> Dict[str, str]:
    """Extract spf/dkim/dmarc verdicts from an Authentication-Results header"""
    results: Dict[str, str] = {}
    for method, verdict in AUTH_RESULT_PATTERN.findall(header_value or ""):
        # First occurrence wins when a header lists several signatures
        results.setdefault(method.lower(), verdict.lower())
    return results


class EmailParser:
    """Parse raw email sources into records for analysis"""

    def parse_eml(self, content: bytes) -> EmailRecord:
        """
        Parse .eml file content

        Args:
            content: Raw bytes of the .eml file

        Returns:
            EmailRecord ready for analyze_email()

        Raises:
            EmailParseError: when the bytes are not a readable message
        """
        try:
            msg = BytesParser(policy=policy.default).parsebytes(content)
        except Exception as e:
            logger.error(f"Failed to parse email: {e}")
            raise EmailParseError(str(e)) from e

        if not msg.keys():
            raise EmailParseError("No email headers found")

        return self._build_record(msg)

    def parse_webhook(self, sender: str, recipient: str, subject: str, text: str,
                      html: Optional[str] = None, envelope: Optional[str] = None) -> EmailRecord:
        """
        Build a record from an inbound-mail webhook payload.

        The sender may include a display name; the envelope is a JSON
        object carrying spf / dkim / dmarc / from_ip. A malformed
        envelope is ignored.
        """
        sender_name, sender_address = split_display_address(sender)

        envelope_data: Dict[str, str] = {}
        if envelope:
            try:
                loaded = json.loads(envelope)
                if isinstance(loaded, dict):
                    envelope_data = loaded
            except (json.JSONDecodeError, TypeError) as e:
                logger.warning(f"Ignoring malformed webhook envelope: {e}")

        return EmailRecord(
            sender=sender_address,
            sender_name=sender_name,
            recipient=recipient,
            subject=subject,
            body=text,
            html_body=html or None,
            client_ip=envelope_data.get("from_ip"),
            spf_result=envelope_data.get("spf"),
            dkim_result=envelope_data.get("dkim"),
            dmarc_result=envelope_data.get("dmarc"),
        )

    def _build_record(self, msg: EmailMessage) -> EmailRecord:
        """Extract record fields from a parsed message"""
        sender_name, sender_address = parseaddr(self._decode_header(msg.get('From', '')))
        _, recipient = parseaddr(self._decode_header(msg.get('To', '')))
        _, reply_to = parseaddr(self._decode_header(msg.get('Reply-To', '')))
        subject = self._decode_header(msg.get('Subject', ''))

        body_text, body_html, attachments = self._extract_parts(msg)
        auth = self._extract_auth_results(msg)

        return EmailRecord(
            sender=sender_address,
            sender_name=sender_name or None,
            recipient=recipient,
            subject=subject,
            body=body_text or self._strip_html(body_html),
            html_body=body_html or None,
            client_ip=self._extract_client_ip(msg),
            spf_result=auth.get("spf"),
            dkim_result=auth.get("dkim"),
            dmarc_result=auth.get("dmarc"),
            attachments=tuple(attachments),
            reply_to=reply_to or None,
        )

    def _extract_parts(self, msg: EmailMessage) -> Tuple[str, str, List[Attachment]]:
        """Plain body, HTML body and attachment metadata"""
        body_text = ""
        body_html = ""
        attachments: List[Attachment] = []

        for part in msg.walk():
            if part.is_multipart():
                continue

            content_type = part.get_content_type()
            filename = part.get_filename()

            if filename or part.get_content_disposition() == "attachment":
                attachments.append(Attachment(
                    filename=self._decode_header(filename or ""),
                    mime_type=content_type
                ))
            elif content_type == "text/plain" and not body_text:
                body_text = self._read_text(part)
            elif content_type == "text/html" and not body_html:
                body_html = self._read_text(part)

        return body_text, body_html, attachments

    @staticmethod
    def _read_text(part: EmailMessage) -> str:
        try:
            return part.get_content()
        except Exception:
            payload = part.get_payload(decode=True) or b""
            return payload.decode('utf-8', errors='ignore')

    @staticmethod
    def _extract_auth_results(msg: EmailMessage) -> Dict[str, str]:
        results: Dict[str, str] = {}
        for header in msg.get_all('Authentication-Results', []):
            for method, verdict in parse_authentication_results(str(header)).items():
                results.setdefault(method, verdict)

        if "spf" not in results:
            received_spf = msg.get('Received-SPF')
            if received_spf:
                match = RECEIVED_SPF_PATTERN.match(str(received_spf))
                if match:
                    results["spf"] = match.group(1).lower()

        return results

    @staticmethod
    def _extract_client_ip(msg: EmailMessage) -> Optional[str]:
        for header in ('X-Originating-IP', 'X-Sender-IP'):
            value = msg.get(header)
            if value:
                return str(value).strip().strip('[]')
        return None

    def _decode_header(self, header: str) -> str:
        """Decode email header value"""
        if not header:
            return ""
        try:
            decoded_parts = email.header.decode_header(str(header))
            result = []
            for part, charset in decoded_parts:
                if isinstance(part, bytes):
                    result.append(part.decode(charset or 'utf-8', errors='ignore'))
                else:
                    result.append(str(part))
            return ''.join(result)
        except Exception:
            return str(header)

    def _strip_html(self, html: str) -> str:
        """Simple HTML tag removal"""
        if not html:
            return ""
        # Remove script and style elements
        html = re.sub(r'<script[^>]*>.*?</script>', '', html, flags=re.DOTALL | re.IGNORECASE)
        html = re.sub(r'<style[^>]*>.*?</style>', '', html, flags=re.DOTALL | re.IGNORECASE)
        # Remove tags
        text = re.sub(r'<[^>]+>', ' ', html)
        # Clean whitespace
        text = re.sub(r'\s+', ' ', text)
        return text.strip()


# Singleton instance
_parser: Optional[EmailParser] = None


def get_email_parser() -> EmailParser:
    """Get or create email parser instance"""
    global _parser
    if _parser is None:
        _parser = EmailParser()
    return _parser
