"""
Request input checks
Guards the service boundary before anything reaches the risk engines

The engines accept any string; these checks only protect the service
(size limits, binary uploads, control characters). Every check returns
a (value, error) pair and the caller turns the error into an HTTP 400.
"""

import re
import logging
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

MAX_URL_LENGTH = 2048
MAX_EMAIL_CONTENT_LENGTH = 50000
MAX_UPLOAD_BYTES = 10 * 1024 * 1024
MAX_FILENAME_LENGTH = 255

# Control characters other than tab / newline / carriage return
CONTROL_CHAR_PATTERN = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]')

SCHEME_PATTERN = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.\-]*://')

UPLOAD_EXTENSIONS = frozenset({'.eml', '.txt'})

# Leading bytes of formats that can never be an RFC 822 message
BINARY_SIGNATURES = (
    (b'MZ', 'Windows Executable'),
    (b'\x7fELF', 'Linux Executable'),
    (b'PK\x03\x04', 'ZIP Archive'),
    (b'Rar!', 'RAR Archive'),
    (b'7z\xbc\xaf', '7-Zip Archive'),
    (b'\x1f\x8b', 'GZIP Archive'),
    (b'%PDF', 'PDF Document'),
    (b'\xd0\xcf\x11\xe0', 'OLE Office Document'),
    (b'\x89PNG', 'PNG Image'),
    (b'\xff\xd8\xff', 'JPEG Image'),
    (b'GIF8', 'GIF Image'),
    (b'#!', 'Script'),
    (b'<?php', 'PHP Script'),
)

# A real message carries at least one of these in its first lines
HEADER_SNIFF_PATTERN = re.compile(
    r'^(from|to|subject|date|received|return-path|message-id|mime-version|content-type):',
    re.IGNORECASE | re.MULTILINE
)


def sanitize_url_input(url: str, max_length: int = MAX_URL_LENGTH) -> Tuple[str, Optional[str]]:
    """
    Trim and bound a URL submitted for website analysis.

    Unparseable URLs pass: the website engine reports them as a
    critical "Invalid URL" verdict rather than an error.
    """
    url = (url or "").strip()
    if not url:
        return "", "URL is required"

    if len(url) > max_length:
        return "", f"URL exceeds maximum length of {max_length} characters"

    if CONTROL_CHAR_PATTERN.search(url):
        logger.warning(f"Blocked control characters in URL: {url[:50]!r}")
        return "", "URL contains invalid characters"

    return url, None


def ensure_scheme(url: str, default_scheme: str = "https") -> str:
    """example.com -> https://example.com; URLs with a scheme are unchanged"""
    if SCHEME_PATTERN.match(url):
        return url
    return f"{default_scheme}://{url.lstrip('/')}"


def sanitize_email_content(content: str, max_length: int = MAX_EMAIL_CONTENT_LENGTH) -> Tuple[str, Optional[str]]:
    """Reject empty, oversized or NUL-carrying email text"""
    if not content:
        return "", "Email content cannot be empty"

    if len(content) > max_length:
        return "", f"Email content exceeds maximum length of {max_length} characters"

    if '\x00' in content:
        logger.warning("Blocked NUL byte in email content")
        return "", "Invalid email content"

    return content, None


def _binary_type(content: bytes) -> Optional[str]:
    return next((label for magic, label in BINARY_SIGNATURES if content.startswith(magic)), None)


def validate_uploaded_file(content: bytes, filename: str,
                           max_size: int = MAX_UPLOAD_BYTES) -> Tuple[bool, Optional[str]]:
    """
    Check an uploaded .eml before parsing.

    Order: size, emptiness, filename, extension, binary signature,
    header sniff. The first failing check decides the message.
    """
    if len(content) > max_size:
        log_security_event("UPLOAD_TOO_LARGE", f"{len(content)} bytes (limit {max_size})")
        return False, f"File size exceeds {max_size // (1024 * 1024)}MB limit"

    if not content:
        return False, "Uploaded file is empty"

    name = (filename or "").strip()
    if not name or '\x00' in name or len(name) > MAX_FILENAME_LENGTH:
        log_security_event("UPLOAD_BAD_FILENAME", f"{name[:50]!r}")
        return False, "Invalid filename detected"

    suffix = '.' + name.lower().rsplit('.', 1)[-1] if '.' in name else ''
    if suffix not in UPLOAD_EXTENSIONS:
        log_security_event("UPLOAD_BAD_EXTENSION", suffix or "(none)")
        return False, f"Only {', '.join(sorted(UPLOAD_EXTENSIONS))} files are allowed"

    binary_type = _binary_type(content)
    if binary_type:
        log_security_event("UPLOAD_BINARY_CONTENT", f"{binary_type} named {name}")
        return False, f"File appears to be a {binary_type}, not an email file"

    if not HEADER_SNIFF_PATTERN.search(content[:2000].decode('utf-8', errors='ignore')):
        log_security_event("UPLOAD_NOT_EMAIL", name)
        return False, "File does not appear to be a valid email file"

    return True, None


def log_security_event(event_type: str, details: str, ip_address: Optional[str] = None):
    """Single WARNING line per rejected request, greppable by the SECURITY_EVENT prefix"""
    parts = [f"SECURITY_EVENT: {event_type}"]
    if ip_address:
        parts.append(f"IP: {ip_address}")
    parts.append(f"Details: {details}")
    logger.warning(" | ".join(parts))
