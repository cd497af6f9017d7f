"""
Domain and URL helpers shared by the risk engines
Pure string / pattern matching, no DNS or network access
"""

import ipaddress
import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

# Links embedded in email text or HTML
URL_PATTERN = re.compile(
    r'https?://[^\s<>"\'{}|\\^`\[\]]*[^\s<>"\'{}|\\^`\[\],.]',
    re.IGNORECASE
)

# Hostname characters accepted after urlparse has stripped userinfo/port
HOST_PATTERN = re.compile(r'^[\w.\-]+$|^[0-9a-f:.]+$', re.UNICODE)


@dataclass(frozen=True)
class ParsedUrl:
    """Normalized URL components used by the analyzers"""
    scheme: str
    host: str
    path: str


def parse_url(url: str) -> Optional[ParsedUrl]:
    """
    Parse an absolute URL into scheme, host and path.

    Returns None when the URL has no scheme, no host, an invalid port
    or characters that cannot appear in a hostname.
    """
    if not url or not url.strip():
        return None

    try:
        parsed = urlparse(url.strip())
        host = parsed.hostname or ""
        # Accessing .port validates it
        parsed.port
    except ValueError as e:
        logger.debug(f"URL parse error for {url[:80]!r}: {e}")
        return None

    if not parsed.scheme or not host:
        return None
    if not HOST_PATTERN.match(host):
        return None

    return ParsedUrl(
        scheme=parsed.scheme.lower(),
        host=host.lower(),
        path=(parsed.path or "/").lower()
    )


def extract_sender_domain(address: str) -> str:
    """Domain part of an email address, lower-cased ('' when missing)"""
    if not address:
        return ""
    parts = address.split('@')
    if len(parts) < 2:
        return ""
    return parts[1].strip().lower()


def extract_urls(text: str) -> List[str]:
    """All http(s) links in text, in order of appearance"""
    if not text:
        return []
    return URL_PATTERN.findall(text)


def is_ipv4_literal(host: str) -> bool:
    """True if the host is a bare dotted-quad IPv4 address"""
    try:
        ipaddress.IPv4Address(host)
        return True
    except ValueError:
        return False


def label_count(host: str) -> int:
    """Number of dot-separated labels in a host name"""
    return len(host.split('.'))


def has_suffix(host: str, suffixes: Iterable[str]) -> bool:
    return any(host.endswith(suffix) for suffix in suffixes)


def is_same_or_subdomain(host: str, domains: Iterable[str]) -> bool:
    """Exact match or subdomain of any of the given domains"""
    return any(host == d or host.endswith('.' + d) for d in domains)


def contains_any(text: str, words: Iterable[str]) -> bool:
    return any(word in text for word in words)


def matching(text: str, words: Iterable[str]) -> List[str]:
    """Words (in table order) that occur in text as substrings"""
    return [word for word in words if word in text]
