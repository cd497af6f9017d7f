"""
Rule Tables
Fixed lookup data shared by the email and website risk engines

All collections are immutable and built once at import time.
"""

from types import MappingProxyType

# ---------------------------------------------------------------------------
# Email: sender domain reputation
# ---------------------------------------------------------------------------

# Known phishing domains
KNOWN_MALICIOUS_DOMAINS = frozenset({
    'amaz0n-verify.com', 'paypal-security.net', 'microsoft-365.org',
    'google-security.net', 'apple-verification.com', 'facebook-security.org',
    'instagram-support.net', 'twitter-verification.org', 'linkedin-security.com',
    'bank-update.com', 'account-verify.net', 'security-alert.org',
})

# Legitimate sender domains (substring match outside exact equality = spoofing)
LEGITIMATE_EMAIL_DOMAINS = (
    'amazon.com', 'paypal.com', 'microsoft.com', 'google.com', 'apple.com',
    'facebook.com', 'instagram.com', 'twitter.com', 'linkedin.com',
    'bank.com', 'chase.com', 'wellsfargo.com', 'bankofamerica.com',
    'gmail.com', 'outlook.com', 'yahoo.com', 'zoho.com',
)

SECURITY_THEMED_DOMAIN_WORDS = ('verify', 'secure', 'update', 'alert')

TYPOSQUAT_PATTERNS = (
    'micorsoft', 'gogle', 'amazn', 'paypa', 'appel', 'facebok', 'linkedn',
)

EMAIL_SUSPICIOUS_TLDS = (
    '.tk', '.ml', '.ga', '.cf', '.xyz', '.download', '.racing', '.webcam',
    '.accountant', '.cricket', '.faith', '.gdn', '.loan', '.science',
)

# ---------------------------------------------------------------------------
# Email: content
# ---------------------------------------------------------------------------

PHISHING_KEYWORDS = (
    'verify account', 'suspended account', 'urgent action required',
    'click here immediately', 'confirm identity', 'security alert',
    'unusual activity', 'account limitation', 'expires today',
    'act now', 'limited time', 'winning prize', 'congratulations you won',
    'tax refund', 'inheritance', 'lottery winner', 'prince nigeria',
    'update payment', 'confirm billing', 'update card', 'confirm password',
    're-activate account', 'unlock account', 'verify banking', 'confirm transaction',
    'click here now', 'do not ignore', 'urgent notice', 'final notice',
    'immediate action', 'action required', 'respond now', 'confirm details',
    'validate account', 'authorize transaction', 'resolve issue', 'complete verification',
    'attack', 'compromised', 'breached', 'hacked', 'malware', 'virus', 'threat',
    'infected', 'unauthorized access', 'data breach', 'ransomware', 'click link',
    'open attachment', 'download file', 'enable macros', 'install update',
)

# Terms that name a threat family when they occur in the keyword, host or
# domain an indicator cites, highest priority first
CATEGORY_HINT_TERMS = (
    ('credential_theft', ('credential', 'password')),
    ('malware_delivery', ('malware', 'attachment')),
    ('financial_fraud', ('financial', 'banking', 'payment')),
    ('business_email_compromise', ('brand', 'impersonation')),
)

URGENCY_WORDS = (
    'urgent', 'immediately', 'expires', 'suspend', 'limited time', 'act now',
    'asap', 'quickly',
)

CREDENTIAL_WORDS = ('password', 'pin', 'ssn', 'social security', 'credit card', 'cvv')

VERIFY_WORDS = ('verify', 'confirm', 'validate', 'authenticate', 'authorize')

ACCOUNT_THREAT_WORDS = ('suspend', 'close', 'freeze', 'lock', 'block', 'deactivate', 'terminate')

COMMON_MISSPELLINGS = ('recieve', 'seperate', 'occured', 'untill', 'goverment', 'adress', 'sincerly')

INFORMAL_MARKERS = ('u r', 'ur', 'wud', 'shud', 'cud')

GENERIC_GREETINGS = ('dear user', 'dear customer', 'dear valued', 'dear sir', 'dear madam')

# ---------------------------------------------------------------------------
# Email: links, sender, attachments, behavior, HTML
# ---------------------------------------------------------------------------

URL_SHORTENERS = frozenset({
    'bit.ly', 'tinyurl.com', 't.co', 'goo.gl', 'ow.ly', 'shortened.link', 'short.link',
})

LINK_CLAIMED_BRANDS = ('paypal', 'amazon', 'microsoft', 'bank')

DISPLAY_NAME_BRANDS = (
    'amazon', 'paypal', 'microsoft', 'google', 'apple', 'facebook', 'bank',
    'chase', 'wells', 'irs', 'netflix', 'uber',
)

SUSPICIOUS_SENDER_MARKERS = ('+', 'noreply', 'donotreply', 'no-reply')

FREE_EMAIL_DOMAINS = frozenset({'gmail.com', 'yahoo.com', 'hotmail.com', 'outlook.com', 'aol.com'})

BUSINESS_ENTITY_WORDS = ('bank', 'paypal', 'amazon', 'company')

DANGEROUS_ATTACHMENT_EXTENSIONS = frozenset({
    '.exe', '.scr', '.bat', '.cmd', '.com', '.pif', '.vbs', '.js',
    '.jar', '.zip', '.rar', '.7z', '.iso',
})

EXECUTABLE_MIME_MARKERS = ('x-msdownload', 'x-msdos')

INVOICE_WORDS = ('invoice', 'receipt', 'billing')
SUPPORT_WORDS = ('support', 'help', 'ticket')
PRIZE_WORDS = ('winner', 'prize', 'reward', 'congratulations')
SECRECY_WORDS = ('urgent', 'confidential')
MONEY_MOVEMENT_WORDS = ('transfer', 'wire', 'payment')
INVOICE_ACTION_WORDS = ('click', 'verify', 'confirm')
SUPPORT_ACTION_WORDS = ('click', 'confirm', 'verify')
PRIZE_ACTION_WORDS = ('claim', 'click', 'verify')

HIDDEN_CONTENT_MARKERS = ('display:none', 'visibility:hidden', 'color:#ffffff')
INLINE_EVENT_HANDLERS = ('onclick', 'onload', 'onerror')

# ---------------------------------------------------------------------------
# Website
# ---------------------------------------------------------------------------

TRUSTED_WEBSITE_DOMAINS = (
    'google.com', 'apple.com', 'microsoft.com', 'amazon.com', 'facebook.com',
    'github.com', 'stackoverflow.com', 'wikipedia.org', 'reddit.com', 'twitter.com',
    'linkedin.com', 'youtube.com', 'instagram.com', 'paypal.com', 'stripe.com',
    'twilio.com', 'openai.com', 'slack.com', 'zoom.com', 'netflix.com',
    'adobe.com', 'atlassian.com', 'ibm.com', 'oracle.com', 'salesforce.com',
    'okta.com', 'auth0.com', 'cloudflare.com', 'heroku.com', 'vercel.com',
    'verifiedbydigiticert.com', 'digicert.com', 'sectigo.com',
    'chase.com', 'bofa.com', 'wellsfargo.com', 'hsbc.com', 'citigroup.com',
    'capitalone.com', 'bankofamerica.com', 'americanexpress.com',
    'google-analytics.com', 'googleapis.com', 'cdn.jsdelivr.net', 'cdnjs.cloudflare.com',
)

SPOOFED_BRANDS = ('paypal', 'amazon', 'microsoft', 'apple', 'google', 'facebook', 'bank', 'chase')

SUSPICIOUS_HOST_TOKENS = (
    'verify', 'confirm', 'update', 'secure', 'alert', 'urgent', 'warning',
    'banking', 'account', 'login', 'auth', 'signin', 'paypal', 'amazon',
    'apple', 'microsoft', 'google', 'bank', 'crypto', 'wallet',
)

WEBSITE_SUSPICIOUS_TLDS = ('.tk', '.ml', '.ga', '.cf', '.xyz', '.download', '.racing', '.webcam')

SENSITIVE_PATH_TOKENS = ('admin', 'login', 'verify')

MALWARE_PATH_TOKENS = ('malware', 'virus', 'trojan', 'ransomware')

TIER_DESCRIPTIONS = MappingProxyType({
    'safe': 'This website appears to be safe and secure.',
    'low': 'This website has minimal security issues but should be used with caution.',
    'medium': 'This website has moderate security concerns. Avoid entering sensitive information.',
    'high': 'This website has significant security risks. Do not visit or enter personal information.',
    'critical': 'This website is likely malicious. Block access immediately.',
})


def table_sizes() -> dict:
    """Number of entries in each rule table, reported by the status endpoint"""
    return {
        "known_malicious_domains": len(KNOWN_MALICIOUS_DOMAINS),
        "legitimate_email_domains": len(LEGITIMATE_EMAIL_DOMAINS),
        "phishing_keywords": len(PHISHING_KEYWORDS),
        "trusted_website_domains": len(TRUSTED_WEBSITE_DOMAINS),
        "dangerous_attachment_extensions": len(DANGEROUS_ATTACHMENT_EXTENSIONS),
    }
