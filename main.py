"""
CyberShield Risk Engine v1.0
FastAPI service exposing rule-based phishing email and malicious website scoring

Entry point: python main.py
"""

import os
import sys
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.resolve()
sys.path.insert(0, str(PROJECT_ROOT))

from cybershield.core.config import settings, APP_VERSION
from cybershield.api.limiter import limiter
from cybershield.api.routes import health, email_analysis, website_analysis
from cybershield.utils.startup import initialize_system

# Create FastAPI application
app = FastAPI(
    title="CyberShield Risk Engine",
    description="Rule-based risk scoring for phishing emails and malicious websites",
    version=APP_VERSION,
    docs_url="/api/docs",
    redoc_url="/api/redoc"
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS middleware - restrict origins in production
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    """Add security headers to all responses"""
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    response.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"
    if not settings.DEBUG:
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
    return response


@app.on_event("startup")
async def startup_event():
    """Initialize system components on startup"""
    await initialize_system(app)


# Include API routes
app.include_router(health.router, prefix="/api", tags=["Health"])
app.include_router(email_analysis.router, prefix="/api", tags=["Email Analysis"])
app.include_router(website_analysis.router, prefix="/api", tags=["Website Analysis"])


@app.get("/")
async def service_index():
    """Service name and documentation link"""
    return {
        "service": "CyberShield Risk Engine",
        "version": APP_VERSION,
        "docs": "/api/docs"
    }


if __name__ == "__main__":
    # Run the server (PORT env var for container deployment)
    port = int(os.environ.get("PORT", settings.PORT))
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=port,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
