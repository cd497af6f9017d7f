"""
Startup initialization logic
Configures logging and records startup state on the application
"""

import logging
import time
from typing import Optional

from fastapi import FastAPI

from cybershield.core.config import settings
from cybershield.core.rule_tables import table_sizes

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None):
    """Apply the configured log level to the root logger"""
    level_name = (level or settings.LOG_LEVEL).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)
    logging.getLogger("cybershield").setLevel(getattr(logging, level_name, logging.INFO))


async def initialize_system(app: FastAPI):
    """
    Initialize system components on startup

    The rule tables are plain module constants, so startup only has to
    configure logging and publish their sizes for the status endpoint.

    Args:
        app: FastAPI application instance
    """
    try:
        configure_logging()

        app.state.started_at = time.time()
        app.state.rule_tables = table_sizes()
        app.state.initialized = True
        app.state.init_error = None

        logger.info(f"Rule tables loaded: {app.state.rule_tables}")

    except Exception as e:
        logger.error(f"Startup failed: {e}")
        app.state.init_error = str(e)
        raise


def get_init_status(app: FastAPI) -> dict:
    """Get current initialization status"""
    return {
        "initialized": getattr(app.state, "initialized", False),
        "rule_tables": getattr(app.state, "rule_tables", None) or table_sizes(),
        "error": getattr(app.state, "init_error", None)
    }
