from __future__ import annotations

import logging
from typing import Optional

import uvicorn

from config.settings import Settings, get_settings, validate_settings


logger = logging.getLogger("claude_chat")


def run(settings: Optional[Settings] = None) -> int:
    """Validate configuration, then serve the app. Returns a process exit code."""
    settings = settings or get_settings()
    check = validate_settings(settings)
    if not check.ok:
        if not logging.getLogger().handlers:
            logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s - %(message)s")
        for error in check.errors:
            logger.error(error)
        logger.error("Please create a .env file with ANTHROPIC_API_KEY=your_api_key")
        return 1

    from app.main import app

    port = int(settings.port)
    base_url = f"http://{settings.host}:{port}"
    logger.info("========================================")
    logger.info("Claude API server starting")
    logger.info("Config: env=%s model=%s key_set=%s", settings.app_env, settings.claude_model, bool(settings.anthropic_api_key))
    logger.info("Server: %s", base_url)
    logger.info("Health check: GET %s/api/health", base_url)
    logger.info("Ask endpoint: POST %s/ask", base_url)
    logger.info("Static files: %s", settings.client_build_dir)
    logger.info("========================================")

    uvicorn.run(app, host=settings.host, port=port, log_level=settings.log_level.lower())
    return 0


if __name__ == "__main__":
    raise SystemExit(run())
