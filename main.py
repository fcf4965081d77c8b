"""Entry point for the error reporter service."""

import logging
import sys

from error_reporter.config import load_config
from error_reporter.gateway import create_app
from error_reporter.service import build_context


def main():
    config = load_config()
    logging.basicConfig(
        level=getattr(logging, config.app_log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logger = logging.getLogger(__name__)

    context = build_context(config)
    app = create_app(context)

    logger.info(
        "Config: port=%d, log=%s, rate_limit=%s (%d/%ds), enrichment_key=%s, timeout=%ss",
        config.port, config.log_path, config.rate_limit_enabled,
        config.rate_limit_max_requests, config.rate_limit_window_seconds,
        "set" if config.enrichment_api_key else "unset",
        config.enrichment_timeout_seconds,
    )
    if not config.enrichment_api_key:
        logger.warning("GEMINI_API_KEY is not set; recommendations will be placeholders")

    logger.info("Error reporter started on port %d", config.port)
    app.run(host=config.host, port=config.port, threaded=True, use_reloader=False)


if __name__ == "__main__":
    main()
