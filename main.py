#!/usr/bin/env python3
"""
Avatar Chat - Main Application Entry Point
Backend for the animated avatar chat widget.

Features:
- OpenAI chat completions with Anthropic fallback
- Keyword-based avatar emotion tags
- Optional speech synthesis returned as base64 audio
- Static fallback reply when no provider is available

Version: 1.0.0
Python: 3.10+
"""

import sys
import logging

import uvicorn

from avatar_chat.api.server import create_app
from avatar_chat.core.config import load_config
from avatar_chat.utils.logger import setup_logging

def check_python_version():
    """Ensure compatible Python version."""
    if sys.version_info < (3, 10):
        print("❌ Python 3.10 or higher is required!")
        print(f"Current version: {sys.version}")
        sys.exit(1)

def main():
    """Main application entry point."""
    check_python_version()

    # Load configuration
    config = load_config()

    # Setup logging
    setup_logging(config.log_level, str(config.log_dir), config.app_name)
    logger = logging.getLogger(__name__)
    logger.info(f"Starting {config.app_name} v{config.version}")

    if not (config.ai.openai_api_key or config.ai.anthropic_api_key):
        logger.warning("No provider credentials configured - every reply will be the static fallback")

    try:
        app = create_app(config)
        uvicorn.run(app, host=config.server.host, port=config.server.port, log_config=None)

    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
    except Exception as e:
        logger.error(f"Application error: {e}", exc_info=True)
        sys.exit(1)

if __name__ == "__main__":
    main()
