#!/usr/bin/env python3
"""
Run script for the Claim Intake API.

Usage:
    python run_api.py

Settings come from environment variables or a .env file (see .env.example).
The terminal and browser front-ends talk to this server:
    python -m src.frontend.console_app list
    streamlit run src/frontend/streamlit_app.py
"""

import logging
import os
import sys

# Quiet third-party loggers before anything else imports them
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logging.getLogger("python_multipart").setLevel(logging.WARNING)

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def main():
    """Run the claims API server."""
    import uvicorn
    from src.api.app import configure_logging
    from src.utils.config import get_settings

    settings = get_settings()
    configure_logging(settings)

    print("=" * 60)
    print("Claim Intake API")
    print("=" * 60)
    print(f"Server: http://{settings.host}:{settings.port}")
    print(f"Database: {settings.database_url}")
    print(f"CORS origins: {', '.join(settings.cors_origins)}")
    print("=" * 60)
    print()
    print("Endpoints:")
    print(f"  - Health: http://{settings.host}:{settings.port}/health")
    print(f"  - Claims: http://{settings.host}:{settings.port}/claims")
    print(f"  - Docs:   http://{settings.host}:{settings.port}/docs")
    print()

    uvicorn.run(
        "src.api.app:build_default_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
