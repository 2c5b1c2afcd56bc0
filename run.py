"""
Quick start script for running the interview coach server.
Handles basic environment checks before starting.
"""

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

PLACEHOLDER_KEYS = ("", "your_gemini_api_key_here", "your_openai_api_key_here")


def check_env_file() -> bool:
    """Check that the selected AI backend has a credential."""
    env_path = Path(__file__).parent / ".env"

    if env_path.exists():
        load_dotenv(env_path)
    else:
        print("NOTE: .env file not found, using process environment only")
        print("  Copy .env.example to .env to configure the server")

    backend = os.getenv("AI_BACKEND", "gemini").lower()
    if backend not in ("gemini", "openai"):
        print(f"ERROR: Unknown AI_BACKEND {backend!r} (expected 'gemini' or 'openai')")
        return False

    key_name = "GEMINI_API_KEY" if backend == "gemini" else "OPENAI_API_KEY"
    if os.getenv(key_name, "") in PLACEHOLDER_KEYS:
        print(f"ERROR: {key_name} not configured!")
        if backend == "gemini":
            print("  - Get API key: https://aistudio.google.com/app/apikey")
        return False

    print(f"✓ Environment configuration looks good (backend={backend})")
    return True


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="AI Interview Coach - Backend Server")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")
    args = parser.parse_args()

    print("=" * 60)
    print("  AI Interview Coach - Backend Server")
    print("=" * 60)
    print()

    if not check_env_file():
        sys.exit(1)

    # Imported after the .env check so Settings sees the loaded variables
    import uvicorn
    from interview_coach.config import Settings
    from interview_coach.utils.logging_config import setup_logging

    settings = Settings()
    setup_logging(
        level=settings.log_level,
        json_format=settings.json_logging,
        log_file=settings.log_file,
    )

    print()
    print("API will be available at:")
    print(f"  - http://localhost:{settings.port}")
    print(f"  - API docs: http://localhost:{settings.port}/docs")
    print()
    print("Press CTRL+C to stop the server")
    print("=" * 60)
    print()

    uvicorn.run(
        "interview_coach.main:app",
        host=settings.host,
        port=settings.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
        timeout_graceful_shutdown=5
    )


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\n" + "=" * 60)
        print("  Server stopped by user (CTRL+C)")
        print("=" * 60)
        sys.exit(0)
