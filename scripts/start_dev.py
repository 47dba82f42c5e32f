#!/usr/bin/env python3
"""
Development startup script.

Runs the storefront API with auto-reload after a few pre-flight checks.
"""

import os
import shutil
import subprocess
import sys
from pathlib import Path

# Project root
PROJECT_ROOT = Path(__file__).parent.parent


def check_dependencies():
    """Check if required dependencies are installed."""
    try:
        import fastapi
        import httpx
        import pydantic_settings
        import uvicorn
        print("✓ All core dependencies installed")
        return True
    except ImportError as e:
        print(f"✗ Missing dependency: {e.name}")
        print("\nRun: pip install -e .[test]")
        return False


def check_env():
    """Check if .env file exists."""
    env_file = PROJECT_ROOT / "config" / ".env"
    env_example = PROJECT_ROOT / "config" / ".env.example"

    if env_file.exists():
        print("✓ Configuration file found")
        return True
    elif env_example.exists():
        print("! Configuration file not found, copying from example...")
        shutil.copy(env_example, env_file)
        print("✓ Created config/.env from example")
        print("  Please edit config/.env with your settings")
        return True
    else:
        print("✗ No configuration file found")
        return False


def start_service(port: str):
    """Start the storefront in development mode."""
    print(f"\n🛒 Starting Storefront on http://localhost:{port} ...")
    print(f"📍 API docs: http://localhost:{port}/docs")
    print("\nPress Ctrl+C to stop")

    process = subprocess.Popen(
        [
            sys.executable, "-m", "uvicorn",
            "storefront.main:app",
            "--reload",
            "--host", "0.0.0.0",
            "--port", port,
        ],
        cwd=PROJECT_ROOT,
        env={**os.environ, "STOREFRONT_DEBUG": "true"},
    )

    try:
        process.wait()
    except KeyboardInterrupt:
        print("\n\nShutting down...")
        process.terminate()
        process.wait()
        print("Storefront stopped.")


def main():
    print("=" * 60)
    print("Storefront - Development Server")
    print("=" * 60)

    # Pre-flight checks
    print("\nRunning pre-flight checks...")

    if not check_dependencies():
        sys.exit(1)

    if not check_env():
        sys.exit(1)

    print("\n✓ All checks passed!")

    start_service(os.environ.get("STOREFRONT_PORT", "8001"))


if __name__ == "__main__":
    main()
