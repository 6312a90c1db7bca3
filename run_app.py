#!/usr/bin/env python3
"""
Launcher script for Student Portal.
Handles dependency checks and launches the web server.
"""
import sys
import subprocess


def check_dependencies():
    """Check if required packages are installed."""
    try:
        import uvicorn
        import fastapi
    except ImportError as e:
        print(f"Missing dependency: {e.name}")
        print("Installing dependencies...")
        subprocess.check_call([sys.executable, "-m", "pip", "install", "-e", "."])


if __name__ == "__main__":
    print("Initializing Student Portal...")

    # 1. Check dependencies
    check_dependencies()

    # 2. Launch server
    from src.interface.portal.server import main
    main(sys.argv[1:])
