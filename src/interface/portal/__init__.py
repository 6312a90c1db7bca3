"""
Portal - Login, signup and dashboard pages for the student portal

Provides the FastAPI app serving the HTML pages and the JSON auth API.

Quick Start:
    python -m src.interface.portal.server

    Then open http://localhost:8000 in your browser.
"""

__version__ = "1.0.0"
__all__ = ["server", "pages"]
