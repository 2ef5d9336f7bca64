"""
Gas Price API Package.

Read-only HTTP access to the latest stored gas price per network.

Run with:
    python run_api.py
"""

from api.app import create_app


__all__ = ["create_app"]
