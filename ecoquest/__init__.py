"""EcoQuest marker API.

A small REST backend for a crowd-sourced environmental action map:
- Log tree planting, cleanups and school outreach as geo-tagged markers
- List markers filtered by type or author, most recent first
- Aggregate counts globally and per user

Usage:
    ./start_server.py  # From repo root
"""

from .server import app

__all__ = ['app']
