"""Seatbelt: development environment and project health auditing."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
