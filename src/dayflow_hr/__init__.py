"""Dayflow HR backend package.

This package is organized by feature modules (auth, employees, leave, payroll,
dashboard, notifications) with a thin Flask controller layer on top of
service/repository layers, plus a shared in-memory TTL cache.
"""
from __future__ import annotations

from .common.cache import CacheService
from .main import create_app

__all__ = ["CacheService", "create_app"]
