# File: domain_scout/report/__init__.py
"""domain_scout.report: Сохранение результатов сканирования, используемое CLI и тестами."""

from __future__ import annotations

from domain_scout.report.json_report import render_json

__all__ = ["render_json"]
