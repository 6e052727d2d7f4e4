# File: domain_scout/parser/__init__.py
"""domain_scout.parser: Разбор XML-документов (sitemap, RSS/Atom)."""
