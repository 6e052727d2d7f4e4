# domain_scout/__init__.py
"""
DomainScout package initializer.
Defines package version; the CLI lives in :mod:`domain_scout.cli`.
"""
__version__ = "0.1.0"
