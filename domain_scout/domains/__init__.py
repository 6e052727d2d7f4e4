# File: domain_scout/domains/__init__.py
"""domain_scout.domains: Работа с доменами: суффиксы, исключения, DNS, WHOIS."""
