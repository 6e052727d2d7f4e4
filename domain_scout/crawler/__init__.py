# domain_scout/crawler/__init__.py
"""Crawler subpackage: fetching, link extraction, scheduling and the crawl loop."""
