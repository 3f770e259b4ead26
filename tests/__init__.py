"""Test package for the career stats scraper."""
