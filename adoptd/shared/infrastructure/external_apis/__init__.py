"""Resilient HTTP client for third-party APIs."""
