"""Core utilities for the kata catalog client.

- config: Configuration loading and section defaults
- network: HTTP session, requests, rate limiting
- naming: Slugs, file extensions and search path segments
"""

__all__ = [
    "config",
    "network",
    "naming",
]
