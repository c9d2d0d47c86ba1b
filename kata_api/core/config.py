"""Configuration management for the kata CLI.

Handles loading and caching of the optional JSON configuration file
(KATA_CLI_CONFIG_PATH, falling back to 'config.json' in the CWD) and
exposes each section with its defaults applied.

Sections:
- general: logging
- network: pacing, retries and timeouts for the catalog host
- endpoints: URL templates for search, detail and train pages
- download: default destination, editor and instructions file name
"""
from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

_CONFIG_CACHE: Optional[Dict[str, Any]] = None

APP_DIR = os.path.join(os.path.expanduser("~"), ".kata_cli")


def get_config(force_reload: bool = False) -> Dict[str, Any]:
    """Load project configuration JSON.

    Looks for the path in KATA_CLI_CONFIG_PATH env var; falls back to 'config.json' in CWD.
    Caches the result unless force_reload is True.

    Returns:
        Configuration dictionary (empty dict if file not found or invalid)
    """
    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None and not force_reload:
        return _CONFIG_CACHE

    path = os.environ.get("KATA_CLI_CONFIG_PATH", "config.json")
    try:
        if os.path.exists(path):
            with open(path, "r", encoding="utf-8") as f:
                _CONFIG_CACHE = json.load(f) or {}
        else:
            _CONFIG_CACHE = {}
    except (OSError, ValueError) as e:
        logger.error("Failed to load config from %s: %s", path, e)
        _CONFIG_CACHE = {}

    return _CONFIG_CACHE


def _section(name: str) -> Dict[str, Any]:
    section = get_config().get(name, {})
    if not isinstance(section, dict):
        logger.warning("Config section '%s' is not an object; ignoring it", name)
        return {}
    return dict(section)


def get_general_config() -> Dict[str, Any]:
    """Get general configuration section (logging)."""
    general = _section("general")
    general.setdefault("log_level", "INFO")
    general.setdefault("log_file", os.path.join(APP_DIR, "kata_cli.log"))
    return general


def get_network_config() -> Dict[str, Any]:
    """Return network policy for the catalog host, with sensible defaults.

    Returns:
        Network configuration dictionary with all fields populated
    """
    net = _section("network")

    net.setdefault("delay_ms", 0)
    net.setdefault("jitter_ms", 0)
    net.setdefault("max_attempts", 3)
    net.setdefault("base_backoff_s", 1.0)
    net.setdefault("backoff_multiplier", 1.5)
    net.setdefault("max_backoff_s", 30.0)
    net.setdefault("timeout_s", 15)

    # Ensure headers is a dict if provided
    if not isinstance(net.get("headers", {}), dict):
        net["headers"] = {}
    net.setdefault("headers", {})

    return net


def get_endpoint_config() -> Dict[str, Any]:
    """Get URL templates for the catalog.

    Returns:
        Endpoint dictionary; templates use str.format placeholders {id} and {language}
    """
    endpoints = _section("endpoints")
    endpoints.setdefault("search_url", "https://www.codewars.com/kata/search")
    endpoints.setdefault("kata_url", "https://www.codewars.com/kata/{id}")
    endpoints.setdefault("api_url", "https://www.codewars.com/api/v1/code-challenges/{id}")
    endpoints.setdefault("train_url", "https://www.codewars.com/kata/{id}/train/{language}")
    return endpoints


def get_download_config() -> Dict[str, Any]:
    """Get download-related configuration section.

    Returns:
        Download configuration dictionary with defaults
    """
    dl = _section("download")
    dl.setdefault("default_path", os.path.join(os.path.expanduser("~"), "katas"))
    dl.setdefault("default_editor", "code")
    dl.setdefault("instructions_filename", "README.md")
    dl.setdefault("run_preinstall", True)
    return dl


def run_preinstall() -> bool:
    """Check if per-language scaffolding should run before writing files."""
    return bool(get_download_config().get("run_preinstall", True))
