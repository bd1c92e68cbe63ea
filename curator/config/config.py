"""
Configuration module for Idea Curator.

Loads environment variables from .env file and exposes them as typed configuration values.
Uses python-dotenv for loading and provides safe defaults where appropriate.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file from project root
# The .env file should be in the root directory (parent of curator/)
_project_root = Path(__file__).parent.parent.parent
_env_path = _project_root / ".env"
load_dotenv(_env_path)


# =============================================================================
# Application Environment
# =============================================================================

# Application environment: "development", "staging", or "production"
APP_ENV: str = os.getenv("APP_ENV", "development")

# Enable debug mode for verbose logging (cache hits, fetch timings)
DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"


# =============================================================================
# Airtable Configuration
# =============================================================================

# Airtable API key; empty means the in-memory store is used
AIRTABLE_API_KEY: str = os.getenv("AIRTABLE_API_KEY", "")

# Airtable base holding the curation tables
AIRTABLE_BASE_ID: str = os.getenv("AIRTABLE_BASE_ID", "")

# Table names
AIRTABLE_ITEMS_TABLE: str = os.getenv("AIRTABLE_ITEMS_TABLE", "Items")
AIRTABLE_LINKS_TABLE: str = os.getenv("AIRTABLE_LINKS_TABLE", "Links")
AIRTABLE_TOPICS_TABLE: str = os.getenv("AIRTABLE_TOPICS_TABLE", "Topics")
AIRTABLE_IDEA_SETS_TABLE: str = os.getenv("AIRTABLE_IDEA_SETS_TABLE", "IdeaSets")
AIRTABLE_PEOPLE_TABLE: str = os.getenv("AIRTABLE_PEOPLE_TABLE", "People")


# =============================================================================
# Page Fetching Configuration
# =============================================================================

# HTTP request timeout in seconds
REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "30"))

# User agent sent with every page fetch
USER_AGENT: str = os.getenv(
    "USER_AGENT",
    "IdeaCurator/1.0 (Metadata Reader; +https://github.com)",
)

# Cover image service used for books, keyed by ISBN
COVER_IMAGE_URL_TEMPLATE: str = os.getenv(
    "COVER_IMAGE_URL_TEMPLATE",
    "https://covers.openlibrary.org/b/isbn/{isbn}-L.jpg",
)


# =============================================================================
# Metadata Cache Configuration
# =============================================================================

# Extracted metadata lifetime in seconds
# Default: 43200 seconds (12 hours)
METADATA_CACHE_TTL: int = int(os.getenv("METADATA_CACHE_TTL", "43200"))

# Maximum number of cached URLs
METADATA_CACHE_SIZE: int = int(os.getenv("METADATA_CACHE_SIZE", "1024"))


# =============================================================================
# Search Configuration
# =============================================================================

# Default result count for search when none is given
DEFAULT_MAX_RESULTS: int = int(os.getenv("DEFAULT_MAX_RESULTS", "10"))

# Hard cap on advanced search results
ADVANCED_SEARCH_LIMIT: int = int(os.getenv("ADVANCED_SEARCH_LIMIT", "20"))

# Minimum score for the quality filter (scores are 0-5)
QUALITY_THRESHOLD: float = float(os.getenv("QUALITY_THRESHOLD", "4.0"))

# Minimum similarity ratio for a fuzzy name match (0.0 to 1.0)
FUZZY_MATCH_THRESHOLD: float = float(os.getenv("FUZZY_MATCH_THRESHOLD", "0.6"))


# =============================================================================
# Helper Functions
# =============================================================================

def is_production() -> bool:
    """Check if running in production environment."""
    return APP_ENV == "production"


def is_development() -> bool:
    """Check if running in development environment."""
    return APP_ENV == "development"


def validate_config() -> list[str]:
    """
    Validate that required configuration is present for production.

    Returns:
        List of missing or invalid configuration keys (empty if all valid).
    """
    errors = []

    if is_production():
        if not AIRTABLE_API_KEY:
            errors.append("AIRTABLE_API_KEY is required in production")
        if not AIRTABLE_BASE_ID:
            errors.append("AIRTABLE_BASE_ID is required in production")

    if REQUEST_TIMEOUT < 1:
        errors.append("REQUEST_TIMEOUT must be at least 1 second")

    if METADATA_CACHE_TTL < 0:
        errors.append("METADATA_CACHE_TTL cannot be negative")

    if METADATA_CACHE_SIZE < 1:
        errors.append("METADATA_CACHE_SIZE must be at least 1")

    if DEFAULT_MAX_RESULTS < 1:
        errors.append("DEFAULT_MAX_RESULTS must be at least 1")

    if ADVANCED_SEARCH_LIMIT < 1:
        errors.append("ADVANCED_SEARCH_LIMIT must be at least 1")

    if not (0.0 <= QUALITY_THRESHOLD <= 5.0):
        errors.append("QUALITY_THRESHOLD must be between 0 and 5")

    if not (0.0 < FUZZY_MATCH_THRESHOLD <= 1.0):
        errors.append("FUZZY_MATCH_THRESHOLD must be between 0 and 1")

    if "{isbn}" not in COVER_IMAGE_URL_TEMPLATE:
        errors.append("COVER_IMAGE_URL_TEMPLATE must contain an {isbn} placeholder")

    return errors


def print_config_summary() -> None:
    """Print a summary of current configuration (safe for logs, no secrets)."""
    print(f"  APP_ENV: {APP_ENV}")
    print(f"  DEBUG: {DEBUG}")
    print(f"  AIRTABLE_API_KEY: {'***' if AIRTABLE_API_KEY else '(not set)'}")
    print(f"  AIRTABLE_BASE_ID: {'***' if AIRTABLE_BASE_ID else '(not set)'}")
    print(f"  REQUEST_TIMEOUT: {REQUEST_TIMEOUT}s")
    print(f"  METADATA_CACHE_TTL: {METADATA_CACHE_TTL}s")
    print(f"  METADATA_CACHE_SIZE: {METADATA_CACHE_SIZE}")
    print(f"  DEFAULT_MAX_RESULTS: {DEFAULT_MAX_RESULTS}")
    print(f"  ADVANCED_SEARCH_LIMIT: {ADVANCED_SEARCH_LIMIT}")
    print(f"  QUALITY_THRESHOLD: {QUALITY_THRESHOLD}")
    print(f"  FUZZY_MATCH_THRESHOLD: {FUZZY_MATCH_THRESHOLD}")
