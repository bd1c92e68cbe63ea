"""
Configuration module.

Handles environment variables, Airtable credentials, and tuning knobs.
"""

from curator.config.config import (
    APP_ENV,
    DEBUG,
    AIRTABLE_API_KEY,
    AIRTABLE_BASE_ID,
    AIRTABLE_ITEMS_TABLE,
    AIRTABLE_LINKS_TABLE,
    AIRTABLE_TOPICS_TABLE,
    AIRTABLE_IDEA_SETS_TABLE,
    AIRTABLE_PEOPLE_TABLE,
    REQUEST_TIMEOUT,
    USER_AGENT,
    COVER_IMAGE_URL_TEMPLATE,
    METADATA_CACHE_TTL,
    METADATA_CACHE_SIZE,
    DEFAULT_MAX_RESULTS,
    ADVANCED_SEARCH_LIMIT,
    QUALITY_THRESHOLD,
    FUZZY_MATCH_THRESHOLD,
    is_production,
    is_development,
    validate_config,
    print_config_summary,
)

__all__ = [
    "APP_ENV",
    "DEBUG",
    "AIRTABLE_API_KEY",
    "AIRTABLE_BASE_ID",
    "AIRTABLE_ITEMS_TABLE",
    "AIRTABLE_LINKS_TABLE",
    "AIRTABLE_TOPICS_TABLE",
    "AIRTABLE_IDEA_SETS_TABLE",
    "AIRTABLE_PEOPLE_TABLE",
    "REQUEST_TIMEOUT",
    "USER_AGENT",
    "COVER_IMAGE_URL_TEMPLATE",
    "METADATA_CACHE_TTL",
    "METADATA_CACHE_SIZE",
    "DEFAULT_MAX_RESULTS",
    "ADVANCED_SEARCH_LIMIT",
    "QUALITY_THRESHOLD",
    "FUZZY_MATCH_THRESHOLD",
    "is_production",
    "is_development",
    "validate_config",
    "print_config_summary",
]
