"""
Idea Curator.

Metadata extraction, search and discovery for a content-curation service.
"""

__version__ = "1.0.0"
