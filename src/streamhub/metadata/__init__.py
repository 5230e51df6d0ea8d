"""Metadata lookups and background enrichment."""

from .base import AbstractMetadataProvider
from .enricher import MetadataEnricher
from .tmdb import TmdbMetadataProvider

__all__ = [
    "AbstractMetadataProvider",
    "MetadataEnricher",
    "TmdbMetadataProvider",
]
