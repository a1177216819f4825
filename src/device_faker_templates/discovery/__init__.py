"""
Template discovery subsystem.

Core Components:
- lister: best-effort subdirectory listing through the contents API
- brands: per-category brand classification with a process-lifetime cache
- walkers: recursive API and HTML tree walkers
- aggregator: per-category strategy fallback and cross-category merge
"""

from .aggregator import TemplateDiscovery
from .brands import BrandCache, BrandClassifier, get_default_brand_cache
from .lister import list_directories
from .walkers import ApiTreeWalker, HtmlTreeWalker, TreeWalker

__all__ = [
    "TemplateDiscovery",
    "BrandCache",
    "BrandClassifier",
    "get_default_brand_cache",
    "list_directories",
    "TreeWalker",
    "ApiTreeWalker",
    "HtmlTreeWalker",
]
