"""
Brand classification for template categories.

A brand is a subdirectory directly below a category root. The set of brands
for a category is fetched once and then served from a process-lifetime cache.
"""

import asyncio
from typing import Dict, FrozenSet, Iterable, List, Optional

from device_faker_templates.config import RepositoryCoordinates
from device_faker_templates.constants import HIDDEN_ENTRY_PREFIX
from device_faker_templates.log_utils import logger
from device_faker_templates.models import Category

from .lister import list_directories


class BrandCache:
    """
    Mapping of category to its brand names.

    Entries are written at most once in practice and never invalidated. Two
    concurrent first lookups for the same category may both write; the second
    write replaces the first with an equivalent set.
    """

    def __init__(self) -> None:
        self._entries: Dict[Category, FrozenSet[str]] = {}

    def get(self, category: Category) -> Optional[FrozenSet[str]]:
        return self._entries.get(category)

    def set(self, category: Category, brands: Iterable[str]) -> FrozenSet[str]:
        value = frozenset(brands)
        self._entries[category] = value
        return value

    def clear(self) -> None:
        self._entries.clear()


# Shared by every classifier that is not handed its own cache
_default_brand_cache = BrandCache()


def get_default_brand_cache() -> BrandCache:
    return _default_brand_cache


class BrandClassifier:
    """Resolves and caches the brand directories of each category."""

    def __init__(
        self,
        client,
        repository: RepositoryCoordinates,
        cache: Optional[BrandCache] = None,
        categories: Iterable[Category] = tuple(Category),
    ) -> None:
        self.client = client
        self.repository = repository
        self.cache = cache if cache is not None else _default_brand_cache
        self.categories = tuple(categories)

    async def brands_of(self, category: Category) -> FrozenSet[str]:
        """
        Return the brand names of `category`.

        The first call lists the category root and drops hidden entries;
        later calls return the cached set without touching the network.
        """
        cached = self.cache.get(category)
        if cached is not None:
            logger.debug(f"Brand cache hit for {category.value}")
            return cached

        dirs = await list_directories(self.client, self.repository, category.root_path)
        brands = self.cache.set(
            category, (d for d in dirs if not d.startswith(HIDDEN_ENTRY_PREFIX))
        )
        logger.debug(f"Resolved {len(brands)} brands for {category.value}")
        return brands

    async def all_brands(self) -> List[str]:
        """Return the sorted union of brands across all categories."""
        results = await asyncio.gather(*(self.brands_of(c) for c in self.categories))
        return sorted(set().union(*results))

    async def brands_by_category(self) -> Dict[Category, List[str]]:
        """Return each category's brands as a sorted list."""
        results = await asyncio.gather(*(self.brands_of(c) for c in self.categories))
        return {
            category: sorted(brands)
            for category, brands in zip(self.categories, results)
        }
