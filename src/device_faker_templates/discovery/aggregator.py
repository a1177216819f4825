"""
Discovery orchestration across categories and strategies.

For each category the structured API walker runs first; if it raises or finds
nothing, the HTML walker is tried. A category for which both strategies fail
contributes no templates, and never aborts discovery of the others.
"""

import asyncio
from typing import Dict, Iterable, List, Optional

from device_faker_templates.config import RepositoryCoordinates
from device_faker_templates.exceptions import DiscoveryError
from device_faker_templates.log_utils import logger
from device_faker_templates.models import Category, DiscoveryResult, TemplateReference

from .brands import BrandCache, BrandClassifier
from .walkers import ApiTreeWalker, HtmlTreeWalker, TreeWalker


class TemplateDiscovery:
    """Discovers template references in every category of the repository."""

    def __init__(
        self,
        client,
        repository: RepositoryCoordinates,
        brand_cache: Optional[BrandCache] = None,
        categories: Iterable[Category] = tuple(Category),
        api_walker: Optional[TreeWalker] = None,
        html_walker: Optional[TreeWalker] = None,
    ) -> None:
        self.categories = tuple(categories)
        self.classifier = BrandClassifier(
            client, repository, cache=brand_cache, categories=self.categories
        )
        self.api_walker = api_walker or ApiTreeWalker(client, repository)
        self.html_walker = html_walker or HtmlTreeWalker(client, repository)

    async def discover_category(self, category: Category) -> List[TemplateReference]:
        """
        Discover all templates of one category.

        Returns:
            List[TemplateReference]: References from the first strategy that
            succeeded with a non-empty result, or an empty list.
        """
        path = category.root_path
        brands = await self.classifier.brands_of(category)

        try:
            templates = await self.api_walker.walk(path, category, brands)
            if templates:
                logger.debug(f"API found {len(templates)} templates in {category.value}")
                return templates
            logger.debug(f"API found no templates in {category.value}; trying HTML")
        except DiscoveryError as e:
            logger.warning(f"API method failed for {category.value}: {e}")

        try:
            templates = await self.html_walker.walk(path, category, brands)
            if templates:
                logger.debug(
                    f"HTML found {len(templates)} templates in {category.value}"
                )
                return templates
        except DiscoveryError as e:
            logger.error(f"HTML method failed for {category.value}: {e}")

        logger.warning(f"No templates discovered for {category.value}")
        return []

    async def discover_all(self) -> DiscoveryResult:
        """Discover every category concurrently and collect all brands."""
        results = await asyncio.gather(
            *(self.discover_category(c) for c in self.categories)
        )
        templates = [t for category_templates in results for t in category_templates]
        brands = await self.classifier.all_brands()
        logger.info(
            f"Discovered {len(templates)} templates across {len(self.categories)} categories"
        )
        return DiscoveryResult(templates=templates, brands=brands)

    async def discover(
        self,
        categories: Optional[Iterable[Category]] = None,
        brand: Optional[str] = None,
    ) -> List[TemplateReference]:
        """
        Discover templates restricted to some categories and optionally one brand.
        """
        selected = tuple(categories) if categories else self.categories
        results = await asyncio.gather(*(self.discover_category(c) for c in selected))
        templates = [t for category_templates in results for t in category_templates]
        if brand is not None:
            templates = [t for t in templates if t.brand == brand]
        return templates

    async def brands_of(self, category: Category) -> List[str]:
        return sorted(await self.classifier.brands_of(category))

    async def all_brands(self) -> List[str]:
        return await self.classifier.all_brands()

    async def brands_by_category(self) -> Dict[Category, List[str]]:
        return await self.classifier.brands_by_category()
