"""
High-level entry points combining the client, discovery and download pipeline.
"""

from typing import Dict, Iterable, List, Optional

from device_faker_templates.client import create_async_client
from device_faker_templates.commands import CommandExecutor
from device_faker_templates.config import Settings
from device_faker_templates.discovery import TemplateDiscovery
from device_faker_templates.downloader import TemplateDownloader
from device_faker_templates.models import (
    Category,
    DiscoveryResult,
    DownloadedTemplate,
    TemplateReference,
)


async def fetch_online_templates(settings: Optional[Settings] = None) -> DiscoveryResult:
    """Discover every template and brand in the configured repository."""
    settings = settings or Settings()
    async with create_async_client(
        timeout=settings.request_timeout, max_concurrent=settings.max_concurrent
    ) as client:
        return await TemplateDiscovery(client, settings.repository).discover_all()


async def find_templates(
    settings: Optional[Settings] = None,
    categories: Optional[Iterable[Category]] = None,
    brand: Optional[str] = None,
) -> List[TemplateReference]:
    """Discover templates in the given categories, optionally of one brand."""
    settings = settings or Settings()
    async with create_async_client(
        timeout=settings.request_timeout, max_concurrent=settings.max_concurrent
    ) as client:
        return await TemplateDiscovery(client, settings.repository).discover(
            categories=categories, brand=brand
        )


async def fetch_brands(
    settings: Optional[Settings] = None, category: Optional[Category] = None
) -> List[str]:
    """Brands of one category, or the sorted union over all categories."""
    settings = settings or Settings()
    async with create_async_client(
        timeout=settings.request_timeout, max_concurrent=settings.max_concurrent
    ) as client:
        discovery = TemplateDiscovery(client, settings.repository)
        if category is not None:
            return await discovery.brands_of(category)
        return await discovery.all_brands()


async def fetch_brands_by_category(
    settings: Optional[Settings] = None,
) -> Dict[Category, List[str]]:
    """Each category's brands as a sorted list."""
    settings = settings or Settings()
    async with create_async_client(
        timeout=settings.request_timeout, max_concurrent=settings.max_concurrent
    ) as client:
        return await TemplateDiscovery(
            client, settings.repository
        ).brands_by_category()


async def download_templates(
    references: Iterable[TemplateReference], settings: Optional[Settings] = None
) -> List[DownloadedTemplate]:
    """Download and parse templates, dropping any that fail."""
    settings = settings or Settings()
    downloader = TemplateDownloader(
        CommandExecutor(), cli_path=settings.cli_path, temp_dir=settings.temp_dir
    )
    return await downloader.fetch_and_parse_all(references)
