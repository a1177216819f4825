"""
Discovery and download of online Device Faker configuration templates.
"""

from .models import (
    Category,
    DiscoveryResult,
    DownloadedTemplate,
    TemplateReference,
)
from .service import (
    download_templates,
    fetch_brands,
    fetch_online_templates,
    find_templates,
)

__all__ = [
    "Category",
    "DiscoveryResult",
    "DownloadedTemplate",
    "TemplateReference",
    "download_templates",
    "fetch_brands",
    "fetch_online_templates",
    "find_templates",
]
