"""
Core data structures for template discovery and download.

This module defines the categories, template references and result objects
passed between the discovery walkers, the aggregator and the download
pipeline.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional

from device_faker_templates.constants import (
    CATEGORY_LABELS,
    TEMPLATE_EXTENSION,
    TEMPLATES_ROOT,
)


class Category(str, Enum):
    """Top-level template group in the remote repository."""

    COMMON = "common"
    GAMING = "gaming"
    TRANSCEND = "transcend"

    @property
    def label(self) -> str:
        """Human-readable name of the category."""
        return CATEGORY_LABELS[self.value]

    @property
    def root_path(self) -> str:
        """Repository-relative directory holding the category's templates."""
        return f"{TEMPLATES_ROOT}/{self.value}"

    @classmethod
    def parse(cls, value: str) -> "Category":
        """
        Resolve a category from its identifier (case-insensitive).

        Raises:
            ValueError: If `value` names no known category.
        """
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            known = ", ".join(c.value for c in cls)
            raise ValueError(
                f"Unknown template category {value!r} (expected one of: {known})"
            ) from None


def template_stem(file_name: str) -> str:
    """Strip the template extension from a file name."""
    if file_name.endswith(TEMPLATE_EXTENSION):
        return file_name[: -len(TEMPLATE_EXTENSION)]
    return file_name


def humanize_name(name: str) -> str:
    """Turn a template stem into a display name."""
    return name.replace("_", " ")


@dataclass(eq=False)
class TemplateReference:
    """A template file discovered in the remote tree, not yet downloaded."""

    name: str
    """File stem (file name without the template extension)"""

    display_name: str
    """Stem with underscores replaced by spaces"""

    category: Category
    """Category the file was discovered under"""

    path: str
    """Path relative to the repository root"""

    download_url: str
    """Fully qualified raw download URL"""

    brand: Optional[str] = None
    """Brand directory the file was found under, if any"""

    @classmethod
    def from_path(
        cls, path: str, category: Category, download_url: str
    ) -> "TemplateReference":
        """Build an unbranded reference from a repository-relative file path."""
        name = template_stem(path.rsplit("/", 1)[-1])
        return cls(
            name=name,
            display_name=humanize_name(name),
            category=category,
            path=path,
            download_url=download_url,
        )

    @property
    def key(self) -> tuple:
        """Identity of the reference: (category, path)."""
        return (self.category, self.path)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TemplateReference):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "display_name": self.display_name,
            "category": self.category.value,
            "brand": self.brand,
            "path": self.path,
            "download_url": self.download_url,
        }


@dataclass(eq=False)
class DownloadedTemplate(TemplateReference):
    """A template reference together with its parsed template definition."""

    template: Optional[Dict[str, Any]] = None
    """First entry of the document's templates table"""

    @classmethod
    def from_reference(
        cls, reference: TemplateReference, template: Optional[Dict[str, Any]]
    ) -> "DownloadedTemplate":
        values = {
            f.name: getattr(reference, f.name) for f in fields(TemplateReference)
        }
        return cls(**values, template=template)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["template"] = self.template
        return data


@dataclass
class DiscoveryResult:
    """Aggregated outcome of discovering every category."""

    templates: List[TemplateReference] = field(default_factory=list)
    brands: List[str] = field(default_factory=list)


@dataclass
class FetchResponse:
    """Outcome of a single HTTP GET."""

    ok: bool
    status: int
    body: str
    url: str = ""
