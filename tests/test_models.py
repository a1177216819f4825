import pytest

from device_faker_templates.models import (
    Category,
    DownloadedTemplate,
    TemplateReference,
    humanize_name,
    template_stem,
)


class TestCategory:
    def test_identifiers_and_labels(self):
        assert [c.value for c in Category] == ["common", "gaming", "transcend"]
        assert Category.GAMING.label == "Gaming devices"
        assert Category.TRANSCEND.root_path == "templates/transcend"

    def test_parse_is_case_insensitive(self):
        assert Category.parse(" Common ") is Category.COMMON

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown template category"):
            Category.parse("tablets")


class TestTemplateReference:
    def test_from_path_derives_names(self):
        ref = TemplateReference.from_path(
            "templates/gaming/ROG/rog_phone_8_pro.toml", Category.GAMING, "https://x"
        )

        assert ref.name == "rog_phone_8_pro"
        assert ref.display_name == "rog phone 8 pro"
        assert ref.brand is None
        assert ref.download_url == "https://x"

    def test_identity_is_category_and_path(self):
        a = TemplateReference.from_path("templates/common/a.toml", Category.COMMON, "u1")
        b = TemplateReference.from_path("templates/common/a.toml", Category.COMMON, "u2")
        b.brand = "X"
        c = TemplateReference.from_path("templates/common/a.toml", Category.GAMING, "u1")

        assert a == b
        assert hash(a) == hash(b)
        assert a != c
        assert len({a, b, c}) == 2

    def test_stem_helpers(self):
        assert template_stem("a.b.toml") == "a.b"
        assert template_stem("README") == "README"
        assert humanize_name("Mi_14_Ultra") == "Mi 14 Ultra"


class TestDownloadedTemplate:
    def test_from_reference_copies_fields(self):
        ref = TemplateReference.from_path(
            "templates/common/X/a_b.toml", Category.COMMON, "https://raw/a_b.toml"
        )
        ref.brand = "X"

        downloaded = DownloadedTemplate.from_reference(ref, {"model": "M"})

        assert downloaded.to_dict() == {
            "name": "a_b",
            "display_name": "a b",
            "category": "common",
            "brand": "X",
            "path": "templates/common/X/a_b.toml",
            "download_url": "https://raw/a_b.toml",
            "template": {"model": "M"},
        }
        assert downloaded == ref
