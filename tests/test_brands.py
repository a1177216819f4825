"""
Tests for the remote directory lister and the brand classifier cache.
"""

import pytest
from discovery_test_utils import (
    api_entry,
    html_response,
    json_response,
    make_fake_client,
)

from device_faker_templates.discovery import (
    BrandCache,
    BrandClassifier,
    get_default_brand_cache,
    list_directories,
)
from device_faker_templates.exceptions import FetchError
from device_faker_templates.models import Category

pytestmark = [pytest.mark.unit, pytest.mark.discovery, pytest.mark.asyncio]


def contents(repository, path):
    return repository.contents_url(path)


class TestListDirectories:
    async def test_returns_only_directory_names(self, repository):
        client = make_fake_client(
            {
                contents(repository, "templates/common"): json_response(
                    [
                        api_entry("dir", "templates/common/Xiaomi"),
                        api_entry("file", "templates/common/pixel.toml"),
                        api_entry("dir", "templates/common/Samsung"),
                    ]
                )
            }
        )

        dirs = await list_directories(client, repository, "templates/common")

        assert dirs == ["Xiaomi", "Samsung"]

    async def test_non_success_status_yields_empty(self, repository):
        client = make_fake_client(
            {contents(repository, "templates/common"): json_response([], status=503)}
        )

        assert await list_directories(client, repository, "templates/common") == []

    async def test_network_error_yields_empty(self, repository):
        client = make_fake_client(
            {contents(repository, "templates/common"): FetchError("boom")}
        )

        assert await list_directories(client, repository, "templates/common") == []

    async def test_non_list_payload_yields_empty(self, repository):
        client = make_fake_client(
            {contents(repository, "templates/common"): json_response({"message": "x"})}
        )

        assert await list_directories(client, repository, "templates/common") == []

    async def test_invalid_json_yields_empty(self, repository):
        client = make_fake_client(
            {contents(repository, "templates/common"): html_response("<html>")}
        )

        assert await list_directories(client, repository, "templates/common") == []

    async def test_malformed_entries_are_ignored(self, repository):
        client = make_fake_client(
            {
                contents(repository, "templates/common"): json_response(
                    ["junk", {"type": "dir"}, {"type": "dir", "name": "Oppo"}]
                )
            }
        )

        assert await list_directories(client, repository, "templates/common") == [
            "Oppo"
        ]


class TestBrandClassifier:
    async def test_hidden_directories_are_not_brands(self, repository):
        client = make_fake_client(
            {
                contents(repository, "templates/common"): json_response(
                    [
                        api_entry("dir", "templates/common/.github"),
                        api_entry("dir", "templates/common/Xiaomi"),
                    ]
                )
            }
        )
        classifier = BrandClassifier(client, repository, cache=BrandCache())

        assert await classifier.brands_of(Category.COMMON) == frozenset({"Xiaomi"})

    async def test_second_lookup_is_served_from_cache(self, repository):
        client = make_fake_client(
            {
                contents(repository, "templates/common"): json_response(
                    [api_entry("dir", "templates/common/Xiaomi")]
                )
            }
        )
        classifier = BrandClassifier(client, repository, cache=BrandCache())

        first = await classifier.brands_of(Category.COMMON)
        second = await classifier.brands_of(Category.COMMON)

        assert first == second
        assert client.fetch.await_count == 1

    async def test_cache_is_never_refreshed(self, repository):
        routes = {
            contents(repository, "templates/gaming"): json_response(
                [api_entry("dir", "templates/gaming/RedMagic")]
            )
        }
        client = make_fake_client(routes)
        classifier = BrandClassifier(client, repository, cache=BrandCache())
        await classifier.brands_of(Category.GAMING)

        routes[contents(repository, "templates/gaming")] = json_response(
            [api_entry("dir", "templates/gaming/ROG")]
        )

        assert await classifier.brands_of(Category.GAMING) == frozenset({"RedMagic"})

    async def test_failed_listing_caches_empty_set(self, repository):
        client = make_fake_client({})
        classifier = BrandClassifier(client, repository, cache=BrandCache())

        assert await classifier.brands_of(Category.TRANSCEND) == frozenset()
        assert classifier.cache.get(Category.TRANSCEND) == frozenset()

    async def test_default_cache_is_shared_between_classifiers(self, repository):
        client = make_fake_client(
            {
                contents(repository, "templates/common"): json_response(
                    [api_entry("dir", "templates/common/Xiaomi")]
                )
            }
        )

        await BrandClassifier(client, repository).brands_of(Category.COMMON)
        await BrandClassifier(client, repository).brands_of(Category.COMMON)

        assert client.fetch.await_count == 1
        assert get_default_brand_cache().get(Category.COMMON) == frozenset({"Xiaomi"})

    async def test_all_brands_is_sorted_union(self, repository):
        client = make_fake_client(
            {
                contents(repository, "templates/common"): json_response(
                    [
                        api_entry("dir", "templates/common/B"),
                        api_entry("dir", "templates/common/A"),
                    ]
                ),
                contents(repository, "templates/gaming"): json_response(
                    [
                        api_entry("dir", "templates/gaming/C"),
                        api_entry("dir", "templates/gaming/B"),
                    ]
                ),
            }
        )
        classifier = BrandClassifier(client, repository, cache=BrandCache())

        assert await classifier.all_brands() == ["A", "B", "C"]

    async def test_brands_by_category(self, repository):
        client = make_fake_client(
            {
                contents(repository, "templates/common"): json_response(
                    [
                        api_entry("dir", "templates/common/Vivo"),
                        api_entry("dir", "templates/common/Oppo"),
                    ]
                ),
            }
        )
        classifier = BrandClassifier(client, repository, cache=BrandCache())

        result = await classifier.brands_by_category()

        assert result == {
            Category.COMMON: ["Oppo", "Vivo"],
            Category.GAMING: [],
            Category.TRANSCEND: [],
        }
