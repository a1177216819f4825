import os
from pathlib import Path

import platformdirs
import pytest

from device_faker_templates.config import RepositoryCoordinates
from device_faker_templates.constants import ENV_VAR_PREFIX
from device_faker_templates.discovery import get_default_brand_cache

_ASYNC_NETWORK_BLOCK_MSG = (
    "Async network access is blocked during tests. Mock aiohttp.ClientSession."
)


async def _async_block_network(*_args, **_kwargs):
    """
    Prevent async network calls during tests by raising a RuntimeError.

    Raises:
        RuntimeError: `_ASYNC_NETWORK_BLOCK_MSG`.
    """
    raise RuntimeError(_ASYNC_NETWORK_BLOCK_MSG)


def pytest_configure(config):
    """Register the markers used across the suite."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as an asyncio test (auto-detected)"
    )
    config.addinivalue_line("markers", "unit: fast isolated unit tests")
    config.addinivalue_line("markers", "discovery: template discovery tests")


def pytest_runtest_setup():
    """Replace aiohttp request entry points so no test reaches the network."""
    import aiohttp

    aiohttp.request = _async_block_network
    aiohttp.ClientSession._request = _async_block_network  # type: ignore[assignment]


@pytest.fixture(autouse=True)
def _isolate_test_environment(tmp_path_factory, monkeypatch):
    """
    Point platformdirs and the config module at temp directories and drop any
    DEVICE_FAKER_TEMPLATES_* variables from the environment.
    """
    base = tmp_path_factory.mktemp("device_faker_templates")
    config_dir = base / "config"
    log_dir = base / "log"
    for path in (config_dir, log_dir):
        path.mkdir(parents=True, exist_ok=True)

    for key in list(os.environ):
        if key.startswith(ENV_VAR_PREFIX):
            monkeypatch.delenv(key, raising=False)

    monkeypatch.setattr(
        platformdirs, "user_config_dir", lambda *_args, **_kwargs: str(config_dir)
    )
    monkeypatch.setattr(
        platformdirs, "user_log_dir", lambda *_args, **_kwargs: str(log_dir)
    )

    import device_faker_templates.config as config_module

    monkeypatch.setattr(config_module, "CONFIG_DIR", str(config_dir))
    monkeypatch.setattr(
        config_module, "CONFIG_FILE", str(Path(config_dir) / "config.yaml")
    )


@pytest.fixture(autouse=True)
def _reset_brand_cache():
    """The process-wide brand cache must not leak between tests."""
    get_default_brand_cache().clear()
    yield
    get_default_brand_cache().clear()


@pytest.fixture
def repository():
    return RepositoryCoordinates(
        owner="Seyud",
        name="device_faker_config_mirror",
        branch="main",
        api_base="https://gitee.com/api/v5",
        web_base="https://gitee.com",
    )

