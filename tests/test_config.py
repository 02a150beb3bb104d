"""Tests for environment-backed configuration."""

from pathlib import Path

import pytest

from feed_eater import Configuration, Url
from feed_eater.config import initialize_environment


@pytest.mark.asyncio
async def test_defaults_without_environment(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = await initialize_environment()
    assert config.urls == []
    assert config.file_path is None
    assert config.method == "GET"
    assert config.timeout == 5000
    assert config.period == 0
    assert config.max_process == 0
    assert not config.use_os_exit_signal
    assert not config.insecure_skip_verify
    assert not config.fail_fast


@pytest.mark.asyncio
async def test_reads_prefixed_variables(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("FEED_EATER_FILE", "/srv/urls.json")
    monkeypatch.setenv("FEED_EATER_METHOD", "post")
    monkeypatch.setenv("FEED_EATER_HEADERS", '{"X-Token": "abc"}')
    monkeypatch.setenv("FEED_EATER_TIMEOUT_MS", "750")
    monkeypatch.setenv("FEED_EATER_PERIOD_SEC", "12.5")
    monkeypatch.setenv("FEED_EATER_OS_SIGNALS", "1")
    monkeypatch.setenv("FEED_EATER_INSECURE", "true")
    monkeypatch.setenv("FEED_EATER_MAX_PROCESS", "8")

    config = await initialize_environment()

    assert config.file_path == Path("/srv/urls.json")
    assert config.method == "POST"
    assert config.headers == {"X-Token": "abc"}
    assert config.timeout == 750
    assert config.period == 12.5
    assert config.use_os_exit_signal
    assert config.insecure_skip_verify
    assert config.max_process == 8


@pytest.mark.asyncio
async def test_headers_must_be_an_object(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("FEED_EATER_HEADERS", '["X-Token"]')
    with pytest.raises(ValueError):
        await initialize_environment()


def test_concurrency_defaults_to_one_slot_per_url():
    urls = [Url("a", f"http://a/{i}") for i in range(7)]
    assert Configuration(urls=urls).concurrency == 7
    assert Configuration(urls=urls, max_process=3).concurrency == 3
    assert Configuration().concurrency == 1
