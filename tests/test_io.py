"""Tests for reading the url list file."""

from pathlib import Path

import pytest

from feed_eater import ErrorCode, HandlerError, Url
from feed_eater.core.io import load_urls_file, parse_urls


def test_parse_urls_reads_category_and_link():
    assert parse_urls('[{"Category":"news","Link":"http://x"}]') == [Url(category="news", link="http://x")]


def test_parse_urls_matches_keys_case_insensitively():
    urls = parse_urls(b'[{"category": "a", "LINK": "http://a"}, {"Link": "http://b", "extra": 1}]')
    assert urls == [Url("a", "http://a"), Url("", "http://b")]


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        '{"Category": "news", "Link": "http://x"}',
        '["http://x"]',
        '[{"Category": 5, "Link": "http://x"}]',
    ],
)
def test_parse_urls_rejects_bad_documents(raw):
    with pytest.raises(HandlerError) as info:
        parse_urls(raw)
    assert info.value.code == ErrorCode.UNMARSHAL_JSON
    assert info.value.cause is not None


@pytest.mark.asyncio
async def test_load_urls_file(tmp_path: Path):
    path = tmp_path / "urls.json"
    path.write_text('[\n  {"Category": "news", "Link": "http://x"},\n  {"Category": "news", "Link": "http://y"}\n]\n')
    assert await load_urls_file(path) == [Url("news", "http://x"), Url("news", "http://y")]


@pytest.mark.asyncio
async def test_load_urls_file_missing(tmp_path: Path):
    with pytest.raises(HandlerError) as info:
        await load_urls_file(tmp_path / "missing.json")
    assert info.value.code == ErrorCode.OPEN_FILE
    assert isinstance(info.value.cause, FileNotFoundError)


@pytest.mark.asyncio
async def test_load_urls_file_not_utf8(tmp_path: Path):
    path = tmp_path / "urls.json"
    path.write_bytes(b'[{"Category": "\xff\xfe", "Link": "http://x"}]')
    with pytest.raises(HandlerError) as info:
        await load_urls_file(path)
    assert info.value.code == ErrorCode.READ_FILE


@pytest.mark.asyncio
async def test_load_urls_file_empty_array(tmp_path: Path):
    path = tmp_path / "urls.json"
    path.write_text("[]")
    with pytest.raises(HandlerError) as info:
        await load_urls_file(path)
    assert info.value.code == ErrorCode.EMPTY_URL_FILE


@pytest.mark.asyncio
async def test_load_urls_file_directory_cannot_be_opened(tmp_path: Path):
    with pytest.raises(HandlerError) as info:
        await load_urls_file(tmp_path)
    assert info.value.code in (ErrorCode.OPEN_FILE, ErrorCode.READ_FILE)


@pytest.mark.asyncio
async def test_load_urls_file_can_be_read_twice(tmp_path: Path):
    path = tmp_path / "urls.json"
    path.write_text('[{"Category":"news","Link":"http://x"}]')
    first = await load_urls_file(path)
    second = await load_urls_file(path)
    assert first == second == [Url(category="news", link="http://x")]
