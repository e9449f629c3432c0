"""Tests for remote data file checks and downloads."""

import gzip
import io
import zipfile
from pathlib import Path
from unittest.mock import MagicMock

import httpx
import pytest

from pricevalidator.validations.exceptions import DownloadError
from pricevalidator.validations.services.downloads import ArchiveSelection
from pricevalidator.validations.services.downloads import DownloadManager
from pricevalidator.validations.services.downloads import extract_entry
from pricevalidator.validations.services.prompts import OperatorPrompter

URL = "https://files.example.com/in-network.json"
PAYLOAD = b'{"version": "1.0.0", "in_network": []}'


def zip_bytes(entries: dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, content in entries.items():
            archive.writestr(name, content)
    return buffer.getvalue()


def serving(body: bytes = PAYLOAD, status_code: int = 200, headers=None):
    """Transport answering every request with the same response."""
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status_code, content=body, headers=headers)

    transport = httpx.MockTransport(handler)
    transport.requests = requests
    return transport


@pytest.fixture
def prompter():
    return MagicMock(spec=OperatorPrompter)


def build_manager(transport, prompter=None, **kwargs):
    return DownloadManager(
        prompter=prompter or MagicMock(spec=OperatorPrompter),
        timeout_seconds=5,
        confirm_bytes=1024,
        transport=transport,
        **kwargs,
    )


class TestCheckDataUrl:
    @pytest.mark.parametrize(
        "url",
        ["not a url", "ftp://files.example.com/a.json", "https://", ""],
    )
    def test_invalid_urls(self, url):
        transport = serving()

        with build_manager(transport) as manager:
            assert manager.check_data_url(url) is False

        assert transport.requests == []

    def test_reachable_url(self):
        transport = serving(b"", headers={"content-length": "10"})

        with build_manager(transport) as manager:
            assert manager.check_data_url(URL) is True

        assert transport.requests[0].method == "HEAD"

    def test_error_status(self):
        with build_manager(serving(status_code=404)) as manager:
            assert manager.check_data_url(URL) is False

    def test_head_not_supported(self):
        with build_manager(serving(status_code=405)) as manager:
            assert manager.check_data_url(URL) is True

    def test_unreachable_host(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with build_manager(httpx.MockTransport(handler)) as manager:
            assert manager.check_data_url(URL) is False

    def test_large_file_needs_confirmation(self, prompter):
        prompter.confirm.return_value = False
        transport = serving(b"", headers={"content-length": str(5 * 1024)})

        with build_manager(transport, prompter) as manager:
            assert manager.check_data_url(URL) is False

        prompter.confirm.assert_called_once()

    def test_yes_all_skips_confirmation(self, prompter):
        transport = serving(b"", headers={"content-length": str(5 * 1024)})

        with build_manager(transport, prompter, yes_all=True) as manager:
            assert manager.check_data_url(URL) is True

        prompter.confirm.assert_not_called()


class TestDownloadDataFile:
    def test_plain_json(self):
        with build_manager(serving()) as manager:
            path = manager.download_data_file(URL)

            assert Path(path).read_bytes() == PAYLOAD

    def test_gzip_is_decompressed(self):
        with build_manager(serving(gzip.compress(PAYLOAD))) as manager:
            path = manager.download_data_file(URL)

            assert Path(path).read_bytes() == PAYLOAD

    def test_zip_with_single_json(self):
        body = zip_bytes({"rates.json": PAYLOAD, "README.txt": b"hello"})

        with build_manager(serving(body)) as manager:
            path = manager.download_data_file(URL)

            assert isinstance(path, str)
            assert Path(path).read_bytes() == PAYLOAD

    def test_zip_with_several_json(self):
        body = zip_bytes(
            {
                "a.json": b'{"version": "1.0.0"}',
                "b.json": b'{"version": "1.1.0"}',
                "__MACOSX/._a.json": b"junk",
            },
        )

        with build_manager(serving(body)) as manager:
            selection = manager.download_data_file(URL)

            assert isinstance(selection, ArchiveSelection)
            assert selection.entry_names == ["a.json", "b.json"]

            extract_entry(selection.archive, "b.json", selection.data_path)
            assert selection.data_path.read_bytes() == b'{"version": "1.1.0"}'
            selection.archive.close()

    def test_zip_without_json(self):
        body = zip_bytes({"README.txt": b"hello"})

        with build_manager(serving(body)) as manager, pytest.raises(DownloadError):
            manager.download_data_file(URL)

    def test_server_error(self):
        with build_manager(serving(status_code=500)) as manager, pytest.raises(
            DownloadError,
        ):
            manager.download_data_file(URL)

    def test_close_removes_downloads(self):
        manager = build_manager(serving())
        path = Path(manager.download_data_file(URL))

        manager.close()

        assert not path.exists()
