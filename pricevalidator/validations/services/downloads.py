"""
Remote data file acquisition.

Price transparency files are usually published as plain JSON, gzip-compressed
JSON or zip archives that may hold several JSON files. DownloadManager turns a
URL into something the validator can mount:

- plain or gzip-compressed JSON: a local JSON file path
- a zip archive with one JSON entry: that entry, extracted to a local path
- a zip archive with several JSON entries: an ArchiveSelection, leaving the
  choice of entries to the operator

Everything is written to a temporary directory owned by the manager, which is
removed by close() (or on leaving the ``with`` block).
"""

from __future__ import annotations

import gzip
import logging
import shutil
import tempfile
import zipfile
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

import httpx
from django.conf import settings

from pricevalidator.validations.exceptions import DownloadError
from pricevalidator.validations.services.prompts import OperatorPrompter

logger = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"
DATA_FILENAME = "data.json"
ARCHIVE_METADATA_PREFIX = "__MACOSX/"
# Servers that do not implement HEAD; the URL is still worth a GET.
HEAD_NOT_SUPPORTED = {405, 501}


@dataclass
class ArchiveSelection:
    """
    A downloaded zip archive holding several candidate JSON files.

    The archive stays open until whoever iterates over the entries closes it.
    Every chosen entry is extracted over the same data_path.
    """

    archive: zipfile.ZipFile
    entry_names: list[str]
    data_path: Path


def extract_entry(
    archive: zipfile.ZipFile,
    name: str,
    destination: str | Path,
) -> None:
    """Extract one archive entry to destination, replacing what was there."""
    with archive.open(name) as source, Path(destination).open("wb") as target:
        shutil.copyfileobj(source, target)


class DownloadManager:
    """
    Checks and downloads remote data files.

    Args:
        yes_all: Skip the confirmation asked before large downloads.
        prompter: Used to ask for that confirmation.
        timeout_seconds: Network deadline for each request.
        confirm_bytes: Size above which a download needs confirmation.
        transport: Optional httpx transport (tests use httpx.MockTransport).
    """

    def __init__(
        self,
        yes_all: bool = False,
        prompter: OperatorPrompter | None = None,
        timeout_seconds: int | None = None,
        confirm_bytes: int | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.yes_all = yes_all
        self.prompter = prompter or OperatorPrompter()
        self.timeout_seconds = timeout_seconds or getattr(
            settings,
            "DOWNLOAD_TIMEOUT_SECONDS",
            300,
        )
        self.confirm_bytes = confirm_bytes or getattr(
            settings,
            "DOWNLOAD_CONFIRM_BYTES",
            1024**3,
        )
        self._transport = transport
        self._client: httpx.Client | None = None
        self._work_dir: tempfile.TemporaryDirectory | None = None

    def __enter__(self) -> DownloadManager:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def client(self) -> httpx.Client:
        """Lazy-load HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                timeout=self.timeout_seconds,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    @property
    def work_dir(self) -> Path:
        if self._work_dir is None:
            self._work_dir = tempfile.TemporaryDirectory(prefix="download")
        return Path(self._work_dir.name)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
        if self._work_dir is not None:
            self._work_dir.cleanup()
            self._work_dir = None

    def check_data_url(self, url: str) -> bool:
        """
        Check that a URL looks valid, is reachable and is worth downloading.

        Returns:
            True if the download should go ahead.
        """
        parsed = urlparse(url)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            logger.error("Not a valid http(s) URL: %s", url)
            return False

        try:
            response = self.client.head(url)
        except httpx.HTTPError as e:
            logger.error("Could not reach %s: %s", url, e)
            return False

        if response.status_code in HEAD_NOT_SUPPORTED:
            return True
        if response.is_error:
            logger.error("%s responded with status %d", url, response.status_code)
            return False

        size = int(response.headers.get("content-length") or 0)
        if size > self.confirm_bytes and not self.yes_all:
            return self.prompter.confirm(
                f"Data file is {size / 1024**2:.1f} MB. Continue with download?",
            )
        return True

    def download_data_file(self, url: str) -> str | ArchiveSelection:
        """
        Download a data file and unpack it as far as possible.

        Returns:
            Path to a local JSON file, or an ArchiveSelection when a zip
            archive holds more than one JSON file.

        Raises:
            DownloadError: If the download fails or the archive holds no JSON.
        """
        download_path = self.work_dir / "download"
        data_path = self.work_dir / DATA_FILENAME

        logger.info("Downloading %s", url)
        try:
            with self.client.stream("GET", url) as response:
                response.raise_for_status()
                with download_path.open("wb") as f:
                    for chunk in response.iter_bytes():
                        f.write(chunk)
        except httpx.HTTPError as e:
            msg = f"Failed to download {url}: {e}"
            raise DownloadError(msg) from e

        if zipfile.is_zipfile(download_path):
            return self._open_archive(download_path, data_path)

        with download_path.open("rb") as f:
            is_gzip = f.read(len(GZIP_MAGIC)) == GZIP_MAGIC
        if is_gzip:
            self._gunzip(download_path, data_path)
        else:
            download_path.replace(data_path)
        return str(data_path)

    def _gunzip(self, source: Path, destination: Path) -> None:
        try:
            with gzip.open(source, "rb") as f_in, destination.open("wb") as f_out:
                shutil.copyfileobj(f_in, f_out)
        except (OSError, EOFError) as e:
            msg = f"Could not decompress downloaded file: {e}"
            raise DownloadError(msg) from e
        finally:
            source.unlink(missing_ok=True)

    def _open_archive(
        self,
        archive_path: Path,
        data_path: Path,
    ) -> str | ArchiveSelection:
        try:
            archive = zipfile.ZipFile(archive_path)
        except zipfile.BadZipFile as e:
            msg = f"Downloaded archive is corrupt: {e}"
            raise DownloadError(msg) from e

        names = [
            info.filename
            for info in archive.infolist()
            if not info.is_dir()
            and info.filename.lower().endswith(".json")
            and not info.filename.startswith(ARCHIVE_METADATA_PREFIX)
        ]
        if not names:
            archive.close()
            msg = "No JSON files found in the downloaded archive"
            raise DownloadError(msg)

        if len(names) == 1:
            try:
                extract_entry(archive, names[0], data_path)
            finally:
                archive.close()
            return str(data_path)

        logger.info("Archive contains %d JSON files", len(names))
        return ArchiveSelection(archive=archive, entry_names=names, data_path=data_path)
