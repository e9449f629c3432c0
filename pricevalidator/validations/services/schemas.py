"""
Schema repository management.

Schemas live in a git repository (by default the CMS price transparency guide)
cloned into SCHEMA_REPO_FOLDER. Each published schema version is a tag named
``v<version>``; checking out a tag makes that version's schema files current.
Within a version, each target has its schema at
``schemas/<target>/<target>.json``.

Strict mode hands the validator a copy of the schema in which every object
schema that declares ``properties`` also forbids additional properties. The
copy lives in a temporary directory owned by the manager and is removed by
close().
"""

from __future__ import annotations

import json
import logging
import subprocess
import tempfile
from pathlib import Path
from typing import Any

from django.conf import settings

from pricevalidator.validations.exceptions import SchemaRepositoryError
from pricevalidator.validations.exceptions import SchemaVersionNotFoundError

logger = logging.getLogger(__name__)

VERSION_TAG_PREFIX = "v"


def make_strict(schema: Any) -> Any:
    """
    Return a copy of a JSON schema that rejects undeclared properties.

    ``additionalProperties`` is set to false on every object schema that has a
    ``properties`` keyword and no explicit ``additionalProperties`` of its own.
    """
    if isinstance(schema, dict):
        strict = {key: make_strict(value) for key, value in schema.items()}
        if "properties" in strict and "additionalProperties" not in strict:
            strict["additionalProperties"] = False
        return strict
    if isinstance(schema, list):
        return [make_strict(item) for item in schema]
    return schema


class SchemaManager:
    """
    Prepares the schema repository and resolves schema files.

    Attributes:
        strict: Resolve schemas in strict mode (see module docstring).
        auto_detect_version: Whether the caller relies on the version read
            from the data rather than an explicit one.
    """

    def __init__(
        self,
        repo_folder: str | Path | None = None,
        repo_url: str | None = None,
        branch: str | None = None,
        timeout_seconds: int | None = None,
    ):
        self.repo_folder = Path(repo_folder or settings.SCHEMA_REPO_FOLDER)
        self.repo_url = repo_url or settings.SCHEMA_REPO_URL
        self.branch = branch or getattr(settings, "SCHEMA_REPO_BRANCH", "master")
        self.timeout_seconds = timeout_seconds or getattr(
            settings,
            "SCHEMA_REPO_TIMEOUT_SECONDS",
            600,
        )
        self.strict = False
        self.auto_detect_version = True
        self._strict_dir: tempfile.TemporaryDirectory | None = None

    def __enter__(self) -> SchemaManager:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Remove strict schema copies written by this manager."""
        if self._strict_dir is not None:
            self._strict_dir.cleanup()
            self._strict_dir = None

    @property
    def is_cloned(self) -> bool:
        return (self.repo_folder / ".git").exists()

    def ensure_repo(self) -> None:
        """Clone the schema repository if it is not present yet."""
        if not self.is_cloned:
            self.update()

    def update(self) -> None:
        """
        Clone the schema repository, or bring an existing clone up to date.

        Raises:
            SchemaRepositoryError: If a git command fails.
        """
        if not self.is_cloned:
            logger.info("Cloning schema repository %s", self.repo_url)
            self._git("clone", self.repo_url, str(self.repo_folder))
            logger.info("Retrieved schemas.")
            return

        logger.info("Updating schema repository in %s", self.repo_folder)
        self._git("-C", str(self.repo_folder), "checkout", self.branch)
        self._git("-C", str(self.repo_folder), "pull", "--no-rebase", "-t")
        logger.info("Updated schemas.")

    def available_versions(self) -> list[str]:
        """List the schema versions published as tags, in git's order."""
        result = self._git("-C", str(self.repo_folder), "tag", "--list")
        return [
            tag[len(VERSION_TAG_PREFIX) :]
            for tag in result.stdout.split()
            if tag.startswith(VERSION_TAG_PREFIX)
        ]

    def use_version(self, version: str) -> bool:
        """
        Check out the given schema version.

        Returns:
            True if the version exists and is now checked out, False if the
            repository has no such version.
        """
        versions = self.available_versions()
        if version not in versions:
            logger.error(
                "No schema available for version %s. Available versions: %s",
                version,
                ", ".join(versions) or "none",
            )
            return False

        self._git(
            "-C",
            str(self.repo_folder),
            "checkout",
            f"{VERSION_TAG_PREFIX}{version}",
        )
        return True

    def use_schema(self, target: str) -> str | None:
        """
        Resolve the schema file for a target in the checked-out version.

        Returns:
            Path to the schema file, or None if the target has no schema.
        """
        schema_path = self.repo_folder / "schemas" / target / f"{target}.json"
        if not schema_path.is_file():
            logger.error("No schema found for target %s at %s", target, schema_path)
            return None

        if not self.strict:
            return str(schema_path)
        return str(self._write_strict_copy(schema_path, target))

    def determine_version(self, data_path: str | Path) -> str:
        """
        Read the schema version declared by a data file.

        Raises:
            SchemaVersionNotFoundError: If the file cannot be read as JSON, is
                too large to load, or declares no version.
        """
        try:
            with Path(data_path).open(encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, ValueError) as e:
            msg = f"Could not read schema version from {data_path}: {e}"
            raise SchemaVersionNotFoundError(msg) from e
        except MemoryError as e:
            msg = (
                f"{data_path} is too large to read its schema version; "
                "pass the version explicitly"
            )
            raise SchemaVersionNotFoundError(msg) from e
        return self.determine_payload_version(payload)

    def determine_payload_version(self, payload: Any) -> str:
        """
        Read the schema version declared by an already parsed payload.

        Raises:
            SchemaVersionNotFoundError: If there is no top-level string version.
        """
        version = payload.get("version") if isinstance(payload, dict) else None
        if not isinstance(version, str) or not version:
            msg = "Input does not declare a schema version"
            raise SchemaVersionNotFoundError(msg)
        return version

    def _write_strict_copy(self, schema_path: Path, target: str) -> Path:
        try:
            schema = json.loads(schema_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            msg = f"Could not load schema {schema_path}: {e}"
            raise SchemaRepositoryError(msg) from e

        if self._strict_dir is None:
            self._strict_dir = tempfile.TemporaryDirectory(prefix="strict-schema")
        strict_path = Path(self._strict_dir.name) / f"{target}.json"
        strict_path.write_text(
            json.dumps(make_strict(schema), indent=2),
            encoding="utf-8",
        )
        logger.debug("Wrote strict schema for %s to %s", target, strict_path)
        return strict_path

    def _git(self, *args: str) -> subprocess.CompletedProcess:
        command = ["git", *args]
        logger.debug("Running %s", " ".join(command))
        try:
            return subprocess.run(  # noqa: S603
                command,
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout_seconds,
            )
        except subprocess.CalledProcessError as e:
            msg = f"git {' '.join(args)} failed: {(e.stderr or '').strip()}"
            raise SchemaRepositoryError(msg) from e
        except subprocess.TimeoutExpired as e:
            msg = f"git {' '.join(args)} timed out after {self.timeout_seconds}s"
            raise SchemaRepositoryError(msg) from e
        except OSError as e:
            msg = f"Could not run git: {e}"
            raise SchemaRepositoryError(msg) from e
