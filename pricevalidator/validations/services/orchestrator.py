"""
Validation orchestration.

The orchestrator sequences one validation:

```
1. Check the input (file exists / inline JSON parses)
2. Prepare the schema repository
3. Work out the schema version (detected from the data, or given explicitly)
4. Check out that version and resolve the target's schema file
5. Run the validator container
```

Remote data files follow the same shape, except that the version is always
explicit and step 1 becomes a URL check, followed by the download after the
schema is resolved. A download that turns out to be an archive with several
JSON files hands over to the interactive ArchiveValidationLoop.

Every step short-circuits: the first failure becomes the outcome and nothing
after it runs. Nothing is retried. Both entry points always return a value,
either a PipelineFailure (the validator never ran) or the ContainerResult of
the run; collaborator exceptions are converted at this boundary.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING
from typing import Any
from typing import Literal

from pydantic import BaseModel
from pydantic import ConfigDict

from pricevalidator.validations.constants import DEFAULT_TARGET
from pricevalidator.validations.constants import MSG_DATA_FILE_NOT_FOUND
from pricevalidator.validations.constants import MSG_INVALID_JSON
from pricevalidator.validations.constants import MSG_INVALID_SCHEMA_PATH
from pricevalidator.validations.constants import MSG_INVALID_URL
from pricevalidator.validations.constants import MSG_NO_ENTRY_VALIDATED
from pricevalidator.validations.constants import MSG_NO_SCHEMA
from pricevalidator.validations.constants import MSG_VERSION_NOT_FOUND
from pricevalidator.validations.exceptions import SchemaVersionNotFoundError
from pricevalidator.validations.services.archive_loop import ArchiveValidationLoop
from pricevalidator.validations.services.downloads import DownloadManager
from pricevalidator.validations.services.prompts import OperatorPrompter
from pricevalidator.validations.services.runners import get_validator_runner
from pricevalidator.validations.services.runners.base import ContainerResult
from pricevalidator.validations.services.schemas import SchemaManager

if TYPE_CHECKING:
    from collections.abc import Callable

    from pricevalidator.validations.services.runners.base import ValidatorRunner

logger = logging.getLogger(__name__)

MSG_VERSION_REQUIRED = "A schema version is required to validate a URL"


class InputKind(str, Enum):
    FILE = "file"
    JSON = "json"


@dataclass(frozen=True)
class ValidationInput:
    """
    What to validate, as chosen by the caller.

    Use from_file() for a data file on disk and from_json() for an inline
    payload. The kind is never guessed from the content.
    """

    kind: InputKind
    path: Path | None = None
    payload: Any = None

    @classmethod
    def from_file(cls, path: str | Path) -> ValidationInput:
        return cls(kind=InputKind.FILE, path=Path(path))

    @classmethod
    def from_json(cls, payload: Any) -> ValidationInput:
        """
        Args:
            payload: An already parsed JSON value, or JSON text (str/bytes)
                which is parsed before validation.
        """
        return cls(kind=InputKind.JSON, payload=payload)

    def describe(self) -> str:
        if self.kind is InputKind.FILE:
            return str(self.path)
        return "inline JSON payload"


@dataclass
class ValidationOptions:
    target: str = DEFAULT_TARGET
    schema_version: str | None = None
    strict: bool = False
    output_path: str | Path | None = None
    yes_all: bool = False


class PipelineFailure(BaseModel):
    """A validation that stopped before the validator could run."""

    model_config = ConfigDict(frozen=True)

    success: Literal[False] = False
    message: str

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


ValidationOutcome = ContainerResult | PipelineFailure


class ValidationOrchestrator:
    """
    Runs the validation pipeline for local files, inline payloads and URLs.

    Collaborators are injectable so the pipeline can be exercised without git,
    Docker or the network; by default they come from settings.
    """

    def __init__(
        self,
        runner: ValidatorRunner | None = None,
        schema_manager_factory: Callable[[], SchemaManager] = SchemaManager,
        download_manager_factory: Callable[..., DownloadManager] = DownloadManager,
        prompter: OperatorPrompter | None = None,
    ):
        self._runner = runner
        self.schema_manager_factory = schema_manager_factory
        self.download_manager_factory = download_manager_factory
        self.prompter = prompter or OperatorPrompter()

    @property
    def runner(self) -> ValidatorRunner:
        """Lazy-load the configured validator runner."""
        if self._runner is None:
            self._runner = get_validator_runner()
        return self._runner

    def validate(
        self,
        source: ValidationInput,
        options: ValidationOptions,
    ) -> ValidationOutcome:
        """Validate a local data file or an inline JSON payload."""
        logger.info("Received input: %s", source.describe())
        logger.debug("Validation options: %s", options)

        if source.kind is InputKind.FILE:
            if source.path is None or not source.path.is_file():
                logger.error("Could not find data file: %s", source.path)
                return PipelineFailure(message=MSG_DATA_FILE_NOT_FOUND)
            payload = None
        else:
            try:
                payload = _load_payload(source.payload)
            except ValueError as e:
                logger.error("Inline input is not valid JSON: %s", e)
                return PipelineFailure(message=MSG_INVALID_JSON)

        try:
            with self.schema_manager_factory() as schema_manager:
                schema_manager.ensure_repo()
                schema_manager.strict = options.strict
                schema_manager.auto_detect_version = options.schema_version is None

                version = self._resolve_version(
                    schema_manager,
                    source,
                    payload,
                    options.schema_version,
                )
                if isinstance(version, PipelineFailure):
                    return version

                schema_path = self._resolve_schema(
                    schema_manager,
                    version,
                    options.target,
                )
                if isinstance(schema_path, PipelineFailure):
                    return schema_path

                if source.kind is InputKind.FILE:
                    result = self.runner.run_container(
                        schema_path,
                        options.target,
                        source.path,
                        options.output_path,
                    )
                else:
                    result = self.runner.run_container_with_json(
                        schema_path,
                        options.target,
                        payload,
                        options.output_path,
                    )
        except Exception as e:
            logger.exception("Exception in validation")
            return PipelineFailure(message=str(e))

        logger.info("Validation result: %s", result.to_dict())
        return result

    def validate_from_url(
        self,
        url: str,
        options: ValidationOptions,
    ) -> ValidationOutcome:
        """
        Validate a remote data file against an explicitly chosen version.

        When the download is an archive with several JSON files, the operator
        picks entries interactively and the result of the last validated
        entry is returned.
        """
        logger.info("Received URL: %s", url)
        logger.debug("Validation options: %s", options)

        try:
            with self.download_manager_factory(
                yes_all=options.yes_all,
                prompter=self.prompter,
            ) as downloads:
                if not downloads.check_data_url(url):
                    logger.info("Exiting: invalid or unreachable URL.")
                    return PipelineFailure(message=MSG_INVALID_URL)

                if not options.schema_version:
                    logger.error(MSG_VERSION_REQUIRED)
                    return PipelineFailure(message=MSG_VERSION_REQUIRED)

                with self.schema_manager_factory() as schema_manager:
                    schema_manager.ensure_repo()
                    schema_manager.strict = options.strict
                    schema_manager.auto_detect_version = False

                    schema_path = self._resolve_schema(
                        schema_manager,
                        options.schema_version,
                        options.target,
                    )
                    if isinstance(schema_path, PipelineFailure):
                        return schema_path

                    data = downloads.download_data_file(url)
                    if isinstance(data, str):
                        result = self.runner.run_container(
                            schema_path,
                            options.target,
                            data,
                            options.output_path,
                        )
                        logger.info("Validation result: %s", result.to_dict())
                        return result

                    logger.info(
                        "Multiple files detected in archive. Prompting for selection...",
                    )
                    outcome = ArchiveValidationLoop(
                        selection=data,
                        runner=self.runner,
                        schema_path=schema_path,
                        schema_name=options.target,
                        prompter=self.prompter,
                        output_path=options.output_path,
                    ).run()
        except Exception as e:
            logger.exception("Exception in URL validation")
            return PipelineFailure(message=str(e))

        if outcome.last_result is None:
            return PipelineFailure(message=MSG_NO_ENTRY_VALIDATED)
        return outcome.last_result

    def _resolve_version(
        self,
        schema_manager: SchemaManager,
        source: ValidationInput,
        payload: Any,
        explicit_version: str | None,
    ) -> str | PipelineFailure:
        """Detect the data's version; an explicit version always wins."""
        try:
            if source.kind is InputKind.FILE:
                detected = schema_manager.determine_version(source.path)
            else:
                detected = schema_manager.determine_payload_version(payload)
        except SchemaVersionNotFoundError as e:
            if explicit_version is None:
                logger.error("No schema version detected: %s", e)
                return PipelineFailure(message=MSG_VERSION_NOT_FOUND)
            logger.warning(
                "Could not detect schema version, using %s: %s",
                explicit_version,
                e,
            )
            return explicit_version

        logger.info("Detected schema version: %s", detected)
        if explicit_version is not None and detected != explicit_version:
            logger.warning(
                "Mismatched schema version! Data declares %s, using %s instead.",
                detected,
                explicit_version,
            )
        return explicit_version or detected

    def _resolve_schema(
        self,
        schema_manager: SchemaManager,
        version: str,
        target: str,
    ) -> str | PipelineFailure:
        if not schema_manager.use_version(version):
            logger.error("No schema available for version %s", version)
            return PipelineFailure(message=MSG_NO_SCHEMA)
        logger.info("Schema version available, using %s", version)

        schema_path = schema_manager.use_schema(target)
        if not isinstance(schema_path, str) or not schema_path:
            logger.error("Expected a schema path but got %r", schema_path)
            return PipelineFailure(message=MSG_INVALID_SCHEMA_PATH)

        logger.info("Using schema: %s", schema_path)
        return schema_path


def _load_payload(payload: Any) -> Any:
    """Parse JSON text; already parsed values are returned unchanged."""
    if isinstance(payload, (str, bytes, bytearray)):
        return json.loads(payload)
    return payload
