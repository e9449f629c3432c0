"""
Docker-based validator runner.

This runner executes the validator image with the local ``docker`` CLI,
suitable for:
- Operators validating files from the command line
- Single-server deployments of the validation API
- Local development and testing

## Execution Model

Containers run **synchronously** - run_container() blocks until the
container exits or the configured deadline passes. Each run gets its own
temporary output directory which is mounted into the container and removed
afterwards, whatever the outcome.

The command has a fixed shape:

    docker run --rm -v "<schemaDir>":/schema/ -v "<dataDir>":/data/
        -v "<outputDir>":/output/ <imageId> "schema/<schemaFile>"
        "data/<dataFile>" -o "output/" -s <schemaName>

Exactly three directories are mounted. The validator sees the schema and data
files through paths relative to its working directory and writes its report
(``output.txt``) and problem locations (``locations.json``) to ``output/``.

## Result Interpretation

- Exit code 0: the run passes. ``locations.json`` is parsed when present; a
  malformed file is logged and ignored, it never turns a pass into a failure.
- Non-zero exit, spawn failure or timeout: the run fails and the process exit
  status is marked as failed.
- In every case ``output.txt``, if present, is copied to the caller's output
  path or written to the log.
- Bytes that are not valid UTF-8 in ``output.txt`` or in the container's
  stdout/stderr are replaced when decoded; they never fail the run.
"""

from __future__ import annotations

import json
import logging
import shlex
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Any

from django.conf import settings

from pricevalidator.core import exit_status
from pricevalidator.validations.constants import CONTAINER_DATA_ROOT
from pricevalidator.validations.constants import CONTAINER_OUTPUT_ROOT
from pricevalidator.validations.constants import CONTAINER_SCHEMA_ROOT
from pricevalidator.validations.constants import LOCATIONS_FILENAME
from pricevalidator.validations.constants import MSG_JSON_PROCESSING_FAILED
from pricevalidator.validations.constants import OUTPUT_TEXT_FILENAME
from pricevalidator.validations.constants import ContainerFailureKind
from pricevalidator.validations.services.runners.base import ContainerInvocation
from pricevalidator.validations.services.runners.base import ContainerResult
from pricevalidator.validations.services.runners.base import Locations
from pricevalidator.validations.services.runners.base import ValidatorRunner
from pricevalidator.validations.services.runners.identity import ValidatorIdentity

logger = logging.getLogger(__name__)

DEFAULT_IMAGE = "validator:latest"
DEFAULT_DOCKER_BINARY = "docker"
DEFAULT_TIMEOUT_SECONDS = 3600  # 1 hour


def render_run_command(
    invocation: ContainerInvocation,
    docker_binary: str = DEFAULT_DOCKER_BINARY,
) -> str:
    """
    Render the container command for an invocation.

    Pure function of its inputs: the same invocation always yields the same
    string.
    """
    return (
        f'{docker_binary} run --rm '
        f'-v "{invocation.schema_dir}":{CONTAINER_SCHEMA_ROOT} '
        f'-v "{invocation.data_dir}":{CONTAINER_DATA_ROOT} '
        f'-v "{invocation.output_dir}":{CONTAINER_OUTPUT_ROOT} '
        f"{invocation.image_id} "
        f'"schema/{invocation.schema_file}" '
        f'"data/{invocation.data_file}" '
        f'-o "output/" '
        f"-s {invocation.schema_name}"
    )


class DockerValidatorRunner(ValidatorRunner):
    """
    Validator runner that shells out to the local Docker CLI.

    Configuration via settings:
        VALIDATOR_IMAGE = "validator:latest"
        VALIDATOR_DOCKER_BINARY = "docker"
        VALIDATOR_TIMEOUT_SECONDS = 3600
        VALIDATOR_RUNNER_OPTIONS = {}  # overrides for the constructor
    """

    def __init__(
        self,
        image: str | None = None,
        docker_binary: str | None = None,
        timeout_seconds: int | None = None,
        output_path: str | Path | None = None,
        identity: ValidatorIdentity | None = None,
    ):
        """
        Initialize Docker validator runner.

        Args:
            image: Image reference of the validator (e.g., "validator:latest")
            docker_binary: Docker CLI executable used to start containers
            timeout_seconds: Deadline for a single container run
            output_path: Default destination for the validator's text report
            identity: Shared identity cache; a new one is created if omitted
        """
        self.image = image or getattr(settings, "VALIDATOR_IMAGE", DEFAULT_IMAGE)
        self.docker_binary = docker_binary or getattr(
            settings,
            "VALIDATOR_DOCKER_BINARY",
            DEFAULT_DOCKER_BINARY,
        )
        self.timeout_seconds = timeout_seconds or getattr(
            settings,
            "VALIDATOR_TIMEOUT_SECONDS",
            DEFAULT_TIMEOUT_SECONDS,
        )
        self.output_path = output_path
        self.identity = identity or ValidatorIdentity(self.image)

    def is_available(self) -> bool:
        """Check if the validator image can be found."""
        return bool(self.identity.get())

    def get_runner_type(self) -> str:
        """Return runner type identifier."""
        return "docker"

    def build_run_command(
        self,
        schema_path: str | Path,
        data_path: str | Path,
        output_dir: str | Path,
        schema_name: str,
    ) -> str:
        """Build the container command using the cached validator identity."""
        invocation = ContainerInvocation.resolve(
            schema_path=schema_path,
            data_path=data_path,
            output_dir=output_dir,
            schema_name=schema_name,
            image_id=self.identity.get(),
        )
        return render_run_command(invocation, self.docker_binary)

    def run_container(
        self,
        schema_path: str | Path,
        schema_name: str,
        data_path: str | Path,
        output_path: str | Path | None = None,
    ) -> ContainerResult:
        """
        Run the validator container and wait for completion.

        Args:
            schema_path: Schema file to validate against
            schema_name: Target schema/report name (``-s`` argument)
            data_path: Data file to validate
            output_path: Destination for ``output.txt``; defaults to the
                runner's output_path, and to the log when neither is set

        Returns:
            ContainerResult. Failures are reported in the result and in the
            process exit status, never raised.
        """
        if output_path is None:
            output_path = self.output_path

        try:
            image_id = self.identity.get()
            if not image_id:
                logger.error(
                    "Could not find a validator docker image (%s).",
                    self.image,
                )
                exit_status.mark_failed()
                return ContainerResult.failure(ContainerFailureKind.VALIDATOR_NOT_FOUND)

            with tempfile.TemporaryDirectory(
                prefix="output",
                ignore_cleanup_errors=True,
            ) as output_dir:
                invocation = ContainerInvocation.resolve(
                    schema_path=schema_path,
                    data_path=data_path,
                    output_dir=output_dir,
                    schema_name=schema_name,
                    image_id=image_id,
                )
                return self._execute(invocation, output_path)
        except Exception as e:
            logger.exception("Error when running validator container: %s", e)
            exit_status.mark_failed()
            return ContainerResult.failure(ContainerFailureKind.ERROR)

    def run_container_with_json(
        self,
        schema_path: str | Path,
        schema_name: str,
        payload: Any,
        output_path: str | Path | None = None,
    ) -> ContainerResult:
        """
        Validate an in-memory JSON value.

        The value is written pretty-printed (two-space indent, UTF-8) to a file
        in its own temporary directory, so only that file's directory is
        mounted into the container. The directory is removed afterwards.
        """
        logger.info("Received JSON input. Creating temporary file...")
        try:
            serialized = json.dumps(payload, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.error("Failed to process JSON input: %s", e)
            return ContainerResult(passed=False, text=MSG_JSON_PROCESSING_FAILED)

        try:
            with tempfile.TemporaryDirectory(prefix="input") as input_dir:
                data_path = Path(input_dir) / "payload.json"
                data_path.write_text(serialized, encoding="utf-8")
                logger.info("Temporary file created: %s", data_path)
                return self.run_container(
                    schema_path,
                    schema_name,
                    data_path,
                    output_path,
                )
        except OSError as e:
            logger.error("Failed to process JSON input: %s", e)
            return ContainerResult(passed=False, text=MSG_JSON_PROCESSING_FAILED)

    def _execute(
        self,
        invocation: ContainerInvocation,
        output_path: str | Path | None,
    ) -> ContainerResult:
        output_text_path = invocation.output_dir / OUTPUT_TEXT_FILENAME
        locations_path = invocation.output_dir / LOCATIONS_FILENAME

        command = render_run_command(invocation, self.docker_binary)
        logger.info("Running validator container...")
        logger.debug(command)

        try:
            completed = subprocess.run(  # noqa: S603
                shlex.split(command),
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout_seconds,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.error(
                "Validator container timed out after %ss",
                self.timeout_seconds,
            )
            self._surface_output_text(output_text_path, output_path)
            exit_status.mark_failed()
            return ContainerResult.failure(ContainerFailureKind.TIMEOUT)
        except OSError as e:
            logger.error("Could not start validator container: %s", e)
            self._surface_output_text(output_text_path, output_path)
            exit_status.mark_failed()
            return ContainerResult.failure(ContainerFailureKind.PROCESS_FAILED)

        if completed.returncode != 0:
            logger.warning(
                "Validator container exited with code %d",
                completed.returncode,
            )
            if completed.stderr:
                logger.debug(completed.stderr)
            self._surface_output_text(output_text_path, output_path)
            exit_status.mark_failed()
            return ContainerResult.failure(ContainerFailureKind.PROCESS_FAILED)

        self._surface_output_text(output_text_path, output_path)
        return ContainerResult.success(locations=self._read_locations(locations_path))

    def _surface_output_text(
        self,
        output_text_path: Path,
        output_path: str | Path | None,
    ) -> None:
        """Copy the validator's report to output_path, or log it verbatim."""
        if not output_text_path.exists():
            return
        if output_path:
            shutil.copyfile(output_text_path, output_path)
            logger.info("Validator output written to %s", output_path)
        else:
            report = output_text_path.read_text(encoding="utf-8", errors="replace")
            logger.info(report)

    def _read_locations(self, locations_path: Path) -> Locations | None:
        if not locations_path.exists():
            return None
        # pydantic.ValidationError is a ValueError; bad UTF-8 is reported as one.
        try:
            return Locations.model_validate_json(locations_path.read_bytes())
        except (OSError, ValueError) as e:
            logger.warning(
                "Ignoring unreadable locations file from validator: %s",
                e,
            )
            return None
