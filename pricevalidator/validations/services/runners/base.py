"""
Abstract base class and result types for validator runners.

A validator runner executes the externally built validator image against one
data file and one schema file, then interprets what the container left behind.
The validator's rules are opaque here: the runner only knows how to invoke it
and what shape its result takes.

## Execution Model

1. Caller invokes run_container() which blocks until the container exits
2. The container reads the schema and data files from its mounted directories
3. The container may write ``output.txt`` and ``locations.json`` to its
   mounted output directory
4. run_container() returns a ContainerResult built from the exit status and
   whichever artifacts exist

Runners never raise for validator failures. Every path returns a
ContainerResult, and failures are additionally recorded in the process exit
status (see pricevalidator.core.exit_status).
"""

from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from pricevalidator.validations.constants import ContainerFailureKind


@dataclass(frozen=True)
class ContainerInvocation:
    """
    Fully resolved inputs for one validator container run.

    All paths are absolute. The container runs in its own filesystem
    namespace and only sees the three directories mounted from here.
    """

    schema_path: Path
    data_path: Path
    output_dir: Path
    schema_name: str
    image_id: str

    @classmethod
    def resolve(
        cls,
        *,
        schema_path: str | Path,
        data_path: str | Path,
        output_dir: str | Path,
        schema_name: str,
        image_id: str,
    ) -> ContainerInvocation:
        """Build an invocation with every path converted to absolute form."""
        return cls(
            schema_path=Path(schema_path).resolve(),
            data_path=Path(data_path).resolve(),
            output_dir=Path(output_dir).resolve(),
            schema_name=schema_name,
            image_id=image_id,
        )

    @property
    def schema_dir(self) -> Path:
        return self.schema_path.parent

    @property
    def schema_file(self) -> str:
        return self.schema_path.name

    @property
    def data_dir(self) -> Path:
        return self.data_path.parent

    @property
    def data_file(self) -> str:
        return self.data_path.name


class Locations(BaseModel):
    """
    Where in the input the validator found problems.

    Each category is a list of string markers. Categories the validator adds
    beyond the known ones are kept as extra fields.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    in_network: list[str] | None = Field(default=None, alias="inNetwork")
    allowed_amount: list[str] | None = Field(default=None, alias="allowedAmount")
    provider_reference: list[str] | None = Field(
        default=None,
        alias="providerReference",
    )


class ContainerResult(BaseModel):
    """
    Outcome of one validator container run.

    ``passed`` is serialized as ``pass``. Optional fields that were not set are
    omitted from to_dict(), so a plain successful run is ``{"pass": true}``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    passed: bool = Field(alias="pass")
    text: str | None = None
    locations: Locations | None = None
    failure_kind: ContainerFailureKind | None = None

    @classmethod
    def success(cls, locations: Locations | None = None) -> ContainerResult:
        return cls(passed=True, locations=locations)

    @classmethod
    def failure(
        cls,
        kind: ContainerFailureKind,
        text: str | None = None,
    ) -> ContainerResult:
        return cls(passed=False, failure_kind=kind, text=text)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ValidatorRunner(ABC):
    """
    Abstract base class for validator container runners.

    Implementations own discovery of the validator image, the container
    invocation itself and interpretation of the artifacts it produces.
    """

    @abstractmethod
    def run_container(
        self,
        schema_path: str | Path,
        schema_name: str,
        data_path: str | Path,
        output_path: str | Path | None = None,
    ) -> ContainerResult:
        """
        Run the validator against a data file and wait for completion.

        Args:
            schema_path: Schema file to validate against.
            schema_name: Target schema/report name passed to the validator.
            data_path: Data file to validate.
            output_path: Where to copy the validator's text report. When not
                given, the report is written to the log instead.

        Returns:
            ContainerResult describing the run. Never raises.
        """

    @abstractmethod
    def run_container_with_json(
        self,
        schema_path: str | Path,
        schema_name: str,
        payload: Any,
        output_path: str | Path | None = None,
    ) -> ContainerResult:
        """
        Run the validator against an in-memory JSON value.

        The value is serialized to a temporary file which is then validated
        exactly like run_container() would.
        """

    def is_available(self) -> bool:
        """
        Check if this runner is available for use.

        Returns:
            True if the runner can execute containers, False otherwise
        """
        return True

    def get_runner_type(self) -> str:
        """
        Get the runner type identifier.

        Returns:
            Short identifier for this runner type (e.g., "docker")
        """
        return self.__class__.__name__.replace("ValidatorRunner", "").lower()
