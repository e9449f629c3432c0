"""
Interactive validation of several files from one archive.

When a downloaded zip archive holds more than one JSON file, the operator
picks which entries to validate, one at a time:

    AWAITING_CHOICE --(entry chosen)--> VALIDATING --> AWAITING_CONTINUE
          ^                                                 |
          +------------------(yes)--------------------------+
    AWAITING_CHOICE --(cancel)--> DONE
    AWAITING_CONTINUE --(no, or iteration cap reached)--> DONE

Each entry is extracted over the same path and validated on its own; results
are logged per entry and never merged. The archive is closed exactly once,
when the loop reaches DONE, including when a step raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import TYPE_CHECKING

from django.conf import settings

from pricevalidator.validations.services.downloads import extract_entry

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from pricevalidator.validations.services.downloads import ArchiveSelection
    from pricevalidator.validations.services.prompts import OperatorPrompter
    from pricevalidator.validations.services.runners.base import ContainerResult
    from pricevalidator.validations.services.runners.base import ValidatorRunner

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 100
CONTINUE_QUESTION = "Would you like to validate another file in the ZIP?"


class LoopState(str, Enum):
    AWAITING_CHOICE = "awaiting_choice"
    VALIDATING = "validating"
    AWAITING_CONTINUE = "awaiting_continue"
    DONE = "done"


@dataclass
class ArchiveLoopOutcome:
    """What happened during one pass over an archive."""

    validated_entries: list[str] = field(default_factory=list)
    last_result: ContainerResult | None = None
    hit_iteration_cap: bool = False


class ArchiveValidationLoop:
    """
    Drives the operator through validating entries of an ArchiveSelection.

    Args:
        selection: The open archive, its candidate names and the shared
            extraction path. The loop closes the archive when it finishes.
        runner: Validator runner used for every chosen entry.
        schema_path: Schema file for every entry.
        schema_name: Target schema/report name for every entry.
        prompter: Asks for the entry and whether to continue.
        output_path: Destination for the validator report of each entry.
        max_iterations: Most entries validated in one pass; defaults to the
            ARCHIVE_MAX_ITERATIONS setting.
        extract: Function extracting an entry; defaults to extract_entry.
    """

    def __init__(
        self,
        selection: ArchiveSelection,
        runner: ValidatorRunner,
        schema_path: str | Path,
        schema_name: str,
        prompter: OperatorPrompter,
        output_path: str | Path | None = None,
        max_iterations: int | None = None,
        extract: Callable[..., None] = extract_entry,
    ):
        self.selection = selection
        self.runner = runner
        self.schema_path = schema_path
        self.schema_name = schema_name
        self.prompter = prompter
        self.output_path = output_path
        self.max_iterations = max_iterations or getattr(
            settings,
            "ARCHIVE_MAX_ITERATIONS",
            DEFAULT_MAX_ITERATIONS,
        )
        self.extract = extract
        self.state = LoopState.AWAITING_CHOICE

    def run(self) -> ArchiveLoopOutcome:
        outcome = ArchiveLoopOutcome()
        chosen: str | None = None
        try:
            while self.state is not LoopState.DONE:
                if self.state is LoopState.AWAITING_CHOICE:
                    chosen = self.prompter.choose_entry(self.selection.entry_names)
                    if chosen is None:
                        logger.info("Archive validation cancelled by operator")
                        self.state = LoopState.DONE
                    else:
                        self.state = LoopState.VALIDATING

                elif self.state is LoopState.VALIDATING:
                    self._validate_entry(chosen, outcome)
                    self.state = LoopState.AWAITING_CONTINUE

                elif self.state is LoopState.AWAITING_CONTINUE:
                    if len(outcome.validated_entries) >= self.max_iterations:
                        logger.warning(
                            "Stopping after %d archive entries (limit reached)",
                            self.max_iterations,
                        )
                        outcome.hit_iteration_cap = True
                        self.state = LoopState.DONE
                    elif self.prompter.confirm(CONTINUE_QUESTION):
                        self.state = LoopState.AWAITING_CHOICE
                    else:
                        self.state = LoopState.DONE
        finally:
            self.state = LoopState.DONE
            self.selection.archive.close()

        return outcome

    def _validate_entry(self, name: str, outcome: ArchiveLoopOutcome) -> None:
        logger.info("Extracting %s", name)
        self.extract(self.selection.archive, name, self.selection.data_path)

        result = self.runner.run_container(
            self.schema_path,
            self.schema_name,
            self.selection.data_path,
            self.output_path,
        )
        logger.info("Validation result for %s: %s", name, result.to_dict())

        outcome.validated_entries.append(name)
        outcome.last_result = result
