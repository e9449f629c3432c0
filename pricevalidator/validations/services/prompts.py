"""Blocking operator prompts used while walking through an archive."""

from __future__ import annotations

import sys
from collections.abc import Callable
from collections.abc import Sequence
from typing import TextIO

CANCEL_CHOICE = "0"


class OperatorPrompter:
    """
    Asks the operator to pick an archive entry and whether to keep going.

    Both prompts block until a valid answer is given. End of input (no
    terminal attached, Ctrl+D) counts as cancelling, so unattended runs stop
    instead of waiting forever.
    """

    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        stdout: TextIO | None = None,
    ):
        self.input_func = input_func
        self.stdout = stdout or sys.stdout

    def choose_entry(self, names: Sequence[str]) -> str | None:
        """
        Present the names as a numbered menu and return the chosen one.

        Returns:
            The chosen name, or None if the operator cancelled.
        """
        for index, name in enumerate(names, start=1):
            self.stdout.write(f"[{index}] {name}\n")
        self.stdout.write(f"[{CANCEL_CHOICE}] CANCEL\n")

        while True:
            answer = self._ask(f"Choose one [1...{len(names)} / 0]: ")
            if answer is None or answer == CANCEL_CHOICE:
                return None
            if answer.isdigit() and 1 <= int(answer) <= len(names):
                return names[int(answer) - 1]
            self.stdout.write(f"Please enter a number between 0 and {len(names)}.\n")

    def confirm(self, question: str) -> bool:
        """Ask a yes/no question, repeating until the answer is y or n."""
        while True:
            answer = self._ask(f"{question} [y/n]: ")
            if answer is None:
                return False
            answer = answer.lower()
            if answer in {"y", "yes"}:
                return True
            if answer in {"n", "no"}:
                return False
            self.stdout.write("Please answer y or n.\n")

    def _ask(self, prompt: str) -> str | None:
        try:
            return self.input_func(prompt).strip()
        except EOFError:
            self.stdout.write("\n")
            return None
