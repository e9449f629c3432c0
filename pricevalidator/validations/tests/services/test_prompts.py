"""Tests for the operator prompts."""

from io import StringIO

from pricevalidator.validations.services.prompts import OperatorPrompter

NAMES = ["a.json", "b.json", "c.json"]


def scripted(*answers: str):
    """Return an input function replaying answers, then signalling EOF."""
    remaining = list(answers)

    def _input(prompt: str) -> str:
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    return _input


class TestChooseEntry:
    def test_menu_lists_entries_and_cancel(self):
        stdout = StringIO()
        prompter = OperatorPrompter(input_func=scripted("1"), stdout=stdout)

        prompter.choose_entry(NAMES)

        assert stdout.getvalue().splitlines()[:4] == [
            "[1] a.json",
            "[2] b.json",
            "[3] c.json",
            "[0] CANCEL",
        ]

    def test_returns_chosen_name(self):
        prompter = OperatorPrompter(input_func=scripted("2"), stdout=StringIO())

        assert prompter.choose_entry(NAMES) == "b.json"

    def test_repeats_until_valid(self):
        stdout = StringIO()
        prompter = OperatorPrompter(
            input_func=scripted("4", "x", " 3 "),
            stdout=stdout,
        )

        assert prompter.choose_entry(NAMES) == "c.json"
        assert stdout.getvalue().count("Please enter a number") == 2

    def test_zero_cancels(self):
        prompter = OperatorPrompter(input_func=scripted("0"), stdout=StringIO())

        assert prompter.choose_entry(NAMES) is None

    def test_end_of_input_cancels(self):
        prompter = OperatorPrompter(input_func=scripted(), stdout=StringIO())

        assert prompter.choose_entry(NAMES) is None


class TestConfirm:
    def test_yes(self):
        prompter = OperatorPrompter(input_func=scripted("Y"), stdout=StringIO())

        assert prompter.confirm("Continue?") is True

    def test_no(self):
        prompter = OperatorPrompter(input_func=scripted("no"), stdout=StringIO())

        assert prompter.confirm("Continue?") is False

    def test_repeats_until_yes_or_no(self):
        stdout = StringIO()
        prompter = OperatorPrompter(
            input_func=scripted("maybe", "", "y"),
            stdout=stdout,
        )

        assert prompter.confirm("Continue?") is True
        assert stdout.getvalue().count("Please answer y or n.") == 2

    def test_end_of_input_declines(self):
        prompter = OperatorPrompter(input_func=scripted(), stdout=StringIO())

        assert prompter.confirm("Continue?") is False
