"""
Line reading and multi-step prompts.

"A conversation is just a protocol with feelings." — schema.cx
"""

from rich.console import Console
from rich.text import Text

from .rich_utils import console as default_console
from .rich_utils import print_info

try:
    import readline
except ImportError:  # Windows without pyreadline
    readline = None

BODY_PROMPT = "> "
END_OF_BODY = "EOF"
CANCEL_BODY = "QUIT"


class CancelledInteraction(Exception):
    """The user abandoned a multi-step prompt."""

    pass


class LineReader:
    """
    Reads lines from the terminal and keeps the command history.

    Only lines passed to ``add_history`` are recorded, so answers typed into
    sub-prompts never end up in the history.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or default_console
        self.history: list[str] = []
        if readline is not None:
            readline.set_auto_history(False)

    def read(self, prompt: str) -> str | None:
        """Read one line, or None at end of input."""
        try:
            return self.console.input(Text(prompt))
        except EOFError:
            return None

    def add_history(self, line: str) -> None:
        if not line.strip():
            return
        self.history.append(line)
        if readline is not None:
            readline.add_history(line)


def _read_or_cancel(reader: LineReader, prompt: str) -> str:
    line = reader.read(prompt)
    if line is None:
        raise CancelledInteraction()
    return line


def collect_fields(reader: LineReader, labels: list[str]) -> dict[str, str]:
    """
    Prompt once per label and collect the answers.

    Args:
        reader: Line source
        labels: Field names, prompted in order as ``"Label: "``

    Returns:
        Mapping of label to the (unvalidated) line typed for it

    Raises:
        CancelledInteraction: If input ends before every field is answered
    """
    return {label: _read_or_cancel(reader, f"{label.capitalize()}: ") for label in labels}


def collect_body(reader: LineReader) -> str:
    """
    Collect a multi-line body terminated by an ``EOF`` line.

    A ``QUIT`` line (or end of input) cancels the whole interaction.
    """
    print_info(f"Body: end with '{END_OF_BODY}' on its own line, '{CANCEL_BODY}' to cancel")
    lines: list[str] = []
    while True:
        line = _read_or_cancel(reader, BODY_PROMPT)
        if line == END_OF_BODY:
            return "\n".join(lines)
        if line == CANCEL_BODY:
            raise CancelledInteraction()
        lines.append(line)


def collect_multiline_body(reader: LineReader, label: str = "title") -> tuple[str, str]:
    """Prompt for a single-line field (the title), then for a multi-line body."""
    fields = collect_fields(reader, [label])
    return fields[label], collect_body(reader)


def confirm(reader: LineReader, prompt: str, expected_yes: str = "Y") -> bool:
    """Exact-match confirmation: only ``expected_yes`` counts as yes."""
    answer = reader.read(prompt)
    return answer is not None and answer.strip() == expected_yes


def prompt_choice(reader: LineReader, prompt: str, choices: list[str]) -> str:
    """Re-prompt until the answer is one of ``choices``."""
    while True:
        answer = _read_or_cancel(reader, prompt).strip().lower()
        if answer in choices:
            return answer
        print_info(f"Choose one of: {', '.join(choices)}")
