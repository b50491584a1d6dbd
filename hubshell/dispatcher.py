"""
Mapping a line of input to a command handler.

"Parsing is just listening with rules." — schema.cx
"""

from typing import NamedTuple

from .commands import ALIASES, COMMANDS, Command, CommandContext
from .interaction import CancelledInteraction
from .rich_utils import print_error, print_warning
from .session import PreconditionError
from .validation import ValidationError

UNKNOWN_COMMAND_MESSAGE = "Unknown command, type '?' or 'h' for help"


class ParsedLine(NamedTuple):
    """A trimmed input line split into its command and argument string."""

    command: Command | None
    token: str
    args: str | None


def resolve_command(token: str) -> Command | None:
    """Exact, case-sensitive lookup of a command name or alias."""
    if token in ALIASES:
        return ALIASES[token]
    try:
        return Command(token)
    except ValueError:
        return None


def parse_line(line: str) -> ParsedLine | None:
    """
    Parse one line of input.

    Returns None for blank lines. A line that is itself a command name wins
    over splitting it into a command token and an argument string.
    """
    text = line.strip()
    if not text:
        return None

    command = resolve_command(text)
    if command is not None:
        return ParsedLine(command, text, None)

    parts = text.split(maxsplit=1)
    args = parts[1] if len(parts) > 1 else None
    return ParsedLine(resolve_command(parts[0]), parts[0], args)


def dispatch(ctx: CommandContext, line: str) -> None:
    """
    Run the handler for ``line`` and record the line in the history.

    Usage and precondition failures are reported here so they never reach
    the REPL loop. ``ShellExit`` is left to propagate.
    """
    parsed = parse_line(line)
    if parsed is None:
        return

    try:
        if parsed.command is None:
            print_warning(UNKNOWN_COMMAND_MESSAGE)
            return
        COMMANDS[parsed.command](ctx, parsed.args)
    except ValidationError as e:
        print_error(str(e))
    except PreconditionError as e:
        print_warning(str(e))
    except CancelledInteraction:
        pass
    finally:
        ctx.reader.add_history(line.strip())
