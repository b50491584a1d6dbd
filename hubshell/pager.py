"""
Paging long results through an external pager process.

"Scrolling is just reading with commitment issues." — schema.cx
"""

import os
import shlex
import shutil
import subprocess

from rich.console import Console

from .rich_utils import console as default_console

FALLBACK_PAGERS = ("less", "more")
LESS_FLAGS = "FRX"  # quit if one screen, raw control chars, no init


def detect_pager(configured: str | None = None, environ: dict[str, str] | None = None) -> list[str] | None:
    """
    Pick the pager command line.

    Order: the configured pager, then ``$PAGER``, then ``less`` or ``more``
    found on PATH. Returns None when nothing is available.
    """
    environ = os.environ if environ is None else environ

    for candidate in (configured, environ.get("PAGER")):
        if candidate and candidate.strip():
            return shlex.split(candidate)

    for name in FALLBACK_PAGERS:
        path = shutil.which(name)
        if path:
            return [path]
    return None


def pager_environment(environ: dict[str, str] | None = None) -> dict[str, str]:
    """Copy the environment with ``LESS`` forced to quit on short output."""
    env = dict(os.environ if environ is None else environ)
    flags = env.get("LESS", "")
    missing = "".join(flag for flag in LESS_FLAGS if flag not in flags)
    env["LESS"] = flags + missing
    return env


class Pager:
    """Writes text directly, or through a pager when it won't fit the screen."""

    def __init__(self, command: list[str] | None = None, console: Console | None = None) -> None:
        self.command = command
        self.console = console or default_console

    def should_page(self, text: str) -> bool:
        if not self.command or not self.console.is_terminal:
            return False
        return text.count("\n") + 1 > self.console.height

    def page(self, text: str) -> bool:
        """
        Send ``text`` to the pager.

        Returns False if the pager could not be started, so the caller can
        print directly instead. The process never outlives this call.
        """
        try:
            process = subprocess.Popen(
                self.command,
                stdin=subprocess.PIPE,
                text=True,
                env=pager_environment(),
            )
        except OSError:
            return False

        try:
            process.communicate(text)
        except (BrokenPipeError, KeyboardInterrupt):
            # The user quit the pager early
            process.kill()
            process.wait()
        return True
