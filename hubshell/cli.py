"""
hubshell CLI interface.

"The command line is where the real work happens. Everything else is just theater." — schema.cx
"""

import typer
from dotenv import load_dotenv

from .config import SettingsManager
from .rich_utils import console
from .shell import Shell

# Load environment variables from .env file if it exists
load_dotenv()

app = typer.Typer(
    name="hubshell",
    help="GitHub Command Tools - the GitHub API at an interactive prompt.",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from . import __version__
        console.print(f"hubshell version {__version__}")
        raise typer.Exit()


@app.command()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """
    Start the interactive GitHub shell.

    Example:
        hubshell
        github> repo fayland perl-app-github
        fayland/perl-app-github> i.list open
    """
    settings = SettingsManager().load()
    raise typer.Exit(Shell(settings).run())


if __name__ == "__main__":
    app()
