"""
Rich formatting utilities for consistent terminal output.

"Beauty is in the eye of the beholder. But colors help." — schema.cx
"""

from rich.console import Console
from rich.markup import escape

# Centralized console instance
console = Console()


# Color scheme constants
class Colors:
    """Consistent color scheme for the application."""
    SUCCESS = "green"
    ERROR = "red"
    WARNING = "yellow"
    INFO = "cyan"


def print_success(message: str, prefix: str = "✅") -> None:
    """Print a success message in green."""
    console.print(f"[{Colors.SUCCESS}]{prefix} {escape(message)}[/{Colors.SUCCESS}]")


def print_error(message: str, prefix: str = "❌") -> None:
    """Print an error message in red."""
    console.print(f"[{Colors.ERROR}]{prefix} {escape(message)}[/{Colors.ERROR}]")


def print_warning(message: str, prefix: str = "⚠️") -> None:
    """Print a warning message in yellow."""
    console.print(f"[{Colors.WARNING}]{prefix} {escape(message)}[/{Colors.WARNING}]")


def print_info(message: str, prefix: str = "ℹ️") -> None:
    """Print an info message in cyan."""
    console.print(f"[{Colors.INFO}]{prefix} {escape(message)}[/{Colors.INFO}]")


def print_plain(text: str) -> None:
    """Print text verbatim: no markup, no highlighting, no wrapping."""
    console.print(text, markup=False, highlight=False, soft_wrap=True)

