"""
Input validation utilities for hubshell.

"Trust, but verify. Especially user input." — schema.cx
"""

import re

from .models import Credentials, RepoRef


class ValidationError(Exception):
    """Raised when command arguments are malformed."""

    pass


# Malformed arguments are usage errors at the prompt
UsageError = ValidationError

GITHUB_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
REPO_ARGS_PATTERN = re.compile(r"^([A-Za-z0-9_-]+)(?:\s+|/)([A-Za-z0-9_-]+)$")
NUMBER_PATTERN = re.compile(r"[0-9]+")

ISSUE_STATES = ["open", "closed"]
PROFILE_KEYS = ["name", "email", "blog", "company", "location"]
LABEL_ACTIONS = {"add": "add", "del": "del", "remove": "del"}


def validate_repository_args(args: str | None) -> RepoRef:
    """
    Validate and parse ``repo`` arguments in 'owner name' or 'owner/name' form.

    Args:
        args: Raw argument string following the command

    Returns:
        RepoRef for the parsed owner and name

    Raises:
        ValidationError: If the separator is missing or either part contains
            characters outside ``[A-Za-z0-9_-]``
    """
    text = (args or "").strip()
    match = REPO_ARGS_PATTERN.match(text)
    if not match:
        raise ValidationError(f"Wrong repo args ({text}), eg fayland perl-app-github")
    return RepoRef(owner=match.group(1), name=match.group(2))


def validate_github_name(name: str, kind: str = "user") -> str:
    """Validate a single GitHub user or repository name."""
    if not name or not GITHUB_NAME_PATTERN.match(name):
        raise ValidationError(
            f"Invalid {kind} name '{name}'. "
            "Only alphanumeric characters, '-', and '_' are allowed."
        )
    return name


def validate_login_args(args: str | None) -> Credentials:
    """
    Validate ``login`` arguments: exactly a login and a token.

    Raises:
        ValidationError: If either part is missing or extra parts are given
    """
    parts = (args or "").split()
    if len(parts) != 2:
        shown = " ".join(parts)
        raise ValidationError(
            f"Wrong login args ({shown}), eg fayland 54b5197d7f92f52abc5c7149b313cf51"
        )
    login, token = parts
    return Credentials(login=login, token=token)


def validate_number(value: str | None, usage: str) -> int:
    """
    Validate a numeric id argument (issue number, key id).

    Args:
        value: Raw argument text
        usage: Expected syntax shown to the user on failure

    Returns:
        The parsed integer
    """
    text = (value or "").strip()
    if not NUMBER_PATTERN.fullmatch(text):
        raise ValidationError(f"'{text}' is not a number. usage: {usage}")
    return int(text)


def validate_state_option(state: str, allowed: list[str] = ISSUE_STATES) -> str:
    """
    Validate state filter option for issues.

    Args:
        state: State string to validate
        allowed: List of allowed states

    Returns:
        Lowercase state string if valid

    Raises:
        ValidationError: If state is not in allowed list
    """
    state_lower = state.lower().strip()

    if state_lower not in allowed:
        allowed_str = "|".join(allowed)
        raise ValidationError(f"Invalid state '{state}'. Allowed states: {allowed_str}")

    return state_lower


def validate_format_option(format: str, allowed: list[str] = ["json", "yaml"]) -> str:
    """
    Validate output format option.

    Raises:
        ValidationError: If format is not in allowed list
    """
    format_lower = format.lower().strip()

    if format_lower not in allowed:
        allowed_str = ", ".join(f"'{f}'" for f in allowed)
        raise ValidationError(f"Invalid format '{format}'. Allowed formats: {allowed_str}")

    return format_lower


def parse_label_args(args: str | None) -> tuple[str, int, str]:
    """
    Parse ``i.label`` arguments: ``add|del <number> <label>``.

    Returns:
        Tuple of (action, number, label) where action is 'add' or 'del'
    """
    usage = "i.label add|del :number :label"
    parts = (args or "").split(maxsplit=2)
    action = LABEL_ACTIONS.get(parts[0]) if parts else None
    if action is None:
        raise ValidationError(f"unknown argument. {usage}")
    if len(parts) < 3:
        raise ValidationError(f"missing number or label. {usage}")
    number = validate_number(parts[1], usage)
    return action, number, parts[2].strip()
