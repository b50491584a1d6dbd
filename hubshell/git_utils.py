"""
Git configuration access using subprocess.

"Git remembers who you are. Even when you forget." — schema.cx
"""

import subprocess

from .models import Credentials


class GitOperations:
    """Wrapper for git subprocess operations."""

    @staticmethod
    def get_global_config(key: str) -> str | None:
        """
        Read a value from the global git configuration.

        Returns None if git is missing, the key is unset or the call fails.
        """
        try:
            result = subprocess.run(
                ["git", "config", "--global", key],
                capture_output=True,
                text=True,
                check=True,
                timeout=10,
            )
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError):
            return None

        value = result.stdout.strip()
        return value or None

    @staticmethod
    def read_github_credentials() -> Credentials | None:
        """
        Read ``github.user`` and ``github.token`` from the global git config.

        Returns:
            Credentials if both values are set, None otherwise
        """
        login = GitOperations.get_global_config("github.user")
        token = GitOperations.get_global_config("github.token")
        if not (login and token):
            return None
        return Credentials(login=login, token=token)
