"""
hubshell - the GitHub API at an interactive prompt.

"Every API deserves a shell. Some deserve two." — schema.cx
"""

__version__ = "0.3.0"
__author__ = "hubshell contributors"
__license__ = "MIT"

from .models import ApiOperation, Credentials, RepoRef, SessionState

__all__ = [
    "ApiOperation",
    "Credentials",
    "RepoRef",
    "SessionState",
    "__version__",
]
