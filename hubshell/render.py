"""
Rendering API results and failures for the terminal.

"Data is only as good as the way you show it." — schema.cx
"""

import json
from typing import Any

import yaml
from rich.console import Console
from rich.json import JSON
from rich.syntax import Syntax

from .github_api import AUTH_REQUIRED_SIGNAL, AuthenticationRequiredError
from .pager import Pager
from .rich_utils import console as default_console
from .rich_utils import print_error, print_plain, print_success, print_warning

AUTH_REQUIRED_MESSAGE = "authentication required. try 'login :owner :token' or 'loadcfg' first"


def is_auth_required(error: Exception) -> bool:
    """Whether a failure means the operation needs credentials."""
    return isinstance(error, AuthenticationRequiredError) or AUTH_REQUIRED_SIGNAL in str(error)


class ResultRenderer:
    """Turns API results into printed text and failures into messages."""

    def __init__(
        self,
        output_format: str = "json",
        pager: Pager | None = None,
        console: Console | None = None,
    ) -> None:
        self.output_format = output_format
        self.pager = pager
        self.console = console or default_console

    def format_result(self, result: Any) -> str:
        """Serialize a structured result in the configured format."""
        if self.output_format == "yaml":
            return yaml.safe_dump(
                result,
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False,
            ).rstrip("\n")
        return json.dumps(result, indent=2, ensure_ascii=False, default=str)

    def render_success(self, result: Any, raw: bool = False) -> None:
        """
        Print a successful result.

        Plain-text results are printed verbatim. Structured results are
        pretty-printed as JSON or YAML. Empty results get a short confirmation.
        """
        if result is None:
            print_success("Done.")
            return

        if raw or isinstance(result, str):
            text = str(result)
            if not self._paged(text):
                print_plain(text)
            return

        text = self.format_result(result)
        if self._paged(text):
            return

        if self.output_format == "yaml":
            self.console.print(Syntax(text, "yaml", background_color="default"), soft_wrap=True)
        else:
            self.console.print(JSON(text), soft_wrap=True)

    def render_failure(self, error: Exception) -> None:
        """Print a failed call: the login hint for auth failures, else the error."""
        if is_auth_required(error):
            print_warning(AUTH_REQUIRED_MESSAGE)
        else:
            print_error(str(error))

    def _paged(self, text: str) -> bool:
        return bool(self.pager and self.pager.should_page(text) and self.pager.page(text))
