"""
The interactive read-dispatch loop.

"A prompt is an invitation. Answer it carefully." — schema.cx
"""

from . import __version__
from .commands import CommandContext, ShellExit
from .config import ShellSettings
from .dispatcher import dispatch
from .github_api import build_client
from .interaction import LineReader
from .pager import Pager, detect_pager
from .render import ResultRenderer
from .rich_utils import console
from .session import ClientFactory, Session

WELCOME = """
Welcome to GitHub Command Tools! (Ver: {version})
Type '?' or 'h' for help.
"""


class Shell:
    """
    Owns the session for one process run and feeds it lines from the reader.
    """

    def __init__(
        self,
        settings: ShellSettings | None = None,
        reader: LineReader | None = None,
        renderer: ResultRenderer | None = None,
        client_factory: ClientFactory = build_client,
    ) -> None:
        self.settings = settings or ShellSettings()
        self.session = Session(settings=self.settings, client_factory=client_factory)
        self.reader = reader or LineReader()

        if renderer is None:
            pager = Pager(detect_pager(self.settings.pager))
            renderer = ResultRenderer(self.settings.output_format, pager)
        self.context = CommandContext(session=self.session, reader=self.reader, renderer=renderer)

    def run(self) -> int:
        """Run until end of input or an exit command. Returns the exit code."""
        console.print(WELCOME.format(version=__version__), markup=False, highlight=False)

        try:
            while True:
                try:
                    line = self.reader.read(self.session.prompt)
                except KeyboardInterrupt:
                    console.print()
                    continue

                if line is None:
                    console.print()
                    return 0

                try:
                    dispatch(self.context, line)
                except ShellExit:
                    return 0
                except KeyboardInterrupt:
                    console.print()
        finally:
            self.session.close()
