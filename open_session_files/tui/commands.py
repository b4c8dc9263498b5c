"""Command palette provider exposing the ``open-file`` command."""

from textual.command import DiscoveryHit, Hit, Hits, Provider

OPEN_FILE_COMMAND = "open-file"
OPEN_FILE_HELP = "Pick and open a file edited by the agent this session"


class OpenFileCommands(Provider):
    """Provides the ``open-file`` command."""

    async def discover(self) -> Hits:
        """Show the command before anything is typed."""
        yield DiscoveryHit(
            OPEN_FILE_COMMAND,
            self.app.action_open_file,  # type: ignore[attr-defined]
            help=OPEN_FILE_HELP,
        )

    async def search(self, query: str) -> Hits:
        """Match the command against the palette query."""
        matcher = self.matcher(query)
        score = matcher.match(OPEN_FILE_COMMAND)
        if score > 0:
            yield Hit(
                score,
                matcher.highlight(OPEN_FILE_COMMAND),
                self.app.action_open_file,  # type: ignore[attr-defined]
                help=OPEN_FILE_HELP,
            )
