"""Command parsing and dispatch for the sonos CLI."""

from typing import List, Optional

import structlog

from .config import DEFAULT_PLAYLIST, ConfigStore
from .errors import ConfigWriteError, InvalidAddressError
from .models import (
    CommandName,
    CommandResult,
    ContentKind,
    MusicReference,
    ParsedCommand,
    ResolvedAddress,
)
from .sonos_controller import SonosController
from .spotify_ref import looks_like_reference, parse_reference

logger = structlog.get_logger()

HELP_HINT = 'Run "sonos help" for available commands'

HELP_TEXT = """
Sonos CLI Commands:
  sonos play              - Resume playback
  sonos pause             - Pause playback
  sonos vol-up            - Increase volume by 1
  sonos vol-down          - Decrease volume by 1
  sonos <spotify-url/id>  - Play playlist or track (accepts full URL or just ID)
  sonos next              - Skip to next track
  sonos current           - Show currently playing track
  sonos default           - Start default playlist
  sonos queue <url/id>    - Add track to queue
  sonos set-ip <ip>       - Save the speaker's IP address
  sonos get-ip            - Show the speaker's IP address
  sonos help              - Show this help message

Examples:
  sonos https://open.spotify.com/playlist/37i9dQZF1DXcBWIGoYBM5M
  sonos https://open.spotify.com/track/4cOdK2wGLETKBW3PvgPWqT
  sonos queue https://open.spotify.com/track/4cOdK2wGLETKBW3PvgPWqT
  sonos 37i9dQZF1DXcBWIGoYBM5M
  sonos set-ip 192.168.1.100
"""

_NAMED = {
    c.value: c
    for c in CommandName
    if c not in (CommandName.BARE, CommandName.UNKNOWN, CommandName.MISSING)
}


def parse_command(args: List[str]) -> ParsedCommand:
    """Classify argv (without the program name) into a ParsedCommand."""
    if not args or not args[0]:
        return ParsedCommand(name=CommandName.MISSING)

    token = args[0]
    argument = args[1] if len(args) > 1 else None

    name = _NAMED.get(token)
    if name is not None:
        return ParsedCommand(name=name, token=token, argument=argument)
    if looks_like_reference(token):
        return ParsedCommand(name=CommandName.BARE, token=token, argument=argument)
    return ParsedCommand(name=CommandName.UNKNOWN, token=token, argument=argument)


def format_clock(seconds: int) -> str:
    """Render seconds as M:SS."""
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}:{secs:02d}"


def usage_text() -> str:
    return f"Usage: sonos <command>\n{HELP_HINT}"


class CommandDispatcher:
    """Runs one parsed command against the speaker and config store.

    Usage problems come back as failed CommandResults before any device
    call. DeviceError from the controller is left for the caller.
    """

    def __init__(
        self,
        controller: SonosController,
        store: ConfigStore,
        resolved: ResolvedAddress,
    ):
        self._controller = controller
        self._store = store
        self._resolved = resolved

    async def dispatch(self, command: ParsedCommand) -> CommandResult:
        logger.info("command_received", command=str(command), ip=self._resolved.address)

        if command.name == CommandName.PLAY:
            return await self._handle_play()
        elif command.name == CommandName.PAUSE:
            return await self._handle_pause()
        elif command.name == CommandName.DEFAULT:
            return await self._handle_default()
        elif command.name == CommandName.NEXT:
            return await self._handle_next()
        elif command.name == CommandName.CURRENT:
            return await self._handle_current()
        elif command.name == CommandName.QUEUE:
            return await self._handle_queue(command.argument)
        elif command.name == CommandName.VOL_UP:
            return await self._handle_volume(+1)
        elif command.name == CommandName.VOL_DOWN:
            return await self._handle_volume(-1)
        elif command.name == CommandName.SET_IP:
            return self._handle_set_ip(command.argument)
        elif command.name == CommandName.GET_IP:
            return CommandResult.success(
                self._store.current_address_description(self._resolved)
            )
        elif command.name == CommandName.HELP:
            return CommandResult.success(HELP_TEXT)
        elif command.name == CommandName.BARE:
            return await self._handle_reference(command.token)
        elif command.name == CommandName.MISSING:
            return CommandResult.failure(usage_text())
        else:
            return CommandResult.failure(f"Unknown command: {command.token}\n{HELP_HINT}")

    # -- Playback --

    async def _handle_play(self) -> CommandResult:
        await self._controller.play()
        return CommandResult.success("▶️  Playing")

    async def _handle_pause(self) -> CommandResult:
        await self._controller.pause()
        return CommandResult.success("⏸️  Paused")

    async def _handle_next(self) -> CommandResult:
        await self._controller.next()
        return CommandResult.success("⏭️  Next track")

    async def _handle_default(self) -> CommandResult:
        reference = MusicReference(kind=ContentKind.PLAYLIST, id=DEFAULT_PLAYLIST)
        await self._controller.play_uri(reference.uri)
        return CommandResult.success(f"🎵 Started default playlist: {DEFAULT_PLAYLIST}")

    async def _handle_reference(self, token: str) -> CommandResult:
        """Play a link or bare id given in place of a command name."""
        reference = parse_reference(token)
        await self._controller.play_uri(reference.uri)
        return CommandResult.success(f"🎵 Started {reference.kind_name}: {reference.id}")

    async def _handle_current(self) -> CommandResult:
        track = await self._controller.get_current_track()
        if track is None:
            return CommandResult.success("⏸️  No track currently playing")

        lines = [
            "🎵 Now playing:",
            f"   {track.title}",
            f"   {track.artist} - {track.album}",
        ]
        if track.position_seconds and track.duration_seconds:
            lines.append(
                f"   {format_clock(track.position_seconds)}"
                f" / {format_clock(track.duration_seconds)}"
            )
        return CommandResult.success("\n".join(lines))

    async def _handle_queue(self, argument: Optional[str]) -> CommandResult:
        if not argument:
            return CommandResult.failure(
                "❌ Please provide a track URL or ID to queue\n"
                "Usage: sonos queue <spotify-url/id>"
            )

        reference = parse_reference(argument)
        if reference.kind != ContentKind.TRACK:
            return CommandResult.failure(
                "❌ Queue only works with tracks, not playlists\n"
                "Use: sonos queue <track-url/id>"
            )

        await self._controller.queue_uri(reference.uri)
        return CommandResult.success(f"➕ Queued track: {reference.id}")

    async def _handle_volume(self, step: int) -> CommandResult:
        current = await self._controller.get_volume()
        level = max(0, min(100, current + step))
        await self._controller.set_volume(level)
        icon = "🔊" if step > 0 else "🔉"
        return CommandResult.success(f"{icon} Volume: {level}")

    # -- Configuration --

    def _handle_set_ip(self, argument: Optional[str]) -> CommandResult:
        if not argument:
            return CommandResult.failure(
                "❌ Please provide an IP address\n"
                "Usage: sonos set-ip <ip-address>"
            )
        try:
            self._store.persist_address(argument)
        except InvalidAddressError as e:
            return CommandResult.failure(f"❌ {e}\nExample: sonos set-ip 192.168.1.100")
        except ConfigWriteError as e:
            return CommandResult.failure(f"❌ Failed to save config: {e}")
        return CommandResult.success(f"✅ Sonos IP set to {argument}")
