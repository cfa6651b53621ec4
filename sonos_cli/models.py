"""Data models for the Sonos command line."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class ContentKind(Enum):
    """Kinds of Spotify content the speaker can be asked to play."""
    TRACK = "track"
    PLAYLIST = "playlist"


class AddressSource(Enum):
    """Where the active device address came from."""
    CONFIG_FILE = "config file"
    DEFAULT = "default"


class CommandName(Enum):
    """Named commands understood on the command line."""
    PLAY = "play"
    PAUSE = "pause"
    DEFAULT = "default"
    NEXT = "next"
    CURRENT = "current"
    QUEUE = "queue"
    VOL_UP = "vol-up"
    VOL_DOWN = "vol-down"
    SET_IP = "set-ip"
    GET_IP = "get-ip"
    HELP = "help"
    # Not typed by the user; produced when the token is not a named command
    BARE = "<reference>"
    UNKNOWN = "<unknown>"
    MISSING = "<missing>"


@dataclass(frozen=True)
class MusicReference:
    """A Spotify track or playlist reference."""
    kind: Union[ContentKind, str]  # raw token when a link has an unexpected kind
    id: str

    @property
    def kind_name(self) -> str:
        if isinstance(self.kind, ContentKind):
            return self.kind.value
        return self.kind

    @property
    def uri(self) -> str:
        """Spotify URI understood by the speaker, e.g. spotify:track:<id>."""
        return f"spotify:{self.kind_name}:{self.id}"


@dataclass(frozen=True)
class ResolvedAddress:
    """Device address plus where it was read from."""
    address: str
    source: AddressSource


@dataclass
class TrackInfo:
    """Now-playing metadata reported by the speaker."""
    title: str
    artist: str = ""
    album: str = ""
    position_seconds: int = 0
    duration_seconds: int = 0


@dataclass
class ParsedCommand:
    """Command token from argv, classified."""
    name: CommandName
    token: Optional[str] = None
    argument: Optional[str] = None

    def __str__(self) -> str:
        parts = [f"name={self.name.value}"]
        if self.token and self.name in (CommandName.BARE, CommandName.UNKNOWN):
            parts.append(f"token='{self.token}'")
        if self.argument:
            parts.append(f"arg='{self.argument}'")
        return f"ParsedCommand({', '.join(parts)})"


@dataclass
class CommandResult:
    """Outcome of one command: text to print and whether it succeeded."""
    ok: bool
    message: str

    @classmethod
    def success(cls, message: str) -> "CommandResult":
        return cls(ok=True, message=message)

    @classmethod
    def failure(cls, message: str) -> "CommandResult":
        return cls(ok=False, message=message)

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1
