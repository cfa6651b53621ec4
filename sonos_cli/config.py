"""Configuration: defaults, env overrides, and the persisted device address."""

import json
import os
import re
from pathlib import Path
from typing import Optional

import structlog

from .errors import ConfigWriteError, InvalidAddressError
from .models import AddressSource, ResolvedAddress

logger = structlog.get_logger()

# Project root = parent of the sonos_cli package
BASE_DIR = Path(__file__).resolve().parent.parent

DEFAULT_SONOS_IP = "192.168.5.22"
DEFAULT_PLAYLIST = "37i9dQZEVXcNbkRhyotquq"

CONFIG_PATH = Path(os.getenv("SONOS_CLI_CONFIG", str(BASE_DIR / "sonos-config.json")))
LOG_LEVEL = os.getenv("SONOS_CLI_LOG_LEVEL", "WARNING").upper()

# Lenient on purpose: 999.1.1.1 passes, there is no per-octet range check
_IPV4_PATTERN = re.compile(r"\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}", re.ASCII)


def is_valid_address(candidate: str) -> bool:
    return bool(_IPV4_PATTERN.fullmatch(candidate))


class ConfigStore:
    """Reads and writes the JSON file holding the speaker address."""

    def __init__(self, path: Optional[Path] = None, default_address: str = DEFAULT_SONOS_IP):
        self.path = Path(path) if path is not None else CONFIG_PATH
        self.default_address = default_address

    def _default(self) -> ResolvedAddress:
        return ResolvedAddress(address=self.default_address, source=AddressSource.DEFAULT)

    def resolve_address(self) -> ResolvedAddress:
        """Return the persisted address, or the built-in default.

        A missing file is normal. An unreadable or malformed file logs a
        warning and falls back to the default; it is never fatal.
        """
        if not self.path.exists():
            return self._default()

        try:
            data = json.loads(self.path.read_text())
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning("config_read_failed", path=str(self.path), error=str(e))
            return self._default()

        address = data.get("address") if isinstance(data, dict) else None
        if not isinstance(address, str) or not address:
            logger.debug("config_address_missing", path=str(self.path))
            return self._default()

        return ResolvedAddress(address=address, source=AddressSource.CONFIG_FILE)

    def persist_address(self, candidate: str) -> None:
        """Validate and save a new device address, replacing the file.

        Raises:
            InvalidAddressError: candidate is not a dotted quad; nothing is written.
            ConfigWriteError: the file could not be written.
        """
        if not is_valid_address(candidate):
            raise InvalidAddressError(f"Invalid IP address format: {candidate}")

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps({"address": candidate}, indent=2))
        except OSError as e:
            logger.error("config_write_failed", path=str(self.path), error=str(e))
            raise ConfigWriteError(f"Could not write {self.path}: {e}") from e

        logger.info("config_address_saved", path=str(self.path), address=candidate)

    def current_address_description(self, resolved: ResolvedAddress) -> str:
        """Human-readable line naming the active address and its origin."""
        line = f"Current Sonos IP: {resolved.address} ({resolved.source.value})"
        if resolved.source is AddressSource.DEFAULT:
            line += f"\nConfig file: {self.path} (not set)"
        return line
