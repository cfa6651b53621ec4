"""Async wrapper around SoCo for controlling one Sonos speaker."""

import asyncio
from typing import Any, Callable, Dict, Optional

import requests
import soco
import structlog
from soco.exceptions import SoCoException
from soco.plugins.sharelink import ShareLinkPlugin

from .errors import DeviceError
from .models import TrackInfo

logger = structlog.get_logger()


def parse_hms(value: Optional[str]) -> int:
    """Convert a Sonos H:MM:SS string to seconds; unparsable values give 0."""
    if not value:
        return 0
    try:
        seconds = 0
        for part in value.split(":"):
            seconds = seconds * 60 + int(part)
        return seconds
    except ValueError:
        # Streams report NOT_IMPLEMENTED for position and duration
        return 0


class SonosController:
    """Controls a Sonos speaker over its local UPnP API via SoCo."""

    def __init__(self, address: str):
        """
        Initialize Sonos controller.

        Args:
            address: IPv4 address of the speaker
        """
        self.address = address
        self._device: Optional[soco.SoCo] = None
        self._share_link: Optional[ShareLinkPlugin] = None

    @property
    def device(self) -> soco.SoCo:
        """SoCo device, created on first use."""
        if self._device is None:
            try:
                self._device = soco.SoCo(self.address)
            except ValueError as e:
                # SoCo rejects addresses like 999.1.1.1 that pass our format check
                logger.error("sonos_bad_address", ip=self.address, error=str(e))
                raise DeviceError(f"Invalid Sonos address {self.address}: {e}") from e
        return self._device

    @property
    def share_link(self) -> ShareLinkPlugin:
        if self._share_link is None:
            self._share_link = ShareLinkPlugin(self.device)
        return self._share_link

    async def _call(self, operation: str, fn: Callable[..., Any], *args) -> Any:
        """
        Run a blocking SoCo call in a worker thread.

        Args:
            operation: Short name used in log events
            fn: The SoCo callable
            args: Positional arguments for fn

        Returns:
            Whatever fn returns

        Raises:
            DeviceError: the speaker rejected the request or was unreachable
        """
        try:
            return await asyncio.to_thread(fn, *args)
        except SoCoException as e:
            logger.error("sonos_device_error", ip=self.address, operation=operation, error=str(e))
            raise DeviceError(str(e)) from e
        except requests.RequestException as e:
            logger.error("sonos_transport_error", ip=self.address, operation=operation, error=str(e))
            raise DeviceError(str(e)) from e

    async def play(self) -> None:
        """Resume playback."""
        await self._call("play", self.device.play)
        logger.info("sonos_play", ip=self.address)

    async def pause(self) -> None:
        """Pause playback."""
        await self._call("pause", self.device.pause)
        logger.info("sonos_pause", ip=self.address)

    async def next(self) -> None:
        """Skip to next track."""
        await self._call("next", self.device.next)
        logger.info("sonos_next", ip=self.address)

    async def play_uri(self, uri: str) -> None:
        """
        Start playing a Spotify URI.

        The share link is appended to the queue and playback starts from
        the first item it added.

        Args:
            uri: spotify:<kind>:<id>
        """
        position = await self._call("play_uri", self.share_link.add_share_link_to_queue, uri)
        # SoCo reports the 1-based queue slot, play_from_queue wants 0-based
        await self._call("play_uri", self.device.play_from_queue, max(int(position) - 1, 0))
        logger.info("sonos_play_uri", ip=self.address, uri=uri, queue_position=position)

    async def queue_uri(self, uri: str) -> int:
        """Append a Spotify URI to the end of the queue; returns its queue slot."""
        position = await self._call("queue_uri", self.share_link.add_share_link_to_queue, uri)
        logger.info("sonos_queued", ip=self.address, uri=uri, queue_position=position)
        return int(position)

    async def get_volume(self) -> int:
        """Current volume 0-100."""
        volume = await self._call("get_volume", lambda: self.device.volume)
        return int(volume)

    async def set_volume(self, level: int) -> int:
        """
        Set volume.

        Args:
            level: Volume level, clamped to 0-100

        Returns:
            The level actually sent
        """
        level = max(0, min(100, level))

        def _set() -> None:
            self.device.volume = level

        await self._call("set_volume", _set)
        logger.info("sonos_volume_set", ip=self.address, level=level)
        return level

    async def get_current_track(self) -> Optional[TrackInfo]:
        """
        Get what is playing now.

        Returns:
            TrackInfo, or None when the speaker reports no title
        """
        info: Dict[str, Any] = await self._call(
            "current_track", self.device.get_current_track_info
        )
        if not info or not info.get("title"):
            return None

        return TrackInfo(
            title=info.get("title", ""),
            artist=info.get("artist", ""),
            album=info.get("album", ""),
            position_seconds=parse_hms(info.get("position")),
            duration_seconds=parse_hms(info.get("duration")),
        )

    async def close(self) -> None:
        """Drop the device handle; SoCo keeps no persistent connection."""
        self._share_link = None
        self._device = None
