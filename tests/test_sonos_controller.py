"""Tests for the SoCo-backed speaker controller."""

import pytest
import requests
from unittest.mock import MagicMock, patch

from soco.exceptions import SoCoException

from sonos_cli.errors import DeviceError
from sonos_cli.models import TrackInfo
from sonos_cli.sonos_controller import SonosController, parse_hms


@pytest.fixture
def device():
    return MagicMock()


@pytest.fixture
def share_link():
    return MagicMock()


@pytest.fixture
def controller(device, share_link):
    with patch("sonos_cli.sonos_controller.soco.SoCo", return_value=device) as mock_soco, \
            patch("sonos_cli.sonos_controller.ShareLinkPlugin", return_value=share_link):
        ctrl = SonosController("192.168.1.50")
        ctrl.mock_soco = mock_soco
        yield ctrl


class TestParseHms:

    @pytest.mark.parametrize("value,expected", [
        ("0:03:45", 225),
        ("1:00:00", 3600),
        ("3:05", 185),
        ("", 0),
        (None, 0),
        ("NOT_IMPLEMENTED", 0),
    ])
    def test_parse(self, value, expected):
        assert parse_hms(value) == expected


class TestSonosController:
    """Tests for SonosController."""

    def test_device_is_created_lazily(self, controller):
        controller.mock_soco.assert_not_called()
        _ = controller.device
        _ = controller.device
        controller.mock_soco.assert_called_once_with("192.168.1.50")

    def test_rejected_address_becomes_device_error(self):
        with patch("sonos_cli.sonos_controller.soco.SoCo", side_effect=ValueError("bad ip")):
            ctrl = SonosController("999.1.1.1")
            with pytest.raises(DeviceError, match="999.1.1.1"):
                _ = ctrl.device

    @pytest.mark.asyncio
    async def test_transport_controls(self, controller, device):
        await controller.play()
        await controller.pause()
        await controller.next()
        device.play.assert_called_once_with()
        device.pause.assert_called_once_with()
        device.next.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_play_uri_queues_then_plays_added_item(self, controller, device, share_link):
        share_link.add_share_link_to_queue.return_value = 4
        await controller.play_uri("spotify:playlist:37i9dQZEVXcNbkRhyotquq")
        share_link.add_share_link_to_queue.assert_called_once_with(
            "spotify:playlist:37i9dQZEVXcNbkRhyotquq"
        )
        device.play_from_queue.assert_called_once_with(3)

    @pytest.mark.asyncio
    async def test_queue_uri(self, controller, device, share_link):
        share_link.add_share_link_to_queue.return_value = 7
        position = await controller.queue_uri("spotify:track:4cOdK2wGLETKBW3PvgPWqT")
        assert position == 7
        device.play_from_queue.assert_not_called()

    @pytest.mark.asyncio
    async def test_get_volume(self, controller, device):
        device.volume = 37
        assert await controller.get_volume() == 37

    @pytest.mark.asyncio
    @pytest.mark.parametrize("requested,sent", [(55, 55), (150, 100), (-3, 0)])
    async def test_set_volume_clamps(self, controller, device, requested, sent):
        assert await controller.set_volume(requested) == sent
        assert device.volume == sent

    @pytest.mark.asyncio
    async def test_current_track(self, controller, device):
        device.get_current_track_info.return_value = {
            "title": "Song",
            "artist": "Artist",
            "album": "Album",
            "position": "0:01:23",
            "duration": "0:04:05",
        }
        track = await controller.get_current_track()
        assert track == TrackInfo("Song", "Artist", "Album", 83, 245)

    @pytest.mark.asyncio
    async def test_current_track_empty(self, controller, device):
        device.get_current_track_info.return_value = {"title": "", "artist": ""}
        assert await controller.get_current_track() is None

    @pytest.mark.asyncio
    async def test_soco_error_becomes_device_error(self, controller, device):
        device.pause.side_effect = SoCoException("UPnP Error 701")
        with pytest.raises(DeviceError, match="701"):
            await controller.pause()

    @pytest.mark.asyncio
    async def test_transport_error_becomes_device_error(self, controller, device):
        device.play.side_effect = requests.ConnectionError("connection refused")
        with pytest.raises(DeviceError, match="connection refused"):
            await controller.play()

    @pytest.mark.asyncio
    async def test_close_drops_device(self, controller):
        _ = controller.device
        await controller.close()
        assert controller._device is None
