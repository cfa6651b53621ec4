"""Exceptions raised by the Sonos command line."""


class SonosCliError(Exception):
    """Base class for sonos_cli errors."""


class DeviceError(SonosCliError):
    """The speaker or the network between us failed a request."""


class InvalidAddressError(SonosCliError, ValueError):
    """A device address did not look like a dotted-quad IPv4 address."""


class ConfigWriteError(SonosCliError):
    """The configuration file could not be written."""
