"""Exception types raised by the policy model and codecs"""


class KioskConfigError(Exception):
    """Base class for all Kiosk Overseer errors"""


class PolicyError(KioskConfigError):
    """A model operation was rejected; the message is shown to the user"""


class DuplicatePinError(PolicyError):
    pass


class IncompatibleAccountError(PolicyError):
    pass


class PolicyDecodeError(KioskConfigError):
    """The document is not an Assigned Access configuration at all"""


class SnapshotError(KioskConfigError):
    """A saved session file could not be loaded"""
