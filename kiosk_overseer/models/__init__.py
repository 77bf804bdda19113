"""Data Models Package

This package contains the kiosk policy model: the profile and its mode,
the account binding, allowed applications, Start and taskbar pins, and
the restriction settings.
"""

from .accounts import (
    Account,
    AccountType,
    GroupType,
    AutoLogonAccount,
    ExistingUserAccount,
    UserGroupAccount,
    GlobalProfileAccount,
    default_account,
)
from .apps import (
    AppKind,
    SourceType,
    KioskType,
    AllowedApp,
    LaunchSource,
    BrowserKioskApp,
    PackagedKioskApp,
    DesktopKioskApp,
    SingleApp,
    AutoLaunchSettings,
    BreakoutSequence,
    EDGE_PATH,
    DEFAULT_BROWSER_URL,
)
from .pins import PinListType, DesktopLink, PackagedAppPin, SecondaryTile, Pin, EDGE_AUMID
from .policy import (
    PolicyModel,
    Mode,
    FileExplorerAccess,
    Restrictions,
    PLACEHOLDER_PROFILE_ID,
    is_valid_profile_id,
    pin_name_from_app,
)

__all__ = [
    # Policy
    'PolicyModel',
    'Mode',
    'FileExplorerAccess',
    'Restrictions',
    'PLACEHOLDER_PROFILE_ID',
    'is_valid_profile_id',
    'pin_name_from_app',

    # Accounts
    'Account',
    'AccountType',
    'GroupType',
    'AutoLogonAccount',
    'ExistingUserAccount',
    'UserGroupAccount',
    'GlobalProfileAccount',
    'default_account',

    # Applications
    'AppKind',
    'SourceType',
    'KioskType',
    'AllowedApp',
    'LaunchSource',
    'BrowserKioskApp',
    'PackagedKioskApp',
    'DesktopKioskApp',
    'SingleApp',
    'AutoLaunchSettings',
    'BreakoutSequence',
    'EDGE_PATH',
    'DEFAULT_BROWSER_URL',

    # Pins
    'PinListType',
    'DesktopLink',
    'PackagedAppPin',
    'SecondaryTile',
    'Pin',
    'EDGE_AUMID',
]
