"""Assigned Access document vocabulary

Namespaces, element names and the ordered lookup rules the decoder uses for
concepts that older documents spell with a different namespace.
"""
from ..common_imports import *

NS_CONFIG = "http://schemas.microsoft.com/AssignedAccess/2017/config"
NS_RS5 = "http://schemas.microsoft.com/AssignedAccess/201810/config"
NS_V3 = "http://schemas.microsoft.com/AssignedAccess/2020/config"
NS_V4 = "http://schemas.microsoft.com/AssignedAccess/2021/config"
NS_V5 = "http://schemas.microsoft.com/AssignedAccess/2022/config"

NAMESPACE_PREFIXES = (
    ('rs5', NS_RS5),
    ('v3', NS_V3),
    ('v4', NS_V4),
    ('v5', NS_V5),
)

ROOT_ELEMENT = "AssignedAccessConfiguration"

# (namespace, local name); "" is an unqualified attribute or element
FieldRule = Tuple[str, str]

AUTO_LAUNCH_RULES: Tuple[FieldRule, ...] = (
    (NS_RS5, 'AutoLaunch'),
    (NS_V3, 'AutoLaunch'),
    ('', 'AutoLaunch'),
)
AUTO_LAUNCH_ARGUMENTS_RULES: Tuple[FieldRule, ...] = (
    (NS_RS5, 'AutoLaunchArguments'),
    (NS_V3, 'AutoLaunchArguments'),
    ('', 'AutoLaunchArguments'),
)
DISPLAY_NAME_RULES: Tuple[FieldRule, ...] = (
    (NS_RS5, 'DisplayName'),
    (NS_CONFIG, 'DisplayName'),
    ('', 'DisplayName'),
)
CLASSIC_APP_PATH_RULES: Tuple[FieldRule, ...] = (
    (NS_V4, 'ClassicAppPath'),
    ('', 'ClassicAppPath'),
)
CLASSIC_APP_ARGUMENTS_RULES: Tuple[FieldRule, ...] = (
    (NS_V4, 'ClassicAppArguments'),
    ('', 'ClassicAppArguments'),
)

# Element lookups
KIOSK_MODE_APP_RULES: Tuple[FieldRule, ...] = ((NS_CONFIG, 'KioskModeApp'), ('', 'KioskModeApp'))
ALL_APPS_LIST_RULES: Tuple[FieldRule, ...] = ((NS_CONFIG, 'AllAppsList'), ('', 'AllAppsList'))
BREAKOUT_RULES: Tuple[FieldRule, ...] = ((NS_V4, 'BreakoutSequence'), (NS_CONFIG, 'BreakoutSequence'))
FILE_EXPLORER_RULES: Tuple[FieldRule, ...] = (
    (NS_RS5, 'FileExplorerNamespaceRestrictions'),
    (NS_CONFIG, 'FileExplorerNamespaceRestrictions'),
)
START_PINS_RULES: Tuple[FieldRule, ...] = ((NS_V5, 'StartPins'), (NS_CONFIG, 'StartPins'))
TASKBAR_LAYOUT_RULES: Tuple[FieldRule, ...] = ((NS_V5, 'TaskbarLayout'), (NS_CONFIG, 'TaskbarLayout'))
GLOBAL_PROFILE_RULES: Tuple[FieldRule, ...] = ((NS_V3, 'GlobalProfile'), (NS_CONFIG, 'GlobalProfile'))


def core_rules(local: str) -> Tuple[FieldRule, ...]:
    """Stable elements: the 2017 namespace, or none at all in hand-written files"""
    return ((NS_CONFIG, local), ('', local))


ALLOWED_NAMESPACE_RULES: Tuple[FieldRule, ...] = ((NS_RS5, 'AllowedNamespace'), (NS_CONFIG, 'AllowedNamespace'))
REMOVABLE_DRIVES_RULES: Tuple[FieldRule, ...] = ((NS_V3, 'AllowRemovableDrives'), (NS_RS5, 'AllowRemovableDrives'))
NO_RESTRICTION_RULES: Tuple[FieldRule, ...] = ((NS_V3, 'NoRestriction'), (NS_RS5, 'NoRestriction'))


def qname(rule: FieldRule) -> str:
    """ElementTree's {namespace}local spelling"""
    namespace, local = rule
    return f'{{{namespace}}}{local}' if namespace else local


def local_name(tag: str) -> str:
    return tag.rsplit('}', 1)[-1]


def namespace_of(tag: str) -> str:
    return tag[1:].split('}', 1)[0] if tag.startswith('{') else ''
