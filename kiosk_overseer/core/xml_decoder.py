"""Assigned Access XML import

``decode`` rebuilds a ``PolicyModel`` from an existing configuration
document.  Only two things are fatal: text that is not XML, and XML whose
root is not ``AssignedAccessConfiguration``.  Everything else is best effort;
unknown elements, attributes and namespace spellings are skipped and logged.
"""
from ..common_imports import *
from ..errors import PolicyDecodeError
from ..models import (
    Account,
    AppKind,
    AutoLaunchSettings,
    AutoLogonAccount,
    BreakoutSequence,
    BrowserKioskApp,
    DesktopKioskApp,
    ExistingUserAccount,
    FileExplorerAccess,
    GlobalProfileAccount,
    GroupType,
    Mode,
    PackagedKioskApp,
    PinListType,
    PLACEHOLDER_PROFILE_ID,
    PolicyModel,
    SingleApp,
    UserGroupAccount,
)
from ..models.accounts import RESTRICTED_ONLY_ACCOUNTS
from ..models.pins import Pin
from ..utils.helpers import is_edge_app
from .launch_args import parse_kiosk_args
from .pin_layouts import parse_start_pins, parse_taskbar_layout_xml
from .schema import (
    ALL_APPS_LIST_RULES,
    ALLOWED_NAMESPACE_RULES,
    AUTO_LAUNCH_ARGUMENTS_RULES,
    AUTO_LAUNCH_RULES,
    BREAKOUT_RULES,
    CLASSIC_APP_ARGUMENTS_RULES,
    CLASSIC_APP_PATH_RULES,
    DISPLAY_NAME_RULES,
    FILE_EXPLORER_RULES,
    FieldRule,
    GLOBAL_PROFILE_RULES,
    KIOSK_MODE_APP_RULES,
    NO_RESTRICTION_RULES,
    NS_CONFIG,
    REMOVABLE_DRIVES_RULES,
    ROOT_ELEMENT,
    START_PINS_RULES,
    TASKBAR_LAYOUT_RULES,
    core_rules,
    local_name,
    namespace_of,
    qname,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Rule-driven lookups
# ---------------------------------------------------------------------------

def _find(parent: Optional[ET.Element], rules: Iterable[FieldRule]) -> Optional[ET.Element]:
    """First child matching the highest priority rule"""
    if parent is None:
        return None
    for rule in rules:
        found = parent.find(qname(rule))
        if found is not None:
            return found
    return None


def _findall(parent: Optional[ET.Element], rules: Iterable[FieldRule]) -> List[ET.Element]:
    """Children matching any rule, in document order"""
    if parent is None:
        return []
    wanted = {qname(rule) for rule in rules}
    return [child for child in parent if child.tag in wanted]


def _attr(element: ET.Element, rules: Iterable[FieldRule]) -> Optional[str]:
    for rule in rules:
        value = element.get(qname(rule))
        if value is not None:
            return value
    return None


def _is_true(value: Optional[str]) -> bool:
    return (value or '').strip().lower() == 'true'


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def parse_document(text: Union[str, bytes]) -> ET.Element:
    """Parse and check the root element; raises PolicyDecodeError"""
    if isinstance(text, str):
        text = text.lstrip('\ufeff').strip().encode('utf-8')
    if not text:
        raise PolicyDecodeError("The document is empty.")
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise PolicyDecodeError(f"The document is not valid XML: {e}") from e

    if local_name(root.tag) != ROOT_ELEMENT:
        raise PolicyDecodeError(
            f"Expected an {ROOT_ELEMENT} document, found <{local_name(root.tag)}>.")
    namespace = namespace_of(root.tag)
    if namespace not in (NS_CONFIG, ''):
        logger.warning(f"⚠️ Unexpected root namespace {namespace}; reading it anyway")
    return root


def decode(text: Union[str, bytes]) -> PolicyModel:
    """Rebuild a policy from an Assigned Access document"""
    root = parse_document(text)
    model = PolicyModel()

    profile = _find(_find(root, core_rules('Profiles')), core_rules('Profile'))
    if profile is None:
        logger.warning("⚠️ Document has no profile")
    else:
        profile_id = (profile.get('Id') or '').strip()
        model.profile_id = '' if profile_id == PLACEHOLDER_PROFILE_ID else profile_id

    kiosk_app = _find(profile, KIOSK_MODE_APP_RULES)
    if kiosk_app is not None:
        model.mode = Mode.SINGLE
        model.single_app = _decode_kiosk_app(kiosk_app)
        _decode_breakout(model, profile)
    else:
        model.mode = Mode.MULTI
        all_apps = _find(profile, ALL_APPS_LIST_RULES)
        if all_apps is None:
            logger.info("ℹ️ No app declaration found, importing as an empty multi-app kiosk")
        else:
            _decode_allowed_apps(model, all_apps)
        _decode_restrictions(model, profile)
        _decode_pins(model, profile)

    _apply_account(model, _decode_account(root))
    logger.debug(f"Imported {model.mode.value} profile {model.profile_id or '(no id)'}")
    return model


# ---------------------------------------------------------------------------
# Single-app mode
# ---------------------------------------------------------------------------

def _decode_kiosk_app(element: ET.Element) -> SingleApp:
    aumid = element.get('AppUserModelId')
    if aumid:
        return PackagedKioskApp(aumid=aumid)

    path = _attr(element, CLASSIC_APP_PATH_RULES) or ''
    arguments = _attr(element, CLASSIC_APP_ARGUMENTS_RULES) or ''
    if is_edge_app(path):
        parsed = parse_kiosk_args(arguments)
        if parsed is not None:
            return BrowserKioskApp(
                source=parsed.source,
                kiosk_type=parsed.kiosk_type,
                idle_timeout=parsed.idle_timeout,
            )
        logger.debug("Edge kiosk app without recognizable kiosk arguments")
    return DesktopKioskApp(path=path, arguments=arguments)


def _decode_breakout(model: PolicyModel, profile: ET.Element):
    element = _find(profile, BREAKOUT_RULES)
    if element is None:
        return
    model.breakout = BreakoutSequence.from_key_string(element.get('Key', ''))


# ---------------------------------------------------------------------------
# Multi-app and restricted modes
# ---------------------------------------------------------------------------

def _decode_allowed_apps(model: PolicyModel, all_apps: ET.Element):
    allowed = _find(all_apps, core_rules('AllowedApps'))
    for element in _findall(allowed, core_rules('App')):
        aumid = element.get('AppUserModelId')
        path = element.get('DesktopAppPath')
        if aumid:
            kind, value = AppKind.AUMID, aumid
        elif path:
            kind, value = AppKind.PATH, path
        else:
            logger.debug("Skipping App entry without an id or path")
            continue

        if not model.add_app(kind, value):
            logger.debug(f"Skipping duplicate allowed app {value}")
            continue
        if model.auto_launch_index is None and _is_true(_attr(element, AUTO_LAUNCH_RULES)):
            if model.try_set_auto_launch(len(model.allowed_apps) - 1):
                arguments = _attr(element, AUTO_LAUNCH_ARGUMENTS_RULES) or ''
                model.auto_launch = _decode_auto_launch(kind, value, arguments)


def _decode_auto_launch(kind: AppKind, value: str, arguments: str) -> AutoLaunchSettings:
    settings = AutoLaunchSettings()
    if is_edge_app(value):
        parsed = parse_kiosk_args(arguments)
        if parsed is not None:
            settings.browser = parsed.source
            settings.kiosk_type = parsed.kiosk_type
            settings.idle_timeout = parsed.idle_timeout
            return settings
        if arguments:
            logger.debug("Edge auto-launch arguments are not kiosk arguments, keeping them verbatim")
    if kind == AppKind.PATH or arguments:
        settings.arguments = arguments
    return settings


def _decode_restrictions(model: PolicyModel, profile: Optional[ET.Element]):
    block = _find(profile, FILE_EXPLORER_RULES)
    if block is not None:
        downloads = any(el.get('Name') == 'Downloads'
                        for el in _findall(block, ALLOWED_NAMESPACE_RULES))
        removable = _find(block, REMOVABLE_DRIVES_RULES) is not None
        if _find(block, NO_RESTRICTION_RULES) is not None:
            access = FileExplorerAccess.UNRESTRICTED
        elif downloads and removable:
            access = FileExplorerAccess.DOWNLOADS_AND_REMOVABLE
        elif downloads:
            access = FileExplorerAccess.DOWNLOADS
        elif removable:
            access = FileExplorerAccess.REMOVABLE
        else:
            access = FileExplorerAccess.NONE
        model.restrictions.file_explorer = access

    taskbar = _find(profile, core_rules('Taskbar'))
    if taskbar is not None and taskbar.get('ShowTaskbar') is not None:
        model.restrictions.show_taskbar = _is_true(taskbar.get('ShowTaskbar'))


def _add_pins(model: PolicyModel, list_type: PinListType, pins: List[Pin]):
    for pin in pins:
        model.import_pin(list_type, pin)


def _decode_pins(model: PolicyModel, profile: Optional[ET.Element]):
    start = _find(profile, START_PINS_RULES)
    if start is not None and (start.text or '').strip():
        try:
            _add_pins(model, PinListType.START, parse_start_pins(start.text))
        except ValueError as e:
            logger.warning(f"⚠️ Could not read Start pins, importing without them: {e}")

    layout = _find(profile, TASKBAR_LAYOUT_RULES)
    if layout is not None and (layout.text or '').strip():
        try:
            _add_pins(model, PinListType.TASKBAR, parse_taskbar_layout_xml(layout.text))
        except ET.ParseError as e:
            logger.warning(f"⚠️ Could not read taskbar layout, importing without it: {e}")


# ---------------------------------------------------------------------------
# Account
# ---------------------------------------------------------------------------

def _decode_account(root: ET.Element) -> Optional[Account]:
    configs = _find(root, core_rules('Configs'))
    if configs is None:
        logger.warning("⚠️ Document has no Configs section")
        return None

    if _find(configs, GLOBAL_PROFILE_RULES) is not None:
        return GlobalProfileAccount()

    config = _find(configs, core_rules('Config'))
    if config is None:
        return None

    auto_logon = _find(config, core_rules('AutoLogonAccount'))
    if auto_logon is not None:
        return AutoLogonAccount(display_name=_attr(auto_logon, DISPLAY_NAME_RULES) or '')

    account = _find(config, core_rules('Account'))
    if account is not None:
        return ExistingUserAccount(account_name=(account.text or '').strip())

    group = _find(config, core_rules('UserGroup'))
    if group is not None:
        try:
            group_type = GroupType(group.get('Type', GroupType.LOCAL.value))
        except ValueError:
            logger.warning(f"⚠️ Unknown user group type {group.get('Type')}, using LocalGroup")
            group_type = GroupType.LOCAL
        return UserGroupAccount(group_name=group.get('Name', ''), group_type=group_type)

    logger.debug("Config has no recognizable account binding")
    return None


def _apply_account(model: PolicyModel, account: Optional[Account]):
    """Bind the account; group and global accounts imply restricted mode"""
    if account is None:
        model.set_mode(model.mode)
        return
    model.account = account
    if account.account_type in RESTRICTED_ONLY_ACCOUNTS and model.mode == Mode.MULTI:
        model.mode = Mode.RESTRICTED
    elif account.account_type in RESTRICTED_ONLY_ACCOUNTS and model.mode == Mode.SINGLE:
        logger.warning("⚠️ Single-app profiles cannot target a group, using auto-logon")
    model.set_mode(model.mode)
