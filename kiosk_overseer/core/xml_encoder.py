"""Assigned Access XML generation

``encode`` is pure and total: it renders any model, valid or not, so a
preview is always available.  Free text is escaped on the way in; embedded
pin documents go into CDATA sections.
"""
from ..common_imports import *
from ..models import (
    AppKind,
    AutoLogonAccount,
    BrowserKioskApp,
    DEFAULT_BROWSER_URL,
    DesktopKioskApp,
    EDGE_PATH,
    ExistingUserAccount,
    FileExplorerAccess,
    GlobalProfileAccount,
    Mode,
    PackagedKioskApp,
    PLACEHOLDER_PROFILE_ID,
    PolicyModel,
    UserGroupAccount,
)
from ..utils.helpers import escape_xml, is_edge_app
from .launch_args import Browser, build_browser_kiosk_args, build_edge_kiosk_args, resolve_launch_url
from .pin_layouts import build_taskbar_layout_xml, encode_start_pins
from .schema import NAMESPACE_PREFIXES, NS_CONFIG, ROOT_ELEMENT

DEFAULT_DISPLAY_NAME = "Kiosk"

INDENT = '    '

FILE_EXPLORER_MARKUP = {
    FileExplorerAccess.NONE: (),
    FileExplorerAccess.DOWNLOADS: ('<rs5:AllowedNamespace Name="Downloads"/>',),
    FileExplorerAccess.REMOVABLE: ('<v3:AllowRemovableDrives/>',),
    FileExplorerAccess.DOWNLOADS_AND_REMOVABLE: (
        '<rs5:AllowedNamespace Name="Downloads"/>',
        '<v3:AllowRemovableDrives/>',
    ),
    FileExplorerAccess.UNRESTRICTED: ('<v3:NoRestriction/>',),
}


def _line(depth: int, text: str) -> str:
    return INDENT * depth + text


def cdata(text: str) -> str:
    """Wrap text in a CDATA section, splitting any embedded terminator"""
    return '<![CDATA[' + text.replace(']]>', ']]]]><![CDATA[>') + ']]>'


def resolved_profile_id(model: PolicyModel) -> str:
    return model.profile_id or PLACEHOLDER_PROFILE_ID


def single_app_arguments(app: BrowserKioskApp) -> str:
    url = resolve_launch_url(app.source, DEFAULT_BROWSER_URL)
    return build_edge_kiosk_args(url, app.kiosk_type, app.idle_timeout)


def auto_launch_arguments(model: PolicyModel) -> str:
    """Arguments for the auto-launch app: kiosk flags for Edge, literal otherwise"""
    app = model.auto_launch_app
    if app is None:
        return ''
    if is_edge_app(app.value):
        settings = model.auto_launch
        url = resolve_launch_url(settings.browser, DEFAULT_BROWSER_URL)
        return build_browser_kiosk_args(Browser.EDGE, url, settings.kiosk_type, settings.idle_timeout)
    if app.kind == AppKind.PATH:
        return model.auto_launch.arguments.strip()
    return ''


def encode(model: PolicyModel) -> str:
    """Render the policy as an Assigned Access configuration document"""
    profile_id = escape_xml(resolved_profile_id(model))

    lines = [
        '<?xml version="1.0" encoding="utf-8"?>',
        f'<{ROOT_ELEMENT}',
        _line(1, f'xmlns="{NS_CONFIG}"'),
    ]
    for prefix, namespace in NAMESPACE_PREFIXES:
        lines.append(_line(1, f'xmlns:{prefix}="{namespace}"'))
    lines[-1] += '>'

    lines.append(_line(1, '<Profiles>'))
    lines.append(_line(2, f'<Profile Id="{profile_id}">'))
    if model.mode == Mode.SINGLE:
        lines.extend(_single_app_profile(model))
    else:
        lines.extend(_multi_app_profile(model))
    lines.append(_line(2, '</Profile>'))
    lines.append(_line(1, '</Profiles>'))

    lines.extend(_configs_section(model, profile_id))
    lines.append(f'</{ROOT_ELEMENT}>')
    return '\n'.join(lines)


def _single_app_profile(model: PolicyModel) -> List[str]:
    app = model.single_app
    if isinstance(app, BrowserKioskApp):
        args = single_app_arguments(app)
        kiosk_app = (f'<KioskModeApp v4:ClassicAppPath="{escape_xml(EDGE_PATH)}" '
                     f'v4:ClassicAppArguments="{escape_xml(args)}"/>')
    elif isinstance(app, PackagedKioskApp):
        kiosk_app = f'<KioskModeApp AppUserModelId="{escape_xml(app.aumid)}"/>'
    elif isinstance(app, DesktopKioskApp):
        if app.arguments:
            kiosk_app = (f'<KioskModeApp v4:ClassicAppPath="{escape_xml(app.path)}" '
                         f'v4:ClassicAppArguments="{escape_xml(app.arguments)}"/>')
        else:
            kiosk_app = f'<KioskModeApp v4:ClassicAppPath="{escape_xml(app.path)}"/>'
    else:
        raise TypeError(f"Unknown single app variant: {type(app).__name__}")

    lines = [_line(3, kiosk_app)]
    if model.breakout is not None:
        key = model.breakout.to_key_string()
        lines.append(_line(3, f'<v4:BreakoutSequence Key="{escape_xml(key)}"/>'))
    return lines


def _allowed_app_line(model: PolicyModel, index: int) -> str:
    app = model.allowed_apps[index]
    if app.kind == AppKind.AUMID:
        attrs = f'AppUserModelId="{escape_xml(app.value)}"'
    else:
        attrs = f'DesktopAppPath="{escape_xml(app.value)}"'

    if model.auto_launch_index == index:
        attrs += ' rs5:AutoLaunch="true"'
        args = auto_launch_arguments(model)
        if args:
            attrs += f' rs5:AutoLaunchArguments="{escape_xml(args)}"'
    return _line(5, f'<App {attrs}/>')


def _multi_app_profile(model: PolicyModel) -> List[str]:
    lines = [
        _line(3, '<AllAppsList>'),
        _line(4, '<AllowedApps>'),
    ]
    lines.extend(_allowed_app_line(model, i) for i in range(len(model.allowed_apps)))
    lines.append(_line(4, '</AllowedApps>'))
    lines.append(_line(3, '</AllAppsList>'))

    restrictions = FILE_EXPLORER_MARKUP[model.restrictions.file_explorer]
    if restrictions:
        lines.append(_line(3, '<rs5:FileExplorerNamespaceRestrictions>'))
        lines.extend(_line(4, item) for item in restrictions)
        lines.append(_line(3, '</rs5:FileExplorerNamespaceRestrictions>'))

    start_pins = encode_start_pins(model.start_pins)
    if start_pins:
        lines.append(_line(3, f'<v5:StartPins>{cdata(start_pins)}</v5:StartPins>'))

    show_taskbar = 'true' if model.restrictions.show_taskbar else 'false'
    lines.append(_line(3, f'<Taskbar ShowTaskbar="{show_taskbar}"/>'))

    taskbar_layout = build_taskbar_layout_xml(model.taskbar_pins)
    if taskbar_layout:
        lines.append(_line(3, f'<v5:TaskbarLayout>{cdata(taskbar_layout)}</v5:TaskbarLayout>'))
    return lines


def _account_lines(model: PolicyModel) -> List[str]:
    account = model.account
    if isinstance(account, AutoLogonAccount):
        display_name = account.display_name or DEFAULT_DISPLAY_NAME
        return [_line(3, f'<AutoLogonAccount rs5:DisplayName="{escape_xml(display_name)}"/>')]
    if isinstance(account, ExistingUserAccount):
        return [_line(3, f'<Account>{escape_xml(account.account_name)}</Account>')]
    if isinstance(account, UserGroupAccount):
        return [_line(3, f'<UserGroup Type="{escape_xml(account.group_type.value)}" '
                         f'Name="{escape_xml(account.group_name)}"/>')]
    if isinstance(account, GlobalProfileAccount):
        return []
    raise TypeError(f"Unknown account variant: {type(account).__name__}")


def _configs_section(model: PolicyModel, profile_id: str) -> List[str]:
    lines = [_line(1, '<Configs>')]
    if isinstance(model.account, GlobalProfileAccount):
        lines.append(_line(2, f'<v3:GlobalProfile Id="{profile_id}"/>'))
    else:
        lines.append(_line(2, '<Config>'))
        lines.extend(_account_lines(model))
        lines.append(_line(3, f'<DefaultProfile Id="{profile_id}"/>'))
        lines.append(_line(2, '</Config>'))
    lines.append(_line(1, '</Configs>'))
    return lines
