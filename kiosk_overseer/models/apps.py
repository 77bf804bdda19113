"""Application Models"""
from ..common_imports import *

EDGE_PATH = "%ProgramFiles(x86)%\\Microsoft\\Edge\\Application\\msedge.exe"
DEFAULT_BROWSER_URL = "https://www.microsoft.com"


class AppKind(str, Enum):
    AUMID = "aumid"  # packaged app, AppUserModelId
    PATH = "path"    # desktop executable path


class SourceType(str, Enum):
    URL = "url"
    FILE = "file"


class KioskType(str, Enum):
    FULLSCREEN = "fullscreen"
    PUBLIC_BROWSING = "public-browsing"


@dataclass
class AllowedApp:
    """An entry in the multi-app allow list"""
    kind: AppKind
    value: str
    skip_auto_pin: bool = False  # added as a dependency of another app
    skip_auto_launch: bool = False


@dataclass
class LaunchSource:
    """Where a kiosk browser starts: a web address or a local file"""
    source_type: SourceType = SourceType.URL
    url: str = ""
    file_path: str = ""

    def __post_init__(self):
        self.file_path = normalize_file_path(self.file_path)


def normalize_file_path(path: Optional[str]) -> str:
    """Windows separators for a local path; file URLs are left alone"""
    if not path:
        return ''
    if path.lower().startswith('file:'):
        return path
    return path.replace('/', '\\')


@dataclass
class BrowserKioskApp:
    """Single-app Edge kiosk"""
    source: LaunchSource = field(default_factory=LaunchSource)
    kiosk_type: KioskType = KioskType.FULLSCREEN
    idle_timeout: int = 0  # minutes, 0 disables


@dataclass
class PackagedKioskApp:
    aumid: str = ""


@dataclass
class DesktopKioskApp:
    path: str = ""
    arguments: str = ""


SingleApp = Union[BrowserKioskApp, PackagedKioskApp, DesktopKioskApp]


@dataclass
class AutoLaunchSettings:
    """Launch options for the auto-launch app in multi-app mode"""
    browser: LaunchSource = field(default_factory=LaunchSource)
    kiosk_type: KioskType = KioskType.FULLSCREEN
    idle_timeout: int = 0
    arguments: str = ""  # literal arguments for non-Edge desktop apps


@dataclass
class BreakoutSequence:
    """Key chord that exits a single-app kiosk"""
    key: str = "K"
    ctrl: bool = True
    alt: bool = True
    shift: bool = False

    def to_key_string(self) -> str:
        combo = []
        if self.ctrl:
            combo.append('Ctrl')
        if self.alt:
            combo.append('Alt')
        if self.shift:
            combo.append('Shift')
        combo.append(self.key)
        return '+'.join(combo)

    @classmethod
    def from_key_string(cls, text: str) -> Optional["BreakoutSequence"]:
        parts = [p.strip() for p in (text or '').split('+') if p.strip()]
        if not parts:
            return None
        modifiers = {p.lower() for p in parts[:-1]}
        return cls(
            key=parts[-1],
            ctrl='ctrl' in modifiers,
            alt='alt' in modifiers,
            shift='shift' in modifiers,
        )


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _source_from_dict(data: Optional[Dict[str, Any]]) -> LaunchSource:
    data = data or {}
    return LaunchSource(
        source_type=SourceType(data.get('source_type', SourceType.URL.value)),
        url=data.get('url', ''),
        file_path=data.get('file_path', ''),
    )


def _source_to_dict(source: LaunchSource) -> Dict[str, Any]:
    return {
        'source_type': source.source_type.value,
        'url': source.url,
        'file_path': source.file_path,
    }


def allowed_app_to_dict(app: AllowedApp) -> Dict[str, Any]:
    data = asdict(app)
    data['kind'] = app.kind.value
    return data


def allowed_app_from_dict(data: Dict[str, Any]) -> AllowedApp:
    return AllowedApp(
        kind=AppKind(data.get('kind', AppKind.PATH.value)),
        value=data['value'],
        skip_auto_pin=bool(data.get('skip_auto_pin', False)),
        skip_auto_launch=bool(data.get('skip_auto_launch', False)),
    )


def single_app_to_dict(app: SingleApp) -> Dict[str, Any]:
    if isinstance(app, BrowserKioskApp):
        return {
            'type': 'edge',
            'source': _source_to_dict(app.source),
            'kiosk_type': app.kiosk_type.value,
            'idle_timeout': app.idle_timeout,
        }
    if isinstance(app, PackagedKioskApp):
        return {'type': 'uwp', 'aumid': app.aumid}
    if isinstance(app, DesktopKioskApp):
        return {'type': 'win32', 'path': app.path, 'arguments': app.arguments}
    raise TypeError(f"Unknown single app variant: {type(app).__name__}")


def single_app_from_dict(data: Dict[str, Any]) -> SingleApp:
    app_type = data.get('type', 'edge')
    if app_type == 'edge':
        return BrowserKioskApp(
            source=_source_from_dict(data.get('source')),
            kiosk_type=KioskType(data.get('kiosk_type', KioskType.FULLSCREEN.value)),
            idle_timeout=int(data.get('idle_timeout', 0) or 0),
        )
    if app_type == 'uwp':
        return PackagedKioskApp(aumid=data.get('aumid', ''))
    if app_type == 'win32':
        return DesktopKioskApp(path=data.get('path', ''), arguments=data.get('arguments', ''))
    raise ValueError(f"Unknown single app type: {app_type}")


def auto_launch_to_dict(settings: AutoLaunchSettings) -> Dict[str, Any]:
    return {
        'browser': _source_to_dict(settings.browser),
        'kiosk_type': settings.kiosk_type.value,
        'idle_timeout': settings.idle_timeout,
        'arguments': settings.arguments,
    }


def auto_launch_from_dict(data: Optional[Dict[str, Any]]) -> AutoLaunchSettings:
    data = data or {}
    return AutoLaunchSettings(
        browser=_source_from_dict(data.get('browser')),
        kiosk_type=KioskType(data.get('kiosk_type', KioskType.FULLSCREEN.value)),
        idle_timeout=int(data.get('idle_timeout', 0) or 0),
        arguments=data.get('arguments', ''),
    )
