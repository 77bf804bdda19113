"""Bundled app presets and starting configurations"""
from ..common_imports import *
from ..models import (
    AllowedApp,
    AppKind,
    AutoLogonAccount,
    BrowserKioskApp,
    DEFAULT_BROWSER_URL,
    EDGE_AUMID,
    FileExplorerAccess,
    KioskType,
    LaunchSource,
    Mode,
    PolicyModel,
)
from ..utils.helpers import is_edge_app

logger = logging.getLogger(__name__)

PRESETS_FILE = Path(__file__).resolve().parent.parent / "data" / "app_presets.json"

EDGE_DEPENDENCY_KEYS = ('edge', 'edgeProxy', 'edgeAppId')

PRESET_NAMES = ('blank', 'edgeFullscreen', 'edgePublic', 'multiApp')


@dataclass
class AppPreset:
    key: str
    kind: AppKind
    value: str
    label: str = ""
    skip_auto_pin: bool = False
    skip_auto_launch: bool = False

    @classmethod
    def from_dict(cls, key: str, data: Dict[str, Any]) -> "AppPreset":
        return cls(
            key=key,
            kind=AppKind(data.get('type', AppKind.PATH.value)),
            value=data['value'],
            label=data.get('label', ''),
            skip_auto_pin=bool(data.get('skipAutoPin', False)),
            skip_auto_launch=bool(data.get('skipAutoLaunch', False)),
        )


class PresetCatalog:
    """Common apps, and groups of apps that are always added together"""

    def __init__(self, apps: Optional[Dict[str, AppPreset]] = None,
                 groups: Optional[Dict[str, List[str]]] = None):
        self.apps = apps or {}
        self.groups = groups or {}

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> "PresetCatalog":
        """Read a presets file; a missing or broken file gives an empty catalog"""
        path = Path(path) if path else PRESETS_FILE
        data = safe_json_load(str(path))
        if not isinstance(data, dict):
            logger.error(f"❌ Could not load app presets from {path}")
            return cls()

        apps = {}
        for key, entry in (data.get('apps') or {}).items():
            try:
                apps[key] = AppPreset.from_dict(key, entry)
            except (KeyError, ValueError) as e:
                logger.warning(f"⚠️ Skipping app preset {key}: {e}")
        groups = {key: list(members) for key, members in (data.get('groups') or {}).items()}
        logger.debug(f"Loaded {len(apps)} app presets, {len(groups)} groups")
        return cls(apps, groups)

    def keys(self) -> List[str]:
        return sorted(set(self.apps) | set(self.groups))

    def get(self, key: str) -> Optional[AppPreset]:
        return self.apps.get(key)

    def members(self, key: str) -> List[AppPreset]:
        """Presets added for ``key``: the whole group if there is one"""
        if key in self.groups:
            return [self.apps[k] for k in self.groups[key] if k in self.apps]
        preset = self.apps.get(key)
        return [preset] if preset else []


_catalog: Optional[PresetCatalog] = None


def default_catalog() -> PresetCatalog:
    global _catalog
    if _catalog is None:
        _catalog = PresetCatalog.load()
    return _catalog


def add_common_app(model: PolicyModel, key: str, catalog: Optional[PresetCatalog] = None) -> int:
    """Add a preset app (or preset group) to the allow list; returns how many were new"""
    catalog = catalog or default_catalog()
    members = catalog.members(key)
    if not members:
        logger.warning(f"⚠️ Unknown app preset: {key}")
        return 0
    return sum(
        model.add_app(p.kind, p.value, p.skip_auto_pin, p.skip_auto_launch)
        for p in members
    )


def ensure_browser_dependencies(model: PolicyModel, app: AllowedApp,
                                catalog: Optional[PresetCatalog] = None) -> int:
    """Edge needs its proxy and app id allowed too; those never pin or auto-launch"""
    if not (is_edge_app(app.value) or app.value.lower() == EDGE_AUMID.lower()):
        return 0
    catalog = catalog or default_catalog()
    added = 0
    for key in EDGE_DEPENDENCY_KEYS:
        preset = catalog.get(key)
        if preset is None:
            continue
        dependency = key != 'edge'
        added += model.add_app(preset.kind, preset.value,
                               skip_auto_pin=dependency, skip_auto_launch=dependency)
    return added


def add_app_with_dependencies(model: PolicyModel, kind: Union[AppKind, str], value: str,
                              catalog: Optional[PresetCatalog] = None) -> bool:
    """Add an app by hand, pulling in browser helpers it needs"""
    if not model.add_app(kind, value):
        return False
    ensure_browser_dependencies(model, model.allowed_apps[-1], catalog)
    return True


def new_from_preset(name: str = 'blank', catalog: Optional[PresetCatalog] = None) -> PolicyModel:
    """Starting configuration with a fresh profile id"""
    if name not in PRESET_NAMES:
        raise ValueError(f"Unknown preset: {name}")

    model = PolicyModel.blank()
    if name == 'blank':
        model.single_app = BrowserKioskApp()
    elif name == 'edgeFullscreen':
        model.account = AutoLogonAccount(display_name='Kiosk')
        model.single_app = BrowserKioskApp(source=LaunchSource(url=DEFAULT_BROWSER_URL))
    elif name == 'edgePublic':
        model.account = AutoLogonAccount(display_name='Public Browsing')
        model.single_app = BrowserKioskApp(
            source=LaunchSource(url='https://www.bing.com'),
            kiosk_type=KioskType.PUBLIC_BROWSING,
        )
    elif name == 'multiApp':
        model.set_mode(Mode.MULTI)
        model.account = AutoLogonAccount(display_name='Multi-App Kiosk')
        for key in ('edge', 'osk', 'calculator'):
            add_common_app(model, key, catalog)
        model.restrictions.show_taskbar = True
        model.restrictions.file_explorer = FileExplorerAccess.DOWNLOADS

    logger.debug(f"New {name} configuration {model.profile_id}")
    return model
