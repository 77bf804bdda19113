"""Kiosk policy model

The policy is a single mutable object owned by whoever edits it (usually a
``PolicySession``).  Every collection operation keeps the model's invariants
intact in one step: the auto-launch reference always points at a live allowed
app (or is None) and pin names are unique per list, ignoring case.
"""
from ..common_imports import *
from ..errors import DuplicatePinError, IncompatibleAccountError, PolicyError
from ..utils.helpers import executable_name, is_edge_app, is_helper_executable, new_guid
from .accounts import (
    Account,
    AutoLogonAccount,
    RESTRICTED_ONLY_ACCOUNTS,
    UserGroupAccount,
    account_from_dict,
    account_to_dict,
)
from .apps import (
    AllowedApp,
    AppKind,
    AutoLaunchSettings,
    BreakoutSequence,
    BrowserKioskApp,
    SingleApp,
    allowed_app_from_dict,
    allowed_app_to_dict,
    auto_launch_from_dict,
    auto_launch_to_dict,
    single_app_from_dict,
    single_app_to_dict,
)
from .pins import (
    DesktopLink,
    PackagedAppPin,
    Pin,
    PinListType,
    SecondaryTile,
    pin_from_dict,
    pin_to_dict,
)

logger = logging.getLogger(__name__)

PLACEHOLDER_PROFILE_ID = "{00000000-0000-0000-0000-000000000000}"
GUID_PATTERN = re.compile(
    r'^\{[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}\}$',
    re.IGNORECASE,
)


class Mode(str, Enum):
    SINGLE = "single"
    MULTI = "multi"
    RESTRICTED = "restricted"


class FileExplorerAccess(str, Enum):
    NONE = "none"
    DOWNLOADS = "downloads"
    REMOVABLE = "removable"
    DOWNLOADS_AND_REMOVABLE = "downloads-removable"
    UNRESTRICTED = "all"


@dataclass
class Restrictions:
    file_explorer: FileExplorerAccess = FileExplorerAccess.NONE
    show_taskbar: bool = True


def is_valid_profile_id(profile_id: Optional[str]) -> bool:
    """A real GUID; the all-zero placeholder does not count"""
    if not profile_id or profile_id == PLACEHOLDER_PROFILE_ID:
        return False
    return bool(GUID_PATTERN.match(profile_id))


def pin_name_from_app(app: AllowedApp) -> str:
    """Friendly pin name for an allowed app"""
    if not app.value:
        return 'Unnamed'
    if is_edge_app(app.value):
        return 'Microsoft Edge'
    if app.kind == AppKind.AUMID:
        return app.value
    return executable_name(app.value)


def _moved_index(position: Optional[int], old: int, new: int) -> Optional[int]:
    """Where ``position`` ends up after moving the element at ``old`` to ``new``"""
    if position is None:
        return None
    if position == old:
        return new
    if old < position <= new:
        return position - 1
    if new <= position < old:
        return position + 1
    return position


@dataclass
class PolicyModel:
    """A complete kiosk policy: profile, account, apps, pins and restrictions"""
    profile_id: str = ""
    config_name: str = ""
    mode: Mode = Mode.SINGLE
    account: Account = field(default_factory=AutoLogonAccount)

    # Single-app mode
    single_app: SingleApp = field(default_factory=BrowserKioskApp)
    breakout: Optional[BreakoutSequence] = None

    # Multi-app and restricted modes
    allowed_apps: List[AllowedApp] = field(default_factory=list)
    auto_launch_index: Optional[int] = None
    auto_launch: AutoLaunchSettings = field(default_factory=AutoLaunchSettings)
    start_pins: List[Pin] = field(default_factory=list)
    taskbar_pins: List[Pin] = field(default_factory=list)
    restrictions: Restrictions = field(default_factory=Restrictions)

    @classmethod
    def blank(cls) -> "PolicyModel":
        """Fresh draft with a newly generated profile id"""
        return cls(profile_id=new_guid())

    def new_profile_id(self) -> str:
        self.profile_id = new_guid()
        return self.profile_id

    @property
    def is_single_app(self) -> bool:
        return self.mode == Mode.SINGLE

    # ------------------------------------------------------------------
    # Mode and account
    # ------------------------------------------------------------------

    def set_mode(self, mode: Union[Mode, str]):
        """Switch mode, coercing an account type the new mode cannot use"""
        self.mode = Mode(mode)
        account_type = self.account.account_type
        if self.mode == Mode.RESTRICTED and account_type not in RESTRICTED_ONLY_ACCOUNTS:
            self.account = UserGroupAccount()
        elif self.mode != Mode.RESTRICTED and account_type in RESTRICTED_ONLY_ACCOUNTS:
            self.account = AutoLogonAccount()

    def set_account(self, account: Account):
        restricted_only = account.account_type in RESTRICTED_ONLY_ACCOUNTS
        if restricted_only and self.mode != Mode.RESTRICTED:
            raise IncompatibleAccountError(
                "User groups and the global profile are only available in restricted user mode.")
        if not restricted_only and self.mode == Mode.RESTRICTED:
            raise IncompatibleAccountError(
                "Restricted user mode requires a user group or the global profile.")
        self.account = account

    # ------------------------------------------------------------------
    # Allowed apps
    # ------------------------------------------------------------------

    def add_app(self, kind: Union[AppKind, str], value: str,
                skip_auto_pin: bool = False, skip_auto_launch: bool = False) -> bool:
        """Append an allowed app; returns False if empty or already listed"""
        value = (value or '').strip()
        if not value:
            return False
        if self.find_app(lambda a: a.value == value) is not None:
            return False
        self.allowed_apps.append(AllowedApp(
            kind=AppKind(kind),
            value=value,
            skip_auto_pin=skip_auto_pin,
            skip_auto_launch=skip_auto_launch,
        ))
        return True

    def remove_app(self, index: int) -> AllowedApp:
        if not 0 <= index < len(self.allowed_apps):
            raise IndexError(f"No allowed app at position {index}")
        app = self.allowed_apps[index]
        if self.auto_launch_index == index:
            self.auto_launch_index = None
        elif self.auto_launch_index is not None and self.auto_launch_index > index:
            self.auto_launch_index -= 1
        del self.allowed_apps[index]
        return app

    def move_app(self, index: int, new_index: int):
        """Reorder; the auto-launch reference follows the app it points at"""
        if not 0 <= index < len(self.allowed_apps):
            raise IndexError(f"No allowed app at position {index}")
        new_index = max(0, min(new_index, len(self.allowed_apps) - 1))
        app = self.allowed_apps.pop(index)
        self.allowed_apps.insert(new_index, app)
        self.auto_launch_index = _moved_index(self.auto_launch_index, index, new_index)

    def find_app(self, predicate: Callable[[AllowedApp], bool]) -> Optional[int]:
        for i, app in enumerate(self.allowed_apps):
            if predicate(app):
                return i
        return None

    def is_auto_launch_candidate(self, app: AllowedApp) -> bool:
        return not app.skip_auto_launch and not is_helper_executable(app.value)

    def auto_launch_candidates(self) -> List[int]:
        return [i for i, app in enumerate(self.allowed_apps) if self.is_auto_launch_candidate(app)]

    def set_auto_launch(self, index: Optional[int]):
        if index is None:
            self.auto_launch_index = None
            return
        if not 0 <= index < len(self.allowed_apps):
            raise IndexError(f"No allowed app at position {index}")
        if not self.is_auto_launch_candidate(self.allowed_apps[index]):
            raise PolicyError(f"{self.allowed_apps[index].value} cannot be launched automatically.")
        self.auto_launch_index = index

    def try_set_auto_launch(self, index: int) -> bool:
        """set_auto_launch for imported data; a bad reference is logged and dropped"""
        try:
            self.set_auto_launch(index)
            return True
        except (IndexError, PolicyError) as e:
            logger.warning(f"⚠️ Ignoring auto-launch setting: {e}")
            return False

    def _restore_auto_launch(self, apps_data: List[Dict[str, Any]], index: Any):
        # the stored index refers to the saved list, which may have held duplicates
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(apps_data):
            return
        value = (apps_data[index].get('value') or '').strip()
        position = self.find_app(lambda a: a.value == value)
        if position is not None:
            self.try_set_auto_launch(position)

    @property
    def auto_launch_app(self) -> Optional[AllowedApp]:
        if self.auto_launch_index is None:
            return None
        return self.allowed_apps[self.auto_launch_index]

    # ------------------------------------------------------------------
    # Pins
    # ------------------------------------------------------------------

    def pins(self, list_type: Union[PinListType, str]) -> List[Pin]:
        if PinListType(list_type) == PinListType.TASKBAR:
            return self.taskbar_pins
        return self.start_pins

    def _check_pin(self, list_type: PinListType, pin: Pin, ignore_index: Optional[int] = None):
        name = (pin.name or '').strip()
        if not name:
            raise PolicyError("Pin name is required.")
        if list_type == PinListType.TASKBAR and isinstance(pin, SecondaryTile):
            raise PolicyError("Site tiles can only be pinned to Start.")
        lowered = name.lower()
        for i, existing in enumerate(self.pins(list_type)):
            if i != ignore_index and (existing.name or '').lower() == lowered:
                raise DuplicatePinError(f"A pin named '{existing.name}' already exists.")

    def add_pin(self, list_type: Union[PinListType, str], pin: Pin) -> int:
        """Append a pin and return its position"""
        list_type = PinListType(list_type)
        self._check_pin(list_type, pin)
        pins = self.pins(list_type)
        pins.append(pin)
        return len(pins) - 1

    def update_pin(self, list_type: Union[PinListType, str], index: int, pin: Pin):
        """Replace a pin in place, keeping names unique"""
        list_type = PinListType(list_type)
        pins = self.pins(list_type)
        if not 0 <= index < len(pins):
            raise IndexError(f"No {list_type.value} pin at position {index}")
        self._check_pin(list_type, pin, ignore_index=index)
        pins[index] = pin

    def remove_pin(self, list_type: Union[PinListType, str], index: int) -> Pin:
        pins = self.pins(list_type)
        if not 0 <= index < len(pins):
            raise IndexError(f"No pin at position {index}")
        return pins.pop(index)

    def move_pin(self, list_type: Union[PinListType, str], index: int, new_index: int):
        pins = self.pins(list_type)
        if not 0 <= index < len(pins):
            raise IndexError(f"No pin at position {index}")
        new_index = max(0, min(new_index, len(pins) - 1))
        pins.insert(new_index, pins.pop(index))

    def find_pin(self, list_type: Union[PinListType, str],
                 predicate: Callable[[Pin], bool]) -> Optional[int]:
        for i, pin in enumerate(self.pins(list_type)):
            if predicate(pin):
                return i
        return None

    def unique_pin_name(self, base_name: str, list_type: Union[PinListType, str] = PinListType.START) -> str:
        """``base_name``, or ``base_name (2)``, ``(3)``... if already taken"""
        trimmed = (base_name or '').strip() or 'Shortcut'
        existing = {(p.name or '').lower() for p in self.pins(list_type)}
        if trimmed.lower() not in existing:
            return trimmed
        counter = 2
        while f"{trimmed} ({counter})".lower() in existing:
            counter += 1
        return f"{trimmed} ({counter})"

    def import_pin(self, list_type: Union[PinListType, str], pin: Pin) -> Optional[int]:
        """Add a loaded pin, renaming a clash; pins the list cannot hold are skipped"""
        list_type = PinListType(list_type)
        pin = replace(pin, name=self.unique_pin_name(pin.name, list_type))
        try:
            return self.add_pin(list_type, pin)
        except PolicyError as e:
            logger.warning(f"⚠️ Skipping {list_type.value} pin {pin.name}: {e}")
            return None

    def duplicate_pin(self, index: int) -> int:
        """Copy a Start pin under a fresh name; returns the copy's position"""
        pin = self.start_pins[index]
        if isinstance(pin, SecondaryTile):
            clone = replace(pin, name=self.unique_pin_name(f"{pin.name or 'Edge Site'} Copy"), tile_id='')
        elif isinstance(pin, PackagedAppPin):
            clone = replace(pin, name=self.unique_pin_name(f"{pin.name or 'App'} Copy"))
        elif isinstance(pin, DesktopLink):
            clone = replace(pin, name=self.unique_pin_name(f"{pin.name or 'Shortcut'} Copy"))
        else:
            raise TypeError(f"Unknown pin variant: {type(pin).__name__}")
        return self.add_pin(PinListType.START, clone)

    def pin_app(self, list_type: Union[PinListType, str], app_index: int) -> int:
        """Pin an allowed app to Start or the taskbar"""
        list_type = PinListType(list_type)
        app = self.allowed_apps[app_index]
        where = 'Start' if list_type == PinListType.START else 'the taskbar'
        if app.kind == AppKind.AUMID:
            already = self.find_pin(list_type, lambda p: isinstance(p, PackagedAppPin)
                                    and p.packaged_app_id == app.value)
        else:
            already = self.find_pin(list_type, lambda p: isinstance(p, DesktopLink)
                                    and p.target == app.value)
        if already is not None:
            raise DuplicatePinError(f"This app is already pinned to {where}.")

        name = self.unique_pin_name(pin_name_from_app(app), list_type)
        if app.kind == AppKind.AUMID:
            pin = PackagedAppPin(name=name, packaged_app_id=app.value)
        else:
            pin = DesktopLink(name=name, target=app.value)
        return self.add_pin(list_type, pin)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            'profile_id': self.profile_id,
            'config_name': self.config_name,
            'mode': self.mode.value,
            'account': account_to_dict(self.account),
            'single_app': single_app_to_dict(self.single_app),
            'breakout': asdict(self.breakout) if self.breakout else None,
            'allowed_apps': [allowed_app_to_dict(a) for a in self.allowed_apps],
            'auto_launch_index': self.auto_launch_index,
            'auto_launch': auto_launch_to_dict(self.auto_launch),
            'start_pins': [pin_to_dict(p) for p in self.start_pins],
            'taskbar_pins': [pin_to_dict(p) for p in self.taskbar_pins],
            'restrictions': {
                'file_explorer': self.restrictions.file_explorer.value,
                'show_taskbar': self.restrictions.show_taskbar,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PolicyModel":
        """Rebuild a model, normalizing the account and auto-launch reference"""
        model = cls(
            profile_id=data.get('profile_id', ''),
            config_name=data.get('config_name', ''),
            single_app=single_app_from_dict(data.get('single_app') or {}),
            auto_launch=auto_launch_from_dict(data.get('auto_launch')),
        )
        account = account_from_dict(data.get('account') or {})
        model.mode = Mode(data.get('mode', Mode.SINGLE.value))
        model.account = account
        model.set_mode(model.mode)

        breakout = data.get('breakout')
        if breakout:
            model.breakout = BreakoutSequence(**breakout)

        apps_data = data.get('allowed_apps') or []
        for app_data in apps_data:
            app = allowed_app_from_dict(app_data)
            model.add_app(app.kind, app.value, app.skip_auto_pin, app.skip_auto_launch)
        model._restore_auto_launch(apps_data, data.get('auto_launch_index'))

        for list_type, key in ((PinListType.START, 'start_pins'), (PinListType.TASKBAR, 'taskbar_pins')):
            for pin_data in data.get(key) or []:
                model.import_pin(list_type, pin_from_dict(pin_data))

        restrictions = data.get('restrictions') or {}
        model.restrictions = Restrictions(
            file_explorer=FileExplorerAccess(restrictions.get('file_explorer', FileExplorerAccess.NONE.value)),
            show_taskbar=bool(restrictions.get('show_taskbar', True)),
        )
        return model
