"""Start menu and taskbar pin models"""
from ..common_imports import *

EDGE_AUMID = "Microsoft.MicrosoftEdge.Stable_8wekyb3d8bbwe!App"


class PinListType(str, Enum):
    START = "start"
    TASKBAR = "taskbar"


@dataclass
class DesktopLink:
    """A .lnk shortcut; system_shortcut points at an existing shortcut file"""
    name: str
    target: str = ""
    args: str = ""
    working_dir: str = ""
    icon_path: str = ""
    system_shortcut: str = ""

    pin_type = "desktopAppLink"


@dataclass
class PackagedAppPin:
    name: str
    packaged_app_id: str = ""

    pin_type = "packagedAppId"


@dataclass
class SecondaryTile:
    """Browser site tile, Start menu only"""
    name: str
    packaged_app_id: str = EDGE_AUMID
    args: str = ""  # launch URL
    tile_id: str = ""

    pin_type = "secondaryTile"


Pin = Union[DesktopLink, PackagedAppPin, SecondaryTile]

_PIN_TYPES = {cls.pin_type: cls for cls in (DesktopLink, PackagedAppPin, SecondaryTile)}


def pin_to_dict(pin: Pin) -> Dict[str, Any]:
    if not isinstance(pin, tuple(_PIN_TYPES.values())):
        raise TypeError(f"Unknown pin variant: {type(pin).__name__}")
    data = asdict(pin)
    data['pin_type'] = pin.pin_type
    return data


def pin_from_dict(data: Dict[str, Any]) -> Pin:
    """Rebuild a pin from its tagged dictionary form, ignoring unknown keys"""
    pin_type = data.get('pin_type', DesktopLink.pin_type)
    cls = _PIN_TYPES.get(pin_type)
    if cls is None:
        raise ValueError(f"Unknown pin type: {pin_type}")
    names = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in data.items() if k in names})
