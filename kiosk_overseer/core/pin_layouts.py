"""Embedded pin documents

Start pins travel as a compact JSON ``pinnedList``; taskbar pins as a
``LayoutModificationTemplate`` XML fragment.  The two formats are unrelated
and each has its own builder and parser here.
"""
from ..common_imports import *
from ..models.pins import DesktopLink, PackagedAppPin, Pin, SecondaryTile, EDGE_AUMID
from ..utils.helpers import default_shortcut_path, escape_xml, executable_name, truncate

logger = logging.getLogger(__name__)

LAYOUT_NS = "http://schemas.microsoft.com/Start/2014/LayoutModification"
DEFAULT_LAYOUT_NS = "http://schemas.microsoft.com/Start/2014/FullDefaultLayout"
START_NS = "http://schemas.microsoft.com/Start/2014/StartLayout"
TASKBAR_NS = "http://schemas.microsoft.com/Start/2014/TaskbarLayout"

TILE_ID_PREFIX = "MSEdge._pin_"


def default_tile_id(name: str) -> str:
    return TILE_ID_PREFIX + re.sub(r'[^a-zA-Z0-9]', '', name or '')


def link_path(pin: DesktopLink) -> str:
    """The .lnk a desktop pin references"""
    return pin.system_shortcut or default_shortcut_path(pin.name)


def pin_from_link_path(path: str) -> DesktopLink:
    """Desktop pin for a shortcut path; generated paths map back to a plain pin"""
    name = re.sub(r'\.lnk$', '', executable_name(path), flags=re.IGNORECASE)
    if path == default_shortcut_path(name):
        return DesktopLink(name=name)
    return DesktopLink(name=name, system_shortcut=path)


# ---------------------------------------------------------------------------
# Start pins (JSON)
# ---------------------------------------------------------------------------

def build_start_pins(pins: List[Pin]) -> Optional[Dict[str, Any]]:
    if not pins:
        return None

    pinned = []
    for pin in pins:
        if isinstance(pin, PackagedAppPin) and pin.packaged_app_id:
            pinned.append({'packagedAppId': pin.packaged_app_id})
        elif isinstance(pin, SecondaryTile) and pin.packaged_app_id:
            pinned.append({'secondaryTile': {
                'tileId': pin.tile_id or default_tile_id(pin.name),
                'arguments': pin.args or '',
                'displayName': pin.name,
                'packagedAppId': pin.packaged_app_id,
            }})
        elif isinstance(pin, DesktopLink):
            pinned.append({'desktopAppLink': link_path(pin)})
        else:
            # packaged pins without an id still need a shortcut to point at
            pinned.append({'desktopAppLink': default_shortcut_path(pin.name)})
    return {'pinnedList': pinned}


def encode_start_pins(pins: List[Pin]) -> Optional[str]:
    payload = build_start_pins(pins)
    if payload is None:
        return None
    return json.dumps(payload, separators=(',', ':'), ensure_ascii=False)


def _text_fields(data: Dict[str, Any], *keys: str) -> bool:
    """True when every present key holds a string"""
    return all(isinstance(data.get(key, ''), str) for key in keys)


def parse_start_pins(text: str) -> List[Pin]:
    """Pins from a pinnedList JSON document; raises ValueError if malformed

    Entries with the wrong shape are skipped, the rest of the list still loads.
    """
    data = json.loads(text)
    if not isinstance(data, dict) or not isinstance(data.get('pinnedList'), list):
        raise ValueError("Start pins document has no pinnedList")

    pins = []
    for entry in data['pinnedList']:
        if not isinstance(entry, dict) or not _text_fields(entry, 'packagedAppId', 'desktopAppLink'):
            logger.debug(f"Skipping start pin entry: {truncate(repr(entry), 80)}")
            continue
        if entry.get('packagedAppId'):
            app_id = entry['packagedAppId']
            pins.append(PackagedAppPin(name=app_id, packaged_app_id=app_id))
        elif isinstance(entry.get('secondaryTile'), dict):
            tile = entry['secondaryTile']
            if not _text_fields(tile, 'displayName', 'tileId', 'packagedAppId', 'arguments'):
                logger.debug(f"Skipping secondary tile: {truncate(repr(tile), 80)}")
                continue
            name = tile.get('displayName', '')
            tile_id = tile.get('tileId', '')
            if tile_id == default_tile_id(name):
                tile_id = ''
            pins.append(SecondaryTile(
                name=name,
                packaged_app_id=tile.get('packagedAppId') or EDGE_AUMID,
                args=tile.get('arguments', ''),
                tile_id=tile_id,
            ))
        elif entry.get('desktopAppLink'):
            pins.append(pin_from_link_path(entry['desktopAppLink']))
        else:
            logger.debug(f"Skipping unknown start pin entry: {sorted(entry)}")
    return pins


# ---------------------------------------------------------------------------
# Taskbar layout (XML)
# ---------------------------------------------------------------------------

def build_taskbar_layout_xml(pins: List[Pin]) -> Optional[str]:
    """Taskbar layout document; site tiles are never placed on the taskbar"""
    if not pins:
        return None

    entries = []
    for pin in pins:
        if isinstance(pin, DesktopLink):
            entries.append(f'<taskbar:DesktopApp DesktopApplicationLinkPath="{escape_xml(link_path(pin))}"/>')
        elif isinstance(pin, PackagedAppPin) and pin.packaged_app_id:
            entries.append(f'<taskbar:DesktopApp DesktopApplicationID="{escape_xml(pin.packaged_app_id)}"/>')
    if not entries:
        return None

    pin_lines = '\n                '.join(entries)
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        '<LayoutModificationTemplate\n'
        f'    xmlns="{LAYOUT_NS}"\n'
        f'    xmlns:defaultlayout="{DEFAULT_LAYOUT_NS}"\n'
        f'    xmlns:start="{START_NS}"\n'
        f'    xmlns:taskbar="{TASKBAR_NS}"\n'
        '    Version="1">\n'
        '    <CustomTaskbarLayoutCollection>\n'
        '        <defaultlayout:TaskbarLayout>\n'
        '            <taskbar:TaskbarPinList>\n'
        f'                {pin_lines}\n'
        '            </taskbar:TaskbarPinList>\n'
        '        </defaultlayout:TaskbarLayout>\n'
        '    </CustomTaskbarLayoutCollection>\n'
        '</LayoutModificationTemplate>'
    )


def parse_taskbar_layout_xml(text: str) -> List[Pin]:
    """Pins from a taskbar layout document; raises ET.ParseError if malformed"""
    root = ET.fromstring(text.strip().encode('utf-8'))
    pins = []
    for element in root.iter(f'{{{TASKBAR_NS}}}DesktopApp'):
        app_id = element.get('DesktopApplicationID')
        path = element.get('DesktopApplicationLinkPath')
        if app_id:
            pins.append(PackagedAppPin(name=app_id, packaged_app_id=app_id))
        elif path:
            pins.append(pin_from_link_path(path))
        else:
            logger.debug("Skipping taskbar entry without an app id or link path")
    return pins
