"""Helper utility functions"""
from ..common_imports import *

XML_ESCAPES = {
    '<': '&lt;',
    '>': '&gt;',
    '&': '&amp;',
    "'": '&apos;',
    '"': '&quot;',
}
_XML_ESCAPE_RE = re.compile(r"""[<>&'"]""")

START_MENU_FRAGMENT = '\\microsoft\\windows\\start menu\\programs\\'
SHORTCUT_ROOTS = (
    '%appdata%',
    '%allusersprofile%',
    '%programdata%',
    'c:\\users\\',
    'c:\\programdata\\',
)
DEFAULT_SHORTCUT_DIR = '%ALLUSERSPROFILE%\\Microsoft\\Windows\\Start Menu\\Programs\\'

_HELPER_MARKERS = ('_proxy.exe', 'edgeupdate', 'update.exe', 'crashhandler')
_INVALID_FILENAME_RE = re.compile(r'[<>:"/\\|?*]')


def escape_xml(value: Optional[str]) -> str:
    """Escape the five XML metacharacters; None becomes an empty string"""
    if value is None:
        return ''
    return _XML_ESCAPE_RE.sub(lambda m: XML_ESCAPES[m.group(0)], str(value))


def truncate(text: Optional[str], length: int) -> str:
    if not text:
        return ''
    return text[:length - 3] + '...' if len(text) > length else text


def is_edge_app(value: Optional[str]) -> bool:
    """True for Microsoft Edge executables and app ids"""
    if not value:
        return False
    lowered = value.lower()
    return ('msedge' in lowered
            or 'microsoftedge' in lowered
            or 'edge\\application' in lowered)


def is_helper_executable(value: Optional[str]) -> bool:
    """Updaters, proxies and crash handlers are never launched directly"""
    if not value:
        return False
    lowered = value.lower()
    return any(marker in lowered for marker in _HELPER_MARKERS)


def executable_name(path: str) -> str:
    """Last path segment of a Windows or POSIX style path"""
    segments = path.replace('/', '\\').split('\\')
    return segments[-1] or path


def default_shortcut_path(name: str) -> str:
    return f"{DEFAULT_SHORTCUT_DIR}{name}.lnk"


def is_start_menu_shortcut_path(path: Optional[str]) -> bool:
    """Check that a shortcut lives under a managed Start Menu Programs folder"""
    if not path:
        return False
    normalized = path.replace('/', '\\').lower()
    if START_MENU_FRAGMENT not in normalized:
        return False
    return any(normalized.startswith(root) for root in SHORTCUT_ROOTS)


def sanitize_file_name(name: str) -> str:
    """Spaces become hyphens, characters Windows rejects are dropped"""
    return _INVALID_FILENAME_RE.sub('', re.sub(r'\s+', '-', name.strip()))


def new_guid() -> str:
    """Random GUID in the bracketed lowercase form"""
    return '{' + str(uuid.uuid4()) + '}'
