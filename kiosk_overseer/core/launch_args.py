"""Kiosk browser launch arguments

Builds the command line a kiosk browser is started with and recovers the
launch settings from such a command line again.  Local files are turned into
``file:///`` URLs; ``file_url_to_path`` is the exact inverse for Windows paths.
"""
from ..common_imports import *
from ..models.apps import KioskType, LaunchSource, SourceType
from ..utils.helpers import is_edge_app

logger = logging.getLogger(__name__)

FALLBACK_FILE_PATH = "C:/Kiosk/index.html"
FILE_URL_PREFIX = "file:///"

# encodeURIComponent leaves these unescaped besides letters, digits and -_.~
_URI_COMPONENT_SAFE = "!'()*"
_DRIVE_RE = re.compile(r'^[A-Za-z]:$')

_KIOSK_ARGS_RE = re.compile(
    r'^--kiosk\s+(?P<url>.+?)'
    r'(?:\s+--edge-kiosk-type=(?P<kiosk_type>[\w-]+))?'
    r'(?:\s+--no-first-run)?'
    r'(?:\s+--kiosk-idle-timeout-minutes=(?P<idle>\d+))?'
    r'\s*$'
)


class Browser(str, Enum):
    EDGE = "edge"
    CHROME = "chrome"
    BRAVE = "brave"
    ISLAND = "island"
    FIREFOX = "firefox"


REDUCED_TIER = (Browser.CHROME, Browser.BRAVE, Browser.ISLAND)


@dataclass
class KioskArgs:
    """Launch settings recovered from a kiosk command line"""
    source: LaunchSource
    kiosk_type: KioskType = KioskType.FULLSCREEN
    idle_timeout: int = 0

    @property
    def url(self) -> str:
        if self.source.source_type == SourceType.FILE:
            return build_file_url(self.source.file_path)
        return self.source.url


def detect_browser(path: Optional[str]) -> Optional[Browser]:
    """Identify a kiosk-capable browser from its executable path"""
    if not path:
        return None
    if is_edge_app(path):
        return Browser.EDGE
    lowered = path.lower()
    if 'chrome.exe' in lowered or '\\google\\chrome\\' in lowered:
        return Browser.CHROME
    if 'brave.exe' in lowered:
        return Browser.BRAVE
    if 'island.exe' in lowered:
        return Browser.ISLAND
    if 'firefox.exe' in lowered:
        return Browser.FIREFOX
    return None


def is_browser_with_kiosk_support(path: Optional[str]) -> bool:
    return detect_browser(path) is not None


def build_file_url(file_path: Optional[str]) -> str:
    """Turn a local path into a file:/// URL, leaving a drive letter as is"""
    if not file_path:
        return ''
    normalized = file_path.strip()
    if not normalized:
        return ''
    if normalized.lower().startswith(FILE_URL_PREFIX):
        return normalized
    segments = normalized.replace('\\', '/').split('/')
    encoded = []
    for index, segment in enumerate(segments):
        if index == 0 and _DRIVE_RE.match(segment):
            encoded.append(segment)
        else:
            encoded.append(quote(segment, safe=_URI_COMPONENT_SAFE))
    return FILE_URL_PREFIX + '/'.join(encoded)


def file_url_to_path(url: str) -> str:
    """Inverse of build_file_url for Windows style paths"""
    if url.lower().startswith(FILE_URL_PREFIX):
        rest = url[len(FILE_URL_PREFIX):]
    elif url.lower().startswith('file://'):
        rest = url[len('file://'):]
    else:
        rest = url
    return '\\'.join(unquote(segment) for segment in rest.split('/'))


def resolve_launch_url(source: LaunchSource, fallback_url: str = '') -> str:
    """URL the browser opens; a missing local file falls back to C:/Kiosk/index.html"""
    if source.source_type == SourceType.FILE:
        return build_file_url(source.file_path) or build_file_url(FALLBACK_FILE_PATH)
    return source.url or fallback_url or ''


def build_edge_kiosk_args(url: str, kiosk_type: Union[KioskType, str], idle_timeout: int = 0) -> str:
    kiosk_type = KioskType(kiosk_type).value
    args = f"--kiosk {url} --edge-kiosk-type={kiosk_type} --no-first-run"
    if idle_timeout and idle_timeout > 0:
        args += f" --kiosk-idle-timeout-minutes={idle_timeout}"
    return args


def build_browser_kiosk_args(browser: Optional[Browser], url: str,
                             kiosk_type: Union[KioskType, str] = KioskType.FULLSCREEN,
                             idle_timeout: int = 0) -> str:
    """Kiosk arguments for a browser; empty when the browser has no kiosk mode"""
    if not url or browser is None:
        return ''
    if browser == Browser.EDGE:
        return build_edge_kiosk_args(url, kiosk_type or KioskType.FULLSCREEN, idle_timeout)
    if browser in REDUCED_TIER:
        return f"--kiosk {url} --no-first-run"
    if browser == Browser.FIREFOX:
        return f"--kiosk {url}"
    return ''


def parse_kiosk_args(args: Optional[str]) -> Optional[KioskArgs]:
    """Recover URL or file, kiosk type and idle timeout; None if not kiosk arguments"""
    if not args:
        return None
    match = _KIOSK_ARGS_RE.match(args.strip())
    if not match:
        return None

    kiosk_type = match.group('kiosk_type') or KioskType.FULLSCREEN.value
    try:
        kiosk_type = KioskType(kiosk_type)
    except ValueError:
        logger.debug(f"Unknown kiosk type in arguments: {kiosk_type}")
        return None

    url = match.group('url')
    if url.lower().startswith('file://'):
        source = LaunchSource(source_type=SourceType.FILE, file_path=file_url_to_path(url))
    else:
        source = LaunchSource(source_type=SourceType.URL, url=url)

    idle = match.group('idle')
    return KioskArgs(source=source, kiosk_type=kiosk_type, idle_timeout=int(idle) if idle else 0)
