"""File management utilities"""
from ..common_imports import *
from .helpers import sanitize_file_name

logger = logging.getLogger(__name__)

DATA_DIR_ENV = "KIOSK_OVERSEER_DATA_DIR"
SNAPSHOT_EXTENSION = "kioskoverseer.json"


def get_app_data_dir() -> Path:
    """Get application data directory, project local unless overridden"""
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        app_dir = Path(override)
    else:
        # kiosk_overseer/utils/file_manager.py -> project root
        project_root = Path(__file__).resolve().parent.parent.parent
        app_dir = project_root / "data"
    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


def config_file_name(config_name: Optional[str], extension: str) -> str:
    """AssignedAccess-<name>.<ext>, or AssignedAccessConfig.<ext> without a name"""
    name = (config_name or '').strip()
    if name:
        return f"AssignedAccess-{sanitize_file_name(name)}.{extension}"
    return f"AssignedAccessConfig.{extension}"


class ConfigFileManager:
    """Saves and loads session snapshots and exported XML files"""

    def __init__(self, configs_dir: Optional[Union[str, Path]] = None):
        self.configs_dir = Path(configs_dir) if configs_dir else get_app_data_dir() / "configs"
        self.configs_dir.mkdir(parents=True, exist_ok=True)

    def _resolve(self, file_name: Union[str, Path]) -> Path:
        path = Path(file_name)
        if path.is_absolute() or path.parent != Path('.'):
            return path
        return self.configs_dir / path

    def list_snapshots(self) -> List[str]:
        return sorted(p.name for p in self.configs_dir.glob(f"*.{SNAPSHOT_EXTENSION}"))

    def list_xml(self) -> List[str]:
        return sorted(p.name for p in self.configs_dir.glob("*.xml"))

    def save_snapshot(self, data: Dict[str, Any], config_name: Optional[str] = None,
                      file_name: Optional[str] = None) -> Optional[Path]:
        path = self._resolve(file_name or config_file_name(config_name, SNAPSHOT_EXTENSION))
        if not safe_json_save(data, str(path)):
            return None
        logger.info(f"💾 Saved configuration: {path}")
        return path

    def load_snapshot(self, file_name: Union[str, Path]) -> Optional[Dict[str, Any]]:
        path = self._resolve(file_name)
        data = safe_json_load(str(path))
        if data is None:
            logger.error(f"❌ {path} is missing or is not valid JSON")
            return None
        return data

    def save_xml(self, xml: str, config_name: Optional[str] = None,
                 file_name: Optional[str] = None) -> Optional[Path]:
        path = self._resolve(file_name or config_file_name(config_name, 'xml'))
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(xml, encoding='utf-8')
        except OSError as e:
            logger.error(f"❌ Could not write {path}: {e}")
            return None
        logger.info(f"💾 Exported XML: {path}")
        return path

    def load_xml(self, file_name: Union[str, Path]) -> Optional[str]:
        path = self._resolve(file_name)
        try:
            return path.read_text(encoding='utf-8-sig')
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"❌ Could not read {path}: {e}")
            return None

    def delete(self, file_name: Union[str, Path]) -> bool:
        path = self._resolve(file_name)
        if not path.exists():
            return False
        try:
            path.unlink()
        except OSError as e:
            logger.error(f"❌ Could not delete {path}: {e}")
            return False
        logger.info(f"🗑️ Deleted {path}")
        return True
