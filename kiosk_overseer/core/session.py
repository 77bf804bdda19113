"""Editing session: owns the policy being edited"""
from ..common_imports import *
from ..errors import PolicyDecodeError, SnapshotError
from ..models import PolicyModel
from ..utils.file_manager import SNAPSHOT_EXTENSION, ConfigFileManager, config_file_name
from .export import ExportArtifact, build_export_artifact
from .presets import PresetCatalog, new_from_preset
from .snapshot import FormValues, build_snapshot, load_snapshot, snapshot_model
from .validator import ValidationError, validate
from .xml_decoder import decode
from .xml_encoder import encode

logger = logging.getLogger(__name__)


class PolicySession:
    """Holds one policy and swaps it out only when a load fully succeeds"""

    def __init__(self, model: Optional[PolicyModel] = None,
                 catalog: Optional[PresetCatalog] = None,
                 files: Optional[ConfigFileManager] = None):
        self.catalog = catalog
        self.files = files
        self.model = model if model is not None else new_from_preset('blank', catalog)
        self.form_values = FormValues()

    def replace_model(self, model: PolicyModel):
        self.model = model

    def reset(self, preset: str = 'blank') -> PolicyModel:
        self.replace_model(new_from_preset(preset, self.catalog))
        self.form_values = FormValues(preset=preset)
        logger.info(f"🆕 Started a {preset} configuration")
        return self.model

    def validate(self) -> List[ValidationError]:
        return validate(self.model)

    def preview_xml(self) -> str:
        """Current document, whether or not it validates"""
        return encode(self.model)

    def export_xml(self, force: bool = False) -> Tuple[Optional[str], List[ValidationError]]:
        """Document for deployment; withheld while invalid unless forced"""
        errors = self.validate()
        if errors and not force:
            logger.warning(f"⚠️ Export blocked by {len(errors)} validation error(s)")
            return None, errors
        return encode(self.model), errors

    def export_artifact(self, force: bool = False) -> Tuple[Optional[ExportArtifact], List[ValidationError]]:
        artifact = build_export_artifact(self.model)
        if artifact.errors and not force:
            logger.warning(f"⚠️ Export blocked by {len(artifact.errors)} validation error(s)")
            return None, artifact.errors
        return artifact, artifact.errors

    def import_xml(self, text: Union[str, bytes]) -> Tuple[bool, str]:
        try:
            model = decode(text)
        except PolicyDecodeError as e:
            logger.error(f"❌ Import failed: {e}")
            return False, str(e)
        self.replace_model(model)
        self.form_values = FormValues()
        logger.info(f"📥 Imported {model.mode.value} configuration")
        return True, "Configuration imported."

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def build_snapshot(self) -> Dict[str, Any]:
        return build_snapshot(self.model, self.form_values).to_dict()

    def apply_snapshot(self, data: Any) -> Tuple[bool, str]:
        try:
            snapshot = load_snapshot(data)
            model = snapshot_model(snapshot)
        except SnapshotError as e:
            logger.error(f"❌ Could not load configuration: {e}")
            return False, str(e)
        self.replace_model(model)
        self.form_values = snapshot.payload.form_values
        logger.info(f"📂 Loaded configuration {snapshot.name}")
        return True, "Configuration loaded."

    def config_file_name(self, extension: str) -> str:
        return config_file_name(self.model.config_name, extension)

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def _file_manager(self) -> ConfigFileManager:
        if self.files is None:
            self.files = ConfigFileManager()
        return self.files

    def save(self) -> Optional[Path]:
        return self._file_manager().save_snapshot(
            self.build_snapshot(), file_name=self.config_file_name(SNAPSHOT_EXTENSION))

    def load(self, file_name: Union[str, Path]) -> Tuple[bool, str]:
        data = self._file_manager().load_snapshot(file_name)
        if data is None:
            return False, "This file is not valid JSON."
        return self.apply_snapshot(data)

    def save_xml(self, force: bool = False) -> Optional[Path]:
        xml, _ = self.export_xml(force=force)
        if xml is None:
            return None
        path = self._file_manager().save_xml(xml, file_name=self.config_file_name('xml'))
        if path is not None:
            self.form_values.last_export_name = path.name
        return path

    def load_xml(self, file_name: Union[str, Path]) -> Tuple[bool, str]:
        text = self._file_manager().load_xml(file_name)
        if text is None:
            return False, f"Could not read {file_name}."
        return self.import_xml(text)
