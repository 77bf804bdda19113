"""Deployment artifacts: the XML plus the shortcuts it expects to exist"""
from ..common_imports import *
from ..models import AppKind, DesktopLink, Mode, PolicyModel
from ..utils.helpers import executable_name, is_edge_app
from .launch_args import is_browser_with_kiosk_support
from .validator import ValidationError, validate
from .xml_encoder import auto_launch_arguments, encode

logger = logging.getLogger(__name__)


@dataclass
class Shortcut:
    """A .lnk the deployment script has to create"""
    name: str
    target_path: str
    arguments: str = ""
    working_directory: str = ""
    icon_location: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            'Name': self.name,
            'TargetPath': self.target_path,
            'Arguments': self.arguments,
            'WorkingDirectory': self.working_directory,
            'IconLocation': self.icon_location,
        }


@dataclass
class AutoLaunchProcess:
    exe_path: str
    process_name: str
    launch_args: str
    is_browser: bool


@dataclass
class ExportArtifact:
    xml: str
    shortcuts: List[Shortcut] = field(default_factory=list)
    edge_warnings: List[str] = field(default_factory=list)
    errors: List[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def shortcuts_json(self) -> str:
        return json.dumps([s.to_dict() for s in self.shortcuts], indent=4)


def build_shortcut_list(model: PolicyModel) -> List[Shortcut]:
    """Desktop pins that need a generated shortcut; single-app kiosks need none"""
    if model.mode == Mode.SINGLE:
        return []
    return [
        Shortcut(
            name=pin.name or '',
            target_path=pin.target or '',
            arguments=pin.args or '',
            working_directory=pin.working_dir or '',
            icon_location=pin.icon_path or '',
        )
        for pin in model.start_pins + model.taskbar_pins
        if isinstance(pin, DesktopLink) and not pin.system_shortcut
    ]


def is_edge_backed_link(pin) -> bool:
    if not isinstance(pin, DesktopLink):
        return False
    if pin.target and is_edge_app(pin.target):
        return True
    shortcut = (pin.system_shortcut or '').lower()
    return 'microsoft edge.lnk' in shortcut or '\\microsoft\\edge\\application\\' in shortcut


def edge_shortcut_warning_pins(model: PolicyModel) -> List[str]:
    """Edge shortcuts whose custom name or icon Assigned Access may not show"""
    names = []
    for pin in model.start_pins + model.taskbar_pins:
        if not is_edge_backed_link(pin):
            continue
        name = (pin.name or '').strip().lower()
        custom_name = bool(name) and name != 'microsoft edge'
        custom_icon = bool((pin.icon_path or '').strip())
        if custom_name or custom_icon:
            names.append(pin.name or '(unnamed)')
    return names


def auto_launch_process_info(model: PolicyModel) -> Optional[AutoLaunchProcess]:
    """Process details for watching the auto-launch desktop app"""
    app = model.auto_launch_app
    if app is None or app.kind != AppKind.PATH:
        return None

    exe_name = executable_name(app.value)
    return AutoLaunchProcess(
        exe_path=app.value,
        process_name=re.sub(r'\.exe$', '', exe_name, flags=re.IGNORECASE),
        launch_args=auto_launch_arguments(model),
        is_browser=is_browser_with_kiosk_support(app.value),
    )


def build_export_artifact(model: PolicyModel) -> ExportArtifact:
    artifact = ExportArtifact(
        xml=encode(model),
        shortcuts=build_shortcut_list(model),
        edge_warnings=edge_shortcut_warning_pins(model),
        errors=validate(model),
    )
    if artifact.edge_warnings:
        logger.warning(f"⚠️ Edge shortcuts may not show a custom name or icon: {', '.join(artifact.edge_warnings)}")
    return artifact
