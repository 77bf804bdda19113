"""Policy validation rules"""
from ..common_imports import *
from ..models import (
    AutoLogonAccount,
    BrowserKioskApp,
    DesktopKioskApp,
    DesktopLink,
    ExistingUserAccount,
    GlobalProfileAccount,
    Mode,
    PackagedKioskApp,
    PolicyModel,
    SourceType,
    UserGroupAccount,
    is_valid_profile_id,
)
from ..utils.helpers import is_start_menu_shortcut_path


class RuleCategory(str, Enum):
    IDENTITY = "identity"
    ACCOUNT = "account"
    SINGLE_APP = "single-app"
    MULTI_APP = "multi-app"


@dataclass
class ValidationError:
    category: RuleCategory
    message: str

    def __str__(self):
        return self.message


def _identity_rules(model: PolicyModel) -> List[str]:
    errors = []
    if not model.config_name.strip():
        errors.append('Configuration Name is required')
    if not model.profile_id:
        errors.append('Profile GUID is required')
    elif not is_valid_profile_id(model.profile_id):
        errors.append('Profile GUID format is invalid')
    return errors


def _account_rules(model: PolicyModel) -> List[str]:
    account = model.account
    if isinstance(account, AutoLogonAccount):
        return [] if account.display_name else ['Display Name is required for auto-logon account']
    if isinstance(account, ExistingUserAccount):
        return [] if account.account_name else ['Account Name is required']
    if isinstance(account, UserGroupAccount):
        return [] if account.group_name else ['Group Name is required']
    if isinstance(account, GlobalProfileAccount):
        return []
    raise TypeError(f"Unknown account variant: {type(account).__name__}")


def _single_app_rules(model: PolicyModel) -> List[str]:
    if model.mode != Mode.SINGLE:
        return []
    app = model.single_app
    if isinstance(app, BrowserKioskApp):
        if app.source.source_type == SourceType.URL:
            return [] if app.source.url else ['Edge URL is required']
        return [] if app.source.file_path else ['Edge file path is required']
    if isinstance(app, PackagedKioskApp):
        return [] if app.aumid else ['UWP App AUMID is required']
    if isinstance(app, DesktopKioskApp):
        return [] if app.path else ['Win32 Application Path is required']
    raise TypeError(f"Unknown single app variant: {type(app).__name__}")


def _multi_app_rules(model: PolicyModel) -> List[str]:
    if model.mode not in (Mode.MULTI, Mode.RESTRICTED):
        return []

    errors = []
    if not model.allowed_apps:
        errors.append('At least one allowed app is required')

    pins = model.start_pins + model.taskbar_pins
    missing = [p for p in pins if isinstance(p, DesktopLink) and not p.target and not p.system_shortcut]
    if missing:
        names = ', '.join(p.name for p in missing)
        errors.append(f'{len(missing)} shortcut(s) missing target path: {names}')

    outside = [p for p in pins if getattr(p, 'system_shortcut', '')
               and not is_start_menu_shortcut_path(p.system_shortcut)]
    if outside:
        names = ', '.join(p.name for p in outside)
        errors.append('Start menu pin shortcuts must live under the Start Menu Programs folder '
                      f'(%APPDATA% or %ALLUSERSPROFILE%): {names}')
    return errors


RULES: Tuple[Tuple[RuleCategory, Callable[[PolicyModel], List[str]]], ...] = (
    (RuleCategory.IDENTITY, _identity_rules),
    (RuleCategory.ACCOUNT, _account_rules),
    (RuleCategory.SINGLE_APP, _single_app_rules),
    (RuleCategory.MULTI_APP, _multi_app_rules),
)


def validate(model: PolicyModel) -> List[ValidationError]:
    """Every rule violation, grouped identity, account, single-app, multi-app"""
    errors = []
    for category, rule in RULES:
        errors.extend(ValidationError(category, message) for message in rule(model))
    return errors


def is_exportable(model: PolicyModel) -> bool:
    return not validate(model)
