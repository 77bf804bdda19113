"""Saved editing sessions

A snapshot is the JSON file a user saves to pick up a configuration later:
``{schemaVersion, name, savedAt, payload: {model, formValues}}``.  The
envelope is checked with pydantic; the policy itself is rebuilt through
``PolicyModel.from_dict`` so the same normalization applies as everywhere else.
"""
from ..common_imports import *
from ..errors import SnapshotError
from ..models import PolicyModel

CONFIG_SCHEMA_VERSION = 1
SNAPSHOT_SUFFIX = ".kioskoverseer.json"


class FormValues(BaseModel):
    """Editor values that are not part of the policy itself"""
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    preset: Optional[str] = None
    notes: Optional[str] = None
    last_export_name: Optional[str] = Field(default=None, alias='lastExportName')
    include_shortcuts: Optional[bool] = Field(default=None, alias='includeShortcuts')


class SnapshotPayload(BaseModel):
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    policy: Dict[str, Any] = Field(alias='model')
    form_values: FormValues = Field(default_factory=FormValues, alias='formValues')


class SessionSnapshot(BaseModel):
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    schema_version: int = Field(default=CONFIG_SCHEMA_VERSION, alias='schemaVersion')
    name: str = 'Unnamed'
    saved_at: str = Field(default_factory=get_timestamp, alias='savedAt')
    payload: SnapshotPayload

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode='json')


def build_snapshot(model: PolicyModel, form_values: Optional[FormValues] = None) -> SessionSnapshot:
    return SessionSnapshot(
        schema_version=CONFIG_SCHEMA_VERSION,
        name=model.config_name.strip() or 'Unnamed',
        payload=SnapshotPayload(policy=model.to_dict(), form_values=form_values or FormValues()),
    )


def load_snapshot(data: Any) -> SessionSnapshot:
    """Check a parsed snapshot file; raises SnapshotError"""
    if not isinstance(data, dict):
        raise SnapshotError("Invalid configuration file.")
    version = data.get('schemaVersion')
    if version is not None and (isinstance(version, bool) or version != CONFIG_SCHEMA_VERSION):
        raise SnapshotError(f"Unsupported schema version: {version}")
    if not isinstance(data.get('payload'), dict):
        raise SnapshotError("Configuration payload missing.")
    try:
        return SessionSnapshot.model_validate(data)
    except PydanticValidationError as e:
        raise SnapshotError(f"Configuration payload is invalid: {e.error_count()} error(s)") from e


def snapshot_model(snapshot: SessionSnapshot) -> PolicyModel:
    """The policy stored in a snapshot; raises SnapshotError"""
    try:
        return PolicyModel.from_dict(snapshot.payload.policy)
    except (KeyError, ValueError, TypeError) as e:
        raise SnapshotError(f"Saved policy could not be restored: {e}") from e
