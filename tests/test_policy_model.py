import pytest

from kiosk_overseer.errors import DuplicatePinError, IncompatibleAccountError, PolicyError
from kiosk_overseer.models import (
    AppKind,
    AutoLogonAccount,
    DesktopLink,
    EDGE_PATH,
    ExistingUserAccount,
    GlobalProfileAccount,
    Mode,
    PackagedAppPin,
    PinListType,
    PolicyModel,
    SecondaryTile,
    UserGroupAccount,
    is_valid_profile_id,
)


def _model_with_apps(*values):
    model = PolicyModel(mode=Mode.MULTI)
    for value in values:
        model.add_app(AppKind.PATH, value)
    return model


def test_blank_model_gets_generated_profile_id():
    model = PolicyModel.blank()
    assert is_valid_profile_id(model.profile_id)
    assert model.profile_id == model.profile_id.lower()
    assert PolicyModel.blank().profile_id != model.profile_id


def test_add_app_rejects_empty_and_duplicate_values():
    model = PolicyModel(mode=Mode.MULTI)
    assert model.add_app(AppKind.PATH, "C:\\a.exe")
    assert not model.add_app(AppKind.PATH, "C:\\a.exe")
    assert not model.add_app(AppKind.PATH, "   ")
    assert len(model.allowed_apps) == 1


def test_removing_auto_launch_app_clears_reference():
    model = _model_with_apps("C:\\a.exe", "C:\\b.exe", "C:\\c.exe")
    model.set_auto_launch(1)
    model.remove_app(1)
    assert model.auto_launch_index is None
    assert model.auto_launch_app is None


def test_removing_earlier_app_shifts_auto_launch_reference():
    model = _model_with_apps("C:\\a.exe", "C:\\b.exe", "C:\\c.exe")
    model.set_auto_launch(2)
    model.remove_app(0)
    assert model.auto_launch_index == 1
    assert model.auto_launch_app.value == "C:\\c.exe"


def test_remove_app_out_of_range():
    model = _model_with_apps("C:\\a.exe")
    with pytest.raises(IndexError):
        model.remove_app(3)


def test_move_app_keeps_auto_launch_on_same_app():
    model = _model_with_apps("C:\\a.exe", "C:\\b.exe", "C:\\c.exe")
    model.set_auto_launch(0)
    model.move_app(0, 2)
    assert [a.value for a in model.allowed_apps] == ["C:\\b.exe", "C:\\c.exe", "C:\\a.exe"]
    assert model.auto_launch_app.value == "C:\\a.exe"

    model.move_app(0, 2)
    assert model.auto_launch_app.value == "C:\\a.exe"
    assert model.auto_launch_index == 1


def test_helpers_and_flagged_apps_are_not_auto_launch_candidates():
    model = _model_with_apps(EDGE_PATH, "C:\\Program Files\\Edge\\msedge_proxy.exe")
    model.add_app(AppKind.AUMID, "MSEdge", skip_auto_launch=True)
    assert model.auto_launch_candidates() == [0]
    with pytest.raises(PolicyError):
        model.set_auto_launch(1)
    with pytest.raises(PolicyError):
        model.set_auto_launch(2)
    model.set_auto_launch(None)
    assert model.auto_launch_index is None


def test_duplicate_pin_name_is_rejected_ignoring_case():
    model = PolicyModel(mode=Mode.MULTI)
    model.add_pin(PinListType.START, DesktopLink(name="Notepad", target="C:\\notepad.exe"))
    with pytest.raises(DuplicatePinError):
        model.add_pin(PinListType.START, DesktopLink(name="NOTEPAD", target="C:\\other.exe"))
    assert len(model.start_pins) == 1

    # same name on the other list is fine
    model.add_pin(PinListType.TASKBAR, DesktopLink(name="Notepad", target="C:\\notepad.exe"))
    assert len(model.taskbar_pins) == 1


def test_pin_name_is_required():
    model = PolicyModel(mode=Mode.MULTI)
    with pytest.raises(PolicyError):
        model.add_pin(PinListType.START, DesktopLink(name="  "))
    assert model.start_pins == []


def test_site_tiles_cannot_go_on_the_taskbar():
    model = PolicyModel(mode=Mode.MULTI)
    with pytest.raises(PolicyError):
        model.add_pin(PinListType.TASKBAR, SecondaryTile(name="Site", args="https://example.com"))
    assert model.taskbar_pins == []


def test_update_pin_checks_names_against_other_pins_only():
    model = PolicyModel(mode=Mode.MULTI)
    model.add_pin(PinListType.START, DesktopLink(name="One", target="C:\\one.exe"))
    model.add_pin(PinListType.START, DesktopLink(name="Two", target="C:\\two.exe"))

    model.update_pin(PinListType.START, 0, DesktopLink(name="one", target="C:\\uno.exe"))
    assert model.start_pins[0].target == "C:\\uno.exe"

    with pytest.raises(DuplicatePinError):
        model.update_pin(PinListType.START, 0, DesktopLink(name="TWO", target="C:\\uno.exe"))
    assert model.start_pins[0].name == "one"


def test_unique_pin_name_adds_counter():
    model = PolicyModel(mode=Mode.MULTI)
    assert model.unique_pin_name("Notepad") == "Notepad"
    model.add_pin(PinListType.START, DesktopLink(name="Notepad", target="C:\\n.exe"))
    assert model.unique_pin_name("notepad") == "notepad (2)"
    model.add_pin(PinListType.START, DesktopLink(name="Notepad (2)", target="C:\\n.exe"))
    assert model.unique_pin_name("Notepad") == "Notepad (3)"
    assert model.unique_pin_name("") == "Shortcut"


def test_duplicate_pin_copies_with_fresh_name():
    model = PolicyModel(mode=Mode.MULTI)
    model.add_pin(PinListType.START, SecondaryTile(name="Site", args="https://example.com", tile_id="MSEdge._pin_custom"))
    first = model.duplicate_pin(0)
    second = model.duplicate_pin(0)
    assert model.start_pins[first].name == "Site Copy"
    assert model.start_pins[first].tile_id == ""
    assert model.start_pins[first].args == "https://example.com"
    assert model.start_pins[second].name == "Site Copy (2)"


def test_pin_app_uses_friendly_name_and_rejects_repeats():
    model = _model_with_apps(EDGE_PATH, "C:\\Tools\\viewer.exe")
    model.add_app(AppKind.AUMID, "Contoso.App_abc!App")

    index = model.pin_app(PinListType.START, 0)
    assert model.start_pins[index] == DesktopLink(name="Microsoft Edge", target=EDGE_PATH)
    index = model.pin_app(PinListType.START, 1)
    assert model.start_pins[index].name == "viewer.exe"
    index = model.pin_app(PinListType.TASKBAR, 2)
    assert model.taskbar_pins[index] == PackagedAppPin(name="Contoso.App_abc!App", packaged_app_id="Contoso.App_abc!App")

    with pytest.raises(DuplicatePinError, match="already pinned to Start"):
        model.pin_app(PinListType.START, 0)
    with pytest.raises(DuplicatePinError, match="already pinned to the taskbar"):
        model.pin_app(PinListType.TASKBAR, 2)


def test_mode_switch_coerces_account():
    model = PolicyModel(mode=Mode.MULTI, account=ExistingUserAccount(account_name="kiosk"))
    model.set_mode(Mode.RESTRICTED)
    assert isinstance(model.account, UserGroupAccount)

    model.account = GlobalProfileAccount()
    model.set_mode(Mode.MULTI)
    assert isinstance(model.account, AutoLogonAccount)


def test_set_account_rejects_incompatible_types():
    model = PolicyModel(mode=Mode.SINGLE)
    with pytest.raises(IncompatibleAccountError):
        model.set_account(UserGroupAccount(group_name="Kiosk Users"))
    assert isinstance(model.account, AutoLogonAccount)

    model.set_mode(Mode.RESTRICTED)
    with pytest.raises(IncompatibleAccountError):
        model.set_account(AutoLogonAccount(display_name="Kiosk"))
    model.set_account(GlobalProfileAccount())
    assert isinstance(model.account, GlobalProfileAccount)


def test_dict_round_trip(multi_model):
    restored = PolicyModel.from_dict(multi_model.to_dict())
    assert restored == multi_model


def test_from_dict_normalizes_account_and_auto_launch():
    data = PolicyModel(mode=Mode.MULTI).to_dict()
    data['mode'] = 'restricted'
    data['account'] = {'type': 'auto', 'display_name': 'Kiosk'}
    data['allowed_apps'] = [{'kind': 'path', 'value': 'C:\\a.exe'}]
    data['auto_launch_index'] = 4
    model = PolicyModel.from_dict(data)
    assert isinstance(model.account, UserGroupAccount)
    assert model.auto_launch_index is None


def test_from_dict_keeps_pin_names_unique():
    data = PolicyModel(mode=Mode.MULTI).to_dict()
    data['start_pins'] = [
        {'pin_type': 'desktopAppLink', 'name': 'A', 'target': 'C:\\a.exe'},
        {'pin_type': 'desktopAppLink', 'name': 'a', 'target': 'C:\\b.exe'},
    ]
    data['taskbar_pins'] = [
        {'pin_type': 'secondaryTile', 'name': 'Site', 'args': 'https://example.com'},
        {'pin_type': 'desktopAppLink', 'name': 'Notepad', 'target': 'C:\\notepad.exe'},
    ]
    model = PolicyModel.from_dict(data)
    assert [p.name for p in model.start_pins] == ['A', 'a (2)']
    assert model.taskbar_pins == [DesktopLink(name='Notepad', target='C:\\notepad.exe')]


def test_from_dict_auto_launch_follows_app_past_duplicates():
    data = PolicyModel(mode=Mode.MULTI).to_dict()
    data['allowed_apps'] = [
        {'kind': 'path', 'value': 'C:\\a.exe'},
        {'kind': 'path', 'value': 'C:\\a.exe'},
        {'kind': 'path', 'value': 'C:\\b.exe'},
    ]
    data['auto_launch_index'] = 2
    model = PolicyModel.from_dict(data)
    assert len(model.allowed_apps) == 2
    assert model.auto_launch_app.value == 'C:\\b.exe'


def test_from_dict_drops_auto_launch_on_helper_app():
    data = PolicyModel(mode=Mode.MULTI).to_dict()
    data['allowed_apps'] = [
        {'kind': 'path', 'value': 'C:\\Edge\\msedge_proxy.exe'},
        {'kind': 'path', 'value': 'C:\\viewer.exe', 'skip_auto_launch': True},
    ]
    data['auto_launch_index'] = 0
    assert PolicyModel.from_dict(data).auto_launch_index is None
    data['auto_launch_index'] = 1
    assert PolicyModel.from_dict(data).auto_launch_index is None


def test_remove_move_and_find_pins():
    model = PolicyModel(mode=Mode.MULTI)
    for name in ("One", "Two", "Three"):
        model.add_pin(PinListType.START, DesktopLink(name=name, target=f"C:\\{name}.exe"))

    model.move_pin(PinListType.START, 2, 0)
    assert [p.name for p in model.start_pins] == ["Three", "One", "Two"]
    model.move_pin(PinListType.START, 0, 10)
    assert [p.name for p in model.start_pins] == ["One", "Two", "Three"]

    assert model.find_pin(PinListType.START, lambda p: p.name == "Two") == 1
    assert model.find_pin(PinListType.TASKBAR, lambda p: p.name == "Two") is None

    removed = model.remove_pin(PinListType.START, 1)
    assert removed.name == "Two"
    assert [p.name for p in model.start_pins] == ["One", "Three"]


@pytest.mark.parametrize("index", [-1, 3])
def test_pin_positions_are_bounds_checked(index):
    model = PolicyModel(mode=Mode.MULTI)
    for name in ("One", "Two", "Three"):
        model.add_pin(PinListType.START, DesktopLink(name=name))
    with pytest.raises(IndexError):
        model.remove_pin(PinListType.START, index)
    with pytest.raises(IndexError):
        model.move_pin(PinListType.START, index, 0)
    assert len(model.start_pins) == 3
