"""Shared fixtures for the Kiosk Overseer test suite."""

import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from kiosk_overseer.models import (  # noqa: E402
    AppKind,
    AutoLogonAccount,
    BrowserKioskApp,
    DesktopLink,
    EDGE_PATH,
    LaunchSource,
    Mode,
    PackagedAppPin,
    PinListType,
    PolicyModel,
    SecondaryTile,
)

PROFILE_ID = "{9f3c2a1e-4b5d-4c6e-8f70-112233445566}"


@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path, monkeypatch):
    data_dir = tmp_path / "data"
    monkeypatch.setenv("KIOSK_OVERSEER_DATA_DIR", str(data_dir))
    return data_dir


@pytest.fixture
def single_model():
    """Valid single-app Edge kiosk"""
    return PolicyModel(
        profile_id=PROFILE_ID,
        config_name="Lobby Display",
        mode=Mode.SINGLE,
        account=AutoLogonAccount(display_name="Kiosk"),
        single_app=BrowserKioskApp(source=LaunchSource(url="https://example.com"), idle_timeout=5),
    )


@pytest.fixture
def multi_model():
    """Valid multi-app kiosk with pins on Start and the taskbar"""
    model = PolicyModel(
        profile_id=PROFILE_ID,
        config_name="Front Desk",
        mode=Mode.MULTI,
        account=AutoLogonAccount(display_name="Front Desk"),
    )
    model.add_app(AppKind.PATH, EDGE_PATH)
    model.add_app(AppKind.PATH, "C:\\Windows\\System32\\notepad.exe")
    model.add_app(AppKind.AUMID, "Microsoft.WindowsCalculator_8wekyb3d8bbwe!App")
    model.set_auto_launch(0)
    model.auto_launch.browser = LaunchSource(url="https://intranet.example.com")

    model.add_pin(PinListType.START, PackagedAppPin(
        name="Calculator", packaged_app_id="Microsoft.WindowsCalculator_8wekyb3d8bbwe!App"))
    model.add_pin(PinListType.START, DesktopLink(name="Notepad", target="C:\\Windows\\System32\\notepad.exe"))
    model.add_pin(PinListType.START, SecondaryTile(name="Intranet", args="https://intranet.example.com"))
    model.add_pin(PinListType.TASKBAR, DesktopLink(name="Notepad", target="C:\\Windows\\System32\\notepad.exe"))
    return model
