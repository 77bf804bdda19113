import xml.etree.ElementTree as ET

from kiosk_overseer.core.schema import NS_CONFIG, NS_RS5, NS_V3, NS_V4, NS_V5
from kiosk_overseer.core.xml_encoder import cdata, encode
from kiosk_overseer.models import (
    AppKind,
    AutoLogonAccount,
    BreakoutSequence,
    DesktopKioskApp,
    ExistingUserAccount,
    FileExplorerAccess,
    GlobalProfileAccount,
    GroupType,
    Mode,
    PackagedKioskApp,
    PinListType,
    PLACEHOLDER_PROFILE_ID,
    PolicyModel,
    SecondaryTile,
    UserGroupAccount,
)
from kiosk_overseer.utils.helpers import escape_xml


def parse(xml):
    return ET.fromstring(xml.encode('utf-8'))


def test_document_root_and_namespaces(single_model):
    xml = encode(single_model)
    assert xml.startswith('<?xml version="1.0" encoding="utf-8"?>\n<AssignedAccessConfiguration')
    for namespace in (NS_CONFIG, NS_RS5, NS_V3, NS_V4, NS_V5):
        assert namespace in xml
    assert parse(xml).tag == f'{{{NS_CONFIG}}}AssignedAccessConfiguration'


def test_single_edge_kiosk(single_model):
    xml = encode(single_model)
    assert ('v4:ClassicAppArguments="--kiosk https://example.com --edge-kiosk-type=fullscreen '
            '--no-first-run --kiosk-idle-timeout-minutes=5"') in xml
    assert 'msedge.exe' in xml
    assert '<AllAppsList>' not in xml
    assert '<AutoLogonAccount rs5:DisplayName="Kiosk"/>' in xml
    assert f'<DefaultProfile Id="{single_model.profile_id}"/>' in xml


def test_single_packaged_and_desktop_apps(single_model):
    single_model.single_app = PackagedKioskApp(aumid="Contoso.Signage_abc!App")
    assert '<KioskModeApp AppUserModelId="Contoso.Signage_abc!App"/>' in encode(single_model)

    single_model.single_app = DesktopKioskApp(path="C:\\Apps\\viewer.exe")
    assert '<KioskModeApp v4:ClassicAppPath="C:\\Apps\\viewer.exe"/>' in encode(single_model)

    single_model.single_app = DesktopKioskApp(path="C:\\Apps\\viewer.exe", arguments='/show "deck"')
    assert 'v4:ClassicAppArguments="/show &quot;deck&quot;"' in encode(single_model)


def test_breakout_sequence(single_model):
    single_model.breakout = BreakoutSequence(key="B", ctrl=True, alt=False, shift=True)
    assert '<v4:BreakoutSequence Key="Ctrl+Shift+B"/>' in encode(single_model)


def test_multi_app_auto_launch_literal_arguments():
    model = PolicyModel(profile_id="{9f3c2a1e-4b5d-4c6e-8f70-112233445566}", mode=Mode.MULTI)
    model.add_app(AppKind.AUMID, "Microsoft.WindowsCalculator_8wekyb3d8bbwe!App")
    model.add_app(AppKind.PATH, "C:\\Tools\\app.exe")
    model.set_auto_launch(1)
    model.auto_launch.arguments = "--foo"

    xml = encode(model)
    assert '<App AppUserModelId="Microsoft.WindowsCalculator_8wekyb3d8bbwe!App"/>' in xml
    assert ('<App DesktopAppPath="C:\\Tools\\app.exe" rs5:AutoLaunch="true" '
            'rs5:AutoLaunchArguments="--foo"/>') in xml


def test_auto_launch_without_arguments_has_no_arguments_attribute():
    model = PolicyModel(mode=Mode.MULTI)
    model.add_app(AppKind.PATH, "C:\\Tools\\app.exe")
    model.set_auto_launch(0)
    xml = encode(model)
    assert 'rs5:AutoLaunch="true"/>' in xml
    assert 'AutoLaunchArguments' not in xml


def test_multi_app_edge_auto_launch(multi_model):
    xml = encode(multi_model)
    assert ('rs5:AutoLaunchArguments="--kiosk https://intranet.example.com '
            '--edge-kiosk-type=fullscreen --no-first-run"') in xml


def test_multi_app_body(multi_model):
    multi_model.restrictions.file_explorer = FileExplorerAccess.DOWNLOADS_AND_REMOVABLE
    multi_model.restrictions.show_taskbar = False
    root = parse(encode(multi_model))
    profile = root.find(f'{{{NS_CONFIG}}}Profiles/{{{NS_CONFIG}}}Profile')

    apps = profile.findall(f'{{{NS_CONFIG}}}AllAppsList/{{{NS_CONFIG}}}AllowedApps/{{{NS_CONFIG}}}App')
    assert len(apps) == 3

    restrictions = profile.find(f'{{{NS_RS5}}}FileExplorerNamespaceRestrictions')
    assert restrictions.find(f'{{{NS_RS5}}}AllowedNamespace').get('Name') == 'Downloads'
    assert restrictions.find(f'{{{NS_V3}}}AllowRemovableDrives') is not None

    assert profile.find(f'{{{NS_CONFIG}}}Taskbar').get('ShowTaskbar') == 'false'
    assert '"pinnedList"' in profile.find(f'{{{NS_V5}}}StartPins').text
    assert 'LayoutModificationTemplate' in profile.find(f'{{{NS_V5}}}TaskbarLayout').text


def test_file_explorer_mapping(multi_model):
    multi_model.restrictions.file_explorer = FileExplorerAccess.NONE
    assert 'FileExplorerNamespaceRestrictions' not in encode(multi_model)
    multi_model.restrictions.file_explorer = FileExplorerAccess.UNRESTRICTED
    assert '<v3:NoRestriction/>' in encode(multi_model)
    multi_model.restrictions.file_explorer = FileExplorerAccess.REMOVABLE
    xml = encode(multi_model)
    assert '<v3:AllowRemovableDrives/>' in xml
    assert 'AllowedNamespace' not in xml


def test_empty_pin_lists_are_left_out(multi_model):
    multi_model.start_pins = []
    multi_model.taskbar_pins = [SecondaryTile(name="Site")]
    xml = encode(multi_model)
    assert 'StartPins' not in xml
    assert 'TaskbarLayout' not in xml
    assert '<Taskbar ShowTaskbar="true"/>' in xml


def test_empty_profile_id_uses_placeholder(single_model):
    single_model.profile_id = ""
    xml = encode(single_model)
    assert f'<Profile Id="{PLACEHOLDER_PROFILE_ID}">' in xml
    assert f'<DefaultProfile Id="{PLACEHOLDER_PROFILE_ID}"/>' in xml


def test_account_bindings(multi_model):
    multi_model.account = ExistingUserAccount(account_name="CONTOSO\\kiosk")
    assert '<Account>CONTOSO\\kiosk</Account>' in encode(multi_model)

    multi_model.mode = Mode.RESTRICTED
    multi_model.account = UserGroupAccount(group_name="Kiosk Users", group_type=GroupType.AZURE_ACTIVE_DIRECTORY)
    assert '<UserGroup Type="AzureActiveDirectoryGroup" Name="Kiosk Users"/>' in encode(multi_model)

    multi_model.account = GlobalProfileAccount()
    xml = encode(multi_model)
    assert f'<v3:GlobalProfile Id="{multi_model.profile_id}"/>' in xml
    assert '<Config>' not in xml
    assert 'DefaultProfile' not in xml


def test_auto_logon_display_name_defaults_to_kiosk(single_model):
    single_model.account = AutoLogonAccount()
    assert 'rs5:DisplayName="Kiosk"' in encode(single_model)


def test_free_text_is_escaped(single_model):
    single_model.account = AutoLogonAccount(display_name='A&B <"front"> \'desk\'')
    xml = encode(single_model)
    assert 'rs5:DisplayName="A&amp;B &lt;&quot;front&quot;&gt; &apos;desk&apos;"' in xml
    config = parse(xml).find(f'{{{NS_CONFIG}}}Configs/{{{NS_CONFIG}}}Config/{{{NS_CONFIG}}}AutoLogonAccount')
    assert config.get(f'{{{NS_RS5}}}DisplayName') == 'A&B <"front"> \'desk\''


def test_pin_text_with_cdata_terminator_survives(multi_model):
    multi_model.add_pin(PinListType.START, SecondaryTile(name="Odd ]]> Name", args="https://example.com"))
    root = parse(encode(multi_model))
    text = root.find(f'.//{{{NS_V5}}}StartPins').text
    assert '"displayName":"Odd ]]> Name"' in text


def test_cdata_splits_terminator():
    assert cdata('a]]>b') == '<![CDATA[a]]]]><![CDATA[>b]]>'
    assert ET.fromstring('<x>' + cdata('a]]>b') + '</x>').text == 'a]]>b'


def test_escape_xml_properties():
    reserved = ['<', '>', '&', "'", '"']
    escaped = [escape_xml(c) for c in reserved]
    assert len(set(escaped)) == len(reserved)
    assert all(e.startswith('&') and e.endswith(';') for e in escaped)
    assert escape_xml('plain text 123') == 'plain text 123'
    assert escape_xml(escape_xml('plain')) == 'plain'
    assert escape_xml(None) == ''
