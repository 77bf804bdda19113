"""Main entry point for Kiosk Overseer"""
from .common_imports import *
from . import __version__
from .core.export import auto_launch_process_info
from .core.presets import PRESET_NAMES
from .core.session import PolicySession
from .utils.file_manager import ConfigFileManager

logger = logging.getLogger("kiosk_overseer")


def setup_global_error_handling():
    """Log anything that escapes a command instead of dumping a bare traceback"""
    def exception_hook(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logger.critical(f"💥 Unhandled exception: {exc_type.__name__}: {exc_value}",
                        exc_info=(exc_type, exc_value, exc_traceback))

    sys.excepthook = exception_hook


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kiosk-overseer",
        description="Build, check and import Windows Assigned Access kiosk configurations.",
    )
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    parser.add_argument('-v', '--verbose', action='store_true', help="show debug logging")
    parser.add_argument('-d', '--dir', default=None,
                        help="directory for relative file names (default: current directory)")
    commands = parser.add_subparsers(dest='command', required=True)

    new = commands.add_parser('new', help="start a configuration from a preset")
    new.add_argument('--preset', choices=PRESET_NAMES, default='blank')
    new.add_argument('--name', default='', help="configuration name")
    new.add_argument('-o', '--output', help="snapshot file to write (default: stdout)")

    check = commands.add_parser('validate', help="list validation errors")
    check.add_argument('file', help="snapshot (.json) or Assigned Access XML (.xml)")

    enc = commands.add_parser('encode', help="render a saved configuration as XML")
    enc.add_argument('file', help="snapshot (.json) or Assigned Access XML (.xml)")
    enc.add_argument('-o', '--output', help="XML file to write (default: stdout)")
    enc.add_argument('--force', action='store_true', help="export even if validation fails")

    dec = commands.add_parser('decode', help="import Assigned Access XML as a snapshot")
    dec.add_argument('file', help="Assigned Access XML file")
    dec.add_argument('-o', '--output', help="snapshot file to write (default: stdout)")

    links = commands.add_parser('shortcuts', help="list the shortcuts a deployment must create")
    links.add_argument('file', help="snapshot (.json) or Assigned Access XML (.xml)")
    return parser


def _open_session(files: ConfigFileManager, file_name: str) -> Optional[PolicySession]:
    session = PolicySession(files=files)
    if file_name.lower().endswith('.xml'):
        ok, message = session.load_xml(file_name)
    else:
        ok, message = session.load(file_name)
    if not ok:
        logger.error(f"❌ {message}")
        return None
    return session


def _write_json(files: ConfigFileManager, data: Dict[str, Any], output: Optional[str]) -> int:
    if not output:
        print(json.dumps(data, indent=2, ensure_ascii=False))
        return 0
    return 0 if files.save_snapshot(data, file_name=output) else 1


def cmd_new(args, files: ConfigFileManager) -> int:
    session = PolicySession(files=files)
    session.reset(args.preset)
    session.model.config_name = args.name
    return _write_json(files, session.build_snapshot(), args.output)


def cmd_validate(args, files: ConfigFileManager) -> int:
    session = _open_session(files, args.file)
    if session is None:
        return 2
    errors = session.validate()
    if not errors:
        print("✅ Configuration is valid")
        return 0
    for error in errors:
        print(f"❌ [{error.category.value}] {error.message}")
    return 1


def cmd_encode(args, files: ConfigFileManager) -> int:
    session = _open_session(files, args.file)
    if session is None:
        return 2
    xml, errors = session.export_xml(force=args.force)
    for error in errors:
        logger.warning(f"⚠️ {error.message}")
    if xml is None:
        logger.error("❌ Configuration has errors; use --force to export anyway")
        return 1
    if not args.output:
        print(xml)
        return 0
    return 0 if files.save_xml(xml, file_name=args.output) else 1


def cmd_decode(args, files: ConfigFileManager) -> int:
    session = PolicySession(files=files)
    ok, message = session.load_xml(args.file)
    if not ok:
        logger.error(f"❌ {message}")
        return 2
    return _write_json(files, session.build_snapshot(), args.output)


def cmd_shortcuts(args, files: ConfigFileManager) -> int:
    session = _open_session(files, args.file)
    if session is None:
        return 2
    artifact, _ = session.export_artifact(force=True)
    print(artifact.shortcuts_json())
    process = auto_launch_process_info(session.model)
    if process is not None:
        logger.info(f"🚀 Auto-launch: {process.process_name} {process.launch_args}".rstrip())
    return 0


COMMANDS: Dict[str, Callable[[argparse.Namespace, ConfigFileManager], int]] = {
    'new': cmd_new,
    'validate': cmd_validate,
    'encode': cmd_encode,
    'decode': cmd_decode,
    'shortcuts': cmd_shortcuts,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point"""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    setup_global_error_handling()

    files = ConfigFileManager(args.dir or Path.cwd())
    return COMMANDS[args.command](args, files)


if __name__ == "__main__":
    sys.exit(main())
