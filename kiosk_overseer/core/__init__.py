"""Core Business Logic Package

This package contains the policy validator, the Assigned Access XML encoder
and decoder, launch argument handling, presets, export and the editing session.
"""

# Validation
from .validator import ValidationError, RuleCategory, validate, is_exportable

# XML Codec
from .xml_encoder import encode
from .xml_decoder import decode, parse_document

# Launch Arguments
from .launch_args import (
    Browser,
    KioskArgs,
    build_file_url,
    build_edge_kiosk_args,
    build_browser_kiosk_args,
    parse_kiosk_args
)

# Presets, Export and Session
from .presets import PresetCatalog, add_common_app, ensure_browser_dependencies, new_from_preset
from .export import build_export_artifact, build_shortcut_list, edge_shortcut_warning_pins, auto_launch_process_info
from .snapshot import FormValues, SessionSnapshot, CONFIG_SCHEMA_VERSION
from .session import PolicySession

__all__ = [
    # Validation
    'ValidationError',
    'RuleCategory',
    'validate',
    'is_exportable',

    # XML Codec
    'encode',
    'decode',
    'parse_document',

    # Launch Arguments
    'Browser',
    'KioskArgs',
    'build_file_url',
    'build_edge_kiosk_args',
    'build_browser_kiosk_args',
    'parse_kiosk_args',

    # Presets
    'PresetCatalog',
    'add_common_app',
    'ensure_browser_dependencies',
    'new_from_preset',

    # Export
    'build_export_artifact',
    'build_shortcut_list',
    'edge_shortcut_warning_pins',
    'auto_launch_process_info',

    # Session
    'FormValues',
    'SessionSnapshot',
    'CONFIG_SCHEMA_VERSION',
    'PolicySession'
]
