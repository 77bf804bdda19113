"""Utility Functions Package

This package contains helper functions for escaping, path and name handling,
and the file manager that stores saved configurations and exported XML.
"""

from .helpers import (
    escape_xml,
    truncate,
    is_edge_app,
    is_helper_executable,
    executable_name,
    default_shortcut_path,
    is_start_menu_shortcut_path,
    sanitize_file_name,
    new_guid
)

from .file_manager import (
    get_app_data_dir,
    config_file_name,
    ConfigFileManager
)

__all__ = [
    # Helper Functions
    'escape_xml',
    'truncate',
    'is_edge_app',
    'is_helper_executable',
    'executable_name',
    'default_shortcut_path',
    'is_start_menu_shortcut_path',
    'sanitize_file_name',
    'new_guid',

    # File Management Functions
    'get_app_data_dir',
    'config_file_name',

    # Manager Classes
    'ConfigFileManager'
]
