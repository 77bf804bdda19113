"""
Common imports file for Kiosk Overseer
Import this file in other modules to get all standard imports
"""

# ========== 1. STANDARD LIBRARY IMPORTS ==========
import sys
import argparse
import os
import json
import uuid
import re
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Any, Callable, Union, Iterable
from dataclasses import dataclass, asdict, field, fields, replace
from enum import Enum
from urllib.parse import quote, unquote
import xml.etree.ElementTree as ET

# ========== 2. THIRD-PARTY IMPORTS ==========
from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError

# ========== 3. UTILITY FUNCTIONS ==========
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(verbose: bool = False):
    """Configure root logging for command line use"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)


def get_timestamp():
    return datetime.now().isoformat()


def safe_json_load(file_path: str) -> Optional[Dict]:
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (FileNotFoundError, json.JSONDecodeError):
        return None


def safe_json_save(data: Dict, file_path: str) -> bool:
    try:
        os.makedirs(os.path.dirname(file_path) or '.', exist_ok=True)
        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        return True
    except (OSError, TypeError) as e:
        logging.getLogger(__name__).error(f"❌ Could not save {file_path}: {e}")
        return False
