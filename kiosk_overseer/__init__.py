"""Kiosk Overseer: build, check and import Windows Assigned Access kiosk policies"""

__version__ = "0.3.0"
