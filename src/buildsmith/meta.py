# src/buildsmith/meta.py
"""Program identity used for logger names, env vars and config files."""

PROGRAM_DISPLAY = "Buildsmith"
PROGRAM_PACKAGE = "buildsmith"
PROGRAM_CONFIG = "buildsmith"
PROGRAM_ENV = "BUILDSMITH"
