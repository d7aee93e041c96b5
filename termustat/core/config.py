#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Core configuration module for the Termustat timetable engine.

This module provides centralized configuration management including:
- Environment variable loading
- Batch pipeline defaults
- Logging setup
- Path management
"""

import os
import logging
from pathlib import Path
from dotenv import load_dotenv

# Base directory for the engine
BASE_DIR = Path(__file__).parent.parent


def load_environment():
    """Load environment variables from .env file."""
    possible_paths = [
        BASE_DIR / '.env',           # Package root
        Path(__file__).parent / '.env',  # Core directory
        Path('.env')                 # Current working directory
    ]

    for path in possible_paths:
        if path.exists():
            load_dotenv(dotenv_path=path, override=True)
            break


# Load environment on import
load_environment()

# Environment variables with defaults
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
INPUT_DIR = Path(os.getenv('INPUT_DIR', 'courses'))
OUTPUT_DIR = Path(os.getenv('OUTPUT_DIR', 'export'))
ROW_LAYOUT = os.getenv('ROW_LAYOUT', 'report')
MAX_WORKERS = int(os.getenv('MAX_WORKERS', '4'))
STRICT_MODE = os.getenv('STRICT_MODE', 'False').lower() == 'true'
ENROLLMENT_DB_PATH = Path(os.getenv('ENROLLMENT_DB_PATH', BASE_DIR / 'data' / 'enrollments.db'))

# Batch output names
COMBINED_SQL_FILE = 'combined.sql'


def get_log_level():
    """Convert string log level to logging constant."""
    level_map = {
        'DEBUG': logging.DEBUG,
        'INFO': logging.INFO,
        'WARNING': logging.WARNING,
        'ERROR': logging.ERROR,
        'CRITICAL': logging.CRITICAL
    }
    return level_map.get(LOG_LEVEL.upper(), logging.INFO)


# Import logger here to avoid circular imports
from .logger import setup_logging
logger = setup_logging(get_log_level())
