"""
Main package for the Termustat timetable engine.

This is the root package that contains all engine modules including:
- core: Text normalization, the slot grammar codec and configuration
- data: Transfer objects and the enrollment ledger
- scrapers: Portal HTML extraction and the batch export pipeline
- enrollment: Enrollment validation rules and the enrollment service
"""

__version__ = "1.0.0"

# Loads .env and configures logging before any submodule asks for the logger
from .core import config
