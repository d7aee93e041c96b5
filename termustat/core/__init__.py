"""
Core package for the Termustat timetable engine.

This package contains text normalization, the slot grammar codec,
the error taxonomy, configuration and logging setup.
"""
