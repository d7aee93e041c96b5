"""
Data package for the Termustat timetable engine.

This package contains the transfer objects and the enrollment ledger.
"""
