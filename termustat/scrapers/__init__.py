"""
Scrapers package for the Termustat timetable engine.

This package contains the portal HTML extraction and the batch export
pipeline that turns faculty pages into JSON and SQL artifacts.
"""
