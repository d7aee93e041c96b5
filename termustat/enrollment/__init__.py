"""
Enrollment package for the Termustat timetable engine.

This package contains the enrollment rules and the service that commits
accepted enrollments.
"""
