#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Enrollment rules for adding a course to a student's semester schedule.

Checks run in a fixed order and stop at the first failure:
duplicate enrollment, capacity, gender eligibility, time conflict.
The rules read an EnrollmentContext and return a Verdict; they never touch
storage. Callers must serialize validate-and-commit per (course, semester),
otherwise two concurrent attempts can both pass the capacity check.
"""

from ..data.models import EnrollmentContext, Verdict

MIXED = 'mixed'


# ---------------------- Time Utility Functions ----------------------

def to_minutes(t):
    """Convert a datetime.time to minutes since midnight"""
    return t.hour * 60 + t.minute


def overlap(s1, e1, s2, e2):
    """Check if two half-open intervals [s1, e1) and [s2, e2) overlap"""
    return s1 < e2 and e1 > s2


def schedules_conflict(sch1, sch2):
    """Check if any CourseTime of sch1 clashes with any CourseTime of sch2"""
    for a in sch1:
        for b in sch2:
            if a.day_of_week != b.day_of_week:
                continue
            if overlap(to_minutes(a.start_time), to_minutes(a.end_time),
                       to_minutes(b.start_time), to_minutes(b.end_time)):
                return True
    return False


# ---------------------- Enrollment Rules ----------------------

def is_duplicate(ctx):
    return any(c.id == ctx.course.id for c in ctx.enrolled_courses)


def is_full(ctx):
    capacity = ctx.course.capacity
    return capacity <= 0 or ctx.enrolled_count >= capacity


def is_gender_mismatch(ctx):
    restriction = ctx.course.gender_restriction
    return restriction != MIXED and restriction != ctx.student.gender


def find_time_conflict(ctx):
    """Return the first enrolled course whose meetings clash with the candidate, or None"""
    for enrolled in ctx.enrolled_courses:
        if schedules_conflict(ctx.course.times, enrolled.times):
            return enrolled
    return None


def validate(ctx: EnrollmentContext) -> Verdict:
    """
    Decide whether the student may add the course.

    Args:
        ctx: Candidate course, acting student, the student's courses in the
            same semester and the course's active enrollment count

    Returns:
        Verdict: Accepted, or the first rule that rejects the attempt
    """
    if is_duplicate(ctx):
        return Verdict.duplicate()

    if is_full(ctx):
        return Verdict.full()

    if is_gender_mismatch(ctx):
        return Verdict.gender_mismatch(ctx.course.gender_restriction)

    conflict = find_time_conflict(ctx)
    if conflict is not None:
        return Verdict.time_conflict(conflict.name)

    return Verdict.accepted()
