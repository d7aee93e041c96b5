"""Data models for scraped course records, schedules and enrollment outcomes."""

from dataclasses import dataclass, field
from datetime import time
from enum import Enum
from typing import List, Optional

import jdatetime

MAX_SLOTS = 5


@dataclass(frozen=True)
class CourseTime:
    """One weekly meeting of a course."""

    day_of_week: int  # 0-6: Saturday-Friday
    start_time: time
    end_time: time

    def __post_init__(self) -> None:
        if not 0 <= self.day_of_week <= 6:
            raise ValueError(f"Day of week must be 0-6 (Sat-Fri), got {self.day_of_week}")
        if self.start_time >= self.end_time:
            raise ValueError("Start time must be before end time")

    def to_token(self) -> str:
        return (f"d{self.day_of_week}/{self.start_time.strftime('%H:%M')}"
                f"-{self.end_time.strftime('%H:%M')}")


@dataclass(frozen=True)
class ExamWindow:
    """Final exam slot as printed by the portal, in the Solar Hijri calendar."""

    date: str        # YYYY/MM/DD
    time_range: str  # HH:MM-HH:MM
    start: jdatetime.datetime
    end: jdatetime.datetime


@dataclass
class CourseRecord:
    """
    One course row scraped from a portal page.

    Field order matches the column order of the bulk SQL export.
    """

    course_id: str
    name: str
    weight: str
    capacity: str
    gender: str
    professor: str
    faculty: str
    times: List[str] = field(default_factory=list)
    exam: Optional[ExamWindow] = None

    def __post_init__(self) -> None:
        if len(self.times) > MAX_SLOTS:
            raise ValueError(f"A course has at most {MAX_SLOTS} weekly slots, got {len(self.times)}")

    @property
    def time_exam(self) -> str:
        return self.exam.time_range if self.exam else ''

    @property
    def date_exam(self) -> str:
        return self.exam.date if self.exam else ''

    def slot_columns(self) -> List[str]:
        """The five time columns, padded with empty strings."""
        return self.times + [''] * (MAX_SLOTS - len(self.times))

    def columns(self) -> List[str]:
        return [
            self.course_id, self.name, self.weight, self.capacity, self.gender,
            self.professor, self.faculty, *self.slot_columns(),
            self.time_exam, self.date_exam,
        ]

    def to_dict(self) -> dict:
        time1, time2, time3, time4, time5 = self.slot_columns()
        return {
            "course_id": self.course_id,
            "name": self.name,
            "weight": self.weight,
            "capacity": self.capacity,
            "gender": self.gender,
            "professor": self.professor,
            "faculty": self.faculty,
            "time1": time1,
            "time2": time2,
            "time3": time3,
            "time4": time4,
            "time5": time5,
            "time_exam": self.time_exam,
            "date_exam": self.date_exam,
        }


@dataclass
class Course:
    """A registered course with decoded schedule, as the enrollment rules see it."""

    id: str
    code: str
    name: str
    semester_id: str
    capacity: int
    gender_restriction: str  # male, female or mixed
    times: List[CourseTime] = field(default_factory=list)
    weight: int = 0
    professor: str = ''
    professor_key: str = ''
    faculty: str = ''
    exam: Optional[ExamWindow] = None


@dataclass(frozen=True)
class Student:
    id: str
    gender: str


@dataclass
class EnrollmentContext:
    """Everything the enrollment rules need for one enrollment attempt."""

    course: Course
    student: Student
    enrolled_courses: List[Course] = field(default_factory=list)  # same semester
    enrolled_count: int = 0  # active enrollments for (course, semester)


class VerdictKind(Enum):
    ACCEPTED = 'accepted'
    REJECTED_DUPLICATE = 'rejected_duplicate'
    REJECTED_FULL = 'rejected_full'
    REJECTED_GENDER_MISMATCH = 'rejected_gender_mismatch'
    REJECTED_TIME_CONFLICT = 'rejected_time_conflict'


@dataclass(frozen=True)
class Verdict:
    """Outcome of one enrollment attempt. Rejections are results, not errors."""

    kind: VerdictKind
    conflicting_course: Optional[str] = None
    gender_restriction: Optional[str] = None

    @classmethod
    def accepted(cls) -> "Verdict":
        return cls(VerdictKind.ACCEPTED)

    @classmethod
    def duplicate(cls) -> "Verdict":
        return cls(VerdictKind.REJECTED_DUPLICATE)

    @classmethod
    def full(cls) -> "Verdict":
        return cls(VerdictKind.REJECTED_FULL)

    @classmethod
    def gender_mismatch(cls, restriction: str) -> "Verdict":
        return cls(VerdictKind.REJECTED_GENDER_MISMATCH, gender_restriction=restriction)

    @classmethod
    def time_conflict(cls, course_name: str) -> "Verdict":
        return cls(VerdictKind.REJECTED_TIME_CONFLICT, conflicting_course=course_name)

    @property
    def is_accepted(self) -> bool:
        return self.kind is VerdictKind.ACCEPTED

    @property
    def message(self) -> str:
        if self.kind is VerdictKind.REJECTED_DUPLICATE:
            return "already enrolled in this course"
        if self.kind is VerdictKind.REJECTED_FULL:
            return "course is full"
        if self.kind is VerdictKind.REJECTED_GENDER_MISMATCH:
            return f"course is restricted to {self.gender_restriction} students"
        if self.kind is VerdictKind.REJECTED_TIME_CONFLICT:
            return f"time conflict with course: {self.conflicting_course}"
        return "course added successfully"
