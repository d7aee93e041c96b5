"""
Enrollment use case: validate an enrollment attempt and commit it.

Validation and commit for the same (course, semester) run under one lock,
and the ledger's insert is itself bounded by capacity, so a course cannot
be overbooked by concurrent attempts.
"""

import threading
from typing import Dict, List, Mapping

from ..core.logger import setup_logging
from ..data.models import Course, EnrollmentContext, Student, Verdict
from ..data.storage import EnrollmentLedger
from .validator import validate

logger = setup_logging()


class EnrollmentService:
    """Adds and drops courses of students against an enrollment ledger."""

    def __init__(self, ledger: EnrollmentLedger, courses: Mapping[str, Course]):
        """
        Args:
            ledger: Enrollment storage
            courses: Registered courses by id
        """
        self.ledger = ledger
        self.courses = courses
        self._locks: Dict[tuple, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, course_id, semester_id):
        with self._locks_guard:
            return self._locks.setdefault((course_id, semester_id), threading.Lock())

    def get_course(self, course_id: str) -> Course:
        try:
            return self.courses[course_id]
        except KeyError:
            raise LookupError(f"course {course_id} not found") from None

    def get_student_courses(self, student_id: str, semester_id: str) -> List[Course]:
        """The student's courses in a semester; unknown ids are logged and skipped."""
        courses = []
        for course_id in self.ledger.course_ids(student_id, semester_id):
            course = self.courses.get(course_id)
            if course is None:
                logger.error(f"Failed to fetch course details for {course_id}")
                continue
            courses.append(course)
        return courses

    def enroll(self, student: Student, course_id: str) -> Verdict:
        """
        Try to add a course to the student's schedule.

        Raises:
            LookupError: If the course is not registered
        """
        course = self.get_course(course_id)

        with self._lock_for(course.id, course.semester_id):
            ctx = EnrollmentContext(
                course=course,
                student=student,
                enrolled_courses=self.get_student_courses(student.id, course.semester_id),
                enrolled_count=self.ledger.count(course.id, course.semester_id),
            )
            verdict = validate(ctx)

            if verdict.is_accepted and not self.ledger.add(
                    student.id, course.id, course.semester_id, course.capacity):
                if self.ledger.is_enrolled(student.id, course.id, course.semester_id):
                    verdict = Verdict.duplicate()
                else:
                    verdict = Verdict.full()

        if verdict.is_accepted:
            logger.info(f"Course added successfully: student={student.id} course={course.id} "
                        f"name={course.name}")
        else:
            logger.info(f"Enrollment rejected: student={student.id} course={course.id} "
                        f"reason={verdict.message}")
        return verdict

    def drop(self, student_id: str, course_id: str, semester_id: str) -> bool:
        removed = self.ledger.remove(student_id, course_id, semester_id)
        if removed:
            logger.info(f"Course removed successfully: student={student_id} course={course_id}")
        return removed
