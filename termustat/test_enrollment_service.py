#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Unit Tests for the enrollment service and its SQLite ledger

Tests covering commit of accepted verdicts, rejections and concurrent
attempts on a course with limited seats.
"""

import os
import shutil
import tempfile
import threading
import unittest
from datetime import time

os.environ.setdefault('LOG_FILE', '')

from termustat.data.models import Course, CourseTime, Student, VerdictKind
from termustat.data.storage import EnrollmentLedger
from termustat.enrollment.service import EnrollmentService

SEMESTER = '14031'


def make_course(course_id, times, capacity=30, gender='mixed', name=None):
    return Course(
        id=course_id,
        code=course_id,
        name=name or course_id,
        semester_id=SEMESTER,
        capacity=capacity,
        gender_restriction=gender,
        times=times,
    )


class TestEnrollmentLedger(unittest.TestCase):
    """Test the capacity-bounded insert"""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp(prefix='termustat_ledger_test_')
        self.ledger = EnrollmentLedger(os.path.join(self.test_dir, 'db', 'enrollments.db'))

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_add_respects_capacity(self):
        self.assertTrue(self.ledger.add('s1', 'c1', SEMESTER, 2))
        self.assertTrue(self.ledger.add('s2', 'c1', SEMESTER, 2))
        self.assertFalse(self.ledger.add('s3', 'c1', SEMESTER, 2))
        self.assertEqual(self.ledger.count('c1', SEMESTER), 2)

    def test_add_refuses_duplicate(self):
        self.assertTrue(self.ledger.add('s1', 'c1', SEMESTER, 5))
        self.assertFalse(self.ledger.add('s1', 'c1', SEMESTER, 5))
        self.assertEqual(self.ledger.count('c1', SEMESTER), 1)

    def test_semesters_are_separate(self):
        self.assertTrue(self.ledger.add('s1', 'c1', SEMESTER, 1))
        self.assertTrue(self.ledger.add('s1', 'c1', '14032', 1))
        self.assertEqual(self.ledger.course_ids('s1', SEMESTER), ['c1'])

    def test_course_ids_in_enrollment_order_and_remove(self):
        for course_id in ['c3', 'c1', 'c2']:
            self.ledger.add('s1', course_id, SEMESTER, 10)
        self.assertEqual(self.ledger.course_ids('s1', SEMESTER), ['c3', 'c1', 'c2'])

        self.assertTrue(self.ledger.remove('s1', 'c1', SEMESTER))
        self.assertFalse(self.ledger.remove('s1', 'c1', SEMESTER))
        self.assertFalse(self.ledger.is_enrolled('s1', 'c1', SEMESTER))
        self.assertEqual(self.ledger.course_ids('s1', SEMESTER), ['c3', 'c2'])


class TestEnrollmentService(unittest.TestCase):
    """Test enroll/drop through the service"""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp(prefix='termustat_enroll_test_')
        self.ledger = EnrollmentLedger(os.path.join(self.test_dir, 'enrollments.db'))
        monday_8 = [CourseTime(2, time(8, 0), time(10, 0))]
        monday_9 = [CourseTime(2, time(9, 0), time(11, 0))]
        self.courses = {
            'math': make_course('math', monday_8, name='ریاضی ۱'),
            'physics': make_course('physics', monday_9),
            'seminar': make_course('seminar', [CourseTime(5, time(8, 0), time(9, 0))], capacity=1),
            'lab': make_course('lab', [CourseTime(3, time(14, 0), time(16, 0))], capacity=3),
            'girls': make_course('girls', [CourseTime(1, time(8, 0), time(10, 0))], gender='female'),
        }
        self.service = EnrollmentService(self.ledger, self.courses)

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_enroll_and_duplicate(self):
        student = Student('s1', 'male')
        self.assertTrue(self.service.enroll(student, 'math').is_accepted)
        self.assertTrue(self.ledger.is_enrolled('s1', 'math', SEMESTER))

        verdict = self.service.enroll(student, 'math')
        self.assertIs(verdict.kind, VerdictKind.REJECTED_DUPLICATE)
        self.assertEqual(self.ledger.count('math', SEMESTER), 1)

    def test_capacity_one(self):
        self.assertTrue(self.service.enroll(Student('s1', 'male'), 'seminar').is_accepted)
        verdict = self.service.enroll(Student('s2', 'female'), 'seminar')
        self.assertIs(verdict.kind, VerdictKind.REJECTED_FULL)

    def test_time_conflict(self):
        student = Student('s1', 'male')
        self.service.enroll(student, 'math')
        verdict = self.service.enroll(student, 'physics')
        self.assertIs(verdict.kind, VerdictKind.REJECTED_TIME_CONFLICT)
        self.assertEqual(verdict.conflicting_course, 'ریاضی ۱')
        self.assertFalse(self.ledger.is_enrolled('s1', 'physics', SEMESTER))

    def test_gender_mismatch_is_not_committed(self):
        verdict = self.service.enroll(Student('s1', 'male'), 'girls')
        self.assertIs(verdict.kind, VerdictKind.REJECTED_GENDER_MISMATCH)
        self.assertEqual(self.ledger.count('girls', SEMESTER), 0)
        self.assertTrue(self.service.enroll(Student('s2', 'female'), 'girls').is_accepted)

    def test_drop_frees_the_slot(self):
        student = Student('s1', 'male')
        self.service.enroll(student, 'math')
        self.assertTrue(self.service.drop('s1', 'math', SEMESTER))
        self.assertTrue(self.service.enroll(student, 'physics').is_accepted)

    def test_unknown_course(self):
        with self.assertRaises(LookupError):
            self.service.enroll(Student('s1', 'male'), 'history')

    def test_unknown_enrolled_course_is_skipped(self):
        self.ledger.add('s1', 'retired', SEMESTER, 10)
        with self.assertLogs('termustat', level='ERROR'):
            courses = self.service.get_student_courses('s1', SEMESTER)
        self.assertEqual(courses, [])

    def test_concurrent_attempts_never_overbook(self):
        results = []
        results_lock = threading.Lock()

        def attempt(index):
            verdict = self.service.enroll(Student(f"s{index}", 'male'), 'lab')
            with results_lock:
                results.append(verdict.kind)

        threads = [threading.Thread(target=attempt, args=(i,)) for i in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(results.count(VerdictKind.ACCEPTED), 3)
        self.assertEqual(results.count(VerdictKind.REJECTED_FULL), 7)
        self.assertEqual(self.ledger.count('lab', SEMESTER), 3)

    def test_concurrent_services_share_one_ledger(self):
        """Separate service instances only share the database"""
        other = EnrollmentService(EnrollmentLedger(self.ledger.sqlite_path), self.courses)
        services = [self.service, other]
        threads = [
            threading.Thread(target=services[i % 2].enroll, args=(Student(f"s{i}", 'male'), 'lab'))
            for i in range(8)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(self.ledger.count('lab', SEMESTER), 3)


if __name__ == '__main__':
    unittest.main()
