"""Enrollment ledger backed by SQLite."""
import os
import sqlite3
from pathlib import Path
from typing import List, Optional, Union

from ..core.logger import setup_logging

logger = setup_logging()


class EnrollmentLedger:
    """Records which student holds a seat in which course for a semester."""

    def __init__(self, db_path: Optional[Union[str, Path]] = None):
        """
        Initialize the ledger and make sure its table exists.

        Args:
            db_path: SQLite file path. If None, ENROLLMENT_DB_PATH from the
                configuration is used.
        """
        if db_path is None:
            from ..core.config import ENROLLMENT_DB_PATH
            db_path = ENROLLMENT_DB_PATH

        self.sqlite_path = str(db_path)
        parent = os.path.dirname(self.sqlite_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        self.create_tables()

    def get_connection(self):
        """Create and return a database connection."""
        conn = sqlite3.connect(self.sqlite_path, timeout=30)
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def create_tables(self):
        """Create the enrollment table and its indexes."""
        conn = self.get_connection()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS user_courses (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    student_id TEXT NOT NULL,
                    course_id TEXT NOT NULL,
                    semester_id TEXT NOT NULL,
                    created_at TEXT DEFAULT (datetime('now')),
                    UNIQUE(student_id, course_id, semester_id)
                )
            """)
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_user_courses_course ON user_courses (course_id, semester_id)")
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_user_courses_student ON user_courses (student_id, semester_id)")
            conn.commit()

        except sqlite3.Error as e:
            conn.rollback()
            logger.error(f"Error creating enrollment tables: {e}")
            raise
        finally:
            cursor.close()
            conn.close()

    def count(self, course_id: str, semester_id: str) -> int:
        """Active enrollments of a course in a semester."""
        conn = self.get_connection()
        try:
            row = conn.execute(
                "SELECT COUNT(*) FROM user_courses WHERE course_id = ? AND semester_id = ?",
                (course_id, semester_id)
            ).fetchone()
            return row[0]
        finally:
            conn.close()

    def is_enrolled(self, student_id: str, course_id: str, semester_id: str) -> bool:
        conn = self.get_connection()
        try:
            row = conn.execute(
                "SELECT 1 FROM user_courses WHERE student_id = ? AND course_id = ? AND semester_id = ?",
                (student_id, course_id, semester_id)
            ).fetchone()
            return row is not None
        finally:
            conn.close()

    def course_ids(self, student_id: str, semester_id: str) -> List[str]:
        """Courses a student holds in a semester, oldest enrollment first."""
        conn = self.get_connection()
        try:
            rows = conn.execute(
                "SELECT course_id FROM user_courses WHERE student_id = ? AND semester_id = ? ORDER BY id",
                (student_id, semester_id)
            ).fetchall()
            return [row[0] for row in rows]
        finally:
            conn.close()

    def add(self, student_id: str, course_id: str, semester_id: str, capacity: int) -> bool:
        """
        Insert an enrollment only while the course still has a free seat.

        The count and the insert are one statement, so concurrent writers
        (threads or processes) cannot push the course past its capacity.

        Returns:
            bool: True if the row was inserted, False if the course is full
                or the student already holds this enrollment
        """
        conn = self.get_connection()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                INSERT INTO user_courses (student_id, course_id, semester_id)
                SELECT ?, ?, ?
                WHERE (SELECT COUNT(*) FROM user_courses
                       WHERE course_id = ? AND semester_id = ?) < ?
            """, (student_id, course_id, semester_id, course_id, semester_id, capacity))
            conn.commit()
            return cursor.rowcount == 1

        except sqlite3.IntegrityError:
            conn.rollback()
            return False
        finally:
            cursor.close()
            conn.close()

    def remove(self, student_id: str, course_id: str, semester_id: str) -> bool:
        conn = self.get_connection()
        cursor = conn.cursor()

        try:
            cursor.execute(
                "DELETE FROM user_courses WHERE student_id = ? AND course_id = ? AND semester_id = ?",
                (student_id, course_id, semester_id)
            )
            conn.commit()
            return cursor.rowcount > 0
        finally:
            cursor.close()
            conn.close()
