"""
Conversion of scraped course records into typed courses.

This is where slot tokens are decoded: a record whose tokens or exam
fields do not decode is refused with the codec error naming the offending
token, never silently corrected.
"""

from typing import Dict, Optional

from .exceptions import RegistrationError
from .logger import setup_logging
from .normalizer import normalize_gender, normalize_name
from .slot_codec import decode_exam, decode_slots
from ..data.models import MAX_SLOTS, Course, CourseRecord

logger = setup_logging()


def _to_int(value, field_name, record):
    value = str(value).strip()
    if not value.isdigit():
        raise RegistrationError(f"course {record.course_id}: {field_name} {value!r} is not a number")
    return int(value)


def record_from_dict(data: Dict) -> CourseRecord:
    """
    Rebuild a CourseRecord from one entry of a <faculty>.json export.

    Raises:
        SlotCodecError: If the exam date/time pair does not decode
    """
    times = [data.get(f"time{i}", '') for i in range(1, MAX_SLOTS + 1)]
    exam = None
    if data.get('date_exam') or data.get('time_exam'):
        exam = decode_exam(data.get('date_exam', ''), data.get('time_exam', ''))

    return CourseRecord(
        course_id=data.get('course_id', ''),
        name=data.get('name', ''),
        weight=str(data.get('weight', '')),
        capacity=str(data.get('capacity', '')),
        gender=data.get('gender', ''),
        professor=data.get('professor', ''),
        faculty=data.get('faculty', ''),
        times=[token for token in times if token],
        exam=exam,
    )


def build_course(record: CourseRecord, semester_id: str, course_id: Optional[str] = None) -> Course:
    """
    Turn a scraped record into a Course ready for the enrollment rules.

    Args:
        record: Scraped course record
        semester_id: Semester the course is offered in
        course_id: Identifier to give the course (default: the portal code)

    Returns:
        Course: With decoded CourseTime list and the professor's identity key

    Raises:
        SlotCodecError: If a slot token does not decode
        RegistrationError: If the professor name is empty after
            normalization, weight or capacity is not numeric, or the gender
            label is unknown
    """
    professor_key = normalize_name(record.professor)
    if not professor_key:
        raise RegistrationError(f"course {record.course_id}: professor name is empty")

    gender = normalize_gender(record.gender)
    if gender is None:
        raise RegistrationError(f"course {record.course_id}: unknown gender restriction {record.gender!r}")

    times = decode_slots(record.times)

    course = Course(
        id=course_id or record.course_id,
        code=record.course_id.strip(),
        name=record.name.strip(),
        semester_id=semester_id,
        capacity=_to_int(record.capacity, 'capacity', record),
        gender_restriction=gender,
        times=times,
        weight=_to_int(record.weight, 'weight', record),
        professor=record.professor,
        professor_key=professor_key,
        faculty=record.faculty,
        exam=record.exam,
    )
    logger.debug(f"Registered course {course.code} with {len(times)} weekly slots")
    return course
