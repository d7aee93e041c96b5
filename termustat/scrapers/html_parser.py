"""
Extraction of course records from Golestan HTML tables.

Two table shapes are understood: the printable course report (``report``)
and the course list grid (``list``). Each row becomes one CourseRecord with
normalized text fields, up to five slot tokens and the exam window.
"""

from dataclasses import dataclass
from typing import List, Optional

from bs4 import BeautifulSoup

from ..core.exceptions import SlotCodecError
from ..core.logger import setup_logging
from ..core.normalizer import normalize_digits
from ..core.slot_codec import decode_exam, decode_slot, encode_cell, parse_exam_segment
from ..data.models import CourseRecord

logger = setup_logging()

GRADUATE_FLAG = 'ارشد'
GRADUATE_SUFFIX = ' (ارشد)'


@dataclass(frozen=True)
class RowLayout:
    """Column offsets and row filters of one portal table shape."""

    name: str
    row_selector: str
    min_cells: int
    course_id: int
    course_name: int
    weight: int
    capacity: int
    gender: int
    professor: int
    time: int
    # None when the exam phrase is printed inside the time cell
    exam: Optional[int] = None
    faculty: Optional[int] = None
    graduate: Optional[int] = None
    hidden_style: Optional[str] = None
    title_class: Optional[str] = None


REPORT_LAYOUT = RowLayout(
    name='report',
    row_selector='.CTable3 tr',
    min_cells=8,
    course_id=0,
    course_name=1,
    weight=2,
    capacity=4,
    gender=7,
    professor=8,
    time=9,
    exam=10,
    graduate=15,
    hidden_style='display: none;',
)

LIST_LAYOUT = RowLayout(
    name='list',
    row_selector='table tr',
    min_cells=19,
    faculty=2,
    course_id=6,
    course_name=7,
    weight=8,
    capacity=10,
    gender=13,
    professor=14,
    time=15,
    title_class='DTitle',
)

LAYOUTS = {layout.name: layout for layout in (REPORT_LAYOUT, LIST_LAYOUT)}


def get_layout(name):
    try:
        return LAYOUTS[name]
    except KeyError:
        raise ValueError(f"Unknown row layout {name!r}, expected one of {sorted(LAYOUTS)}") from None


def _cell(cells, index):
    if index is None or index >= len(cells):
        return ''
    return cells[index]


def is_hidden_row(row, layout):
    """Rows the portal hides or uses as headers carry no course."""
    if layout.hidden_style and row.get('style', '').strip() == layout.hidden_style:
        return True
    if layout.title_class and layout.title_class in (row.get('class') or []):
        return True
    return False


def extract_row(cells: List[str], layout: RowLayout, faculty: str = '',
                strict: bool = False) -> Optional[CourseRecord]:
    """
    Build a CourseRecord from the raw texts of one table row.

    Args:
        cells: Text of every <td> in the row, unnormalized
        layout: Column layout of the table
        faculty: Faculty code used when the layout has no faculty column
        strict: Raise codec errors instead of logging and dropping the field

    Returns:
        CourseRecord, or None when the row is too short to be a course
    """
    if len(cells) < layout.min_cells:
        return None

    course_id = normalize_digits(_cell(cells, layout.course_id))
    name = normalize_digits(_cell(cells, layout.course_name))
    if normalize_digits(_cell(cells, layout.graduate)) == GRADUATE_FLAG:
        name += GRADUATE_SUFFIX

    if layout.faculty is not None:
        faculty = normalize_digits(_cell(cells, layout.faculty))

    encoded = encode_cell(_cell(cells, layout.time), _cell(cells, layout.exam))

    times = []
    for token in encoded.slots:
        try:
            slot = decode_slot(token)
        except SlotCodecError as e:
            if strict:
                raise
            logger.warning(f"Dropping slot of course {course_id}: {e}")
            continue
        times.append(slot.to_token())

    exam = None
    if encoded.exam_segment:
        date, time_range = parse_exam_segment(encoded.exam_segment)
        try:
            exam = decode_exam(date, time_range)
        except SlotCodecError as e:
            if strict:
                raise
            logger.warning(f"Dropping exam window of course {course_id}: {e}")

    return CourseRecord(
        course_id=course_id,
        name=name,
        weight=normalize_digits(_cell(cells, layout.weight)),
        capacity=normalize_digits(_cell(cells, layout.capacity)),
        gender=normalize_digits(_cell(cells, layout.gender)),
        professor=normalize_digits(_cell(cells, layout.professor)),
        faculty=faculty,
        times=times,
        exam=exam,
    )


def parse_courses_from_html(html, faculty='', layout=REPORT_LAYOUT, strict=False):
    """
    Parse every course row of a portal page.

    Args:
        html: Page markup as bytes or str
        faculty: Faculty code, usually the file name stem
        layout: RowLayout of the page's tables
        strict: Propagate codec errors instead of dropping the field

    Returns:
        list[CourseRecord]: Records in document order
    """
    soup = BeautifulSoup(html, "html.parser")
    records = []

    for row in soup.select(layout.row_selector):
        if is_hidden_row(row, layout):
            continue

        cells = [c.get_text(" ", strip=True) for c in row.find_all("td", recursive=False)]
        record = extract_row(cells, layout, faculty, strict)
        if record is not None:
            records.append(record)

    logger.debug(f"Parsed {len(records)} courses for faculty {faculty!r} ({layout.name} layout)")
    return records
