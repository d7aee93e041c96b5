"""
Batch export of a directory of portal pages.

Every ``<faculty>.html`` file in the input directory is parsed on its own
worker and produces ``<faculty>.json`` and ``<faculty>.sql`` in the output
directory. Each faculty's INSERT statement is also appended to
``combined.sql``; that append is the only shared write and is serialized.
A file that cannot be read or parsed is logged and skipped.
"""

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..core.config import COMBINED_SQL_FILE, MAX_WORKERS
from ..core.error_handler import safe_execute
from ..core.logger import setup_logging
from .exporters import generate_sql_insert, write_json_output, write_sql_file
from .html_parser import RowLayout, get_layout, parse_courses_from_html

logger = setup_logging()


@dataclass
class BatchReport:
    processed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    records: int = 0


def list_html_files(input_dir):
    """HTML files of the input directory, sorted by name."""
    return sorted(
        path for path in Path(input_dir).iterdir()
        if path.is_file() and path.suffix.lower() == '.html'
    )


def process_html_file(path, layout, strict=False):
    """Parse one faculty page; the faculty code is the file name stem."""
    with open(path, 'rb') as f:
        html = f.read()
    return parse_courses_from_html(html, path.stem, layout, strict)


def export_faculty(path, output_dir, layout, combined_file, write_lock, strict=False):
    """
    Parse one file and write its artifacts.

    Returns:
        int: Number of records exported
    """
    faculty = path.stem
    records = process_html_file(path, layout, strict)

    write_json_output(output_dir, faculty, records)
    sql_content = generate_sql_insert(faculty, records)
    write_sql_file(output_dir, faculty, sql_content)

    if sql_content:
        with write_lock:
            combined_file.write(sql_content + "\n")
            combined_file.flush()

    logger.info(f"Exported {len(records)} courses for faculty {faculty}")
    return len(records)


def run(input_dir, output_dir, layout='report', max_workers: Optional[int] = None,
        strict: bool = False) -> BatchReport:
    """
    Export every faculty page of input_dir into output_dir.

    Args:
        input_dir: Directory holding <faculty>.html pages
        output_dir: Directory for the JSON/SQL artifacts, created if missing
        layout: RowLayout or layout name ('report' or 'list')
        max_workers: Worker thread bound (default: MAX_WORKERS setting)
        strict: Skip a whole file on the first undecodable slot or exam

    Returns:
        BatchReport: Processed and skipped file names, exported record count

    Raises:
        OSError: If the input directory cannot be listed or the output
            directory cannot be created
    """
    if not isinstance(layout, RowLayout):
        layout = get_layout(layout)

    files = list_html_files(input_dir)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    report = BatchReport()
    write_lock = threading.Lock()
    logger.info(f"Processing {len(files)} files from {input_dir} ({layout.name} layout)")

    with open(output_dir / COMBINED_SQL_FILE, 'a', encoding='utf-8') as combined_file, \
            ThreadPoolExecutor(max_workers=max_workers or MAX_WORKERS) as executor:
        future_to_path = {
            executor.submit(safe_execute, export_faculty, path, output_dir, layout,
                            combined_file, write_lock, strict): path
            for path in files
        }

        for future in as_completed(future_to_path):
            path = future_to_path[future]
            count = future.result()
            if count is None:
                logger.warning(f"Skipping {path} due to error")
                report.skipped.append(path.name)
                continue
            report.processed.append(path.name)
            report.records += count

    report.processed.sort()
    report.skipped.sort()
    logger.info(f"Batch finished: {len(report.processed)} files, {report.records} courses, "
                f"{len(report.skipped)} skipped")
    return report
