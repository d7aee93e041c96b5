#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Unit Tests for the batch export pipeline

Tests covering per-faculty JSON/SQL artifacts, the combined SQL file and
skipping of bad input files.
"""

import json
import os
import shutil
import sys
import tempfile
import unittest
from pathlib import Path

os.environ.setdefault('LOG_FILE', '')

from termustat.data.models import CourseRecord
from termustat.scrapers.batch import list_html_files, run
from termustat.scrapers.exporters import escape_sql, generate_sql_insert
from termustat.run import main as cli_main

GOOD_ROW = (
    "<tr><td>۱۲۳۴۰۱</td><td>رياضي ۱</td><td>۳</td><td>۰</td><td>۴۰</td><td></td><td></td>"
    "<td>مختلط</td><td>علي رضايي</td><td>درس(ت): دوشنبه ۰۸:۰۰-۰۹:۳۰ مکان: کلاس ۲۰۱</td>"
    "<td>تاريخ: ۱۴۰۳/۱۰/۱۵ ساعت: ۰۹:۰۰-۱۱:۰۰</td></tr>"
)
BAD_ROW = (
    "<tr><td>۷۷۷</td><td>فيزيك</td><td>۲</td><td>۰</td><td>۳۰</td><td></td><td></td>"
    "<td>زن</td><td>استاد</td><td>درس(ت): شنبه ۱۲:۰۰-۱۰:۰۰</td><td></td></tr>"
)


def page(*rows):
    return '<html><body><table class="CTable3">' + ''.join(rows) + '</table></body></html>'


class TestExporters(unittest.TestCase):
    """Test SQL generation"""

    def test_insert_statement(self):
        record = CourseRecord(
            course_id='123401', name="O'Reilly", weight='3', capacity='40', gender='مختلط',
            professor='علی', faculty='11', times=['d2/08:00-09:30'],
        )
        sql = generate_sql_insert('11', [record])
        self.assertEqual(
            sql,
            "\nINSERT INTO 11 VALUES\n"
            "(NULL,'123401','O''Reilly',3,40,'مختلط','علی','11','d2/08:00-09:30','','','','','','');"
        )

    def test_non_numeric_weight_becomes_null(self):
        record = CourseRecord('1', 'a', '', 'x', 'مرد', 'b', '11')
        self.assertIn("(NULL,'1','a',NULL,NULL,", generate_sql_insert('11', [record]))

    def test_multiple_rows_and_empty_input(self):
        records = [CourseRecord(str(i), 'n', '1', '1', 'g', 'p', 'f') for i in range(3)]
        self.assertEqual(generate_sql_insert('f', records).count('(NULL,'), 3)
        self.assertEqual(generate_sql_insert('f', []), '')

    def test_escape_sql(self):
        self.assertEqual(escape_sql("it's"), "it''s")


class TestBatchRun(unittest.TestCase):
    """Test the directory pipeline"""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp(prefix='termustat_batch_test_')
        self.input_dir = Path(self.test_dir) / 'courses'
        self.output_dir = Path(self.test_dir) / 'export'
        self.input_dir.mkdir()
        (self.input_dir / '11.html').write_text(page(GOOD_ROW), encoding='utf-8')
        (self.input_dir / '12.html').write_text(page(GOOD_ROW, BAD_ROW), encoding='utf-8')
        (self.input_dir / '13.html').write_text(page(), encoding='utf-8')
        (self.input_dir / 'notes.txt').write_text('not a page', encoding='utf-8')

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_list_html_files(self):
        names = [p.name for p in list_html_files(self.input_dir)]
        self.assertEqual(names, ['11.html', '12.html', '13.html'])

    def test_artifacts_per_faculty(self):
        report = run(self.input_dir, self.output_dir, max_workers=2)

        self.assertEqual(report.processed, ['11.html', '12.html', '13.html'])
        self.assertEqual(report.skipped, [])
        self.assertEqual(report.records, 3)

        with open(self.output_dir / '11.json', encoding='utf-8') as f:
            data = json.load(f)
        self.assertEqual(len(data), 1)
        self.assertEqual(data[0]['course_id'], '123401')
        self.assertEqual(data[0]['faculty'], '11')
        self.assertEqual(data[0]['time1'], 'd2/08:00-09:30')
        self.assertEqual(data[0]['time2'], '')
        self.assertEqual(data[0]['date_exam'], '1403/10/15')
        self.assertEqual(data[0]['time_exam'], '09:00-11:00')

        # the bad slot is dropped, the row is kept
        with open(self.output_dir / '12.json', encoding='utf-8') as f:
            data = json.load(f)
        self.assertEqual([d['course_id'] for d in data], ['123401', '777'])
        self.assertEqual(data[1]['time1'], '')

        sql = (self.output_dir / '11.sql').read_text(encoding='utf-8')
        self.assertTrue(sql.startswith('\nINSERT INTO 11 VALUES\n'))

        # empty faculty: JSON array but no SQL
        self.assertEqual(json.loads((self.output_dir / '13.json').read_text(encoding='utf-8')), [])
        self.assertFalse((self.output_dir / '13.sql').exists())

    def test_combined_file_appends(self):
        run(self.input_dir, self.output_dir)
        run(self.input_dir, self.output_dir)

        combined = (self.output_dir / 'combined.sql').read_text(encoding='utf-8')
        self.assertEqual(combined.count('INSERT INTO 11 VALUES'), 2)
        self.assertEqual(combined.count('INSERT INTO 12 VALUES'), 2)
        self.assertNotIn('INSERT INTO 13', combined)

    def test_strict_mode_skips_bad_file(self):
        report = run(self.input_dir, self.output_dir, strict=True)

        self.assertEqual(report.processed, ['11.html', '13.html'])
        self.assertEqual(report.skipped, ['12.html'])
        self.assertFalse((self.output_dir / '12.json').exists())

    def test_missing_input_dir(self):
        with self.assertRaises(OSError):
            run(Path(self.test_dir) / 'missing', self.output_dir)

    def test_cli(self):
        self.addCleanup(setattr, sys, 'excepthook', sys.excepthook)
        code = cli_main(['--input', str(self.input_dir), '--output', str(self.output_dir), '--workers', '1'])
        self.assertEqual(code, 0)
        self.assertTrue((self.output_dir / '11.json').exists())

        code = cli_main(['--input', str(Path(self.test_dir) / 'missing'), '--output', str(self.output_dir)])
        self.assertEqual(code, 1)


if __name__ == '__main__':
    unittest.main()
