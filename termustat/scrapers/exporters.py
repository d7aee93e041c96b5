"""JSON and bulk SQL artifacts for scraped course records."""

import json
from pathlib import Path

# weight and capacity are written unquoted
NUMERIC_COLUMNS = {2, 3}


def escape_sql(value):
    return value.replace("'", "''")


def _sql_value(index, value):
    if index in NUMERIC_COLUMNS:
        return value if value.isdigit() else 'NULL'
    return f"'{escape_sql(value)}'"


def generate_sql_insert(faculty, records):
    """
    Build one INSERT statement holding every record of a faculty.

    Rows carry a leading NULL for the autogenerated id followed by the 14
    record columns. Returns an empty string when there is nothing to insert.
    """
    if not records:
        return ''

    rows = []
    for record in records:
        values = ','.join(_sql_value(i, value) for i, value in enumerate(record.columns()))
        rows.append(f"(NULL,{values})")

    return f"\nINSERT INTO {faculty} VALUES\n" + ",\n".join(rows) + ";"


def write_json_output(output_dir, faculty, records):
    """Write <faculty>.json as a pretty-printed array of records."""
    json_path = Path(output_dir) / f"{faculty}.json"
    with open(json_path, "w", encoding="utf-8") as f:
        json.dump([record.to_dict() for record in records], f, ensure_ascii=False, indent=2)
    return json_path


def write_sql_file(output_dir, faculty, content):
    """Write <faculty>.sql; nothing is written for empty content."""
    if not content:
        return None
    sql_path = Path(output_dir) / f"{faculty}.sql"
    with open(sql_path, "w", encoding="utf-8") as f:
        f.write(content)
    return sql_path
