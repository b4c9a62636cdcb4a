import csv
import io
import json
from datetime import date, datetime
from decimal import Decimal

from django.conf import settings


def format_cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        fmt = settings.PIPELINE.get("EXPORT_DATETIME_FORMAT", "%Y-%m-%d %H:%M:%S")
        return value.strftime(fmt)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True)
    return str(value)


def write_csv(headers, rows) -> str:
    """Render rows as CSV with every field quoted.

    Embedded double quotes are doubled (csv.QUOTE_ALL + doublequote).
    """
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, doublequote=True, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow([format_cell(v) for v in row])
    return buf.getvalue()
