"""
CSV export and import for module records.
Imported rows are proposed through the mutation gate one create at a time.
"""

import csv
import io
from typing import Any, Dict, Iterable, List, Optional

from util.logging import logger

from .schema import Actor, GateResult

REQUIRED_IMPORT_HEADERS = {
    'projects': ['name', 'grade', 'developerOwnerName', 'contactNo', 'city', 'location'],
    'inventory': ['name', 'city', 'location'],
}


def _coerce(field: str, raw: str) -> Any:
    """Coerce numeric columns by field name; empty cells become None."""
    value = raw.strip() if raw is not None else ''
    if not value:
        return None

    try:
        if field.startswith('noOf') or field.endswith('Seats'):
            return int(value)
        if field.endswith('PerSqft') or 'Cost' in field or field.endswith('Fees'):
            return float(value)
    except ValueError:
        return None
    return value


def export_records(records: Iterable[Dict[str, Any]], columns: List[str] = None) -> str:
    """Render records as CSV text; columns default to every key in first-seen order."""
    records = list(records)
    if columns is None:
        columns = []
        for record in records:
            for key in record:
                if key not in columns:
                    columns.append(key)

    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=columns, extrasaction='ignore', lineterminator='\n')
    writer.writeheader()
    for record in records:
        writer.writerow({k: ('' if record.get(k) is None else record.get(k)) for k in columns})
    return buffer.getvalue()


def parse_records(text: str, module: str, record_type: Optional[str] = None) -> List[Dict[str, Any]]:
    """Parse CSV text into record payloads.

    Raises ValueError when the file is empty or misses the module's required headers.
    """
    if not (text or '').strip():
        raise ValueError('Empty or invalid CSV file.')

    reader = csv.DictReader(io.StringIO(text.lstrip()))
    headers = [h.strip() for h in (reader.fieldnames or [])]
    missing = [h for h in REQUIRED_IMPORT_HEADERS.get(module, []) if h not in headers]
    if missing:
        raise ValueError(f"Missing required headers: {', '.join(missing)}")

    records = []
    for row in reader:
        record = {}
        for key, raw in row.items():
            if key is None:
                continue
            field = key.strip()
            value = _coerce(field, raw)
            if value is not None:
                record[field] = value
        if not record:
            continue
        if record_type:
            record['type'] = record_type
        records.append(record)
    return records


def import_records(gate, actor: Actor, module: str, text: str,
                   record_type: Optional[str] = None) -> List[GateResult]:
    """Propose a create for every CSV row; employees end up with one pending action per row."""
    records = parse_records(text, module, record_type)
    results = [gate.propose(actor, 'create', module, record) for record in records]

    queued = sum(1 for r in results if not r.applied)
    logger.log_record_operation("import", module, details={
        "rows": len(records),
        "applied": len(records) - queued,
        "queued": queued
    })
    return results
