# studyjam/normalize.py
import csv
import io
import logging
from typing import Dict, Iterable, List, Mapping

import config
from studyjam.errors import UploadError
from studyjam.models import ParticipantRecord

logger = logging.getLogger(__name__)


def _decode(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def read_csv(data: bytes) -> List[Dict[str, str]]:
    """Parse an uploaded export into header-keyed rows (header names trimmed).

    Raises UploadError if there is no header, no email column or no data rows.
    """
    reader = csv.DictReader(io.StringIO(_decode(data)))
    if not reader.fieldnames:
        raise UploadError("CSV file is empty or invalid")

    headers = [(h or "").strip() for h in reader.fieldnames]
    if config.COL_EMAIL not in headers:
        raise UploadError(f"CSV missing column '{config.COL_EMAIL}'. Found columns: {headers}")
    missing = [c for c in config.EXPECTED_COLUMNS if c not in headers]
    if missing:
        logger.warning("CSV missing optional columns: %s", missing)

    rows = []
    for raw in reader:
        row = {(k or "").strip(): (v if isinstance(v, str) else "") for k, v in raw.items() if k}
        if not any(v.strip() for v in row.values()):
            continue
        rows.append(row)

    if not rows:
        raise UploadError("No data rows found in CSV")
    logger.debug("Parsed %d rows with headers %s", len(rows), headers)
    return rows


def normalize_rows(rows: Iterable[Mapping[str, str]]) -> List[ParticipantRecord]:
    """Clean parsed rows into typed records.

    Header keys are trimmed, counts default to 0 when unparsable, and rows
    without an email are dropped. When an email repeats, the first row wins.
    """
    records: List[ParticipantRecord] = []
    seen = set()
    dropped = 0
    for row in rows:
        cleaned = {str(k).strip(): v for k, v in row.items() if k is not None}
        rec = ParticipantRecord.from_row(cleaned)
        if not rec.email:
            dropped += 1
            continue
        if rec.email in seen:
            logger.warning("Duplicate row for %s ignored", rec.email)
            continue
        seen.add(rec.email)
        records.append(rec)

    if dropped:
        logger.debug("Dropped %d rows without an email", dropped)
    return records
