"""
Snapshot of an exported collection tree

A snapshot maps every document path found during export to the document's
field contents. It lives in memory for one run; dump_snapshot/load_snapshot
give it an on-disk form (JSON Lines, one document per line).
"""

import base64
import json
from collections import Counter
from collections.abc import Mapping
from datetime import datetime
from typing import Any, IO

from .paths import collection_pattern, validate_document_path

Snapshot = dict[str, dict[str, Any]]

DATETIME_TAG = '__datetime__'
BYTES_TAG = '__bytes__'
# Wraps user mappings whose only key collides with a tag
MAPPING_TAG = '__mapping__'
TAGS = (DATETIME_TAG, BYTES_TAG, MAPPING_TAG)


def summarize_snapshot(snapshot: Mapping[str, Mapping[str, Any]]) -> dict[str, int]:
    """
    Count documents per collection pattern

    Returns:
        {'users': 2, 'users/*/orders': 5}, sorted by pattern
    """
    counts = Counter(collection_pattern(path) for path in snapshot)
    return dict(sorted(counts.items()))


def _encode_value(value: Any, path: str) -> Any:
    if isinstance(value, datetime):
        return {DATETIME_TAG: value.isoformat()}
    if isinstance(value, (bytes, bytearray)):
        return {BYTES_TAG: base64.b64encode(bytes(value)).decode('ascii')}
    if isinstance(value, Mapping):
        encoded = {str(k): _encode_value(v, path) for k, v in value.items()}
        if len(encoded) == 1 and next(iter(encoded)) in TAGS:
            return {MAPPING_TAG: encoded}
        return encoded
    if isinstance(value, (list, tuple)):
        return [_encode_value(v, path) for v in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    raise TypeError(f"Cannot encode value of type {type(value).__name__} at {path}")


def _decode_value(value: Any) -> Any:
    if isinstance(value, dict):
        if len(value) == 1 and DATETIME_TAG in value:
            return datetime.fromisoformat(value[DATETIME_TAG])
        if len(value) == 1 and BYTES_TAG in value:
            return base64.b64decode(value[BYTES_TAG])
        if len(value) == 1 and MAPPING_TAG in value:
            return {k: _decode_value(v) for k, v in value[MAPPING_TAG].items()}
        return {k: _decode_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_decode_value(v) for v in value]
    return value


def dump_snapshot(snapshot: Mapping[str, Mapping[str, Any]], fh: IO[str]) -> int:
    """
    Write a snapshot as JSON Lines

    Args:
        snapshot: Snapshot to write
        fh: Text file opened for writing

    Returns:
        Number of records written
    """
    written = 0
    for path in sorted(snapshot):
        record = {'path': path, 'data': _encode_value(snapshot[path], path)}
        fh.write(json.dumps(record, sort_keys=True, ensure_ascii=False))
        fh.write('\n')
        written += 1
    return written


def load_snapshot(fh: IO[str]) -> Snapshot:
    """Read a snapshot written by dump_snapshot"""
    snapshot: Snapshot = {}
    for line_number, line in enumerate(fh, 1):
        line = line.strip()
        if not line:
            continue
        try:
            record = json.loads(line)
            path = record['path']
            data = record['data']
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            raise ValueError(f"Malformed snapshot record on line {line_number}: {e}") from e

        validate_document_path(path)
        if not isinstance(data, dict):
            raise ValueError(f"Document data must be an object on line {line_number}")
        if path in snapshot:
            raise ValueError(f"Duplicate path {path} on line {line_number}")
        snapshot[path] = _decode_value(data)
    return snapshot
