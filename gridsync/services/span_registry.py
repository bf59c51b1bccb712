from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from gridsync.models.raw_row import (
    EXTRA_DATA_KEY,
    ROW_SPAN_DATA_KEY,
    ROW_SPAN_KEY,
    RawRow,
    get_extra_data,
    get_row_key,
)
from gridsync.models.span import SpanDescriptor

"""Span registry: row span lookup for (row, column).

``resolve_span`` is a pure lookup over ``_extraData.rowSpanData``. Anything
missing or malformed resolves to an unmerged descriptor owned by the row itself.

``expand_row_spans`` turns the compact declaration kept on owner rows
(``_extraData.rowSpan = {column: count}``) into the per-row ``rowSpanData``
descriptors that ``resolve_span`` reads.
"""

__all__ = [
    "resolve_span",
    "expand_row_spans",
]


def resolve_span(
    raw_row: Mapping[str, Any], column_name: str, *, row_span_enabled: bool = True
) -> SpanDescriptor:
    """Resolve the SpanDescriptor for one column of one raw row.

    Parameters
    ----------
    raw_row: RawRow mapping (``rowKey`` + columns + optional ``_extraData``)
    column_name: Column to resolve
    row_span_enabled: When False every cell is treated as unmerged

    Returns
    -------
    SpanDescriptor: Stored descriptor if present and valid, otherwise unmerged
    """
    row_key = get_row_key(raw_row)
    if row_span_enabled:
        span_data = get_extra_data(raw_row).get(ROW_SPAN_DATA_KEY)
        if isinstance(span_data, Mapping):
            descriptor = SpanDescriptor.from_mapping(span_data.get(column_name))
            if descriptor is not None:
                return descriptor
    return SpanDescriptor.unmerged(row_key)


def expand_row_spans(raw_rows: list[RawRow]) -> list[RawRow]:
    """Write ``rowSpanData`` for every row covered by an owner's ``rowSpan`` declaration.

    Rows are taken in list order. An owner declaring ``{"name": 3}`` merges
    itself and the next two rows over ``name``. Counts of 1 or less are ignored;
    a count running past the end of the list is clipped.

    Parameters
    ----------
    raw_rows: Ordered raw rows; modified in place

    Returns
    -------
    list: The same list, for chaining
    """
    for index, raw_row in enumerate(raw_rows):
        declared = get_extra_data(raw_row).get(ROW_SPAN_KEY)
        if not isinstance(declared, Mapping):
            continue
        owner_key = get_row_key(raw_row)
        for column_name, count in declared.items():
            try:
                count = int(count)
            except (TypeError, ValueError):
                continue
            if count <= 1:
                continue
            members = raw_rows[index + 1:index + count]
            owner = SpanDescriptor(
                owner_row_key=owner_key, span_length=len(members) + 1, is_owner=True
            )
            _span_data(raw_row)[column_name] = owner.to_mapping()
            member = SpanDescriptor(owner_row_key=owner_key, span_length=0, is_owner=False)
            for member_row in members:
                _span_data(member_row)[column_name] = member.to_mapping()
    return raw_rows


def _span_data(raw_row: RawRow) -> dict[str, Any]:
    extra = raw_row.get(EXTRA_DATA_KEY)
    if not isinstance(extra, dict):
        extra = {}
        raw_row[EXTRA_DATA_KEY] = extra
    span_data = extra.get(ROW_SPAN_DATA_KEY)
    if not isinstance(span_data, dict):
        span_data = {}
        extra[ROW_SPAN_DATA_KEY] = span_data
    return span_data
