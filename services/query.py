"""Translate list-endpoint query strings into filter, projection, sort and page.

Query strings use bracket keys for comparisons, e.g.
``?rating[gte]=4&status[in]=active,inactive&select=name,rating&sort=-rating&page=2``.
"""

import math
import re
from dataclasses import dataclass
from typing import Any, Iterable, Optional

RESERVED_PARAMS = ("select", "sort", "page", "limit")
COMPARISON_OPERATORS = frozenset({"gt", "gte", "lt", "lte", "in"})
DEFAULT_SORT = [("rating", True)]

_BRACKET_KEY = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])+)$")
_LEADING_INT = re.compile(r"^\s*[+-]?\d+")


@dataclass(frozen=True)
class ListQuery:
    filters: dict
    fields: Optional[list[str]]
    sort: list[tuple[str, bool]]  # (field, descending)
    page: int
    limit: int

    @property
    def start_index(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def end_index(self) -> int:
        return self.page * self.limit


def _split_key(key: str) -> list[str]:
    match = _BRACKET_KEY.match(key)
    if not match:
        return [key]
    return [match.group(1)] + re.findall(r"\[([^\[\]]*)\]", match.group(2))


def nest_query_params(items: Iterable[tuple[str, str]]) -> dict:
    """Build a nested mapping from flat ``(key, value)`` query pairs.

    ``rating[gte]=4`` becomes ``{"rating": {"gte": "4"}}`` and a key given
    more than once collects its values into a list. A key that is used both
    as a plain value and as a parent of bracketed keys keeps the last form.
    """
    nested: dict = {}
    for key, value in items:
        path = [part for part in _split_key(key) if part]
        if not path:
            continue
        node = nested
        for part in path[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = node[part] = {}
            node = child
        leaf = path[-1]
        if leaf in node and not isinstance(node[leaf], dict):
            existing = node[leaf]
            node[leaf] = existing + [value] if isinstance(existing, list) else [existing, value]
        else:
            node[leaf] = value
    return nested


def rewrite_operators(filters: dict, depth: int = 0) -> dict:
    """Prefix comparison operators nested under a field name with ``$``.

    Field names at the top level are left alone, so a field literally named
    ``in`` or ``gt`` is still filtered by equality.
    """
    rewritten = {}
    for key, value in filters.items():
        if depth > 0 and key in COMPARISON_OPERATORS:
            key = f"${key}"
        rewritten[key] = rewrite_operators(value, depth + 1) if isinstance(value, dict) else value
    return rewritten


def parse_int(value: Any, default: int) -> int:
    """Parse the leading integer of ``value``; fall back to ``default`` if absent or below 1."""
    if isinstance(value, list):
        value = value[0] if value else None
    if not isinstance(value, str):
        return default
    match = _LEADING_INT.match(value)
    if not match:
        return default
    parsed = int(match.group(0))
    return parsed if parsed >= 1 else default


def _tokens(value: Any) -> list[str]:
    if isinstance(value, list):
        value = ",".join(v for v in value if isinstance(v, str))
    if not isinstance(value, str):
        return []
    return [token.strip() for token in value.split(",") if token.strip()]


def parse_sort(value: Any) -> list[tuple[str, bool]]:
    sort = []
    for token in _tokens(value):
        descending = token.startswith("-")
        field = token.lstrip("-+")
        if field:
            sort.append((field, descending))
    return sort or list(DEFAULT_SORT)


def build_list_query(
    items: Iterable[tuple[str, str]],
    default_limit: int = 10,
    max_limit: Optional[int] = None,
) -> ListQuery:
    """Split raw query pairs into a ``ListQuery``."""
    params = nest_query_params(items)
    raw_filters = {key: value for key, value in params.items() if key not in RESERVED_PARAMS}

    limit = parse_int(params.get("limit"), default_limit)
    if max_limit is not None:
        limit = min(limit, max_limit)

    return ListQuery(
        filters=rewrite_operators(raw_filters),
        fields=_tokens(params.get("select")) or None,
        sort=parse_sort(params.get("sort")),
        page=parse_int(params.get("page"), 1),
        limit=limit,
    )


def build_pagination(query: ListQuery, total: int) -> dict:
    """Pagination summary for one page of ``total`` matching records."""
    pagination = {
        "total": total,
        "pages": math.ceil(total / query.limit),
        "current_page": query.page,
        "limit": query.limit,
    }
    if query.end_index < total:
        pagination["next"] = {"page": query.page + 1, "limit": query.limit}
    if query.start_index > 0:
        pagination["prev"] = {"page": query.page - 1, "limit": query.limit}
    return pagination
