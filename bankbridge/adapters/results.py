"""Single-result extraction for uniquely keyed partner responses.

List endpoints always wrap their results in an array under the resource's
plural key, even when the request addressed a single id. Array position is
never meaningful: a uniquely keyed answer must hold exactly one element.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence, TypeVar

from bankbridge.domain.errors import AmbiguousResult, EmptyResult, MalformedRecord

T = TypeVar("T")


def only_element(records: Sequence[T]) -> T:
    """Return the sole element of ``records``.

    Raises:
        EmptyResult: If the sequence is empty.
        AmbiguousResult: If the sequence holds more than one element.
    """
    count = len(records)
    if count == 0:
        raise EmptyResult("Partner returned no result where one was expected.")
    if count > 1:
        raise AmbiguousResult(
            f"Partner returned {count} results where one was expected.",
            count=count,
        )
    return records[0]


def collection(payload: Mapping[str, Any], key: str) -> list:
    """Return the array stored under ``key`` in a partner list response."""
    if key not in payload:
        raise MalformedRecord(f"Response is missing the '{key}' collection.", field=key)
    items = payload[key]
    if items is None:
        return []
    if not isinstance(items, list):
        raise MalformedRecord(f"Response field '{key}' is not an array.", field=key)
    return items


def only_record(payload: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    """Unwrap ``payload[key]`` through ``only_element`` and check it is an object."""
    record = only_element(collection(payload, key))
    if not isinstance(record, Mapping):
        raise MalformedRecord(f"Element of '{key}' is not an object.", field=key)
    return record


__all__ = ["collection", "only_element", "only_record"]
