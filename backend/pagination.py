"""
Cursor pagination.

A cursor is the (id, timestamp) pair of the last row a client has seen,
rendered as ``base64url("<id>:<ISO-8601 local datetime>")``. Lists are
fetched with ``size + 1`` rows; the extra row only signals that another
page exists and is never returned.
"""

import base64
import binascii
import re
from datetime import datetime
from typing import Any, Callable, Dict, Generic, List, NamedTuple, Optional, Sequence, TypeVar

from enums import ErrorCode
from security import ValidationError

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

_MAX_ID = 2**63 - 1
_BASE64URL_RE = re.compile(r"[A-Za-z0-9_-]*={0,2}")
_ID_RE = re.compile(r"[0-9]+")
_TIMESTAMP_RE = re.compile(
    r"[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}(:[0-9]{2}(\.[0-9]{1,6})?)?"
)
_TIMESTAMP_FORMATS = (
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M",
)


def _parse_local_datetime(value: str) -> Optional[datetime]:
    # strptime alone accepts unpadded and space-padded fields
    if not _TIMESTAMP_RE.fullmatch(value):
        return None
    for fmt in _TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


class Cursor(NamedTuple):
    last_id: int
    last_timestamp: datetime

    def encode(self) -> str:
        raw = f"{self.last_id}:{self.last_timestamp.isoformat()}"
        return base64.urlsafe_b64encode(raw.encode("ascii")).decode("ascii")

    @classmethod
    def decode(cls, encoded: Any) -> Optional["Cursor"]:
        """Decode a client-supplied cursor, returning None for anything malformed."""
        if not isinstance(encoded, str) or not _BASE64URL_RE.fullmatch(encoded):
            return None
        padded = encoded + "=" * (-len(encoded) % 4)
        try:
            decoded = base64.urlsafe_b64decode(padded).decode("ascii")
        except (binascii.Error, ValueError):
            return None

        parts = decoded.split(":", 1)
        if len(parts) != 2:
            return None
        id_part, timestamp_part = parts

        if not _ID_RE.fullmatch(id_part):
            return None
        last_id = int(id_part)
        if last_id <= 0 or last_id > _MAX_ID:
            return None

        last_timestamp = _parse_local_datetime(timestamp_part)
        if last_timestamp is None:
            return None
        return cls(last_id, last_timestamp)


class CursorPage(NamedTuple, Generic[T]):
    content: List[T]
    has_next: bool
    next_cursor: Optional[str]
    size: int

    def to_dict(self, serializer: Optional[Callable[[T], Any]] = None) -> Dict[str, Any]:
        items = [serializer(item) for item in self.content] if serializer else list(self.content)
        return {
            "content": items,
            "hasNext": self.has_next,
            "nextCursor": self.next_cursor,
            "size": self.size,
        }


def build_page(
    content_with_one_extra: Sequence[T],
    requested_size: int,
    cursor_of: Callable[[T], Cursor],
) -> CursorPage[T]:
    """Assemble a page from rows fetched with ``requested_size + 1``."""
    if len(content_with_one_extra) > requested_size + 1:
        raise ValidationError(
            f"Fetched {len(content_with_one_extra)} rows for a page of {requested_size}",
            error_code=ErrorCode.INVALID_CURSOR_CONTENT_SIZE,
        )

    has_next = len(content_with_one_extra) > requested_size
    content = list(content_with_one_extra[:-1] if has_next else content_with_one_extra)

    next_cursor = None
    if has_next and content:
        next_cursor = cursor_of(content[-1]).encode()

    return CursorPage(
        content=content,
        has_next=has_next,
        next_cursor=next_cursor,
        size=len(content),
    )


def parse_page_size(
    raw: Any, *, default: int = DEFAULT_PAGE_SIZE, maximum: int = MAX_PAGE_SIZE
) -> int:
    if raw is None or raw == "":
        return default
    try:
        size = int(raw)
        if size <= 0:
            raise ValueError
    except (TypeError, ValueError):
        raise ValidationError("size must be a positive integer", details={"field": "size"})
    return min(size, maximum)
