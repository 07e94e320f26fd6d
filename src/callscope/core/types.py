"""Type definitions for callscope."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date
from enum import Enum
from typing import Any, Optional


class SessionKind(Enum):
    """Kind of communication session."""

    AUDIO = "AUDIO"
    SMS = "SMS"

    @classmethod
    def parse(cls, value: Any) -> "SessionKind":
        """Parse a raw kind value; anything that is not SMS is audio."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.strip().upper() == "SMS":
            return cls.SMS
        return cls.AUDIO


class SortOption(Enum):
    """Ordering applied to a filtered result set."""

    DATE_DESC = "date_desc"
    DATE_ASC = "date_asc"
    DURATION_DESC = "duration_desc"
    SOURCE_NUMBER = "source_num"
    DEST_NUMBER = "dest_num"
    SOURCE_NAME = "source_name"
    DEST_NAME = "dest_name"


class LegalCategory(Enum):
    """Category of a legal reference."""

    ARTICLE = "article"
    FACT = "fact"
    TAG = "tag"


class LegalStatus(Enum):
    """Lifecycle status of a legal reference."""

    ACTIVE = "active"
    ARCHIVED = "archived"


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text else None


def _to_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class Session:
    """One transcript record (call or SMS) with metadata and content.

    Sessions are immutable; linking legal references produces a replaced
    record (see `SessionRepository.link_legal_reference`).
    """

    session_id: str
    target: str
    date: str  # DD.MM.YYYY
    kind: SessionKind
    content: str
    source_file_name: str = ""
    target_name: Optional[str] = None
    source_number: Optional[str] = None
    source_name: Optional[str] = None
    destination_number: Optional[str] = None
    destination_name: Optional[str] = None
    start_time: Optional[str] = None  # HH:MM:SS
    end_time: Optional[str] = None
    duration: Optional[str] = None  # HH:MM:SS or MM:SS
    start_page: int = 0
    end_page: int = 0
    summary: Optional[str] = None
    legal_reference_ids: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_audio(self) -> bool:
        return self.kind is SessionKind.AUDIO

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Session":
        """Build a session from its persisted (camelCase) representation.

        Unknown keys are ignored and missing optional keys become None.

        Args:
            data: Mapping as stored in project.json / manifest.json.

        Returns:
            Session instance.

        Raises:
            KeyError: If ``sessionId`` is missing.
        """
        return cls(
            session_id=str(data["sessionId"]),
            target=str(data.get("target") or ""),
            date=str(data.get("date") or ""),
            kind=SessionKind.parse(data.get("type")),
            content=str(data.get("content") or ""),
            source_file_name=str(data.get("sourceFileName") or ""),
            target_name=_opt_str(data.get("targetName")),
            source_number=_opt_str(data.get("sourceNumber")),
            source_name=_opt_str(data.get("sourceName")),
            destination_number=_opt_str(data.get("destinationNumber")),
            destination_name=_opt_str(data.get("destinationName")),
            start_time=_opt_str(data.get("startTime")),
            end_time=_opt_str(data.get("endTime")),
            duration=_opt_str(data.get("duration")),
            start_page=_to_int(data.get("startPage")),
            end_page=_to_int(data.get("endPage")),
            summary=_opt_str(data.get("summary")),
            legal_reference_ids=frozenset(
                str(ref) for ref in data.get("legalReferenceIds") or ()
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted (camelCase) representation."""
        data: dict[str, Any] = {
            "sessionId": self.session_id,
            "target": self.target,
            "date": self.date,
            "type": self.kind.value,
            "content": self.content,
            "sourceFileName": self.source_file_name,
            "startPage": self.start_page,
            "endPage": self.end_page,
        }
        optional = {
            "targetName": self.target_name,
            "sourceNumber": self.source_number,
            "sourceName": self.source_name,
            "destinationNumber": self.destination_number,
            "destinationName": self.destination_name,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "duration": self.duration,
            "summary": self.summary,
        }
        data.update({key: value for key, value in optional.items() if value is not None})
        if self.legal_reference_ids:
            data["legalReferenceIds"] = sorted(self.legal_reference_ids)
        return data


@dataclass(frozen=True)
class SavedTag:
    """Named, persisted set of session ids used to scope search."""

    id: str
    name: str
    timestamp: int  # milliseconds since epoch
    session_ids: tuple[str, ...]
    filter_description: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SavedTag":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            timestamp=_to_int(data.get("timestamp")),
            session_ids=tuple(str(sid) for sid in data.get("sessionIds") or ()),
            filter_description=str(data.get("filterDescription") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "timestamp": self.timestamp,
            "sessionIds": list(self.session_ids),
            "filterDescription": self.filter_description,
        }


@dataclass(frozen=True)
class LegalReference:
    """Categorized annotation (article, fact or free-form tag) linkable to sessions."""

    id: str
    category: LegalCategory
    label: str
    description: Optional[str] = None
    status: LegalStatus = LegalStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status is LegalStatus.ACTIVE

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LegalReference":
        """Build a reference from its persisted representation.

        Raises:
            KeyError: If ``id`` is missing.
            ValueError: If the category or status is not recognized.
        """
        return cls(
            id=str(data["id"]),
            category=LegalCategory(str(data.get("category", "tag")).lower()),
            label=str(data.get("label") or ""),
            description=_opt_str(data.get("description")),
            status=LegalStatus(str(data.get("status", "active")).lower()),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "category": self.category.value,
            "label": self.label,
            "status": self.status.value,
        }
        if self.description is not None:
            data["description"] = self.description
        return data


@dataclass(frozen=True)
class ActiveFilterSet:
    """Committed snapshot of every filter input.

    Attributes:
        session: Comma-separated session id fragments.
        content: Boolean/fuzzy content query.
        date_start: Inclusive lower date bound (ISO or DD.MM.YYYY).
        date_end: Inclusive upper date bound (ISO or DD.MM.YYYY).
        time_start: Lower time-of-day bound, HH:MM.
        time_end: Upper time-of-day bound, HH:MM. Wraps midnight when earlier than time_start.
        min_duration: Minimum duration in seconds (audio only).
        max_duration: Maximum duration in seconds (audio only).
        source_numbers: Accepted resolved source numbers.
        dest_numbers: Accepted resolved destination numbers.
        source_speakers: Accepted resolved source speakers.
        dest_speakers: Accepted resolved destination speakers.
        articles: Accepted article labels.
        facts: Accepted fact labels.
        legal_tags: Accepted free-form legal tag labels.
    """

    session: str = ""
    content: str = ""
    date_start: str | date | None = None
    date_end: str | date | None = None
    time_start: str = ""
    time_end: str = ""
    min_duration: Optional[int] = None
    max_duration: Optional[int] = None
    source_numbers: tuple[str, ...] = ()
    dest_numbers: tuple[str, ...] = ()
    source_speakers: tuple[str, ...] = ()
    dest_speakers: tuple[str, ...] = ()
    articles: tuple[str, ...] = ()
    facts: tuple[str, ...] = ()
    legal_tags: tuple[str, ...] = ()

    def is_empty(self) -> bool:
        """True when no filter input is set."""
        return all(
            getattr(self, item.name) in (None, "", ())
            for item in fields(self)
        )


@dataclass
class IdentityCatalog:
    """Resolved identities available for filtering, plus the raw ones behind them."""

    numbers: list[str] = field(default_factory=list)
    speakers: list[str] = field(default_factory=list)
    raw_identities: list[str] = field(default_factory=list)


@dataclass
class SourceFileSummary:
    """Loaded source file and the number of sessions it contributed."""

    name: str
    count: int
