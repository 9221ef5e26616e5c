from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_utc
from ..core.exceptions import IdentityNotFound
from ..identities.model import Identity, IdentitySummary
from ..identities.store import EmbeddingStore
from ..matching.matcher import Matcher, MatchResult
from .ledger import AttendanceLedger
from .model import AttendanceEvent, AttendanceStatus


@dataclass(frozen=True)
class RecognitionOutcome:
    """Result of recognize-then-mark for one query embedding."""

    match: MatchResult
    identity: Optional[Identity]
    already_marked: bool
    event: Optional[AttendanceEvent]

    def to_dict(self) -> dict:
        return {
            "match": self.match.to_dict(),
            "identity": self.identity.summary().to_dict() if self.identity else None,
            "alreadyMarked": self.already_marked,
            "event": self.event.to_dict() if self.event else None,
        }


class AttendanceService:
    """Entry point for callers (controllers, scripts).

    Composes the embedding store, matcher and ledger.
    """

    def __init__(
        self,
        store: EmbeddingStore,
        matcher: Matcher,
        ledger: AttendanceLedger,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._store = store
        self._matcher = matcher
        self._ledger = ledger
        self._clock = clock or now_utc

    def register(self, name: str, email: str, embedding) -> Identity:
        return self._store.upsert_identity(name, email, embedding)

    def recognize(self, query_embedding) -> MatchResult:
        query = self._store.validate_embedding(query_embedding)
        return self._matcher.match(query, self._store.labeled_embeddings())

    def find_identity(self, identity_id: str) -> Optional[Identity]:
        return self._store.find_by_id(identity_id)

    def today(self) -> date:
        return self._ledger.calendar_date_of(self._clock())

    def check_status(self, identity_id: str) -> AttendanceStatus:
        return self._ledger.status(identity_id, self.today())

    def mark_attendance(self, identity_id: str) -> AttendanceEvent:
        event, _ = self.record_attendance(identity_id)
        return event

    def record_attendance(self, identity_id: str) -> tuple[AttendanceEvent, bool]:
        """Mark `identity_id` for today; the flag is True if it was already marked."""
        identity = self._store.find_by_id(identity_id)
        if not identity:
            raise IdentityNotFound(identity_id)
        return self._ledger.mark_once(identity, self._clock())

    def recognize_and_mark(self, query_embedding) -> RecognitionOutcome:
        result = self.recognize(query_embedding)
        if result.is_unknown:
            return RecognitionOutcome(match=result, identity=None, already_marked=False, event=None)

        identity = self._store.find_by_id(result.label)
        if not identity:
            raise IdentityNotFound(result.label)

        event, already_marked = self._ledger.mark_once(identity, self._clock())
        return RecognitionOutcome(
            match=result,
            identity=identity,
            already_marked=already_marked,
            event=event,
        )

    def list_attendance(self) -> Sequence[AttendanceEvent]:
        return self._ledger.all_events()

    def list_identities(self) -> Sequence[IdentitySummary]:
        return [i.summary() for i in self._store.list_identities()]
