"""Import reconciliation.

Diffs an incoming session list against a festival's current sessions and
classifies every record into exactly one bucket:

- to_update: incoming key matches a current session (updated in place)
- to_create: incoming key has no current match
- to_keep:   current session absent from the import but holding bookings
- to_delete: current session absent from the import with no bookings

Sessions with bookings never land in to_delete.
"""

from dataclasses import dataclass, field
from difflib import SequenceMatcher

from festivals.domain.models import IncomingSession, NaturalKey, Session

SAMPLE_SIZE = 5
SUGGESTION_LIMIT = 20
SIMILARITY_THRESHOLD = 0.7


@dataclass(frozen=True)
class SessionUpdate:
    existing: Session
    incoming: IncomingSession

    @property
    def changes(self) -> list[str]:
        return describe_changes(self.existing, self.incoming)


@dataclass(frozen=True)
class SuggestedMatch:
    """An unmatched import row that probably edits an existing session."""

    incoming: IncomingSession
    existing: Session
    similarity: float
    reason: str

    def to_dict(self) -> dict:
        return {
            "incoming": {
                "title": self.incoming.title,
                "day": self.incoming.day,
                "start_time": self.incoming.start_time,
                "end_time": self.incoming.end_time,
            },
            "existing": {
                "id": str(self.existing.id),
                "title": self.existing.title,
                "day": self.existing.day,
                "start_time": self.existing.start_time,
                "end_time": self.existing.end_time,
                "bookings": len(self.existing.bookings),
                "participants": self.existing.booked_spots,
            },
            "reason": self.reason,
            "similarity": round(self.similarity, 2),
        }


@dataclass
class MergePlan:
    to_update: list[SessionUpdate] = field(default_factory=list)
    to_create: list[IncomingSession] = field(default_factory=list)
    to_keep: list[Session] = field(default_factory=list)
    to_delete: list[Session] = field(default_factory=list)

    def summary(self, sample_size: int = SAMPLE_SIZE) -> dict:
        return {
            "to_update": len(self.to_update),
            "to_create": len(self.to_create),
            "to_keep": len(self.to_keep),
            "to_delete": len(self.to_delete),
            "sample": self.sample(sample_size),
        }

    def sample(self, size: int = SAMPLE_SIZE) -> list[dict]:
        """A few entries per bucket, kept sessions first since they need review."""
        entries: list[dict] = []
        for session in self.to_keep[:size]:
            entries.append(
                {
                    "action": "keep",
                    **_describe(session),
                    "bookings": len(session.bookings),
                    "participants": session.booked_spots,
                }
            )
        for session in self.to_delete[:size]:
            entries.append({"action": "delete", **_describe(session)})
        for update in self.to_update[:size]:
            entries.append({"action": "update", **_describe(update.incoming), "changes": update.changes})
        for incoming in self.to_create[:size]:
            entries.append({"action": "create", **_describe(incoming)})
        return entries


def _describe(session: Session | IncomingSession) -> dict:
    return {
        "title": session.title,
        "day": session.day,
        "start_time": session.start_time,
        "end_time": session.end_time,
    }


def reconcile(current: list[Session], incoming: list[IncomingSession]) -> MergePlan:
    """Classify current and incoming sessions by (day, start_time, title).

    Keys compare by exact string equality. When several incoming rows share a
    key, the first one updates the matching session and the rest are created,
    so each incoming row still lands in exactly one bucket.
    """
    plan = MergePlan()
    unmatched: dict[NaturalKey, Session] = {}
    for session in current:
        unmatched.setdefault(session.natural_key, session)

    # Current sessions sharing a key with an earlier one can never be matched.
    leftovers = [s for s in current if unmatched.get(s.natural_key) is not s]

    for row in incoming:
        existing = unmatched.pop(row.natural_key, None)
        if existing is None:
            plan.to_create.append(row)
        else:
            plan.to_update.append(SessionUpdate(existing=existing, incoming=row))

    for session in [*unmatched.values(), *leftovers]:
        if session.is_protected:
            plan.to_keep.append(session)
        else:
            plan.to_delete.append(session)

    return plan


def describe_changes(existing: Session, incoming: IncomingSession) -> list[str]:
    """Human readable field changes an update would apply."""
    changes: list[str] = []
    old, new = existing.details, incoming.details

    if existing.end_time != incoming.end_time:
        changes.append(f"End time: {existing.end_time} -> {incoming.end_time}")
    if old.level != new.level:
        changes.append(f'Level: "{old.level or "none"}" -> "{new.level or "none"}"')
    if old.teachers != new.teachers:
        changes.append(f'Teachers: "{", ".join(old.teachers)}" -> "{", ".join(new.teachers)}"')
    if old.styles != new.styles:
        changes.append(f'Styles: "{", ".join(old.styles)}" -> "{", ".join(new.styles)}"')
    if old.location != new.location:
        changes.append(f'Location: "{old.location or "none"}" -> "{new.location or "none"}"')
    if old.capacity != new.capacity:
        changes.append(f"Capacity: {old.capacity or 'none'} -> {new.capacity or 'none'}")
    if old.description != new.description:
        changes.append("Description changed")
    return changes


def title_similarity(a: str, b: str) -> float:
    a, b = a.strip().lower(), b.strip().lower()
    if a == b:
        return 1.0
    if not a and not b:
        return 1.0
    return SequenceMatcher(None, a, b).ratio()


def suggest_matches(plan: MergePlan, limit: int = SUGGESTION_LIMIT) -> list[SuggestedMatch]:
    """Pair rows about to be created with sessions about to go away.

    A row whose title equals exactly one leaving session's title suggests a
    schedule move; otherwise titles at least 70% similar suggest a typo fix.
    Each existing session keeps only its best candidate. Suggestions are
    advisory and do not alter the plan.
    """
    leaving = [*plan.to_keep, *plan.to_delete]
    best: dict[str, SuggestedMatch] = {}

    def offer(match: SuggestedMatch) -> None:
        key = str(match.existing.id)
        current = best.get(key)
        if current is None or match.similarity > current.similarity:
            best[key] = match

    for row in plan.to_create:
        title = row.title.strip().lower()
        same_title = [s for s in leaving if s.title.strip().lower() == title]
        if len(same_title) == 1:
            offer(
                SuggestedMatch(
                    incoming=row,
                    existing=same_title[0],
                    similarity=1.0,
                    reason="Same title, different schedule",
                )
            )
        elif not same_title:
            for session in leaving:
                similarity = title_similarity(row.title, session.title)
                if SIMILARITY_THRESHOLD <= similarity < 1.0:
                    offer(
                        SuggestedMatch(
                            incoming=row,
                            existing=session,
                            similarity=similarity,
                            reason=f"Similar title ({round(similarity * 100)}% match)",
                        )
                    )

    ranked = sorted(best.values(), key=lambda match: match.similarity, reverse=True)
    return ranked[:limit]
