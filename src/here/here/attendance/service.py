from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional

from ..common.datetime_utils import SchoolClock
from ..core.constants import DEFAULT_GEOFENCE_RADIUS_METERS, DEFAULT_WAVE_CONTENT
from ..core.enums import ActionType, EventType, Role, SectionType
from ..core.exceptions import DuplicateEventError
from ..core.results import ActionResult
from ..schedules.service import ScheduleMatcher
from ..sections.model import Section
from ..sections.repository import SectionRepository
from .eligibility import EligibilityGate
from .geofence import verify_location
from .model import AgendaItem, Location, SectionStatus
from .repository import AttendanceEventRepository, PresenceRepository

logger = logging.getLogger(__name__)

_ALREADY = {
    EventType.CHECK_IN: "Already checked in today",
    EventType.CHECK_OUT: "Already checked out today",
}


def _actions_for(section: Section) -> List[ActionType]:
    if section.requires_check_in:
        return [ActionType.CHECK_IN, ActionType.CHECK_OUT]
    if section.is_presence_only:
        return [ActionType.WAVE]
    return []


class AttendanceService:
    """Student-facing event log: presence waves, check-in and check-out.

    Every operation returns an ActionResult; business-rule failures are never
    raised. Dates are taken from the school clock unless ``now`` is injected.
    """

    def __init__(
        self,
        sections: SectionRepository,
        events: AttendanceEventRepository,
        presence: PresenceRepository,
        *,
        clock: SchoolClock | None = None,
        gate: EligibilityGate | None = None,
        matcher: ScheduleMatcher | None = None,
        default_geofence_radius: int = DEFAULT_GEOFENCE_RADIUS_METERS,
    ):
        self._sections = sections
        self._events = events
        self._presence = presence
        self._clock = clock or SchoolClock()
        self._gate = gate or EligibilityGate()
        self._matcher = matcher
        self._default_radius = int(default_geofence_radius)

    def record_presence_wave(
        self, *, student_id: int, section_id: int, mood: Optional[str] = None, now: datetime | None = None
    ) -> ActionResult:
        now = now or self._clock.now()

        section = self._sections.get_by_id(section_id)
        if not section:
            return ActionResult.fail("Section not found")
        if not section.presence_enabled:
            return ActionResult.fail("Presence waves not enabled for this section")

        content = (mood or "").strip() or DEFAULT_WAVE_CONTENT
        interaction_id = self._presence.create_wave(
            student_id=student_id, section_id=section_id, on_date=now.date(), content=content, created_at=now
        )
        return ActionResult.ok({"interaction_id": interaction_id, "content": content})

    def record_check_in(
        self,
        *,
        student_id: int,
        section_id: int,
        plans: str,
        location: Optional[Location] = None,
        now: datetime | None = None,
    ) -> ActionResult:
        now = now or self._clock.now()

        section = self._sections.get_by_id(section_id)
        if not section:
            return ActionResult.fail("Section not found")
        if not section.requires_check_in:
            return ActionResult.fail("This section does not require check-in")

        plans = (plans or "").strip()
        if not plans:
            return ActionResult.fail("Plans are required to check in")

        if self._has_event(student_id, section_id, now.date(), EventType.CHECK_IN):
            return ActionResult.fail(_ALREADY[EventType.CHECK_IN])

        verified = None
        if section.section_type == SectionType.INTERNSHIP and location is not None:
            verified = verify_location(
                location, section.expected_location, section.geofence_radius or self._default_radius
            )
            if verified is False:
                logger.warning(
                    "Student %s checked in to section %s outside the expected location (%s, %s)",
                    student_id,
                    section_id,
                    location.lat,
                    location.lng,
                )

        return self._create(
            student_id=student_id,
            section_id=section_id,
            event_type=EventType.CHECK_IN,
            now=now,
            prompt_text=plans,
            location=location,
            location_verified=verified,
        )

    def record_check_out(
        self, *, student_id: int, section_id: int, progress: str, now: datetime | None = None
    ) -> ActionResult:
        now = now or self._clock.now()
        today = now.date()

        section = self._sections.get_by_id(section_id)
        if not section:
            return ActionResult.fail("Section not found")

        progress = (progress or "").strip()
        if not progress:
            return ActionResult.fail("Progress is required to check out")

        if self._has_event(student_id, section_id, today, EventType.CHECK_OUT):
            return ActionResult.fail(_ALREADY[EventType.CHECK_OUT])
        if not self._has_event(student_id, section_id, today, EventType.CHECK_IN):
            return ActionResult.fail("Must check in before checking out")

        return self._create(
            student_id=student_id,
            section_id=section_id,
            event_type=EventType.CHECK_OUT,
            now=now,
            prompt_text=progress,
        )

    def get_status(self, *, student_id: int, section_id: int, on_date: date) -> SectionStatus:
        rows = self._events.list_for_student(student_id=student_id, section_id=section_id, on_date=on_date)
        events = {e.event_type: e for e in rows}
        wave = self._presence.latest_for_student(student_id=student_id, section_id=section_id, on_date=on_date)

        check_in = events.get(EventType.CHECK_IN)
        check_out = events.get(EventType.CHECK_OUT)
        return SectionStatus(
            has_checked_in=check_in is not None,
            has_checked_out=check_out is not None,
            has_waved=wave is not None,
            plans_text=check_in.prompt_text if check_in else None,
            progress_text=check_out.prompt_text if check_out else None,
            wave_content=wave.content if wave else None,
            checked_in_at=check_in.occurred_at if check_in else None,
            checked_out_at=check_out.occurred_at if check_out else None,
            location_verified=check_in.location_verified if check_in else None,
        )

    def check_action(
        self, *, student_id: int, section_id: int, action: ActionType, target_date: date, now: datetime | None = None
    ) -> ActionResult:
        """Gate an action against the time window and today's recorded state."""
        now = now or self._clock.now()

        section = self._sections.get_by_id(section_id)
        if not section:
            return ActionResult.fail("Section not found")

        state = self.get_status(student_id=student_id, section_id=section_id, on_date=target_date)
        decision = self._gate.check_action(section, action, now=now, target_date=target_date, state=state)
        if not decision.allowed:
            return ActionResult.fail(decision.reason or "Not available")
        return ActionResult.ok()

    def get_student_agenda(
        self, *, student_id: int, on_date: date | None = None, now: datetime | None = None
    ) -> List[AgendaItem]:
        if self._matcher is None:
            raise RuntimeError("AttendanceService was built without a ScheduleMatcher")

        now = now or self._clock.now()
        on_date = on_date or now.date()

        items: List[AgendaItem] = []
        for section in self._matcher.active_sections(person_id=student_id, role=Role.STUDENT, on_date=on_date):
            status = self.get_status(student_id=student_id, section_id=section.section_id, on_date=on_date)
            actions = {
                action: self._gate.check_action(section, action, now=now, target_date=on_date, state=status)
                for action in _actions_for(section)
            }
            items.append(AgendaItem(section=section, status=status, actions=actions))
        return items

    def _has_event(self, student_id: int, section_id: int, on_date: date, event_type: EventType) -> bool:
        events = self._events.list_for_student(student_id=student_id, section_id=section_id, on_date=on_date)
        return any(e.event_type == event_type for e in events)

    def _create(
        self,
        *,
        student_id: int,
        section_id: int,
        event_type: EventType,
        now: datetime,
        prompt_text: str,
        location: Optional[Location] = None,
        location_verified: Optional[bool] = None,
    ) -> ActionResult:
        try:
            event_id = self._events.create_event(
                student_id=student_id,
                section_id=section_id,
                event_type=event_type,
                event_date=now.date(),
                occurred_at=now,
                prompt_text=prompt_text,
                location=location,
                location_verified=location_verified,
            )
        except DuplicateEventError:
            # Lost a race with a concurrent request for the same event.
            return ActionResult.fail(_ALREADY[event_type])

        return ActionResult.ok({"event_id": event_id, "location_verified": location_verified})
