from __future__ import annotations

import logging
import random
from threading import RLock
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence
from uuid import uuid4

from ..core import (
    WEEKDAY_NAMES,
    encode_plan,
    expand_patterns,
    parse_clock,
    parse_date_key,
    resolve_mutual_dates,
    today_key,
)
from ..domain import ConfirmedPlan, PlannerState, RecurringPattern, describe_pattern, utc_now
from ..domain.models import DEFAULT_PLAN_TIME
from ..errors import NotFoundError, PersistenceError, UnavailableDateError, ValidationError
from .context import ServiceContext

logger = logging.getLogger(__name__)

Chooser = Callable[[Sequence[str]], str]

_WEEKDAY_MESSAGE = "day must be an integer between 0 and 6"


def _new_id() -> str:
    return uuid4().hex


def _require_text(value: Optional[str], field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def _parse_weekday(value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError(_WEEKDAY_MESSAGE)
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(_WEEKDAY_MESSAGE)
        value = int(value)
    try:
        day = int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(_WEEKDAY_MESSAGE) from exc
    if not 0 <= day <= 6:
        raise ValidationError(_WEEKDAY_MESSAGE)
    return day


class PlannerService:
    """Owns the shared planner state and routes every change through the gateway.

    The HTTP layer calls into one instance from a thread pool, so every public
    method holds the instance lock while it reads or changes the state.
    """

    def __init__(self, context: Optional[ServiceContext] = None) -> None:
        self.context = context or ServiceContext()
        self._state: Optional[PlannerState] = None
        self._lock = RLock()
        self.degraded = False

    # Loading and saving -------------------------------------------------

    @property
    def state(self) -> PlannerState:
        with self._lock:
            if self._state is None:
                return self.load()
            return self._state

    def load(self) -> PlannerState:
        with self._lock:
            try:
                state = self.context.gateway.load()
                self.degraded = False
                logger.info("Planner data loaded from store")
            except PersistenceError:
                fallback = self.context.fallback
                if fallback is None or not fallback.exists():
                    raise
                logger.warning("Store unavailable, loading planner data from local cache %s", fallback.path)
                state = fallback.load()
                self.degraded = True
            self._state = state
            return state

    def _persist(self) -> None:
        state = self.state
        try:
            self.context.gateway.save(state)
        except PersistenceError as exc:
            fallback = self.context.fallback
            logger.error("Saving planner data failed: %s", exc)
            if fallback is None:
                raise
            try:
                fallback.save(state)
            except PersistenceError:
                logger.exception("Local cache write failed as well")
                raise exc
            logger.warning("Planner data written to local cache %s", fallback.path)
            raise PersistenceError(
                f"Durable save failed; changes kept in local cache {fallback.path}",
                fallback_path=fallback.path,
            ) from exc

    def _commit(self, candidate: PlannerState) -> None:
        """Save ``candidate`` and only then make it the live state."""
        self.context.gateway.save(candidate)
        self._state = candidate

    def today(self) -> str:
        return today_key(self.context.clock)

    # Availability -------------------------------------------------------

    def mark_unavailable(self, day: str) -> None:
        key = parse_date_key(day)
        with self._lock:
            self.state.availability.mark_unavailable(key)
            self._persist()

    def mark_available(self, day: str) -> None:
        key = parse_date_key(day)
        with self._lock:
            self.state.availability.mark_available(key)
            self._persist()

    def toggle_unavailable(self, day: str) -> bool:
        key = parse_date_key(day)
        with self._lock:
            now_unavailable = self.state.availability.toggle_unavailable(key)
            self._persist()
            return now_unavailable

    def select(self, day: str) -> bool:
        key = parse_date_key(day)
        with self._lock:
            try:
                now_selected = self.state.availability.select(key)
            except UnavailableDateError:
                logger.info("Selection of unavailable date %s rejected", key)
                raise
            self._persist()
            return now_selected

    def clear_all_unavailable(self) -> None:
        with self._lock:
            self.state.availability.clear_all_unavailable()
            self._persist()

    def set_unavailable_dates(self, days: Iterable[str]) -> int:
        keys = {parse_date_key(day) for day in days}
        with self._lock:
            self.state.availability.replace_unavailable(keys)
            self._persist()
        return len(keys)

    def set_selected_dates(self, days: Iterable[str]) -> int:
        keys = {parse_date_key(day) for day in days}
        with self._lock:
            self.state.availability.replace_selected(keys)
            self._persist()
        return len(keys)

    def mutual_dates(self) -> List[str]:
        with self._lock:
            availability = self.state.availability
            return resolve_mutual_dates(availability.selected, availability.unavailable, self.today())

    # Recurring patterns -------------------------------------------------

    def add_pattern(self, label: str, weekday: Any, day_name: Optional[str] = None) -> RecurringPattern:
        label = _require_text(label, "type")
        day = _parse_weekday(weekday)
        name = (day_name or "").strip() or WEEKDAY_NAMES[day]
        pattern = RecurringPattern(
            id=_new_id(),
            weekday=day,
            label=label,
            day_name=name,
            description=describe_pattern(name, label),
            created_at=utc_now(),
        )
        with self._lock:
            self.state.recurring_patterns.append(pattern)
            self._apply_patterns_in_memory()
            self._persist()
        logger.info("Recurring pattern %s added: %s", pattern.id, pattern.description)
        return pattern

    def remove_pattern(self, pattern_id: str) -> None:
        with self._lock:
            patterns = self.state.recurring_patterns
            remaining = [pattern for pattern in patterns if pattern.id != str(pattern_id)]
            if len(remaining) == len(patterns):
                raise NotFoundError(f"Pattern {pattern_id} not found")
            self.state.recurring_patterns = remaining
            self._persist()

    def apply_patterns(self) -> int:
        """Re-project every pattern from today and return how many dates it covers."""
        with self._lock:
            count = self._apply_patterns_in_memory()
            self._persist()
            return count

    def _apply_patterns_in_memory(self) -> int:
        days = expand_patterns(
            self.state.recurring_patterns,
            self.context.clock(),
            self.context.settings.planner.horizon_days,
        )
        availability = self.state.availability
        for key in days:
            availability.mark_unavailable(key)
        return len(days)

    # Plans --------------------------------------------------------------

    def confirm(
        self,
        day: str,
        activity: str,
        time: Optional[str] = None,
        location: Optional[str] = None,
        *,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
    ) -> ConfirmedPlan:
        activity = _require_text(activity, "activity")
        key = parse_date_key(_require_text(day, "date"))
        planner_settings = self.context.settings.planner
        start = (start_time or planner_settings.default_start_time).strip()
        end = (end_time or planner_settings.default_end_time).strip()
        parse_clock(start)
        parse_clock(end)

        with self._lock:
            availability = self.state.availability
            if availability.is_unavailable(key):
                raise UnavailableDateError([key])
            if not availability.is_selected(key):
                raise ValidationError(f"Date {key} has not been selected")

            plan = ConfirmedPlan(
                id=_new_id(),
                date=key,
                activity=activity,
                time=(time or "").strip() or DEFAULT_PLAN_TIME,
                location=(location or "").strip(),
                start_time=start,
                end_time=end,
                created_at=utc_now(),
            )
            candidate = self.state.copy()
            candidate.confirmed_plans.append(plan)
            candidate.availability.discard_selected(key)
            self._commit(candidate)
        logger.info("Plan %s confirmed for %s: %s", plan.id, key, activity)
        return plan

    def get_plan(self, plan_id: str) -> ConfirmedPlan:
        with self._lock:
            plan = self.state.find_plan(str(plan_id))
        if plan is None:
            raise NotFoundError(f"Plan {plan_id} not found")
        return plan

    def delete_plan(self, plan_id: str) -> None:
        with self._lock:
            plan = self.get_plan(plan_id)
            self.state.confirmed_plans.remove(plan)
            self._persist()

    def export_plan_ics(self, plan_id: str) -> bytes:
        plan = self.get_plan(plan_id)
        planner_settings = self.context.settings.planner
        return encode_plan(
            plan,
            tz=self.context.tz,
            prodid=planner_settings.prodid,
            summary_prefix=planner_settings.summary_prefix,
            description=planner_settings.event_description,
        )

    # Custom activities --------------------------------------------------

    def add_custom_activity(self, name: str) -> List[str]:
        cleaned = _require_text(name, "activity name")
        with self._lock:
            activities = self.state.custom_activities
            if cleaned in activities:
                raise ValidationError(f"Activity {cleaned!r} already exists")
            activities.append(cleaned)
            self._persist()
            return list(activities)

    def remove_custom_activity(self, name: str) -> List[str]:
        with self._lock:
            activities = self.state.custom_activities
            if name not in activities:
                raise NotFoundError(f"Activity {name!r} not found")
            activities.remove(name)
            self._persist()
            return list(activities)

    def suggest_activity(self, name: str, chooser: Chooser = random.choice) -> ConfirmedPlan:
        """Confirm ``name`` on one of the current mutual dates."""
        with self._lock:
            candidates = self.mutual_dates()
            if not candidates:
                raise NotFoundError("No available dates to suggest activities for")
            return self.confirm(chooser(candidates), name)

    # Whole-state operations --------------------------------------------

    def set_calendar_connected(self, connected: bool) -> None:
        with self._lock:
            self.state.calendar_connected = bool(connected)
            self._persist()

    def replace_state(self, record: Dict[str, Any]) -> PlannerState:
        for key in ("unavailableDates", "selectedDates"):
            if not isinstance(record.get(key), list):
                raise ValidationError("Invalid data format - arrays required")
        state = self._state_from_record(record)
        with self._lock:
            self._state = state
            self._persist()
        return state

    def export_backup(self) -> Dict[str, Any]:
        with self._lock:
            return self.state.to_record()

    def import_backup(self, record: Dict[str, Any]) -> PlannerState:
        if not record.get("version") or not isinstance(record.get("unavailableDates"), list):
            raise ValidationError("Invalid backup file format")
        state = self._state_from_record(record)
        with self._lock:
            self._state = state
            self._persist()
        logger.info("Planner data imported from backup")
        return state

    def _state_from_record(self, record: Dict[str, Any]) -> PlannerState:
        for item in record.get("recurringPatterns") or []:
            if not isinstance(item, dict):
                raise ValidationError("Invalid planner data: recurring patterns must be objects")
            _parse_weekday(item.get("day"))
        try:
            state = PlannerState.from_record(record)
        except (KeyError, TypeError, ValueError) as exc:
            raise ValidationError(f"Invalid planner data: {exc}") from exc
        availability = state.availability
        for day in availability.unavailable | availability.selected:
            parse_date_key(day)
        for plan in state.confirmed_plans:
            parse_date_key(plan.date)
            parse_clock(plan.start_time)
            parse_clock(plan.end_time)
        return state


__all__ = ["PlannerService"]
