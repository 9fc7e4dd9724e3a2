"""
Whole-schedule optimization passes: time blocking, commute reduction,
workload balancing and energy alignment.

Each pass is a greedy local search over single-event moves. A move is kept
only when it strictly improves the pass's own metric without lowering the
overall schedule score, and a pass repeats until no move helps. A pass that
finds nothing returns the very list it was given.
"""

import logging
from datetime import date, datetime
from typing import Callable, List, Optional

import pytz

from calendar_engine.config import ScoringConfig, DEFAULT_SCORING_CONFIG
from calendar_engine.models import ImpactLevel
from calendar_engine.schemas import CalendarEvent, CalendarPreferences, ScheduleImprovement, ScheduleOptimizationResult
from calendar_engine.services.travel import TravelTimeEstimator, is_physical_location
from ..core.calendar import get_timezone, get_day_schedule, day_window, break_windows
from ..core.candidates import generate_day_slots
from ..core.time_slot import intervals_overlap
from ..scoring.priority_scoring import is_high_priority
from ..scoring.schedule_scoring import (
    calculate_schedule_score, energy_alignment_score, travel_feasibility_score,
    workload_balance_score, time_blocking_score,
)
from ..scoring.travel_scoring import transfer_feasibility
from ..utils.slot_utils import (
    event_duration, move_event, is_movable, can_change_day, booked_hours_on_day, week_dates,
)

logger = logging.getLogger(__name__)

EPSILON = 1e-9


class ScheduleOptimizer:
    """
    Runs the optimization passes for one user's working calendar.
    Expects events already expressed in the user's timezone.
    """

    def __init__(self, preferences: CalendarPreferences, estimator: TravelTimeEstimator,
                 config: ScoringConfig = DEFAULT_SCORING_CONFIG, now: Optional[datetime] = None):
        self.preferences = preferences
        self.tz: pytz.BaseTzInfo = get_timezone(preferences)
        self.estimator = estimator
        self.config = config
        self.now = now

    # ----------------- Scores ---------------------

    def schedule_score(self, events: List[CalendarEvent]) -> float:
        return calculate_schedule_score(events, self.estimator, self.config)

    # ----------------- Move feasibility ---------------------

    def fits(self, events: List[CalendarEvent], index: int, start: datetime) -> bool:
        """Can events[index] start at start without leaving working hours or colliding?"""
        end = start + event_duration(events[index])
        day = start.date()
        schedule = get_day_schedule(day, self.preferences.working_hours)
        if not schedule.is_working_day:
            return False

        window_start, window_end = day_window(day, schedule, self.tz)
        if start < window_start or end > window_end:
            return False

        if self.now is not None and start < self.now:
            return False

        for other_index, other in enumerate(events):
            if other_index == index or other.is_all_day:
                continue
            if intervals_overlap(start, end, other.start_time, other.end_time):
                return False

        for break_start, break_end in break_windows(day, schedule, self.tz):
            if intervals_overlap(start, end, break_start, break_end):
                return False

        return True

    def grid_starts(self, events: List[CalendarEvent], index: int, day: date) -> List[datetime]:
        """Free stride-aligned starts for events[index] on day."""
        schedule = get_day_schedule(day, self.preferences.working_hours)
        if not schedule.is_working_day:
            return []
        duration_minutes = int(event_duration(events[index]).total_seconds() // 60)
        if duration_minutes <= 0:
            return []
        slots = generate_day_slots(day, schedule, duration_minutes, self.tz, self.config.slot_stride_minutes)
        return [s.start_time for s in slots if self.fits(events, index, s.start_time)]

    # ----------------- Local search ---------------------

    def best_move(self, events: List[CalendarEvent], index: int, starts: List[datetime],
                  metric: Callable[[List[CalendarEvent]], float]) -> Optional[List[CalendarEvent]]:
        """Best-metric variant of events with events[index] moved, or None when no start helps."""
        current_metric = metric(events)
        current_total = self.schedule_score(events)

        best = None
        best_metric = current_metric
        for start in starts:
            if start == events[index].start_time:
                continue
            trial = list(events)
            trial[index] = move_event(events[index], start)
            trial_metric = metric(trial)
            if trial_metric > best_metric + EPSILON and self.schedule_score(trial) >= current_total - EPSILON:
                best, best_metric = trial, trial_metric
        return best

    def run_pass(self, name: str, events: List[CalendarEvent],
                 propose: Callable[[List[CalendarEvent], int], List[datetime]],
                 metric: Callable[[List[CalendarEvent]], float]) -> List[CalendarEvent]:
        current = events
        moves = 0
        for _ in range(self.config.max_optimizer_rounds):
            improved = False
            for index in range(len(current)):
                if not is_movable(current[index]):
                    continue
                starts = propose(current, index)
                if not starts:
                    continue
                moved = self.best_move(current, index, starts, metric)
                if moved is not None:
                    current = moved
                    moves += 1
                    improved = True
            if not improved:
                break

        if moves:
            logger.debug(f"{name} pass moved events {moves} time(s)")
        return current

    # ----------------- Passes ---------------------

    def apply_time_blocking(self, events: List[CalendarEvent]) -> List[CalendarEvent]:
        """Group events of the same type next to each other within a day."""
        def propose(current: List[CalendarEvent], index: int) -> List[datetime]:
            event = current[index]
            duration = event_duration(event)
            starts = []
            for other_index, other in enumerate(current):
                if other_index == index or other.is_all_day or other.type != event.type:
                    continue
                if other.start_time.date() != event.start_time.date():
                    continue
                for start in (other.end_time, other.start_time - duration):
                    if self.fits(current, index, start):
                        starts.append(start)
            return starts

        return self.run_pass("Time blocking", events, propose, time_blocking_score)

    def optimize_commute(self, events: List[CalendarEvent]) -> List[CalendarEvent]:
        """Re-time located events whose neighbours leave too little time to travel."""
        def needs_travel_relief(current: List[CalendarEvent], index: int) -> bool:
            event = current[index]
            if not is_physical_location(event.location):
                return False
            same_day = sorted(
                (e for e in current
                 if not e.is_all_day and is_physical_location(e.location)
                 and e.start_time.date() == event.start_time.date()),
                key=lambda e: (e.start_time, e.end_time),
            )
            for earlier, later in zip(same_day, same_day[1:]):
                if event in (earlier, later) and transfer_feasibility(earlier, later, self.estimator, self.config) < 1.0:
                    return True
            return False

        def propose(current: List[CalendarEvent], index: int) -> List[datetime]:
            if not needs_travel_relief(current, index):
                return []
            return self.grid_starts(current, index, current[index].start_time.date())

        def metric(current: List[CalendarEvent]) -> float:
            return travel_feasibility_score(current, self.estimator, self.config)

        return self.run_pass("Commute", events, propose, metric)

    def balance_workload(self, events: List[CalendarEvent]) -> List[CalendarEvent]:
        """Move flexible events off overloaded days onto lighter days of the same week."""
        lightest_threshold = min(threshold for threshold, _ in self.config.workload_thresholds)

        def propose(current: List[CalendarEvent], index: int) -> List[datetime]:
            event = current[index]
            if not can_change_day(event):
                return []
            if booked_hours_on_day(event.start_time, current) <= lightest_threshold:
                return []

            same_time_starts = []
            grid = []
            for day in week_dates(event.start_time.date()):
                if day == event.start_time.date():
                    continue
                same_time = self.tz.localize(datetime.combine(day, event.start_time.time()))
                if self.fits(current, index, same_time):
                    same_time_starts.append(same_time)
                grid.extend(self.grid_starts(current, index, day))
            return same_time_starts + grid

        def metric(current: List[CalendarEvent]) -> float:
            return workload_balance_score(current, self.config)

        return self.run_pass("Workload", events, propose, metric)

    def optimize_energy_levels(self, events: List[CalendarEvent]) -> List[CalendarEvent]:
        """Pull high-priority events toward peak-energy hours of their day."""
        def propose(current: List[CalendarEvent], index: int) -> List[datetime]:
            event = current[index]
            if not is_high_priority(event.priority):
                return []
            return self.grid_starts(current, index, event.start_time.date())

        def metric(current: List[CalendarEvent]) -> float:
            return energy_alignment_score(current, self.config)

        return self.run_pass("Energy", events, propose, metric)

    # ----------------- Pipeline ---------------------

    def optimize(self, events: List[CalendarEvent]) -> ScheduleOptimizationResult:
        if not events:
            return ScheduleOptimizationResult(
                optimized_events=[],
                improvements=[],
                energy_score=self.config.neutral_schedule_score,
            )

        baseline = self.schedule_score(events)

        optimized = self.apply_time_blocking(events)
        optimized = self.optimize_commute(optimized)
        optimized = self.balance_workload(optimized)
        optimized = self.optimize_energy_levels(optimized)

        new_score = self.schedule_score(optimized)
        if new_score <= baseline:
            logger.info(f"Schedule of {len(events)} events already optimal (score {baseline:.3f})")
            return ScheduleOptimizationResult(optimized_events=list(events), improvements=[], energy_score=baseline)

        gain = new_score - baseline
        improvement = ScheduleImprovement(
            type="overall_efficiency",
            description=f"Schedule efficiency improved by {round(gain * 100)}%",
            impact=improvement_impact(gain),
            times_saved_minutes=round(gain * 60),
        )
        logger.info(f"Optimized schedule of {len(events)} events: score {baseline:.3f} -> {new_score:.3f}")
        return ScheduleOptimizationResult(optimized_events=optimized, improvements=[improvement], energy_score=new_score)


def improvement_impact(gain: float) -> ImpactLevel:
    if gain >= 0.1:
        return ImpactLevel.HIGH
    elif gain >= 0.05:
        return ImpactLevel.MEDIUM
    return ImpactLevel.LOW


def optimize_schedule(events: List[CalendarEvent], preferences: CalendarPreferences, estimator: TravelTimeEstimator,
                      config: ScoringConfig = DEFAULT_SCORING_CONFIG,
                      now: Optional[datetime] = None) -> ScheduleOptimizationResult:
    return ScheduleOptimizer(preferences, estimator, config, now).optimize(events)
