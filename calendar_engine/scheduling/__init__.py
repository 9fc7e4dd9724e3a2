"""
Scheduling optimization engine

Pure functions for generating, scoring and ranking meeting slots, plus the
whole-schedule and team workload optimizers. Nothing here performs I/O.
"""

from .core.candidates import generate_candidate_slots
from .scoring.slot_scoring import score_slots, calculate_slot_score
from .scoring.ranking import rank_slots
from .scoring.schedule_scoring import calculate_schedule_score
from .algorithms.optimization import optimize_schedule, ScheduleOptimizer
from .algorithms.team_balancing import balance_team_workload

__version__ = "1.0.0"
