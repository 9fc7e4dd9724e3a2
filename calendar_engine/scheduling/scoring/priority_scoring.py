"""
Priority-based scoring functions.
"""

from calendar_engine.models import EventPriority, ConflictSeverity


def calculate_priority_weight(priority: EventPriority) -> int:
    """
    Map priority to a weight: Low: 1, Medium: 2, High: 3, Urgent: 4
    """
    if priority == EventPriority.LOW:
        return 1
    elif priority == EventPriority.MEDIUM:
        return 2
    elif priority == EventPriority.HIGH:
        return 3
    elif priority == EventPriority.URGENT:
        return 4
    else:
        return 2  # Default


def is_high_priority(priority: EventPriority) -> bool:
    return priority in (EventPriority.HIGH, EventPriority.URGENT)


def higher_priority(a: EventPriority, b: EventPriority) -> EventPriority:
    return a if calculate_priority_weight(a) >= calculate_priority_weight(b) else b


def overlap_severity(priority: EventPriority) -> ConflictSeverity:
    """Severity of double-booking an event of the given priority."""
    if priority == EventPriority.URGENT:
        return ConflictSeverity.CRITICAL
    elif priority == EventPriority.HIGH:
        return ConflictSeverity.HIGH
    elif priority == EventPriority.MEDIUM:
        return ConflictSeverity.MEDIUM
    return ConflictSeverity.LOW
