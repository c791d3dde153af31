"""
One-rep max estimation and personal-record detection.

Epley formula: 1RM = weight * (1 + reps / 30)
"""

from typing import Sequence

from .config import EPLEY_DIVISOR, KG_TO_LBS
from .models import PersonalRecord


def calculate_one_rm(weight: float, reps: int) -> float:
    """
    Estimate 1RM using the Epley formula.

    Args:
        weight: Weight lifted
        reps: Reps performed

    Returns:
        Estimated 1RM; the weight itself for a single, 0 for non-positive input
    """
    if reps <= 0 or weight <= 0:
        return 0.0
    if reps == 1:
        return float(weight)
    return weight * (1 + reps / EPLEY_DIVISOR)


def calculate_max_reps(one_rm: float, weight: float) -> int:
    """
    Estimate how many reps can be done at ``weight`` (Epley inverted).

    Args:
        one_rm: Known or estimated 1RM
        weight: Working weight

    Returns:
        Estimated reps; 1 when weight >= 1RM, 0 for non-positive input
    """
    if weight <= 0 or one_rm <= 0:
        return 0
    if weight >= one_rm:
        return 1
    return round((one_rm / weight - 1) * EPLEY_DIVISOR)


def calculate_weight_for_reps(one_rm: float, target_reps: int) -> float:
    """Weight expected to allow exactly ``target_reps`` reps, 0 for non-positive input."""
    if target_reps <= 0 or one_rm <= 0:
        return 0.0
    return one_rm / (1 + target_reps / EPLEY_DIVISOR)


def best_one_rm(records: Sequence[PersonalRecord], lift: str) -> float:
    """Highest Epley estimate among a lift's records, 0 if none."""
    estimates = [calculate_one_rm(r.weight, r.reps) for r in records if r.exercise == lift]
    return max(estimates, default=0.0)


def is_personal_record(
    records: Sequence[PersonalRecord],
    lift: str,
    weight: float,
    reps: int,
) -> bool:
    """
    Check whether a set beats every earlier record for the lift.

    Comparison is by estimated 1RM, so 100 x 8 beats 105 x 5.

    Args:
        records: Previously stored personal records
        lift: Lift id
        weight: Weight of the new set
        reps: Reps completed

    Returns:
        True if the estimate is strictly higher than the previous best
    """
    estimate = calculate_one_rm(weight, reps)
    if estimate <= 0:
        return False
    return estimate > best_one_rm(records, lift)


def to_display_unit(weight: float, unit: str) -> float:
    """Convert a stored kg value to the display unit."""
    if unit == "lbs":
        return weight * KG_TO_LBS
    return weight


def from_display_unit(weight: float, unit: str) -> float:
    """Convert a weight entered in the display unit to stored kg."""
    if unit == "lbs":
        return weight / KG_TO_LBS
    return weight


def format_weight(weight: float, unit: str = "kg") -> str:
    """
    Format a stored (kg) weight for display.

    Pounds are rounded to the nearest whole pound.
    """
    if unit == "lbs":
        return f"{round(weight * KG_TO_LBS)} lbs"
    return f"{weight:g} kg"
