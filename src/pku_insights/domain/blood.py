"""Blood Phe domain models."""

from dataclasses import dataclass
from datetime import datetime

from pku_insights.domain.constants import (
    BLOOD_TARGET_MAX_UMOL,
    BLOOD_TARGET_MIN_UMOL,
)


@dataclass(frozen=True)
class BloodLevelRecord:
    """A blood Phe measurement, always normalized to µmol/L."""

    id: str
    collected_at: datetime
    normalized_umol: float
    target_min: float = BLOOD_TARGET_MIN_UMOL
    target_max: float = BLOOD_TARGET_MAX_UMOL
    notes: str = ""
    raw_value: float | None = None
    raw_unit: str = "umol"

    def __post_init__(self) -> None:
        if self.target_min >= self.target_max:
            raise ValueError(
                f"target_min ({self.target_min}) must be below "
                f"target_max ({self.target_max})"
            )
