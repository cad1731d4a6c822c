"""Unit conversion and rounding helpers for blood Phe values."""

import math
from typing import Literal

from pku_insights.domain.blood import BloodLevelRecord
from pku_insights.domain.constants import MG_DL_TO_UMOL_FACTOR

BloodStatus = Literal["low", "normal", "high"]


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves going up, the way the mobile client rounds."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def mg_dl_to_umol(value: float) -> float:
    """Convert a blood Phe value from mg/dL to µmol/L."""
    return round_half_up(value * MG_DL_TO_UMOL_FACTOR, 1)


def umol_to_mg_dl(value: float) -> float:
    """Convert a blood Phe value from µmol/L to mg/dL."""
    return round_half_up(value / MG_DL_TO_UMOL_FACTOR, 1)


def blood_status(record: BloodLevelRecord) -> BloodStatus:
    """Classify a measurement against its own target range."""
    if record.normalized_umol < record.target_min:
        return "low"
    if record.normalized_umol > record.target_max:
        return "high"
    return "normal"
