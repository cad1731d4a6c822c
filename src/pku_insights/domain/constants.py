"""PKU reference values shared across the analytics."""

# Daily Phe allowance defaults (mg/day)
PHE_DEFAULT_INFANT_MG = 200
PHE_DEFAULT_CHILD_MG = 300
PHE_DEFAULT_ADULT_MG = 400
DEFAULT_PHE_LIMIT_MG = PHE_DEFAULT_CHILD_MG

# Exchange units (mg Phe per exchange)
EXCHANGE_STANDARD_MG = 50
EXCHANGE_DETAILED_MG = 15

# Blood Phe target range (µmol/L)
BLOOD_TARGET_MIN_UMOL = 120.0
BLOOD_TARGET_MAX_UMOL = 360.0

# 1 mg/dL of Phe = 60.54 µmol/L
MG_DL_TO_UMOL_FACTOR = 60.54
