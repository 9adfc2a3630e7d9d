"""Static allowance lookup tables shared by the calculator and request schemas."""

from types import MappingProxyType
from typing import Mapping

# Base monthly allowance per pay grade.
RANK_ALLOWANCES: Mapping[str, float] = MappingProxyType(
    {
        "E-1": 1200,
        "E-2": 1200,
        "E-3": 1150,
        "E-4": 1100,
        "E-5": 1000,
        "E-6": 950,
        "E-7": 900,
        "E-8": 800,
        "E-9": 700,
        "W-1": 950,
        "W-2": 900,
        "W-3": 850,
        "W-4": 800,
        "W-5": 650,
        "O-1": 900,
        "O-2": 850,
        "O-3": 800,
        "O-4": 700,
        "O-5": 650,
        "O-6": 550,
        "O-7": 450,
        "O-8": 400,
        "O-9": 350,
        "O-10": 300,
    }
)

GEOGRAPHIC_MULTIPLIERS: Mapping[str, float] = MappingProxyType(
    {
        "Low Cost": 0.8,
        "Standard Cost": 1.0,
        "High Cost": 1.5,
    }
)

AGE_MULTIPLIERS: Mapping[str, float] = MappingProxyType(
    {
        "Infant (0-12 months)": 1.4,
        "Toddler (13-24 months)": 1.3,
        "Preschool (25-60 months)": 1.0,
        "School-age (6-13 years)": 0.4,
    }
)
