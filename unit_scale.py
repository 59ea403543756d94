import logging
from typing import Optional, Union

from rdat_standardize import RdatError

logger = logging.getLogger(__name__)

# unit -> metres
LENGTH_UNITS = {
    "mm": 0.001,
    "cm": 0.01,
    "m": 1.0,
    "in": 0.0254,
    "inch": 0.0254,
}

# unit -> kilograms
MASS_UNITS = {
    "g": 0.001,
    "kg": 1.0,
    "mt": 1000.0,
    "metric tons": 1000.0,
    "lbs": 0.45359237,
    "lb": 0.45359237,
    "klb": 453.59237,
}

# conversion of metric tons to thousand pounds used by BAM reports
KLB_PER_MT = 2.204624

# (low, high, scalar to kg, unit) for the wla magnitudes BAM models report
WLA_RANGES = [
    (1e-6, 1e-4, 0.001, "grams"),
    (1e-9, 1e-7, 1.0, "kilograms"),
    (1e-13, 1e-11, 1000.0, "metric tonnes"),
]

Scalar = Union[float, int, str]


def _unit(table: dict, unit: str, kind: str) -> float:
    if unit not in table:
        raise RdatError(f"Unknown {kind} unit {unit!r}. Known units: {', '.join(table)}")
    return table[unit]


def convert_mass(value: float, fromUnit: str, toUnit: str) -> float:
    return value * _unit(MASS_UNITS, fromUnit, "mass") / _unit(MASS_UNITS, toUnit, "mass")


def convert_length(value: float, fromUnit: str, toUnit: str) -> float:
    return value * _unit(LENGTH_UNITS, fromUnit, "length") / _unit(LENGTH_UNITS, toUnit, "length")


def _scalar(scale: Scalar, fromUnit: str, table: dict, kind: str) -> float:
    if isinstance(scale, str):
        return _unit(table, fromUnit, kind) / _unit(table, scale, kind)
    scale = float(scale)
    if not scale > 0:
        raise RdatError(f"{kind} scalar must be positive, not {scale}")
    return scale


# Multiplier for lengths: a number, or the name of the unit to convert to
def length_scalar(scale: Scalar, fromUnit: str = "mm") -> float:
    return _scalar(scale, fromUnit, LENGTH_UNITS, "length")


# Multiplier for catch: a number, or the name of the unit to convert to
def mass_scalar(scale: Scalar, fromUnit: str = "klb") -> float:
    return _scalar(scale, fromUnit, MASS_UNITS, "mass")


def biomass_to_klb(unitsBiomass: Optional[str]) -> float:
    if unitsBiomass in ("mt", "metric tons"):
        return KLB_PER_MT
    if unitsBiomass in MASS_UNITS:
        logger.warning(f"units.biomass not equal to metric tons ({unitsBiomass}), converting to klb")
        return convert_mass(1.0, unitsBiomass, "klb")
    raise RdatError(f"units.biomass not recognized: {unitsBiomass!r}")


# Scalar bringing wla to kilograms, inferred from its magnitude
def infer_wla_scale(wla: float, name: str = "") -> float:
    for low, high, scale, unit in WLA_RANGES:
        if low <= wla <= high:
            if scale != 1.0:
                logger.info(f"For {name} weight~length appears to be in {unit}. Scaling wla parameter by {scale:g}")
            return scale
    return 1.0


def check_wlb(wlb: float, name: str = "") -> bool:
    if wlb <= 2 or wlb >= 4:
        logger.warning(f"For {name} the wlb parameter is outside of the expected range (2-4)")
        return False
    return True


# Rescale wla for a change of length unit (W = wla * L^wlb)
def length_rescale_wla(wla: float, lengthSc: float, wlb: float) -> float:
    return wla / lengthSc ** wlb
