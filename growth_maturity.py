import logging
from typing import Dict

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

# number of points in the fine age grid used to locate maturity and selectivity ages
AGE_GRID_SIZE = 1000

HERM_MODES = ("gonochoristic", "protogynous")


# von Bertalanffy length at age
def length_at_age(Linf, K, t0, age):
    return Linf * (1 - np.exp(-K * (np.asarray(age, dtype=float) - t0)))


# Inverse of the von Bertalanffy curve, defined for 0 <= length < Linf
def age_at_length(length, Linf, K, t0):
    return t0 - np.log(1 - np.asarray(length, dtype=float) / Linf) / K


# Numbers at age of a cohort declining exponentially from N0
def exp_decay(
    age: np.ndarray,  # ages
    Z: np.ndarray,  # total mortality at age
    N0: float = 1.0,  # numbers at the first age
) -> pd.Series:
    Z = np.asarray(Z, dtype=float)
    survival = np.concatenate(([0.0], np.cumsum(Z[:-1])))
    return pd.Series(N0 * np.exp(-survival), index=pd.Index(age, name="age"))


# Factor scaling recruits at the assessment's recruitment age back to age 0
def recruit_scale(aSeries: pd.DataFrame, recAge: int) -> float:
    nage = exp_decay(aSeries.index.to_numpy(), aSeries["M"].to_numpy(), N0=1)
    return float(nage.loc[0] / nage.loc[recAge])


def proportion_mature_at_age(
    aSeries: pd.DataFrame,  # age table with mat.female etc.
    matAge1Max: float = 0.49,  # cap on maturity of the first age class
    herm: str = "gonochoristic",  # hermaphroditism mode
) -> pd.Series:
    if herm == "gonochoristic":
        pmat = aSeries["mat.female"].to_numpy(dtype=float).copy()
    elif herm == "protogynous":
        # population proportion mature over both sexes
        propFemale = aSeries["prop.female"].to_numpy(dtype=float)
        if "prop.male" in aSeries.columns:
            propMale = aSeries["prop.male"].to_numpy(dtype=float)
        else:
            propMale = 1 - propFemale
        if "mat.male" in aSeries.columns:
            matMale = aSeries["mat.male"].to_numpy(dtype=float)
        else:
            matMale = np.ones(len(aSeries))
        pmat = propFemale * aSeries["mat.female"].to_numpy(dtype=float) + propMale * matMale
    else:
        raise ValueError(f"herm must be one of {HERM_MODES}, not {herm!r}")

    pmat[0] = min(pmat[0], matAge1Max)
    return pd.Series(pmat, index=aSeries.index, name="pmat")


# Nearest point of a fine linear grid to each target value (first occurrence on ties)
def grid_age_at(
    age: np.ndarray,  # ages at which y is known
    y: np.ndarray,  # values at age
    target: float,  # value to locate
    upToMax: bool = False,  # only search up to the first age of maximum y
) -> float:
    age = np.asarray(age, dtype=float)
    agePr = np.linspace(age.min(), age.max(), AGE_GRID_SIZE)
    yPr = np.interp(agePr, age, np.asarray(y, dtype=float))
    if upToMax:
        last = int(np.argmax(yPr)) + 1
        agePr, yPr = agePr[:last], yPr[:last]
    return float(agePr[np.argmin(np.abs(yPr - target))])


def maturity_at_length(
    age: np.ndarray,  # ages
    pmat: np.ndarray,  # proportion mature at age
    Linf: float,  # von Bertalanffy asymptotic length
    K: float,  # von Bertalanffy growth coefficient
    t0: float,  # von Bertalanffy age at length zero
) -> Dict[str, float]:
    age50 = grid_age_at(age, pmat, 0.50)
    age95 = grid_age_at(age, pmat, 0.95)

    len50 = float(length_at_age(Linf, K, t0, age50))
    len95 = float(length_at_age(Linf, K, t0, age95))
    if len95 < len50:
        logger.info(f"Length at 95% maturity ({len95:.3f}) is below length at 50% maturity ({len50:.3f})")
    return {"L50": len50, "L50_95": len95 - len50}
