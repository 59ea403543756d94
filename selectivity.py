import logging
from dataclasses import replace
from typing import Dict, Optional, Union

import numpy as np
import pandas as pd

from age_extrapolate import extend_to_age_zero
from growth_maturity import grid_age_at, length_at_age
from rdat_standardize import Rdat

logger = logging.getLogger(__name__)


# Every selectivity (vectors, matrices and combined) extended down to age 0
def extend_selectivities(rdat: Rdat, name: str = "") -> Rdat:
    selVectors = {
        abb: extend_to_age_zero(sel, 0, 1, label=f"sel.v.{abb}", name=name)
        for abb, sel in rdat.selVectors.items()
    }
    selMatrices = {
        abb: extend_to_age_zero(sel, 0, 1, label=f"sel.m.{abb}", name=name, axis=1)
        for abb, sel in rdat.selMatrices.items()
    }
    combined = {}
    for attr, label in (("selTot", "tot"), ("selL", "L"), ("selD", "D")):
        sel = getattr(rdat, attr)
        if sel is not None:
            sel = extend_to_age_zero(sel, 0, 1, label=f"sel.v.wgted.{label}", name=name)
        combined[attr] = sel
    return replace(rdat, selVectors=selVectors, selMatrices=selMatrices, **combined)


# Selectivity at age in the most recent year, zero for ages not covered by sel
def current_selectivity(
    sel: Union[pd.Series, pd.DataFrame],  # vector (age) or matrix (year x age)
    ages: np.ndarray,  # ages to report
) -> pd.Series:
    if isinstance(sel, pd.DataFrame):
        sel = sel.iloc[-1]
    return sel.reindex(pd.Index(ages, name="age")).fillna(0.0).astype(float)


# Age x fleet matrix of current fleet-specific selectivities
def fleet_selectivity_matrix(rdat: Rdat, ages: np.ndarray) -> pd.DataFrame:
    columns = {}
    for abb, sel in rdat.selVectors.items():
        columns[abb] = current_selectivity(sel, ages)
    for abb, sel in rdat.selMatrices.items():
        columns[abb] = current_selectivity(sel, ages)
    out = pd.DataFrame(columns, index=pd.Index(ages, name="age"))
    out.columns.name = "fleet"
    return out


def resolve_index_selectivity(
    abb: str,  # index abbreviation
    selectivities: pd.DataFrame,  # age x fleet current selectivities
    fallbackMapping: Optional[Dict[str, str]],  # index abbreviation -> selectivity abbreviation
    selTot: pd.Series,  # combined total selectivity at age
) -> pd.Series:
    if abb in selectivities.columns:
        return selectivities[abb]

    alternate = (fallbackMapping or {}).get(abb)
    if alternate is not None and alternate in selectivities.columns:
        return selectivities[alternate]

    logger.info(
        f"The {abb} index does not match any of the abbreviations in the available selectivities "
        f"({', '.join(map(str, selectivities.columns))}). Total selectivity will be used. If this is "
        f"undesirable, please indicate the abbreviation for the selectivity you want to use for the "
        f"{abb} index with fleetSelAbbKey."
    )
    return selTot.reindex(selectivities.index).fillna(0.0)


def vulnerability_lengths(
    selTot: pd.Series,  # total selectivity at age
    selL: pd.Series,  # landings selectivity at age
    Linf: float,  # von Bertalanffy asymptotic length
    K: float,  # von Bertalanffy growth coefficient
    t0: float,  # von Bertalanffy age at length zero
) -> Dict[str, float]:
    ageV = selTot.index.to_numpy(dtype=float)
    valV = selTot.to_numpy(dtype=float)
    # first capture, searched on the ascending limb so dome-shaped curves are not
    # matched on their descending side
    age5 = grid_age_at(ageV, valV, 0.05 * np.nanmax(valV), upToMax=True)

    ageR = selL.index.to_numpy(dtype=float)
    valR = selL.to_numpy(dtype=float)
    ageFS = grid_age_at(ageR, valR, np.nanmax(valR))

    return {
        "L5": float(length_at_age(Linf, K, t0, age5)),
        "LFS": float(length_at_age(Linf, K, t0, ageFS)),
    }
