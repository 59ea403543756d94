import logging
from typing import Dict, List, Sequence, Union

import numpy as np
import pandas as pd

from rdat_standardize import IndexSeries

logger = logging.getLogger(__name__)

Abbreviations = Union[str, Sequence[str]]


# Add a leading replicate (simulation) dimension holding identical copies
def replicate(data, nsim: int) -> np.ndarray:
    data = np.asarray(data, dtype=float)
    return np.repeat(data[np.newaxis, ...], nsim, axis=0)


def select_abbreviations(
    available: Sequence[str],  # abbreviations present in the rdat
    wanted: Abbreviations,  # "all", "none" or a list of abbreviations
    label: str = "abb",  # option name, used in the notice
    name: str = "",  # stock name, used in the notice
) -> List[str]:
    available = list(available)
    if isinstance(wanted, str):
        if wanted == "none":
            return []
        if wanted == "all":
            return available
        wanted = [wanted]

    selected = [abb for abb in wanted if abb in available]
    if len(selected) == 0 and len(available) > 0:
        logger.info(
            f"{name}: {label} does not match any names in the rdat. "
            f"All available series will be used: {', '.join(available)}"
        )
        selected = available
    return selected


# Geometric mean of the non-missing values, NaN if there are none
def geomean(x) -> float:
    x = np.asarray(x, dtype=float)
    x = x[~np.isnan(x)]
    if x.size == 0:
        return np.nan
    with np.errstate(divide="ignore"):
        return float(np.exp(np.mean(np.log(x))))


def combine_indices(
    indexFrame: pd.DataFrame,  # year x index observed values
    cvFrame: pd.DataFrame,  # year x index cvs
) -> Dict[str, pd.Series]:
    ind = indexFrame.apply(geomean, axis=1)
    ind = ind / np.nanmean(ind.to_numpy(dtype=float))
    cv = cvFrame.apply(geomean, axis=1)
    return {"Ind": ind, "CV_Ind": cv}


# Positions that sort abbs by addIndOrder, unmatched abbs kept at the end in input order
def order_indices(abbs: Sequence[str], addIndOrder: Sequence[str]) -> List[int]:
    addIndOrder = [abb for abb in (addIndOrder or []) if abb != ""]
    order = list(addIndOrder) + [abb for abb in abbs if abb not in addIndOrder]
    rank = {abb: i for i, abb in enumerate(order)}
    return sorted(range(len(abbs)), key=lambda i: rank[abbs[i]])


# Unit code of each index from the first letter of its abbreviation
def index_units(abbs: Sequence[str], fleetTypeKey: Dict[str, float]) -> np.ndarray:
    return np.array([fleetTypeKey.get(abb[:1], np.nan) for abb in abbs], dtype=float)


def index_frames(
    indices: Dict[str, IndexSeries],  # abbreviation -> index series
    abbs: Sequence[str],  # abbreviations to use, in order
    years: Sequence[int],  # years to report
):
    yearIndex = pd.Index(years, name="year")
    ind = pd.DataFrame({abb: indices[abb].ob.reindex(yearIndex) for abb in abbs}, index=yearIndex)
    cv = pd.DataFrame({abb: indices[abb].cv.reindex(yearIndex) for abb in abbs}, index=yearIndex)
    return ind.astype(float), cv.astype(float)
