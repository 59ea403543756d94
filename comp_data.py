from typing import Dict, Optional, Sequence

import numpy as np
import pandas as pd

from rdat_standardize import CompSeries


# Proportions x sample size on a common year x class grid, zero fish where unobserved
def comp_complete(
    comps: Dict[str, CompSeries],  # abbreviation -> composition series
    years: Sequence[int],  # years (rows) of the completed matrices
    classes: Optional[Sequence] = None,  # age or length classes (columns), union of all if None
) -> Dict[str, pd.DataFrame]:
    if classes is None:
        allClasses = set()
        for comp in comps.values():
            allClasses.update(comp.props.columns)
        classes = sorted(allClasses)

    yearIndex = pd.Index(years, name="year")
    classIndex = pd.Index(classes)

    nfish = {}
    for abb, comp in comps.items():
        props = comp.props.reindex(index=yearIndex, columns=classIndex).fillna(0.0)
        n = comp.n.reindex(yearIndex).fillna(0.0).clip(lower=0)
        nfish[abb] = props.mul(n, axis=0)
    return nfish


def comp_combine(
    mats: Dict[str, pd.DataFrame],  # completed matrices sharing one shape
    scaleRows: bool = False,  # re-proportion each combined row to sum to 1
) -> pd.DataFrame:
    combined = None
    for mat in mats.values():
        combined = mat.copy() if combined is None else combined + mat

    if scaleRows:
        rowSums = combined.sum(axis=1)
        combined = combined.div(rowSums.where(rowSums > 0), axis=0).fillna(0.0)
    return combined


# Mean length of fish at or above minL in each year, NaN when no such fish
def mean_length_above(
    lcomp: pd.DataFrame,  # year x length-bin numbers of fish, columns are bin midpoints
    minL: float,  # minimum length included
) -> pd.Series:
    mids = lcomp.columns.to_numpy(dtype=float)
    keep = mids >= minL
    counts = lcomp.to_numpy(dtype=float)[:, keep]
    totals = counts.sum(axis=1)
    with np.errstate(invalid="ignore", divide="ignore"):
        mlen = (counts * mids[keep]).sum(axis=1) / totals
    mlen[totals <= 0] = np.nan
    return pd.Series(mlen, index=lcomp.index, name="ML")


# Bin edges from bin midpoints, using the median bin width
def length_bins(mids: np.ndarray) -> np.ndarray:
    mids = np.asarray(mids, dtype=float)
    width = np.median(np.diff(mids)) if mids.size > 1 else 1.0
    return np.concatenate(([mids[0] - width / 2], mids + width / 2))
