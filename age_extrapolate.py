import logging
from typing import Iterable, Optional, Union

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

# a.series columns holding proportions
PROPORTION_COLUMNS = ["prop.female", "prop.male", "mat.female", "mat.male"]

AgeData = Union[pd.Series, pd.DataFrame]


# Linear interpolation inside the data range and linear extrapolation outside of it
def polate(
    x: np.ndarray,  # known x values
    y: np.ndarray,  # known y values
    xout: np.ndarray,  # x values to predict at
) -> np.ndarray:
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    xout = np.asarray(xout, dtype=float)

    ok = ~np.isnan(y)
    x, y = x[ok], y[ok]
    order = np.argsort(x)
    x, y = x[order], y[order]

    if x.size == 0:
        return np.full(xout.shape, np.nan)
    if x.size == 1:
        return np.full(xout.shape, y[0])

    yout = np.interp(xout, x, y)

    below = xout < x[0]
    yout[below] = y[0] + (xout[below] - x[0]) * (y[1] - y[0]) / (x[1] - x[0])
    above = xout > x[-1]
    yout[above] = y[-1] + (xout[above] - x[-1]) * (y[-1] - y[-2]) / (x[-1] - x[-2])

    # known points are returned untouched
    known = np.isin(xout, x)
    yout[known] = y[np.searchsorted(x, xout[known])]
    return yout


# Predict every column of an age-indexed Series/DataFrame at new ages (index = age)
def data_polate(data: AgeData, xout: Iterable) -> AgeData:
    xout = np.asarray(list(xout))
    x = data.index.to_numpy(dtype=float)
    newIndex = pd.Index(xout, name=data.index.name)

    if isinstance(data, pd.Series):
        return pd.Series(polate(x, data.to_numpy(dtype=float), xout), index=newIndex, name=data.name)

    out = pd.DataFrame(index=newIndex, columns=data.columns, dtype=float)
    for col in data.columns:
        out[col] = polate(x, data[col].to_numpy(dtype=float), xout)
    return out


# Clip values to xlim, optionally only for some columns
def data_lim(
    data: AgeData,
    xlim=(0, np.inf),  # lower and upper limit
    columns: Optional[Iterable] = None,  # DataFrame columns to limit, all if None
) -> AgeData:
    lower, upper = xlim
    if isinstance(data, pd.Series) or columns is None:
        return data.clip(lower=lower, upper=upper)
    out = data.copy()
    cols = [c for c in columns if c in out.columns]
    out[cols] = out[cols].clip(lower=lower, upper=upper)
    return out


def extend_to_age_zero(
    data: AgeData,  # age-indexed vector or matrix
    minValid: float = 0.0,  # lower bound on produced values
    maxValid: float = np.inf,  # upper bound on produced values
    label: str = "data",  # name of the structure, used in the notice
    name: str = "",  # stock name, used in the notice
    axis: int = 0,  # 0 if ages are the index, 1 if ages are the columns of a matrix
    xout: Optional[Iterable] = None,  # ages to predict at, default 0:max age
) -> AgeData:
    if axis == 1:
        out = extend_to_age_zero(data.T, minValid, maxValid, label, name, axis=0, xout=xout)
        return out.T

    ages = data.index.to_numpy(dtype=float)
    if ages.min() <= 0:
        return data

    logger.info(f"{name}: Minimum age of {label} > 0. {label} linearly extrapolated to age-0")

    if xout is None:
        xout = np.arange(0, int(ages.max()) + 1)
    out = data_polate(data, xout)
    return data_lim(out, xlim=(minValid, maxValid))


# Extend the age table: general quantities stay >= 0, proportions within [0, 1]
def extend_a_series(aSeries: pd.DataFrame, name: str = "") -> pd.DataFrame:
    if aSeries.index.min() <= 0:
        return aSeries
    out = extend_to_age_zero(aSeries, 0, np.inf, label="a.series", name=name)
    return data_lim(out, xlim=(0, 1), columns=PROPORTION_COLUMNS)
