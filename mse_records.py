from dataclasses import dataclass, field, fields
from typing import Any, Dict

import numpy as np


def _zeros(*shape):
    return field(default_factory=lambda: np.zeros(shape))


# Lower and upper bound of value * scLim, always ordered lower <= upper
def bound_pair(value, scLim) -> np.ndarray:
    return np.sort(np.asarray(value, dtype=float) * np.asarray(scLim, dtype=float))


@dataclass
class DataRecord:
    # observed data for an MSEtool Data object, field names follow the Data slots
    Name: str = ""
    Common_Name: str = ""
    Species: str = ""
    Region: str = ""
    nsim: int = 1  # size of the replicate dimension
    Year: np.ndarray = _zeros(0)
    Cat: np.ndarray = _zeros(1, 0)  # sim x year
    CV_Cat: np.ndarray = _zeros(1, 0)  # sim x year
    Rec: np.ndarray = _zeros(1, 0)  # sim x year
    t: int = 0
    AvC: float = np.nan
    Dt: float = np.nan
    Mort: float = np.nan
    FMSY_M: float = np.nan
    BMSY_B0: float = np.nan
    L50: float = np.nan
    L95: float = np.nan
    LFC: float = np.nan
    LFS: float = np.nan
    vbK: float = np.nan
    CV_vbK: float = np.nan
    vbLinf: float = np.nan
    CV_vbLinf: float = np.nan
    vbt0: float = np.nan
    CV_vbt0: float = np.nan
    LenCV: float = np.nan
    wla: float = np.nan
    wlb: float = np.nan
    steep: float = np.nan
    sigmaR: float = np.nan
    MaxAge: int = 0
    Dep: float = np.nan
    Abun: float = np.nan
    SpAbun: float = np.nan
    LHYear: int = 0
    Cref: float = np.nan
    Ind: np.ndarray = _zeros(1, 0)  # sim x year
    CV_Ind: np.ndarray = _zeros(1, 0)  # sim x year
    AddInd: np.ndarray = _zeros(1, 0, 0)  # sim x index x year
    CV_AddInd: np.ndarray = _zeros(1, 0, 0)  # sim x index x year
    AddIndV: np.ndarray = _zeros(1, 0, 0)  # sim x index x age
    AddIndType: np.ndarray = _zeros(0)
    AddIunits: np.ndarray = _zeros(0)
    AddIndNames: list = field(default_factory=list)
    CAA: np.ndarray = _zeros(1, 0, 0)  # sim x year x age
    CAL: np.ndarray = _zeros(1, 0, 0)  # sim x year x length bin
    CAL_bins: np.ndarray = _zeros(0)
    CAL_mids: np.ndarray = _zeros(0)
    ML: np.ndarray = _zeros(1, 0)  # sim x year

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class StockRecord:
    # biological parameters for an MSEtool Stock object; pairs are [lower, upper]
    Name: str = ""
    Common_Name: str = ""
    Species: str = ""
    maxage: int = 0
    R0: float = np.nan
    M: np.ndarray = _zeros(0)  # pair, or age-varying lower bound
    M2: np.ndarray = _zeros(0)  # age-varying upper bound
    Msd: np.ndarray = _zeros(2)
    h: np.ndarray = _zeros(2)
    SRrel: int = 1
    Perr: np.ndarray = _zeros(2)
    AC: np.ndarray = _zeros(2)
    a: float = np.nan
    b: float = np.nan
    Linf: np.ndarray = _zeros(2)
    K: np.ndarray = _zeros(2)
    t0: np.ndarray = _zeros(2)
    LenCV: np.ndarray = _zeros(2)
    Ksd: np.ndarray = _zeros(2)
    Linfsd: np.ndarray = _zeros(2)
    Size_area_1: np.ndarray = _zeros(2)
    Frac_area_1: np.ndarray = _zeros(2)
    Prob_staying: np.ndarray = _zeros(2)
    L50: np.ndarray = _zeros(2)
    L50_95: np.ndarray = _zeros(2)
    D: np.ndarray = _zeros(2)
    Fdisc: np.ndarray = _zeros(0)
    Source: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
