import copy
import logging
from typing import Dict, Optional, Sequence, Union

import numpy as np
import pandas as pd

from age_extrapolate import extend_a_series
from growth_maturity import maturity_at_length, proportion_mature_at_age, recruit_scale
from mse_records import StockRecord, bound_pair
from rdat_standardize import RdatError, common_name, standardize_rdat, stock_name
from rdat_to_data import m_constant, parm_cons_growth, positive_parm
from species_info import lookup_species
from unit_scale import check_wlb, convert_mass, infer_wla_scale, length_rescale_wla, length_scalar

logger = logging.getLogger(__name__)

Pair = Sequence[float]


# Lag-1 autocorrelation as computed by R's acf (deviations from the series mean)
def lag1_autocorrelation(x) -> float:
    x = np.asarray(x, dtype=float)
    x = x[~np.isnan(x)]
    if x.size < 2:
        return np.nan
    dev = x - x.mean()
    denom = np.sum(dev ** 2)
    if denom == 0:
        return np.nan
    return float(np.sum(dev[:-1] * dev[1:]) / denom)


def recruitment_autocorrelation(
    tSeries: pd.DataFrame,  # standardized year table
    AC: float = 0.2,  # value used when BAM rec devs are unavailable
    useBamAC: bool = True,  # compute from BAM rec devs when possible
) -> float:
    if not useBamAC or "logR.dev" not in tSeries.columns:
        return AC
    logRDev = tSeries["logR.dev"].dropna().to_numpy(dtype=float)
    if logRDev.size == 0 or np.all(logRDev == 0):
        return AC
    out = lag1_autocorrelation(logRDev)
    return AC if np.isnan(out) else out


# Range of the discard mortality values found in parms, empty if there are none
def discard_mortality_range(parms: Dict) -> np.ndarray:
    values = [np.atleast_1d(np.asarray(v, dtype=float)) for k, v in parms.items() if "D.mort" in k and v is not None]
    if len(values) == 0:
        return np.zeros(0)
    values = np.concatenate(values)
    return np.array([np.nanmin(values), np.nanmax(values)])


def rdat_to_Stock(
    rdat: Dict,  # BAM output (rdat) as a mapping
    Stock: Optional[StockRecord] = None,  # record to start from, copied, never modified
    sc: float = 0.0,  # scalar giving default bounds of value * (1 -/+ sc)
    scLim: Optional[Pair] = None,  # default bound multipliers, sc * c(-1, 1) + 1 if None
    mScLim: Pair = (0.999, 1.001),  # bound multipliers for M
    isMAgeVarying: bool = False,  # M and M2 are age-varying bounds from a.series M
    steepScLim: Optional[Pair] = None,
    recSigmaScLim: Optional[Pair] = None,
    recAcScLim: Optional[Pair] = None,
    linfScLim: Optional[Pair] = None,
    kScLim: Optional[Pair] = None,
    t0ScLim: Optional[Pair] = None,
    lenCvValScLim: Optional[Pair] = None,
    l50ScLim: Optional[Pair] = None,
    l50to95ScLim: Optional[Pair] = None,
    dScLim: Optional[Pair] = None,
    Msd: Pair = (0, 0),
    Ksd: Pair = (0, 0),
    Linfsd: Pair = (0, 0),
    lengthSc: Union[float, str] = 0.1,  # length multiplier (mm to cm), or target length unit
    wlaSc: Union[float, str, None] = None,  # wla multiplier to kg, or wla weight unit; inferred if None
    sizeArea1: Pair = (0.5, 0.5),
    fracArea1: Pair = (0.5, 0.5),
    probStaying: Pair = (0.5, 0.5),
    SRrel: int = 1,  # 1 Beverton-Holt, 2 Ricker
    R0: float = 1000,  # unfished recruitment used when useBamR0 is False
    useBamR0: bool = True,  # use BAM BH.R0 scaled to age 0
    AC: float = 0.2,  # default recruitment autocorrelation
    useBamAC: bool = True,  # compute AC from BAM rec devs
    Fdisc: Optional[Pair] = None,  # discard mortality range, from parms D.mort* if None
    matAge1Max: float = 0.49,  # cap on maturity of the first age class
    herm: Optional[str] = None,  # "gonochoristic" or "protogynous", looked up if None
    genusSpecies: Optional[str] = None,  # e.g. "Pagrus pagrus", looked up if None
    speciesTable: Optional[pd.DataFrame] = None,  # species lookup table
) -> StockRecord:
    if scLim is None:
        scLim = sc * np.array([-1, 1]) + 1
    steepScLim = scLim if steepScLim is None else steepScLim
    recSigmaScLim = scLim if recSigmaScLim is None else recSigmaScLim
    recAcScLim = scLim if recAcScLim is None else recAcScLim
    linfScLim = scLim if linfScLim is None else linfScLim
    kScLim = scLim if kScLim is None else kScLim
    t0ScLim = scLim if t0ScLim is None else t0ScLim
    lenCvValScLim = scLim if lenCvValScLim is None else lenCvValScLim
    l50ScLim = scLim if l50ScLim is None else l50ScLim
    l50to95ScLim = scLim if l50to95ScLim is None else l50to95ScLim
    dScLim = scLim if dScLim is None else dScLim

    record = StockRecord() if Stock is None else copy.deepcopy(Stock)

    std = standardize_rdat(rdat)
    info = std.info
    parms = std.parms

    name = stock_name(info["species"])
    lengthSc = length_scalar(lengthSc, info.get("units.length", "mm"))

    # MSEtool expects age-based data to begin with age 0
    aSeries = extend_a_series(std.aSeries, name)
    age = aSeries.index.to_numpy()

    genusSpecies, herm = lookup_species(name, genusSpecies, herm, speciesTable)

    Linf, K, t0 = parm_cons_growth(std)
    Linf = Linf * lengthSc

    # scale BAM R0 to approximate unfished numbers at age-0 (most BAM models use age-1 for recruitment)
    if useBamR0:
        if parms.get("BH.R0") is None:
            raise RdatError("rdat is missing required field parms$BH.R0 (set useBamR0=False to supply R0)")
        r0 = float(parms["BH.R0"]) * recruit_scale(aSeries, std.minAge)
    else:
        r0 = float(R0)

    mConst = m_constant(std, aSeries)
    mAge = aSeries["M"].to_numpy(dtype=float)
    mLow, mHigh = np.min(mScLim), np.max(mScLim)

    steep = std.parmCons.get("steep", np.nan)
    h = np.clip(bound_pair(steep, steepScLim), 0.2, 0.99)
    recSigma = std.parmCons.get("rec.sigma", np.nan)
    recAC = recruitment_autocorrelation(std.tSeries, AC, useBamAC)

    # weight-length parameters, with wla in kg and scaled for the length unit
    wla = float(parms["wgt.a"]) if parms.get("wgt.a") is not None else np.nan
    wlb = float(parms["wgt.b"]) if parms.get("wgt.b") is not None else np.nan
    if np.isnan(wla) or np.isnan(wlb):
        raise RdatError("rdat is missing required field parms$wgt.a or parms$wgt.b")
    if wlaSc is None:
        wlaSc = infer_wla_scale(wla, name)
    elif isinstance(wlaSc, str):
        wlaSc = convert_mass(1.0, wlaSc, "kg")
    check_wlb(wlb, name)

    pmat = proportion_mature_at_age(aSeries, matAge1Max=matAge1Max, herm=herm)
    matLen = maturity_at_length(age, pmat.to_numpy(), Linf, K, t0)

    # current level of depletion
    ssb0 = positive_parm(parms, "SSB0")
    if parms.get("SSBmsy") is not None and parms.get("SSBend.SSBmsy") is not None:
        ssbEnd = float(parms["SSBmsy"]) * float(parms["SSBend.SSBmsy"])
    else:
        logger.info(f"{name}: SSBmsy or SSBend.SSBmsy not in parms. Depletion computed from t.series SSB")
        ssbEnd = float(std.tSeries.loc[std.endyr, "SSB"])
    depletion = ssbEnd / ssb0

    fdisc = discard_mortality_range(parms) if Fdisc is None else np.asarray(Fdisc, dtype=float)
    source = "; ".join(str(info[k]) for k in ("species", "title", "date") if info.get(k) is not None)

    # fill the record
    record.Name = name
    record.Common_Name = common_name(name)
    record.Species = genusSpecies
    record.maxage = int(age.max())
    record.R0 = r0
    if isMAgeVarying:
        record.M = mAge * mLow
        record.M2 = mAge * mHigh
    else:
        record.M = bound_pair(mConst, mScLim)
    record.Msd = np.asarray(Msd, dtype=float)
    record.h = h
    record.SRrel = SRrel
    record.Perr = bound_pair(recSigma, recSigmaScLim)
    record.AC = np.round(bound_pair(recAC, recAcScLim), 3)
    record.a = length_rescale_wla(wla * wlaSc, lengthSc, wlb)
    record.b = wlb
    record.Linf = bound_pair(Linf, linfScLim)
    record.K = bound_pair(K, kScLim)
    record.t0 = bound_pair(t0, t0ScLim)
    record.LenCV = bound_pair(std.parmCons.get("len.cv.val", np.nan), lenCvValScLim)
    record.Ksd = np.asarray(Ksd, dtype=float)
    record.Linfsd = np.asarray(Linfsd, dtype=float)
    record.Size_area_1 = np.asarray(sizeArea1, dtype=float)
    record.Frac_area_1 = np.asarray(fracArea1, dtype=float)
    record.Prob_staying = np.asarray(probStaying, dtype=float)
    record.L50 = bound_pair(matLen["L50"], l50ScLim)
    record.L50_95 = bound_pair(matLen["L50_95"], l50to95ScLim)
    record.D = bound_pair(depletion, dScLim)
    record.Fdisc = fdisc
    record.Source = f"{source}; rdat file"

    return record


rdat2Stock = rdat_to_Stock
