import copy
import logging
from typing import Dict, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from age_extrapolate import extend_a_series, extend_to_age_zero
from comp_data import comp_combine, comp_complete, length_bins, mean_length_above
from growth_maturity import maturity_at_length, proportion_mature_at_age, recruit_scale
from index_data import (combine_indices, index_frames, index_units, order_indices,
                        replicate, select_abbreviations)
from mse_records import DataRecord
from rdat_standardize import Rdat, RdatError, common_name, standardize_rdat, stock_name
from selectivity import (extend_selectivities, fleet_selectivity_matrix,
                         resolve_index_selectivity, vulnerability_lengths)
from species_info import lookup_species
from unit_scale import (biomass_to_klb, check_wlb, convert_mass, infer_wla_scale,
                        length_rescale_wla, length_scalar, mass_scalar)

logger = logging.getLogger(__name__)

# index abbreviation -> selectivity to use when the index has none of its own
DEFAULT_FLEET_SEL_ABB_KEY = {"sTV": "sCT", "rHB": "rGN", "rGN": "rHB"}

DEFAULT_ADD_IND_ORDER = [
    "sTV", "sCT", "sVD", "sBL", "sVL", "sBT", "sFT", "rHB", "rHB.D",
    "cDV", "cHL", "cLL", "cOT", "cPT", "cGN", "rGN",
]

# first letter of an index abbreviation (survey, recreational, commercial) -> AddIunits
DEFAULT_ADD_IND_FLEET_TYPE_KEY = {"s": 0, "r": 0, "c": 1}


def parm_cons_growth(rdat: Rdat) -> Tuple[float, float, float]:
    missing = [p for p in ("Linf", "K", "t0") if p not in rdat.parmCons]
    if missing:
        raise RdatError(f"rdat is missing required field parm.cons${', parm.cons$'.join(missing)}")
    return rdat.parmCons["Linf"], rdat.parmCons["K"], rdat.parmCons["t0"]


def m_constant(rdat: Rdat, aSeries: pd.DataFrame) -> float:
    if rdat.parms.get("M.constant") is not None:
        mConst = float(rdat.parms["M.constant"])
    else:
        mConst = float(aSeries["M"].iloc[-1])
    if not mConst > 0:
        raise RdatError(f"Natural mortality must be positive, not {mConst}")
    return mConst


# Catch, biomass and fishing mortality of a named reference point
def reference_points(
    parms: Dict,  # rdat parms
    frefName: str,  # "Fmsy", "F30", "F40", ...
    catchSc: float = 1.0,  # multiplier applied to catch
) -> Tuple[float, float, float]:
    if frefName == "Fmsy":
        keys = ("msy.klb", "Bmsy", "Fmsy")
    elif frefName.startswith("F"):
        keys = (f"L.{frefName}.klb", f"B.{frefName}", frefName)
    else:
        raise RdatError(f"frefName must name an F reference point (e.g. Fmsy, F30), not {frefName!r}")

    missing = [k for k in keys if parms.get(k) is None]
    if missing:
        raise RdatError(f"Reference point {frefName} not available in rdat parms (missing {', '.join(missing)})")
    return float(parms[keys[0]]) * catchSc, float(parms[keys[1]]), float(parms[keys[2]])


def _parm(parms: Dict, key: str) -> float:
    if parms.get(key) is None:
        raise RdatError(f"rdat is missing required field parms${key}")
    return float(parms[key])


# Parameter used as a divisor
def positive_parm(parms: Dict, key: str) -> float:
    value = _parm(parms, key)
    if not value > 0:
        raise RdatError(f"rdat parms${key} must be positive, not {value}")
    return value


def _sim_by_year(value, nsim: int, nyear: int) -> np.ndarray:
    value = np.asarray(value, dtype=float)
    if value.ndim == 0:
        return np.full((nsim, nyear), float(value))
    if value.ndim == 1:
        return replicate(value, nsim)
    return value


def rdat_to_Data(
    rdat: Dict,  # BAM output (rdat) as a mapping
    Data: Optional[DataRecord] = None,  # record to start from, copied, never modified
    herm: Optional[str] = None,  # "gonochoristic" or "protogynous", looked up if None
    nsim: int = 1,  # size of the replicate dimension
    genusSpecies: Optional[str] = None,  # e.g. "Centropristis striata", looked up if None
    region: str = "Southeast US Atlantic",
    frefName: str = "Fmsy",  # F reference point named in parms (Fmsy, F30, ...)
    rec: Union[str, None, Sequence[float]] = "bam_recruits",  # "bam_recruits", None to keep Data.Rec, or values
    caaAbb: Union[str, Sequence[str]] = "all",  # age comps to use, "all" or "none"
    calAbb: Union[str, Sequence[str]] = "all",  # length comps to use, "all" or "none"
    indAbb: Union[str, Sequence[str]] = "all",  # indices to use, "all" or "none"
    cvVbK: float = 0.001,
    cvVbLinf: float = 0.001,
    cvVbt0: float = 0.001,
    cvCat=None,  # catch cv, 0.05 if None
    matAge1Max: float = 0.49,  # cap on maturity of the first age class
    lengthSc: Union[float, str] = 0.1,  # length multiplier (mm to cm), or target length unit
    wlaSc: Union[float, str, None] = None,  # wla multiplier to kg, or wla weight unit; inferred if None
    wlaUnit: str = "lbs",  # weight unit of the reported wla
    wlaUnitMult: float = 1000,  # multiplier applied to wla in wlaUnit
    catchSc: Union[float, str] = 1,  # catch multiplier (BAM catch is klb), or target mass unit
    combineIndices: bool = False,  # geometric mean of all indices in Ind instead of AddInd
    scaleRows: bool = False,  # re-proportion combined comps to rows summing to 1
    fleetSelAbbKey: Optional[Dict[str, str]] = None,  # index abb -> selectivity abb fallback
    addIndOrder: Optional[Sequence[str]] = None,  # preferred order of AddInd indices
    addIndFleetTypeKey: Optional[Dict[str, float]] = None,  # fleet type letter -> AddIunits
    speciesTable: Optional[pd.DataFrame] = None,  # species lookup table
) -> DataRecord:
    if nsim < 1:
        raise ValueError(f"nsim must be a positive integer, not {nsim}")
    if fleetSelAbbKey is None:
        fleetSelAbbKey = DEFAULT_FLEET_SEL_ABB_KEY
    if addIndOrder is None:
        addIndOrder = DEFAULT_ADD_IND_ORDER
    if addIndFleetTypeKey is None:
        addIndFleetTypeKey = DEFAULT_ADD_IND_FLEET_TYPE_KEY

    record = DataRecord() if Data is None else copy.deepcopy(Data)

    std = standardize_rdat(rdat)
    info = std.info
    parms = std.parms
    endyr = std.endyr

    name = stock_name(info["species"])
    lengthSc = length_scalar(lengthSc, info.get("units.length", "mm"))
    catchSc = mass_scalar(catchSc, "klb")

    # MSEtool expects age-based data to begin with age 0
    aSeries = extend_a_series(std.aSeries, name)
    age = aSeries.index.to_numpy()
    std = extend_selectivities(std, name)
    if std.selTot is None:
        raise RdatError("rdat is missing required field sel.age$sel.v.wgted.tot")
    selTot = std.selTot.reindex(pd.Index(age, name="age")).fillna(0.0)
    if std.selL is None:
        logger.info(f"{name}: sel.v.wgted.L not available. Total selectivity used for landings")
        selL = selTot
    else:
        selL = std.selL.reindex(pd.Index(age, name="age")).fillna(0.0)

    genusSpecies, herm = lookup_species(name, genusSpecies, herm, speciesTable)
    bToKlb = biomass_to_klb(info.get("units.biomass"))

    # catch, for years with complete catch data
    tSeries = std.tSeries
    if "total.L.klb" not in tSeries.columns:
        raise RdatError("rdat is missing required field t.series$total.L.klb")
    catchRaw = tSeries["total.L.klb"] * catchSc
    complete = tSeries["year"].notna() & catchRaw.notna()
    year = tSeries.index[complete].to_numpy()
    nyear = len(year)
    if nyear == 0:
        raise RdatError(f"{name}: no years with complete catch data")
    catch = catchRaw[complete].to_numpy(dtype=float)

    # scale BAM recruits to approximate age-0 recruits (most BAM models use age-1 for recruitment)
    rSc = recruit_scale(aSeries, std.minAge)
    if "recruits" in tSeries.columns:
        recruitsSc = tSeries["recruits"] * rSc
    else:
        recruitsSc = pd.Series(np.nan, index=tSeries.index)

    Linf, K, t0 = parm_cons_growth(std)
    lenCV = std.parmCons.get("len.cv.val", np.nan)
    mConst = m_constant(std, aSeries)
    cRef, bRef, fRef = reference_points(parms, frefName, catchSc)
    b0 = positive_parm(parms, "B0")
    ssb0 = positive_parm(parms, "SSB0")
    if "SSB" not in tSeries.columns:
        raise RdatError("rdat is missing required field t.series$SSB")
    ssbCurrent = float(tSeries.loc[endyr, "SSB"])

    # absolute current vulnerable abundance, in the same units as catch
    if std.bAge is not None:
        bAge = extend_to_age_zero(std.bAge, 0, np.inf, label="B.age", name=name, axis=1, xout=age)
        bAgeEnd = bAge.loc[endyr].reindex(age).fillna(0.0).to_numpy(dtype=float)
        abun = float(np.sum(bAgeEnd * bToKlb * selTot.to_numpy())) * catchSc
    else:
        logger.warning(f"{name}: B.age not available. Abun left missing")
        abun = np.nan

    fmsyM = fRef / mConst
    bmsyB0 = bRef / b0
    dep = ssbCurrent / ssb0

    # recruitment for years where recruitment deviations were estimated
    if rec is None:
        recArr = record.Rec
    elif isinstance(rec, str):
        if rec != "bam_recruits":
            raise ValueError(f"rec must be 'bam_recruits', None or a sequence of values, not {rec!r}")
        recSeries = recruitsSc.copy()
        if std.parmTvec is not None and "log.rec.dev" in std.parmTvec.columns:
            yearNoDev = std.parmTvec.index[std.parmTvec["log.rec.dev"].isna()]
            recSeries[recSeries.index.isin(yearNoDev)] = np.nan
        recArr = replicate(recSeries.reindex(year).to_numpy(dtype=float), nsim)
    else:
        recArr = _sim_by_year(rec, nsim, nyear)

    cat = replicate(catch, nsim)
    cvCatArr = _sim_by_year(0.05 if cvCat is None else cvCat, nsim, nyear)

    # abundance indices
    ind = cvInd = None
    addInd = cvAddInd = addIndV = addIndType = addIunits = None
    addIndNames = []
    indAbbs = select_abbreviations(list(std.indices), indAbb, "indAbb", name)
    if len(indAbbs) > 0:
        indFrame, cvFrame = index_frames(std.indices, indAbbs, year)
        if combineIndices:
            combined = combine_indices(indFrame, cvFrame)
            ind = replicate(combined["Ind"].to_numpy(), nsim)
            cvInd = replicate(combined["CV_Ind"].to_numpy(), nsim)
        else:
            addIndNames = [indAbbs[i] for i in order_indices(indAbbs, addIndOrder)]
            addInd = replicate(indFrame[addIndNames].T.to_numpy(), nsim)
            cvAddInd = replicate(cvFrame[addIndNames].T.to_numpy(), nsim)
            addIndType = np.ones(len(addIndNames))
            addIunits = index_units(addIndNames, addIndFleetTypeKey)

            # selectivity at age attributed to each index
            selMatrix = fleet_selectivity_matrix(std, age)
            indV = np.vstack([
                resolve_index_selectivity(abb, selMatrix, fleetSelAbbKey, selTot).to_numpy(dtype=float)
                for abb in addIndNames
            ])
            addIndV = replicate(indV, nsim)

    ssb = tSeries["SSB"]
    dt = float(ssb.loc[year[-1]] / ssb.loc[year[0]])

    # maturity at length
    pmat = proportion_mature_at_age(aSeries, matAge1Max=matAge1Max, herm=herm)
    matLen = maturity_at_length(age, pmat.to_numpy(), Linf, K, t0)
    l50 = matLen["L50"] * lengthSc
    l95 = (matLen["L50"] + matLen["L50_95"]) * lengthSc

    # length at 5% and full vulnerability
    vuln = vulnerability_lengths(selTot, selL, Linf, K, t0)
    l5 = vuln["L5"] * lengthSc
    lfs = vuln["LFS"] * lengthSc

    # age comps
    caa = None
    acompAbbs = select_abbreviations(list(std.acomps), caaAbb, "caaAbb", name)
    if len(acompAbbs) > 0:
        acompNfish = comp_complete({abb: std.acomps[abb] for abb in acompAbbs}, year, age)
        caa = replicate(comp_combine(acompNfish, scaleRows=scaleRows).to_numpy(), nsim)

    # length comps
    cal = calMids = calBins = ml = None
    lcompAbbs = select_abbreviations(list(std.lcomps), calAbb, "calAbb", name)
    if len(lcompAbbs) > 0:
        lcompNfish = comp_complete({abb: std.lcomps[abb] for abb in lcompAbbs}, year)
        lcomp = comp_combine(lcompNfish, scaleRows=scaleRows)
        calMids = lcomp.columns.to_numpy(dtype=float) * lengthSc
        lcomp.columns = pd.Index(calMids, name="len")
        calBins = length_bins(calMids)
        ml = replicate(mean_length_above(lcomp, lfs).to_numpy(), nsim)
        cal = replicate(lcomp.to_numpy(), nsim)

    # weight-length parameters, with wla brought to kg and then to wlaUnit
    wla = _parm(parms, "wgt.a")
    wlb = _parm(parms, "wgt.b")
    if wlaSc is None:
        wlaSc = infer_wla_scale(wla, name)
    elif isinstance(wlaSc, str):
        wlaSc = convert_mass(1.0, wlaSc, "kg")
    wlaUser = convert_mass(wla * wlaSc, "kg", wlaUnit)
    check_wlb(wlb, name)
    wlaOut = wlaUnitMult * length_rescale_wla(wlaUser, lengthSc, wlb)

    # fill the record
    record.Name = name
    record.Common_Name = common_name(name)
    record.Species = genusSpecies
    record.Region = region
    record.nsim = nsim
    record.Year = year
    record.Cat = cat
    record.CV_Cat = cvCatArr
    record.Rec = recArr
    record.t = nyear
    record.AvC = float(np.mean(catch))
    record.Dt = dt
    record.Mort = mConst
    record.FMSY_M = fmsyM
    record.BMSY_B0 = bmsyB0
    record.L50 = l50
    record.L95 = l95
    record.LFC = l5
    record.LFS = lfs
    record.vbK = K
    record.CV_vbK = cvVbK
    record.vbLinf = Linf * lengthSc
    record.CV_vbLinf = cvVbLinf
    record.vbt0 = t0
    record.CV_vbt0 = cvVbt0
    record.LenCV = lenCV
    record.wla = wlaOut
    record.wlb = wlb
    record.steep = std.parmCons.get("steep", np.nan)
    record.sigmaR = std.parmCons.get("rec.sigma", np.nan)
    record.MaxAge = int(age.max())
    record.Dep = dep
    record.Abun = abun
    record.SpAbun = ssbCurrent
    record.LHYear = endyr
    record.Cref = cRef
    if ind is not None:
        record.Ind = ind
        record.CV_Ind = cvInd
    if addInd is not None:
        record.AddInd = addInd
        record.CV_AddInd = cvAddInd
        record.AddIndV = addIndV
        record.AddIndType = addIndType
        record.AddIunits = addIunits
        record.AddIndNames = addIndNames
    if caa is not None:
        record.CAA = caa
    if cal is not None:
        record.CAL = cal
        record.CAL_bins = calBins
        record.CAL_mids = calMids
        record.ML = ml

    return record
