import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd

# missing value code used throughout BAM output
MISSING = -99999

# canonical name: older names that mean the same thing
PARMS_ALIASES = {
    "BH.R0": ("R0", "BH_R0"),
    "M.constant": ("M.const", "M_constant"),
    "wgt.a": ("wgt_a", "wla"),
    "wgt.b": ("wgt_b", "wlb"),
    "SSBend.SSBmsy": ("SSBend_SSBmsy",),
}
PARM_CONS_ALIASES = {
    "len.cv.val": ("len_cv_val", "len.cv"),
    "rec.sigma": ("rec_sigma",),
    "steep": ("steepness",),
}
A_SERIES_ALIASES = {
    "mat.female": ("mat.fem", "mat_female"),
    "mat.male": ("mat.mal", "mat_male"),
    "prop.female": ("prop.fem", "prop_female"),
    "prop.male": ("prop.mal", "prop_male"),
}
T_SERIES_ALIASES = {
    "total.L.klb": ("L.total.klb", "total_L_klb"),
    "recruits": ("recruit",),
    "logR.dev": ("log.rec.dev",),
}
SEL_AGE_ALIASES = {
    "sel.v.wgted.tot": ("sel.v.wgted.total", "sel.v.wgted.all"),
    "sel.v.wgted.L": ("sel.v.wgted.land",),
    "sel.v.wgted.D": ("sel.v.wgted.disc",),
}

# element of a parm.cons vector holding the estimated value
PARM_CONS_ESTIMATE = 7

indexPattern = re.compile(r"^U\.(.+)\.ob$")
compPattern = re.compile(r"^(acomp|lcomp)\.(.+)\.ob$")
compNPattern = re.compile(r"^(acomp|lcomp)\.(.+)\.n$")
selPattern = re.compile(r"^sel\.([vm])\.(.+)$")


class RdatError(ValueError):
    pass


@dataclass
class IndexSeries:
    abb: str  # fleet abbreviation, e.g. "sCT"
    ob: pd.Series  # observed index by year
    cv: pd.Series  # index cv by year, NaN where not reported


@dataclass
class CompSeries:
    abb: str  # fleet abbreviation
    kind: str  # "acomp" or "lcomp"
    props: pd.DataFrame  # year x class proportions
    n: pd.Series  # sample size by year, NaN where not reported


@dataclass
class Rdat:
    info: Dict[str, Any]
    parms: Dict[str, Any]
    parmCons: Dict[str, float]  # parameter name -> estimated value
    aSeries: pd.DataFrame  # indexed by age
    tSeries: pd.DataFrame  # indexed by year, styr:endyr
    minAge: int  # youngest age in the assessment (before any extrapolation)
    parmTvec: Optional[pd.DataFrame] = None
    bAge: Optional[pd.DataFrame] = None  # year x age
    indices: Dict[str, IndexSeries] = field(default_factory=dict)
    acomps: Dict[str, CompSeries] = field(default_factory=dict)
    lcomps: Dict[str, CompSeries] = field(default_factory=dict)
    selVectors: Dict[str, pd.Series] = field(default_factory=dict)
    selMatrices: Dict[str, pd.DataFrame] = field(default_factory=dict)
    selTot: Optional[pd.Series] = None
    selL: Optional[pd.Series] = None
    selD: Optional[pd.Series] = None

    @property
    def styr(self) -> int:
        return int(self.parms["styr"])

    @property
    def endyr(self) -> int:
        return int(self.parms["endyr"])

    @property
    def ages(self) -> np.ndarray:
        return self.aSeries.index.to_numpy()


# Convert labels that look like numbers ("1", "2000.0") into ints or floats
def numeric_labels(labels) -> pd.Index:
    labels = pd.Index(labels)
    values = pd.to_numeric(pd.Series(labels), errors="coerce")
    if len(values) == 0 or values.isna().any():
        return labels
    if np.all(np.mod(values.to_numpy(dtype=float), 1) == 0):
        return pd.Index(values.astype(int).to_numpy())
    return pd.Index(values.to_numpy(dtype=float))


def _rename_aliases(names, aliases: Dict[str, tuple]) -> Dict[str, str]:
    renames = {}
    for canonical, olds in aliases.items():
        if canonical in names:
            continue
        for old in olds:
            if old in names:
                renames[old] = canonical
                break
    return renames


# Column table (DataFrame or dict of columns) indexed by one of its columns
def _as_table(table, indexName: str) -> pd.DataFrame:
    frame = table.copy() if isinstance(table, pd.DataFrame) else pd.DataFrame(table)
    if indexName in frame.columns:
        frame.index = numeric_labels(frame[indexName])
    else:
        frame.index = numeric_labels(frame.index)
    frame.index.name = indexName
    return frame.apply(pd.to_numeric, errors="coerce")


# Matrix (DataFrame or nested {row: {col: value}} mapping) with numeric labels
def _as_matrix(matrix, rowName: str, colName: str) -> pd.DataFrame:
    if isinstance(matrix, pd.DataFrame):
        frame = matrix.copy()
    else:
        frame = pd.DataFrame.from_dict(matrix, orient="index")
    frame.index = numeric_labels(frame.index)
    frame.columns = numeric_labels(frame.columns)
    frame = frame.sort_index().sort_index(axis=1)
    frame.index.name = rowName
    frame.columns.name = colName
    return frame.apply(pd.to_numeric, errors="coerce").astype(float)


def _as_vector(vector, indexName: str) -> pd.Series:
    series = vector.copy() if isinstance(vector, pd.Series) else pd.Series(vector)
    series.index = numeric_labels(series.index)
    series = series.sort_index()
    series.index.name = indexName
    return pd.to_numeric(series, errors="coerce").astype(float)


def _estimate(value) -> float:
    values = np.atleast_1d(np.asarray(value, dtype=float))
    if values.size > PARM_CONS_ESTIMATE:
        return float(values[PARM_CONS_ESTIMATE])
    return float(values[-1])


def _require(mapping, key: str, where: str):
    if mapping is None or key not in mapping or mapping[key] is None:
        raise RdatError(f"rdat is missing required field {where}${key}")
    return mapping[key]


# Bring an rdat (dict) into one canonical shape regardless of BAM version
def standardize_rdat(rdat: Dict[str, Any]) -> Rdat:
    if not isinstance(rdat, dict):
        raise RdatError("rdat must be a mapping of named components")

    info = dict(_require(rdat, "info", "rdat"))
    _require(info, "species", "info")

    parms = dict(_require(rdat, "parms", "rdat"))
    parms = {_rename_aliases(parms, PARMS_ALIASES).get(k, k): v for k, v in parms.items()}
    _require(parms, "styr", "parms")
    _require(parms, "endyr", "parms")
    styr = int(parms["styr"])
    endyr = int(parms["endyr"])
    if endyr < styr:
        raise RdatError(f"parms$endyr ({endyr}) is before parms$styr ({styr})")

    parmConsRaw = dict(rdat.get("parm.cons") or {})
    parmConsRaw = {_rename_aliases(parmConsRaw, PARM_CONS_ALIASES).get(k, k): v for k, v in parmConsRaw.items()}
    parmCons = {name: _estimate(value) for name, value in parmConsRaw.items()}

    # age table
    aSeries = _as_table(_require(rdat, "a.series", "rdat"), "age")
    aSeries = aSeries.rename(columns=_rename_aliases(aSeries.columns, A_SERIES_ALIASES))
    if "M" not in aSeries.columns:
        raise RdatError("rdat is missing required field a.series$M")
    aSeries = aSeries.drop(columns="age", errors="ignore").sort_index()
    minAge = int(aSeries.index.min())

    # year table, restricted to the model years
    tSeries = _as_table(_require(rdat, "t.series", "rdat"), "year")
    tSeries = tSeries.rename(columns=_rename_aliases(tSeries.columns, T_SERIES_ALIASES))
    tSeries = tSeries.replace(MISSING, np.nan)
    if "year" not in tSeries.columns:
        tSeries["year"] = tSeries.index
    tSeries = tSeries.reindex(pd.Index(range(styr, endyr + 1), name="year"))

    parmTvec = None
    if rdat.get("parm.tvec") is not None:
        parmTvec = _as_table(rdat["parm.tvec"], "year")

    bAge = None
    if rdat.get("B.age") is not None:
        bAge = _as_matrix(rdat["B.age"], "year", "age")

    out = Rdat(info=info, parms=parms, parmCons=parmCons, aSeries=aSeries,
               tSeries=tSeries, minAge=minAge, parmTvec=parmTvec, bAge=bAge)

    # abundance indices
    for col in tSeries.columns:
        match = indexPattern.match(str(col))
        if match:
            abb = match.group(1)
            cvName = f"cv.U.{abb}"
            cv = tSeries[cvName] if cvName in tSeries.columns else pd.Series(np.nan, index=tSeries.index)
            out.indices[abb] = IndexSeries(abb=abb, ob=tSeries[col].copy(), cv=cv.copy())

    # composition matrices and their sample sizes
    sampleSizes = {}
    for col in tSeries.columns:
        match = compNPattern.match(str(col))
        if match:
            sampleSizes[(match.group(1), match.group(2))] = tSeries[col]
    for name, matrix in (rdat.get("comp.mats") or {}).items():
        match = compPattern.match(name)
        if not match:
            continue
        kind, abb = match.groups()
        colName = "age" if kind == "acomp" else "len"
        props = _as_matrix(matrix, "year", colName).replace(MISSING, np.nan)
        n = sampleSizes.get((kind, abb), pd.Series(np.nan, index=tSeries.index))
        comps = out.acomps if kind == "acomp" else out.lcomps
        comps[abb] = CompSeries(abb=abb, kind=kind, props=props, n=n.copy())

    # selectivities
    selAge = dict(rdat.get("sel.age") or {})
    selAge = {_rename_aliases(selAge, SEL_AGE_ALIASES).get(k, k): v for k, v in selAge.items()}
    for name, sel in selAge.items():
        match = selPattern.match(name)
        if not match:
            continue
        form, abb = match.groups()
        if abb.startswith("wgted."):
            continue
        if form == "v":
            out.selVectors[abb] = _as_vector(sel, "age")
        else:
            out.selMatrices[abb] = _as_matrix(sel, "year", "age")
    if selAge.get("sel.v.wgted.tot") is not None:
        out.selTot = _as_vector(selAge["sel.v.wgted.tot"], "age")
    if selAge.get("sel.v.wgted.L") is not None:
        out.selL = _as_vector(selAge["sel.v.wgted.L"], "age")
    if selAge.get("sel.v.wgted.D") is not None:
        out.selD = _as_vector(selAge["sel.v.wgted.D"], "age")

    return out


# Species name formatted the way MSEtool names stocks ("black sea bass" -> "BlackSeaBass")
def stock_name(species: str) -> str:
    return "".join(word[:1].upper() + word[1:].lower() for word in str(species).split())


def common_name(name: str) -> str:
    return re.sub(r"(?<=[a-z])(?=[A-Z])", " ", name)
