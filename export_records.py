from typing import Dict, Tuple, Union

import netCDF4 as nc
import numpy as np

from mse_records import DataRecord, StockRecord

# field: (dimensions, long name, units)
DATA_VARIABLES: Dict[str, Tuple[tuple, str, str]] = {
    "nsim": (("ones",), "number of simulations", "count"),
    "Year": (("year",), "years with complete catch data", "year"),
    "Cat": (("sim", "year"), "total annual catch", "catch units"),
    "CV_Cat": (("sim", "year"), "coefficient of variation of catch", "cv"),
    "Rec": (("sim", "year"), "recruitment scaled to age 0", "number"),
    "t": (("ones",), "number of years of catch data", "years"),
    "AvC": (("ones",), "average catch", "catch units"),
    "Dt": (("ones",), "depletion over the catch time series", "ratio"),
    "Mort": (("ones",), "natural mortality rate", "1/yr"),
    "FMSY_M": (("ones",), "ratio of reference F to natural mortality", "ratio"),
    "BMSY_B0": (("ones",), "ratio of reference biomass to unfished biomass", "ratio"),
    "L50": (("ones",), "length at 50% maturity", "length units"),
    "L95": (("ones",), "length at 95% maturity", "length units"),
    "LFC": (("ones",), "length at first capture (5% vulnerable)", "length units"),
    "LFS": (("ones",), "length at full selection", "length units"),
    "vbK": (("ones",), "von Bertalanffy growth coefficient", "1/yr"),
    "CV_vbK": (("ones",), "cv of vbK", "cv"),
    "vbLinf": (("ones",), "von Bertalanffy asymptotic length", "length units"),
    "CV_vbLinf": (("ones",), "cv of vbLinf", "cv"),
    "vbt0": (("ones",), "von Bertalanffy age at length zero", "yr"),
    "CV_vbt0": (("ones",), "cv of vbt0", "cv"),
    "LenCV": (("ones",), "cv of length at age", "cv"),
    "wla": (("ones",), "weight-length parameter a", "weight units"),
    "wlb": (("ones",), "weight-length parameter b", "dimensionless"),
    "steep": (("ones",), "steepness of the stock-recruit relationship", "dimensionless"),
    "sigmaR": (("ones",), "recruitment deviation standard deviation", "log space"),
    "MaxAge": (("ones",), "maximum age", "yr"),
    "Dep": (("ones",), "current spawning biomass relative to unfished", "ratio"),
    "Abun": (("ones",), "current vulnerable abundance", "catch units"),
    "SpAbun": (("ones",), "current spawning abundance", "biomass units"),
    "LHYear": (("ones",), "last historical year", "year"),
    "Cref": (("ones",), "reference catch", "catch units"),
    "Ind": (("sim", "year"), "combined relative abundance index", "relative"),
    "CV_Ind": (("sim", "year"), "cv of combined index", "cv"),
    "AddInd": (("sim", "nind", "year"), "additional abundance indices", "index units"),
    "CV_AddInd": (("sim", "nind", "year"), "cv of additional indices", "cv"),
    "AddIndV": (("sim", "nind", "age"), "vulnerability at age of additional indices", "proportion"),
    "AddIndType": (("nind",), "additional index type", "code"),
    "AddIunits": (("nind",), "additional index units", "code"),
    "CAA": (("sim", "year", "age"), "catch at age", "number of fish"),
    "CAL": (("sim", "year", "len"), "catch at length", "number of fish"),
    "CAL_bins": (("lenbins",), "catch at length bin edges", "length units"),
    "CAL_mids": (("len",), "catch at length bin midpoints", "length units"),
    "ML": (("sim", "year"), "mean length of fish at or above LFS", "length units"),
}

STOCK_VARIABLES: Dict[str, Tuple[tuple, str, str]] = {
    "maxage": (("ones",), "maximum age", "yr"),
    "R0": (("ones",), "unfished recruitment", "number"),
    "M": (("mdim",), "natural mortality bounds", "1/yr"),
    "M2": (("mdim",), "upper bound of age-varying natural mortality", "1/yr"),
    "Msd": (("twos",), "interannual variability in M", "cv"),
    "h": (("twos",), "steepness bounds", "dimensionless"),
    "SRrel": (("ones",), "stock-recruit relationship", "code"),
    "Perr": (("twos",), "recruitment process error bounds", "log space"),
    "AC": (("twos",), "recruitment autocorrelation bounds", "dimensionless"),
    "a": (("ones",), "weight-length parameter a", "kg"),
    "b": (("ones",), "weight-length parameter b", "dimensionless"),
    "Linf": (("twos",), "asymptotic length bounds", "length units"),
    "K": (("twos",), "growth coefficient bounds", "1/yr"),
    "t0": (("twos",), "age at length zero bounds", "yr"),
    "LenCV": (("twos",), "cv of length at age bounds", "cv"),
    "Ksd": (("twos",), "interannual variability in K", "cv"),
    "Linfsd": (("twos",), "interannual variability in Linf", "cv"),
    "Size_area_1": (("twos",), "size of area 1", "proportion"),
    "Frac_area_1": (("twos",), "fraction of unfished biomass in area 1", "proportion"),
    "Prob_staying": (("twos",), "probability of staying in area 1", "probability"),
    "L50": (("twos",), "length at 50% maturity bounds", "length units"),
    "L50_95": (("twos",), "length increment from 50% to 95% maturity bounds", "length units"),
    "D": (("twos",), "current depletion bounds", "ratio"),
    "Fdisc": (("twos",), "discard mortality range", "proportion"),
}


# Subroutine to write a Data or Stock record to a netcdf file
def write_record_nc(record: Union[DataRecord, StockRecord], outfile: str):
    if isinstance(record, DataRecord):
        variables = DATA_VARIABLES
        kind = "Data"
    elif isinstance(record, StockRecord):
        variables = STOCK_VARIABLES
        kind = "Stock"
    else:
        raise TypeError(f"Cannot write {type(record).__name__} to netcdf")

    values = record.to_dict()

    # dimension sizes from the arrays that carry them; empty fields are not written
    dimensions = {"ones": 1, "twos": 2}
    for field, (dims, _, _) in variables.items():
        value = np.atleast_1d(np.asarray(values[field], dtype=float))
        if value.size == 0 or dims in (("ones",), ("twos",)):
            continue
        if value.ndim != len(dims):
            raise ValueError(f"{kind} field {field} has shape {value.shape}, expected dimensions {dims}")
        for dim, size in zip(dims, value.shape):
            if dimensions.setdefault(dim, size) != size:
                raise ValueError(f"{kind} field {field} has {size} {dim}, other fields have {dimensions[dim]}")

    biodata = nc.Dataset(outfile, "w")
    for dim, size in dimensions.items():
        biodata.createDimension(dim, size)

    for field, (dims, longName, units) in variables.items():
        value = np.atleast_1d(np.asarray(values[field], dtype=float))
        if value.size == 0:
            continue
        biodata.createVariable(field, "f8", dims)
        biodata.variables[field].long_name = longName
        biodata.variables[field].units = units
        biodata.variables[field][:] = value

    # text fields
    biodata.record_type = kind
    for field, value in values.items():
        if isinstance(value, str) and value:
            biodata.setncattr(field, value)
    if isinstance(record, DataRecord) and record.AddIndNames:
        biodata.setncattr("AddIndNames", ",".join(record.AddIndNames))

    biodata.close()
