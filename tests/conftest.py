"""Shared fixtures: a small synthetic BAM rdat in the json-friendly layout."""

import copy

import pytest

YEARS = [2000, 2001, 2002, 2003, 2004, 2005]


def _matrix(rows, cols, values):
    return {str(r): {str(c): v for c, v in zip(cols, row)} for r, row in zip(rows, values)}


RDAT = {
    "info": {
        "species": "black sea bass",
        "title": "SEDAR test assessment",
        "date": "2024",
        "units.biomass": "mt",
    },
    "parms": {
        "styr": 2000,
        "endyr": 2004,
        "M.constant": 0.3,
        "msy.klb": 100.0,
        "Bmsy": 500.0,
        "Fmsy": 0.25,
        "L.F30.klb": 90.0,
        "B.F30": 550.0,
        "F30": 0.2,
        "B0": 1500.0,
        "SSB0": 1000.0,
        "SSBmsy": 400.0,
        "SSBend.SSBmsy": 1.2,
        "BH.R0": 10000.0,
        "wgt.a": 1.5e-5,
        "wgt.b": 3.0,
        "D.mort.HB": 0.1,
        "D.mort.cHL": 0.2,
    },
    "parm.cons": {
        "Linf": [450, 300, 700, 1, 0, 0, -1, 500.0],
        "K": [0.3, 0.05, 0.9, 1, 0, 0, -1, 0.2],
        "t0": [-1, -3, 1, 1, 0, 0, -1, -0.5],
        "len_cv_val": [0.1, 0.01, 0.5, 1, 0, 0, -1, 0.12],
        "rec_sigma": [0.6, 0.2, 1.2, -1, 0, 0, -1, 0.6],
        "steep": [0.8, 0.2, 0.99, -1, 0, 0, -1, 0.8],
    },
    "parm.tvec": {
        "year": [2000, 2001, 2002, 2003, 2004],
        "log.rec.dev": [None, 0.1, -0.2, 0.15, None],
    },
    "a.series": {
        "age": [1, 2, 3, 4, 5],
        "M": [0.4, 0.3, 0.25, 0.25, 0.25],
        "mat.female": [0.6, 0.7, 0.9, 1.0, 1.0],
        "mat.male": [0.0, 0.2, 0.5, 1.0, 1.0],
        "prop.female": [0.9, 0.8, 0.6, 0.4, 0.2],
        "prop.male": [0.1, 0.2, 0.4, 0.6, 0.8],
    },
    "t.series": {
        "year": YEARS,
        "total.L.klb": [100.0, 110.0, 120.0, 130.0, 140.0, 150.0],
        "B": [2000.0, 1900.0, 1800.0, 1700.0, 1600.0, 1550.0],
        "SSB": [800.0, 760.0, 700.0, 650.0, 600.0, 580.0],
        "recruits": [1000.0, 1100.0, 900.0, 950.0, 1050.0, 1000.0],
        "logR.dev": [0.0, 0.1, -0.2, 0.15, 0.05, 0.0],
        "U.sCT.ob": [1.2, -99999, 0.8, 1.0, 1.1, 1.0],
        "cv.U.sCT": [0.2, 0.2, 0.2, 0.2, 0.2, 0.2],
        "U.cHL.ob": [2.0, 2.2, 1.8, 1.6, 1.5, 1.5],
        "cv.U.cHL": [0.3, 0.3, 0.3, 0.3, 0.3, 0.3],
        "U.rHB.ob": [0.5, 0.6, 0.7, 0.6, 0.5, 0.5],
        "cv.U.rHB": [0.25, 0.25, 0.25, 0.25, 0.25, 0.25],
        "acomp.cHL.n": [10.0, 20.0, 0.0, -99999, 30.0, 30.0],
        "acomp.cHL.neff": [8.0, 15.0, 0.0, -99999, 20.0, 20.0],
        "acomp.sCT.n": [5.0, 5.0, 5.0, 5.0, 5.0, 5.0],
        "lcomp.cHL.n": [50.0, 50.0, 50.0, 50.0, 50.0, 50.0],
    },
    "comp.mats": {
        "acomp.cHL.ob": _matrix(
            [2000, 2001, 2002, 2003, 2004], [1, 2, 3, 4, 5],
            [[0.1, 0.3, 0.3, 0.2, 0.1],
             [0.2, 0.3, 0.2, 0.2, 0.1],
             [0.1, 0.2, 0.4, 0.2, 0.1],
             [0.1, 0.2, 0.3, 0.3, 0.1],
             [0.2, 0.2, 0.2, 0.2, 0.2]],
        ),
        "acomp.sCT.ob": _matrix(
            [2001, 2002, 2003], [2, 3, 4, 5],
            [[0.4, 0.3, 0.2, 0.1],
             [0.3, 0.3, 0.2, 0.2],
             [0.25, 0.25, 0.25, 0.25]],
        ),
        "lcomp.cHL.ob": _matrix(
            [2000, 2001, 2002, 2003, 2004], [200, 250, 300, 350, 400],
            [[0.1, 0.2, 0.4, 0.2, 0.1],
             [0.2, 0.2, 0.3, 0.2, 0.1],
             [0.1, 0.3, 0.3, 0.2, 0.1],
             [0.0, 0.2, 0.4, 0.3, 0.1],
             [0.1, 0.1, 0.4, 0.3, 0.1]],
        ),
    },
    "sel.age": {
        "sel.v.wgted.tot": {"1": 0.2, "2": 0.6, "3": 1.0, "4": 1.0, "5": 1.0},
        "sel.v.wgted.L": {"1": 0.1, "2": 0.5, "3": 1.0, "4": 0.9, "5": 0.8},
        "sel.v.wgted.D": {"1": 1.0, "2": 0.5, "3": 0.1, "4": 0.0, "5": 0.0},
        "sel.v.sCT": {"1": 0.5, "2": 1.0, "3": 1.0, "4": 1.0, "5": 1.0},
        "sel.v.rGN": {"1": 0.3, "2": 0.6, "3": 0.9, "4": 1.0, "5": 1.0},
        "sel.m.cHL": _matrix(
            [2000, 2004], [1, 2, 3, 4, 5],
            [[0.2, 0.5, 0.9, 1.0, 1.0],
             [0.1, 0.4, 0.8, 1.0, 1.0]],
        ),
    },
    "B.age": _matrix(
        [2000, 2001, 2002, 2003, 2004], [1, 2, 3, 4, 5],
        [[120.0, 160.0, 130.0, 90.0, 60.0],
         [115.0, 158.0, 128.0, 88.0, 58.0],
         [110.0, 155.0, 125.0, 85.0, 55.0],
         [105.0, 152.0, 122.0, 82.0, 52.0],
         [100.0, 150.0, 120.0, 80.0, 50.0]],
    ),
}


@pytest.fixture
def rdat():
    return copy.deepcopy(RDAT)
