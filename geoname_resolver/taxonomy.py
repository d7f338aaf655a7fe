"""
GeoNames feature taxonomy ordering.

Gazetteer entries carry a two-level classification: a single-letter feature
class (A = country/state/region, P = city/village, ...) and a finer feature
code within it (PCLI, ADM1, PPLC, ...). Retrieval sorts on both, so each level
gets an explicit rank table here:

  - feature class: fixed total order A < P < S < T < L < H < R < V < U
  - feature code: curated order grouped by class, most important codes first
    (see http://www.geonames.org/export/codes.html)

Values missing from a table are "unknown". Unknowns compare equal to each
other and always sort after known values, by UNKNOWN_RANK_GAP. The data
provider adds codes over time; new codes must not break sorting.
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import Callable, Optional

FIELD_FEATURE_CLASS = "feature_class"
FIELD_FEATURE_CODE = "feature_code"

# Returned instead of a rank difference when only one side is known.
# Must exceed any in-table rank difference (checked below).
UNKNOWN_RANK_GAP = 1000


FEATURE_CLASS_ORDER: tuple[str, ...] = ("A", "P", "S", "T", "L", "H", "R", "V", "U")

FEATURE_CODE_ORDER: tuple[str, ...] = (
    # A country, state, region
    "TERR", "PCLI", "PCLD", "PCLIX", "PCLF", "PCL", "PCLS", "ADM1", "ADMD", "ADM2",
    "LTER", "ADM3", "ADM4", "ADM5", "PRSH", "ZN", "ZNB", "PCLH", "ADM1H", "ADM2H",
    "ADM3H", "ADM4H", "ADMDH",
    # P city, village
    "PPLC", "PPL", "PPLA", "PPLA2", "PPLA3", "PPLA4", "STLMT", "PPLS", "PPLG", "PPLF",
    "PPLL", "PPLR", "PPLX", "PPLW", "PPLCH", "PPLH", "PPLQ",
    # S spot, building, farm
    "ADMF", "AGRF", "AIRB", "AIRF", "AIRH", "AIRP", "AIRQ", "AMTH", "ANS", "AQC",
    "ARCH", "ASTR", "ASYL", "ATHF", "ATM", "BANK", "BCN", "BDG", "BDGQ", "BLDG",
    "BLDO", "BP", "BRKS", "BRKW", "BSTN", "BTYD", "BUR", "BUSTN", "BUSTP", "CARN",
    "CAVE", "CH", "CMP", "CMPL", "CMPLA", "CMPMN", "CMPO", "CMPQ", "CMPRF", "CMTY",
    "COMC", "CRRL", "CSNO", "CSTL", "CSTM", "CTHSE", "CTRA", "CTRCM", "CTRF", "CTRM",
    "CTRR", "CTRS", "CVNT", "DAM", "DAMQ", "DAMSB", "DARY", "DCKD", "DCKY", "DIKE",
    "DIP", "DPOF", "EST", "ESTO", "ESTR", "ESTSG", "ESTT", "ESTX", "FCL", "FNDY",
    "FRM", "FRMQ", "FRMS", "FRMT", "FT", "FY", "GATE", "GDN", "GHAT", "GHSE",
    "GOSP", "GOVL", "GRVE", "HERM", "HLT", "HMSD", "HSE", "HSEC", "HSP", "HSPC",
    "HSPD", "HSPL", "HSTS", "HTL", "HUT", "HUTS", "INSM", "ITTR", "JTY", "LDNG",
    "LEPC", "LIBR", "LNDF", "LOCK", "LTHSE", "MALL", "MAR", "MFG", "MFGB", "MFGC",
    "MFGCU", "MFGLM", "MFGM", "MFGPH", "MFGQ", "MFGSG", "MKT", "ML", "MLM", "MLO",
    "MLSG", "MLSGQ", "MLSW", "MLWND", "MLWTR", "MN", "MNAU", "MNC", "MNCR", "MNCU",
    "MNFE", "MNMT", "MNN", "MNQ", "MNQR", "MOLE", "MSQE", "MSSN", "MSSNQ", "MSTY",
    "MTRO", "MUS", "NOV", "NSY", "OBPT", "OBS", "OBSR", "OILJ", "OILQ", "OILR",
    "OILT", "OILW", "OPRA", "PAL", "PGDA", "PIER", "PKLT", "PMPO", "PMPW", "PO",
    "PP", "PPQ", "PRKGT", "PRKHQ", "PRN", "PRNJ", "PRNQ", "PS", "PSH", "PSTB",
    "PSTC", "PSTP", "PYR", "PYRS", "QUAY", "RDCR", "RECG", "RECR", "REST", "RET",
    "RHSE", "RKRY", "RLG", "RLGR", "RNCH", "RSD", "RSGNL", "RSRT", "RSTN", "RSTNQ",
    "RSTP", "RSTPQ", "RUIN", "SCH", "SCHA", "SCHC", "SCHL", "SCHM", "SCHN", "SCHT",
    "SECP", "SHPF", "SHRN", "SHSE", "SLCE", "SNTR", "SPA", "SPLY", "SQR", "STBL",
    "STDM", "STNB", "STNC", "STNE", "STNF", "STNI", "STNM", "STNR", "STNS", "STNW",
    "STPS", "SWT", "THTR", "TMB", "TMPL", "TNKD", "TOWR", "TRANT", "TRIG", "TRMO",
    "TWO", "UNIP", "UNIV", "USGE", "VETF", "WALL", "WALLA", "WEIR", "WHRF", "WRCK",
    "WTRW", "ZNF", "ZOO",
    # T mountain, hill, rock
    "ASPH", "ATOL", "BAR", "BCH", "BCHS", "BDLD", "BLDR", "BLHL", "BLOW", "BNCH",
    "BUTE", "CAPE", "CFT", "CLDA", "CLF", "CNYN", "CONE", "CRDR", "CRQ", "CRQS",
    "CRTR", "CUET", "DLTA", "DPR", "DSRT", "DUNE", "DVD", "ERG", "FAN", "FORD",
    "FSR", "GAP", "GRGE", "HDLD", "HLL", "HLLS", "HMCK", "HMDA", "INTF", "ISL",
    "ISLET", "ISLF", "ISLM", "ISLS", "ISLT", "ISLX", "ISTH", "KRST", "LAVA", "LEV",
    "MESA", "MND", "MRN", "MT", "MTS", "NKM", "NTK", "NTKS", "PAN", "PANS",
    "PASS", "PEN", "PENX", "PK", "PKS", "PLAT", "PLATX", "PLDR", "PLN", "PLNX",
    "PROM", "PT", "PTS", "RDGB", "RDGE", "REG", "RK", "RKFL", "RKS", "SAND",
    "SBED", "SCRP", "SDL", "SHOR", "SINK", "SLID", "SLP", "SPIT", "SPUR", "TAL",
    "TRGD", "TRR", "UPLD", "VAL", "VALG", "VALS", "VALX", "VLC",
    # L parks, area
    "AGRC", "AMUS", "AREA", "BSND", "BSNP", "BTL", "CLG", "CMN", "CNS", "COLF",
    "CONT", "CST", "CTRB", "DEVH", "FLD", "FLDI", "GASF", "GRAZ", "GVL", "INDS",
    "LAND", "LCTY", "MILB", "MNA", "MVA", "NVB", "OAS", "OILF", "PEAT", "PRK",
    "PRT", "QCKS", "RES", "RESA", "RESF", "RESH", "RESN", "RESP", "RESV", "RESW",
    "RGN", "RGNE", "RGNH", "RGNL", "RNGA", "SALT", "SNOW", "TRB",
    # H stream, lake
    "AIRS", "ANCH", "BAY", "BAYS", "BGHT", "BNK", "BNKR", "BNKX", "BOG", "CAPG",
    "CHN", "CHNL", "CHNM", "CHNN", "CNFL", "CNL", "CNLA", "CNLB", "CNLD", "CNLI",
    "CNLN", "CNLQ", "CNLSB", "CNLX", "COVE", "CRKT", "CRNT", "CUTF", "DCK", "DCKB",
    "DOMG", "DPRG", "DTCH", "DTCHD", "DTCHI", "DTCHM", "ESTY", "FISH", "FJD", "FJDS",
    "FLLS", "FLLSX", "FLTM", "FLTT", "GLCR", "GULF", "GYSR", "HBR", "HBRX", "INLT",
    "INLTQ", "LBED", "LGN", "LGNS", "LGNX", "LK", "LKC", "LKI", "LKN", "LKNI",
    "LKO", "LKOI", "LKS", "LKSB", "LKSC", "LKSI", "LKSN", "LKSNI", "LKX", "MFGN",
    "MGV", "MOOR", "MRSH", "MRSHN", "NRWS", "OCN", "OVF", "PND", "PNDI", "PNDN",
    "PNDNI", "PNDS", "PNDSF", "PNDSI", "PNDSN", "POOL", "POOLI", "RCH", "RDGG", "RDST",
    "RF", "RFC", "RFX", "RPDS", "RSV", "RSVI", "RSVT", "RVN", "SBKH", "SD",
    "SEA", "SHOL", "SILL", "SPNG", "SPNS", "SPNT", "STM", "STMA", "STMB", "STMC",
    "STMD", "STMH", "STMI", "STMIX", "STMM", "STMQ", "STMS", "STMSB", "STMX", "STRT",
    "SWMP", "SYSI", "TNLC", "WAD", "WADB", "WADJ", "WADM", "WADS", "WADX", "WHRL",
    "WLL", "WLLQ", "WLLS", "WTLD", "WTLDI", "WTRC", "WTRH",
    # R road, railroad
    "CSWY", "OILP", "PRMN", "PTGE", "RD", "RDA", "RDB", "RDCUT", "RDJCT", "RJCT",
    "RR", "RRQ", "RTE", "RYD", "ST", "STKR", "TNL", "TNLN", "TNLRD", "TNLRR",
    "TNLS", "TRL",
    # V forest, heath
    "BUSH", "CULT", "FRST", "FRSTF", "GRSLD", "GRVC", "GRVO", "GRVP", "GRVPN", "HTH",
    "MDW", "OCH", "SCRB", "TREE", "TUND", "VIN", "VINS",
    # U undersea
    "APNU", "ARCU", "ARRU", "BDLU", "BKSU", "BNKU", "BSNU", "CDAU", "CNSU", "CNYU",
    "CRSU", "DEPU", "EDGU", "ESCU", "FANU", "FLTU", "FRZU", "FURU", "GAPU", "GLYU",
    "HLLU", "HLSU", "HOLU", "KNLU", "KNSU", "LDGU", "LEVU", "MESU", "MNDU", "MOTU",
    "MTU", "PKSU", "PKU", "PLNU", "PLTU", "PNLU", "PRVU", "RDGU", "RDSU", "RFSU",
    "RFU", "RISU", "SCNU", "SCSU", "SDLU", "SHFU", "SHLU", "SHSU", "SHVU", "SILU",
    "SLPU", "SMSU", "SMU", "SPRU", "TERU", "TMSU", "TMTU", "TNGU", "TRGU", "TRNU",
    "VALU", "VLSU",
)


def _rank_table(order: tuple[str, ...]) -> dict[str, int]:
    return {value: rank for rank, value in enumerate(order)}


FEATURE_CLASS_RANKS: dict[str, int] = _rank_table(FEATURE_CLASS_ORDER)
FEATURE_CODE_RANKS: dict[str, int] = _rank_table(FEATURE_CODE_ORDER)

if max(FEATURE_CLASS_RANKS.values()) - min(FEATURE_CLASS_RANKS.values()) >= UNKNOWN_RANK_GAP:
    raise RuntimeError("UNKNOWN_RANK_GAP must exceed the feature class rank spread")


def _lookup(table: dict[str, int], value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    return table.get(value.strip())


def feature_class_rank(value: Optional[str]) -> Optional[int]:
    """Rank of a feature class symbol, or None when unknown."""
    return _lookup(FEATURE_CLASS_RANKS, value)


def feature_code_rank(value: Optional[str]) -> Optional[int]:
    """Rank of a feature code, or None when unknown."""
    return _lookup(FEATURE_CODE_RANKS, value)


def _compare_ranks(x: Optional[int], y: Optional[int]) -> int:
    if x is None and y is None:
        return 0
    if y is None:
        return -UNKNOWN_RANK_GAP
    if x is None:
        return UNKNOWN_RANK_GAP
    return x - y


def compare_feature_classes(x: Optional[str], y: Optional[str]) -> int:
    return _compare_ranks(feature_class_rank(x), feature_class_rank(y))


def compare_feature_codes(x: Optional[str], y: Optional[str]) -> int:
    return _compare_ranks(feature_code_rank(x), feature_code_rank(y))


_COMPARATORS: dict[str, Callable[[Optional[str], Optional[str]], int]] = {
    FIELD_FEATURE_CLASS: compare_feature_classes,
    FIELD_FEATURE_CODE: compare_feature_codes,
}


class TaxonomyComparator:
    """
    Comparator bound to exactly one taxonomy field.

    Used as a SQLite collation and as a Python sort key. Constructing it for
    any other field is an error, so a feature code can never be ordered with
    the feature class table or vice versa.
    """

    def __init__(self, field: str):
        if field not in _COMPARATORS:
            raise ValueError(
                f"No taxonomy ordering for field {field!r}; "
                f"expected one of {sorted(_COMPARATORS)}"
            )
        self.field = field
        self._compare = _COMPARATORS[field]

    def __call__(self, x: Optional[str], y: Optional[str]) -> int:
        return self._compare(x, y)

    def sort_key(self):
        return cmp_to_key(self._compare)

    def __repr__(self) -> str:
        return f"TaxonomyComparator({self.field!r})"


def comparator_for(field: str) -> TaxonomyComparator:
    return TaxonomyComparator(field)
