"""Built-in catalog of common subwoofer drivers and driver lookup helpers.

Catalog keys are normalized model strings (see ``normalize_key``). Volumes
are in cubic feet, lengths in inches and excursion in millimetres.
"""

from __future__ import annotations

import re
from typing import Mapping, TypeVar

from enclosures.domain.value_objects import DriverSpec, ValueRange

__all__ = [
    "KNOWN_DRIVERS",
    "default_spec_for_size",
    "extract_size",
    "find_known_driver",
    "match_driver",
    "normalize_key",
]

T = TypeVar("T")


def _driver(
    brand: str,
    model: str,
    size: float,
    cutout: float,
    depth: float,
    displacement: float,
    sealed: tuple[float, float],
    ported: tuple[float, float],
    tuning: tuple[float, float],
    xmax: float,
) -> DriverSpec:
    return DriverSpec(
        cutout_diameter=cutout,
        mounting_depth=depth,
        displacement=displacement,
        brand=brand,
        model=model,
        size=size,
        recommended_sealed=ValueRange(*sealed),
        recommended_ported=ValueRange(*ported),
        recommended_tuning=ValueRange(*tuning),
        xmax=xmax,
    )


# fmt: off
KNOWN_DRIVERS: dict[str, DriverSpec] = {
    # Skar Audio
    "skar_vxf_12": _driver("Skar Audio", "VXF-12", 12, 11.06, 6.26, 0.11, (1.25, 1.75), (2.0, 3.0), (30, 36), 18),
    "skar_vxf_15": _driver("Skar Audio", "VXF-15", 15, 13.94, 7.68, 0.17, (2.0, 2.75), (3.5, 5.0), (28, 34), 18),
    "skar_evl_12": _driver("Skar Audio", "EVL-12", 12, 10.94, 6.5, 0.10, (1.0, 1.5), (1.75, 2.5), (32, 38), 14),
    "skar_evl_15": _driver("Skar Audio", "EVL-15", 15, 13.82, 7.25, 0.15, (1.75, 2.5), (2.75, 4.0), (30, 36), 14),
    "skar_zvx_12": _driver("Skar Audio", "ZVX-12", 12, 11.14, 8.07, 0.15, (1.5, 2.0), (2.5, 4.0), (28, 34), 24),
    "skar_zvx_15": _driver("Skar Audio", "ZVX-15", 15, 14.02, 9.02, 0.22, (2.25, 3.0), (4.0, 6.0), (26, 32), 24),
    "skar_sdr_12": _driver("Skar Audio", "SDR-12", 12, 10.83, 5.51, 0.08, (0.875, 1.25), (1.5, 2.25), (34, 40), 10),
    # Sundown Audio
    "sundown_x_12": _driver("Sundown Audio", "X-12", 12, 11.125, 7.25, 0.13, (1.25, 1.75), (2.0, 3.5), (30, 36), 20),
    "sundown_x_15": _driver("Sundown Audio", "X-15", 15, 14.0, 8.5, 0.19, (2.0, 2.75), (3.5, 5.5), (28, 34), 20),
    "sundown_sa_12": _driver("Sundown Audio", "SA-12", 12, 10.875, 6.375, 0.09, (1.0, 1.5), (1.5, 2.5), (32, 38), 13),
    "sundown_sa_15": _driver("Sundown Audio", "SA-15", 15, 13.75, 7.125, 0.14, (1.75, 2.5), (2.5, 4.0), (30, 36), 13),
    # American Bass
    "american_bass_xfl_12": _driver("American Bass", "XFL-12", 12, 10.875, 7.5, 0.12, (1.25, 1.75), (2.0, 3.5), (30, 36), 18),
    "american_bass_hd_12": _driver("American Bass", "HD-12", 12, 10.625, 6.0, 0.09, (1.0, 1.5), (1.75, 2.5), (34, 40), 12),
    # Kicker
    "kicker_compr_12": _driver("Kicker", "CompR 12", 12, 10.875, 5.875, 0.08, (0.75, 1.25), (1.5, 2.25), (35, 42), 10),
    "kicker_l7r_12": _driver("Kicker", "L7R 12", 12, 10.625, 6.75, 0.11, (1.0, 1.5), (2.0, 3.0), (32, 38), 15),
    # JL Audio
    "jl_12w6v3": _driver("JL Audio", "12W6v3", 12, 10.71, 5.92, 0.086, (0.875, 1.25), (1.5, 2.0), (32, 38), 13.2),
    "jl_12w7": _driver("JL Audio", "12W7AE", 12, 10.71, 6.69, 0.11, (1.0, 1.5), (1.75, 2.5), (30, 36), 18),
    # Rockford Fosgate
    "rockford_p3d4_12": _driver("Rockford Fosgate", "P3D4-12", 12, 10.9375, 6.5, 0.095, (1.0, 1.5), (1.5, 2.25), (33, 40), 14),
    "rockford_t1d4_12": _driver("Rockford Fosgate", "T1D4-12", 12, 10.9375, 7.0625, 0.12, (1.25, 1.75), (1.75, 2.75), (32, 38), 16),
    # DC Audio
    "dc_level3_12": _driver("DC Audio", "Level 3 12", 12, 10.875, 6.875, 0.11, (1.0, 1.5), (2.0, 3.0), (32, 38), 16),
    "dc_level5_12": _driver("DC Audio", "Level 5 12", 12, 11.0, 8.25, 0.16, (1.5, 2.25), (3.0, 5.0), (28, 34), 22),
    # Deaf Bonce
    "deaf_bonce_apocalypse_12": _driver("Deaf Bonce", "Apocalypse DB-SA2612", 12, 10.75, 6.5, 0.10, (1.0, 1.5), (2.0, 3.0), (32, 38), 14),
    # Taramps
    "taramps_bass_12": _driver("Taramps", "Bass 400 12", 12, 10.625, 5.5, 0.07, (0.75, 1.0), (1.25, 2.0), (36, 44), 9),
}
# fmt: on

# Nominal size -> (cutout, mounting depth, displacement, sealed, ported, tuning)
_SIZE_DEFAULTS: dict[int, tuple[float, float, float, tuple, tuple, tuple]] = {
    8: (7.125, 3.75, 0.03, (0.35, 0.5), (0.5, 0.75), (40, 50)),
    10: (9.125, 4.75, 0.05, (0.5, 0.875), (0.875, 1.5), (35, 42)),
    12: (10.875, 5.75, 0.08, (0.875, 1.5), (1.5, 2.5), (32, 38)),
    15: (13.875, 7.0, 0.14, (1.75, 2.75), (3.0, 5.0), (28, 34)),
    18: (17.125, 9.5, 0.25, (3.0, 4.5), (5.0, 8.0), (25, 32)),
}


def normalize_key(text: str) -> str:
    """Lowercase, map non-alphanumerics to underscores, collapse and trim.

    >>> normalize_key("Skar Audio  VXF-12")
    'skar_audio_vxf_12'
    """
    key = re.sub(r"[^a-z0-9]", "_", str(text).lower())
    return re.sub(r"_+", "_", key).strip("_")


def match_driver(
    query: str, candidates: Mapping[str, T], min_overlap: int = 2
) -> T | None:
    """Return the candidate that best matches a free-text query.

    Candidates are scored by kind of match: an exact normalized key beats a
    substring match (in either direction), which beats a word overlap of at
    least ``min_overlap`` words. Larger overlaps score higher. Ties go to the
    candidate inserted first.
    """
    key = normalize_key(query)
    if not key:
        return None
    if key in candidates:
        return candidates[key]

    words = set(key.split("_"))
    best: T | None = None
    best_score: tuple[int, int] = (0, 0)

    for candidate_key, value in candidates.items():
        candidate = normalize_key(candidate_key)
        if not candidate:
            continue
        if candidate in key or key in candidate:
            score = (2, 0)
        else:
            overlap = len(words & set(candidate.split("_")))
            if overlap < min_overlap:
                continue
            score = (1, overlap)
        if score > best_score:
            best, best_score = value, score
    return best


def find_known_driver(query: str) -> DriverSpec | None:
    """Look a model up in the built-in catalog."""
    return match_driver(query, KNOWN_DRIVERS)


def default_spec_for_size(
    size: float, brand: str = "", model: str = ""
) -> DriverSpec:
    """Typical mounting data for a nominal driver size.

    Common sizes come from a table; other sizes are scaled from the 12"
    figures by cone area.
    """
    nominal = int(size)
    if nominal <= 0:
        raise ValueError("Driver size must be positive")

    if nominal in _SIZE_DEFAULTS:
        cutout, depth, displacement, sealed, ported, tuning = _SIZE_DEFAULTS[nominal]
    else:
        scale = (nominal / 12.0) ** 2
        cutout = max(nominal - 1.125, nominal * 0.75)
        depth = nominal * 0.5
        displacement = scale * 0.08
        sealed = (scale * 0.875, scale * 1.5)
        ported = (scale * 1.5, scale * 2.5)
        tuning = (500 / nominal, 600 / nominal)

    return DriverSpec(
        cutout_diameter=cutout,
        mounting_depth=depth,
        displacement=displacement,
        brand=brand,
        model=model,
        size=float(nominal),
        recommended_sealed=ValueRange(*sealed),
        recommended_ported=ValueRange(*ported),
        recommended_tuning=ValueRange(*tuning),
    )


# Plausible nominal subwoofer sizes in inches
MIN_NOMINAL_SIZE = 6
MAX_NOMINAL_SIZE = 24

_SIZE_PATTERNS = (
    re.compile(r"(\d{1,2})\s*(?:\"|''|in\b|inch)", re.IGNORECASE),
    re.compile(r"[-_\s](\d{1,2})[-_\s]?[dD]?[12]?$"),
    re.compile(r"[-_\s](\d{1,2})$"),
    re.compile(r"(\d{1,2})"),
)


def extract_size(text: str, default: int = 12) -> int:
    """Pull a nominal driver size in inches out of a model string.

    Explicit inch markers win, then a trailing size (optionally followed by a
    dual voice coil suffix such as ``D2``), then the first one or two digit
    number. Returns ``default`` when nothing matches. Numbers outside the
    ``MIN_NOMINAL_SIZE`` to ``MAX_NOMINAL_SIZE`` band are skipped.

    >>> extract_size('Sundown X 15"')
    15
    """
    for pattern in _SIZE_PATTERNS:
        for match in pattern.finditer(text):
            size = int(match.group(1))
            if MIN_NOMINAL_SIZE <= size <= MAX_NOMINAL_SIZE:
                return size
    return default
