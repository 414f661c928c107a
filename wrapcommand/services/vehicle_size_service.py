import re
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from wrapcommand.core.logger import get_logger
from wrapcommand.data.vehicle_reference import QUICK_REFERENCE, VEHICLE_DIMENSIONS
from wrapcommand.models.vehicle import ResolvedSize, SizeSource, VehicleSizeEntry

logger = get_logger(__name__)

DEFAULT_FALLBACK_SQFT = 275.0

# Heavy-duty chassis designators. Light-duty table rows must not absorb these.
HD_DESIGNATOR = re.compile(r"(?<!\d)[456]500(?!\d)|\bf-?[456]50\b", re.IGNORECASE)

# Checked in order; the first category that matches wins.
COMMERCIAL_CATEGORIES: Tuple[Tuple[str, "re.Pattern[str]", float], ...] = (
    ("hd_truck", HD_DESIGNATOR, 300.0),
    ("box_truck", re.compile(
        r"\b(cab\s*over|cabover|box(\s*truck)?|cube|isuzu|npr|nqr|nrr|hino|fuso|canter"
        r"|freightliner|m2|international|kenworth|peterbilt)\b", re.IGNORECASE), 400.0),
    ("commercial_van", re.compile(
        r"\b(van|cargo\s*van|step\s*van|sprinter|transit|promaster|express|savana"
        r"|nv\d{3,4}|e-?\d{3})\b", re.IGNORECASE), 350.0),
    ("chassis_cab", re.compile(
        r"\b(chassis|cab\s*chassis|flat\s*bed|flatbed|dump|utility|stake\s*bed"
        r"|service\s*body)\b", re.IGNORECASE), 250.0),
)

GENERIC_CATEGORIES: Tuple[Tuple[str, "re.Pattern[str]", float], ...] = (
    ("truck", re.compile(r"\b(truck|pickup|f-?\d{3}|silverado|sierra|ram|tundra)\b", re.IGNORECASE), 250.0),
    ("suv", re.compile(r"\b(suv|crossover|tahoe|expedition|suburban|yukon)\b", re.IGNORECASE), 275.0),
)


def normalize_model(model: str) -> str:
    """Lowercase and collapse runs of whitespace to a single space."""
    return re.sub(r"\s+", " ", (model or "").strip().lower())


def compact_model(model: str) -> str:
    return re.sub(r"[\s\-]+", "", normalize_model(model))


def model_variants(model: str) -> Tuple[str, ...]:
    """No-space, single-spaced and hyphen-normalized forms of a model string."""
    spaced = normalize_model(model)
    hyphenated = re.sub(r"[\s\-]+", "-", spaced)
    variants: List[str] = []
    for variant in (compact_model(model), spaced, hyphenated):
        if variant and variant not in variants:
            variants.append(variant)
    return tuple(variants)


class VehicleCatalog:
    """Immutable, ordered reference table. Iteration order is the lookup order."""

    def __init__(self, entries: Iterable[VehicleSizeEntry]):
        self._entries: Tuple[VehicleSizeEntry, ...] = tuple(entries)
        self._keys: Tuple[str, ...] = tuple(normalize_model(e.model) for e in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> Tuple[VehicleSizeEntry, ...]:
        return self._entries

    def keyed(self) -> Iterable[Tuple[str, VehicleSizeEntry]]:
        return zip(self._keys, self._entries)

    def with_key(self, key: str) -> List[VehicleSizeEntry]:
        return [entry for k, entry in self.keyed() if k == key]


def parse_dimension_rows(raw: str) -> List[VehicleSizeEntry]:
    """Parse pipe-delimited rows: make|model|years|side|back|hood|roof|total."""
    entries: List[VehicleSizeEntry] = []
    for line in raw.strip().splitlines():
        parts = [p.strip() for p in line.split("|")]
        if len(parts) < 8:
            logger.warning(f"Skipping malformed vehicle row: {line!r}")
            continue
        make, model, years, side, back, hood, roof, total = parts[:8]
        year_start, year_end = _parse_years(years)
        total_sqft = _to_float(total)
        if not total_sqft:
            logger.warning(f"Skipping vehicle row without total sqft: {line!r}")
            continue
        entries.append(VehicleSizeEntry(
            make=make,
            model=model,
            year_start=year_start,
            year_end=year_end,
            side_sqft=_to_float(side),
            back_sqft=_to_float(back),
            hood_sqft=_to_float(hood),
            roof_sqft=_to_float(roof),
            total_sqft=total_sqft,
        ))
    return entries


def _parse_years(years: str) -> Tuple[Optional[int], Optional[int]]:
    if not years or years == "-":
        return None, None
    if "-" in years:
        start, end = years.split("-", 1)
        return _to_int(start), _to_int(end)
    year = _to_int(years)
    return year, year


def _to_int(value: str) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _to_float(value: str) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def quick_reference_entries() -> List[VehicleSizeEntry]:
    return [VehicleSizeEntry(make=make, model=model, total_sqft=sqft) for make, model, sqft in QUICK_REFERENCE]


def load_default_catalog() -> VehicleCatalog:
    """Chat quick reference first, then the measured dimension rows."""
    catalog = VehicleCatalog(quick_reference_entries() + parse_dimension_rows(VEHICLE_DIMENSIONS))
    logger.info(f"Loaded vehicle catalog with {len(catalog)} entries")
    return catalog


# ---------------------------------------------------------------------------
# Resolution strategies, tried in order by resolve_size
# ---------------------------------------------------------------------------

Strategy = Callable[[str, str, Optional[int], VehicleCatalog], Optional[ResolvedSize]]


def _from_entry(entry: VehicleSizeEntry, source: SizeSource, key: str) -> ResolvedSize:
    return ResolvedSize(
        sqft=entry.total_sqft,
        source=source,
        needs_review=False,
        matched_key=key,
        default_wrap_sqft=entry.default_wrap_sqft if entry.roof_sqft is not None else None,
    )


def _make_matches(entry: VehicleSizeEntry, make: str) -> bool:
    make_lower = (make or "").strip().lower()
    return not entry.make or not make_lower or entry.make.lower() == make_lower


def _best_entry(candidates: Sequence[VehicleSizeEntry], make: str, year: Optional[int]) -> VehicleSizeEntry:
    def rank(entry: VehicleSizeEntry) -> Tuple[int, int]:
        # A range that covers the year beats a year-less row, which beats a range that misses it
        if not entry.covers_year(year):
            year_rank = 2
        elif year is not None and entry.year_start is None and entry.year_end is None:
            year_rank = 1
        else:
            year_rank = 0
        return year_rank, 0 if _make_matches(entry, make) else 1

    # min() is stable, so table order breaks ties
    return min(candidates, key=rank)


def _model_family(key: str) -> str:
    """'f-150 - crew cab - 5.5ft box' -> 'f150'."""
    return compact_model(key.split(" - ", 1)[0])


def measured_match(make: str, model: str, year: Optional[int], catalog: VehicleCatalog) -> Optional[ResolvedSize]:
    """
    Measured panel rows for the given make and year.

    A row named exactly like the model wins, otherwise the first row of the
    model family (the part of the name before the body-style suffix). Needs a
    year, since measured rows are per generation.
    """
    if year is None or not compact_model(model):
        return None
    rows = [
        (key, entry) for key, entry in catalog.keyed()
        if entry.is_measured and entry.covers_year(year) and _make_matches(entry, make)
    ]
    variants = model_variants(model)
    for key, entry in rows:
        if key in variants:
            return _from_entry(entry, SizeSource.EXACT, key)
    family = compact_model(model)
    for key, entry in rows:
        if _model_family(key) == family:
            return _from_entry(entry, SizeSource.EXACT, key)
    return None


def exact_match(make: str, model: str, year: Optional[int], catalog: VehicleCatalog) -> Optional[ResolvedSize]:
    for variant in model_variants(model):
        candidates = catalog.with_key(variant)
        if candidates:
            return _from_entry(_best_entry(candidates, make, year), SizeSource.EXACT, variant)
    return None


def substring_match(make: str, model: str, year: Optional[int], catalog: VehicleCatalog) -> Optional[ResolvedSize]:
    needle = compact_model(model)
    if not needle:
        return None
    input_is_hd = bool(HD_DESIGNATOR.search(model))
    for key, entry in catalog.keyed():
        haystack = compact_model(key)
        if not haystack:
            continue
        # Reverse containment needs a few characters to mean anything
        if haystack in needle or (len(needle) >= 3 and needle in haystack):
            if input_is_hd and not HD_DESIGNATOR.search(key):
                logger.info(f"Ignoring light-duty match '{key}' for heavy-duty model '{model}'")
                return None
            return _from_entry(entry, SizeSource.PATTERN, key)
    return None


def commercial_regex_match(make: str, model: str, year: Optional[int], catalog: VehicleCatalog) -> Optional[ResolvedSize]:
    for category, pattern, sqft in COMMERCIAL_CATEGORIES:
        if pattern.search(model or ""):
            return ResolvedSize(
                sqft=sqft,
                source=SizeSource.COMMERCIAL_FALLBACK,
                needs_review=True,
                category=category,
            )
    return None


def generic_regex_match(make: str, model: str, year: Optional[int], catalog: VehicleCatalog) -> Optional[ResolvedSize]:
    for category, pattern, sqft in GENERIC_CATEGORIES:
        if pattern.search(model or ""):
            return ResolvedSize(sqft=sqft, source=SizeSource.PATTERN, needs_review=False, category=category)
    return None


def default_fallback(make: str, model: str, year: Optional[int], catalog: VehicleCatalog) -> Optional[ResolvedSize]:
    return ResolvedSize(
        sqft=DEFAULT_FALLBACK_SQFT,
        source=SizeSource.DEFAULT_FALLBACK,
        needs_review=True,
        category="default",
    )


RESOLUTION_STRATEGIES: Tuple[Strategy, ...] = (
    measured_match,
    exact_match,
    substring_match,
    commercial_regex_match,
    generic_regex_match,
    default_fallback,
)


def resolve_size(make: Optional[str], model: Optional[str], year: Optional[int], catalog: VehicleCatalog) -> ResolvedSize:
    """
    Estimate the wrappable area of a vehicle.

    Never raises: a vehicle nobody recognizes still gets the default estimate,
    flagged for review, so quoting is never blocked on reference data.
    """
    make = make or ""
    model = model or ""
    for strategy in RESOLUTION_STRATEGIES:
        try:
            result = strategy(make, model, year, catalog)
        except Exception:
            logger.exception(f"Size strategy {strategy.__name__} failed for {year} {make} {model}")
            continue
        if result is not None:
            logger.info(
                f"Resolved {year or ''} {make} {model} -> {result.sqft} sqft "
                f"via {result.source.value} (review={result.needs_review})"
            )
            return result
    return default_fallback(make, model, year, catalog)
