"""Pre-classification filters: plant site, then free-text search."""
import logging
from typing import Dict, FrozenSet, List, Optional, Sequence

from schemas.sqcb import SqcbRecord
from src.utils.normalization import iter_text_values

logger = logging.getLogger(__name__)

ALL_SITES = 'all'

# Site name -> plant codes
PLANT_SITES: Dict[str, FrozenSet[str]] = {
    'Thailand': frozenset({'3047', '3048', '3049'}),
    'York': frozenset({'1001'}),
    'Tomahawk': frozenset({'1003'}),
}


def filter_by_plant(records: Sequence[SqcbRecord], site: str = ALL_SITES) -> List[SqcbRecord]:
    """
    Keep records whose plant belongs to a site.

    Args:
        records: Records to filter
        site: 'Thailand', 'York', 'Tomahawk' or 'all'

    Returns:
        New list; 'all' keeps every record, an unknown site keeps none
    """
    if site == ALL_SITES:
        return list(records)

    plants = PLANT_SITES.get(site)
    if plants is None:
        logger.warning(f'Unknown site {site!r}, no records match')
        return []

    return [record for record in records if (record.plant_id or '') in plants]


def record_matches(record: SqcbRecord, term: str) -> bool:
    """True if any field of the record contains term (case-insensitive)."""
    needle = term.lower()
    return any(
        needle in text.lower()
        for text in iter_text_values(record.field_values())
    )


def filter_by_search(records: Sequence[SqcbRecord], term: Optional[str]) -> List[SqcbRecord]:
    """
    Keep records where any field contains the search term.

    A blank term keeps every record. The term itself is matched as typed
    (only case is ignored).
    """
    if not term or not term.strip():
        return list(records)
    return [record for record in records if record_matches(record, term)]


def apply_filters(
    records: Sequence[SqcbRecord],
    site: str = ALL_SITES,
    search: Optional[str] = None,
) -> List[SqcbRecord]:
    """Plant filter first, then search."""
    filtered = filter_by_search(filter_by_plant(records, site), search)
    logger.debug(f'Filters site={site!r} search={search!r}: {len(records)} -> {len(filtered)} records')
    return filtered
