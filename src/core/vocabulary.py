"""
Bilingual vocabulary for the funding finder listing pages.

Listing pages label their key facts in the page language, so parsed key facts
are keyed by translated text. Callers pick the label set for the language they
are parsing and pass it down explicitly.
"""

from typing import Dict, List

from src.core.models import Language, ProgrammeLabels, Region


PROGRAMME_LABELS: Dict[Language, ProgrammeLabels] = {
    Language.EN: ProgrammeLabels(
        million="million",
        funding_size="Funding Size",
        application_deadline="Application Deadline",
        org_type="Organisation Type",
        total_available="Total Available",
        area="Area",
    ),
    Language.CY: ProgrammeLabels(
        million="miliwn",
        funding_size="Maint yr ariannu",
        application_deadline="Terfyn amser ymgeisio",
        org_type="Math o fudiad",
        total_available="Cyfanswm ar gael",
        area="Ardal",
    ),
}

# Area names as displayed on either language's pages
AREA_NAMES: Dict[str, Region] = {
    # en
    "England": Region.ENGLAND,
    "Wales": Region.WALES,
    "Scotland": Region.SCOTLAND,
    "Northern Ireland": Region.NORTHERN_IRELAND,
    "UK-wide": Region.UK_WIDE,
    "Countries outside the UK": Region.COUNTRIES_OUTSIDE_THE_UK,
    # cy
    "Lloegr": Region.ENGLAND,
    "Cymru": Region.WALES,
    "Yr Alban": Region.SCOTLAND,
    "Gogledd Iwerddon": Region.NORTHERN_IRELAND,
    "DU gyfan": Region.UK_WIDE,
    "Gwledydd y tu allan i'r DU": Region.COUNTRIES_OUTSIDE_THE_UK,
}

# Welsh month names (with common abbreviations), January first
WELSH_MONTHS = [
    ("Ion", "Ionawr"),
    ("Chwe", "Chwefror"),
    ("Maw", "Mawrth"),
    ("Ebr", "Ebrill"),
    ("Mai",),
    ("Meh", "Mehefin"),
    ("Gorff", "Gorffennaf"),
    ("Awst",),
    ("Medi",),
    ("Hyd", "Hydref"),
    ("Tach", "Tachwedd"),
    ("Rhag", "Rhagfyr"),
]


def labels_for(language: Language) -> ProgrammeLabels:
    """
    Get the key fact labels for a listing language.

    Args:
        language: Listing language (or its code, e.g. "cy")

    Returns:
        ProgrammeLabels for that language

    Raises:
        ValueError: If the language is not supported
    """
    return PROGRAMME_LABELS[Language(language)]


def million_tokens() -> List[str]:
    """Million suffixes across all supported languages."""
    return [labels.million for labels in PROGRAMME_LABELS.values()]
