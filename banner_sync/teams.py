"""Provider team names and abbreviations mapped to internal team ids."""

from __future__ import annotations

import re
from typing import Iterable

# ESPN abbreviation -> internal team id
_ESPN_TEAM_MAP: dict[str, str] = {
    "UCSD": "ucsd",
    "UCLA": "ucla",
    "USC": "usc",
    "STAN": "stanford",
    "CAL": "cal",
    "SDSU": "sdsu",
    "UNLV": "unlv",
    "GONZ": "gonzaga",
    "SMC": "saint-marys",
    "UCSB": "ucsb",
    "UCI": "uci",
    "UCR": "ucr",
    "UCD": "ucd",
    "CSUF": "csuf",
    "CSULB": "csulb",
    "LBSU": "csulb",
    "CSUN": "csun",
    "UH": "uh",
    "HAW": "uh",
    "CSUB": "bakersfield",
}

# NCAA short name -> internal team id
_NCAA_TEAM_MAP: dict[str, str] = {
    "UC San Diego": "ucsd",
    "UCSD": "ucsd",
    "Tritons": "ucsd",
    "UCLA": "ucla",
    "USC": "usc",
    "Stanford": "stanford",
    "Cal": "cal",
    "California": "cal",
    "San Diego St.": "sdsu",
    "SDSU": "sdsu",
    "UNLV": "unlv",
    "Gonzaga": "gonzaga",
    "Saint Mary's": "saint-marys",
    "UC Santa Barbara": "ucsb",
    "UCSB": "ucsb",
    "UC Irvine": "uci",
    "UCI": "uci",
    "UC Riverside": "ucr",
    "UCR": "ucr",
    "UC Davis": "ucd",
    "UCD": "ucd",
    "Cal State Fullerton": "csuf",
    "CSUF": "csuf",
    "Long Beach St.": "csulb",
    "CSULB": "csulb",
    "CSUN": "csun",
    "Hawai'i": "uh",
    "Hawaii": "uh",
    "UH": "uh",
    "Cal State Bakersfield": "bakersfield",
    "CSUB": "bakersfield",
}


def slugify(name: str) -> str:
    """Lowercase hyphenated slug used when a team is not in the alias tables."""
    slug = re.sub(r"[^a-z0-9]+", "-", name.strip().lower().replace("'", ""))
    return slug.strip("-")


def matches_aliases(names: Iterable[str | None], aliases: Iterable[str]) -> bool:
    """Case-insensitive substring match of any name against any alias."""
    lowered = [name.lower() for name in names if isinstance(name, str) and name]
    return any(alias in name for name in lowered for alias in aliases)


def espn_team_id(abbreviation: str | None, display_name: str | None = None) -> str | None:
    if abbreviation:
        mapped = _ESPN_TEAM_MAP.get(abbreviation.upper())
        if mapped:
            return mapped
        return slugify(abbreviation)
    if display_name:
        return slugify(display_name)
    return None


def ncaa_team_id(short_name: str | None, full_name: str | None = None) -> str | None:
    for name in (short_name, full_name):
        if name and name in _NCAA_TEAM_MAP:
            return _NCAA_TEAM_MAP[name]
    for name in (short_name, full_name):
        if name and name.strip():
            return slugify(name)
    return None
