"""Supported sports and the provider responsible for each of them."""

from __future__ import annotations

from enum import Enum


class Provider(str, Enum):
    ESPN = "espn"
    NCAA = "ncaa"


class Sport(str, Enum):
    BASKETBALL = "basketball"
    BASEBALL = "baseball"
    FOOTBALL = "football"
    SOCCER_MEN = "soccer-men"
    SOCCER_WOMEN = "soccer-women"
    VOLLEYBALL = "volleyball"
    HOCKEY_MEN = "hockey-men"
    HOCKEY_WOMEN = "hockey-women"
    SOFTBALL = "softball"
    LACROSSE_MEN = "lacrosse-men"
    LACROSSE_WOMEN = "lacrosse-women"
    TENNIS_MEN = "tennis-men"
    TENNIS_WOMEN = "tennis-women"
    SWIMMING_MEN = "swimming-men"
    SWIMMING_WOMEN = "swimming-women"
    TRACK_MEN = "track-men"
    TRACK_WOMEN = "track-women"
    GOLF_MEN = "golf-men"
    GOLF_WOMEN = "golf-women"
    WRESTLING = "wrestling"
    GYMNASTICS = "gymnastics"
    FIELD_HOCKEY = "field-hockey"
    WATER_POLO_MEN = "water-polo-men"
    WATER_POLO_WOMEN = "water-polo-women"
    BOWLING = "bowling"
    FENCING = "fencing"
    ROWING = "rowing"
    SKIING = "skiing"
    VOLLEYBALL_BEACH = "volleyball-beach"


class UnknownSportError(ValueError):
    """Raised for a sport key that no provider serves (a configuration bug)."""

    def __init__(self, sport: str) -> None:
        super().__init__(f"Unsupported sport key: {sport}")
        self.sport = sport


ESPN_SPORTS: tuple[Sport, ...] = (Sport.BASKETBALL, Sport.BASEBALL)

NCAA_SPORTS: tuple[Sport, ...] = tuple(
    sport for sport in Sport if sport not in ESPN_SPORTS
)

# ESPN scoreboard path segments per sport.
ESPN_LEAGUE_PATHS: dict[Sport, str] = {
    Sport.BASKETBALL: "basketball/mens-college-basketball",
    Sport.BASEBALL: "baseball/college-baseball",
}

_ROUTES: dict[Sport, Provider] = {
    **{sport: Provider.ESPN for sport in ESPN_SPORTS},
    **{sport: Provider.NCAA for sport in NCAA_SPORTS},
}


def _check_partition() -> None:
    overlap = set(ESPN_SPORTS) & set(NCAA_SPORTS)
    if overlap:
        raise RuntimeError(
            "Sports routed to both providers: " + ", ".join(sorted(s.value for s in overlap))
        )
    unrouted = set(Sport) - set(_ROUTES)
    if unrouted:
        raise RuntimeError(
            "Sports without a provider: " + ", ".join(sorted(s.value for s in unrouted))
        )
    missing_paths = set(ESPN_SPORTS) - set(ESPN_LEAGUE_PATHS)
    if missing_paths:
        raise RuntimeError(
            "ESPN sports without a league path: "
            + ", ".join(sorted(s.value for s in missing_paths))
        )


_check_partition()


def parse_sport(value: str | Sport) -> Sport:
    if isinstance(value, Sport):
        return value
    try:
        return Sport(value.strip().lower())
    except ValueError:
        raise UnknownSportError(value) from None


def classify(sport: str | Sport) -> Provider:
    """Return the provider that serves *sport*.

    Raises UnknownSportError when the key is not part of either partition.
    """

    return _ROUTES[parse_sport(sport)]


def get_all_available_sports() -> list[str]:
    return [sport.value for sport in (*ESPN_SPORTS, *NCAA_SPORTS)]


def get_espn_sports() -> list[str]:
    return [sport.value for sport in ESPN_SPORTS]


def get_ncaa_sports() -> list[str]:
    return [sport.value for sport in NCAA_SPORTS]


def sports_for(provider: Provider) -> tuple[Sport, ...]:
    if provider is Provider.ESPN:
        return ESPN_SPORTS
    return NCAA_SPORTS
