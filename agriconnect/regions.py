"""Botswana regions served by the weather endpoints."""

from typing import Optional

from agriconnect.domain import Region

# Gaborone coordinates are used whenever no region is given.
DEFAULT_LATITUDE = -24.6282
DEFAULT_LONGITUDE = 25.9231

REGIONS: tuple[Region, ...] = (
    Region(name="Gaborone", latitude=-24.6282, longitude=25.9231, zone="southern"),
    Region(name="Francistown", latitude=-21.1661, longitude=27.5144, zone="northern"),
    Region(name="Molepolole", latitude=-24.4064, longitude=25.4950, zone="southern"),
    Region(name="Serowe", latitude=-22.3908, longitude=26.7139, zone="central"),
    Region(name="Maun", latitude=-20.0000, longitude=23.4167, zone="northern"),
    Region(name="Kgatleng", latitude=-24.4389, longitude=26.1639, zone="southern"),
    Region(name="Kweneng", latitude=-24.1844, longitude=25.3225, zone="southern"),
    Region(name="Central", latitude=-22.3333, longitude=27.1333, zone="central"),
    Region(name="North-East", latitude=-21.0167, longitude=27.4833, zone="northern"),
    Region(name="North-West", latitude=-19.9667, longitude=25.2833, zone="northern"),
    Region(name="Southern", latitude=-25.0500, longitude=25.5000, zone="southern"),
    Region(name="South-East", latitude=-24.8167, longitude=25.9500, zone="southern"),
    Region(name="Chobe", latitude=-18.3667, longitude=25.1500, zone="northern"),
    Region(name="Ghanzi", latitude=-21.6981, longitude=21.6458, zone="western"),
    Region(name="Kgalagadi", latitude=-24.7500, longitude=21.8500, zone="western"),
)

_BY_KEY = {r.name.lower().replace(" ", "-"): r for r in REGIONS}


def _normalize(name: str) -> str:
    return name.strip().lower().replace("_", "-").replace(" ", "-")


def find_region(name: Optional[str]) -> Optional[Region]:
    """Look up a region by name (case-insensitive; spaces, dashes and underscores equivalent)."""
    if not name:
        return None
    return _BY_KEY.get(_normalize(name))


def list_regions() -> list[Region]:
    """Return all regions sorted by name."""
    return sorted(REGIONS, key=lambda r: r.name)
