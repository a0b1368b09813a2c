"""
Location string normalization.

Geocoding results are cached under a normalized form of the query so that
trivially different spellings of the same location share a cache entry.

Usage:
    from geomany.core.utils.address import normalize_location

    key1 = normalize_location("82 Clerkenwell Road,  London EC1M 5RF.")
    key2 = normalize_location("82 clerkenwell rd, london ec1m 5rf")
    assert key1 == key2  # "82 CLERKENWELL RD, LONDON EC1M 5RF"
"""

import re

# Street type abbreviations
STREET_ABBREVIATIONS = {
    r'\bSTREET\b': 'ST',
    r'\bAVENUE\b': 'AVE',
    r'\bDRIVE\b': 'DR',
    r'\bROAD\b': 'RD',
    r'\bBOULEVARD\b': 'BLVD',
    r'\bLANE\b': 'LN',
    r'\bCOURT\b': 'CT',
    r'\bCIRCLE\b': 'CIR',
    r'\bPLACE\b': 'PL',
    r'\bTERRACE\b': 'TER',
    r'\bPARKWAY\b': 'PKWY',
    r'\bHIGHWAY\b': 'HWY',
    r'\bSQUARE\b': 'SQ',
}

# Directional abbreviations
DIRECTIONAL_ABBREVIATIONS = {
    r'\bNORTH\b': 'N',
    r'\bSOUTH\b': 'S',
    r'\bEAST\b': 'E',
    r'\bWEST\b': 'W',
    r'\bNORTHEAST\b': 'NE',
    r'\bNORTHWEST\b': 'NW',
    r'\bSOUTHEAST\b': 'SE',
    r'\bSOUTHWEST\b': 'SW',
}


def normalize_location(location: str, abbreviate_streets: bool = True) -> str:
    """
    Normalize a location string for use as a cache key.

    Performs the following transformations:
    1. Convert to uppercase
    2. Collapse whitespace, including around commas
    3. Optionally abbreviate street types and directionals
    4. Strip trailing punctuation

    Args:
        location: Raw location string
        abbreviate_streets: Convert street types to abbreviations (default: True)

    Returns:
        Normalized location string, or empty string if input is None/empty

    Example:
        >>> normalize_location("10 Downing Street , London")
        "10 DOWNING ST, LONDON"
    """
    if not location:
        return ""

    loc = location.upper().strip()

    # Normalize whitespace
    loc = ' '.join(loc.split())
    loc = re.sub(r'\s*,\s*', ', ', loc)

    if abbreviate_streets:
        for pattern, replacement in STREET_ABBREVIATIONS.items():
            loc = re.sub(pattern, replacement, loc)

        for pattern, replacement in DIRECTIONAL_ABBREVIATIONS.items():
            loc = re.sub(pattern, replacement, loc)

    return loc.rstrip('.,; ')
