"""
Year extraction from free-form date labels.

Grammar (first rule that matches wins):
    BC year:  [word ]<1-4 digits>[spaces]BC   -> negative year, case-insensitive
    AD year:  [word ]<3-4 digits><end>        -> positive year

"44 BC" -> -44, "circa 500 bc" -> -500, "2020" -> 2020, "Year 1066" -> 1066.
Labels such as "7th century", "1800s" or "12" have no year.
"""

import re

BC_YEAR_PATTERN = re.compile(r"(?:[A-Za-z]+\s)?([0-9]{1,4})\s*BC", re.IGNORECASE)
AD_YEAR_PATTERN = re.compile(r"(?:[A-Za-z]+\s)?([0-9]{3,4})$")


def extract_year(date_label: str | None) -> int | None:
    """Return the signed year for a date label, or None when it has none."""
    if not date_label or not isinstance(date_label, str):
        return None

    bc_match = BC_YEAR_PATTERN.search(date_label)
    if bc_match:
        return -int(bc_match.group(1))

    ad_match = AD_YEAR_PATTERN.search(date_label)
    if ad_match:
        return int(ad_match.group(1))

    return None
