"""ZIP extraction from free-text addresses."""

import re
from typing import Optional

_ZIP_RE = re.compile(r"\b\d{5}\b", re.ASCII)


def extract_zip_from_address(address: Optional[str]) -> Optional[str]:
    """
    Return the first standalone run of exactly five digits, or None.
    Only the pattern is checked; the digits are not validated as a real ZIP.
    """
    if not address:
        return None
    match = _ZIP_RE.search(address)
    return match.group(0) if match else None
