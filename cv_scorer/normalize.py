import re
from typing import Optional

# hyphen, non-breaking hyphen, figure dash, en dash, em dash, horizontal bar
_DASHES = re.compile(r"[\u2010-\u2015]")

def normalize_text(raw: Optional[str]) -> str:
    """
    Canonical form used for matching: NBSP -> space, dash variants -> '-',
    lower-cased. Line breaks are kept since range extraction is per line.
    """
    if not raw:
        return ""
    s = raw.replace("\u00a0", " ")
    s = _DASHES.sub("-", s)
    return s.lower()

def has_term(text: str, term: str) -> bool:
    """Case-insensitive whole-word match; metacharacters in the term are literal."""
    t = (term or "").strip()
    if not t:
        return False
    return re.search(rf"(?<![A-Za-z0-9]){re.escape(t)}(?![A-Za-z0-9])", text or "", re.I) is not None

def has_any(text: str, terms) -> bool:
    low = (text or "").lower()
    return any(str(t).lower() in low for t in (terms or []) if str(t).strip())
