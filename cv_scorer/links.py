import re
from typing import List

from .models import Links

LINKEDIN_RE = re.compile(r"(?:https?://)?(?:www\.)?linkedin\.com/[A-Za-z0-9/_\-?&%=+.]+", re.I)
GITHUB_RE = re.compile(r"(?:https?://)?(?:www\.)?github\.com/[A-Za-z0-9._\-/]+", re.I)
URL_RE = re.compile(r"https?://(?:www\.)?[-a-z0-9@:%._+~#=]{1,256}\.[a-z]{2,}\b(?:[/?][^\s]*)?", re.I)
PORTFOLIO_HINT_RE = re.compile(r"portfolio|resume|cv|personal|about", re.I)


def all_urls(raw_text: str) -> List[str]:
    return [m.group(0) for m in URL_RE.finditer(raw_text or "")]


def find_links(raw_text: str) -> Links:
    """
    Runs on the raw (non-normalized) text so URL casing survives.
    Website preference: a portfolio-ish URL, else the first other URL, else None.
    LinkedIn and GitHub URLs never count as the website.
    """
    t = raw_text or ""
    li = LINKEDIN_RE.search(t)
    gh = GITHUB_RE.search(t)
    others = [u for u in all_urls(t) if not (LINKEDIN_RE.search(u) or GITHUB_RE.search(u))]
    preferred = next((u for u in others if PORTFOLIO_HINT_RE.search(u)), None)
    if preferred is None and others:
        preferred = others[0]
    return Links(
        linkedin=li.group(0) if li else None,
        github=gh.group(0) if gh else None,
        website=preferred,
    )
