"""
Optional semantic-fit boost.

A fit scorer is any callable (candidate_text, job_text) -> fraction in [0, 1].
The engine never talks to the network itself; the OpenAI-backed scorer below
is only built when the rubric's llmBoost block names an env var that is set.
Any failure degrades to zero points plus a reason string.
"""
from __future__ import annotations
import logging
import math
import os
from typing import Callable, Mapping, Optional

import requests

from .models import ScoreComponent

logger = logging.getLogger(__name__)

FitScorer = Callable[[str, str], float]

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"
SYSTEM_PROMPT = "You grade CV-to-JD fit. Return ONLY a number between 0 and 1."


class FitScoringError(Exception):
    """The external scorer could not produce a usable fraction."""


class OpenAIFitScorer:
    def __init__(self, api_key: str, model: str, timeout: float = 30.0, session: Optional[requests.Session] = None):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.session = session or requests.Session()

    def __call__(self, candidate_text: str, job_text: str) -> float:
        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": f"JD:\n{job_text}\n\nCV:\n{candidate_text}\n\nScore (0..1):"},
            ],
            "temperature": 0,
        }
        try:
            resp = self.session.post(
                OPENAI_CHAT_URL,
                json=body,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            payload = resp.json()
        except requests.RequestException as e:
            raise FitScoringError(f"request failed: {e}")
        except ValueError as e:
            raise FitScoringError(f"non-JSON response: {e}")
        return parse_fraction(_message_content(payload))

    def close(self) -> None:
        self.session.close()


def _message_content(payload) -> str:
    try:
        return str(payload["choices"][0]["message"]["content"]).strip()
    except (KeyError, IndexError, TypeError):
        raise FitScoringError("unexpected response shape")


def parse_fraction(raw: str) -> float:
    try:
        n = float((raw or "").strip().split()[0])
    except (ValueError, IndexError):
        raise FitScoringError(f"could not parse score from {raw!r}")
    if not math.isfinite(n):
        raise FitScoringError(f"non-finite score {raw!r}")
    return max(0.0, min(1.0, n))


def fit_scorer_from_env(cfg, environ: Mapping[str, str] = os.environ) -> Optional[FitScorer]:
    """None when the boost is not configured or its key is absent."""
    if cfg is None or not cfg.enabled_env_var:
        return None
    key = environ.get(cfg.enabled_env_var)
    if not key:
        return None
    return OpenAIFitScorer(api_key=key, model=cfg.model, timeout=cfg.timeout)


def score_semantic_fit(candidate_text: str, job_text: str, cfg, scorer: Optional[FitScorer]) -> ScoreComponent:
    weight = cfg.weight if cfg else 0.0
    if scorer is None:
        return ScoreComponent(points=0.0, weight=weight, detail={"reason": "LLM disabled (no API key)"})
    try:
        raw = float(scorer(candidate_text, job_text))
    except Exception as e:  # opaque collaborator: any failure is zero points
        logger.warning(f"Semantic fit scoring failed: {e}")
        return ScoreComponent(points=0.0, weight=weight, detail={"reason": f"LLM error (ignored): {e}"})
    if not math.isfinite(raw):
        return ScoreComponent(points=0.0, weight=weight, detail={"reason": "LLM parse error (ignored)"})
    frac = max(0.0, min(1.0, raw))
    return ScoreComponent(points=frac * weight, weight=weight, detail={"reason": f"LLM factor={frac:.2f}", "factor": frac})
