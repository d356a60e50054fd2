import argparse
import logging
import re
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from . import __version__
from .config import DEFAULT_CONFIG_NAME, ConfigError, Rubric, load_rubric
from .dates import MonthYear
from .fit import FitScorer, fit_scorer_from_env
from .models import CandidateResult
from .normalize import normalize_text
from .parser import ReaderUnavailableError, check_readers, discover_documents, extract_text
from .report import CSV_NAME, JSON_NAME, write_csv, write_json, write_md
from .scoring import rank, score_candidate
from .utils import read_text_if_exists

logger = logging.getLogger("cv_scorer")


def parse_now(value: str) -> MonthYear:
    m = re.fullmatch(r"(\d{4})-(\d{1,2})", value.strip())
    if not m or not 1 <= int(m.group(2)) <= 12:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM, got {value!r}")
    return MonthYear(int(m.group(1)), int(m.group(2)) - 1)


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description=f"CV Scorer v{__version__} - rubric-weighted CV ranking")
    p.add_argument("--config", default=DEFAULT_CONFIG_NAME, help="Path to rubric JSON")
    p.add_argument("--cvs-dir", default="cvs", help="Directory scanned recursively for .pdf/.docx/.txt/.md")
    p.add_argument("--out-dir", default="reports", help="Where results.csv, results.json and per-CV .md go")
    p.add_argument("--jd", default="jd.txt", help="Job description text (only used by the LLM boost)")
    p.add_argument("--now", type=parse_now, default=None,
                   help="Resolve 'present' against this month (YYYY-MM) instead of today")
    p.add_argument("--verbose", action="store_true")
    return p


def setup_logging(verbose: bool = False) -> None:
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def score_batch(
    files: List[Path],
    rubric: Rubric,
    now: MonthYear,
    out_dir: Path,
    job_text: str = "",
    fit_scorer: Optional[FitScorer] = None,
) -> List[CandidateResult]:
    """Score documents one at a time, writing each Markdown report as it completes."""
    results: List[CandidateResult] = []
    for path in files:
        logger.info(f"Scoring: {path.name}")
        result = score_candidate(path.name, extract_text(path), rubric, now, job_text, fit_scorer)
        write_md(result, out_dir)
        results.append(result)
    return rank(results)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.verbose)

    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)

    try:
        rubric = load_rubric(Path(args.config))
    except ConfigError as e:
        logger.error(str(e))
        return 1

    cvs_dir = Path(args.cvs_dir)
    files = discover_documents(cvs_dir)
    if not files:
        logger.info(f"No CV files found in {cvs_dir}")
        return 0

    try:
        check_readers(files)
    except ReaderUnavailableError as e:
        logger.error(str(e))
        return 1

    now = args.now or MonthYear.from_date(date.today())
    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    job_text = normalize_text(read_text_if_exists(Path(args.jd)))
    fit_scorer = fit_scorer_from_env(rubric.llm_boost)
    if rubric.llm_boost is not None and fit_scorer is None:
        logger.info("LLM boost configured but its API key is not set; scoring it as 0")

    try:
        ranked = score_batch(files, rubric, now, out_dir, job_text, fit_scorer)
    finally:
        close = getattr(fit_scorer, "close", None)
        if close is not None:
            close()
    write_csv(ranked, out_dir / CSV_NAME)
    write_json(ranked, out_dir / JSON_NAME)
    logger.info(f"Processed {len(ranked)} CV(s); 'present' resolved as {now}")
    return 0
