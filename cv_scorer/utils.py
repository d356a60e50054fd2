import json
from pathlib import Path
from typing import Any, Optional

def load_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))

def read_text_if_exists(path: Optional[Path]) -> str:
    if not path or not path.exists():
        return ""
    try:
        return path.read_text(encoding="utf-8", errors="ignore")
    except OSError:
        return ""
