import datetime
import logging
from typing import Any, Dict, List, Optional

PARSE_WARNING = "PARSE_WARNING"
MERGE_ERROR = "MERGE_ERROR"
EXTRACTION_DROPPED = "EXTRACTION_DROPPED"
UNIMPLEMENTED_ROUTE = "UNIMPLEMENTED_ROUTE"

LOGGER = logging.getLogger(__name__)


def now_iso() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def append_diagnostic(
    diagnostics: List[Dict[str, Any]],
    code: str,
    message: str,
    context: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    entry = {
        "ts": now_iso(),
        "code": code,
        "message": message,
    }
    if context:
        entry["context"] = context
    diagnostics.append(entry)
    return entry


def parse_warning(diagnostics: List[Dict[str, Any]], field: str, reason: str, url: Optional[str] = None) -> None:
    context = {"field": field, "reason": reason}
    if url:
        context["url"] = url
    LOGGER.warning("Parse warning field=%s reason=%s url=%s", field, reason, url)
    append_diagnostic(diagnostics, PARSE_WARNING, f"{field}: {reason}", context)


def count_by_code(diagnostics: List[Dict[str, Any]]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for entry in diagnostics:
        code = entry.get("code") or "UNKNOWN"
        counts[code] = counts.get(code, 0) + 1
    return counts
