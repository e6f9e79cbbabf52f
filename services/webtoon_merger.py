"""Join listing summaries with detail pages by detail URL."""

import logging
from typing import Any, Dict, Iterable, List, Sequence

from services.webtoon_records import DetailRecord, MergedRecord, SummaryRecord
from utils.reporting import MERGE_ERROR, append_diagnostic

LOGGER = logging.getLogger(__name__)


def merge_records(
    summaries: Sequence[SummaryRecord],
    details: Iterable[DetailRecord],
    diagnostics: List[Dict[str, Any]],
) -> List[MergedRecord]:
    """One merged record per summary with a matching detail, in summary order.

    Summaries without a detail are dropped and reported as ``MERGE_ERROR``.
    """
    details_by_url: Dict[str, DetailRecord] = {}
    for detail in details:
        details_by_url.setdefault(detail.url, detail)

    merged: List[MergedRecord] = []
    for summary in summaries:
        detail = details_by_url.get(summary.url)
        if detail is None:
            LOGGER.warning("No detail record for %s; dropping it from the batch", summary.url)
            append_diagnostic(
                diagnostics,
                MERGE_ERROR,
                "summary record has no matching detail record",
                {"key": summary.url},
            )
            continue
        merged.append(MergedRecord(summary=summary, detail=detail))
    return merged
