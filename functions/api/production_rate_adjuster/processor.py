import logging
from collections import Counter
from typing import Dict, List

from production_rate_adjuster.errors import MalformedRecord
from production_rate_adjuster.records import is_below_threshold, parse_record, to_device_id
from production_rate_adjuster.results import Outcome, RecordResult
from production_rate_adjuster.twin import TwinAdjuster

logger = logging.getLogger(__name__)


def process_line(line: str, line_number: int, adjuster: TwinAdjuster) -> RecordResult:
    try:
        record = parse_record(line)
    except MalformedRecord as e:
        logger.debug(f'Skipping line {line_number}: {e}')
        return RecordResult(line_number=line_number, outcome=Outcome.MALFORMED, message=str(e))

    if not record.is_actionable:
        logger.debug(f'Skipping line {line_number}: DeviceName or GoodPercentage missing')
        return RecordResult(line_number=line_number, outcome=Outcome.INCOMPLETE)

    device_id = to_device_id(record.device_name)
    if not is_below_threshold(record):
        return RecordResult(line_number=line_number, outcome=Outcome.ABOVE_THRESHOLD, device_id=device_id)

    logger.warning(f'Low quality detected ({record.good_percentage}%) for {device_id}')
    return adjuster.adjust(device_id, line_number)


def process_blob(content: str, adjuster: TwinAdjuster) -> List[RecordResult]:
    """Run every non-blank line of a blob through the adjustment pipeline, in order."""
    results = []
    # only \n separates records; JSON strings may carry other line separators
    for line_number, line in enumerate(content.split('\n'), start=1):
        line = line.rstrip('\r')
        if not line.strip():
            continue
        results.append(process_line(line, line_number, adjuster))
    return results


def summarize(results: List[RecordResult]) -> Dict[str, int]:
    counts = Counter(result.outcome.value for result in results)
    return dict(sorted(counts.items()))
