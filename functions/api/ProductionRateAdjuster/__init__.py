import logging
from typing import Optional

import azure.functions as func

from production_rate_adjuster import Config, IoTHubTwinRegistry, TwinAdjuster, process_blob, summarize

_adjuster: Optional[TwinAdjuster] = None


def get_adjuster() -> TwinAdjuster:
    global _adjuster
    if _adjuster is None:
        _adjuster = TwinAdjuster(IoTHubTwinRegistry.from_config(Config()))
    return _adjuster


def main(blob: func.InputStream) -> None:
    logging.info(f'Triggered by blob: {blob.name}')

    content = blob.read().decode('utf-8-sig')
    results = process_blob(content, get_adjuster())

    logging.info(f'Processed {len(results)} records from {blob.name}: {summarize(results)}')
