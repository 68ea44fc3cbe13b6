from production_rate_adjuster.config import Config
from production_rate_adjuster.processor import process_blob, summarize
from production_rate_adjuster.results import Outcome, RecordResult
from production_rate_adjuster.twin import IoTHubTwinRegistry, TwinAdjuster

__all__ = [
    'Config',
    'IoTHubTwinRegistry',
    'Outcome',
    'RecordResult',
    'TwinAdjuster',
    'process_blob',
    'summarize',
]
