from fmw2.logs.models import GenerationLog
from fmw2.logs.service import GenerationLogService
from fmw2.logs.store import GenerationLogSink, LogStore

__all__ = [
    "GenerationLog",
    "GenerationLogService",
    "GenerationLogSink",
    "LogStore",
]
