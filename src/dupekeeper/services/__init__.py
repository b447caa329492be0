from .ignore_filter import IgnoreFilter
from .digest_pipeline import DigestPipeline, ScanOutcome
from .duplicate_index import DuplicateIndex
from .report_service import ReportService
from .decision_service import DecisionService
from .job_runner import JobRunner


__all__ = [
    'IgnoreFilter',
    'DigestPipeline',
    'ScanOutcome',
    'DuplicateIndex',
    'ReportService',
    'DecisionService',
    'JobRunner',
]
