from .filesystem import FilesystemPort
from .hasher import HasherPort
from .sink import ReportSink
from .store import JobRecords, JobStorePort

__all__ = ["FilesystemPort", "HasherPort", "JobRecords", "JobStorePort", "ReportSink"]
