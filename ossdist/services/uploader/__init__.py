"""
Uploader Service Package

Provides the object storage interface, the asset sources and the upload
orchestration used after every build.

Key Components:
- ObjectStore: Abstract base class for bucket operations (list/put/delete_multi)
- AssetSource: Abstract base class for file collection
- S3ObjectStore: S3-compatible implementation (Aliyun OSS, S3, R2)
- MemoryAssetSource / LocalAssetSource: in-memory build assets or a directory on disk
- FileUploadService: Sequential upload with exclude filter and key derivation
- OutcomeReporter: Logs per-operation outcomes
- UploadServiceBuilder: Dependency injection helper
"""

from .interfaces import AssetSource, ListResult, ObjectStore, PutResult
from .outcomes import OperationOutcome, OutcomeReporter
from .file_manager import LocalAssetSource, MemoryAssetSource
from .upload_service import FileUploadService
from .oss_client import S3ObjectStore, StoreConfig, UploadServiceBuilder

__all__ = [
    # Interfaces
    'ObjectStore',
    'AssetSource',
    'ListResult',
    'PutResult',

    # Implementations
    'StoreConfig',
    'S3ObjectStore',
    'MemoryAssetSource',
    'LocalAssetSource',

    # Services
    'FileUploadService',
    'UploadServiceBuilder',
    'OperationOutcome',
    'OutcomeReporter',
]
