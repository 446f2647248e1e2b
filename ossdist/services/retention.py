"""
Versioned uploads and retention of older version directories.

A versioned upload lives under `<prefix>/<version>/` where the version is an
integer (usually a resolved date pattern such as 202610172005). Before each
versioned upload the older versions beyond the retention limit are deleted,
so that together with the new upload at most `limit` versions remain.
"""

import logging
from typing import Dict, List, Optional, Sequence

from ossdist.config import PluginConfig
from ossdist.services.uploader.interfaces import AssetSource, ObjectStore
from ossdist.services.uploader.outcomes import OperationOutcome, OutcomeReporter
from ossdist.services.uploader.upload_service import FileUploadService
from ossdist.utils.date_format import is_numeric_format

logger = logging.getLogger(__name__)

# Listing page size; more objects than this under one prefix are not deleted
MAX_KEYS = 1000


def parse_version(segment: str) -> Optional[int]:
    """Integer version id of a directory name, or None if it is not one."""
    if not is_numeric_format(segment):
        return None
    return int(segment)


def select_stale(versions: Sequence[int], effective_limit: int) -> List[int]:
    """
    Versions to delete: all but the `effective_limit` highest ones.

    Nothing is deleted while fewer than two versions exist.
    """
    if len(versions) < 2:
        return []
    return sorted(versions)[:-effective_limit]


class RetentionManager:
    """Runs the delete step of a build, then hands over to the upload service"""

    def __init__(self,
                 store: ObjectStore,
                 config: PluginConfig,
                 upload_service: FileUploadService,
                 reporter: OutcomeReporter):
        self.store = store
        self.config = config
        self.upload_service = upload_service
        self.reporter = reporter

    @property
    def base_prefix(self) -> str:
        """Listing prefix for version directories; the bucket root when no prefix is set."""
        prefix = self.config.prefix.strip("/")
        return f"{prefix}/" if prefix else ""

    def version_prefix(self, segment: str) -> str:
        return f"{self.base_prefix}{segment}/"

    def list_versions(self) -> Dict[str, int]:
        """Existing version directories under the base prefix, name -> version id."""
        result = self.store.list(prefix=self.base_prefix, delimiter="/", max_keys=MAX_KEYS)
        versions = {}
        for sub_prefix in result.prefixes:
            segment = sub_prefix[len(self.base_prefix):].rstrip("/")
            version = parse_version(segment)
            if version is None:
                logger.debug(f"Ignoring non-version directory {sub_prefix}")
                continue
            versions[segment] = version
        return versions

    def delete_version(self, segment: str) -> OperationOutcome:
        """Delete the directory marker and up to MAX_KEYS objects of one version."""
        prefix = self.version_prefix(segment)
        try:
            listing = self.store.list(prefix=prefix, max_keys=MAX_KEYS)
            keys = [prefix] + [key for key in listing.objects if key != prefix]
            self.store.delete_multi(keys, quiet=True)
        except Exception as e:
            return self.reporter.report(OperationOutcome.failure("delete", prefix, str(e)))
        return self.reporter.report(OperationOutcome.success("delete", prefix))

    def run_versioned_upload(self, source: AssetSource) -> List[OperationOutcome]:
        outcomes = []
        try:
            versions = self.list_versions()
        except Exception as e:
            outcomes.append(self.reporter.report(
                OperationOutcome.failure("list", self.base_prefix or "/", str(e))
            ))
            versions = {}

        stale = select_stale(list(versions.values()), self.config.effective_limit)
        if stale:
            logger.info(f"Removing {len(stale)} old version(s): {', '.join(map(str, stale))}")
        segments = sorted(versions, key=lambda segment: versions[segment])
        for segment in segments:
            if versions[segment] in stale:
                outcomes.append(self.delete_version(segment))

        outcomes.extend(self.upload_service.upload_assets(source))
        return outcomes

    def run_delete_all_upload(self, source: AssetSource) -> List[OperationOutcome]:
        outcomes = []
        prefix = self.config.prefix
        try:
            listing = self.store.list(prefix=prefix, max_keys=MAX_KEYS)
            if listing.objects:
                self.store.delete_multi(listing.objects, quiet=True)
                outcomes.append(self.reporter.report(
                    OperationOutcome.success("delete", f"{len(listing.objects)} object(s) under '{prefix}'")
                ))
        except Exception as e:
            outcomes.append(self.reporter.report(OperationOutcome.failure("delete", prefix or "/", str(e))))

        outcomes.extend(self.upload_service.upload_assets(source))
        return outcomes

    def run_upload(self, source: AssetSource) -> List[OperationOutcome]:
        return self.upload_service.upload_assets(source)
