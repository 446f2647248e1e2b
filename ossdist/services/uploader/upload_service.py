import logging
import posixpath
from typing import List

from ossdist.config import PluginConfig
from ossdist.services.uploader.interfaces import AssetSource, Content, ObjectStore
from ossdist.services.uploader.outcomes import OperationOutcome, OutcomeReporter

logger = logging.getLogger(__name__)


class FileUploadService:
    """Uploads build assets one at a time with dependency injection"""

    def __init__(self,
                 store: ObjectStore,
                 config: PluginConfig,
                 reporter: OutcomeReporter):
        self.store = store
        self.config = config
        self.reporter = reporter

    def filter_file(self, name: str) -> bool:
        """True unless `name` matches one of the exclude patterns."""
        exclude = self.config.exclude
        return not exclude or not any(pattern.search(name) for pattern in exclude)

    def key_prefix(self) -> str:
        if self.config.format:
            return posixpath.join(self.config.prefix, str(self.config.format))
        return self.config.prefix

    def get_file_name(self, name: str) -> str:
        """Remote object key for an output-relative file name."""
        name = name.replace("\\", "/").lstrip("/")
        prefix = self.key_prefix().replace("\\", "/")
        return posixpath.normpath(posixpath.join(prefix, name)).lstrip("/")

    def upload(self, name: str, content: Content) -> OperationOutcome:
        file_name = self.get_file_name(name)
        try:
            result = self.store.put(file_name, content)
        except Exception as e:
            return self.reporter.report(OperationOutcome.failure("upload", file_name, str(e)))

        if result.status_code == 200:
            return self.reporter.report(OperationOutcome.success("upload", file_name))
        return self.reporter.report(
            OperationOutcome.failure("upload", file_name, f"status code {result.status_code}")
        )

    def upload_assets(self, source: AssetSource) -> List[OperationOutcome]:
        """Main workflow execution: every accepted asset, in order, failures included."""
        outcomes = []

        def on_error(path: str, error: Exception) -> None:
            outcomes.append(self.reporter.report(OperationOutcome.failure("read", path, str(error))))

        for name, content in source.iter_assets(self.filter_file, on_error):
            outcomes.append(self.upload(name, content))

        logger.debug(f"Upload pass finished: {sum(o.ok for o in outcomes)}/{len(outcomes)} succeeded")
        return outcomes
