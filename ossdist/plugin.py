"""
Build hook adapter.

OSSPlugin is registered with a build once and runs after every completed
build: it picks one of three modes from the configuration and uploads the
build output.

    plugin = OSSPlugin({
        "access_key_id": "...",
        "access_key_secret": "...",
        "bucket": "my-bucket",
        "region": "oss-cn-hangzhou",
        "prefix": "static",
        "format": "YYYYMMDDHHmm",
    })
    plugin.apply(compiler)
"""

import logging
from typing import Any, Callable, List, Mapping, Optional

from ossdist.config import PluginConfig, build_config
from ossdist.logging_config import PACKAGE_LOGGER, setup_logging
from ossdist.services.retention import RetentionManager
from ossdist.services.uploader import (
    AssetSource,
    LocalAssetSource,
    MemoryAssetSource,
    ObjectStore,
    OperationOutcome,
    OutcomeReporter,
    UploadServiceBuilder,
)

logger = logging.getLogger(__name__)

PLUGIN_NAME = "OSSPlugin"


class Hook:
    """A named lifecycle event that callbacks can tap into"""

    def __init__(self):
        self.taps = []

    def tap(self, name: str, callback: Callable) -> None:
        self.taps.append((name, callback))

    def call(self, *args) -> None:
        for _, callback in self.taps:
            callback(*args)


class CompilerHooks:
    def __init__(self):
        self.done = Hook()


class Compiler:
    """Minimal build-tool surface: an output path and a `done` hook."""

    def __init__(self, output_path: Optional[str] = None):
        self.output_path = output_path
        self.hooks = CompilerHooks()

    def finish(self, assets: Mapping[str, Any]) -> None:
        """Report a completed build to every registered plugin."""
        self.hooks.done.call(assets, self.output_path)


class OSSPlugin:
    """Uploads build output to an object storage bucket after each build"""

    def __init__(self, options: Mapping[str, Any], store: Optional[ObjectStore] = None):
        # Attach the colored handler unless the host already configured one
        if not logging.getLogger(PACKAGE_LOGGER).handlers:
            setup_logging()
        # Config errors propagate so the build aborts
        self.config: PluginConfig = build_config(options)
        self.store = store or UploadServiceBuilder.build_store(self.config)
        self.reporter = OutcomeReporter()
        self.upload_service = UploadServiceBuilder.build(self.config, self.store, self.reporter)
        self.retention = RetentionManager(self.store, self.config, self.upload_service, self.reporter)
        self.output: Optional[str] = self.config.output
        self.assets: Mapping[str, Any] = {}

    def apply(self, compiler) -> bool:
        """Register with the build. Returns False when credentials are missing."""
        if not self.config.has_credentials:
            logger.error("access_key_id and access_key_secret must be set; skipping upload")
            return False

        if not self.output:
            self.output = getattr(compiler, "output_path", None)
        compiler.hooks.done.tap(PLUGIN_NAME, self.on_build_complete)
        return True

    def on_build_complete(self, assets: Mapping[str, Any], output_path: Optional[str] = None) -> None:
        self.assets = assets or {}
        if not self.output:
            self.output = output_path
        self.upload()

    def asset_source(self) -> AssetSource:
        if self.config.local:
            return LocalAssetSource(self.output or "./dist")
        return MemoryAssetSource(self.assets)

    def upload(self) -> List[OperationOutcome]:
        """Run the delete step for the configured mode, then upload."""
        self.reporter.reset()
        source = self.asset_source()
        if self.config.format:
            logger.info(f"Versioned upload to {self.upload_service.key_prefix()}")
            return self.retention.run_versioned_upload(source)
        if self.config.delete_all:
            return self.retention.run_delete_all_upload(source)
        return self.retention.run_upload(source)
