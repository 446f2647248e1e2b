import os
import posixpath
from typing import Any, Callable, Iterator, Mapping, Tuple

from ossdist.services.uploader.interfaces import AssetSource, Content


def asset_bytes(asset: Any) -> bytes:
    """Raw bytes of an in-memory build asset (str, bytes, or object with source())."""
    if hasattr(asset, "source") and callable(asset.source):
        asset = asset.source()
    if isinstance(asset, (bytes, bytearray)):
        return bytes(asset)
    return str(asset).encode("utf-8")


class MemoryAssetSource(AssetSource):
    """Assets handed over by the build, keyed by output-relative name"""
    def __init__(self, assets: Mapping[str, Any]):
        self.assets = assets

    def iter_assets(self,
                    accept: Callable[[str], bool],
                    on_error: Callable[[str, Exception], None]) -> Iterator[Tuple[str, Content]]:
        for name in list(self.assets.keys()):
            if not accept(name):
                continue
            try:
                content = asset_bytes(self.assets[name])
            except Exception as e:
                on_error(name, e)
                continue
            yield name, content


class LocalAssetSource(AssetSource):
    """Files on disk under `root`, walked depth-first in name order"""
    def __init__(self, root: str):
        self.root = root

    def relative_name(self, file_path: str) -> str:
        return os.path.relpath(file_path, self.root).replace(os.sep, posixpath.sep)

    def iter_assets(self,
                    accept: Callable[[str], bool],
                    on_error: Callable[[str, Exception], None]) -> Iterator[Tuple[str, Content]]:
        yield from self._walk(self.root, accept, on_error)

    def _walk(self, directory, accept, on_error):
        try:
            entries = sorted(os.listdir(directory))
        except OSError as e:
            on_error(directory, e)
            return

        for entry in entries:
            file_path = os.path.join(directory, entry)
            # Exclusion applies to directories too, so an excluded directory is never descended
            if not accept(file_path):
                continue
            if os.path.isdir(file_path) and not os.path.islink(file_path):
                yield from self._walk(file_path, accept, on_error)
            else:
                yield self.relative_name(file_path), file_path
