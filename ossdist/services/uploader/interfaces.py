from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Sequence, Tuple, Union
import os

# Bytes are sent as-is, a path is read by the store
Content = Union[bytes, str, os.PathLike]


@dataclass
class ListResult:
    """Object keys and delimiter-bounded sub-prefixes under a prefix"""
    objects: List[str] = field(default_factory=list)
    prefixes: List[str] = field(default_factory=list)


@dataclass
class PutResult:
    status_code: int


class ObjectStore(ABC):
    """Abstract object storage interface"""
    @abstractmethod
    def list(self, prefix: str, delimiter: Optional[str] = None, max_keys: int = 1000) -> ListResult:
        pass

    @abstractmethod
    def put(self, key: str, content: Content) -> PutResult:
        pass

    @abstractmethod
    def delete_multi(self, keys: Sequence[str], quiet: bool = True) -> None:
        pass


class AssetSource(ABC):
    """Abstract source of files to upload"""
    @abstractmethod
    def iter_assets(self,
                    accept: Callable[[str], bool],
                    on_error: Callable[[str, Exception], None]) -> Iterator[Tuple[str, Content]]:
        """Yield (relative name, content) for every candidate `accept` passes.

        Read errors go to `on_error(path, error)` and iteration continues.
        """
        pass
