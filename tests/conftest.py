"""
Pytest configuration for ossdist tests
"""

import pytest
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path

from ossdist.config import build_config
from ossdist.services.uploader import ListResult, ObjectStore, OutcomeReporter, PutResult

# Keep shell credentials out of the tests
for name in list(os.environ):
    if name.startswith('OSS_'):
        del os.environ[name]

CREDENTIALS = {
    "access_key_id": "test-key",
    "access_key_secret": "test-secret",
    "bucket": "test-bucket",
    "region": "oss-cn-hangzhou",
}

FIXED_NOW = datetime(2024, 1, 2, 15, 4, 5)


class FakeObjectStore(ObjectStore):
    """In-memory bucket recording every call in order"""

    def __init__(self, keys=(), status_codes=None, fail_puts=(), fail_list=False, fail_delete=False):
        self.objects = {key: b"" for key in keys}
        self.status_codes = status_codes or {}
        self.fail_puts = set(fail_puts)
        self.fail_list = fail_list
        self.fail_delete = fail_delete
        self.calls = []

    def list(self, prefix, delimiter=None, max_keys=1000):
        self.calls.append(("list", prefix, delimiter, max_keys))
        if self.fail_list:
            raise ConnectionError("list failed")
        matching = sorted(key for key in self.objects if key.startswith(prefix))
        if not delimiter:
            return ListResult(objects=matching[:max_keys])

        objects, prefixes = [], []
        for key in matching:
            rest = key[len(prefix):]
            if delimiter in rest:
                sub_prefix = prefix + rest.split(delimiter, 1)[0] + delimiter
                if sub_prefix not in prefixes:
                    prefixes.append(sub_prefix)
            else:
                objects.append(key)
        return ListResult(objects=objects, prefixes=prefixes)

    def put(self, key, content):
        self.calls.append(("put", key))
        if key in self.fail_puts:
            raise ConnectionError("connection reset")
        if not isinstance(content, bytes):
            with open(content, "rb") as f:
                content = f.read()
        status_code = self.status_codes.get(key, 200)
        if status_code == 200:
            self.objects[key] = content
        return PutResult(status_code=status_code)

    def delete_multi(self, keys, quiet=True):
        self.calls.append(("delete_multi", list(keys), quiet))
        if self.fail_delete:
            raise ConnectionError("delete failed")
        for key in keys:
            self.objects.pop(key, None)

    def calls_named(self, name):
        return [call for call in self.calls if call[0] == name]


@pytest.fixture(autouse=True)
def package_logger():
    """Each test starts with an unconfigured ossdist logger"""
    logger = logging.getLogger("ossdist")
    handlers, level = logger.handlers[:], logger.level
    logger.handlers = []
    yield logger
    logger.handlers = handlers
    logger.setLevel(level)


@pytest.fixture
def store():
    return FakeObjectStore()


@pytest.fixture
def make_store():
    return FakeObjectStore


@pytest.fixture
def credentials():
    return dict(CREDENTIALS)


@pytest.fixture
def reporter():
    return OutcomeReporter()


@pytest.fixture
def make_config():
    """Build a validated config from credentials plus the given options"""
    def factory(**options):
        return build_config({**CREDENTIALS, **options}, now=FIXED_NOW)
    return factory


@pytest.fixture
def temp_dir():
    """Temporary directory for test outputs"""
    with tempfile.TemporaryDirectory() as tmpdirname:
        yield Path(tmpdirname)


@pytest.fixture
def dist_dir(temp_dir):
    """A small build output tree on disk"""
    dist = temp_dir / "dist"
    (dist / "js").mkdir(parents=True)
    (dist / "maps").mkdir()
    (dist / "index.html").write_text("<html></html>", encoding="utf-8")
    (dist / "js" / "main.js").write_text("console.log('hi')", encoding="utf-8")
    (dist / "js" / "main.js.map").write_text("{}", encoding="utf-8")
    (dist / "maps" / "vendor.map").write_text("{}", encoding="utf-8")
    return dist
