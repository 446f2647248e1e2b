"""
Tests for versioned uploads and retention
"""

import pytest

from ossdist.services.retention import RetentionManager, parse_version, select_stale
from ossdist.services.uploader import FileUploadService, MemoryAssetSource


def version_keys(prefix, versions):
    """Two objects per version directory, plus the directory marker."""
    keys = []
    for version in versions:
        keys += [f"{prefix}/{version}/", f"{prefix}/{version}/main.js", f"{prefix}/{version}/app.css"]
    return keys


@pytest.fixture
def make_manager(reporter):
    def factory(store, config):
        service = FileUploadService(store, config, reporter)
        return RetentionManager(store, config, service, reporter)
    return factory


class TestSelectStale:

    def test_example_from_unsorted_ids(self):
        # limit=5 keeps four existing versions next to the new one
        assert select_stale([3, 1, 9, 2, 7], 4) == [1]

    def test_keeps_highest(self):
        assert select_stale([1, 2, 3, 7, 9], 2) == [1, 2, 3]

    def test_numeric_not_lexicographic(self):
        assert select_stale([10, 9, 100], 2) == [9]

    def test_single_version_is_never_deleted(self):
        assert select_stale([5], 2) == []

    def test_fewer_versions_than_limit(self):
        assert select_stale([1, 2], 4) == []


class TestParseVersion:

    @pytest.mark.parametrize("segment,expected", [("20240101", 20240101), ("007", 7), ("0", 0)])
    def test_numeric(self, segment, expected):
        assert parse_version(segment) == expected

    @pytest.mark.parametrize("segment", ["latest", "v1", "", "1.5", "-2"])
    def test_not_numeric(self, segment):
        assert parse_version(segment) is None


class TestVersionedUpload:

    def test_deletes_oldest_and_uploads(self, make_config, make_store, make_manager):
        store = make_store(keys=version_keys("build", [3, 1, 9, 2, 7]))
        manager = make_manager(store, make_config(prefix="build", format="10", limit=5))

        outcomes = manager.run_versioned_upload(MemoryAssetSource({"main.js": "new"}))

        deletes = store.calls_named("delete_multi")
        assert len(deletes) == 1
        assert deletes[0][1] == ["build/1/", "build/1/app.css", "build/1/main.js"]
        assert deletes[0][2] is True
        assert "build/2/main.js" in store.objects
        assert store.objects["build/10/main.js"] == b"new"
        assert [o.action for o in outcomes] == ["delete", "upload"]

    def test_listing_is_delimited_under_prefix(self, make_config, store, make_manager):
        manager = make_manager(store, make_config(prefix="build", format="1"))
        manager.run_versioned_upload(MemoryAssetSource({}))
        assert store.calls[0] == ("list", "build/", "/", 1000)

    def test_small_limit_keeps_two(self, make_config, make_store, make_manager):
        store = make_store(keys=version_keys("build", [1, 2, 3, 4]))
        manager = make_manager(store, make_config(prefix="build", format="5", limit=1))

        manager.run_versioned_upload(MemoryAssetSource({}))

        deleted = [call[1][0] for call in store.calls_named("delete_multi")]
        assert deleted == ["build/1/", "build/2/"]

    def test_single_existing_version_is_kept(self, make_config, make_store, make_manager):
        store = make_store(keys=version_keys("build", [1]))
        manager = make_manager(store, make_config(prefix="build", format="2", limit=1))
        manager.run_versioned_upload(MemoryAssetSource({}))
        assert store.calls_named("delete_multi") == []

    def test_non_numeric_directories_are_left_alone(self, make_config, make_store, make_manager):
        keys = version_keys("build", [1, 2, 3, 4, 5]) + ["build/latest/index.html", "build/v1/index.html"]
        store = make_store(keys=keys)
        manager = make_manager(store, make_config(prefix="build", format="6", limit=4))

        manager.run_versioned_upload(MemoryAssetSource({}))

        deleted = [call[1][0] for call in store.calls_named("delete_multi")]
        assert deleted == ["build/1/", "build/2/"]
        assert "build/latest/index.html" in store.objects
        assert "build/v1/index.html" in store.objects

    def test_leading_zero_directory_deleted_by_its_own_name(self, make_config, make_store, make_manager):
        store = make_store(keys=version_keys("build", ["001", "002", "003"]))
        manager = make_manager(store, make_config(prefix="build", format="004", limit=3))
        manager.run_versioned_upload(MemoryAssetSource({}))
        assert store.calls_named("delete_multi")[0][1][0] == "build/001/"

    def test_empty_prefix_lists_bucket_root(self, make_config, make_store, make_manager):
        store = make_store(keys=version_keys("", [1, 2, 3, 4]))
        # version_keys("") produces "/1/..." keys; rebuild without the leading slash
        store.objects = {key.lstrip("/"): b"" for key in store.objects}
        manager = make_manager(store, make_config(format="5", limit=3))

        manager.run_versioned_upload(MemoryAssetSource({}))

        assert store.calls[0] == ("list", "", "/", 1000)
        assert [call[1][0] for call in store.calls_named("delete_multi")] == ["1/", "2/"]

    def test_delete_failure_still_uploads(self, make_config, make_store, make_manager):
        store = make_store(keys=version_keys("build", [1, 2, 3, 4]), fail_delete=True)
        manager = make_manager(store, make_config(prefix="build", format="5", limit=1))

        outcomes = manager.run_versioned_upload(MemoryAssetSource({"main.js": "x"}))

        # Both stale versions attempted even though the first delete failed
        assert len(store.calls_named("delete_multi")) == 2
        assert [(o.action, o.ok) for o in outcomes] == [("delete", False), ("delete", False), ("upload", True)]

    def test_list_failure_still_uploads(self, make_config, make_store, make_manager):
        store = make_store(fail_list=True)
        manager = make_manager(store, make_config(prefix="build", format="5"))

        outcomes = manager.run_versioned_upload(MemoryAssetSource({"main.js": "x"}))

        assert [(o.action, o.ok) for o in outcomes] == [("list", False), ("upload", True)]
        assert "build/5/main.js" in store.objects


class TestDeleteAllUpload:

    def test_deletes_everything_in_one_call_then_uploads(self, make_config, make_store, make_manager):
        store = make_store(keys=["build/old.js", "build/old.css", "other/keep.js"])
        manager = make_manager(store, make_config(prefix="build", delete_all=True))

        outcomes = manager.run_delete_all_upload(MemoryAssetSource({"main.js": "a", "app.css": "b"}))

        deletes = store.calls_named("delete_multi")
        assert len(deletes) == 1
        assert sorted(deletes[0][1]) == ["build/old.css", "build/old.js"]
        assert sorted(store.objects) == ["build/app.css", "build/main.js", "other/keep.js"]
        assert [o.action for o in outcomes] == ["delete", "upload", "upload"]

    def test_nothing_to_delete_skips_delete_call(self, make_config, store, make_manager):
        manager = make_manager(store, make_config(prefix="build", delete_all=True))
        manager.run_delete_all_upload(MemoryAssetSource({"main.js": "a"}))
        assert store.calls_named("delete_multi") == []
        assert "build/main.js" in store.objects

    def test_delete_failure_still_uploads(self, make_config, make_store, make_manager):
        store = make_store(keys=["build/old.js"], fail_delete=True)
        manager = make_manager(store, make_config(prefix="build", delete_all=True))

        outcomes = manager.run_delete_all_upload(MemoryAssetSource({"main.js": "a"}))

        assert [(o.action, o.ok) for o in outcomes] == [("delete", False), ("upload", True)]
