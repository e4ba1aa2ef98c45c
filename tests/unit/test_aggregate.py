"""
Tests for tools/aggregate.py — link to file collection, fail-to-empty boundary.
"""

import threading
from unittest.mock import MagicMock, patch

import pytest

from tests.helpers import DOC_ID, DOC_LINK, FOLDER_ID, FOLDER_LINK, FOLDER_MIME, make_record, mock_api_chain
from tests.mock_utils import make_http_error
from adapters.drive import GOOGLE_DOC_MIME
from extractors.prompt import INSTRUCTIONS
from models import (
    ErrorKind,
    FileDescriptor,
    FolderListing,
    FolderTalkError,
    LinkKind,
    LinkReference,
    ResolutionError,
)
from tools.aggregate import aggregate, load_files
from tools.prompt import build_system_prompt
from tools.content import UNSUPPORTED_CONTENT


def _listing(*descriptors: FileDescriptor) -> FolderListing:
    return FolderListing(files=list(descriptors))


class TestAggregateInvalid:
    def test_invalid_reference_raises(self) -> None:
        with pytest.raises(ResolutionError) as exc_info:
            aggregate(LinkReference.invalid(), "tok")

        assert exc_info.value.kind is ErrorKind.INVALID_INPUT

    def test_invalid_link_loads_empty(self) -> None:
        with patch("tools.aggregate.get_file_metadata") as mock_meta, \
             patch("tools.aggregate.list_folder") as mock_list:
            assert load_files("https://example.com/not-drive", "tok") == []

        mock_meta.assert_not_called()
        mock_list.assert_not_called()


class TestAggregateDocument:
    def test_single_document(self) -> None:
        meta = {"id": DOC_ID, "name": "Plan", "mimeType": GOOGLE_DOC_MIME}
        with patch("tools.aggregate.get_file_metadata", return_value=meta), \
             patch("tools.content.export_file", return_value=b"The plan is simple."):
            records = aggregate(LinkReference(LinkKind.DOCUMENT, DOC_ID), "tok")

        assert len(records) == 1
        assert records[0].descriptor == FileDescriptor(DOC_ID, "Plan", GOOGLE_DOC_MIME)
        assert records[0].content == "The plan is simple."
        assert records[0].is_full_content is True

    def test_long_document_kept_as_preview(self) -> None:
        meta = {"id": DOC_ID, "name": "Plan", "mimeType": GOOGLE_DOC_MIME}
        with patch("tools.aggregate.get_file_metadata", return_value=meta), \
             patch("tools.content.export_file", return_value=b"p" * 1000):
            records = aggregate(LinkReference(LinkKind.DOCUMENT, DOC_ID), "tok")

        assert records[0].content == "p" * 200
        assert records[0].is_full_content is False

    def test_full_content_option(self) -> None:
        meta = {"id": DOC_ID, "name": "Plan", "mimeType": GOOGLE_DOC_MIME}
        with patch("tools.aggregate.get_file_metadata", return_value=meta), \
             patch("tools.content.export_file", return_value=b"p" * 1000):
            records = aggregate(LinkReference(LinkKind.DOCUMENT, DOC_ID), "tok", preview_chars=None)

        assert records[0].content == "p" * 1000
        assert records[0].is_full_content is True

    def test_metadata_without_id_is_resolution_error(self) -> None:
        with patch("tools.aggregate.get_file_metadata", return_value={"error": {"code": 404}}):
            with pytest.raises(ResolutionError, match="access denied or not found"):
                aggregate(LinkReference(LinkKind.DOCUMENT, DOC_ID), "tok")

    def test_not_found_relabelled(self, patch_drive_service: MagicMock) -> None:
        mock_api_chain(patch_drive_service, "files.get.execute", side_effect=make_http_error(404))

        with pytest.raises(ResolutionError) as exc_info:
            aggregate(LinkReference(LinkKind.DOCUMENT, DOC_ID), "tok")

        assert exc_info.value.kind is ErrorKind.NOT_FOUND

    def test_document_link_end_to_end(self) -> None:
        meta = {"id": DOC_ID, "name": "Plan", "mimeType": GOOGLE_DOC_MIME}
        with patch("tools.aggregate.get_file_metadata", return_value=meta) as mock_meta, \
             patch("tools.content.export_file", return_value=b"body"):
            records = load_files(DOC_LINK, "tok")

        mock_meta.assert_called_once_with(DOC_ID, "tok")
        assert [r.name for r in records] == ["Plan"]


class TestAggregateFolder:
    def test_children_fetched_in_listing_order(self) -> None:
        listing = _listing(
            FileDescriptor("f1", "a.txt", "text/plain"),
            FileDescriptor("f2", "b", GOOGLE_DOC_MIME),
            FileDescriptor("f3", "c.pdf", "application/pdf"),
        )
        with patch("tools.aggregate.list_folder", return_value=listing), \
             patch("tools.content.download_file", return_value=b"alpha"), \
             patch("tools.content.export_file", return_value=b"beta"):
            records = aggregate(LinkReference(LinkKind.FOLDER, FOLDER_ID), "tok")

        assert [r.id for r in records] == ["f1", "f2", "f3"]
        assert [r.content for r in records] == ["alpha", "beta", UNSUPPORTED_CONTENT]

    def test_order_kept_when_completion_is_reversed(self) -> None:
        """The first file finishes last; results still come back in listing order."""
        descriptors = [FileDescriptor(f"f{i}", f"{i}.txt", "text/plain") for i in range(3)]
        last_done = threading.Event()

        def fake_fetch_record(descriptor, token, preview_chars):
            if descriptor.id == "f0":
                assert last_done.wait(timeout=5)
            if descriptor.id == "f2":
                last_done.set()
            return make_record(descriptor.id, descriptor.name, f"content of {descriptor.id}")

        with patch("tools.aggregate.list_folder", return_value=_listing(*descriptors)), \
             patch("tools.aggregate.fetch_record", side_effect=fake_fetch_record):
            records = aggregate(LinkReference(LinkKind.FOLDER, FOLDER_ID), "tok")

        assert [r.content for r in records] == ["content of f0", "content of f1", "content of f2"]

    def test_subfolder_child_is_placeholder(self) -> None:
        listing = _listing(FileDescriptor("sf1", "archive", FOLDER_MIME))
        with patch("tools.aggregate.list_folder", return_value=listing), \
             patch("tools.content.download_file") as mock_download, \
             patch("tools.content.export_file") as mock_export:
            records = aggregate(LinkReference(LinkKind.FOLDER, FOLDER_ID), "tok")

        assert [(r.id, r.content) for r in records] == [("sf1", UNSUPPORTED_CONTENT)]
        mock_download.assert_not_called()
        mock_export.assert_not_called()

    def test_empty_folder_returns_empty(self) -> None:
        with patch("tools.aggregate.list_folder", return_value=_listing()):
            assert aggregate(LinkReference(LinkKind.FOLDER, FOLDER_ID), "tok") == []

    def test_no_listing_is_resolution_error(self) -> None:
        with patch("tools.aggregate.list_folder", return_value=None):
            with pytest.raises(ResolutionError, match="no files found or access denied"):
                aggregate(LinkReference(LinkKind.FOLDER, FOLDER_ID), "tok")

    def test_access_denied_relabelled(self) -> None:
        denied = FolderTalkError(ErrorKind.PERMISSION_DENIED, "forbidden")
        with patch("tools.aggregate.list_folder", side_effect=denied):
            with pytest.raises(ResolutionError) as exc_info:
                aggregate(LinkReference(LinkKind.FOLDER, FOLDER_ID), "tok")

        assert exc_info.value.kind is ErrorKind.PERMISSION_DENIED

    def test_one_failed_fetch_aborts_but_all_are_attempted(self) -> None:
        descriptors = [FileDescriptor(f"f{i}", f"{i}.txt", "text/plain") for i in range(4)]
        attempted: list[str] = []
        lock = threading.Lock()

        def flaky_download(file_id, token):
            with lock:
                attempted.append(file_id)
            if file_id == "f1":
                raise FolderTalkError(ErrorKind.NETWORK_ERROR, "reset")
            return b"ok"

        with patch("tools.aggregate.list_folder", return_value=_listing(*descriptors)), \
             patch("tools.content.download_file", side_effect=flaky_download):
            with pytest.raises(FolderTalkError):
                aggregate(LinkReference(LinkKind.FOLDER, FOLDER_ID), "tok")

        assert sorted(attempted) == ["f0", "f1", "f2", "f3"]

    def test_early_failure_does_not_cancel_queued_fetches(self) -> None:
        """More files than workers: the first fetch fails while the rest are still queued."""
        descriptors = [FileDescriptor(f"f{i}", f"{i}.txt", "text/plain") for i in range(20)]
        attempted: list[str] = []
        lock = threading.Lock()
        first_failed = threading.Event()

        def download(file_id, token):
            with lock:
                attempted.append(file_id)
            if file_id == "f0":
                first_failed.set()
                raise FolderTalkError(ErrorKind.NETWORK_ERROR, "reset")
            first_failed.wait(timeout=5)
            return b"ok"

        with patch("tools.aggregate.list_folder", return_value=_listing(*descriptors)), \
             patch("tools.content.download_file", side_effect=download):
            with pytest.raises(FolderTalkError, match="reset"):
                aggregate(LinkReference(LinkKind.FOLDER, FOLDER_ID), "tok", max_workers=4)

        assert len(attempted) == 20
        assert sorted(attempted) == sorted(d.id for d in descriptors)


class TestLoadFiles:
    def test_failed_fetch_yields_empty_not_partial(self) -> None:
        descriptors = [FileDescriptor(f"f{i}", f"{i}.txt", "text/plain") for i in range(3)]

        def download(file_id, token):
            if file_id == "f2":
                raise FolderTalkError(ErrorKind.TIMEOUT, "slow")
            return b"fine"

        with patch("tools.aggregate.list_folder", return_value=_listing(*descriptors)), \
             patch("tools.content.download_file", side_effect=download):
            assert load_files(FOLDER_LINK, "tok") == []

    def test_no_listing_yields_empty(self) -> None:
        with patch("tools.aggregate.list_folder", return_value=None):
            assert load_files(FOLDER_LINK, "tok") == []

    def test_unexpected_error_yields_empty(self) -> None:
        with patch("tools.aggregate.list_folder", side_effect=RuntimeError("boom")):
            assert load_files(FOLDER_LINK, "tok") == []

    def test_failure_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with patch("tools.aggregate.list_folder", return_value=None):
            with caplog.at_level("WARNING", logger="foldertalk"):
                load_files(FOLDER_LINK, "tok")

        assert "aggregate: recovered from not_found" in caplog.text

    def test_inaccessible_folder_end_to_end(self, patch_drive_service: MagicMock) -> None:
        """Folder with no accessible children: empty collection, prompt still instructs."""
        mock_api_chain(patch_drive_service, "files.list.execute", {"files": []})

        files = load_files(f"https://drive.google.com/drive/folders/{FOLDER_ID}", "tok")
        prompt = build_system_prompt(files, FOLDER_LINK, None, "tok")

        assert files == []
        assert "File:" not in prompt
        assert INSTRUCTIONS in prompt
        assert FOLDER_LINK in prompt
