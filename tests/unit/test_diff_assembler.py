"""
Unit tests for the diff assembler.
"""

import pytest

from pr_review_context.cancellation import CancellationToken
from pr_review_context.diffing.assembler import DiffAssembler, decode_content
from pr_review_context.exceptions import OperationCancelled
from pr_review_context.models.diff import LineKind
from pr_review_context.models.pull_request import ChangeKind, FileChange, PullRequestDetails


def make_details(changes):
    return PullRequestDetails(
        id=42,
        title="t",
        description="",
        source_ref="refs/heads/f",
        target_ref="refs/heads/main",
        source_commit="src1111bbbb",
        target_commit="tgt2222cccc",
        base_commit="base0000aaaa",
        changes=changes,
    )


DEFAULT_CHANGES = [
    FileChange("/src/app.py", ChangeKind.MODIFIED),
    FileChange("/src/new.py", ChangeKind.ADDED),
    FileChange("/src/old.py", ChangeKind.DELETED),
]


class TestDiffAssembler:
    """Unit tests for DiffAssembler."""

    def test_diffs_follow_change_order(self, source_control):
        diffs = DiffAssembler(source_control).build_diffs(make_details(DEFAULT_CHANGES))

        assert [d.path for d in diffs] == ["/src/app.py", "/src/new.py", "/src/old.py"]

    def test_modified_file_diffed_against_merge_base(self, source_control):
        diffs = DiffAssembler(source_control).build_diffs(make_details(DEFAULT_CHANGES))

        app = diffs[0]
        assert app.reconstruct_before() == "import os\nlimit = 5\nrun()\n"
        assert app.reconstruct_after() == "import os\nlimit = 10\nrun()\n"
        assert ("get_file_content", "/src/app.py", "base0000aaaa") in source_control.calls
        assert ("get_file_content", "/src/app.py", "tgt2222cccc") not in source_control.calls

    def test_added_file_skips_before_lookup(self, source_control):
        diffs = DiffAssembler(source_control).build_diffs(make_details(DEFAULT_CHANGES))

        assert ("get_file_content", "/src/new.py", "base0000aaaa") not in source_control.calls
        assert all(line.kind is LineKind.ADDED for line in diffs[1].lines)

    def test_deleted_file_skips_after_lookup(self, source_control):
        diffs = DiffAssembler(source_control).build_diffs(make_details(DEFAULT_CHANGES))

        assert ("get_file_content", "/src/old.py", "src1111bbbb") not in source_control.calls
        assert [line.kind for line in diffs[2].lines] == [LineKind.REMOVED]

    def test_not_found_content_is_empty_without_skip(self, source_control):
        changes = [FileChange("/src/missing.py", ChangeKind.MODIFIED)]

        result = DiffAssembler(source_control).assemble(make_details(changes))

        assert result.diffs[0].lines == []
        assert result.skipped == []

    def test_failing_file_degrades_without_losing_others(self, make_source_control):
        provider = make_source_control(failing_paths={"/src/new.py"})
        changes = [
            FileChange("/src/app.py", ChangeKind.MODIFIED),
            FileChange("/src/new.py", ChangeKind.MODIFIED),
            FileChange("/src/old.py", ChangeKind.MODIFIED),
        ]

        result = DiffAssembler(provider).assemble(make_details(changes))

        assert len(result.diffs) == 3
        assert result.diffs[1].lines == []
        assert result.diffs[0].has_changes
        assert [item.kind for item in result.skipped] == ["file", "file"]
        assert all(item.key.startswith("/src/new.py@") for item in result.skipped)

    def test_concurrent_fetch_preserves_order(self, make_source_control):
        files = {}
        changes = []
        for i in range(12):
            path = f"/pkg/m{i}.py"
            files[(path, "base0000aaaa")] = f"v = {i}\n".encode()
            files[(path, "src1111bbbb")] = f"v = {i + 1}\n".encode()
            changes.append(FileChange(path, ChangeKind.MODIFIED))
        provider = make_source_control(files=files)

        diffs = DiffAssembler(provider, max_workers=4).build_diffs(make_details(changes))

        assert [d.path for d in diffs] == [c.path for c in changes]
        assert diffs[5].reconstruct_after() == "v = 6\n"

    def test_empty_change_list(self, source_control):
        assert DiffAssembler(source_control).build_diffs(make_details([])) == []

    def test_cancellation_propagates(self, source_control):
        token = CancellationToken()
        token.cancel()

        with pytest.raises(OperationCancelled):
            DiffAssembler(source_control).assemble(make_details(DEFAULT_CHANGES), token)

    def test_invalid_worker_count(self, source_control):
        with pytest.raises(ValueError):
            DiffAssembler(source_control, max_workers=0)


class TestDecodeContent:
    """Unit tests for decode_content."""

    def test_strips_bom(self):
        assert decode_content(b"\xef\xbb\xbfhello") == "hello"

    def test_replaces_invalid_bytes(self):
        assert decode_content(b"ok\xff") == "ok�"
