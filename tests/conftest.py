"""
Shared fixtures: in-memory source-control and issue-tracker collaborators.
"""

import copy

import pytest

from pr_review_context.config import ReviewConfig
from pr_review_context.exceptions import NotFoundError, UpstreamUnavailable


PR_ID = 42
BASE_COMMIT = "base0000aaaa"
SOURCE_COMMIT = "src1111bbbb"
TARGET_COMMIT = "tgt2222cccc"

PR_PAYLOAD = {
    "pullRequestId": PR_ID,
    "title": "Add login throttling",
    "description": (
        "Implements https://acme.atlassian.net/browse/ABC-1\n"
        "Duplicate link HTTPS://acme.atlassian.net/browse/abc-1\n"
        "Related: https://acme.atlassian.net/browse/XYZ-7"
    ),
    "sourceRefName": "refs/heads/feature/throttle",
    "targetRefName": "refs/heads/main",
    "lastMergeSourceCommit": {"commitId": SOURCE_COMMIT},
    "lastMergeTargetCommit": {"commitId": TARGET_COMMIT},
}

DIFF_PAYLOAD = {
    "baseCommit": BASE_COMMIT,
    "targetCommit": SOURCE_COMMIT,
    "changes": [
        {"item": {"path": "/src", "gitObjectType": "tree"}, "changeType": "edit"},
        {"item": {"path": "/src/app.py", "gitObjectType": "blob"}, "changeType": "edit"},
        {"item": {"path": "/src/new.py", "gitObjectType": "blob"}, "changeType": "add"},
        {"item": {"path": "/src/old.py", "gitObjectType": "blob"}, "changeType": "delete"},
    ],
}

FILES = {
    ("/src/app.py", BASE_COMMIT): b"import os\nlimit = 5\nrun()\n",
    ("/src/app.py", SOURCE_COMMIT): b"import os\nlimit = 10\nrun()\n",
    ("/src/new.py", SOURCE_COMMIT): b"print('hi')\n",
    ("/src/old.py", BASE_COMMIT): b"gone\n",
}

ISSUES = {
    "ABC-1": {
        "key": "ABC-1",
        "fields": {
            "summary": "Throttle repeated logins",
            "description": "Limit attempts.\n{code}\nlimit = 10\n{code}",
            "attachment": [
                {"filename": "screenshot.png", "content": "https://files.example.com/1"},
                {"filename": "trace.log", "content": "https://files.example.com/2"},
                {"filename": None, "content": "https://files.example.com/3"},
            ],
            "comment": {
                "comments": [
                    {"author": {"displayName": "Dana"}, "body": "Looks right."},
                    {"author": {"displayName": "Lee"}, "body": ""},
                    "not-a-comment",
                    {"body": "no author"},
                ]
            },
        },
    },
}

ATTACHMENTS = {
    "https://files.example.com/1": b"\x89PNG fake",
    "https://files.example.com/2": b"stack trace",
}


class FakeSourceControl:
    """Source-control collaborator backed by dictionaries."""

    def __init__(self, pr_payload=None, diff_payload=None, files=None, failing_paths=()):
        self.pr_payload = copy.deepcopy(pr_payload if pr_payload is not None else PR_PAYLOAD)
        self.diff_payload = copy.deepcopy(diff_payload if diff_payload is not None else DIFF_PAYLOAD)
        self.files = dict(files if files is not None else FILES)
        self.failing_paths = set(failing_paths)
        self.pr_error = None
        self.calls = []

    def get_pull_request(self, pr_id):
        self.calls.append(("get_pull_request", pr_id))
        if self.pr_error is not None:
            raise self.pr_error
        return copy.deepcopy(self.pr_payload)

    def get_commit_diff(self, base_version, target_version):
        self.calls.append(("get_commit_diff", base_version, target_version))
        return copy.deepcopy(self.diff_payload)

    def get_file_content(self, path, commit_id):
        self.calls.append(("get_file_content", path, commit_id))
        if path in self.failing_paths:
            raise UpstreamUnavailable(f"boom fetching {path}", status_code=500)
        try:
            return self.files[(path, commit_id)]
        except KeyError:
            raise NotFoundError(f"{path} not found at {commit_id}")


class FakeIssueTracker:
    """Issue-tracker collaborator backed by dictionaries."""

    def __init__(self, issues=None, attachments=None):
        self.issues = copy.deepcopy(issues if issues is not None else ISSUES)
        self.attachments = dict(attachments if attachments is not None else ATTACHMENTS)
        self.calls = []

    def get_issue(self, key):
        self.calls.append(("get_issue", key))
        if key not in self.issues:
            raise NotFoundError(f"Issue {key} not found")
        return copy.deepcopy(self.issues[key])

    def download_attachment(self, url):
        self.calls.append(("download_attachment", url))
        if url not in self.attachments:
            raise UpstreamUnavailable(f"Failed to download {url}", status_code=403)
        return self.attachments[url]

    def browse_url(self, key):
        return f"https://acme.atlassian.net/browse/{key}"


@pytest.fixture
def source_control():
    return FakeSourceControl()


@pytest.fixture
def issue_tracker():
    return FakeIssueTracker()


@pytest.fixture
def review_config(tmp_path):
    return ReviewConfig(
        output_directory=str(tmp_path / "reviews"),
        review_prompt="Review the changes above for correctness.",
        include_unchanged_lines_in_diff=False,
        max_workers=1,
    )


@pytest.fixture
def make_source_control():
    return FakeSourceControl


@pytest.fixture
def make_issue_tracker():
    return FakeIssueTracker
