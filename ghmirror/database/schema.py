"""Versioned schema registry for the GitHub cache database.

The cache is rebuilt from scratch whenever the stored ``user_version`` does
not match ``GITHUB_SCHEMA.version``; there is no migration path. Bump the
version whenever any block below changes in an incompatible way.
"""

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class DataStoreSchema:
    """An ordered list of DDL blocks plus the version they produce."""

    version: int
    sqls: tuple[str, ...]

    def statements(self) -> Iterator[str]:
        """Yield every individual DDL statement in registry order."""
        for block in self.sqls:
            for statement in block.split(";"):
                statement = statement.strip()
                if statement:
                    yield statement


METADATA = """
CREATE TABLE metadata (
    id INTEGER PRIMARY KEY NOT NULL,
    key TEXT NOT NULL COLLATE NOCASE,
    value TEXT NULL COLLATE NOCASE
);
CREATE UNIQUE INDEX idx_metadata_key ON metadata (key);
"""

USERS = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY NOT NULL,
    login TEXT NOT NULL COLLATE NOCASE,
    internal_id INTEGER NOT NULL,
    avatar_url TEXT NULL COLLATE NOCASE,
    type TEXT NULL COLLATE NOCASE,
    time_updated INTEGER NOT NULL
);
CREATE UNIQUE INDEX idx_users_internal_id ON users (internal_id);
"""

REPOSITORIES = """
CREATE TABLE repositories (
    id INTEGER PRIMARY KEY NOT NULL,
    owner_id INTEGER NOT NULL,
    name TEXT NOT NULL COLLATE NOCASE,
    internal_id INTEGER NOT NULL,
    description TEXT NOT NULL COLLATE NOCASE,
    private INTEGER NOT NULL,
    html_url TEXT NULL COLLATE NOCASE,
    clone_url TEXT NULL COLLATE NOCASE,
    fork INTEGER NOT NULL,
    default_branch TEXT NULL COLLATE NOCASE,
    visibility TEXT NULL COLLATE NOCASE,
    has_issues INTEGER NOT NULL,
    time_updated INTEGER NOT NULL,
    time_pushed INTEGER NOT NULL
);
CREATE UNIQUE INDEX idx_repositories_owner_id_name ON repositories (owner_id, name);
CREATE UNIQUE INDEX idx_repositories_internal_id ON repositories (internal_id);
"""

LABELS = """
CREATE TABLE labels (
    id INTEGER PRIMARY KEY NOT NULL,
    internal_id INTEGER NOT NULL,
    is_default INTEGER NOT NULL,
    name TEXT NOT NULL COLLATE NOCASE,
    description TEXT NOT NULL COLLATE NOCASE,
    color TEXT NOT NULL COLLATE NOCASE,
    time_updated INTEGER NOT NULL
);
CREATE UNIQUE INDEX idx_labels_internal_id ON labels (internal_id);
"""

ISSUES = """
CREATE TABLE issues (
    id INTEGER PRIMARY KEY NOT NULL,
    internal_id INTEGER NOT NULL,
    number INTEGER NOT NULL,
    repository_id INTEGER NOT NULL,
    state TEXT NOT NULL COLLATE NOCASE,
    title TEXT NOT NULL COLLATE NOCASE,
    body TEXT NOT NULL COLLATE NOCASE,
    author_id INTEGER NOT NULL,
    time_created INTEGER NOT NULL,
    time_updated INTEGER NOT NULL,
    time_closed INTEGER NOT NULL,
    time_last_observed INTEGER NOT NULL,
    html_url TEXT NULL COLLATE NOCASE,
    locked INTEGER NOT NULL,
    assignee_ids TEXT NULL COLLATE NOCASE,
    label_ids TEXT NULL COLLATE NOCASE
);
CREATE UNIQUE INDEX idx_issues_internal_id ON issues (internal_id);
"""

ISSUE_LABELS = """
CREATE TABLE issue_labels (
    id INTEGER PRIMARY KEY NOT NULL,
    issue_id INTEGER NOT NULL,
    label_id INTEGER NOT NULL
);
CREATE UNIQUE INDEX idx_issue_labels_issue_label ON issue_labels (issue_id, label_id);
"""

ISSUE_ASSIGNEES = """
CREATE TABLE issue_assignees (
    id INTEGER PRIMARY KEY NOT NULL,
    issue_id INTEGER NOT NULL,
    user_id INTEGER NOT NULL
);
CREATE UNIQUE INDEX idx_issue_assignees_issue_user ON issue_assignees (issue_id, user_id);
"""

PULL_REQUESTS = """
CREATE TABLE pull_requests (
    id INTEGER PRIMARY KEY NOT NULL,
    internal_id INTEGER NOT NULL,
    number INTEGER NOT NULL,
    repository_id INTEGER NOT NULL,
    state TEXT NOT NULL COLLATE NOCASE,
    title TEXT NOT NULL COLLATE NOCASE,
    body TEXT NOT NULL COLLATE NOCASE,
    author_id INTEGER NOT NULL,
    time_created INTEGER NOT NULL,
    time_updated INTEGER NOT NULL,
    time_merged INTEGER NOT NULL,
    time_closed INTEGER NOT NULL,
    time_last_observed INTEGER NOT NULL,
    html_url TEXT NULL COLLATE NOCASE,
    locked INTEGER NOT NULL,
    draft INTEGER NOT NULL,
    head_sha TEXT NULL COLLATE NOCASE,
    merged INTEGER NOT NULL,
    mergeable INTEGER NOT NULL,
    mergeable_state TEXT NULL COLLATE NOCASE,
    commit_count INTEGER NOT NULL,
    assignee_ids TEXT NULL COLLATE NOCASE,
    label_ids TEXT NULL COLLATE NOCASE
);
CREATE UNIQUE INDEX idx_pull_requests_internal_id ON pull_requests (internal_id);
"""

PULL_REQUEST_ASSIGNEES = """
CREATE TABLE pull_request_assignees (
    id INTEGER PRIMARY KEY NOT NULL,
    pull_request_id INTEGER NOT NULL,
    user_id INTEGER NOT NULL
);
CREATE UNIQUE INDEX idx_pull_request_assignees_pull_request_user
    ON pull_request_assignees (pull_request_id, user_id);
"""

PULL_REQUEST_LABELS = """
CREATE TABLE pull_request_labels (
    id INTEGER PRIMARY KEY NOT NULL,
    pull_request_id INTEGER NOT NULL,
    label_id INTEGER NOT NULL
);
CREATE UNIQUE INDEX idx_pull_request_labels_pull_request_label
    ON pull_request_labels (pull_request_id, label_id);
"""

# Append-only history, so no unique index.
PULL_REQUEST_STATUSES = """
CREATE TABLE pull_request_statuses (
    id INTEGER PRIMARY KEY NOT NULL,
    pull_request_id INTEGER NOT NULL,
    head_sha TEXT NULL COLLATE NOCASE,
    conclusion_id INTEGER NOT NULL,
    status_id INTEGER NOT NULL,
    state_id INTEGER NOT NULL,
    result TEXT NOT NULL COLLATE NOCASE,
    details_url TEXT NULL COLLATE NOCASE,
    html_url TEXT NULL COLLATE NOCASE,
    time_occurred INTEGER NOT NULL,
    time_created INTEGER NOT NULL
);
"""

CHECK_RUNS = """
CREATE TABLE check_runs (
    id INTEGER PRIMARY KEY NOT NULL,
    internal_id INTEGER NOT NULL,
    head_sha TEXT NULL COLLATE NOCASE,
    name TEXT NOT NULL COLLATE NOCASE,
    conclusion_id INTEGER NOT NULL,
    status_id INTEGER NOT NULL,
    result TEXT NOT NULL COLLATE NOCASE,
    details_url TEXT NULL COLLATE NOCASE,
    html_url TEXT NULL COLLATE NOCASE,
    time_started INTEGER NOT NULL,
    time_completed INTEGER NOT NULL
);
CREATE UNIQUE INDEX idx_check_runs_internal_id ON check_runs (internal_id);
"""

CHECK_SUITES = """
CREATE TABLE check_suites (
    id INTEGER PRIMARY KEY NOT NULL,
    internal_id INTEGER NOT NULL,
    head_sha TEXT NULL COLLATE NOCASE,
    name TEXT NOT NULL COLLATE NOCASE,
    conclusion_id INTEGER NOT NULL,
    status_id INTEGER NOT NULL,
    html_url TEXT NULL COLLATE NOCASE
);
CREATE UNIQUE INDEX idx_check_suites_internal_id ON check_suites (internal_id);
"""

COMMIT_COMBINED_STATUSES = """
CREATE TABLE commit_combined_statuses (
    id INTEGER PRIMARY KEY NOT NULL,
    state_id INTEGER NOT NULL,
    head_sha TEXT NULL COLLATE NOCASE
);
CREATE UNIQUE INDEX idx_commit_combined_statuses_head_sha
    ON commit_combined_statuses (head_sha);
"""

NOTIFICATIONS = """
CREATE TABLE notifications (
    id INTEGER PRIMARY KEY NOT NULL,
    type_id INTEGER NOT NULL,
    user_id INTEGER NOT NULL,
    repository_id INTEGER NOT NULL,
    title TEXT NOT NULL COLLATE NOCASE,
    description TEXT NOT NULL COLLATE NOCASE,
    identifier TEXT NULL COLLATE NOCASE,
    result TEXT NULL COLLATE NOCASE,
    html_url TEXT NULL COLLATE NOCASE,
    details_url TEXT NULL COLLATE NOCASE,
    toast_state INTEGER NOT NULL,
    time_occurred INTEGER NOT NULL,
    time_created INTEGER NOT NULL
);
"""

SEARCHES = """
CREATE TABLE searches (
    id INTEGER PRIMARY KEY NOT NULL,
    repository_id INTEGER NOT NULL,
    time_updated INTEGER NOT NULL,
    query TEXT NOT NULL COLLATE NOCASE
);
CREATE UNIQUE INDEX idx_searches_repository_id_query ON searches (repository_id, query);
"""

SEARCH_ISSUES = """
CREATE TABLE search_issues (
    id INTEGER PRIMARY KEY NOT NULL,
    time_updated INTEGER NOT NULL,
    search_id INTEGER NOT NULL,
    issue_id INTEGER NOT NULL
);
CREATE UNIQUE INDEX idx_search_issues_search_issue ON search_issues (search_id, issue_id);
"""

REVIEWS = """
CREATE TABLE reviews (
    id INTEGER PRIMARY KEY NOT NULL,
    internal_id INTEGER NOT NULL,
    pull_request_id INTEGER NOT NULL,
    author_id INTEGER NOT NULL,
    body TEXT NOT NULL COLLATE NOCASE,
    state TEXT NOT NULL COLLATE NOCASE,
    html_url TEXT NULL COLLATE NOCASE,
    time_submitted INTEGER NOT NULL,
    time_last_observed INTEGER NOT NULL
);
CREATE UNIQUE INDEX idx_reviews_internal_id ON reviews (internal_id);
"""

RELEASES = """
CREATE TABLE releases (
    id INTEGER PRIMARY KEY NOT NULL,
    internal_id INTEGER NOT NULL,
    repository_id INTEGER NOT NULL,
    name TEXT NOT NULL COLLATE NOCASE,
    tag_name TEXT NOT NULL COLLATE NOCASE,
    prerelease INTEGER NOT NULL,
    html_url TEXT NULL COLLATE NOCASE,
    time_created INTEGER NOT NULL,
    time_published INTEGER NOT NULL,
    time_last_observed INTEGER NOT NULL
);
CREATE UNIQUE INDEX idx_releases_internal_id ON releases (internal_id);
"""

SCHEMA_VERSION = 0x0006

GITHUB_SCHEMA = DataStoreSchema(
    version=SCHEMA_VERSION,
    sqls=(
        METADATA,
        USERS,
        REPOSITORIES,
        LABELS,
        ISSUES,
        ISSUE_LABELS,
        ISSUE_ASSIGNEES,
        PULL_REQUESTS,
        PULL_REQUEST_ASSIGNEES,
        PULL_REQUEST_LABELS,
        PULL_REQUEST_STATUSES,
        CHECK_RUNS,
        CHECK_SUITES,
        COMMIT_COMBINED_STATUSES,
        NOTIFICATIONS,
        SEARCHES,
        SEARCH_ISSUES,
        REVIEWS,
        RELEASES,
    ),
)
