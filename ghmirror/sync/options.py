"""Per-request options for sync operations."""

from pydantic import BaseModel, Field


class RequestOptions(BaseModel):
    """Filters and paging applied to the remote listing calls."""

    pull_request_state: str = Field(default="open", description="open, closed or all")
    pull_request_sort: str = Field(default="updated", description="Pull request sort field")
    pull_request_direction: str = Field(default="desc", description="asc or desc")

    issue_state: str = Field(default="open", description="open, closed or all")
    issue_sort: str = Field(default="created", description="Issue search sort field")
    issue_order: str = Field(default="desc", description="asc or desc")
    search_term: str | None = Field(
        default=None, description="Extra search text; also saved as a Search row"
    )

    page_size: int = Field(default=100, ge=1, le=100, description="Items per page")
    max_pages: int | None = Field(default=None, ge=1, description="None fetches every page")

    use_public_client_as_fallback: bool = Field(
        default=False, description="Try the anonymous client after every developer"
    )

    @classmethod
    def default(cls) -> "RequestOptions":
        """Fresh default options."""
        return cls()

    def issue_query(self, full_name: str) -> str:
        """Build the issue search query for ``owner/name``."""
        parts = [f"repo:{full_name}", "is:issue"]
        if self.issue_state and self.issue_state != "all":
            parts.append(f"is:{self.issue_state}")
        if self.search_term:
            parts.append(self.search_term)
        return " ".join(parts)
