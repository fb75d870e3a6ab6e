"""Association repositories for issue / pull request labels and assignees."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ghmirror.models import BaseModel, IssueAssign, IssueLabel, PullRequestAssign, PullRequestLabel

from .base import BaseRepository


class AssociationRepository[AssocType: BaseModel](BaseRepository[AssocType]):
    """Pair table keyed by (owner id, member id), both local surrogate ids."""

    owner_key: str
    member_key: str

    async def get(self, owner_id: int, member_id: int) -> AssocType | None:
        """Look up an exact pair."""
        model = self.model_class
        query = select(model).where(
            getattr(model, self.owner_key) == owner_id,
            getattr(model, self.member_key) == member_id,
        )
        return await self._execute_single_query(query)

    async def add_pair(self, owner_id: int, member_id: int) -> AssocType:
        """Add a pair; an existing pair is returned without writing."""
        existing = await self.get(owner_id, member_id)
        if existing is not None:
            return existing
        return await self.create(**{self.owner_key: owner_id, self.member_key: member_id})

    async def get_member_ids(self, owner_id: int) -> list[int]:
        """Get the member ids associated with ``owner_id``."""
        model = self.model_class
        query = (
            select(getattr(model, self.member_key))
            .where(getattr(model, self.owner_key) == owner_id)
            .order_by(model.id)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def delete_for_owner(self, owner_id: int) -> int:
        """Remove every pair belonging to ``owner_id``."""
        model = self.model_class
        return await self._execute_write(
            delete(model).where(getattr(model, self.owner_key) == owner_id)
        )

    async def delete_unreferenced(self, owner_model: type[BaseModel]) -> int:
        """Remove pairs whose owning issue or pull request is gone."""
        model = self.model_class
        return await self._execute_write(
            delete(model).where(getattr(model, self.owner_key).not_in(select(owner_model.id)))
        )


class IssueLabelRepository(AssociationRepository[IssueLabel]):
    """Labels applied to issues."""

    owner_key = "issue_id"
    member_key = "label_id"

    def __init__(self, session: AsyncSession):
        """Initialize with session."""
        super().__init__(session, IssueLabel)


class IssueAssignRepository(AssociationRepository[IssueAssign]):
    """Users assigned to issues."""

    owner_key = "issue_id"
    member_key = "user_id"

    def __init__(self, session: AsyncSession):
        """Initialize with session."""
        super().__init__(session, IssueAssign)


class PullRequestLabelRepository(AssociationRepository[PullRequestLabel]):
    """Labels applied to pull requests."""

    owner_key = "pull_request_id"
    member_key = "label_id"

    def __init__(self, session: AsyncSession):
        """Initialize with session."""
        super().__init__(session, PullRequestLabel)


class PullRequestAssignRepository(AssociationRepository[PullRequestAssign]):
    """Users assigned to pull requests."""

    owner_key = "pull_request_id"
    member_key = "user_id"

    def __init__(self, session: AsyncSession):
        """Initialize with session."""
        super().__init__(session, PullRequestAssign)
