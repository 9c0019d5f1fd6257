"""Group repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.group import Group


class IGroupRepository(Protocol):
    """Repository interface for Group documents.

    Groups are read and written as a whole. ``update`` must reject a group
    whose ``version`` no longer matches the stored one.
    """

    async def get(self, id: UUID) -> Group | None:
        """Get a group by ID."""
        ...

    async def get_all(self) -> list[Group]:
        """Get all groups."""
        ...

    async def create(self, group: Group) -> Group:
        """Create a new group."""
        ...

    async def update(self, group: Group) -> Group:
        """Write back an existing group, bumping its version."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a group."""
        ...
