"""Ancestor and descendant traversal over parent pointers.

Both walks are iterative and bounded by ``max_depth`` so a corrupted parent
chain (a cycle that slipped into storage) surfaces as
``HierarchyIntegrityError`` instead of looping forever. Lookups are passed in
as callables so the same algorithms serve every storage adapter.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Optional
from uuid import UUID

DEFAULT_MAX_DEPTH = 100

FindParentId = Callable[[UUID], Awaitable[Optional[UUID]]]
FindChildIds = Callable[[list[UUID]], Awaitable[list[UUID]]]


class HierarchyIntegrityError(RuntimeError):
    """Persisted parent pointers violate the forest invariant."""

    def __init__(self, organization_id: UUID, detail: str):
        self.organization_id = organization_id
        super().__init__(f"Hierarchy integrity violated at {organization_id}: {detail}")


async def walk_ancestor_ids(
    organization_id: UUID,
    find_parent_id: FindParentId,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> list[UUID]:
    """Follow parent pointers upward.

    Returns:
        Ids ordered [parent, grandparent, ...]; empty for a root or an unknown id.

    Raises:
        HierarchyIntegrityError: A node repeats or the chain exceeds ``max_depth``
    """
    ancestors: list[UUID] = []
    seen = {organization_id}
    current = organization_id

    while True:
        parent_id = await find_parent_id(current)
        if parent_id is None:
            return ancestors
        if parent_id in seen:
            raise HierarchyIntegrityError(organization_id, f"cycle through {parent_id}")
        if len(ancestors) >= max_depth:
            raise HierarchyIntegrityError(
                organization_id, f"ancestor chain deeper than {max_depth}"
            )
        ancestors.append(parent_id)
        seen.add(parent_id)
        current = parent_id


async def collect_descendant_ids(
    organization_id: UUID,
    find_child_ids: FindChildIds,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> list[UUID]:
    """Breadth-first walk over "children of", one lookup per level.

    Returns:
        Every descendant id in discovery order, without duplicates and never
        including ``organization_id`` itself.

    Raises:
        HierarchyIntegrityError: A node is reached twice or the subtree is
            deeper than ``max_depth``
    """
    descendants: list[UUID] = []
    seen = {organization_id}
    frontier = [organization_id]
    depth = 0

    while frontier:
        children = await find_child_ids(frontier)
        if not children:
            break

        depth += 1
        if depth > max_depth:
            raise HierarchyIntegrityError(
                organization_id, f"subtree deeper than {max_depth}"
            )

        next_frontier: list[UUID] = []
        for child_id in children:
            if child_id in seen:
                raise HierarchyIntegrityError(organization_id, f"{child_id} reached twice")
            seen.add(child_id)
            descendants.append(child_id)
            next_frontier.append(child_id)
        frontier = next_frontier

    return descendants


@dataclass
class OrganizationTreeNode:
    id: UUID
    name: str
    member_count: int
    children: list[OrganizationTreeNode] = field(default_factory=list)


def assemble_tree(
    root_id: UUID,
    names: dict[UUID, str],
    children_of: dict[UUID, list[UUID]],
    member_counts: dict[UUID, int],
) -> OrganizationTreeNode:
    """Build a nested tree from flat lookups gathered level by level."""
    root = OrganizationTreeNode(
        id=root_id, name=names.get(root_id, ""), member_count=member_counts.get(root_id, 0)
    )
    stack = [root]
    while stack:
        node = stack.pop()
        for child_id in children_of.get(node.id, []):
            child = OrganizationTreeNode(
                id=child_id,
                name=names.get(child_id, ""),
                member_count=member_counts.get(child_id, 0),
            )
            node.children.append(child)
            stack.append(child)
    return root
