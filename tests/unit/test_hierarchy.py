"""Unit tests for ancestor/descendant traversal and tree assembly."""

from uuid import UUID, uuid4

import pytest

from orgtree.services.hierarchy import (
    HierarchyIntegrityError,
    assemble_tree,
    collect_descendant_ids,
    walk_ancestor_ids,
)


def _parent_lookup(parents: dict[UUID, UUID]):
    calls: list[UUID] = []

    async def find_parent_id(org_id: UUID) -> UUID | None:
        calls.append(org_id)
        return parents.get(org_id)

    return find_parent_id, calls


def _children_lookup(parents: dict[UUID, UUID]):
    calls: list[list[UUID]] = []

    async def find_child_ids(parent_ids: list[UUID]) -> list[UUID]:
        calls.append(list(parent_ids))
        return [child for child, parent in parents.items() if parent in parent_ids]

    return find_child_ids, calls


def _chain(length: int) -> tuple[list[UUID], dict[UUID, UUID]]:
    """ids[0] is the root; ids[i] is the child of ids[i - 1]."""
    ids = [uuid4() for _ in range(length)]
    return ids, {ids[i]: ids[i - 1] for i in range(1, length)}


class TestWalkAncestorIds:
    @pytest.mark.asyncio
    async def test_root_has_no_ancestors(self):
        find_parent_id, _ = _parent_lookup({})
        assert await walk_ancestor_ids(uuid4(), find_parent_id) == []

    @pytest.mark.asyncio
    async def test_ancestors_ordered_parent_first(self):
        ids, parents = _chain(4)
        find_parent_id, _ = _parent_lookup(parents)

        ancestors = await walk_ancestor_ids(ids[3], find_parent_id)

        assert ancestors == [ids[2], ids[1], ids[0]]

    @pytest.mark.asyncio
    async def test_cycle_raises_instead_of_looping(self):
        a, b = uuid4(), uuid4()
        find_parent_id, calls = _parent_lookup({a: b, b: a})

        with pytest.raises(HierarchyIntegrityError) as exc_info:
            await walk_ancestor_ids(a, find_parent_id)

        assert exc_info.value.organization_id == a
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_chain_at_cap_is_allowed(self):
        ids, parents = _chain(6)
        find_parent_id, _ = _parent_lookup(parents)

        ancestors = await walk_ancestor_ids(ids[5], find_parent_id, max_depth=5)

        assert len(ancestors) == 5

    @pytest.mark.asyncio
    async def test_chain_beyond_cap_raises(self):
        ids, parents = _chain(7)
        find_parent_id, _ = _parent_lookup(parents)

        with pytest.raises(HierarchyIntegrityError, match="deeper than 5"):
            await walk_ancestor_ids(ids[6], find_parent_id, max_depth=5)


class TestCollectDescendantIds:
    @pytest.mark.asyncio
    async def test_leaf_has_no_descendants(self):
        find_child_ids, _ = _children_lookup({})
        assert await collect_descendant_ids(uuid4(), find_child_ids) == []

    @pytest.mark.asyncio
    async def test_breadth_first_one_lookup_per_level(self):
        root, a, b, a1, a2, b1 = (uuid4() for _ in range(6))
        parents = {a: root, b: root, a1: a, a2: a, b1: b}
        find_child_ids, calls = _children_lookup(parents)

        descendants = await collect_descendant_ids(root, find_child_ids)

        assert set(descendants[:2]) == {a, b}
        assert set(descendants[2:]) == {a1, a2, b1}
        assert root not in descendants
        # root level, level 1, level 2 (empty)
        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_subtree_only(self):
        root, a, b, a1 = (uuid4() for _ in range(4))
        find_child_ids, _ = _children_lookup({a: root, b: root, a1: a})

        assert await collect_descendant_ids(a, find_child_ids) == [a1]

    @pytest.mark.asyncio
    async def test_node_reached_twice_raises(self):
        root, child = uuid4(), uuid4()

        async def find_child_ids(parent_ids):
            # A corrupt store that reports root as its own grandchild
            return [child] if root in parent_ids else [root]

        with pytest.raises(HierarchyIntegrityError):
            await collect_descendant_ids(root, find_child_ids)

    @pytest.mark.asyncio
    async def test_subtree_deeper_than_cap_raises(self):
        ids, parents = _chain(5)
        find_child_ids, _ = _children_lookup(parents)

        assert len(await collect_descendant_ids(ids[0], find_child_ids, max_depth=4)) == 4
        with pytest.raises(HierarchyIntegrityError):
            await collect_descendant_ids(ids[0], find_child_ids, max_depth=3)


def test_assemble_tree_nests_children_with_counts():
    root, a, b, a1 = (uuid4() for _ in range(4))

    tree = assemble_tree(
        root,
        names={root: "Root", a: "A", b: "B", a1: "A1"},
        children_of={root: [a, b], a: [a1]},
        member_counts={root: 3, a1: 1},
    )

    assert tree.name == "Root"
    assert tree.member_count == 3
    assert [child.name for child in tree.children] == ["A", "B"]
    assert tree.children[0].children[0].id == a1
    assert tree.children[0].children[0].member_count == 1
    assert tree.children[1].children == []
    assert tree.children[1].member_count == 0
