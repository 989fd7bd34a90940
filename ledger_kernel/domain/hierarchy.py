"""
Hierarchy -- Dot-delimited account path computation.

Responsibility:
    Computes the ancestor path string of a ledger account (``"."`` for a
    top-level account, ``parent_path + id + "."`` below it) and the new paths
    of a whole subtree after a re-parent.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Accounts are addressed through an arena: a mapping of id -> record whose
    ``parent_id`` is an id reference, never an embedded object.

Invariants enforced:
    - An account's path is its parent's path followed by ``"<id>."``.
    - recompute_subtree() yields parents before children, so every child
      path is derived from its parent's new path.

Non-goals:
    - No cycle detection.  Callers must refuse a parent that is the account
      itself or one of its descendants before recomputing.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator, Mapping
from typing import Protocol

ROOT_HIERARCHY = "."


class HierarchyNode(Protocol):
    """Minimal shape of an arena record."""

    id: int
    parent_id: int | None
    hierarchy: str | None


AccountArena = Mapping[int, HierarchyNode]


def child_hierarchy(parent_hierarchy: str, account_id: int) -> str:
    return f"{parent_hierarchy}{account_id}."


def compute_hierarchy(account: HierarchyNode, accounts: AccountArena) -> str:
    """
    Path of ``account`` from its parent's stored path.

    Raises:
        KeyError: The parent id is not in the arena.
        ValueError: The parent has no path yet.
    """
    if account.parent_id is None:
        return ROOT_HIERARCHY

    parent = accounts[account.parent_id]
    if parent.hierarchy is None:
        raise ValueError(
            f"Parent account {parent.id} has no hierarchy path; "
            "compute it before its children"
        )
    return child_hierarchy(parent.hierarchy, account.id)


def children_index(accounts: AccountArena) -> dict[int, list[int]]:
    """parent id -> child ids, in ascending id order."""
    index: dict[int, list[int]] = {}
    for account_id in sorted(accounts):
        parent_id = accounts[account_id].parent_id
        if parent_id is not None:
            index.setdefault(parent_id, []).append(account_id)
    return index


def recompute_subtree(
    account_id: int,
    accounts: AccountArena,
) -> Iterator[tuple[int, str]]:
    """
    Yield ``(id, new_path)`` for the account and every descendant.

    The account's own path comes from its (possibly new) parent's stored
    path; descendants are derived from the freshly computed paths,
    breadth-first.
    """
    children = children_index(accounts)
    root_path = compute_hierarchy(accounts[account_id], accounts)
    yield account_id, root_path

    queue: deque[tuple[int, str]] = deque([(account_id, root_path)])
    visited = {account_id}
    while queue:
        parent_id, parent_path = queue.popleft()
        for child_id in children.get(parent_id, ()):
            if child_id in visited:
                continue
            visited.add(child_id)
            path = child_hierarchy(parent_path, child_id)
            yield child_id, path
            queue.append((child_id, path))
