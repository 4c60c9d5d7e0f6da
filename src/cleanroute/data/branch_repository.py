"""Branch lookups. The routing engine never writes branch records."""

from __future__ import annotations

from ..exceptions import NotFoundException
from ..models.domain import Branch
from ..persistence import BRANCHES, DocumentStore
from .records import branch_from_record, to_record


def get_branch(store: DocumentStore, branch_id: str) -> Branch:
    record = store.get(BRANCHES, branch_id)
    if record is None:
        raise NotFoundException(BRANCHES, branch_id)
    return branch_from_record(record)


def save_branch(store: DocumentStore, branch: Branch) -> None:
    """Seed helper for fixtures and administrative tooling."""
    store.set(BRANCHES, branch.branch_id, to_record(branch, "branch_id"))
