"""Row-level tenant filtering.

Translates the RowScope of an access record into a SQL predicate. Every
query on a tenant-shared table goes through ``scope_clause`` so tenant
isolation never depends on client-supplied workspace ids.
"""

from sqlalchemy import ColumnElement, and_, false, true

from warden.domain.policy import RowScope, RowScopeKind
from warden.domain.value import WorkspaceId


def scope_clause(scope: RowScope, column) -> ColumnElement[bool]:
    """Predicate restricting ``column`` (a workspace_id column) to ``scope``.

    Rows with a null workspace are platform rows and only match an
    unrestricted scope.
    """
    if scope.kind == RowScopeKind.ALL:
        return true()
    if scope.kind == RowScopeKind.WORKSPACE and scope.workspace_id is not None:
        return and_(column.is_not(None), column == scope.workspace_id)
    return false()


def narrowed_clause(
    scope: RowScope, column, workspace_id: WorkspaceId | None
) -> ColumnElement[bool]:
    """``scope_clause`` further narrowed to one workspace, if requested."""
    clause = scope_clause(scope, column)
    if workspace_id is None:
        return clause
    return and_(clause, column == workspace_id)
