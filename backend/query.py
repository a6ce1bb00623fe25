"""
Table query builder.
Collects a select/insert/update/delete/upsert against one backend table and
hands it to the client for execution.
"""

from typing import Any, Dict, List, Optional, Tuple


class TableQuery:
    """
    Chainable description of one table request.

    Usage:
        backend.table('packages').select('*').order('created_at').execute()
        backend.table('wishlist').select('id').eq('user_id', uid).single().execute()
    """

    def __init__(self, client, table: str, access_token: Optional[str] = None):
        self.client = client
        self.table = table
        self.access_token = access_token
        self.action = 'select'
        self.columns = '*'
        self.filters: List[Tuple[str, Any]] = []
        self.ordering: List[Tuple[str, bool]] = []
        self.payload = None
        self.on_conflict: Optional[str] = None
        self.is_single = False

    def select(self, columns: str = '*') -> 'TableQuery':
        self.action = 'select'
        self.columns = columns
        return self

    def insert(self, rows) -> 'TableQuery':
        self.action = 'insert'
        self.payload = rows if isinstance(rows, list) else [rows]
        return self

    def upsert(self, rows, on_conflict: str = 'id') -> 'TableQuery':
        self.action = 'upsert'
        self.payload = rows if isinstance(rows, list) else [rows]
        self.on_conflict = on_conflict
        return self

    def update(self, values: Dict) -> 'TableQuery':
        self.action = 'update'
        self.payload = values
        return self

    def delete(self) -> 'TableQuery':
        self.action = 'delete'
        return self

    def eq(self, column: str, value) -> 'TableQuery':
        self.filters.append((column, value))
        return self

    def order(self, column: str, ascending: bool = True) -> 'TableQuery':
        self.ordering.append((column, ascending))
        return self

    def single(self) -> 'TableQuery':
        """Expect at most one row; execute() returns a dict or None."""
        self.is_single = True
        return self

    def execute(self):
        """
        Run the query.

        Returns:
            List of row dicts, or a single dict / None after single()

        Raises:
            BackendError: On any backend or transport failure
        """
        return self.client.run_query(self)

    def __repr__(self):
        return (f'<TableQuery {self.action} {self.table} '
                f'filters={self.filters} order={self.ordering}>')
