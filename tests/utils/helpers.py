"""Test helper functions."""

import json
from typing import Any, Dict, Optional
from unittest.mock import MagicMock

_CHAIN_METHODS = ("select", "eq", "order", "limit", "insert", "update", "delete")


def make_query_mock(data: Optional[list] = None, error: Optional[Exception] = None) -> MagicMock:
    """A postgrest-style query whose builder methods all return itself."""
    query = MagicMock()
    for name in _CHAIN_METHODS:
        getattr(query, name).return_value = query
    if error is not None:
        query.execute.side_effect = error
    else:
        query.execute.return_value = MagicMock(data=data if data is not None else [])
    return query


def make_client_mock(query: MagicMock) -> MagicMock:
    client = MagicMock()
    client.table.return_value = query
    return client


def create_api_request(
    method: str = "GET",
    path: str = "/api/tasks",
    body: Any = None,
    query: Optional[Dict[str, str]] = None,
    headers: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    """Create a Vercel request object for testing."""
    if headers is None:
        headers = {"content-type": "application/json"}

    return {
        "method": method,
        "path": path,
        "headers": headers,
        "body": json.dumps(body) if isinstance(body, (dict, list)) else (body or ""),
        "query": query or {},
    }
