"""Tabular and JSON presentation helpers for the CLI."""

import json
from typing import Any, Mapping, Sequence

from pydantic import BaseModel
from rich.console import Console
from rich.table import Table

console = Console()


def print_table(rows: Sequence[Mapping[str, Any]], title: str | None = None) -> None:
    """Render a list of uniform mappings as a table, one column per key."""
    table = Table(title=title, show_lines=False)
    if not rows:
        console.print(table)
        return
    columns = list(rows[0].keys())
    for column in columns:
        table.add_column(column, overflow="fold")
    for row in rows:
        table.add_row(*("-" if row.get(column) is None else str(row.get(column)) for column in columns))
    console.print(table)


def to_jsonable(data: Any) -> Any:
    """Convert pydantic models (or lists of them) into JSON-serializable structures."""
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json")
    if isinstance(data, (list, tuple)):
        return [to_jsonable(item) for item in data]
    if isinstance(data, dict):
        return {key: to_jsonable(value) for key, value in data.items()}
    return data


def print_json(data: Any) -> None:
    """Print data as indented JSON to standard output."""
    print(json.dumps(to_jsonable(data), indent=2, default=str, ensure_ascii=False))
