"""Output rendering for the bytebardctl CLI.

API responses are plain decoded JSON. They are printed as a rich table for
people, or as JSON or YAML for scripts. Tables unwrap the ``posts`` and
``files`` lists so each record gets its own row.
"""

import sys
import json
import os
from typing import Any, Dict, List, Optional

import yaml
from rich.console import Console
from rich.table import Table
from rich import box

from .exceptions import ValidationError

FORMATS = ("table", "json", "yaml")
ENV_OUTPUT_FORMAT = "BYTEBARDCTL_OUTPUT_FORMAT"

# Keys whose value is the list of records in an API response
RESOURCE_KEYS = ("posts", "files")


def table_rows(data: Any) -> List[Dict[str, Any]]:
    """Turn a response into table rows.

    A response holding a resource list yields that list; any other dict is
    a single row. Scalars such as file names become ``{"value": ...}``.
    """
    if isinstance(data, dict):
        records = next(
            (data[key] for key in RESOURCE_KEYS if isinstance(data.get(key), list)),
            [data],
        )
    elif isinstance(data, list):
        records = data
    else:
        records = [data]

    return [record if isinstance(record, dict) else {"value": record} for record in records]


def format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "✓" if value else "✗"
    if isinstance(value, (list, dict)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def column_header(key: str) -> str:
    return key.replace("_", " ").title()


class OutputFormatter:
    """Prints API responses in the chosen output format."""

    def __init__(self, console: Optional[Console] = None) -> None:
        """Initialize output formatter.

        Args:
            console: Console used for tables and notices. Defaults to stdout.
        """
        self.console = console or Console()
        self._renderers = {
            "table": self.render_table,
            "json": self.render_json,
            "yaml": self.render_yaml,
        }

    def determine_format(self, format_override: Optional[str] = None) -> str:
        """Pick the output format.

        An explicit choice wins, then BYTEBARDCTL_OUTPUT_FORMAT. Otherwise a
        terminal gets a table and a pipe gets JSON.
        """
        chosen = format_override or os.environ.get(ENV_OUTPUT_FORMAT)
        if chosen:
            return chosen.lower()
        return "table" if sys.stdout.isatty() else "json"

    def render(self, data: Any, format: Optional[str] = None, **kwargs: Any) -> None:
        """Print ``data`` in ``format``.

        Keyword arguments such as ``columns`` and ``title`` only affect
        tables and are ignored by the other formats.

        Raises:
            ValidationError: If the format is unknown
        """
        format_name = self.determine_format(format)
        renderer = self._renderers.get(format_name)
        if renderer is None:
            raise ValidationError(
                f"Unknown output format: {format_name}. Choose from {', '.join(FORMATS)}"
            )
        renderer(data, **kwargs)

    def render_table(
        self,
        data: Any,
        columns: Optional[List[str]] = None,
        title: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """Print ``data`` as a rich table.

        Args:
            data: A response dict, a list of records or a scalar
            columns: Keys to show, in order. Defaults to every key, sorted.
            title: Table title
        """
        rows = table_rows(data) if data else []
        if not rows:
            self.console.print("[dim]No data to display[/dim]")
            return

        keys = columns or sorted({key for row in rows for key in row})

        table = Table(title=title, box=box.ROUNDED)
        for key in keys:
            table.add_column(column_header(key), overflow="fold")
        for row in rows:
            table.add_row(*(format_cell(row.get(key)) for key in keys))

        self.console.print(table)

    def render_json(self, data: Any, indent: Optional[int] = 2, **kwargs: Any) -> None:
        """Print ``data`` as JSON, keeping non-ASCII text readable."""
        try:
            text = json.dumps(data, indent=indent, ensure_ascii=False, default=str)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Cannot render response as JSON: {e}")
        print(text)

    def render_yaml(self, data: Any, **kwargs: Any) -> None:
        """Print ``data`` as block-style YAML in response key order."""
        try:
            text = yaml.safe_dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)
        except yaml.YAMLError as e:
            raise ValidationError(f"Cannot render response as YAML: {e}")
        print(text, end="")
