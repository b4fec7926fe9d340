"""Plain-text status table of the registry."""

from collections.abc import Sequence

from .registry import Component

HEADER = ("Module", "Installed", "Expected", "Latest")
MARGIN = " " * 4


def build_rows(components: Sequence[Component], latest_version: str) -> list[tuple[str, ...]]:
    """Header row followed by one row per component."""
    rows = [HEADER]
    for component in components:
        rows.append(
            (
                component.name,
                component.installed_version,
                component.expected_version,
                latest_version,
            )
        )
    return rows


def column_widths(rows: Sequence[Sequence[str]]) -> list[int]:
    widths = [0] * len(HEADER)
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))
    return widths


def render_status_table(components: Sequence[Component], latest_version: str) -> str:
    """
    Render the components as a left-aligned table.

    Every cell is padded to its column width and followed by a four-space
    margin. The dashed separator spans the columns and the margins between
    them.
    """
    rows = build_rows(components, latest_version)
    widths = column_widths(rows)

    lines = [
        "".join(cell.ljust(width) + MARGIN for cell, width in zip(row, widths))
        for row in rows
    ]
    separator = "-" * (sum(widths) + (len(widths) - 1) * len(MARGIN))
    lines.insert(1, separator)
    return "\n".join(lines)
