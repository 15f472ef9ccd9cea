from datetime import datetime
from typing import Any, List, Literal, Optional

_ALIGN_MAP = {
    "l": ":---",
    "c": ":---:",
    "r": "---:",
}


def _cell(val: Any) -> str:
    if val is None:
        return "-"
    return str(val).replace("|", "\\|").replace("\n", " ")


def generate_markdown_table(
    headers: Optional[List[Any]],
    rows: List[List[Any]],
    aligns: Optional[List[Literal["l", "c", "r"]]] = None,
) -> str:
    """
    Generate a Markdown table.

    Args:
        headers: List of column headers, or None to use first row as headers.
        rows: List of rows; cells are stringified, None renders as "-".
        aligns: List of alignments ('l', 'c', 'r') for each column.
                Defaults to all center ('c').

    Returns:
        str: Markdown formatted table.
    """
    if not rows and not headers:
        return ""

    if not headers:
        headers, rows = rows[0], rows[1:]

    headers = [_cell(h) for h in headers]
    rows = [[_cell(c) for c in row] for row in rows]

    if aligns is None:
        aligns = ["c"] * len(headers)
    elif len(aligns) != len(headers):
        raise ValueError("Length of aligns must match number of headers.")

    header_line = "| " + " | ".join(headers) + " |"
    align_line = "| " + " | ".join(_ALIGN_MAP[a] for a in aligns) + " |"
    row_lines = ["| " + " | ".join(row) + " |" for row in rows]

    return "\n".join([header_line, align_line, *row_lines])


def format_ts(ts: Optional[datetime]) -> str:
    """Short local-time rendering for tables; "-" when missing."""
    if ts is None:
        return "-"
    if ts.tzinfo is not None:
        ts = ts.astimezone()
    return ts.strftime("%Y-%m-%d %H:%M")


def format_money(amount: float) -> str:
    return f"${amount:,.2f}"
