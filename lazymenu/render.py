"""Frame rendering for the launcher view.

Turns a ``ViewState`` plus a ``Theme`` into one ANSI string that repaints
the whole screen: menu tabs, prompt and input, ranked entries with match
highlights and right-aligned values, and an overflow indicator.
"""

from __future__ import annotations

from .ansi import clip_length, clip_text, display_width
from .engine import ViewState
from .fuzzy import RankedEntry
from .theme import Theme, ThemeStyle

SPACING = 2

ROW_MENU_LINE = 0
ROW_PROMPT = 2
ROW_ENTRIES = 4

VALUE_OVERFLOW_INDICATOR = "+"


def entry_rows(term_rows: int) -> int:
    """Rows available for entries, keeping one row for the overflow line."""
    return max(1, term_rows - ROW_ENTRIES - 1)


def _move_to(row: int, col: int = 0) -> str:
    return f"\033[{row + 1};{col + 1}H"


def render_menu_line(view: ViewState, theme: Theme, width: int) -> str:
    """Render menu names as tabs, highlighting the active menu."""
    out: list[str] = []
    used = 0
    for idx, name in enumerate(view.menu_names):
        if used >= width:
            break
        label = clip_text(name, width - used)
        style = theme.menu_cursor if idx == view.active_menu_index else theme.menu_name
        out.append(style.paint(label))
        used += display_width(label)
        if used + SPACING < width and idx < len(view.menu_names) - 1:
            out.append(" " * SPACING)
            used += SPACING
    return "".join(out)


def highlight_name(name: str, spans: tuple[tuple[int, int], ...], base: ThemeStyle, match: ThemeStyle) -> str:
    """Paint ``name`` with ``match`` over its matched spans and ``base`` elsewhere."""
    out: list[str] = []
    cursor = 0
    for start, end in spans:
        start = min(start, len(name))
        end = min(end, len(name))
        if start > cursor:
            out.append(base.paint(name[cursor:start]))
        if end > start:
            out.append(match.paint(name[start:end]))
        cursor = max(cursor, end)
    if cursor < len(name):
        out.append(base.paint(name[cursor:]))
    return "".join(out)


def render_entry_line(item: RankedEntry, selected: bool, theme: Theme, width: int) -> str:
    """Render one entry row: highlighted name on the left, value on the right."""
    name = item.entry.name
    visible = clip_length(name, width)
    clipped_name = name[:visible]
    spans = tuple((start, min(end, visible)) for start, end in item.match_spans if start < visible)

    if not item.matched:
        name_part = theme.entry_hidden.paint(clipped_name)
        value_style = theme.entry_hidden
    elif selected:
        name_part = highlight_name(clipped_name, spans, theme.entry_cursor, theme.entry_cursor_match)
        value_style = theme.entry_value
    else:
        name_part = highlight_name(clipped_name, spans, theme.entry_name, theme.entry_match)
        value_style = theme.entry_value

    name_width = display_width(clipped_name)
    remaining = width - name_width - SPACING
    value = item.entry.value
    value_width = display_width(value)
    if remaining >= value_width:
        gap = " " * (width - name_width - value_width)
        return f"{name_part}{gap}{value_style.paint(value)}"
    if remaining >= 4:
        truncated = clip_text(value, remaining - len(VALUE_OVERFLOW_INDICATOR))
        shown = display_width(truncated) + len(VALUE_OVERFLOW_INDICATOR)
        gap = " " * (width - name_width - shown)
        return f"{name_part}{gap}{value_style.paint(truncated)}{theme.overflow.paint(VALUE_OVERFLOW_INDICATOR)}"
    return name_part


def render_frame(view: ViewState, theme: Theme, columns: int, rows: int) -> str:
    """Build a full-screen repaint for ``view`` and place the input cursor."""
    width = max(1, columns)
    out: list[str] = ["\033[?25l\033[H\033[2J"]

    out.append(_move_to(ROW_MENU_LINE))
    out.append(render_menu_line(view, theme, width))

    prompt = clip_text(view.prompt, width)
    input_text = clip_text(view.input_text, max(0, width - display_width(prompt)))
    out.append(_move_to(ROW_PROMPT))
    out.append(theme.prompt.paint(prompt))
    out.append(theme.input.paint(input_text))

    row = ROW_ENTRIES
    for idx, item in enumerate(view.entries):
        if row >= rows:
            break
        out.append(_move_to(row))
        out.append(render_entry_line(item, idx == view.active_entry_index, theme, width))
        row += 1

    if view.overflow > 0 and row < rows:
        out.append(_move_to(row))
        out.append(theme.overflow.paint(clip_text(f"+{view.overflow} more", width)))

    cursor_col = display_width(prompt) + display_width(view.input_text[: view.input_cursor])
    out.append(_move_to(ROW_PROMPT, min(cursor_col, width - 1)))
    out.append("\033[?25h")
    return "".join(out)
