"""HTML output for the leaderboard display tree.

Produces a self-contained page: metadata region (current GW, last update,
legend), a two-row header whose cells link to the next sort state, and the
table body. Header links re-request the page with ?sort=&dir=; an inline
script re-sorts the rows in place so a page written to disk stays sortable.
"""

from html import escape
from typing import List
from urllib.parse import urlencode

from utils.config import DISPLAY_TIMEZONE, PAGE_TITLE

from .table import Badge, DisplayCell, DisplayHeader, DisplayTable, format_last_updated

ERROR_MESSAGE = "Error loading data"

STYLES = """
body { font-family: system-ui, -apple-system, "Segoe UI", Roboto, sans-serif; margin: 24px; color: #1d2433; }
h1 { font-size: 1.4rem; margin: 0 0 6px; }
.meta { color: #5a6478; margin-bottom: 14px; font-size: 0.9rem; }
.legend { display: inline-flex; gap: 10px; margin-left: 12px; }
.legend span { padding: 1px 6px; border-radius: 4px; }
table { border-collapse: collapse; font-size: 0.85rem; }
th, td { padding: 4px 7px; border-bottom: 1px solid #e3e7ef; text-align: center; white-space: nowrap; }
th { background: #f4f6fa; }
th a { color: inherit; text-decoration: none; display: block; }
th[data-dir="asc"] a::after { content: " \\25B2"; }
th[data-dir="desc"] a::after { content: " \\25BC"; }
td[data-key="teamName"] { text-align: left; font-weight: 600; }
.sep-left { border-left: 2px solid #9aa4b8; }
.sum-col { background: #eef3ff; font-weight: 600; }
.future { color: #a3abbb; }
.gw-leader { background: #fff3c4; }
.period-leader { box-shadow: inset 3px 0 0 #2f9e44; }
.badge { display: inline-block; padding: 1px 6px; border-radius: 10px; background: #eef0f4; margin: 1px; }
.badge.in { background: #d3f9d8; }
.badge.out { background: #ffe3e3; }
.badge.chip { background: #e5dbff; }
.error { color: #c92a2a; font-weight: 600; }
"""

# Client-side re-sort for pages opened as static files. Follows the
# SortState click protocol; ranks are renumbered from row position.
SORT_SCRIPT = """
(function () {
  var thead = document.getElementById("thead");
  var tbody = document.getElementById("tbody");
  if (!thead || !tbody) { return; }

  var state = { key: null, dir: null };
  var marked = thead.querySelector("th[data-dir]");
  if (marked) { state = { key: marked.dataset.key, dir: marked.dataset.dir }; }

  function sortValue(row, key, numeric) {
    var cell = row.querySelector('td[data-key="' + key + '"]');
    var raw = cell ? cell.getAttribute("data-value") || "" : "";
    if (!numeric) { return raw; }
    var n = raw === "" ? NaN : Number(raw);
    return isFinite(n) ? n : -Infinity;
  }

  function refreshHeaders() {
    Array.prototype.forEach.call(thead.querySelectorAll("th[data-key]"), function (th) {
      var next = "desc";
      if (th.dataset.key === state.key) {
        th.setAttribute("data-dir", state.dir);
        next = state.dir === "desc" ? "asc" : "desc";
      } else {
        th.removeAttribute("data-dir");
      }
      var link = th.querySelector("a");
      if (link) {
        link.setAttribute("href", "?sort=" + encodeURIComponent(th.dataset.key) + "&dir=" + next);
      }
    });
  }

  thead.addEventListener("click", function (event) {
    var th = event.target.closest("th[data-key]");
    if (!th) { return; }
    event.preventDefault();

    var key = th.dataset.key;
    var dir = (key === state.key && state.dir === "desc") ? "asc" : "desc";
    var numeric = th.dataset.kind === "numeric";
    var sign = dir === "asc" ? 1 : -1;

    var rows = Array.prototype.slice.call(tbody.rows);
    rows.sort(function (a, b) {
      var x = sortValue(a, key, numeric);
      var y = sortValue(b, key, numeric);
      var cmp = numeric ? (x < y ? -1 : (x > y ? 1 : 0)) : x.localeCompare(y);
      return cmp * sign;
    });
    rows.forEach(function (row, i) {
      tbody.appendChild(row);
      var rank = row.querySelector('td[data-key="rank"]');
      if (rank) {
        rank.textContent = String(i + 1);
        rank.setAttribute("data-value", String(i + 1));
      }
    });

    state = { key: key, dir: dir };
    refreshHeaders();
  });
})();
"""


def _class_attr(classes: List[str]) -> str:
    return f' class="{escape(" ".join(classes))}"' if classes else ""


def _render_header(cell: DisplayHeader) -> str:
    attrs = _class_attr(cell.classes)
    if cell.colspan > 1:
        attrs += f' colspan="{cell.colspan}"'
    if cell.rowspan > 1:
        attrs += f' rowspan="{cell.rowspan}"'
    if cell.key is None:
        return f"<th{attrs}>{escape(cell.label)}</th>"

    attrs += f' data-key="{escape(cell.key)}"'
    if cell.direction:
        attrs += f' data-dir="{cell.direction}"'
    if cell.kind:
        attrs += f' data-kind="{cell.kind}"'
    href = "?" + urlencode({"sort": cell.key, "dir": cell.next_direction})
    return f'<th{attrs}><a href="{escape(href)}">{escape(cell.label)}</a></th>'


def _render_badge(badge: Badge) -> str:
    classes = ["badge"] + ([badge.kind] if badge.kind else [])
    label = f"<strong>{escape(badge.label)}</strong> " if badge.label else ""
    return f'<span{_class_attr(classes)}>{label}{escape(badge.text)}</span>'


def _sort_value_attr(value) -> str:
    return "" if value is None else escape(str(value))


def _render_cell(cell: DisplayCell) -> str:
    content = " ".join(_render_badge(b) for b in cell.badges) if cell.badges else escape(cell.text)
    return (
        f'<td data-key="{escape(cell.key)}" data-value="{_sort_value_attr(cell.sort_value)}"'
        f'{_class_attr(cell.classes)}>{content}</td>'
    )


def render_meta(table: DisplayTable, tz_name: str = DISPLAY_TIMEZONE) -> str:
    updated = format_last_updated(table.generated_at, tz_name)
    legend = "".join(
        f'<span class="{escape(item.css_class)}">{escape(item.label)}</span>' for item in table.legend
    )
    return (
        f'GW {table.current_gw} &bull; Last update: <span id="last-update">{escape(updated)}</span>'
        f'<span class="legend">{legend}</span>'
    )


def _page(title: str, meta: str, thead: str, tbody: str, script: str = "") -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{escape(title)}</title>
<style>{STYLES}</style>
</head>
<body>
<h1>{escape(title)}</h1>
<div class="meta">{meta}</div>
<table>
<thead id="thead">{thead}</thead>
<tbody id="tbody">{tbody}</tbody>
</table>
{script}</body>
</html>
"""


def render_page(table: DisplayTable, title: str = PAGE_TITLE, tz_name: str = DISPLAY_TIMEZONE) -> str:
    """Render the full leaderboard page."""
    thead = "".join(
        "<tr>" + "".join(_render_header(cell) for cell in header_row) + "</tr>"
        for header_row in table.header_rows
    )
    tbody = "\n".join(
        "<tr>" + "".join(_render_cell(cell) for cell in row) + "</tr>"
        for row in table.rows
    )
    return _page(title, render_meta(table, tz_name), thead, tbody, f"<script>{SORT_SCRIPT}</script>\n")


def render_error_page(title: str = PAGE_TITLE, message: str = ERROR_MESSAGE) -> str:
    """Page shown when the snapshot cannot be loaded."""
    error = f'<span class="error">{escape(message)}</span>'
    return _page(title, error, "", f"<tr><td>{escape(message)}</td></tr>")
