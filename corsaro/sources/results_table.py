"""
Results Table Parser
Position-based extraction of torrent rows from the search results table.

Stages: locate table -> split rows -> split cells -> decode cell. The site
specific parts (table id, column positions, category labels) live in
TableLayout so a markup change only touches that object.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple
import re

from bs4 import BeautifulSoup
from bs4.element import Tag

from ..core.diagnostics import Diagnostics
from ..core.errors import ParseFailure
from ..models.torrent import RawTorrent
from ..utils.dates import parse_italian_date, timestamp_to_iso

_MAGNET_HREF_RE = re.compile(r'^magnet:', re.IGNORECASE)
_TORRENT_HREF_RE = re.compile(r'\.torrent$', re.IGNORECASE)
_LEADING_INT_RE = re.compile(r'^\s*(-?\d+)')
_TIMESTAMP_RE = re.compile(r'^\d+$')


@dataclass(frozen=True)
class TableLayout:
    table_id: str = "main_table"
    min_cells: int = 7
    category_col: int = 0
    title_col: int = 1
    seeders_col: int = 2
    leechers_col: int = 3
    size_col: int = 4
    date_col: int = 5
    allowed_categories: Tuple[str, ...] = field(default=("Film", "Animazione", "Serie TV"))


def parse_int(text: str) -> int:
    """Leading integer of a cell, 0 when there is none."""
    match = _LEADING_INT_RE.match(text or "")
    return int(match.group(1)) if match else 0


def find_magnet_href(node) -> str:
    elem = node.find(href=_MAGNET_HREF_RE)
    return elem["href"] if elem else ""


class ResultsTableParser:
    """Tolerant parser for the search results table"""

    def __init__(self, layout: Optional[TableLayout] = None, diagnostics: Optional[Diagnostics] = None):
        self.layout = layout or TableLayout()
        self.diagnostics = diagnostics or Diagnostics()

    def parse(self, html: str, now: Optional[datetime] = None) -> List[RawTorrent]:
        soup = BeautifulSoup(html or "", "html.parser")
        try:
            table = self.locate_table(soup)
        except ParseFailure as e:
            self.diagnostics.warning("parse_failure", reason=e.reason)
            return []

        torrents: List[RawTorrent] = []
        for row in self.split_rows(table):
            torrent = self.parse_row(row, now=now)
            if torrent:
                torrents.append(torrent)
        return torrents

    def locate_table(self, soup: BeautifulSoup) -> Tag:
        table = soup.find("table", id=self.layout.table_id) if self.layout.table_id else None
        if table is None:
            table = soup.find("table")
        if table is None:
            raise ParseFailure("No results table found in page")
        return table

    def split_rows(self, table: Tag) -> List[Tag]:
        # Older markup has no <tbody>; rows then sit directly in the table.
        body = table.find("tbody")
        scope = body if body is not None else table
        return scope.find_all("tr")

    def split_cells(self, row: Tag) -> List[Tag]:
        return row.find_all(["td", "th"], recursive=False)

    def decode_cell(self, cell: Tag) -> str:
        return cell.get_text().strip()

    def is_allowed_category(self, category: str) -> bool:
        return any(label in category for label in self.layout.allowed_categories)

    def parse_row(self, row: Tag, now: Optional[datetime] = None) -> Optional[RawTorrent]:
        layout = self.layout
        cells = self.split_cells(row)
        if len(cells) < layout.min_cells:
            return None

        category = self.decode_cell(cells[layout.category_col])
        if not self.is_allowed_category(category):
            return None

        title_cell = cells[layout.title_col]
        anchor = title_cell.find("a", href=True)
        if anchor is not None:
            link = (anchor.get("href") or "").strip()
            title = anchor.get_text().strip()
        else:
            link = ""
            title = self.decode_cell(title_cell)
        if not link:
            return None

        torrent_elem = row.find(href=_TORRENT_HREF_RE)

        return RawTorrent(
            title=title,
            link=link,
            size=self.decode_cell(cells[layout.size_col]),
            seeders=parse_int(self.decode_cell(cells[layout.seeders_col])),
            leechers=parse_int(self.decode_cell(cells[layout.leechers_col])),
            downloads=0,
            magnet=find_magnet_href(row),
            torrent_url=torrent_elem["href"] if torrent_elem else "",
            date=self._row_date(row, cells, now),
        )

    def _row_date(self, row: Tag, cells: List[Tag], now: Optional[datetime]) -> str:
        raw = row.get("data-timestamp")
        if raw is None:
            stamped = row.find(attrs={"data-timestamp": _TIMESTAMP_RE})
            raw = stamped.get("data-timestamp") if stamped is not None else None
        if raw is not None and _TIMESTAMP_RE.match(str(raw).strip()):
            try:
                return timestamp_to_iso(int(str(raw).strip()))
            except (OverflowError, OSError, ValueError):
                self.diagnostics.debug("bad_timestamp", value=raw)
        return parse_italian_date(
            self.decode_cell(cells[self.layout.date_col]),
            now=now,
            diagnostics=self.diagnostics,
        )
