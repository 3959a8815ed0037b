import unittest
from datetime import datetime, timezone

from corsaro.core.diagnostics import BufferedDiagnostics
from corsaro.sources.results_table import ResultsTableParser, TableLayout, parse_int

NOW = datetime(2024, 3, 15, 10, 0, tzinfo=timezone.utc)
HASH = "0123456789abcdef0123456789abcdef01234567"


def _row(category="Serie TV", title='<a href="/123">Show Name</a>', seeders="12", leechers="3",
         size="1.2 GB", date="2 giorni fa", extra="", attrs=""):
    return (
        f"<tr{attrs}><td>{category}</td><td>{title}</td><td>{seeders}</td><td>{leechers}</td>"
        f"<td>{size}</td><td>{date}</td><td>{extra}</td></tr>"
    )


def _page(rows, table_id="main_table", tbody=True):
    head = "<thead><tr><th>Cat</th><th>Nome</th><th>S</th><th>L</th><th>Size</th><th>Data</th><th></th></tr></thead>"
    body = "".join(rows)
    if tbody:
        body = f"<tbody>{body}</tbody>"
    id_attr = f' id="{table_id}"' if table_id else ""
    return f"<html><body><table{id_attr}>{head}{body}</table></body></html>"


class TestResultsTableParser(unittest.TestCase):
    def setUp(self):
        self.diagnostics = BufferedDiagnostics()
        self.parser = ResultsTableParser(diagnostics=self.diagnostics)

    def test_parses_typical_row(self):
        rows = self.parser.parse(_page([_row()]), now=NOW)
        self.assertEqual(len(rows), 1)
        row = rows[0]
        self.assertEqual(row.title, "Show Name")
        self.assertEqual(row.link, "/123")
        self.assertEqual(row.seeders, 12)
        self.assertEqual(row.leechers, 3)
        self.assertEqual(row.size, "1.2 GB")
        self.assertEqual(row.downloads, 0)
        self.assertEqual(row.date, "2024-03-13T10:00:00Z")
        self.assertEqual(row.magnet, "")
        self.assertEqual(row.torrent_url, "")

    def test_disallowed_category_is_dropped(self):
        rows = self.parser.parse(_page([_row(category="Musica"), _row(category="Film")]), now=NOW)
        self.assertEqual(len(rows), 1)

    def test_category_match_is_substring(self):
        rows = self.parser.parse(_page([_row(category='<span class="cat">Animazione</span>')]), now=NOW)
        self.assertEqual(len(rows), 1)

    def test_short_rows_are_skipped(self):
        short = "<tr><td>Film</td><td><a href='/1'>X</a></td><td>1</td><td>1</td><td>1 GB</td><td>oggi</td></tr>"
        self.assertEqual(self.parser.parse(_page([short]), now=NOW), [])

    def test_row_without_link_is_dropped(self):
        rows = self.parser.parse(_page([_row(title="Plain Title"), _row(title='<a href="">Empty</a>')]), now=NOW)
        self.assertEqual(rows, [])

    def test_title_entities_are_decoded_and_tags_stripped(self):
        title = '<a href="/9">Tom &amp; Jerry&#039;s <b>&quot;Best&quot;</b> &lt;ITA&gt;</a>'
        rows = self.parser.parse(_page([_row(title=title)]), now=NOW)
        self.assertEqual(rows[0].title, "Tom & Jerry's \"Best\" <ITA>")

    def test_magnet_and_torrent_links_from_anywhere_in_row(self):
        extra = (
            f'<a href="magnet:?xt=urn:btih:{HASH}&amp;dn=x">m</a>'
            '<a href="/dl/show.torrent">t</a>'
        )
        rows = self.parser.parse(_page([_row(extra=extra)]), now=NOW)
        self.assertEqual(rows[0].magnet, f"magnet:?xt=urn:btih:{HASH}&dn=x")
        self.assertEqual(rows[0].torrent_url, "/dl/show.torrent")

    def test_timestamp_attribute_wins_over_date_text(self):
        rows = self.parser.parse(_page([_row(attrs=' data-timestamp="1700000000"', date="ieri")]), now=NOW)
        self.assertEqual(rows[0].date, "2023-11-14T22:13:20Z")

    def test_timestamp_attribute_inside_row(self):
        date = '<span data-timestamp="0">01/01/1970</span>'
        rows = self.parser.parse(_page([_row(date=date)]), now=NOW)
        self.assertEqual(rows[0].date, "1970-01-01T00:00:00Z")

    def test_unparseable_counts_default_to_zero(self):
        rows = self.parser.parse(_page([_row(seeders="n/a", leechers="")]), now=NOW)
        self.assertEqual(rows[0].seeders, 0)
        self.assertEqual(rows[0].leechers, 0)

    def test_missing_table_returns_empty_and_records_parse_failure(self):
        self.assertEqual(self.parser.parse("<html><body><p>Nessun risultato</p></body></html>"), [])
        self.assertIn("parse_failure", self.diagnostics.messages())

    def test_falls_back_to_first_table_without_known_id(self):
        rows = self.parser.parse(_page([_row()], table_id=""), now=NOW)
        self.assertEqual(len(rows), 1)

    def test_rows_without_tbody(self):
        rows = self.parser.parse(_page([_row(), _row(category="Film")], tbody=False), now=NOW)
        self.assertEqual(len(rows), 2)

    def test_known_table_is_preferred_over_earlier_tables(self):
        html = "<table><tr><td>layout</td></tr></table>" + _page([_row()])
        self.assertEqual(len(self.parser.parse(html, now=NOW)), 1)

    def test_custom_layout_categories(self):
        parser = ResultsTableParser(layout=TableLayout(allowed_categories=("Musica",)))
        rows = parser.parse(_page([_row(category="Musica"), _row(category="Film")]), now=NOW)
        self.assertEqual(len(rows), 1)


class TestParseInt(unittest.TestCase):
    def test_leading_integer(self):
        self.assertEqual(parse_int("42"), 42)
        self.assertEqual(parse_int(" 7 peers"), 7)
        self.assertEqual(parse_int("-"), 0)
        self.assertEqual(parse_int(""), 0)


if __name__ == "__main__":
    unittest.main()
