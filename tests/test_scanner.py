import pytest

from xlgrep.address import OutOfRangeError
from xlgrep.scanner import process_document, scan_sheet
from xlgrep.types import MatchRecord, Number, Other, SearchConfig, SearchMode, Text


class FakeCell:
    def __init__(self, value):
        self.value = value

    def set_text(self, text):
        self.value = Text(text)


class FakeRow:
    def __init__(self, cells):
        self.cells = {k: FakeCell(v) for k, v in cells.items()}
        self.last_cell_index = max(cells) + 1

    def cell(self, index):
        return self.cells.get(index)


class FakeSheet:
    def __init__(self, name, rows):
        self.name = name
        self.rows = {k: FakeRow(v) for k, v in rows.items()}
        self.last_row_index = max(rows) if rows else -1

    def row(self, index):
        return self.rows.get(index)


class FakeDocument:
    def __init__(self, sheets):
        self.sheets = sheets
        self.saved = []

    def save(self, path):
        self.saved.append(path)


FUZZY_FOO = SearchConfig(word='foo', mode=SearchMode.FUZZY)


def test_scan_sheet_orders_by_row_then_column():
    sheet = FakeSheet('S', {
        5: {3: Text('foo'), 0: Text('xfoo')},
        2: {1: Text('foo!')},
    })
    records, text = scan_sheet(sheet, '/data/a.xlsx', FUZZY_FOO)
    assert [r.address for r in records] == ['B3', 'A6', 'D6']
    assert text == (
        '/data/a.xlsx\tS\tB3\tfoo!\n'
        '/data/a.xlsx\tS\tA6\txfoo\n'
        '/data/a.xlsx\tS\tD6\tfoo\n'
    )


def test_scan_sheet_skips_holes_and_other_cells():
    sheet = FakeSheet('S', {
        0: {0: Other(), 4: Text('foo')},
        3: {2: Number(1.0)},
    })
    records, _ = scan_sheet(sheet, 'a.xlsx', FUZZY_FOO)
    assert records == [MatchRecord('a.xlsx', 'S', 'E1', 'foo')]


def test_scan_empty_sheet():
    assert scan_sheet(FakeSheet('Empty', {}), 'a.xlsx', FUZZY_FOO) == ([], '')


def test_scan_sheet_replaces_after_matching():
    cfg = SearchConfig(word='foo', mode=SearchMode.FUZZY, replacement='bar')
    sheet = FakeSheet('S', {0: {0: Text('foofoo'), 1: Number(12.0)}})
    records, _ = scan_sheet(sheet, 'a.xlsx', cfg)
    # the record carries the value before replacement
    assert records[0].value == 'foofoo'
    assert sheet.row(0).cell(0).value == Text('barbar')
    assert sheet.row(0).cell(1).value == Number(12.0)


def test_scan_sheet_column_overflow():
    sheet = FakeSheet('S', {0: {26 * 26: Text('foo')}})
    with pytest.raises(OutOfRangeError):
        scan_sheet(sheet, 'a.xlsx', FUZZY_FOO)


def test_process_document_emits_per_sheet():
    doc = FakeDocument([
        FakeSheet('One', {0: {0: Text('foo')}}),
        FakeSheet('Two', {0: {0: Text('nothing')}}),
        FakeSheet('Three', {1: {1: Number(7.0)}, 2: {0: Text('food')}}),
    ])
    emitted = []
    records, text = process_document(doc, 'a.xlsx', FUZZY_FOO, emit=emitted.append)
    assert emitted == ['a.xlsx\tOne\tA1\tfoo\n', 'a.xlsx\tThree\tA3\tfood\n']
    assert text == ''.join(emitted)
    assert len(records) == 2
    assert doc.saved == []


def test_process_document_saves_only_when_replaced():
    cfg = SearchConfig(word='foo', mode=SearchMode.STRICTLY, replacement='R')
    doc = FakeDocument([FakeSheet('S', {0: {0: Text('foo'), 1: Text('food')}})])
    process_document(doc, 'a.xlsx', cfg, emit=lambda _text: None)
    assert doc.saved == ['a.xlsx']
    assert doc.sheets[0].row(0).cell(0).value == Text('R')
    assert doc.sheets[0].row(0).cell(1).value == Text('food')

    # scanning again for the replacement word finds the rewritten cell
    again = SearchConfig(word='R', mode=SearchMode.STRICTLY)
    records, _ = process_document(doc, 'a.xlsx', again, emit=lambda _text: None)
    assert [r.address for r in records] == ['A1']

    untouched = FakeDocument([FakeSheet('S', {0: {0: Text('bar')}})])
    process_document(untouched, 'b.xlsx', cfg, emit=lambda _text: None)
    assert untouched.saved == []
