from __future__ import annotations
import datetime
import os
import shutil
import tempfile
from collections import defaultdict
from typing import Callable, Dict, List, Optional, Tuple

import xlrd
from openpyxl import load_workbook
from openpyxl.cell.cell import Cell as XLCell
from openpyxl.utils.datetime import to_excel
from openpyxl.worksheet.worksheet import Worksheet
from xlutils.filter import XLRDReader, XLWTWriter, process

from .types import CellValue, Number, Other, Text

XLSX_EXTENSIONS = ('.xlsx', '.xlsm')
XLS_EXTENSIONS = ('.xls',)
SPREADSHEET_EXTENSIONS = XLS_EXTENSIONS + XLSX_EXTENSIONS


class UnsupportedDocumentError(RuntimeError):
    """The file could not be opened as a spreadsheet."""


def _replace_atomically(path: str, write: Callable[[str], None]):
    """Write to a temp file beside `path`, then swap it over the original."""
    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(prefix='.xlgrep_', suffix=os.path.splitext(path)[1], dir=directory)
    os.close(fd)
    try:
        write(tmp_path)
        shutil.copymode(path, tmp_path)
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)


# --------------------------------------------------------------------------
# .xlsx / .xlsm via openpyxl
# --------------------------------------------------------------------------

DATE_TYPES = (datetime.datetime, datetime.date, datetime.time, datetime.timedelta)


def _classify_openpyxl(cell: XLCell, epoch: datetime.datetime) -> CellValue:
    value = cell.value
    if value is None:
        return Other()
    if cell.data_type == 's' and isinstance(value, str):
        return Text(value)
    # bool is an int subclass but is stored with data_type 'b'
    if cell.data_type == 'n' and isinstance(value, (int, float)) and not isinstance(value, bool):
        return Number(float(value))
    # date-formatted numbers come back as datetimes; match on the stored serial
    if cell.data_type == 'd' and isinstance(value, DATE_TYPES):
        return Number(float(to_excel(value, epoch)))
    return Other()


class XlsxCell:
    def __init__(self, cell: XLCell, epoch: datetime.datetime):
        self._cell = cell
        self._epoch = epoch

    @property
    def value(self) -> CellValue:
        return _classify_openpyxl(self._cell, self._epoch)

    def set_text(self, text: str):
        self._cell.value = text
        # openpyxl turns strings starting with '=' into formulas
        self._cell.data_type = 's'


class XlsxRow:
    def __init__(self, cells: Dict[int, XLCell], epoch: datetime.datetime):
        self._cells = cells
        self._epoch = epoch
        self.last_cell_index = max(cells) + 1

    def cell(self, index: int) -> Optional[XlsxCell]:
        cell = self._cells.get(index)
        return XlsxCell(cell, self._epoch) if cell is not None else None


class XlsxSheet:
    def __init__(self, ws: Worksheet, epoch: datetime.datetime):
        self.name = ws.title
        self._epoch = epoch
        # ws.cell()/iter_rows() would create cells; read the populated ones only
        rows: Dict[int, Dict[int, XLCell]] = defaultdict(dict)
        for (row, col), cell in getattr(ws, '_cells', {}).items():
            rows[row - 1][col - 1] = cell
        self._rows = dict(rows)
        self.last_row_index = max(self._rows) if self._rows else -1

    def row(self, index: int) -> Optional[XlsxRow]:
        cells = self._rows.get(index)
        return XlsxRow(cells, self._epoch) if cells else None


class XlsxDocument:
    def __init__(self, path: str):
        keep_vba = path.lower().endswith('.xlsm')
        try:
            self._wb = load_workbook(path, keep_vba=keep_vba)
        except Exception as exc:
            raise UnsupportedDocumentError(f"Failed to open workbook: {path} ({exc})") from exc
        self.sheets = [XlsxSheet(ws, self._wb.epoch) for ws in self._wb.worksheets]

    def save(self, path: str):
        _replace_atomically(path, self._wb.save)

    def close(self):
        self._wb.close()


# --------------------------------------------------------------------------
# .xls via xlrd (read) + xlutils/xlwt (write)
# --------------------------------------------------------------------------

def _classify_xlrd(cell: xlrd.sheet.Cell) -> CellValue:
    if cell.ctype == xlrd.XL_CELL_TEXT:
        return Text(cell.value)
    # XL_CELL_DATE is a number with a date format; the value is still the serial
    if cell.ctype in (xlrd.XL_CELL_NUMBER, xlrd.XL_CELL_DATE):
        return Number(float(cell.value))
    return Other()


class XlsCell:
    def __init__(self, doc: XlsDocument, key: Tuple[int, int, int], cell: xlrd.sheet.Cell):
        self._doc = doc
        self._key = key
        self._cell = cell

    @property
    def value(self) -> CellValue:
        edited = self._doc.edits.get(self._key)
        if edited is not None:
            return Text(edited)
        return _classify_xlrd(self._cell)

    def set_text(self, text: str):
        self._doc.edits[self._key] = text


class XlsRow:
    def __init__(self, doc: XlsDocument, sheet_index: int, sheet: xlrd.sheet.Sheet, index: int):
        self._doc = doc
        self._sheet_index = sheet_index
        self._sheet = sheet
        self._index = index
        self.last_cell_index = sheet.row_len(index)

    def cell(self, index: int) -> Optional[XlsCell]:
        cell = self._sheet.cell(self._index, index)
        if cell.ctype == xlrd.XL_CELL_EMPTY:
            return None
        return XlsCell(self._doc, (self._sheet_index, self._index, index), cell)


class XlsSheet:
    def __init__(self, doc: XlsDocument, sheet_index: int, sheet: xlrd.sheet.Sheet):
        self._doc = doc
        self._sheet_index = sheet_index
        self._sheet = sheet
        self.name = sheet.name
        self.last_row_index = sheet.nrows - 1

    def row(self, index: int) -> Optional[XlsRow]:
        if self._sheet.row_len(index) == 0:
            return None
        return XlsRow(self._doc, self._sheet_index, self._sheet, index)


class XlsDocument:
    def __init__(self, path: str):
        try:
            # ragged_rows keeps each row's own length instead of padding to ncols
            self._book = xlrd.open_workbook(path, formatting_info=True, ragged_rows=True)
        except Exception as exc:
            raise UnsupportedDocumentError(f"Failed to open workbook: {path} ({exc})") from exc
        # (sheet index, row, col) -> replacement text
        self.edits: Dict[Tuple[int, int, int], str] = {}
        self.sheets = [
            XlsSheet(self, i, self._book.sheet_by_index(i)) for i in range(self._book.nsheets)
        ]

    def _write(self, out_path: str):
        # XLWTWriter keeps one xlwt style per xlrd XF, so rewritten cells keep their look
        writer = XLWTWriter()
        process(XLRDReader(self._book, os.path.basename(out_path)), writer)
        wb_copy = writer.output[0][1]
        for (sheet_index, row, col), text in self.edits.items():
            xf_index = self._book.sheet_by_index(sheet_index).cell_xf_index(row, col)
            wb_copy.get_sheet(sheet_index).write(row, col, text, writer.style_list[xf_index])
        wb_copy.save(out_path)

    def save(self, path: str):
        _replace_atomically(path, self._write)

    def close(self):
        self._book.release_resources()


def open_document(path: str):
    """Open a spreadsheet by extension; raises UnsupportedDocumentError if it cannot be read."""
    ext = os.path.splitext(path)[1].lower()
    if ext in XLSX_EXTENSIONS:
        return XlsxDocument(path)
    if ext in XLS_EXTENSIONS:
        return XlsDocument(path)
    raise UnsupportedDocumentError(f"Not a spreadsheet file: {path}")
