import sys
from typing import Callable, List, Tuple

from .address import cell_address
from .excel_io import UnsupportedDocumentError, open_document
from .patterns import evaluate
from .types import MatchRecord, SearchConfig


Emit = Callable[[str], None]


def _print_block(text: str):
    print(text, end='')


def scan_sheet(sheet, file_path: str, config: SearchConfig) -> Tuple[List[MatchRecord], str]:
    """Search one sheet row by row, replacing matched cells in place when configured.

    Returns the records in row-then-column order together with their text block:
    one tab-separated line per record, each terminated by a newline.
    """
    records: List[MatchRecord] = []
    lines: List[str] = []
    for row_index in range(sheet.last_row_index + 1):
        row = sheet.row(row_index)
        if row is None:
            continue
        for col_index in range(row.last_cell_index):
            cell = row.cell(col_index)
            if cell is None:
                continue
            # Decide against the current value first, then mutate
            outcome = evaluate(config, cell.value)
            if outcome is None:
                continue
            record = MatchRecord(
                file_path=file_path,
                sheet_name=sheet.name,
                address=cell_address(row_index, col_index),
                value=outcome.value,
            )
            records.append(record)
            lines.append(record.to_line() + '\n')
            if outcome.replacement is not None:
                cell.set_text(outcome.replacement)
    return records, ''.join(lines)


def process_document(document, file_path: str, config: SearchConfig, emit: Emit = _print_block) -> Tuple[List[MatchRecord], str]:
    """Scan every sheet of an opened document, flushing each sheet's block as it completes.

    The document is written back to `file_path` when replacing and at least one cell matched.
    """
    records: List[MatchRecord] = []
    blocks: List[str] = []
    for sheet in document.sheets:
        sheet_records, text = scan_sheet(sheet, file_path, config)
        if text:
            emit(text)
            blocks.append(text)
        records.extend(sheet_records)

    if config.replacing and records:
        document.save(file_path)
    return records, ''.join(blocks)


def search_file(path: str, config: SearchConfig, emit: Emit = _print_block) -> List[MatchRecord]:
    """Open, search and (optionally) rewrite one spreadsheet; unreadable files are skipped."""
    try:
        document = open_document(path)
    except UnsupportedDocumentError as exc:
        if config.verbose:
            print(f"Skipped: {exc}", file=sys.stderr)
        return []
    try:
        records, _ = process_document(document, path, config, emit)
    finally:
        document.close()
    return records
