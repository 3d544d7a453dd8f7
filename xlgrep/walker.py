import os
from typing import Iterator, List, Tuple

from .excel_io import SPREADSHEET_EXTENSIONS


def is_hidden(name: str) -> bool:
    return name.startswith('.')


def is_spreadsheet(name: str) -> bool:
    return os.path.splitext(name)[1].lower() in SPREADSHEET_EXTENSIONS


def walk_spreadsheets(root: str) -> Iterator[Tuple[str, List[str]]]:
    """Yield (directory, spreadsheet paths) depth-first, skipping hidden entries.

    Subdirectories are walked as they are met in the listing, so a directory's
    own files are yielded after everything beneath it. A directory that cannot
    be listed yields nothing.
    """
    try:
        with os.scandir(root) as it:
            entries = list(it)
    except OSError:
        return

    files: List[str] = []
    for entry in entries:
        if is_hidden(entry.name):
            continue
        try:
            if entry.is_file() and is_spreadsheet(entry.name):
                files.append(entry.path)
            elif entry.is_dir(follow_symlinks=False):
                yield from walk_spreadsheets(entry.path)
        except OSError:
            continue
    yield root, files
