import argparse
import os
import re
import sys

from .address import OutOfRangeError
from .scanner import search_file
from .types import SearchConfig, SearchMode
from .walker import walk_spreadsheets


def parse_args(argv=None):
    p = argparse.ArgumentParser(prog='xlgrep', description='Grep (and optionally replace) cell values in Excel files under a directory')
    p.add_argument('search_dir', help='Directory searched recursively for .xls/.xlsx/.xlsm files')
    p.add_argument('search_word', help='Text to search for')
    p.add_argument('mode', choices=[m.value for m in SearchMode], help='FUZZY: substring match, STRICTLY: exact match')
    p.add_argument('replace_word', nargs='?', default=None, help='Replace matched content and overwrite the file')
    p.add_argument('--verbose', '-v', action='store_true', help='Report files that could not be opened on stderr')
    return p, p.parse_args(argv)


def build_config(parser: argparse.ArgumentParser, args) -> SearchConfig:
    try:
        return SearchConfig(
            word=args.search_word,
            mode=SearchMode(args.mode),
            replacement=args.replace_word,
            verbose=args.verbose,
        )
    except re.error as exc:
        parser.error(f"search word is not a valid replacement pattern: {exc}")


def print_banner(root: str, cfg: SearchConfig):
    print('Running grep search with the following settings.')
    print(f'Search directory: {root}')
    print(f'Search word: {cfg.word}')
    print(f'Search mode: {cfg.mode.value}')
    if cfg.replacing:
        print(f'Replace word: {cfg.replacement}')


def search_dir(root: str, cfg: SearchConfig) -> int:
    """Search every spreadsheet under `root`; returns the number of matches."""
    hits = 0
    for directory, files in walk_spreadsheets(root):
        for path in files:
            hits += len(search_file(path, cfg))
        print(f'Search completed: {directory}')
    return hits


def main(argv=None) -> int:
    parser, args = parse_args(argv)
    cfg = build_config(parser, args)

    root = os.path.abspath(args.search_dir)
    print_banner(root, cfg)

    try:
        search_dir(root, cfg)
    except OutOfRangeError as exc:
        print(f'Error: {exc}', file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
