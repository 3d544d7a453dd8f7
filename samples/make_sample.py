import os

import xlwt
from openpyxl import Workbook


def make_xlsx(path: str, cells, title: str = 'Sheet1'):
    """cells: iterable of (row, col, value) with zero-based positions."""
    wb = Workbook()
    ws = wb.active
    ws.title = title
    for row, col, value in cells:
        ws.cell(row=row + 1, column=col + 1, value=value)
    wb.save(path)


def make_xls(path: str, cells, title: str = 'Sheet1'):
    wb = xlwt.Workbook()
    ws = wb.add_sheet(title)
    for row, col, value in cells:
        ws.write(row, col, value)
    wb.save(path)


def main(out_dir: str):
    os.makedirs(os.path.join(out_dir, 'nested'), exist_ok=True)
    os.makedirs(os.path.join(out_dir, '.hidden'), exist_ok=True)

    make_xlsx(os.path.join(out_dir, 'a.xlsx'), [(0, 0, 'foo'), (1, 1, 'foobar'), (2, 0, 'bar')])
    make_xlsx(os.path.join(out_dir, '.ignore.xlsx'), [(0, 0, 'foo')])
    make_xlsx(os.path.join(out_dir, '.hidden', 'inside.xlsx'), [(0, 0, 'foo')])
    make_xls(os.path.join(out_dir, 'nested', 'legacy.xls'), [(0, 2, 'food'), (3, 1, 123.0)], title='Legacy')
    with open(os.path.join(out_dir, 'broken.xlsx'), 'wb') as f:
        f.write(b'this is not a workbook')
    print(f"Sample tree written to {out_dir}")


if __name__ == '__main__':
    main(os.path.join(os.path.dirname(__file__), 'tree'))
