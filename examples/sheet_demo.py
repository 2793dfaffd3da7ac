"""
Demo script showing the sheet editing core.

This script demonstrates:
1. Entering values and formulas
2. Filtering and grouping the view
3. Sorting rows with a header click
4. Rendering a viewport window
5. Saving a document as JSON and the sheet as CSV
"""

import logging

from sheetcore import Address, Document, Viewport
from sheetcore.utils import to_json, visualize, write_csv

logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

doc = Document()
rows = [
    ["Alice", "eng", "90000"],
    ["Bob", "sales", "65000"],
    ["Charlie", "eng", "120000"],
    ["Diana", "", "70000"],
    ["Eve", "sales", "80000"],
]
doc.import_dense(rows)
doc.edit_cell(Address.from_a1("D1"), "=SUM(C1:C5)")
doc.edit_cell(Address.from_a1("E1"), "=D1/5")

# Example 1: Values and formulas
print("=" * 60)
print("Example 1: Values and formulas")
print("=" * 60)
sheet = doc.active_sheet
print("\nTotal salary (D1):", sheet.get(Address.from_a1("D1")))
print("Average salary (E1):", sheet.get(Address.from_a1("E1")))
print()
print(visualize(sheet))

# Example 2: Filter and group
print("\n" + "=" * 60)
print("Example 2: Filter by salary text, group by department")
print("=" * 60)
doc.set_filter(2, "0000")
doc.set_grouping(1)
print()
print(visualize(doc.active_sheet))
doc.clear_filters()
doc.set_grouping(None)

# Example 3: Sort
print("\n" + "=" * 60)
print("Example 3: Header clicks on the salary column")
print("=" * 60)
for _ in range(2):
    order = doc.toggle_sort(2)
    print(f"\nSort {order.value}:")
    print(visualize(doc.active_sheet))

# Example 4: Viewport
print("\n" + "=" * 60)
print("Example 4: Viewport window")
print("=" * 60)
window = doc.render_window(Viewport(top=0, height=100, left=0, width=400))
print(f"\nItems {window.item_range}, columns {window.column_range}")
for row in window.rows:
    print(row.top, [cell.display_text for cell in row.cells])

# Example 5: Export
print("\n" + "=" * 60)
print("Example 5: Export")
print("=" * 60)
print("\nCSV:")
print(write_csv(doc.active_sheet))
print("JSON (first 200 chars):")
print(to_json(doc)[:200])
