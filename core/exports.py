"""Excel and PDF downloads for the inventory and cash drawer pages."""
from io import BytesIO
from typing import Iterable, Optional

import pandas as pd
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table as XlTable, TableStyleInfo as XlTableStyleInfo
from reportlab.lib import colors
from reportlab.lib.pagesizes import landscape, letter
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Table, TableStyle

from core.aggregation import is_low
from core.constants import CATEGORY_LABELS
from core.models import CashSession, InventoryItem


def inventory_export_frame(items: Iterable[InventoryItem]) -> pd.DataFrame:
    rows = [
        {
            "Name": item.name,
            "Category": CATEGORY_LABELS.get(item.category, item.category),
            "Unit": item.unit,
            "Quantity": item.quantity,
            "Reorder At": item.reorder_threshold,
            "Low": "Yes" if is_low(item) else "",
            "Notes": item.notes or "",
        }
        for item in items
    ]
    return pd.DataFrame(
        rows,
        columns=["Name", "Category", "Unit", "Quantity", "Reorder At", "Low", "Notes"],
    )


def cash_sessions_export_frame(sessions: Iterable[CashSession]) -> pd.DataFrame:
    rows = [
        {
            "Date": s.date,
            "Opening": float(s.opening_total),
            "Closing": float(s.closing_total),
            "Stall Fee": float(s.stall_fee),
            "Payouts": float(s.payouts),
            "Net": float(s.net_cash),
            "Notes": s.notes or "",
        }
        for s in sessions
    ]
    return pd.DataFrame(
        rows,
        columns=["Date", "Opening", "Closing", "Stall Fee", "Payouts", "Net", "Notes"],
    )


def to_excel_bytes(df: pd.DataFrame, sheet_name: str, table_name: str) -> bytes:
    """Single-sheet workbook with the data formatted as an Excel table."""
    buf = BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
        ws = writer.sheets[sheet_name]
        max_col = len(df.columns)
        # Excel tables need at least one data row
        max_row = max(len(df), 1) + 1
        if max_col:
            last_col = get_column_letter(max_col)
            table = XlTable(displayName=table_name, ref=f"A1:{last_col}{max_row}")
            table.tableStyleInfo = XlTableStyleInfo(
                name="TableStyleMedium9",
                showFirstColumn=False,
                showLastColumn=False,
                showRowStripes=True,
                showColumnStripes=False,
            )
            ws.add_table(table)
            for idx, col_name in enumerate(df.columns, start=1):
                ws.column_dimensions[get_column_letter(idx)].width = max(12, len(str(col_name)) + 2)
    return buf.getvalue()


def to_pdf_bytes(df: pd.DataFrame, title: Optional[str] = None) -> bytes:
    buf = BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=landscape(letter))
    story = []
    if title:
        story.append(Paragraph(title, getSampleStyleSheet()["Heading2"]))
    data = [list(df.columns)] + df.fillna("").astype(str).values.tolist()
    table = Table(data)
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
                ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
                ("FONTSIZE", (0, 0), (-1, -1), 8),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ]
        )
    )
    story.append(table)
    doc.build(story)
    return buf.getvalue()
