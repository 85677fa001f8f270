"""Inventory page: filters, add, inline edit, quick adjustments, export."""
import html

import streamlit as st

from core.aggregation import is_low, low_stock_items
from core.constants import CATEGORY_LABELS, INVENTORY_CATEGORIES
from core.exports import inventory_export_frame, to_excel_bytes, to_pdf_bytes
from core.forms import clean_optional, missing_required, parse_non_negative_int
from core.services import (
    StoreError,
    add_inventory_item,
    adjust_quantity,
    delete_inventory_item,
    get_inventory_items,
    update_inventory_item,
)
from ui.components import confirm_delete, run_store_call, show_flash, table_view

VIEW_KEY = "view_inventory"
CATEGORY_VALUES = [value for value, _ in INVENTORY_CATEGORIES]
REQUIRED = {"name": "Name", "unit": "Unit"}


def _category_label(value):
    return CATEGORY_LABELS.get(value, value)


def _render_add_form(conn, view):
    with st.expander("➕ Add item", expanded=not view.rows):
        with st.form("add_item_form", clear_on_submit=True):
            c1, c2, c3 = st.columns([3, 2, 2])
            name = c1.text_input("Name *", placeholder="e.g. Oat milk")
            category = c2.selectbox("Category", CATEGORY_VALUES, format_func=_category_label)
            unit = c3.text_input("Unit *", placeholder="e.g. cartons, lbs, sleeves")
            c4, c5 = st.columns(2)
            quantity = c4.text_input("Quantity", placeholder="0")
            threshold = c5.text_input("Reorder at", placeholder="0 = no alert")
            notes = st.text_input("Notes")
            submitted = st.form_submit_button("✅ Add item")

    if not submitted:
        return
    missing = missing_required({"name": name, "unit": unit}, REQUIRED)
    if missing:
        st.warning(f"Please fill in: {', '.join(missing)}")
        return
    ok, item = run_store_call(
        lambda: add_inventory_item(
            conn,
            {
                "name": name.strip(),
                "category": category,
                "unit": unit.strip(),
                "quantity": parse_non_negative_int(quantity),
                "reorder_threshold": parse_non_negative_int(threshold),
                "notes": clean_optional(notes),
            },
        ),
        "Error adding item",
    )
    if ok:
        view.append(item)
        st.toast(f"Added {item.name}", icon="\U0001F4E6")
        st.rerun()


def _render_edit_row(conn, view, item):
    with st.form(f"edit_item_{item.id}"):
        c1, c2, c3 = st.columns([3, 2, 2])
        name = c1.text_input("Name *", value=item.name)
        category = c2.selectbox(
            "Category",
            CATEGORY_VALUES,
            index=CATEGORY_VALUES.index(item.category) if item.category in CATEGORY_VALUES else len(CATEGORY_VALUES) - 1,
            format_func=_category_label,
        )
        unit = c3.text_input("Unit *", value=item.unit)
        c4, c5 = st.columns(2)
        quantity = c4.text_input("Quantity", value=str(item.quantity))
        threshold = c5.text_input("Reorder at", value=str(item.reorder_threshold))
        notes = st.text_input("Notes", value=item.notes or "")
        save_col, cancel_col = st.columns(2)
        save = save_col.form_submit_button("\U0001F4BE Save")
        cancel = cancel_col.form_submit_button("Cancel")

    if cancel:
        view.cancel_edit()
        st.rerun()
    if not save:
        return
    missing = missing_required({"name": name, "unit": unit}, REQUIRED)
    if missing:
        st.warning(f"Please fill in: {', '.join(missing)}")
        return
    patch = {
        "name": name.strip(),
        "category": category,
        "unit": unit.strip(),
        "quantity": parse_non_negative_int(quantity),
        "reorder_threshold": parse_non_negative_int(threshold),
        "notes": clean_optional(notes),
    }
    ok, _ = run_store_call(lambda: update_inventory_item(conn, item.id, patch), "Error saving changes")
    if ok:
        view.merge(item.id, **patch)
        view.cancel_edit()
        st.rerun()


def _render_row(conn, view, item):
    cols = st.columns([3, 2, 2, 1, 1, 1, 2])
    low = is_low(item)
    name = f"<span class='low-stock'>{html.escape(item.name)} · low</span>" if low else html.escape(item.name)
    cols[0].markdown(name, unsafe_allow_html=True)
    if item.notes:
        cols[0].caption(item.notes)
    cols[1].write(_category_label(item.category))
    cols[2].write(f"{item.quantity} {item.unit}".strip())
    if cols[3].button("−", key=f"qty_dec_{item.id}", disabled=item.quantity <= 0):
        _adjust(conn, view, item, -1)
    if cols[4].button("+", key=f"qty_inc_{item.id}"):
        _adjust(conn, view, item, 1)
    cols[5].caption(f"Reorder at {item.reorder_threshold}" if item.reorder_threshold else "No alert")
    with cols[6]:
        if st.button("✏️ Edit", key=f"item_edit_{item.id}"):
            view.start_edit(item.id)
            st.rerun()
        if confirm_delete(view, item.id, "Delete this item from inventory?", key="item"):
            ok, _ = run_store_call(lambda: delete_inventory_item(conn, item.id), "Error deleting item")
            if ok:
                view.remove(item.id)
                st.rerun()


def _adjust(conn, view, item, delta):
    try:
        new_qty = adjust_quantity(conn, item, delta)
    except StoreError as e:
        st.error(f"Error updating quantity: {e}")
        return
    view.merge(item.id, quantity=new_qty)
    st.rerun()


def render(conn, ctx):
    """Render the inventory page."""
    st.header("\U0001F5C2\ufe0f Inventory")
    show_flash()
    view = table_view(VIEW_KEY, lambda: get_inventory_items(conn))
    if view.error:
        st.error(view.error)

    low_count = len(low_stock_items(view.rows))
    caption = "Track beans, milk, syrups, cups, and more."
    if low_count:
        caption += f" **{low_count} item{'s' if low_count != 1 else ''} low.**"
    st.markdown(caption)

    f1, f2 = st.columns([2, 1])
    category_filter = f1.selectbox(
        "Category",
        ["all"] + CATEGORY_VALUES,
        format_func=lambda v: "All" if v == "all" else _category_label(v),
    )
    show_low_only = f2.checkbox("Show low only")

    _render_add_form(conn, view)

    items = [
        item for item in view.rows
        if (category_filter == "all" or item.category == category_filter)
        and (not show_low_only or is_low(item))
    ]
    if not items:
        st.info("No items match these filters." if view.rows else "No inventory items yet.")
        return

    st.markdown("---")
    for item in items:
        if view.is_editing(item.id):
            _render_edit_row(conn, view, item)
        else:
            _render_row(conn, view, item)

    st.divider()
    st.subheader("Export")
    export_df = inventory_export_frame(items)
    c1, c2 = st.columns(2)
    c1.download_button(
        "Export to Excel",
        data=to_excel_bytes(export_df, "inventory", "InventoryExport"),
        file_name="inventory_export.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )
    c2.download_button(
        "Export to PDF",
        data=to_pdf_bytes(export_df, title="Inventory"),
        file_name="inventory_export.pdf",
        mime="application/pdf",
    )
