"""Excel and PDF renderings of the sales, returns and order sheet reports."""

from decimal import Decimal
from io import BytesIO
from typing import Mapping, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle


__all__ = [
    "generate_sales_report_workbook",
    "generate_sales_report_pdf",
    "generate_returns_report_workbook",
    "generate_order_sheet_workbook",
]


HEADER_FILL = PatternFill(start_color="305496", end_color="305496", fill_type="solid")
HEADER_FONT = Font(color="FFFFFF", bold=True)
TOTAL_FILL = PatternFill(start_color="F2F2F2", end_color="F2F2F2", fill_type="solid")
CURRENCY_NUMBER_FORMAT = "#,##0.00"

SALES_HEADER = [
    "#", "Date", "Bill Number", "Party", "GST", "Subtotal", "Discount",
    "Tax", "Total", "Paid", "Balance", "Status",
]
SALES_MONEY_COLUMNS = range(5, 11)


def _to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _format_currency(value) -> str:
    return f"{_to_decimal(value):,.2f}"


def _auto_size_columns(worksheet) -> None:
    """Adjust column widths to fit their content nicely."""

    for column_cells in worksheet.columns:
        column_letter = get_column_letter(column_cells[0].column)
        max_length = 0
        for cell in column_cells:
            if cell.value is None:
                continue
            max_length = max(max_length, len(str(cell.value)))
        worksheet.column_dimensions[column_letter].width = min(max_length + 2, 45)


def _start_sheet(workbook: Workbook, title: str, subtitle: str, header: Sequence[str]):
    worksheet = workbook.active
    worksheet.title = title[:31]

    worksheet["A1"] = title
    worksheet["A1"].font = Font(size=14, bold=True)
    worksheet["A2"] = subtitle
    worksheet["A2"].font = Font(italic=True)
    worksheet.append([])

    worksheet.append(list(header))
    for cell in worksheet[worksheet.max_row]:
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal="center", vertical="center")
    return worksheet


def _save(workbook: Workbook) -> bytes:
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def _sale_row(index: int, sale) -> list:
    return [
        index,
        sale.transaction_date.strftime("%Y-%m-%d"),
        sale.bill_number,
        sale.seller_party.party_name,
        "Yes" if sale.with_gst else "No",
        _to_decimal(sale.subtotal),
        _to_decimal(sale.discount),
        _to_decimal(sale.tax_amount),
        _to_decimal(sale.total_amount),
        _to_decimal(sale.paid_amount),
        _to_decimal(sale.balance_amount),
        sale.get_payment_status_display(),
    ]


def generate_sales_report_workbook(
    sales: Sequence, summary: Mapping, start_date: str, end_date: str
) -> bytes:
    """Return an Excel workbook representing the sales report."""

    workbook = Workbook()
    worksheet = _start_sheet(workbook, "Sales Report", f"Period: {start_date} to {end_date}", SALES_HEADER)

    for index, sale in enumerate(sales, start=1):
        row_values = _sale_row(index, sale)
        for column in SALES_MONEY_COLUMNS:
            row_values[column] = float(row_values[column])
        worksheet.append(row_values)

        row = worksheet[worksheet.max_row]
        row[0].alignment = Alignment(horizontal="center")
        row[1].alignment = Alignment(horizontal="center")
        for column in SALES_MONEY_COLUMNS:
            row[column].number_format = CURRENCY_NUMBER_FORMAT
            row[column].alignment = Alignment(horizontal="right")

    worksheet.append([])
    summary_rows = [
        ("Total Transactions", summary.get("total_transactions", len(sales)), False),
        ("Total Sales", summary.get("total_sales"), True),
        ("Total Tax", summary.get("total_tax"), True),
        ("Total Discount", summary.get("total_discount"), True),
        ("Total Paid", summary.get("total_paid"), True),
        ("Total Balance", summary.get("total_balance"), True),
    ]
    if summary.get("total_profit") is not None:
        summary_rows.append(("Total Profit", summary["total_profit"], True))

    for label, value, is_money in summary_rows:
        worksheet.append(["", "", "", label, "", float(_to_decimal(value)) if is_money else value])
        total_row = worksheet[worksheet.max_row]
        for cell in (total_row[3], total_row[5]):
            cell.font = Font(bold=True)
            cell.fill = TOTAL_FILL
        if is_money:
            total_row[5].number_format = CURRENCY_NUMBER_FORMAT
        total_row[5].alignment = Alignment(horizontal="right")

    _auto_size_columns(worksheet)
    return _save(workbook)


def generate_sales_report_pdf(
    sales: Sequence, summary: Mapping, start_date: str, end_date: str
) -> bytes:
    """Return a PDF document representing the sales report."""

    buffer = BytesIO()
    document = SimpleDocTemplate(
        buffer,
        pagesize=landscape(A4),
        leftMargin=12 * mm,
        rightMargin=12 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
        title="Sales Report",
    )

    styles = getSampleStyleSheet()
    story = [
        Paragraph("Sales Report", styles["Title"]),
        Spacer(1, 4 * mm),
        Paragraph(f"Period: {start_date} to {end_date}", styles["Normal"]),
        Spacer(1, 6 * mm),
    ]

    table_data: list[list[str]] = [list(SALES_HEADER)]
    for index, sale in enumerate(sales, start=1):
        row_values = _sale_row(index, sale)
        for column in SALES_MONEY_COLUMNS:
            row_values[column] = _format_currency(row_values[column])
        row_values[0] = str(index)
        table_data.append(row_values)

    table_data.append([
        "", "", "", "Totals", "",
        "",
        _format_currency(summary.get("total_discount")),
        _format_currency(summary.get("total_tax")),
        _format_currency(summary.get("total_sales")),
        _format_currency(summary.get("total_paid")),
        _format_currency(summary.get("total_balance")),
        "",
    ])

    table = Table(
        table_data,
        colWidths=[10 * mm, 22 * mm, 42 * mm, 48 * mm, 12 * mm, 22 * mm,
                   20 * mm, 20 * mm, 22 * mm, 22 * mm, 22 * mm, 20 * mm],
        repeatRows=1,
    )
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#305496")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("ALIGN", (0, 0), (0, -1), "CENTER"),
        ("ALIGN", (1, 1), (1, -2), "CENTER"),
        ("ALIGN", (5, 1), (10, -1), "RIGHT"),
        ("FONTNAME", (3, -1), (-1, -1), "Helvetica-Bold"),
        ("BACKGROUND", (0, -1), (-1, -1), colors.HexColor("#F2F2F2")),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#CCCCCC")),
        ("TOPPADDING", (0, 0), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
    ]))
    story.append(table)

    story.append(Spacer(1, 6 * mm))
    story.append(Paragraph(
        f"Transactions: {summary.get('total_transactions', len(sales))} "
        f"(with GST: {summary.get('with_gst_count', 0)}, without GST: {summary.get('without_gst_count', 0)})",
        styles["Normal"],
    ))
    if summary.get("total_profit") is not None:
        story.append(Paragraph(f"Total Profit: {_format_currency(summary['total_profit'])}", styles["Normal"]))

    document.build(story)
    pdf = buffer.getvalue()
    buffer.close()
    return pdf


def generate_returns_report_workbook(returns: Sequence, start_date: str, end_date: str) -> bytes:
    """Return an Excel workbook listing the returns in the period."""

    workbook = Workbook()
    header = ["#", "Date", "Party Type", "Party", "Item", "Quantity", "Amount", "Ledger Adjusted", "Reason"]
    worksheet = _start_sheet(workbook, "Returns Report", f"Period: {start_date} to {end_date}", header)

    total_quantity = 0
    total_amount = Decimal("0")

    for index, entry in enumerate(returns, start=1):
        party = entry.party
        amount = _to_decimal(entry.return_amount)
        total_quantity += entry.quantity
        total_amount += amount

        worksheet.append([
            index,
            entry.return_date.strftime("%Y-%m-%d"),
            entry.get_party_type_display(),
            party.party_name if party else "",
            entry.item.product_name,
            entry.quantity,
            float(amount),
            "Yes" if entry.balance_adjusted else "No",
            entry.reason or "",
        ])
        row = worksheet[worksheet.max_row]
        row[0].alignment = Alignment(horizontal="center")
        row[6].number_format = CURRENCY_NUMBER_FORMAT

    worksheet.append([])
    worksheet.append(["", "", "", "", "Totals", total_quantity, float(total_amount)])
    total_row = worksheet[worksheet.max_row]
    for cell in (total_row[4], total_row[5], total_row[6]):
        cell.font = Font(bold=True)
        cell.fill = TOTAL_FILL
    total_row[6].number_format = CURRENCY_NUMBER_FORMAT

    _auto_size_columns(worksheet)
    return _save(workbook)


def generate_order_sheet_workbook(entries: Sequence) -> bytes:
    """Return an Excel workbook of the items waiting to be reordered."""

    workbook = Workbook()
    header = [
        "#", "Product Name", "Product Code", "Brand", "Rack Number",
        "Current Stock", "Alert Quantity", "Required Quantity", "Status",
    ]
    worksheet = _start_sheet(workbook, "Order Sheet", f"Items to reorder: {len(entries)}", header)

    for index, entry in enumerate(entries, start=1):
        item = entry.item
        worksheet.append([
            index,
            item.product_name,
            item.product_code or "",
            item.brand or "",
            item.rack_number or "",
            entry.current_quantity,
            item.alert_quantity,
            entry.required_quantity,
            entry.get_status_display(),
        ])
        worksheet[worksheet.max_row][0].alignment = Alignment(horizontal="center")

    _auto_size_columns(worksheet)
    return _save(workbook)
