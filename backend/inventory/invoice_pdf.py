"""Utilities for generating PDF tax invoices."""

from decimal import Decimal
from io import BytesIO
from typing import IO

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.platypus import (Image, Paragraph, SimpleDocTemplate, Spacer,
                                Table, TableStyle)

from .models import CompanyInfo, SaleTransaction

FONT_REGULAR = 'Helvetica'
FONT_BOLD = 'Helvetica-Bold'
CURRENCY_SYMBOL = 'Rs. '
TWO_PLACES = Decimal('0.01')


def _money(value) -> str:
    return f"{CURRENCY_SYMBOL}{Decimal(value or 0):,.2f}"


def _build_image_flowable(image_field, width, height, **image_kwargs):
    """Return a ReportLab Image flowable for the provided Django ImageField."""
    if not image_field:
        return ''

    try:
        image_field.open()
        try:
            image_bytes = image_field.read()
        finally:
            image_field.close()
    except (OSError, ValueError):
        return ''

    if not image_bytes:
        return ''
    return Image(ImageReader(BytesIO(image_bytes)), width=width, height=height, **image_kwargs)


def split_gst(tax_amount) -> tuple[Decimal, Decimal]:
    """Split an intra-state GST amount into CGST and SGST halves.

    The halves always add back up to ``tax_amount``; any odd paisa goes to SGST.
    """
    tax_amount = Decimal(tax_amount or 0)
    cgst = (tax_amount / 2).quantize(TWO_PLACES)
    return cgst, tax_amount - cgst


def generate_invoice_pdf(sale: SaleTransaction) -> IO[bytes]:
    """Generate a GST-aware PDF invoice for the given ``SaleTransaction``."""

    buffer = BytesIO()

    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=15 * mm,
        rightMargin=15 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
        title=f"Invoice {sale.bill_number}",
        author="Stockbook",
    )

    company = CompanyInfo.load()
    party = sale.seller_party

    styles = getSampleStyleSheet()
    styles['Normal'].fontName = FONT_REGULAR
    styles.add(ParagraphStyle(name='CompanyName', fontSize=16, leading=20, fontName=FONT_BOLD))
    styles.add(ParagraphStyle(name='CompanyInfo', fontSize=9, fontName=FONT_REGULAR))
    styles.add(ParagraphStyle(name='InvoiceTitle', fontSize=14, leading=18, fontName=FONT_BOLD, alignment=TA_RIGHT))
    styles.add(ParagraphStyle(name='InvoiceInfo', fontSize=9, fontName=FONT_REGULAR, alignment=TA_RIGHT))
    styles.add(ParagraphStyle(name='BillTo', fontSize=10, fontName=FONT_BOLD))
    styles.add(ParagraphStyle(name='TableHead', fontSize=8, fontName=FONT_BOLD, alignment=TA_CENTER, textColor=colors.whitesmoke))
    styles.add(ParagraphStyle(name='TableCell', fontSize=8, fontName=FONT_REGULAR))
    styles.add(ParagraphStyle(name='TableCellRight', fontSize=8, fontName=FONT_REGULAR, alignment=TA_RIGHT))
    styles.add(ParagraphStyle(name='TotalLabel', fontSize=9, fontName=FONT_BOLD, alignment=TA_RIGHT))
    styles.add(ParagraphStyle(name='TotalValue', fontSize=9, fontName=FONT_REGULAR, alignment=TA_RIGHT))
    styles.add(ParagraphStyle(name='GrandTotalLabel', fontSize=11, fontName=FONT_BOLD, alignment=TA_RIGHT))

    elements = []

    # --- 1. Header ---
    company_rows = []
    company_logo = _build_image_flowable(getattr(company, 'logo', None), width=35 * mm, height=18 * mm, hAlign='LEFT')
    if company_logo:
        company_rows.append([company_logo])
    company_rows.extend([
        [Paragraph(company.name, styles['CompanyName'])],
        [Paragraph(company.address or '', styles['CompanyInfo'])],
        [Paragraph(company.location or '', styles['CompanyInfo'])],
        [Paragraph(f"Phone: {company.phone}" if company.phone else '', styles['CompanyInfo'])],
        [Paragraph(f"GSTIN: {company.gst_number}" if company.gst_number else '', styles['CompanyInfo'])],
    ])
    company_table = Table(company_rows, colWidths=[95 * mm])
    company_table.setStyle(TableStyle([
        ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 1),
    ]))

    title = 'TAX INVOICE' if sale.with_gst else 'INVOICE'
    invoice_info_table = Table([
        [Paragraph(title, styles['InvoiceTitle'])],
        [Paragraph(f"Bill No: {sale.bill_number}", styles['InvoiceInfo'])],
        [Paragraph(f"Date: {sale.transaction_date:%d %b, %Y}", styles['InvoiceInfo'])],
        [Paragraph(f"Status: {sale.get_payment_status_display()}", styles['InvoiceInfo'])],
    ], colWidths=[85 * mm])
    invoice_info_table.setStyle(TableStyle([('VALIGN', (0, 0), (-1, -1), 'TOP')]))

    header_table = Table([[company_table, invoice_info_table]], colWidths=[95 * mm, 85 * mm])
    header_table.setStyle(TableStyle([('VALIGN', (0, 0), (-1, -1), 'TOP')]))
    elements.append(header_table)
    elements.append(Spacer(1, 8 * mm))

    # --- 2. Bill To ---
    bill_to_rows = [
        [Paragraph("BILL TO", styles['BillTo'])],
        [Paragraph(party.party_name, styles['Normal'])],
        [Paragraph(party.address or '', styles['Normal'])],
    ]
    if party.mobile_number:
        bill_to_rows.append([Paragraph(f"Mobile: {party.mobile_number}", styles['Normal'])])
    if party.gst_number:
        bill_to_rows.append([Paragraph(f"GSTIN: {party.gst_number}", styles['Normal'])])
    bill_to_table = Table(bill_to_rows, colWidths=[180 * mm])
    bill_to_table.setStyle(TableStyle([('BOTTOMPADDING', (0, 0), (-1, -1), 1)]))
    elements.append(bill_to_table)
    elements.append(Spacer(1, 6 * mm))

    # --- 3. Items ---
    if sale.with_gst:
        head = ['#', 'Item', 'HSN', 'Qty', 'Rate', 'Disc.', 'Taxable', 'GST %', 'CGST', 'SGST', 'Amount']
        col_widths = [8, 38, 16, 10, 18, 14, 20, 12, 14, 14, 16]
    else:
        head = ['#', 'Item', 'HSN', 'Qty', 'Rate', 'Discount', 'Amount']
        col_widths = [10, 70, 20, 15, 22, 20, 23]

    data = [[Paragraph(label, styles['TableHead']) for label in head]]
    for index, line in enumerate(sale.items.select_related('item'), start=1):
        row = [
            Paragraph(str(index), styles['TableCell']),
            Paragraph(line.item.product_name, styles['TableCell']),
            Paragraph(line.item.hsn_number or '', styles['TableCell']),
            Paragraph(str(line.quantity), styles['TableCellRight']),
            Paragraph(f"{line.sale_rate:,.2f}", styles['TableCellRight']),
            Paragraph(f"{line.discount:,.2f}", styles['TableCellRight']),
        ]
        if sale.with_gst:
            cgst, sgst = split_gst(line.tax_amount)
            row.extend([
                Paragraph(f"{line.taxable_value:,.2f}", styles['TableCellRight']),
                Paragraph(f"{line.tax_rate:.0f}%", styles['TableCellRight']),
                Paragraph(f"{cgst:,.2f}", styles['TableCellRight']),
                Paragraph(f"{sgst:,.2f}", styles['TableCellRight']),
            ])
        row.append(Paragraph(f"{line.total_amount:,.2f}", styles['TableCellRight']))
        data.append(row)

    items_table = Table(data, colWidths=[width * mm for width in col_widths], repeatRows=1)
    items_table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#4F4F4F')),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ('LINEBELOW', (0, 0), (-1, 0), 1, colors.black),
        ('LINEBELOW', (0, 1), (-1, -1), 0.25, colors.HexColor('#CCCCCC')),
        ('TOPPADDING', (0, 0), (-1, 0), 2 * mm),
        ('BOTTOMPADDING', (0, 0), (-1, 0), 2 * mm),
    ]))
    elements.append(items_table)
    elements.append(Spacer(1, 4 * mm))

    # --- 4. Totals ---
    totals = []
    if sale.with_gst:
        cgst_total, sgst_total = split_gst(sale.tax_amount)
        totals.extend([
            ('Taxable Amount:', sale.subtotal),
            ('CGST:', cgst_total),
            ('SGST:', sgst_total),
        ])
    else:
        totals.append(('Subtotal:', sale.subtotal))
    if sale.discount:
        totals.append(('Discount Given:', sale.discount))
    totals.append(('Invoice Amount:', sale.invoice_amount))
    if sale.previous_balance_paid:
        totals.append(('Previous Balance Paid:', sale.previous_balance_paid))
    totals.extend([
        ('Grand Total:', sale.total_amount),
        ('Paid Amount:', sale.paid_amount),
    ])

    totals_data = [
        [Paragraph(label, styles['TotalLabel']), Paragraph(_money(amount), styles['TotalValue'])]
        for label, amount in totals
    ]
    totals_data.append([
        Paragraph('Balance Due:', styles['GrandTotalLabel']),
        Paragraph(_money(sale.balance_amount), styles['GrandTotalLabel']),
    ])

    totals_table = Table(totals_data, colWidths=[45 * mm, 35 * mm])
    totals_table.setStyle(TableStyle([
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ('LEFTPADDING', (0, 0), (-1, -1), 0),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 1),
        ('LINEABOVE', (0, -1), (-1, -1), 1, colors.black),
        ('TOPPADDING', (0, -1), (-1, -1), 3),
    ]))
    wrapper_table = Table([[totals_table]], colWidths=[180 * mm], style=[('ALIGN', (0, 0), (-1, -1), 'RIGHT')])
    elements.append(wrapper_table)
    elements.append(Spacer(1, 15 * mm))

    # --- 5. Footer ---
    elements.append(Paragraph("Thank you for your business!", styles['Normal']))
    if sale.with_gst:
        elements.append(Spacer(1, 3 * mm))
        elements.append(Paragraph("Prices are inclusive of GST.", styles['CompanyInfo']))

    doc.build(elements)
    buffer.seek(0)
    return buffer
