"""
Report Exports

Turns a generated report dict into a downloadable CSV, Excel or PDF file.
Each report is flattened to one table of detail rows plus a list of
summary metrics.
"""

import io
import csv
from datetime import datetime

from django.http import HttpResponse

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .reports import ReportError


CONTENT_TYPES = {
    'csv': 'text/csv',
    'xlsx': 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    'pdf': 'application/pdf',
}

REPORT_TITLES = {
    'profit_loss': 'Profit & Loss Report',
    'inventory': 'Inventory Report',
    'sales': 'Sales Report',
    'feed': 'Feed Report',
    'egg': 'Egg Production Report',
}

BRAND_COLOR = '2E7D32'


# =============================================================================
# FLATTENING
# =============================================================================

def report_to_table(report):
    """
    Flatten a report into ``(headers, rows, summary)``.

    ``summary`` is a list of (label, value) pairs shown above the table.
    """
    report_type = report['report_type']

    if report_type == 'profit_loss':
        headers = ['Section', 'Item', 'Amount']
        rows = [['Revenue', item['type'], item['amount']] for item in report['revenue']['by_type']]
        rows += [['Expense', item['category'], item['amount']] for item in report['expenses']['by_category']]
        summary = [
            ('Total Revenue', report['revenue']['total']),
            ('Total Expenses', report['expenses']['total']),
            ('Profit', report['profit']),
            ('Profit Margin %', report['profit_margin']),
        ]
    elif report_type == 'inventory':
        headers = ['Species', 'Type', 'Initial', 'Current', 'Mortality', 'Mortality Rate %', 'Status']
        rows = [
            [b['species'], b['livestock_type'], b['initial_quantity'], b['current_quantity'],
             b['mortality_count'], b['mortality_rate'], b['status']]
            for b in report['batches']
        ]
        summary = [
            ('Total Poultry', report['summary']['total_poultry']),
            ('Total Fish', report['summary']['total_fish']),
            ('Total Mortality', report['summary']['total_mortality']),
            ('Overall Mortality Rate %', report['summary']['overall_mortality_rate']),
        ]
    elif report_type == 'sales':
        headers = ['Date', 'Type', 'Quantity', 'Unit Price', 'Total', 'Customer']
        rows = [
            [s['date'], s['livestock_type'], s['quantity'], s['unit_price'], s['total_amount'],
             s['customer_name'] or '']
            for s in report['sales']
        ]
        summary = [
            ('Total Sales', report['summary']['total_sales']),
            ('Total Revenue', report['summary']['total_revenue']),
        ]
    elif report_type == 'feed':
        headers = ['Species', 'Feed Type', 'Quantity (kg)', 'Cost']
        rows = [
            [r['species'], r['feed_type'], r['total_quantity_kg'], r['total_cost']]
            for r in report['records']
        ]
        summary = [
            ('Total Feed (kg)', report['summary']['total_feed_kg']),
            ('Total Cost', report['summary']['total_cost']),
        ]
    elif report_type == 'egg':
        headers = ['Date', 'Collected', 'Broken', 'Sold', 'Inventory']
        rows = [
            [r['date'], r['collected'], r['broken'], r['sold'], r['inventory']]
            for r in report['records']
        ]
        summary = [
            ('Total Collected', report['summary']['total_collected']),
            ('Total Broken', report['summary']['total_broken']),
            ('Total Sold', report['summary']['total_sold']),
            ('Current Inventory', report['summary']['current_inventory']),
            ('Average Laying %', report['summary']['average_laying_percentage']),
        ]
    else:
        raise ReportError('Invalid report type')

    if 'period' in report:
        summary.insert(0, ('Period', f"{report['period']['start_date']} to {report['period']['end_date']}"))
    return headers, rows, summary


# =============================================================================
# WRITERS
# =============================================================================

def write_csv(report) -> bytes:
    headers, rows, summary = report_to_table(report)
    buffer = io.StringIO()
    writer = csv.writer(buffer)

    writer.writerow([REPORT_TITLES[report['report_type']]])
    writer.writerow(['Generated', datetime.now().strftime('%Y-%m-%d %H:%M')])
    for label, value in summary:
        writer.writerow([label, value])
    writer.writerow([])
    writer.writerow(headers)
    writer.writerows(rows)
    return buffer.getvalue().encode('utf-8')


def write_xlsx(report) -> bytes:
    headers, rows, summary = report_to_table(report)
    wb = Workbook()
    ws = wb.active
    ws.title = report['report_type']

    header_font = Font(bold=True, color='FFFFFF')
    header_fill = PatternFill(start_color=BRAND_COLOR, end_color=BRAND_COLOR, fill_type='solid')

    ws['A1'] = REPORT_TITLES[report['report_type']]
    ws['A1'].font = Font(bold=True, size=14)
    row = 3
    for label, value in summary:
        ws.cell(row=row, column=1, value=label).font = Font(bold=True)
        ws.cell(row=row, column=2, value=value)
        row += 1

    row += 1
    for col, header in enumerate(headers, start=1):
        cell = ws.cell(row=row, column=col, value=header)
        cell.font = header_font
        cell.fill = header_fill
    for values in rows:
        row += 1
        for col, value in enumerate(values, start=1):
            ws.cell(row=row, column=col, value=value)

    for col in range(1, len(headers) + 1):
        ws.column_dimensions[get_column_letter(col)].width = 20

    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()


def write_pdf(report) -> bytes:
    headers, rows, summary = report_to_table(report)
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=landscape(A4),
        rightMargin=1*cm,
        leftMargin=1*cm,
        topMargin=1.5*cm,
        bottomMargin=1.5*cm
    )
    styles = getSampleStyleSheet()

    elements = [
        Paragraph(REPORT_TITLES[report['report_type']], styles['Heading1']),
        Paragraph(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}", styles['Normal']),
        Spacer(1, 12),
    ]

    summary_table = Table([[label, str(value)] for label, value in summary], colWidths=[6*cm, 8*cm])
    summary_table.setStyle(TableStyle([
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 10),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
    ]))
    elements += [summary_table, Spacer(1, 12)]

    data_table = Table([headers] + [[str(value) for value in values] for values in rows], repeatRows=1)
    data_table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor(f'#{BRAND_COLOR}')),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 9),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
        ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#F1F8E9')]),
    ]))
    elements.append(data_table)

    doc.build(elements)
    return buffer.getvalue()


WRITERS = {
    'csv': write_csv,
    'xlsx': write_xlsx,
    'pdf': write_pdf,
}


def build_export_response(report, export_format: str) -> HttpResponse:
    """Render ``report`` as an attachment; raises ReportError for unknown formats."""
    writer = WRITERS.get(export_format)
    if writer is None:
        raise ReportError('Invalid export format')

    filename = f"{report['report_type']}_report_{datetime.now().strftime('%Y%m%d')}.{export_format}"
    response = HttpResponse(writer(report), content_type=CONTENT_TYPES[export_format])
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response
