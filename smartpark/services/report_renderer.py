# smartpark/services/report_renderer.py
"""
Printable HTML rendering of a report.
Pure transform: report (+ optional sample records) → standalone HTML string.
The browser's print dialog turns it into a PDF.
"""

from datetime import datetime
from typing import Optional

from jinja2 import Template

from smartpark.config import settings


REPORT_TEMPLATE = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>{{ kind }} Parking Report</title>
    <style>
        @media print { body { margin: 0; } .no-print { display: none; } }
        body { font-family: Arial, sans-serif; margin: 20px; line-height: 1.4; }
        .header { text-align: center; margin-bottom: 30px; border-bottom: 2px solid #333; padding-bottom: 20px; }
        .logo { font-size: 24px; font-weight: bold; color: #2563eb; margin-bottom: 10px; }
        .report-title { font-size: 20px; margin: 10px 0; }
        .report-period { color: #666; font-size: 14px; }
        .summary { display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr)); gap: 20px; margin: 30px 0; }
        .summary-card { border: 1px solid #ddd; padding: 15px; border-radius: 8px; text-align: center; }
        .summary-card h3 { margin: 0 0 10px 0; color: #333; font-size: 14px; }
        .summary-card .value { font-size: 24px; font-weight: bold; color: #2563eb; }
        .section { margin: 30px 0; }
        .section h2 { border-bottom: 1px solid #ddd; padding-bottom: 10px; font-size: 18px; }
        table { width: 100%; border-collapse: collapse; margin: 15px 0; }
        th, td { border: 1px solid #ddd; padding: 8px; text-align: left; font-size: 12px; }
        th { background-color: #f5f5f5; font-weight: bold; }
        .signature-section { margin-top: 50px; display: flex; justify-content: space-between; }
        .signature-box { border: 1px solid #333; padding: 20px; width: 200px; text-align: center; font-size: 12px; }
        .signature-line { height: 50px; border-bottom: 1px solid #333; margin: 20px 0; }
        .footer { margin-top: 50px; text-align: center; color: #666; font-size: 10px; }
        .print-button { background: #2563eb; color: white; padding: 10px 20px; border: none; border-radius: 5px; margin: 20px; font-size: 14px; }
    </style>
</head>
<body>
    <div class="no-print">
        <button class="print-button" onclick="window.print()">Print Report</button>
    </div>

    <div class="header">
        <div class="logo">{{ organization }}</div>
        <div class="report-title">{{ kind }} Activity Report</div>
        <div class="report-period">{{ period }}</div>
    </div>

    <div class="summary">
        <div class="summary-card">
            <h3>Total Cars Parked</h3>
            <div class="value">{{ data.total_cars_parked }}</div>
        </div>
        <div class="summary-card">
            <h3>Total Revenue</h3>
            <div class="value">{{ money(data.total_revenue) }}</div>
        </div>
        <div class="summary-card">
            <h3>Total Duration</h3>
            <div class="value">{{ hours(data.total_duration) }} hours</div>
        </div>
        {% if data.slot_utilization %}
        <div class="summary-card">
            <h3>Average Occupancy</h3>
            <div class="value">{{ "%.1f"|format(data.slot_utilization.average_occupancy) }}%</div>
        </div>
        {% endif %}
    </div>

    <div class="section">
        <h2>Payment Methods Breakdown</h2>
        <table>
            <tr><th>Payment Method</th><th>Amount</th><th>Percentage</th></tr>
            {% for label, amount in methods %}
            <tr>
                <td>{{ label }}</td>
                <td>{{ money(amount) }}</td>
                <td>{{ percent(amount) }}%</td>
            </tr>
            {% endfor %}
        </table>
    </div>

    {% if data.peak_hours %}
    <div class="section">
        <h2>Peak Hours</h2>
        <table>
            <tr><th>Hour</th><th>Number of Cars</th></tr>
            {% for peak in data.peak_hours %}
            <tr><td>{{ peak.hour }}:00 - {{ peak.hour + 1 }}:00</td><td>{{ peak.count }}</td></tr>
            {% endfor %}
        </table>
    </div>
    {% endif %}

    {% if records %}
    <div class="section">
        <h2>Recent Parking Records (Sample)</h2>
        <table>
            <tr><th>Plate Number</th><th>Driver Name</th><th>Entry Time</th><th>Duration</th><th>Slot</th></tr>
            {% for record in records %}
            <tr>
                <td>{{ record.car.plate_number if record.car else "N/A" }}</td>
                <td>{{ record.car.driver_name if record.car else "N/A" }}</td>
                <td>{{ record.entry_time.strftime("%Y-%m-%d %H:%M") }}</td>
                <td>{{ (hours(record.duration) ~ " hrs") if record.duration is not none else "Active" }}</td>
                <td>{{ record.parking_slot.slot_number if record.parking_slot else "N/A" }}</td>
            </tr>
            {% endfor %}
        </table>
    </div>
    {% endif %}

    <div class="signature-section">
        <div class="signature-box">
            <div>Generated By:</div>
            <div style="margin: 20px 0;">{{ generated_by }}</div>
            <div>Date: {{ created }}</div>
        </div>
        {% if signature %}
        <div class="signature-box">
            <div>Approved By:</div>
            {% if signature.signature_data %}
            <div style="margin: 10px 0; font-style: italic;">[Digital Signature]</div>
            {% else %}
            <div style="height: 50px;"></div>
            {% endif %}
            <div>{{ signature.signed_by }}</div>
            <div>{{ signature.position }}</div>
            <div>Date: {{ signed_at }}</div>
        </div>
        {% else %}
        <div class="signature-box">
            <div>Signature:</div>
            <div class="signature-line"></div>
            <div>Name: ________________</div>
            <div>Date: ________________</div>
        </div>
        {% endif %}
    </div>

    <div class="footer">
        <p>This report was generated automatically by {{ organization }}</p>
        <p>Generated on: {{ now }}</p>
    </div>
</body>
</html>
"""

_template = Template(REPORT_TEMPLATE, autoescape=True)

METHOD_LABELS = (("cash", "Cash"), ("mobile_money", "Mobile Money"), ("card", "Card"))


def format_date(value) -> str:
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    return f"{value:%B} {value.day}, {value.year}"


def format_money(amount) -> str:
    amount = amount or 0
    text = f"{amount:,.0f}" if float(amount).is_integer() else f"{amount:,.2f}"
    return f"{text} {settings.CURRENCY}"


def minutes_to_hours(minutes) -> int:
    return int((minutes or 0) / 60 + 0.5)


def render_report(report, sample_records: Optional[list] = None) -> str:
    """Render a report (ORM object or anything with the same attributes) to printable HTML."""
    data = report.data or {}
    is_daily = report.report_type == "daily"
    total_revenue = data.get("total_revenue") or 0
    methods = data.get("payment_methods") or {}

    def percent(amount):
        if total_revenue <= 0:
            return "0"
        return f"{(amount or 0) / total_revenue * 100:.1f}"

    if is_daily:
        period = format_date(report.report_date)
    else:
        period = f"{format_date(report.start_date)} - {format_date(report.end_date)}"

    generated_by = getattr(report, "generated_by", None)
    signature = report.signature or None

    return _template.render(
        organization=settings.ORGANIZATION_NAME,
        kind="Daily" if is_daily else "Monthly",
        period=period,
        data=data,
        methods=[(label, methods.get(key, 0)) for key, label in METHOD_LABELS],
        records=(sample_records or [])[:10],
        generated_by=generated_by.username if generated_by else "System",
        created=format_date(report.created_at or datetime.now()),
        signature=signature,
        signed_at=format_date(signature["signed_at"]) if signature and signature.get("signed_at") else "",
        now=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        money=format_money,
        hours=minutes_to_hours,
        percent=percent,
    )
