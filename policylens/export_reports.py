"""
Export Reports module for PolicyLens.

Generates privacy risk reports in PDF and Excel formats from an analysis
record produced by ``analysis_service``.
"""
from __future__ import annotations
import io
from datetime import datetime
from typing import Dict, Any
from xml.sax.saxutils import escape

# PDF generation
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle, PageBreak
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY

# Excel generation
from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils.dataframe import dataframe_to_rows

from policylens.analysis_service import records_to_dataframe, summarize_risk_levels
from policylens.risk_levels import BANDS_BY_KEY, RISK_LEVELS

FACTOR_LABELS: Dict[str, str] = {
    "data_sensitivity": "Data Sensitivity",
    "collection_context": "Collection Context",
    "storage_security": "Storage Security",
    "data_sharing": "Data Sharing",
    "user_controls": "User Controls",
}

# Light cell fills per risk tag
RISK_FILLS: Dict[str, str] = {
    "critical": "FFD6D6",
    "high": "FFE6CC",
    "medium": "FFF7CC",
    "low": "E6FFE6",
}


def _display_level(level: str) -> str:
    return level.capitalize() if level else "Unknown"


class RiskReportGenerator:
    """Generates privacy risk reports in multiple formats."""

    def __init__(self):
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        """Set up custom styles for PDF generation."""
        self.styles.add(ParagraphStyle(
            name='CustomTitle',
            parent=self.styles['Heading1'],
            fontSize=20,
            spaceAfter=20,
            alignment=TA_CENTER,
            textColor=colors.HexColor('#2c3e50')
        ))

        self.styles.add(ParagraphStyle(
            name='CustomHeading',
            parent=self.styles['Heading2'],
            fontSize=14,
            spaceBefore=12,
            spaceAfter=6,
            textColor=colors.HexColor('#34495e')
        ))

        self.styles.add(ParagraphStyle(
            name='CustomBody',
            parent=self.styles['Normal'],
            fontSize=10,
            spaceAfter=6,
            alignment=TA_JUSTIFY
        ))

    def generate_risk_report_pdf(self, analysis: Dict[str, Any], document_name: str) -> bytes:
        """Generate a privacy risk report in PDF format."""

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=72, leftMargin=72,
            topMargin=72, bottomMargin=18
        )

        story = []
        story.append(Paragraph("Privacy Risk Assessment Report", self.styles['CustomTitle']))
        story.append(Spacer(1, 20))

        risk_level = analysis.get('risk_level', {})
        band = BANDS_BY_KEY.get(risk_level.get('display_bucket', 'low'), BANDS_BY_KEY['low'])
        records = analysis.get('data_collection', [])

        metadata = [
            ['Report Generated:', datetime.now().strftime('%Y-%m-%d %H:%M:%S')],
            ['Document:', document_name],
            ['Statements Analysed:', str(len(records))],
            ['Risk Score:', f"{analysis.get('risk_score', 0)}/100"],
            ['Risk Level:', _display_level(risk_level.get('level', ''))],
            ['Display Band:', risk_level.get('label', band.label)],
        ]

        metadata_table = Table(metadata, colWidths=[2*inch, 3*inch])
        metadata_table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, -1), colors.HexColor('#f8f9fa')),
            ('TEXTCOLOR', (0, 0), (-1, -1), colors.black),
            ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
            ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
            ('BACKGROUND', (1, 5), (1, 5), colors.HexColor(band.hex_color)),
            ('GRID', (0, 0), (-1, -1), 1, colors.black)
        ]))
        story.append(metadata_table)
        story.append(Spacer(1, 8))
        story.append(Paragraph(escape(risk_level.get('description', band.description)), self.styles['CustomBody']))
        story.append(Spacer(1, 12))

        # Risk factors
        story.append(Paragraph("Risk Factors", self.styles['CustomHeading']))
        factors = analysis.get('risk_factors', {})
        factor_data = [['Factor', 'Score']]
        for key, label in FACTOR_LABELS.items():
            factor_data.append([label, f"{float(factors.get(key, 0)):.1f}"])

        factor_table = Table(factor_data, colWidths=[2.5*inch, 1.2*inch])
        factor_table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#3498db')),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
            ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
            ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#f8f9fa')]),
            ('GRID', (0, 0), (-1, -1), 1, colors.black)
        ]))
        story.append(factor_table)
        story.append(Spacer(1, 20))

        # Per-item results
        story.append(Paragraph("Data Collection Statements", self.styles['CustomHeading']))
        if records:
            table_data = [['Data Type', 'Category', 'Risk', 'Score']]
            for record in records:
                table_data.append([
                    Paragraph(escape(str(record.get('type', ''))), self.styles['Normal']),
                    record.get('category', ''),
                    _display_level(record.get('risk', '')),
                    str(record.get('risk_score', 0)),
                ])

            results_table = Table(table_data, colWidths=[2.4*inch, 1.6*inch, 0.9*inch, 0.7*inch])
            results_table.setStyle(TableStyle([
                ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#2c3e50')),
                ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
                ('ALIGN', (1, 0), (-1, -1), 'CENTER'),
                ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
                ('FONTSIZE', (0, 0), (-1, -1), 9),
                ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#f8f9fa')]),
                ('GRID', (0, 0), (-1, -1), 1, colors.black),
                ('VALIGN', (0, 0), (-1, -1), 'MIDDLE')
            ]))
            story.append(results_table)
        else:
            story.append(Paragraph("No data collection statements were found.", self.styles['CustomBody']))

        # Recommendations
        story.append(PageBreak())
        story.append(Paragraph("Recommendations", self.styles['CustomHeading']))
        recommendations = analysis.get('recommendations', [])
        if recommendations:
            for i, rec in enumerate(recommendations, 1):
                story.append(Paragraph(f"{i}. {escape(rec)}", self.styles['CustomBody']))
        else:
            story.append(Paragraph("No specific recommendations - no risk thresholds were exceeded.", self.styles['CustomBody']))

        doc.build(story)
        buffer.seek(0)
        return buffer.getvalue()

    def generate_excel_report(self, analysis: Dict[str, Any], document_name: str) -> bytes:
        """Generate an Excel report with statements, factors and recommendations."""

        buffer = io.BytesIO()
        wb = Workbook()

        # Remove default sheet
        wb.remove(wb.active)

        # Header styles
        header_font = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill(start_color="2C3E50", end_color="2C3E50", fill_type="solid")
        header_alignment = Alignment(horizontal="center", vertical="center")

        # Data styles
        data_alignment = Alignment(horizontal="left", vertical="center")
        border = Border(left=Side(style='thin'), right=Side(style='thin'),
                        top=Side(style='thin'), bottom=Side(style='thin'))

        def style_header(ws, row: int = 1) -> None:
            for cell in ws[row]:
                cell.font = header_font
                cell.fill = header_fill
                cell.alignment = header_alignment
                cell.border = border

        # Data Collection sheet
        ws_items = wb.create_sheet("Data Collection")
        df = records_to_dataframe(analysis.get('data_collection', []))
        df.columns = ["Data Type", "Purpose", "Category", "Risk", "Risk Score"]
        for row in dataframe_to_rows(df, index=False, header=True):
            ws_items.append(row)
        style_header(ws_items)

        for row in ws_items.iter_rows(min_row=2):
            for cell in row:
                cell.alignment = data_alignment
                cell.border = border
            risk_cell = row[3]
            fill = RISK_FILLS.get(str(risk_cell.value))
            if fill:
                risk_cell.fill = PatternFill(start_color=fill, end_color=fill, fill_type="solid")

        _autosize_columns(ws_items)

        # Risk Factors sheet
        ws_factors = wb.create_sheet("Risk Factors")
        risk_level = analysis.get('risk_level', {})
        ws_factors.append(["Factor", "Score"])
        style_header(ws_factors)
        factors = analysis.get('risk_factors', {})
        for key, label in FACTOR_LABELS.items():
            ws_factors.append([label, round(float(factors.get(key, 0)), 2)])
        ws_factors.append([])
        ws_factors.append(["Document", document_name])
        ws_factors.append(["Risk Score", analysis.get('risk_score', 0)])
        ws_factors.append(["Risk Level", risk_level.get('level', '')])
        ws_factors.append(["Display Band", risk_level.get('display_bucket', '')])

        summary = summarize_risk_levels(analysis.get('data_collection', []))
        ws_factors.append([])
        ws_factors.append(["Items per Risk Tag", "Count"])
        for level in reversed(RISK_LEVELS):
            ws_factors.append([level, summary.get(level, 0)])
        _autosize_columns(ws_factors)

        # Recommendations sheet
        ws_recs = wb.create_sheet("Recommendations")
        ws_recs.append(["#", "Recommendation"])
        style_header(ws_recs)
        for i, rec in enumerate(analysis.get('recommendations', []), 1):
            ws_recs.append([i, rec])
        _autosize_columns(ws_recs, limit=100)

        wb.save(buffer)
        buffer.seek(0)
        return buffer.getvalue()


def _autosize_columns(ws, limit: int = 50) -> None:
    for column in ws.columns:
        max_length = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
        ws.column_dimensions[column[0].column_letter].width = min(max_length + 2, limit)


def export_risk_assessment_pdf(analysis: Dict[str, Any], document_name: str = "Unknown Document") -> bytes:
    """Export a risk assessment as PDF."""
    return RiskReportGenerator().generate_risk_report_pdf(analysis, document_name or "Unknown Document")


def export_risk_assessment_excel(analysis: Dict[str, Any], document_name: str = "Unknown Document") -> bytes:
    """Export a risk assessment as Excel."""
    return RiskReportGenerator().generate_excel_report(analysis, document_name or "Unknown Document")
