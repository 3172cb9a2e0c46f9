from __future__ import annotations

import io

from openpyxl import load_workbook

from policylens.analysis_service import enhance_analysis_with_risk_assessment, mock_analyze_policy
from policylens.export_reports import export_risk_assessment_excel, export_risk_assessment_pdf


def test_pdf_export_produces_pdf():
    data = export_risk_assessment_pdf(mock_analyze_policy(), "Sample Policy")
    assert data.startswith(b"%PDF")


def test_pdf_export_handles_empty_analysis():
    analysis = enhance_analysis_with_risk_assessment({"data_collection": []})
    assert export_risk_assessment_pdf(analysis, "").startswith(b"%PDF")


def test_excel_export_sheets_and_rows():
    data = export_risk_assessment_excel(mock_analyze_policy(), "Sample Policy")
    wb = load_workbook(io.BytesIO(data))

    assert wb.sheetnames == ["Data Collection", "Risk Factors", "Recommendations"]

    items = wb["Data Collection"]
    assert [c.value for c in items[1]] == ["Data Type", "Purpose", "Category", "Risk", "Risk Score"]
    assert items["A2"].value == "Location Data"
    assert items["D3"].value == "high"
    assert items["D3"].fill.start_color.rgb.endswith("FFE6CC")

    factors = wb["Risk Factors"]
    assert factors["A2"].value == "Data Sensitivity"
    assert factors["B5"].value == 80

    recs = wb["Recommendations"]
    assert recs["A2"].value == 1
    assert recs["B2"].value.startswith("🔍 High Risk")
