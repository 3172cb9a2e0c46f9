"""
Flask-based frontend for PolicyLens.

This lightweight web application exposes the privacy risk assessment
engine through a small JSON API: extraction payloads go in, scored
analysis records (and optional PDF/Excel reports) come out.

To run the app locally, install the dependencies and execute:

    python frontend/app.py

The server will start on http://0.0.0.0:8000 by default.
"""

import io
import json
import logging
import os
import sys
from datetime import date

from flask import Flask, Response, jsonify, request
import matplotlib

matplotlib.use("Agg")  # Use non-interactive backend for server
import matplotlib.pyplot as plt

# Make sure the parent directory (repository root) is in sys.path so that
# ``import policylens`` works even when running this script from within the
# ``frontend`` directory.
PARENT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if PARENT_DIR not in sys.path:
    sys.path.insert(0, PARENT_DIR)

from policylens import __version__  # noqa: E402
from policylens.analysis_service import analyze_payload, mock_analyze_policy  # noqa: E402
from policylens.errors import ExtractionFailedError, MalformedPayloadError  # noqa: E402
from policylens.export_reports import export_risk_assessment_excel, export_risk_assessment_pdf  # noqa: E402
from policylens.risk_levels import BANDS_BY_KEY, RISK_BANDS  # noqa: E402

logger = logging.getLogger(__name__)

app = Flask(__name__)

# Configuration
app.secret_key = os.environ.get('FLASK_SECRET_KEY', 'dev-key-change-in-production')
app.config['MAX_PAYLOAD_BYTES'] = int(os.environ.get('POLICYLENS_MAX_PAYLOAD_BYTES', 1024 * 1024))
# Werkzeug rejects larger bodies before reading them; headroom covers multipart framing
app.config['MAX_CONTENT_LENGTH'] = app.config['MAX_PAYLOAD_BYTES'] + 64 * 1024
app.config['LOG_LEVEL'] = os.environ.get('POLICYLENS_LOG_LEVEL', 'INFO').upper()
app.config['HOST'] = os.environ.get('POLICYLENS_HOST', '0.0.0.0')
app.config['PORT'] = int(os.environ.get('POLICYLENS_PORT', 8000))

FACTOR_CHART_LABELS = ["Sensitivity", "Context", "Storage", "Sharing", "Controls"]
FACTOR_KEYS = ["data_sensitivity", "collection_context", "storage_security", "data_sharing", "user_controls"]


def _extraction_failed(exc: ExtractionFailedError):
    logger.warning("Extraction failed: %s", exc)
    status = 400 if isinstance(exc, MalformedPayloadError) else 422
    return jsonify({"error": exc.message, "details": exc.details}), status


def _payload_too_large(size: int) -> bool:
    return size > app.config['MAX_PAYLOAD_BYTES']


def _read_analysis_field():
    """Parse the ``analysis`` JSON sent with export requests."""
    raw = request.form.get("analysis") or request.get_data(as_text=True) or "{}"
    if _payload_too_large(len(raw)):
        raise OverflowError("Export data too large")
    analysis = json.loads(raw)
    if not isinstance(analysis, dict):
        raise ValueError("analysis must be a JSON object")
    return analysis


@app.route("/")
def home():
    """Service description."""
    return jsonify({
        "service": "PolicyLens",
        "version": __version__,
        "endpoints": [
            "POST /api/assess",
            "POST /api/assess/upload",
            "GET /api/sample",
            "POST /api/assess/chart",
            "POST /export_risk_pdf",
            "POST /export_risk_excel",
        ],
        "risk_bands": [band.to_dict() for band in RISK_BANDS],
    })


@app.route("/api/assess", methods=["POST"])
def assess():
    """Assess a JSON extraction payload."""
    body = request.get_data()
    if _payload_too_large(len(body)):
        return jsonify({"error": "Payload too large"}), 413
    try:
        return jsonify(analyze_payload(body, "payload.json"))
    except ExtractionFailedError as exc:
        return _extraction_failed(exc)


@app.route("/api/assess/upload", methods=["POST"])
def assess_upload():
    """Assess an uploaded JSON or CSV file of statements."""
    uploaded_file = request.files.get("payload_file")
    if not uploaded_file or uploaded_file.filename == "":
        return jsonify({"error": "Please upload a JSON or CSV file."}), 400

    content = uploaded_file.read()
    if _payload_too_large(len(content)):
        return jsonify({"error": "Payload too large"}), 413
    try:
        return jsonify(analyze_payload(content, uploaded_file.filename))
    except ExtractionFailedError as exc:
        return _extraction_failed(exc)


@app.route("/api/sample")
def sample():
    """Sample analysis for frontend development."""
    return jsonify(mock_analyze_policy())


@app.route("/api/assess/chart", methods=["POST"])
def factor_chart():
    """Bar chart of the risk factors of an analysis, as PNG."""
    try:
        analysis = _read_analysis_field()
        factors = analysis.get("risk_factors") or {}
        risk_level = analysis.get("risk_level") or {}
        if not isinstance(factors, dict) or not isinstance(risk_level, dict):
            raise ValueError("risk_factors and risk_level must be JSON objects")
        values = [float(factors.get(k, 0)) for k in FACTOR_KEYS]
        band = BANDS_BY_KEY.get(risk_level.get("display_bucket", "low"), BANDS_BY_KEY["low"])
    except OverflowError:
        return "Export data too large", 413
    except (ValueError, TypeError) as e:
        return f"Invalid input: {str(e)}", 400

    fig, ax = plt.subplots()
    ax.bar(FACTOR_CHART_LABELS, values, color=band.hex_color)
    ax.set_ylim(0, 100)
    ax.set_title(f"Risk Factors (score {analysis.get('risk_score', 0)})")
    ax.set_ylabel("Score")
    buf = io.BytesIO()
    fig.savefig(buf, format="png", bbox_inches="tight")
    plt.close(fig)
    buf.seek(0)
    return Response(buf.getvalue(), mimetype="image/png")


@app.route("/export_risk_pdf", methods=["POST"])
def export_risk_pdf():
    """Export a risk assessment report as PDF."""
    try:
        analysis = _read_analysis_field()
        document_name = request.form.get("document_name", "Unknown Document")
        pdf_data = export_risk_assessment_pdf(analysis, document_name)
    except OverflowError:
        return "Export data too large", 413
    except json.JSONDecodeError:
        return "Invalid data format", 400
    except ValueError as e:
        return f"Invalid input: {str(e)}", 400
    except Exception:
        logger.exception("PDF export failed")
        return "Error generating PDF report. Please try again or contact support.", 500

    filename = f"privacy_risk_report_{date.today().isoformat()}.pdf"
    return Response(
        pdf_data,
        mimetype='application/pdf',
        headers={'Content-Disposition': f'attachment; filename={filename}'}
    )


@app.route("/export_risk_excel", methods=["POST"])
def export_risk_excel():
    """Export a risk assessment report as Excel."""
    try:
        analysis = _read_analysis_field()
        document_name = request.form.get("document_name", "Unknown Document")
        excel_data = export_risk_assessment_excel(analysis, document_name)
    except OverflowError:
        return "Export data too large", 413
    except json.JSONDecodeError:
        return "Invalid data format", 400
    except ValueError as e:
        return f"Invalid input: {str(e)}", 400
    except Exception:
        logger.exception("Excel export failed")
        return "Error generating Excel report. Please try again or contact support.", 500

    filename = f"privacy_risk_report_{date.today().isoformat()}.xlsx"
    return Response(
        excel_data,
        mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        headers={'Content-Disposition': f'attachment; filename={filename}'}
    )


if __name__ == "__main__":
    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.run(host=app.config['HOST'], port=app.config['PORT'], debug=False)
