"""
PolicyLens package.

This package contains the privacy risk assessment engine for data
collection statements extracted from privacy policies:
- risk_weights: Data category taxonomy and sensitivity weights
- category_classifier: Ordered pattern cascade mapping data type labels to categories
- data_collection: Data collection items and ingestion defaults
- risk_factors: The five risk factor calculators
- risk_levels: Level thresholds and display bands
- recommendations: Ordered recommendation rule chain
- risk_assessment: Score aggregation and the assessment result

Supporting modules around the engine:
- payload_validator: Validation of JSON/CSV extraction payloads
- analysis_service: Analysis records for the presentation layer, sample analysis
- export_reports: PDF and Excel report export
- errors: Exceptions raised at the edges of the engine
"""

__version__ = "0.1.0"
