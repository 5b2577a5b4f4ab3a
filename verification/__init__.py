"""
Identity Verification Engine

This package contains the analysis steps for identity document verification:
- MRZ parsing from OCR text
- Image quality assessment
- Video liveness heuristic
- Country-specific document rules
- Mock document/face analysis and final decision
"""

__version__ = "1.0.0"
