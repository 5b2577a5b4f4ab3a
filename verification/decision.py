import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence
from config import settings, DOCUMENT_CATEGORY, FACE_CATEGORIES
from .classifier import DocumentClassifier, DocumentProfile, FilenameClassifier
from .models import Asset
from .utils import clamp

logger = logging.getLogger(__name__)

LANDMARK_COUNT = 68
MAX_RISK_SCORE = 100

INVOICE_OCR_TEXT = "INVOICE\nAmount: $100\nDate: 2025-08-21"
PASSPORT_OCR_TEXT = "PASSPORT\nSURNAME: DOE\nGIVEN NAMES: JOHN MICHAEL\nNATIONALITY: UNITED STATES"


def select_asset(assets: Sequence[Asset], categories: Sequence[str]) -> Optional[Asset]:
    """First asset whose category is in categories; later matches are ignored"""
    for asset in assets:
        if asset.category in categories:
            return asset
    return None


def synthetic_landmarks(x: int, y: int) -> List[Dict[str, int]]:
    return [{"x": x + i, "y": y + i} for i in range(LANDMARK_COUNT)]


class MockAnalysisAggregator:
    """
    Scripted stand-in for the document and face analysis models.

    The output shape and value ranges are the contract a real analyzer has
    to keep; the canned values say nothing about the actual document.
    """

    def __init__(self,
                 classifier: Optional[DocumentClassifier] = None,
                 processing_delay: Optional[float] = None):
        self.classifier = classifier or FilenameClassifier()
        self.processing_delay = settings.MOCK_PROCESSING_DELAY if processing_delay is None else processing_delay

    def confidence(self, value: float) -> float:
        """Overall confidences are percentages"""
        return clamp(value, 0, 100)

    def _empty_document_analysis(self) -> Dict[str, Any]:
        return {
            "face_detection": {"detected": False, "confidence": 0},
            "document_validation": {"is_valid": False, "confidence": 0},
            "ocr_results": {"text": "", "confidence": 0},
            "fraud_detection": {"risk_score": MAX_RISK_SCORE, "risk_level": "high"},
            "liveness_detection": {"is_live": False, "confidence": 0},
            "overall_confidence": self.confidence(0)
        }

    def _invoice_analysis(self) -> Dict[str, Any]:
        return {
            "face_detection": {"detected": False, "confidence": 0},
            "document_validation": {
                "is_valid": False,
                "confidence": 0.1,
                "document_type": "invoice",
                "authenticity_score": 0.1,
                "tampering_detected": False,
                "tampering_score": 0.9
            },
            "ocr_results": {
                "text": INVOICE_OCR_TEXT,
                "confidence": 0.8,
                "extracted_data": {
                    "document_type": "invoice",
                    "amount": "$100",
                    "date": "2025-08-21"
                }
            },
            "fraud_detection": {
                "risk_score": 95,
                "risk_level": "high",
                "fraud_indicators": ["Non-government document"],
                "suspicious_patterns": ["Invoice format detected"]
            },
            "liveness_detection": {"is_live": False, "confidence": 0},
            "overall_confidence": self.confidence(10)
        }

    def _passport_analysis(self) -> Dict[str, Any]:
        return {
            "face_detection": {
                "detected": True,
                "confidence": 0.85,
                "bounding_box": {"x": 50, "y": 30, "width": 100, "height": 120},
                "landmarks": synthetic_landmarks(50, 30)
            },
            "document_validation": {
                "is_valid": True,
                "confidence": 0.9,
                "document_type": "passport",
                "authenticity_score": 0.95,
                "tampering_detected": False,
                "tampering_score": 0.05
            },
            "ocr_results": {
                "text": PASSPORT_OCR_TEXT,
                "confidence": 0.85,
                "extracted_data": {
                    "given_names": "JOHN MICHAEL",
                    "last_name": "DOE",
                    "nationality": "UNITED STATES",
                    "document_type": "passport"
                }
            },
            "fraud_detection": {
                "risk_score": 25,
                "risk_level": "low",
                "fraud_indicators": [],
                "suspicious_patterns": []
            },
            "liveness_detection": {"is_live": False, "confidence": 0},
            "overall_confidence": self.confidence(85)
        }

    def document_analysis(self, asset: Optional[Asset]) -> Dict[str, Any]:
        if asset is None:
            return self._empty_document_analysis()

        profile = self.classifier.classify(asset)
        logger.info("Document %s classified as %s", asset.name, profile.value)

        if profile is DocumentProfile.INVOICE:
            return self._invoice_analysis()
        return self._passport_analysis()

    def face_analysis(self, asset: Optional[Asset]) -> Dict[str, Any]:
        if asset is None:
            return {
                "face_detection": {"detected": False, "confidence": 0},
                "face_recognition": {"similarity": 0, "match_found": False},
                "overall_confidence": self.confidence(0)
            }

        return {
            "face_detection": {
                "detected": True,
                "confidence": 0.9,
                "bounding_box": {"x": 80, "y": 60, "width": 140, "height": 140},
                "landmarks": synthetic_landmarks(80, 60)
            },
            "face_recognition": {"similarity": 75.5, "match_found": False},
            "overall_confidence": self.confidence(90)
        }

    async def process(self, assets: Sequence[Asset]) -> Dict[str, Any]:
        logger.info("Mock analysis of %d assets", len(assets))

        # Simulated model latency
        if self.processing_delay > 0:
            await asyncio.sleep(self.processing_delay)

        document_asset = select_asset(assets, (DOCUMENT_CATEGORY,))
        face_asset = select_asset(assets, FACE_CATEGORIES)

        return {
            "document": self.document_analysis(document_asset),
            "face": self.face_analysis(face_asset)
        }
