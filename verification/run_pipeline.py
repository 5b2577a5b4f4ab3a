import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from config import settings, DOCUMENT_CATEGORY, FACE_CATEGORIES, VIDEO_CATEGORY
from .checks import CountryRuleValidator
from .classifier import REJECT, screen_filename
from .decision import MockAnalysisAggregator, select_asset
from .liveness import VideoLivenessHeuristic
from .models import Asset
from .mrz import MRZParser
from .quality import ImageQualityAnalyzer
from .utils import utc_now_iso

logger = logging.getLogger(__name__)

MISSING_ASSETS_REASON = "Missing required documents or face assets"
COMPLETED_CONFIDENCE = 0.8
FAILED_CONFIDENCE = 0.2


async def run_pipeline(assets: Sequence[Asset],
                       country: Optional[str] = None,
                       document_type: Optional[str] = None,
                       ocr_text: Optional[str] = None,
                       fields: Optional[Mapping[str, Optional[str]]] = None,
                       document_image: Optional[bytes] = None,
                       video_url: Optional[str] = None) -> Dict[str, Any]:
    """
    Main pipeline function that runs every analysis step for one verification

    Args:
        assets: Uploaded files tagged id_document / face_photo / face_video
        country: Country code for rule validation (e.g. USA)
        document_type: passport, national_id, drivers_license
        ocr_text: Text already extracted from the document, searched for an MRZ
        fields: Extra document fields; override values decoded from the MRZ
        document_image: Raw bytes of the document image
        video_url: Liveness video; defaults to the first face_video asset URL

    Returns:
        Verification result with status, confidence, reasons and signals
    """

    # Initialize components
    parser = MRZParser()
    quality_analyzer = ImageQualityAnalyzer()
    liveness_heuristic = VideoLivenessHeuristic()
    validator = CountryRuleValidator()
    aggregator = MockAnalysisAggregator()

    # Step 1: Count assets per role
    doc_count = sum(1 for a in assets if a.category == DOCUMENT_CATEGORY)
    face_count = sum(1 for a in assets if a.category in FACE_CATEGORIES)
    meets_requirements = doc_count >= 1 and face_count >= 1
    logger.info("Assets: %d ID documents, %d face assets", doc_count, face_count)

    first_doc = select_asset(assets, (DOCUMENT_CATEGORY,))
    first_face = select_asset(assets, FACE_CATEGORIES)

    # Step 2: Quality checks
    quality: Dict[str, Any] = {
        "document_present": doc_count > 0,
        "face_present": face_count > 0,
        "document_file_size_ok": first_doc.size > settings.MIN_DOCUMENT_FILE_SIZE if first_doc else False,
        "face_file_size_ok": first_face.size > settings.MIN_FACE_FILE_SIZE if first_face else False,
        "blur_likely": False,
        "crop_likely": False,
        "image": None
    }
    if document_image:
        image_quality = await quality_analyzer.analyze(document_image)
        quality["blur_likely"] = image_quality.blur_likely
        quality["crop_likely"] = image_quality.crop_likely
        quality["image"] = image_quality.model_dump()

    # Step 3: Filename screening of the document
    screening = screen_filename(first_doc.name) if first_doc else None

    # Step 4: MRZ extraction
    mrz = parser.parse(ocr_text) if ocr_text else None

    # Step 5: Country rules
    country_validation = None
    if country and document_type:
        merged_fields: Dict[str, Optional[str]] = {}
        if mrz is not None:
            merged_fields.update(mrz.model_dump(exclude={"format"}))
        if fields:
            merged_fields.update(fields)
        country_validation = validator.validate(
            country, document_type, merged_fields, mrz_present=mrz is not None
        )

    # Step 6: Video liveness
    liveness = None
    if not video_url:
        video_asset = select_asset(assets, (VIDEO_CATEGORY,))
        video_url = video_asset.file_url if video_asset else None
    if video_url:
        liveness = await liveness_heuristic.analyze(video_url)

    # Step 7: Mock AI analysis
    ai_results = await aggregator.process(assets)

    # Step 8: Final decision
    reasons: List[str] = []
    if not meets_requirements:
        reasons.append(MISSING_ASSETS_REASON)
    if settings.ENFORCE_DOCUMENT_CHECKS:
        if screening and screening["doc_type_guess"] == REJECT:
            reasons.append(screening["notes"])
        if country_validation is not None and not country_validation.passed:
            reasons.extend(country_validation.messages)
            if country_validation.missing_fields:
                reasons.append(f"Missing fields: {', '.join(country_validation.missing_fields)}")

    status = "failed" if reasons else "completed"
    logger.info("Verification %s: %s", status, reasons or "all requirements met")

    return {
        "status": status,
        "confidence": COMPLETED_CONFIDENCE if status == "completed" else FAILED_CONFIDENCE,
        "reasons": reasons,
        "counts": {
            "documents": doc_count,
            "face": face_count
        },
        "assets": [asset.model_dump() for asset in assets],
        "processed_at": utc_now_iso(),
        "signals": {
            "quality": quality,
            "screening": screening,
            "mrz": mrz.model_dump() if mrz else None,
            "country_validation": country_validation.model_dump() if country_validation else None,
            "liveness": liveness.model_dump() if liveness else None
        },
        "ai": ai_results
    }
