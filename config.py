from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    # Image Quality Thresholds
    # Laplacian variance below which an image is considered blurry
    BLUR_VARIANCE_THRESHOLD: float = 50.0
    # Mean border edge magnitude below which a capture looks cropped
    CROP_EDGE_DENSITY_THRESHOLD: float = 10.0

    # Video Liveness
    MOTION_SIZE_THRESHOLD_BYTES: int = 100 * 1024
    # None leaves the deadline to the calling layer
    LIVENESS_PROBE_TIMEOUT: Optional[float] = None

    # Mock Analysis
    MOCK_PROCESSING_DELAY: float = 1.0

    # Asset size checks (bytes)
    MIN_DOCUMENT_FILE_SIZE: int = 500
    MIN_FACE_FILE_SIZE: int = 200

    # Decision Rules
    # Demo mode only requires a document and a face asset
    ENFORCE_DOCUMENT_CHECKS: bool = False

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()

# Per-country document policies
COUNTRY_RULES = {
    "USA": [
        {
            "document_type": "passport",
            "fields_required": ["document_number", "date_of_birth", "expiry_date", "nationality"],
            "mrz_required": True,
            "expiry_must_be_future": True
        },
        {
            "document_type": "drivers_license",
            "fields_required": ["document_number", "date_of_birth", "expiry_date"]
        }
    ],
    "CAN": [
        {
            "document_type": "passport",
            "fields_required": ["document_number", "date_of_birth", "expiry_date", "nationality"],
            "mrz_required": True,
            "expiry_must_be_future": True
        }
    ]
}

# Asset categories assigned by the upload layer
DOCUMENT_CATEGORY = "id_document"
FACE_CATEGORIES = ("face_photo", "face_video")
VIDEO_CATEGORY = "face_video"

# MRZ date format (YYMMDD)
MRZ_DATE_REGEX = r"^\d{6}$"

# Expiry date formats accepted by the country rule validator
EXPIRY_DATE_FORMATS = ("%Y-%m-%d", "%d-%m-%Y")
