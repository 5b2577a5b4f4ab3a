from typing import List, Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict


class MRZRecord(BaseModel):
    """Identity fields decoded from a machine-readable zone"""

    model_config = ConfigDict(frozen=True)

    format: Literal["TD3", "TD1", "unknown"] = "unknown"
    document_type: Optional[str] = None
    issuing_country: Optional[str] = None
    last_name: Optional[str] = None
    given_names: Optional[str] = None
    document_number: Optional[str] = None
    nationality: Optional[str] = None
    date_of_birth: Optional[str] = None
    sex: Optional[str] = None
    expiry_date: Optional[str] = None
    personal_number: Optional[str] = None


class ImageQualityResult(BaseModel):
    """
    Image signals. blur_score is an unbounded Laplacian variance,
    brightness and contrast are normalized to [0, 1].
    """

    model_config = ConfigDict(frozen=True)

    blur_score: Optional[float] = None
    blur_likely: bool = False
    brightness: Optional[float] = None
    contrast: Optional[float] = None
    crop_likely: bool = False


class VideoLivenessResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    motion_likely: bool = False
    motion_score: Optional[float] = None


class CountryDocRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    document_type: str
    fields_required: Tuple[str, ...] = ()
    mrz_required: bool = False
    expiry_must_be_future: bool = False


class RuleValidationResult(BaseModel):
    country: str
    document_type: str
    passed: bool
    missing_fields: List[str] = []
    messages: List[str] = []


class Asset(BaseModel):
    """An uploaded file, tagged with its category by the upload layer"""

    name: str
    category: str
    mime_type: Optional[str] = None
    size: int = 0
    file_url: Optional[str] = None
