from enum import Enum
from typing import Any, Dict
from .models import Asset


class DocumentProfile(str, Enum):
    INVOICE = "invoice"
    PASSPORT = "passport"
    UNKNOWN = "unknown"


INVOICE_KEYWORDS = ("invoice",)
PASSPORT_KEYWORDS = ("passport", "license", "id", "national")

# Filename screening used when no vision analysis is available
NON_GOVERNMENT_KEYWORDS = ("invoice", "receipt", "bill", "certificate")
GOVERNMENT_ID_KEYWORDS = PASSPORT_KEYWORDS

REJECT = "REJECT"
GOVERNMENT_ID = "government_id"


class DocumentClassifier:
    """Maps a document asset onto the profile used to assemble its analysis"""

    def classify(self, asset: Asset) -> DocumentProfile:
        raise NotImplementedError


class FilenameClassifier(DocumentClassifier):
    """Classifies by keywords in the uploaded file name"""

    def classify(self, asset: Asset) -> DocumentProfile:
        name = asset.name.lower()
        if any(keyword in name for keyword in INVOICE_KEYWORDS):
            return DocumentProfile.INVOICE
        if any(keyword in name for keyword in PASSPORT_KEYWORDS):
            return DocumentProfile.PASSPORT
        return DocumentProfile.UNKNOWN


def screen_filename(file_name: str) -> Dict[str, Any]:
    """
    Guess whether a file is a government ID from its name alone.
    Unknown names are rejected.
    """
    name = file_name.lower()

    if any(keyword in name for keyword in NON_GOVERNMENT_KEYWORDS):
        return {
            "doc_type_guess": REJECT,
            "notes": f"Document rejected based on filename: {file_name} - appears to be a non-government ID document"
        }

    if any(keyword in name for keyword in GOVERNMENT_ID_KEYWORDS):
        return {
            "doc_type_guess": GOVERNMENT_ID,
            "notes": f"Document accepted based on filename: {file_name} - appears to be a government ID"
        }

    return {
        "doc_type_guess": REJECT,
        "notes": f"Document rejected: {file_name} - unable to determine document type"
    }
