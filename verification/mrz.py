import logging
import re
from typing import List, Optional, Sequence

from config import MRZ_DATE_REGEX
from .models import MRZRecord

logger = logging.getLogger(__name__)

FILLER = "<"
NAME_SEPARATOR = "<<"

# Candidate line filter
MIN_LINE_LENGTH = 30
MAX_LINE_LENGTH = 44
MIN_FILLER_COUNT = 5

TD3_LINE_LENGTH = 44
TD1_LINE_LENGTH = 30

# TD3 (passport), line 1
TD3_DOCUMENT_TYPE = slice(0, 1)
TD3_ISSUING_COUNTRY = slice(2, 5)
TD3_NAMES = slice(5, None)
# TD3, line 2
TD3_DOCUMENT_NUMBER = slice(0, 9)
TD3_NATIONALITY = slice(10, 13)
TD3_DATE_OF_BIRTH = slice(13, 19)
TD3_SEX = slice(20, 21)
TD3_EXPIRY_DATE = slice(21, 27)
TD3_PERSONAL_NUMBER = slice(28, 42)

# TD1 (ID card), line A
TD1_DOCUMENT_TYPE = slice(0, 1)
TD1_ISSUING_COUNTRY = slice(2, 5)
TD1_DOCUMENT_NUMBER = slice(5, 14)
# TD1, line B
TD1_DATE_OF_BIRTH = slice(0, 6)
TD1_SEX = slice(7, 8)
TD1_EXPIRY_DATE = slice(8, 14)
TD1_NATIONALITY = slice(15, 18)

# Two-digit years up to this value belong to the 2000s
CENTURY_PIVOT = 30

_date_regex = re.compile(MRZ_DATE_REGEX)


def normalize_yymmdd(value: Optional[str]) -> Optional[str]:
    """
    Convert an MRZ YYMMDD date to YYYY-MM-DD.
    Returns None for anything that is not exactly six digits.
    """
    if not value or not _date_regex.match(value):
        return None
    yy = int(value[0:2])
    year = 2000 + yy if yy <= CENTURY_PIVOT else 1900 + yy
    return f"{year}-{value[2:4]}-{value[4:6]}"


def _strip_fillers(value: str) -> Optional[str]:
    return value.replace(FILLER, "") or None


def _clean_name(value: str) -> Optional[str]:
    return re.sub(r"\s+", " ", value.replace(FILLER, " ")).strip() or None


def _split_names(value: str):
    segments = value.split(NAME_SEPARATOR, 1)
    last_name = _clean_name(segments[0])
    given_names = _clean_name(segments[1]) if len(segments) > 1 else None
    return last_name, given_names


class MRZParser:
    """
    Extracts identity fields from OCR text containing a machine-readable zone.

    Supports TD3 (2 x 44, passports) and TD1 (3 x 30, ID cards). Only the
    first matching run of candidate lines is decoded. Check digits are not
    validated.
    """

    def candidate_lines(self, text: str) -> List[str]:
        """Lines shaped like MRZ lines, with all whitespace removed"""
        candidates = []
        for line in re.split(r"\r?\n", text):
            cleaned = re.sub(r"\s", "", line)
            if not cleaned:
                continue
            if (MIN_LINE_LENGTH <= len(cleaned) <= MAX_LINE_LENGTH
                    and cleaned.count(FILLER) >= MIN_FILLER_COUNT):
                candidates.append(cleaned)
        return candidates

    def _first_run(self, candidates: Sequence[str], length: int, size: int) -> Optional[List[str]]:
        for i in range(len(candidates) - size + 1):
            run = list(candidates[i:i + size])
            if all(len(line) == length for line in run):
                return run
        return None

    def parse(self, text: Optional[str]) -> Optional[MRZRecord]:
        if not text:
            return None

        candidates = self.candidate_lines(text)
        if not candidates:
            return None

        td3 = self._first_run(candidates, TD3_LINE_LENGTH, 2)
        if td3:
            logger.debug("TD3 MRZ found")
            return self.parse_td3(*td3)

        td1 = self._first_run(candidates, TD1_LINE_LENGTH, 3)
        if td1:
            logger.debug("TD1 MRZ found")
            return self.parse_td1(*td1)

        logger.debug("MRZ-like lines found but no TD3/TD1 run")
        return None

    def parse_td3(self, line1: str, line2: str) -> MRZRecord:
        last_name, given_names = _split_names(line1[TD3_NAMES])
        return MRZRecord(
            format="TD3",
            document_type=line1[TD3_DOCUMENT_TYPE],
            issuing_country=line1[TD3_ISSUING_COUNTRY],
            last_name=last_name,
            given_names=given_names,
            document_number=_strip_fillers(line2[TD3_DOCUMENT_NUMBER]),
            nationality=line2[TD3_NATIONALITY],
            date_of_birth=normalize_yymmdd(line2[TD3_DATE_OF_BIRTH]),
            sex=line2[TD3_SEX],
            expiry_date=normalize_yymmdd(line2[TD3_EXPIRY_DATE]),
            personal_number=_strip_fillers(line2[TD3_PERSONAL_NUMBER]),
        )

    def parse_td1(self, line_a: str, line_b: str, line_c: str) -> MRZRecord:
        last_name, given_names = _split_names(line_c)
        return MRZRecord(
            format="TD1",
            document_type=_strip_fillers(line_a[TD1_DOCUMENT_TYPE]),
            issuing_country=_strip_fillers(line_a[TD1_ISSUING_COUNTRY]),
            last_name=last_name,
            given_names=given_names,
            document_number=_strip_fillers(line_a[TD1_DOCUMENT_NUMBER]),
            nationality=_strip_fillers(line_b[TD1_NATIONALITY]),
            date_of_birth=normalize_yymmdd(line_b[TD1_DATE_OF_BIRTH]),
            sex=line_b[TD1_SEX],
            expiry_date=normalize_yymmdd(line_b[TD1_EXPIRY_DATE]),
        )
