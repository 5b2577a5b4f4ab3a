import logging
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple
from config import COUNTRY_RULES, EXPIRY_DATE_FORMATS
from .models import CountryDocRule, RuleValidationResult

logger = logging.getLogger(__name__)

MRZ_MISSING_MESSAGE = "MRZ required but not found"
EXPIRED_MESSAGE = "Document expired"


def load_country_rules(raw: Mapping[str, List[Dict[str, Any]]]) -> Mapping[str, Tuple[CountryDocRule, ...]]:
    """Build the read-only rule table from its config representation"""
    return MappingProxyType({
        country: tuple(
            CountryDocRule(
                document_type=rule["document_type"],
                fields_required=tuple(rule.get("fields_required", ())),
                mrz_required=rule.get("mrz_required", False),
                expiry_must_be_future=rule.get("expiry_must_be_future", False)
            )
            for rule in rules
        )
        for country, rules in raw.items()
    })


RULES = load_country_rules(COUNTRY_RULES)


def parse_expiry(value: str) -> Optional[datetime]:
    """Parse an expiry date; returns None when the format is not recognised"""
    if not isinstance(value, str):
        return None
    for fmt in EXPIRY_DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    # Compare in local naive time
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


class CountryRuleValidator:
    """
    Validates extracted document fields against per-country policies
    """

    def __init__(self, rules: Optional[Mapping[str, Tuple[CountryDocRule, ...]]] = None):
        self.rules = RULES if rules is None else rules

    def supported_countries(self) -> List[str]:
        return sorted(self.rules)

    def rules_for(self, country: str) -> Tuple[CountryDocRule, ...]:
        return self.rules.get(country, ())

    def find_rule(self, country: str, document_type: str) -> Optional[CountryDocRule]:
        for rule in self.rules_for(country):
            if rule.document_type == document_type:
                return rule
        return None

    def is_expired(self, expiry_date: Optional[str], now: Optional[datetime] = None) -> bool:
        """Unparseable dates are treated as not expired"""
        if not expiry_date:
            return False
        expiry = parse_expiry(expiry_date)
        if expiry is None:
            logger.debug("Unparseable expiry date %r treated as valid", expiry_date)
            return False
        return expiry < (now or datetime.now())

    def validate(self,
                 country: str,
                 document_type: str,
                 fields: Mapping[str, Optional[str]],
                 mrz_present: bool) -> Optional[RuleValidationResult]:
        """
        Returns None when no rule governs this country/document type
        """
        rule = self.find_rule(country, document_type)
        if rule is None:
            return None

        missing = [field for field in rule.fields_required if not fields.get(field)]

        messages = []
        if rule.mrz_required and not mrz_present:
            messages.append(MRZ_MISSING_MESSAGE)
        if rule.expiry_must_be_future and self.is_expired(fields.get("expiry_date")):
            messages.append(EXPIRED_MESSAGE)

        passed = not missing and not messages
        logger.info(
            "Country rules %s/%s: passed=%s missing=%s messages=%s",
            country, document_type, passed, missing, messages
        )
        return RuleValidationResult(
            country=country,
            document_type=document_type,
            passed=passed,
            missing_fields=missing,
            messages=messages
        )
