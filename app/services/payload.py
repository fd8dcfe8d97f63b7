"""Shaping of applicant records between the console forms and the backend."""

import math

from ..models.applicant import (
    SECTIONS, PHOTO_FIELDS, LOOSE_NUMBER_FIELDS, STRICT_NUMBER_FIELDS, DEFAULT_SELECTION,
)

# Two rule sets are in use for new applicants; APPLICANT_VALIDATION_POLICY picks one.
VALIDATION_POLICIES = {
    "full": (
        ("applicant", "full_name", "Full name is required."),
        ("applicant", "passport_no", "Passport number is required."),
        ("applicant", "gender", "Gender is required."),
        ("applicant", "date_of_birth", "Date of birth (for age) is required."),
        ("skills_experience", "works_in", "Works in is required."),
        ("applicant", "religion", "Religion is required."),
        ("other_information", "certificate_no", "Labor ID (certificate_no) is required."),
    ),
    "minimal": (
        ("applicant", "full_name", "Full name is required."),
        ("applicant", "date", "Date is required."),
        ("applicant", "application_no", "Application number is required."),
    ),
}
DEFAULT_POLICY = "full"


def _blank(value):
    return value is None or str(value).strip() == ""


def validate_applicant(sections, policy=DEFAULT_POLICY):
    """Return the first failing rule's message, or None."""
    rules = VALIDATION_POLICIES.get(policy) or VALIDATION_POLICIES[DEFAULT_POLICY]
    for section, name, message in rules:
        if _blank((sections.get(section) or {}).get(name)):
            return message
    return None


def _finite(value):
    try:
        n = float(str(value).strip())
    except (TypeError, ValueError):
        return None
    if not math.isfinite(n):
        return None
    return int(n) if n.is_integer() else n


def normalize_number(value):
    """Number when parseable, the original string otherwise, None when empty."""
    if _blank(value):
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    n = _finite(value)
    return n if n is not None else str(value)


def to_number(value):
    """Strict number; an empty string counts as 0, unparseable text as None."""
    if value is None:
        return None
    if str(value).strip() == "":
        return 0
    return _finite(value)


def strip_oversized(record, fields, limit):
    out = dict(record)
    for key in fields:
        v = out.get(key)
        if isinstance(v, str) and len(v) > limit:
            del out[key]
    return out


def build_applicant_payload(sections, selection=None, image_limit=100):
    applicant = strip_oversized(sections.get("applicant") or {}, PHOTO_FIELDS, image_limit)

    skills = dict(sections.get("skills_experience") or {})
    for key in LOOSE_NUMBER_FIELDS:
        skills[key] = normalize_number(skills.get(key))
    for key in STRICT_NUMBER_FIELDS:
        skills[key] = to_number(skills.get(key))
    # unset numbers are left out rather than sent as null
    skills = {k: v for k, v in skills.items()
              if not (k in LOOSE_NUMBER_FIELDS + STRICT_NUMBER_FIELDS and v is None)}

    chosen = dict(DEFAULT_SELECTION)
    chosen.update(selection or {})

    return {
        "applicant": applicant,
        "sponsor_visa": dict(sections.get("sponsor_visa") or {}),
        "relative": dict(sections.get("relative") or {}),
        "other_information": dict(sections.get("other_information") or {}),
        "skills_experience": skills,
        "applicant_selection": chosen,
    }


def _pick(source, keys):
    if not isinstance(source, dict):
        return {}
    return {k: source[k] for k in keys if k in source}


def prefill_sections(record):
    """Split a backend applicant (flat or grouped) into form sections."""
    record = record or {}
    sections = {}
    for name, (fields, flags) in SECTIONS.items():
        keys = fields + flags
        values = {}
        if name == "applicant":
            values.update(_pick(record, keys))
        values.update(_pick(record.get(name), keys))
        sections[name] = values

    selection = dict(DEFAULT_SELECTION)
    selection.update(_pick(record, DEFAULT_SELECTION.keys()))
    selection.update(_pick(record.get("applicant_selection"), DEFAULT_SELECTION.keys()))
    return sections, selection
