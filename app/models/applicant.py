# Field layout of the backend's applicant aggregate. Records are plain dicts
# coming from the API; these tuples drive form building and payload shaping.

APPLICANT_FIELDS = (
    "application_no", "date", "full_name", "photo", "full_photo", "passport_photo",
    "passport_no", "passport_type", "place_of_issue", "place_of_birth",
    "date_of_issue", "date_of_expiry", "date_of_birth", "phone_no", "religion",
    "gender", "marital_status", "occupation", "qualification", "region", "city",
    "subcity_zone", "woreda", "house_no",
)

PHOTO_FIELDS = ("photo", "full_photo", "passport_photo")

SPONSOR_VISA_FIELDS = (
    "visa_no", "sponsor_name", "sponsor_phone", "sponsor_address", "sponsor_arabic",
    "sponsor_id", "agent_no", "email", "file_no", "signed_on", "biometric_id",
    "contract_no", "sticker_visa_no", "current_nationality", "labor_id", "visa_type",
)

RELATIVE_FIELDS = (
    "relative_name", "relative_phone", "relative_kinship", "relative_region",
    "city", "subcity_zone", "woreda", "house_no",
)

OTHER_INFORMATION_FIELDS = (
    "contact_person", "contact_phone", "ccc_center_name", "certificate_no",
    "certified_date", "medical_place",
)
OTHER_INFORMATION_FLAGS = ("trip_photographs", "id_card", "relative_id_card")

SKILLS_EXPERIENCE_FIELDS = (
    "english", "arabic", "works_in", "salary", "height", "weight",
    "reference_no", "no_of_children", "remarks",
)
SKILL_FLAGS = (
    "experience_abroad", "ironing", "sewing", "baby_sitting", "old_care",
    "all_cooking", "cleaning", "washing", "cooking",
)

# numbers when parseable, strings otherwise
LOOSE_NUMBER_FIELDS = ("salary", "height", "weight")
STRICT_NUMBER_FIELDS = ("no_of_children",)

# sub-record name -> (text fields, boolean flags)
SECTIONS = {
    "applicant": (APPLICANT_FIELDS, ()),
    "sponsor_visa": (SPONSOR_VISA_FIELDS, ()),
    "relative": (RELATIVE_FIELDS, ()),
    "other_information": (OTHER_INFORMATION_FIELDS, OTHER_INFORMATION_FLAGS),
    "skills_experience": (SKILLS_EXPERIENCE_FIELDS, SKILL_FLAGS),
}

DEFAULT_SELECTION = {"is_active": True, "is_selected": False, "selected_by": None}
