from flask_wtf import FlaskForm
from flask_wtf.file import FileField, FileAllowed
from wtforms import Form, StringField, TextAreaField, BooleanField, HiddenField, FormField, SubmitField
from ...models.applicant import (
    APPLICANT_FIELDS, PHOTO_FIELDS, SPONSOR_VISA_FIELDS, RELATIVE_FIELDS,
    OTHER_INFORMATION_FIELDS, OTHER_INFORMATION_FLAGS, SKILLS_EXPERIENCE_FIELDS, SKILL_FLAGS,
)
from ...services.payload import validate_applicant, DEFAULT_POLICY

DATE_FIELDS = {"date", "date_of_issue", "date_of_expiry", "date_of_birth", "signed_on", "certified_date"}
NUMBER_FIELDS = {"salary", "height", "weight", "no_of_children"}
LABELS = {
    "application_no": "Application No",
    "phone_no": "Phone No",
    "passport_no": "Passport No",
    "subcity_zone": "Subcity/Zone",
    "house_no": "House No",
    "visa_no": "Visa No",
    "sponsor_id": "Sponsor ID",
    "agent_no": "Agent No",
    "file_no": "File No",
    "biometric_id": "Biometric ID",
    "contract_no": "Contract No",
    "sticker_visa_no": "Sticker Visa No",
    "labor_id": "Labor ID",
    "relative_kinship": "Kinship",
    "relative_region": "Region",
    "ccc_center_name": "CCC Center Name",
    "certificate_no": "Certificate No (Labor ID)",
    "id_card": "ID Card",
    "relative_id_card": "Relative ID Card",
    "height": "Height (cm)",
    "weight": "Weight (kg)",
    "no_of_children": "No. of Children",
}


def _label(name):
    return LABELS.get(name, name.replace("_", " ").title())


def _field(name):
    if name in PHOTO_FIELDS:
        return HiddenField(_label(name))
    if name == "remarks":
        return TextAreaField(_label(name), render_kw={"rows": 3})
    kw = {}
    if name in DATE_FIELDS:
        kw["type"] = "date"
    elif name in NUMBER_FIELDS:
        kw["inputmode"] = "decimal"
    elif name == "email":
        kw["type"] = "email"
    return StringField(_label(name), render_kw=kw or None)


def section_form(class_name, fields, flags=()):
    """Build a plain sub-form class for one sub-record of the applicant."""
    attrs = {name: _field(name) for name in fields}
    for name in flags:
        attrs[name] = BooleanField(_label(name))
    return type(class_name, (Form,), attrs)


ApplicantSection = section_form("ApplicantSection", APPLICANT_FIELDS)
SponsorVisaSection = section_form("SponsorVisaSection", SPONSOR_VISA_FIELDS)
RelativeSection = section_form("RelativeSection", RELATIVE_FIELDS)
OtherInformationSection = section_form("OtherInformationSection", OTHER_INFORMATION_FIELDS, OTHER_INFORMATION_FLAGS)
SkillsExperienceSection = section_form("SkillsExperienceSection", SKILLS_EXPERIENCE_FIELDS, SKILL_FLAGS)

IMAGES = FileAllowed(["jpg", "jpeg", "png", "gif", "webp"], "Images only.")


class ApplicantForm(FlaskForm):
    applicant = FormField(ApplicantSection, label="Applicant")
    sponsor_visa = FormField(SponsorVisaSection, label="Sponsor & Visa")
    relative = FormField(RelativeSection, label="Relative")
    other_information = FormField(OtherInformationSection, label="Other Information")
    skills_experience = FormField(SkillsExperienceSection, label="Skills & Experience")
    is_active = BooleanField("Active", default=True)
    is_selected = BooleanField("Selected")
    photo_upload = FileField("Passport size", validators=[IMAGES])
    full_photo_upload = FileField("Full size", validators=[IMAGES])
    passport_photo_upload = FileField("Passport photo", validators=[IMAGES])
    submit = SubmitField("Save")

    SECTION_NAMES = ("applicant", "sponsor_visa", "relative", "other_information", "skills_experience")

    def __init__(self, *args, policy=DEFAULT_POLICY, **kwargs):
        super().__init__(*args, **kwargs)
        self.policy = policy

    def sections(self):
        return {name: dict(getattr(self, name).data or {}) for name in self.SECTION_NAMES}

    def validate(self, extra_validators=None):
        if not super().validate(extra_validators=extra_validators):
            return False
        message = validate_applicant(self.sections(), self.policy)
        if message:
            self.form_errors.append(message)
            return False
        return True


class RowActionForm(FlaskForm):
    applicant_id = HiddenField()
    passport_no = HiddenField()
    user_id = HiddenField()
    next = HiddenField()
