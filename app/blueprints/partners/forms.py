from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, SelectField, HiddenField, SubmitField
from wtforms.validators import DataRequired, Optional

ROLE_CHOICES = [("admin", "Admin"), ("user", "User")]

class PartnerForm(FlaskForm):
    username = StringField("Username", validators=[DataRequired(message="All fields are required.")])
    password = PasswordField("Password", validators=[DataRequired(message="All fields are required.")])
    role = SelectField("Role", choices=ROLE_CHOICES, default="user", validators=[DataRequired()])
    forgot_key = StringField("Forgot Key", validators=[DataRequired(message="All fields are required.")])
    submit = SubmitField("Add Partner")

class PartnerUpdateForm(FlaskForm):
    # one of these per table row; blank password keeps the current one
    password = StringField("Password", validators=[Optional()], render_kw={"placeholder": "New password"})
    role = SelectField("Role", choices=ROLE_CHOICES)
    # role as rendered; the backend only gets a role the owner actually changed
    current_role = HiddenField()
    forgot_key = StringField("Forgot Key", validators=[Optional()], render_kw={"placeholder": "Forgot key"})
    submit = SubmitField("Save")

    def keep_role(self, role):
        """Offer ``role`` even when it is not a standard choice, so it stays selected."""
        role = role or ""
        if role not in dict(self.role.choices):
            self.role.choices = [(role, role.title() or "-")] + list(self.role.choices)
        return self

class DeleteForm(FlaskForm):
    submit = SubmitField("Delete")
