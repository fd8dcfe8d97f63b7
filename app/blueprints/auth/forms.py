from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, SubmitField
from wtforms.validators import DataRequired, EqualTo

class LoginForm(FlaskForm):
    username = StringField("Username", validators=[DataRequired(message="Username is required.")])
    password = PasswordField("Password", validators=[DataRequired(message="Password is required.")])
    submit = SubmitField("Login")

class ForgotPasswordForm(FlaskForm):
    username = StringField("Username", validators=[DataRequired()])
    forgot_key = StringField("Forgot Key", validators=[DataRequired()])
    new_password = PasswordField("New Password", validators=[DataRequired()])
    confirm_password = PasswordField("Confirm Password", validators=[DataRequired(), EqualTo('new_password', message="Passwords do not match.")])
    submit = SubmitField("Reset Password")
