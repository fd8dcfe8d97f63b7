from flask_login import LoginManager
from flask_wtf.csrf import CSRFProtect
from .services.api_client import ApiClient


login_manager = LoginManager()
login_manager.login_view = "auth.login"
login_manager.login_message = "Please log in to continue."
login_manager.login_message_category = "warning"

csrf = CSRFProtect()
api = ApiClient()
