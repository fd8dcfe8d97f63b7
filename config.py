import os
from dotenv import load_dotenv
load_dotenv()

class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    API_BASE_URL = os.getenv("API_BASE_URL", "")
    # optional overrides; fall back to API_BASE_URL + /login, /forgot-password
    API_LOGIN_URL = os.getenv("API_LOGIN_URL")
    API_FORGOT_PASSWORD_URL = os.getenv("API_FORGOT_PASSWORD_URL")
    PAGE_SIZE = int(os.getenv("PAGE_SIZE", "10"))
    IMAGE_FIELD_MAX_LENGTH = int(os.getenv("IMAGE_FIELD_MAX_LENGTH", "100"))
    APPLICANT_VALIDATION_POLICY = os.getenv("APPLICANT_VALIDATION_POLICY", "full")
    SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "console_session")
    WTF_CSRF_ENABLED = os.getenv("WTF_CSRF_ENABLED", "true").lower() in ("1", "true", "yes")


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    API_BASE_URL = "http://api.test"
    API_LOGIN_URL = None
    API_FORGOT_PASSWORD_URL = None
    PAGE_SIZE = 10
    IMAGE_FIELD_MAX_LENGTH = 100
    APPLICANT_VALIDATION_POLICY = "full"
    WTF_CSRF_ENABLED = False
