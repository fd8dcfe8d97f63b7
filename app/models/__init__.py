from .user import SessionUser, ROLE_OWNER, ROLE_PARTNER
from .applicant import SECTIONS, DEFAULT_SELECTION
# records themselves are plain dicts from the backend
