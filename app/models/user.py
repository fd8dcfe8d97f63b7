from flask_login import UserMixin

ROLE_OWNER = "admin"
ROLE_PARTNER = "user"
ROLES = (ROLE_OWNER, ROLE_PARTNER)
ROLE_LABELS = {ROLE_OWNER: "Owner", ROLE_PARTNER: "Partner"}


class SessionUser(UserMixin):
    """Console user rebuilt from the stored auth record.

    Accounts live in the backend; nothing here is persisted locally.
    """

    def __init__(self, username, role=None, id=None):
        self.id = id
        self.username = username or ""
        self.role = role or ""

    def get_id(self):
        # backend ids are not always known client-side; username is
        return self.username

    @property
    def is_owner(self):
        return self.role == ROLE_OWNER

    @property
    def is_partner(self):
        return self.role == ROLE_PARTNER

    @property
    def role_label(self):
        return ROLE_LABELS.get(self.role, self.role or "-")

    def to_dict(self):
        d = {"username": self.username, "role": self.role}
        if self.id is not None:
            d["id"] = self.id
        return d

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            return None
        return cls(username=data.get("username"), role=data.get("role"), id=data.get("id"))

    def __repr__(self) -> str:
        return f"<SessionUser id={self.id} username={self.username!r} role={self.role!r}>"
