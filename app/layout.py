from .models.user import ROLE_OWNER

OWNER_MENU = (
    ("Dashboard", "index"),
    ("Add Partner", "partners.add_partner"),
    ("Partner List", "partners.list_partners"),
    ("Create Cv", "cvs.create_cv"),
    ("Cv Lists", "cvs.list_cvs"),
    ("Selected Cvs", "cvs.selected_cvs"),
    ("Inactive Cvs", "cvs.inactive_cvs"),
)

PARTNER_MENU = (
    ("Dashboard", "index"),
    ("Cv Lists", "cvs.list_cvs"),
    ("Selected Cvs", "cvs.selected_cvs"),
)


def menu_for(role):
    """Sidebar entries as (label, endpoint) pairs for the given role."""
    if role == ROLE_OWNER:
        return list(OWNER_MENU)
    return list(PARTNER_MENU)
