"""Client-side filtering and paging for backend collections.

The backend returns whole collections; the console narrows them down here.
Rows are plain dicts and may be flat (``row["full_name"]``) or grouped
(``row["applicant"]["full_name"]``), so every accessor looks in both places.
"""

from datetime import date, datetime
import math


def _section(row, name):
    value = row.get(name) if isinstance(row, dict) else None
    return value if isinstance(value, dict) else {}


def field(row, name, section="applicant"):
    if not isinstance(row, dict):
        return None
    value = row.get(name)
    if value is None:
        value = _section(row, section).get(name)
    return value


def applicant_id(row):
    if not isinstance(row, dict):
        return None
    for key in ("id", "applicant_id", "pk"):
        if row.get(key) is not None:
            return row[key]
    inner = _section(row, "applicant")
    for key in ("id", "applicant_id", "pk"):
        if inner.get(key) is not None:
            return inner[key]
    return None


def passport_no(row):
    return field(row, "passport_no")


def full_name(row):
    return field(row, "full_name")


def labor_id(row):
    return _section(row, "other_information").get("certificate_no")


def works_in(row):
    return _section(row, "skills_experience").get("works_in")


def status_flag(row, name):
    return field(row, name, section="applicant_selection")


def is_listable(row):
    return status_flag(row, "is_active") is not False and status_flag(row, "is_selected") is not True


def is_inactive(row):
    return status_flag(row, "is_active") is False


def is_selected(row):
    return status_flag(row, "is_selected") is True


def selected_by(row):
    return status_flag(row, "selected_by")


def _parse_date(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None
    s = str(value)[:10]
    try:
        return datetime.strptime(s, "%Y-%m-%d").date()
    except ValueError:
        return None


def age_from_dob(row, today=None):
    dob = _parse_date(field(row, "date_of_birth") or field(row, "dob"))
    if dob is None:
        return "-"
    today = today or date.today()
    age = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        age -= 1
    return str(age) if age >= 0 else "-"


def experience_label(row):
    text = row.get("experience") if isinstance(row, dict) else None
    if isinstance(text, str) and text.strip():
        return text
    abroad = _section(row, "skills_experience").get("experience_abroad")
    if isinstance(abroad, bool):
        return "Abroad" if abroad else "None"
    return "-"


def matches_search(row, q):
    q = (q or "").strip().lower()
    if not q:
        return True
    for value in (full_name(row), passport_no(row), labor_id(row)):
        if value and q in str(value).lower():
            return True
    return False


def _eq(a, b):
    return str(a or "").strip().lower() == str(b or "").strip().lower()


def filter_applicants(rows, q=None, gender=None, religion=None, works=None, status=None):
    """Compose the search box, the categorical filters and a status partition.

    ``status`` is one of ``"listable"``, ``"inactive"``, ``"selected"`` or None.
    """
    partitions = {"listable": is_listable, "inactive": is_inactive, "selected": is_selected}
    keep = partitions.get(status)
    out = []
    for row in rows:
        if keep and not keep(row):
            continue
        if gender and not _eq(field(row, "gender"), gender):
            continue
        if religion and not _eq(field(row, "religion"), religion):
            continue
        if works and not _eq(works_in(row), works):
            continue
        if not matches_search(row, q):
            continue
        out.append(row)
    return out


def distinct_values(rows, getter):
    seen = {}
    for row in rows:
        v = getter(row)
        if v is None or str(v).strip() == "":
            continue
        seen.setdefault(str(v).strip().lower(), str(v).strip())
    return sorted(seen.values(), key=str.lower)


def filter_users(rows, q):
    q = (q or "").strip().lower()
    if not q:
        return list(rows)
    return [
        u for u in rows
        if q in ("" if u.get("id") is None else str(u["id"]))
        or q in (u.get("username") or "").lower()
        or q in (u.get("role") or "").lower()
    ]


class Page:
    """One page of an in-memory list; attribute names follow Flask-SQLAlchemy's Pagination."""

    def __init__(self, items, page=1, per_page=10):
        self.total = len(items)
        self.per_page = max(int(per_page or 1), 1)
        self.pages = max(math.ceil(self.total / self.per_page), 1)
        try:
            page = int(page)
        except (TypeError, ValueError):
            page = 1
        self.page = min(max(page, 1), self.pages)
        start = (self.page - 1) * self.per_page
        self.items = items[start:start + self.per_page]
        self.first_index = start + 1

    @property
    def has_prev(self):
        return self.page > 1

    @property
    def has_next(self):
        return self.page < self.pages

    @property
    def prev_num(self):
        return self.page - 1 if self.has_prev else None

    @property
    def next_num(self):
        return self.page + 1 if self.has_next else None

    def __repr__(self):
        return f"<Page {self.page}/{self.pages} total={self.total}>"
