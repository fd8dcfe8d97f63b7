import base64

from flask import current_app, render_template, request, redirect, url_for, flash
from flask_login import login_required
from . import bp
from .forms import ApplicantForm, RowActionForm
from ...extensions import api
from ...services import listing, session_store
from ...services.api_client import ApiError, as_list
from ...services.identifiers import IdentifierResolver
from ...services.metrics import gather
from ...services.payload import build_applicant_payload, prefill_sections
from ...utils.decorators import admin_required
from ...utils.navigation import redirect_back


def _resolver():
    return IdentifierResolver(api)


def _page_size():
    return current_app.config.get("PAGE_SIZE", 10)


def _load_applicants():
    try:
        return [r for r in as_list(api.list_applicants()) if isinstance(r, dict)]
    except ApiError as e:
        current_app.logger.warning("Loading applicants failed: %s", e.message)
        flash(e.message or "Failed to load", "danger")
        return []


def _own_user_id(auth):
    """Partner's backend id, looked up once and cached into the session."""
    if auth.user.id is not None:
        return auth.user.id
    user_id = _resolver().resolve_user_id(auth.user.username)
    if user_id is not None:
        session_store.remember_user_id(user_id)
    return user_id


def _list_filters():
    return {
        "q": request.args.get("q", "").strip(),
        "gender": request.args.get("gender", "").strip(),
        "religion": request.args.get("religion", "").strip(),
        "works": request.args.get("works", "").strip(),
    }


# --- lists ----------------------------------------------------------------

@bp.get("/")
@login_required
def list_cvs():
    auth = session_store.load()
    rows = _load_applicants()
    listable = [r for r in rows if listing.is_listable(r)]
    filters = _list_filters()
    filtered = listing.filter_applicants(listable, **filters)
    pagination = listing.Page(filtered, request.args.get("page", 1), _page_size())
    options = {
        "genders": listing.distinct_values(listable, lambda r: listing.field(r, "gender")),
        "religions": listing.distinct_values(listable, lambda r: listing.field(r, "religion")),
        "works": listing.distinct_values(listable, listing.works_in),
    }
    return render_template("cvs/list.html", pagination=pagination, filters=filters,
                           options=options, is_owner=auth.user.is_owner,
                           action_form=RowActionForm(formdata=None))


@bp.get("/selected")
@login_required
def selected_cvs():
    auth = session_store.load()
    is_owner = auth.user.is_owner
    rows, partners = [], []
    partner_filter = request.args.get("partner", "all")

    try:
        if is_owner:
            results, errors = gather({"selected": api.selected_applicants, "partners": api.list_partners})
            if errors:
                raise next(iter(errors.values()))
            rows = as_list(results.get("selected"))
            partners = [p for p in as_list(results.get("partners")) if isinstance(p, dict)]
        else:
            user_id = _own_user_id(auth)
            if user_id is None:
                raise ApiError("Could not determine your partner id")
            rows = as_list(api.selected_by_user(user_id))
    except ApiError as e:
        current_app.logger.warning("Loading selected applicants failed: %s", e.message)
        flash(e.message or "Failed to load", "danger")

    rows = [r for r in rows if isinstance(r, dict)]
    partner_map = {str(p["id"]): p.get("username") or str(p["id"]) for p in partners if p.get("id") is not None}
    if is_owner and partner_filter != "all":
        rows = [r for r in rows if str(listing.selected_by(r)) == partner_filter]

    pagination = listing.Page(rows, request.args.get("page", 1), _page_size())
    return render_template("cvs/selected.html", pagination=pagination, is_owner=is_owner,
                           partners=partners, partner_map=partner_map, partner_filter=partner_filter,
                           action_form=RowActionForm(formdata=None))


@bp.get("/inactive")
@login_required
@admin_required
def inactive_cvs():
    q = request.args.get("q", "").strip()
    rows = listing.filter_applicants(_load_applicants(), q=q, status="inactive")
    pagination = listing.Page(rows, request.args.get("page", 1), _page_size())
    return render_template("cvs/inactive.html", pagination=pagination, q=q,
                           action_form=RowActionForm(formdata=None))


# --- create / edit --------------------------------------------------------

def _attach_uploads(form, sections):
    for name in ("photo", "full_photo", "passport_photo"):
        upload = getattr(form, f"{name}_upload").data
        if upload and getattr(upload, "filename", ""):
            encoded = base64.b64encode(upload.read()).decode("ascii")
            mimetype = getattr(upload, "mimetype", None) or "application/octet-stream"
            sections["applicant"][name] = f"data:{mimetype};base64,{encoded}"
    return sections


def _payload_from(form):
    sections = _attach_uploads(form, form.sections())
    selection = {"is_active": bool(form.is_active.data), "is_selected": bool(form.is_selected.data)}
    return build_applicant_payload(sections, selection,
                                   image_limit=current_app.config.get("IMAGE_FIELD_MAX_LENGTH", 100))


@bp.route("/create", methods=["GET", "POST"])
@login_required
@admin_required
def create_cv():
    policy = current_app.config.get("APPLICANT_VALIDATION_POLICY", "full")
    form = ApplicantForm(policy=policy)
    if form.validate_on_submit():
        result = api.create_applicant(_payload_from(form))
        if result.ok:
            flash(result.message or "CV created successfully!", "success")
            return redirect(url_for(".create_cv"))
        flash(result.message or "Failed to create CV", "danger")
    return render_template("cvs/form.html", form=form, edit_mode=False)


@bp.route("/<passport>/edit", methods=["GET", "POST"])
@login_required
@admin_required
def edit_cv(passport):
    policy = current_app.config.get("APPLICANT_VALIDATION_POLICY", "full")
    resolver = _resolver()
    try:
        record = resolver.find_by_passport(passport)
    except ApiError as e:
        flash(e.message or "Failed to load", "danger")
        return redirect(url_for(".list_cvs"))
    if record is None:
        flash("Applicant not found", "warning")
        return redirect(url_for(".list_cvs"))

    sections, selection = prefill_sections(record)
    form = ApplicantForm(policy=policy, data={**sections, "is_active": selection["is_active"],
                                              "is_selected": selection["is_selected"]})
    # passport number is the business key and is not editable here
    form.applicant.form.passport_no.data = passport

    if form.validate_on_submit():
        payload = _payload_from(form)
        payload["applicant"]["passport_no"] = passport
        payload["applicant_selection"]["selected_by"] = selection.get("selected_by")
        try:
            result = resolver.update_applicant(payload, original_passport=passport,
                                               application_no=payload["applicant"].get("application_no"))
            flash(result.message or "CV updated successfully!", "success")
        except ApiError as e:
            flash(e.message or "An error occurred. Please try again.", "danger")
    return render_template("cvs/form.html", form=form, edit_mode=True, passport=passport)


# --- row actions ----------------------------------------------------------

def _as_id(value):
    value = (value or "").strip()
    return int(value) if value.isdigit() else (value or None)


def _row_id(form):
    row = {"id": _as_id(form.applicant_id.data), "passport_no": form.passport_no.data or None}
    applicant_id = _resolver().resolve_applicant_id(row)
    if applicant_id is None:
        raise ApiError("Missing id")
    return applicant_id


@bp.post("/select")
@login_required
def toggle_selection():
    """Select or unselect; the backend flips the state on every call."""
    form = RowActionForm()
    if not form.validate_on_submit():
        flash("Invalid request", "danger")
        return redirect_back(".list_cvs")
    auth = session_store.load()
    try:
        applicant_id = _row_id(form)
        if auth.user.is_owner:
            # owners act for the partner who made the selection
            user_id = _as_id(form.user_id.data)
        else:
            user_id = _own_user_id(auth)
        if user_id is None:
            raise ApiError("Missing ids")
        api.select_applicant(applicant_id, user_id)
        flash("Selection updated", "success")
    except ApiError as e:
        flash(e.message or "Failed to update selection", "danger")
    return redirect_back(".list_cvs")


@bp.post("/toggle-active")
@login_required
@admin_required
def toggle_active():
    form = RowActionForm()
    if form.validate_on_submit():
        try:
            api.toggle_active(_row_id(form))
            flash("Applicant status updated", "success")
        except ApiError as e:
            flash(e.message or "Failed to update status", "danger")
    return redirect_back(".list_cvs")


@bp.post("/delete")
@login_required
@admin_required
def delete_cv():
    form = RowActionForm()
    if form.validate_on_submit():
        try:
            api.delete_applicant(_row_id(form))
            flash("Applicant deleted", "success")
        except ApiError as e:
            flash(e.message or "Failed to delete", "danger")
    return redirect_back(".list_cvs")
