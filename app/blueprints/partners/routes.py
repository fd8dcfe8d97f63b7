from flask import current_app, render_template, request, redirect, url_for, flash
from flask_login import login_required
from . import bp
from .forms import PartnerForm, PartnerUpdateForm, DeleteForm
from ...extensions import api
from ...services.api_client import ApiError, as_list
from ...services.listing import filter_users
from ...utils.decorators import admin_required


@bp.route("/add", methods=["GET", "POST"])
@login_required
@admin_required
def add_partner():
    form = PartnerForm()
    if form.validate_on_submit():
        payload = {
            "username": form.username.data.strip(),
            "password": form.password.data,
            "role": form.role.data,
            "forgot_key": form.forgot_key.data,
        }
        result = api.create_user(payload)
        if result.ok:
            flash(result.message or "Partner added successfully!", "success")
            # fresh, empty form
            return redirect(url_for(".add_partner"))
        flash(result.message or "Failed to add partner.", "danger")
    return render_template("partners/add.html", form=form)


@bp.get("/")
@login_required
@admin_required
def list_partners():
    q = request.args.get("q", "")
    rows = []
    try:
        rows = [u for u in as_list(api.list_users()) if isinstance(u, dict)]
    except ApiError as e:
        current_app.logger.warning("Loading users failed: %s", e.message)
        flash(e.message or "Failed to load users", "danger")

    filtered = filter_users(rows, q)
    forms = {
        u.get("username"): PartnerUpdateForm(formdata=None, data={
            "role": u.get("role") or "",
            "current_role": u.get("role") or "",
            "forgot_key": u.get("forgot_key") or "",
        }).keep_role(u.get("role"))
        for u in filtered
    }
    return render_template("partners/list.html", rows=filtered, forms=forms,
                           delete_form=DeleteForm(formdata=None), q=q)


@bp.post("/<username>/update")
@login_required
@admin_required
def update_partner(username):
    form = PartnerUpdateForm().keep_role(request.form.get("current_role"))
    if not form.validate_on_submit():
        flash("Invalid input", "danger")
        return redirect(url_for(".list_partners", q=request.args.get("q") or None))

    payload = {}
    if form.role.data and form.role.data != (form.current_role.data or ""):
        payload["role"] = form.role.data
    if form.password.data:
        payload["password"] = form.password.data
    if form.forgot_key.data:
        payload["forgot_key"] = form.forgot_key.data
    if not payload:
        flash(f"Nothing to update for {username}", "info")
        return redirect(url_for(".list_partners", q=request.args.get("q") or None))
    try:
        api.update_user(username, payload)
        flash(f"User {username} updated", "success")
    except ApiError as e:
        flash(e.message or "Failed to update user", "danger")
    # the list view re-fetches, so the table reflects the server afterwards
    return redirect(url_for(".list_partners", q=request.args.get("q") or None))


@bp.post("/<username>/delete")
@login_required
@admin_required
def delete_partner(username):
    form = DeleteForm()
    if form.validate_on_submit():
        try:
            api.delete_user(username)
            flash(f"User {username} deleted", "success")
        except ApiError as e:
            flash(e.message or "Failed to delete user", "danger")
    return redirect(url_for(".list_partners", q=request.args.get("q") or None))
