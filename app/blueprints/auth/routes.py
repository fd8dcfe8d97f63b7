from flask import current_app, render_template, request, redirect, url_for, flash
from flask_login import login_user, logout_user
from . import bp
from ...extensions import api
from .forms import LoginForm, ForgotPasswordForm
from ...services import session_store
from ...utils.navigation import safe_next

@bp.route("/login", methods=["GET", "POST"])
def login():
    # the guard sends visitors here with ?next=<where they were going>
    next_url = safe_next(request.args.get("next"))
    if session_store.load() is not None:
        return redirect(next_url or url_for("index"))

    form = LoginForm()
    if form.validate_on_submit():
        result = api.login(form.username.data.strip(), form.password.data)
        if result.ok:
            auth = session_store.from_login_response(result.data, form.username.data.strip())
            session_store.save(auth)
            login_user(auth.user)
            current_app.logger.info("User %s logged in (role=%s)", auth.user.username, auth.user.role)
            flash(result.message or "Login successful", "success")
            return redirect(next_url or url_for("index"))
        current_app.logger.warning("Login failed for %s: %s", form.username.data, result.message)
        flash(result.message or "Login failed", "danger")
    return render_template("login.html", form=form, next_url=next_url)

@bp.route("/logout", methods=["POST"])
def logout():
    session_store.clear()
    logout_user()
    flash("You have been logged out.", "info")
    return redirect(url_for("auth.login"))

@bp.route("/forgot-password", methods=["GET", "POST"])
def forgot_password():
    form = ForgotPasswordForm()
    if form.validate_on_submit():
        result = api.forgot_password(
            form.username.data.strip(),
            form.forgot_key.data,
            form.new_password.data,
            form.confirm_password.data,
        )
        if result.ok:
            flash(result.message or "Password reset successful!", "success")
            return redirect(url_for("auth.login"))
        flash(result.message or "Password reset failed.", "danger")
    return render_template("auth/forgot_password.html", form=form)
