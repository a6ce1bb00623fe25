"""
Authentication routes: login, register, logout.
Customer accounts live in the hosted auth service; see models.user.
"""

from flask import render_template, redirect, url_for, flash, request, Blueprint, session
from flask_login import login_user, logout_user, current_user
from urllib.parse import urlparse

from backend import AuthError
from blueprints.auth.forms import LoginForm, RegisterForm
from blueprints.main.view_state import ViewState
from models.user import User, get_session_gateway
from utils.messages import MESSAGES

auth_bp = Blueprint('auth', __name__)


def _close_auth_overlay():
    state = ViewState.load(session)
    state.close('auth')
    state.save(session)


def _next_page():
    next_page = request.args.get('next')
    if not next_page or urlparse(next_page).netloc != '':
        next_page = url_for('main.index')
    return next_page


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    """
    Login route with form handling.

    GET: Display login form
    POST: Process login credentials
    """
    if current_user.is_authenticated:
        return redirect(url_for('main.index'))

    form = LoginForm()

    if form.validate_on_submit():
        try:
            profile = get_session_gateway().sign_in(form.username.data, form.password.data)
        except AuthError as e:
            flash(e.message or MESSAGES['auth_failed'], 'error')
            return render_template('auth/login.html', form=form), 401

        user = User(profile)
        login_user(user)
        _close_auth_overlay()

        flash(MESSAGES['login_success'].format(name=user.display_name), 'success')
        return redirect(_next_page())

    return render_template('auth/login.html', form=form)


@auth_bp.route('/register', methods=['GET', 'POST'])
def register():
    """
    Registration route.

    If the auth service returns a session right away the visitor is signed
    in; otherwise they confirm by email and log in afterwards.
    """
    if current_user.is_authenticated:
        return redirect(url_for('main.index'))

    form = RegisterForm()

    if form.validate_on_submit():
        gateway = get_session_gateway()
        try:
            gateway.sign_up(
                username=form.username.data,
                password=form.password.data,
                full_name=form.full_name.data,
                address=form.address.data or '',
                phone=form.phone.data or ''
            )
        except AuthError as e:
            flash(e.message or MESSAGES['auth_failed'], 'error')
            return render_template('auth/register.html', form=form), 400

        _close_auth_overlay()
        profile = gateway.current_profile()
        if profile:
            user = User(profile)
            login_user(user)
            flash(MESSAGES['register_success'].format(name=user.display_name), 'success')
            return redirect(_next_page())

        flash(MESSAGES['register_confirm'], 'info')
        return redirect(url_for('auth.login'))

    return render_template('auth/register.html', form=form)


@auth_bp.route('/logout', methods=['GET', 'POST'])
def logout():
    """Sign out of the customer account."""
    get_session_gateway().sign_out()
    logout_user()

    state = ViewState.load(session)
    state.close('dashboard')
    state.set_wishlist([])
    state.save(session)

    flash(MESSAGES['logout_success'], 'success')
    return redirect(url_for('main.index'))
