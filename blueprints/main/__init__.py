"""
Main blueprint: the public landing page.

Composes the catalog, booking form, auth and dashboard overlays, destination
detail navigation and the wishlist toggle. UI state lives in ViewState,
persisted in the Flask session:
- view_state.py - overlay flags, destination cursor, package pager
- forms.py - booking form
"""

from flask import (Blueprint, abort, current_app, flash, redirect, render_template,
                   request, session, url_for)
from flask_login import current_user

from blueprints.main.forms import BookingForm
from blueprints.main.view_state import MODALS, ViewState
from models.booking import create_booking
from models.destination import get_destinations
from models.package import get_packages, get_visible_packages
from models.user import get_session_gateway
from models.wishlist import get_wishlist_ids, toggle_wishlist
from utils.messages import MESSAGES

main_bp = Blueprint('main', __name__)


# =============================================================================
# HELPERS
# =============================================================================

def load_view_state() -> ViewState:
    return ViewState.load(session, page_size=current_app.config.get('PACKAGES_PAGE_SIZE', 3))


def signed_in_user():
    return current_user if current_user.is_authenticated else None


def subscribe_wishlist(state: ViewState):
    """
    Keep state.wishlist_ids in step with the signed-in user.

    Returns:
        Unsubscribe function
    """
    gateway = get_session_gateway()

    def on_change(profile):
        if profile:
            state.set_wishlist(get_wishlist_ids(profile['id'], gateway.access_token()))
        else:
            state.set_wishlist([])

    return gateway.on_session_change(on_change)


def build_booking_form(packages, state, formdata=None):
    form = BookingForm(formdata=formdata) if formdata is not None else BookingForm()
    form.set_package_choices([p['name'] for p in packages])
    if formdata is None:
        user = signed_in_user()
        if state.booking_package:
            form.package.data = state.booking_package
        if user:
            form.name.data = form.name.data or user.display_name
            form.phone.data = form.phone.data or user.phone
    return form


def render_index(state: ViewState, destinations=None, packages=None, booking_form=None, status=200):
    """Render the landing page with every open overlay."""
    from blueprints.auth.forms import LoginForm, RegisterForm
    from blueprints.account.routes import load_dashboard

    destinations = get_destinations() if destinations is None else destinations
    packages = get_packages() if packages is None else packages
    user = signed_in_user()

    selected_index = state.current_destination_index(destinations)
    if state.selected_destination is not None and selected_index < 0:
        state.close_destination()

    context = {
        'state': state,
        'destinations': destinations,
        'packages': packages,
        'visible_packages': get_visible_packages(packages, state.visible_packages),
        'has_more_packages': state.has_more(len(packages)),
        'selected_destination': destinations[selected_index] if selected_index >= 0 else None,
        'user': user,
        'booking_form': None,
        'login_form': None,
        'register_form': None,
        'dashboard': None,
    }

    if state.is_open('booking'):
        context['booking_form'] = booking_form or build_booking_form(packages, state)
    if state.is_open('auth') and user is None:
        context['login_form'] = LoginForm()
        context['register_form'] = RegisterForm()
    if state.is_open('dashboard') and user is not None:
        context['dashboard'] = load_dashboard(user, request.args.get('tab', 'wishlist'))

    state.save(session)
    return render_template('main/index.html', **context), status


# =============================================================================
# LANDING PAGE
# =============================================================================

@main_bp.route('/')
def index():
    """Landing page: destinations, experience, packages."""
    state = load_view_state()
    unsubscribe = subscribe_wishlist(state)
    try:
        return render_index(state)
    finally:
        unsubscribe()


# =============================================================================
# OVERLAYS
# =============================================================================

@main_bp.route('/modal/<name>/open')
def open_modal(name):
    """Open an overlay."""
    if name not in MODALS:
        abort(404)
    state = load_view_state()

    if name == 'dashboard':
        state.open_dashboard(signed_in_user())
    elif name == 'booking':
        state.open_booking(request.args.get('package'))
    else:
        state.open(name)
    state.save(session)

    return redirect(url_for('main.index'))


@main_bp.route('/modal/<name>/close')
def close_modal(name):
    """Close an overlay."""
    if name not in MODALS:
        abort(404)
    state = load_view_state()
    state.close(name)
    state.save(session)
    return redirect(url_for('main.index'))


# =============================================================================
# BOOKING
# =============================================================================

@main_bp.route('/book', methods=['GET'])
def book():
    """Open the booking form, optionally preselecting a package."""
    state = load_view_state()
    state.open_booking(request.args.get('package'))
    state.save(session)
    return redirect(url_for('main.index', _anchor='booking'))


@main_bp.route('/book', methods=['POST'])
def book_submit():
    """Submit the booking form."""
    state = load_view_state()
    state.open('booking')
    packages = get_packages()
    form = build_booking_form(packages, state, formdata=request.form)

    if not form.validate():
        return render_index(state, packages=packages, booking_form=form, status=400)

    user = signed_in_user()
    if create_booking(form.to_booking(), user.id if user else None):
        flash(MESSAGES['booking_created'], 'success')
        state.close('booking')
        state.save(session)
        return redirect(url_for('main.index'))

    flash(MESSAGES['booking_failed'], 'error')
    return render_index(state, packages=packages, booking_form=form, status=502)


# =============================================================================
# DESTINATION DETAIL
# =============================================================================

@main_bp.route('/destinations/<destination_id>')
def destination_detail(destination_id):
    """Open the detail view for one destination."""
    state = load_view_state()
    state.select_destination(destination_id)
    state.save(session)
    return redirect(url_for('main.index', _anchor='destination-detail'))


@main_bp.route('/destinations/navigate/<direction>')
def destination_navigate(direction):
    """Step the detail view to the next or previous destination."""
    if direction not in ('next', 'prev'):
        abort(404)
    state = load_view_state()
    state.navigate_destination(direction, get_destinations())
    state.save(session)
    return redirect(url_for('main.index', _anchor='destination-detail'))


@main_bp.route('/destinations/close')
def destination_close():
    state = load_view_state()
    state.close_destination()
    state.save(session)
    return redirect(url_for('main.index', _anchor='destinations'))


@main_bp.route('/keys/<key>', methods=['POST'])
def key_press(key):
    """Keyboard shortcuts forwarded by the page script."""
    state = load_view_state()
    handled = state.handle_key(key, get_destinations())
    state.save(session)
    if request.accept_mimetypes.best == 'application/json':
        return {'handled': handled, 'selected_destination': state.selected_destination}
    return redirect(url_for('main.index', _anchor='destination-detail'))


# =============================================================================
# PACKAGES & WISHLIST
# =============================================================================

@main_bp.route('/packages/more', methods=['POST'])
def packages_more():
    """Show the next page of packages."""
    state = load_view_state()
    state.load_more(len(get_packages()))
    state.save(session)
    return redirect(url_for('main.index', _anchor='packages'))


@main_bp.route('/wishlist/<package_id>/toggle', methods=['POST'])
def wishlist_toggle(package_id):
    """Heart a package. Signed-out visitors are sent to the auth overlay."""
    state = load_view_state()
    user = signed_in_user()

    if user is None:
        state.open('auth')
        state.save(session)
        flash(MESSAGES['login_required'], 'warning')
        return redirect(url_for('main.index'))

    optimistic = state.apply_wishlist_toggle(package_id)
    result = toggle_wishlist(user.id, package_id, get_session_gateway().access_token())
    state.reconcile_wishlist(package_id, optimistic, result)
    state.save(session)

    if result is None:
        flash(MESSAGES['wishlist_failed'], 'error')
    return redirect(url_for('main.index', _anchor='packages'))
