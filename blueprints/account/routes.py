"""
Customer account routes: wishlist and booking history.
"""

from flask import Blueprint, flash, redirect, render_template, request, session, url_for
from urllib.parse import urlparse
from flask_login import current_user, login_required

from blueprints.main.view_state import ViewState
from models.booking import get_user_bookings
from models.user import get_session_gateway
from models.wishlist import get_wishlist, toggle_wishlist
from utils.messages import MESSAGES

account_bp = Blueprint('account', __name__)

DASHBOARD_TABS = ('wishlist', 'history')


def load_dashboard(user, tab: str = 'wishlist') -> dict:
    """
    Wishlist and booking history for the dashboard.

    Both reads degrade to empty lists when the backend fails.
    """
    token = get_session_gateway().access_token()
    return {
        'tab': tab if tab in DASHBOARD_TABS else 'wishlist',
        'wishlist': get_wishlist(user.id, token),
        'history': get_user_bookings(user.id, token),
    }


@account_bp.route('/')
@login_required
def dashboard():
    """My adventures: wishlist and booking history tabs."""
    data = load_dashboard(current_user, request.args.get('tab', 'wishlist'))
    return render_template('account/dashboard.html', user=current_user, dashboard=data)


@account_bp.route('/wishlist/<package_id>/remove', methods=['POST'])
@login_required
def wishlist_remove(package_id):
    """Remove a package from the wishlist."""
    result = toggle_wishlist(current_user.id, package_id, get_session_gateway().access_token())

    state = ViewState.load(session)
    state.wishlist_ids.discard(str(package_id))
    state.save(session)

    if result is None:
        flash(MESSAGES['wishlist_failed'], 'error')
    elif result:
        # The row was already gone, so the toggle re-added it; undo that
        toggle_wishlist(current_user.id, package_id, get_session_gateway().access_token())
        flash(MESSAGES['wishlist_removed'], 'success')
    else:
        flash(MESSAGES['wishlist_removed'], 'success')

    next_page = request.form.get('next')
    if not next_page or urlparse(next_page).netloc != '':
        next_page = url_for('account.dashboard')
    return redirect(next_page)
