"""
API routes for JSON endpoints.
Catalog reads, session info and the wishlist toggle for the page script.
"""

from flask import Blueprint, current_app, request, session
from flask_login import current_user

from blueprints.main.view_state import ViewState
from models.destination import get_destinations
from models.package import get_packages
from models.user import get_session_gateway
from models.wishlist import toggle_wishlist
from utils.api_response import api_success, api_error
from utils.messages import MESSAGES

api_bp = Blueprint('api', __name__)


@api_bp.route('/health')
def health_check():
    """
    Health check endpoint (no authentication required).

    Returns:
        JSON with status and version
    """
    return {
        'status': 'ok',
        'version': current_app.config.get('APP_VERSION', '1.0.0'),
        'app': 'UNEXPLORE Himalayas'
    }


@api_bp.route('/destinations')
def api_destinations():
    """Destinations in creation order (empty when the backend is down)."""
    destinations = get_destinations()
    return api_success(data=destinations, count=len(destinations))


@api_bp.route('/packages')
def api_packages():
    """Packages in creation order (empty when the backend is down)."""
    packages = get_packages()
    return api_success(data=packages, count=len(packages))


@api_bp.route('/session')
def api_session():
    """Signed-in profile plus the wishlist ids known to the page."""
    if not current_user.is_authenticated:
        return api_success(data={'user': None, 'wishlist_ids': []})
    state = ViewState.load(session)
    return api_success(data={
        'user': current_user.to_dict(),
        'wishlist_ids': sorted(state.wishlist_ids),
    })


@api_bp.route('/wishlist/toggle', methods=['POST'])
def api_wishlist_toggle():
    """
    Toggle a package in the wishlist.

    Request JSON:
        package_id: Package id

    Returns:
        JSON with in_wishlist (the backend's answer)
    """
    if not current_user.is_authenticated:
        return api_error(MESSAGES['login_required'], status=401)

    payload = request.get_json(silent=True) or {}
    package_id = payload.get('package_id')
    if not package_id:
        return api_error('package_id is required', status=400)

    state = ViewState.load(session)
    optimistic = state.apply_wishlist_toggle(package_id)
    result = toggle_wishlist(current_user.id, package_id, get_session_gateway().access_token())
    actual = state.reconcile_wishlist(package_id, optimistic, result)
    state.save(session)

    if result is None:
        return api_error(MESSAGES['wishlist_failed'], status=502, in_wishlist=actual)
    return api_success(data={'package_id': str(package_id), 'in_wishlist': actual})
