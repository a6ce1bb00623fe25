"""
Admin console routes.
Bookings, users, destinations and packages CRUD behind the admin flag.
"""

from flask import render_template, redirect, url_for, flash, request, Blueprint

from backend import seed_catalog
from blueprints.admin.forms import (AdminLoginForm, BookingStatusForm, DestinationForm,
                                    PackageForm, UserEditForm)
from blueprints.admin.services import (check_admin_credentials, admin_login, admin_logout,
                                       get_dashboard_summary)
from models.booking import (get_all_bookings, filter_bookings, update_booking_status,
                            delete_booking)
from models.destination import (get_destinations, find_destination_index, save_destination,
                                delete_destination, build_preview_data_url)
from models.package import get_packages, get_package_by_id, save_package, delete_package, format_features
from models.user import get_all_profiles, update_profile, update_password
from utils.decorators import admin_required, is_admin_session
from utils.messages import MESSAGES

admin_bp = Blueprint('admin', __name__)


# =============================================================================
# GATE
# =============================================================================

@admin_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Admin gate: compare against the configured credential pair."""
    if is_admin_session():
        return redirect(url_for('admin.index'))

    form = AdminLoginForm()
    error = None

    if form.validate_on_submit():
        if check_admin_credentials(form.username.data, form.password.data):
            admin_login()
            flash(MESSAGES['admin_login_success'], 'success')
            return redirect(url_for('admin.index'))
        error = MESSAGES['invalid_credentials']

    status = 401 if error else 200
    return render_template('admin/login.html', form=form, error=error), status


@admin_bp.route('/logout', methods=['GET', 'POST'])
def logout():
    admin_logout()
    flash(MESSAGES['admin_logout_success'], 'success')
    return redirect(url_for('main.index'))


@admin_bp.route('/')
@admin_required
def index():
    """Admin landing page with summary counts."""
    bookings = get_all_bookings()
    summary = get_dashboard_summary(bookings, get_all_profiles(), get_destinations(), get_packages())
    return render_template('admin/dashboard.html', stats=summary, recent=bookings[:5])


@admin_bp.route('/seed', methods=['POST'])
@admin_required
def seed():
    """Insert the fallback catalog. Not idempotent: repeats duplicate rows."""
    destinations, packages = seed_catalog()
    if destinations or packages:
        flash(MESSAGES['seed_success'].format(destinations=destinations, packages=packages), 'success')
    else:
        flash(MESSAGES['seed_failed'], 'error')
    if request.form.get('return_to') == 'packages':
        return redirect(url_for('admin.packages'))
    return redirect(url_for('admin.destinations'))


# =============================================================================
# BOOKINGS
# =============================================================================

@admin_bp.route('/bookings')
@admin_required
def bookings():
    """List bookings, filtered by name or package."""
    search = request.args.get('search', '').strip()
    all_bookings = get_all_bookings()
    return render_template(
        'admin/bookings.html',
        bookings=filter_bookings(all_bookings, search),
        total=len(all_bookings),
        search=search,
        status_form=BookingStatusForm()
    )


@admin_bp.route('/bookings/<booking_id>/status', methods=['POST'])
@admin_required
def bookings_status(booking_id):
    """Change one booking's status."""
    form = BookingStatusForm()
    if form.validate_on_submit() and update_booking_status(booking_id, form.status.data):
        flash(MESSAGES['booking_updated'], 'success')
    else:
        flash(MESSAGES['status_update_failed'], 'error')
    return redirect(url_for('admin.bookings', search=request.args.get('search', '')))


@admin_bp.route('/bookings/<booking_id>/delete', methods=['POST'])
@admin_required
def bookings_delete(booking_id):
    if delete_booking(booking_id):
        flash(MESSAGES['booking_deleted'], 'success')
    else:
        flash(MESSAGES['booking_delete_failed'], 'error')
    return redirect(url_for('admin.bookings'))


# =============================================================================
# USERS
# =============================================================================

@admin_bp.route('/users')
@admin_required
def users():
    """List all customer profiles."""
    search = request.args.get('search', '').strip()
    profiles = get_all_profiles()

    if search:
        search_lower = search.lower()
        profiles = [p for p in profiles if
                    search_lower in (p.get('username') or '').lower() or
                    search_lower in (p.get('full_name') or '').lower() or
                    search_lower in (p.get('phone') or '').lower()]

    return render_template('admin/users.html', users=profiles, search=search)


@admin_bp.route('/users/<user_id>/edit', methods=['GET', 'POST'])
@admin_required
def users_edit(user_id):
    """Edit a profile's name, address and phone."""
    profile = next((p for p in get_all_profiles() if str(p.get('id')) == user_id), None)
    if profile is None:
        flash('User not found', 'error')
        return redirect(url_for('admin.users'))

    form = UserEditForm(data=profile) if request.method == 'GET' else UserEditForm()

    if form.validate_on_submit():
        if update_profile(user_id, full_name=form.full_name.data,
                          address=form.address.data, phone=form.phone.data):
            flash(MESSAGES['user_updated'], 'success')
        else:
            flash(MESSAGES['user_update_failed'], 'error')

        if form.new_password.data and not update_password(user_id, form.new_password.data):
            flash(MESSAGES['password_not_changed'], 'warning')

        return redirect(url_for('admin.users'))

    return render_template('admin/user_form.html', form=form, user=profile)


# =============================================================================
# DESTINATIONS
# =============================================================================

@admin_bp.route('/destinations')
@admin_required
def destinations():
    return render_template('admin/destinations.html', destinations=get_destinations())


def _destination_form_view(destination=None):
    """Shared create/edit handler."""
    if request.method == 'GET' and destination:
        form = DestinationForm(data=destination)
    else:
        form = DestinationForm()
    preview = destination.get('image') if destination else None

    if form.validate_on_submit():
        image = form.image_file.data or None
        if image is not None and not image.filename:
            image = None

        if image is not None:
            preview = build_preview_data_url(image.read(), image.mimetype)
            image.stream.seek(0)

        data = {
            'id': destination.get('id') if destination else None,
            'name': form.name.data.strip(),
            'region': form.region.data.strip(),
            'season': form.season.data.strip(),
            'description': form.description.data.strip(),
            'image': form.image.data or (destination.get('image') if destination else None),
        }

        if save_destination(data, image):
            flash(MESSAGES['destination_saved'], 'success')
            return redirect(url_for('admin.destinations'))
        flash(MESSAGES['destination_save_failed'], 'error')

    return render_template('admin/destination_form.html', form=form,
                           destination=destination, preview=preview)


@admin_bp.route('/destinations/new', methods=['GET', 'POST'])
@admin_required
def destinations_create():
    return _destination_form_view()


@admin_bp.route('/destinations/<destination_id>/edit', methods=['GET', 'POST'])
@admin_required
def destinations_edit(destination_id):
    destinations = get_destinations()
    index = find_destination_index(destinations, destination_id)
    if index < 0:
        flash('Destination not found', 'error')
        return redirect(url_for('admin.destinations'))
    return _destination_form_view(destinations[index])


@admin_bp.route('/destinations/<destination_id>/delete', methods=['POST'])
@admin_required
def destinations_delete(destination_id):
    if delete_destination(destination_id):
        flash(MESSAGES['destination_deleted'], 'success')
    else:
        flash(MESSAGES['delete_failed'], 'error')
    return redirect(url_for('admin.destinations'))


# =============================================================================
# PACKAGES
# =============================================================================

@admin_bp.route('/packages')
@admin_required
def packages():
    return render_template('admin/packages.html', packages=get_packages())


def _package_form_view(package=None):
    """Shared create/edit handler."""
    if request.method == 'GET' and package:
        form = PackageForm(data={
            'name': package.get('name'),
            'price': package.get('price'),
            'theme': package.get('color') or 'white',
            'features': format_features(package.get('features')),
        })
    else:
        form = PackageForm()

    if form.validate_on_submit():
        data = {
            'id': package.get('id') if package else None,
            'name': form.name.data.strip(),
            'price': form.price.data.strip(),
            'theme': form.theme.data,
            'features': form.features.data or '',
        }
        if save_package(data):
            flash(MESSAGES['package_saved'], 'success')
            return redirect(url_for('admin.packages'))
        flash(MESSAGES['package_save_failed'], 'error')

    return render_template('admin/package_form.html', form=form, package=package)


@admin_bp.route('/packages/new', methods=['GET', 'POST'])
@admin_required
def packages_create():
    return _package_form_view()


@admin_bp.route('/packages/<package_id>/edit', methods=['GET', 'POST'])
@admin_required
def packages_edit(package_id):
    package = get_package_by_id(package_id)
    if package is None:
        flash('Package not found', 'error')
        return redirect(url_for('admin.packages'))
    return _package_form_view(package)


@admin_bp.route('/packages/<package_id>/delete', methods=['POST'])
@admin_required
def packages_delete(package_id):
    if delete_package(package_id):
        flash(MESSAGES['package_deleted'], 'success')
    else:
        flash(MESSAGES['delete_failed'], 'error')
    return redirect(url_for('admin.packages'))
