"""
Booking data access functions.
Public booking submission plus the admin listing, status and delete operations.
"""

import logging
from typing import Dict, List, Optional

from backend import BackendError, get_backend

logger = logging.getLogger(__name__)

TABLE_NAME = 'bookings'

BOOKING_STATUSES = ('pending', 'confirmed', 'completed', 'cancelled')


# =============================================================================
# CREATE
# =============================================================================

def create_booking(data: Dict, user_id: Optional[str] = None) -> bool:
    """
    Submit a booking request.

    Required fields are enforced by BookingForm, not here. Each call inserts
    a new row, so a resubmission creates a duplicate.

    Args:
        data: Dict with name, phone, travelers, date, package, notes
        user_id: Signed-in user's id, if any

    Returns:
        True if the row was inserted
    """
    payload = {
        'name': data.get('name'),
        'phone': data.get('phone'),
        'travelers': data.get('travelers'),
        'date': str(data['date']) if data.get('date') else None,
        'package': data.get('package'),
        'notes': data.get('notes') or '',
        'status': 'pending',
        # Legacy NOT NULL column
        'email': '',
    }
    if user_id:
        payload['user_id'] = user_id

    try:
        get_backend().table(TABLE_NAME).insert(payload).execute()
        return True
    except BackendError as e:
        logger.error(f'Error creating booking: {e}')
        return False


# =============================================================================
# QUERY OPERATIONS
# =============================================================================

def get_all_bookings() -> List[Dict]:
    """All bookings, newest first. Empty on backend failure."""
    try:
        return (get_backend().table(TABLE_NAME).select('*')
                .order('created_at', ascending=False).execute())
    except BackendError as e:
        logger.warning(f'Error fetching bookings: {e}')
        return []


def get_user_bookings(user_id: str, access_token: Optional[str] = None) -> List[Dict]:
    """A customer's booking history, newest first. Empty on backend failure."""
    try:
        return (get_backend().table(TABLE_NAME, access_token=access_token).select('*')
                .eq('user_id', user_id)
                .order('created_at', ascending=False).execute())
    except BackendError as e:
        logger.warning(f'Error fetching history for {user_id}: {e}')
        return []


def filter_bookings(bookings: List[Dict], term: Optional[str]) -> List[Dict]:
    """
    Case-insensitive substring filter on booking name or package.

    Args:
        bookings: Booking dicts
        term: Search string; empty returns everything

    Returns:
        Matching bookings in their original order
    """
    if not term:
        return list(bookings)
    term_lower = term.lower()
    return [
        b for b in bookings
        if term_lower in (b.get('name') or '').lower()
        or term_lower in (b.get('package') or '').lower()
    ]


def count_by_status(bookings: List[Dict]) -> Dict[str, int]:
    counts = {status: 0 for status in BOOKING_STATUSES}
    for booking in bookings:
        if booking.get('status') in counts:
            counts[booking['status']] += 1
    return counts


# =============================================================================
# UPDATE / DELETE
# =============================================================================

def update_booking_status(booking_id: str, status: str) -> bool:
    """
    Set a booking's status. Any status may follow any other.

    Returns:
        True on success, False for an unknown status or backend failure
    """
    if status not in BOOKING_STATUSES:
        logger.warning(f'Rejected unknown booking status {status!r} for {booking_id}')
        return False

    try:
        get_backend().table(TABLE_NAME).update({'status': status}).eq('id', booking_id).execute()
        return True
    except BackendError as e:
        logger.error(f'Error updating booking {booking_id}: {e}')
        return False


def delete_booking(booking_id: str) -> bool:
    """Delete a booking. Returns True on success."""
    try:
        get_backend().table(TABLE_NAME).delete().eq('id', booking_id).execute()
        return True
    except BackendError as e:
        logger.error(f'Error deleting booking {booking_id}: {e}')
        return False
