"""
Centralized UI messages.
All user-facing text in one place for consistency.
"""

MESSAGES = {
    # Success messages
    'login_success': 'Welcome back, {name}',
    'register_success': 'Welcome aboard, {name}',
    'register_confirm': 'Account created. Check your inbox to confirm, then log in.',
    'logout_success': 'You have been signed out',
    'booking_created': 'Booking request received! Our team will call you shortly.',
    'booking_updated': 'Booking status updated',
    'booking_deleted': 'Booking deleted',
    'user_updated': 'User profile updated',
    'destination_saved': 'Destination saved',
    'destination_deleted': 'Destination deleted',
    'package_saved': 'Package saved',
    'package_deleted': 'Package deleted',
    'seed_success': 'Seeded {destinations} destinations and {packages} packages',
    'admin_login_success': 'Admin panel unlocked',
    'admin_logout_success': 'Admin panel locked',
    'wishlist_removed': 'Removed from your wishlist',

    # Error messages
    'invalid_credentials': 'Invalid credentials',
    'auth_failed': 'Authentication failed. Please check your credentials.',
    'booking_failed': 'Something went wrong while sending your request. Please try again.',
    'status_update_failed': 'Failed to update status in database.',
    'booking_delete_failed': 'Failed to delete booking.',
    'user_update_failed': 'Failed to update user profile.',
    'password_not_changed': 'Note: Password was NOT changed. Admin password reset requires server-side setup.',
    'destination_save_failed': 'Failed to save destination.',
    'package_save_failed': 'Failed to save package.',
    'seed_failed': 'Seeding failed: no destinations or packages were inserted.',
    'delete_failed': 'Failed to delete.',
    'wishlist_failed': 'Could not update your wishlist. Please try again.',
    'invalid_file_type': 'File type not allowed',
    'file_too_large': 'The uploaded file is too large',
    'login_required': 'Please log in to continue your journey',
}
