"""Admin services package."""

from blueprints.admin.services.admin_service import (  # noqa: F401
    check_admin_credentials,
    admin_login,
    admin_logout,
    get_dashboard_summary,
)
