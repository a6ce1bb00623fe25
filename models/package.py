"""
Package data access functions.
Handles CRUD operations for the packages table and theme styling.
"""

import logging
from typing import Dict, List, Optional

from backend import BackendError, get_backend

logger = logging.getLogger(__name__)

TABLE_NAME = 'packages'

PACKAGE_THEMES = ('white', 'teal', 'periwinkle')

# Theme key -> stored color and accent class string
THEME_MAP = {
    'white': {'color': 'white', 'accent': 'bg-white/5'},
    'teal': {'color': 'teal', 'accent': 'bg-[#4fb7b3]/10 border-[#4fb7b3]/50'},
    'periwinkle': {'color': 'periwinkle', 'accent': 'bg-[#637ab9]/10 border-[#637ab9]/50'},
}


# =============================================================================
# QUERY OPERATIONS
# =============================================================================

def get_packages() -> List[Dict]:
    """
    Get all packages in creation order.

    Returns:
        List of package dicts, empty if the backend read fails
    """
    try:
        return (get_backend().table(TABLE_NAME).select('*')
                .order('created_at', ascending=True).execute())
    except BackendError as e:
        logger.warning(f'Backend fetch error (packages): {e}')
        return []


def get_package_by_id(package_id: str) -> Optional[Dict]:
    """Single package or None."""
    try:
        return get_backend().table(TABLE_NAME).select('*').eq('id', package_id).single().execute()
    except BackendError as e:
        logger.warning(f'Backend fetch error (package {package_id}): {e}')
        return None


def get_visible_packages(packages: List[Dict], visible: int) -> List[Dict]:
    """First `visible` packages, for the "view more" pager."""
    return packages[:max(visible, 0)]


# =============================================================================
# THEMES & FEATURES
# =============================================================================

def resolve_theme(theme: Optional[str]) -> Dict:
    """
    Style bundle for a theme key. Unknown keys fall back to white.

    Args:
        theme: 'white', 'teal' or 'periwinkle'

    Returns:
        Dict with color and accent
    """
    return THEME_MAP.get(theme, THEME_MAP['white'])


def parse_features(text: Optional[str]) -> List[str]:
    """
    Parse a newline-delimited feature list.

    Blank lines are dropped; order is preserved.
    "A\\n\\nB\\n" -> ["A", "B"]
    """
    if not text:
        return []
    return [line.strip() for line in text.splitlines() if line.strip()]


def format_features(features: Optional[List[str]]) -> str:
    """Inverse of parse_features, for pre-filling the edit form."""
    return '\n'.join(features or [])


# =============================================================================
# CREATE / UPDATE / DELETE
# =============================================================================

def save_package(data: Dict) -> bool:
    """
    Create or update a package.

    Args:
        data: Dict with name, price, theme, features and optional id

    Returns:
        True if the backend accepted the write
    """
    styles = resolve_theme(data.get('theme'))
    features = data.get('features') or []
    if isinstance(features, str):
        features = parse_features(features)

    payload = {
        'name': data.get('name'),
        'price': data.get('price'),
        'features': features,
        'color': styles['color'],
        'accent': styles['accent'],
    }

    backend = get_backend()
    try:
        if data.get('id'):
            backend.table(TABLE_NAME).update(payload).eq('id', data['id']).execute()
        else:
            backend.table(TABLE_NAME).insert(payload).execute()
        return True
    except BackendError as e:
        logger.error(f'Error saving package: {e}')
        return False


def delete_package(package_id: str) -> bool:
    """Delete a package. Returns True on success."""
    try:
        get_backend().table(TABLE_NAME).delete().eq('id', package_id).execute()
        return True
    except BackendError as e:
        logger.error(f'Error deleting package {package_id}: {e}')
        return False
