"""
Wishlist data access functions.
"""

import logging
from typing import Dict, List, Optional, Set

from backend import BackendError, get_backend

logger = logging.getLogger(__name__)

TABLE_NAME = 'wishlist'


def toggle_wishlist(user_id: str, package_id: str,
                    access_token: Optional[str] = None) -> Optional[bool]:
    """
    Add or remove a package from a user's wishlist.

    Reads the current row, then deletes or inserts. The read and the write
    are separate requests, so two sessions toggling the same pair at once
    can leave a duplicate row or miss a delete.

    Returns:
        True if now in the wishlist, False if removed, None on backend failure
    """
    backend = get_backend()
    try:
        existing = (backend.table(TABLE_NAME, access_token=access_token)
                    .select('id').eq('user_id', user_id).eq('package_id', package_id)
                    .single().execute())

        if existing:
            (backend.table(TABLE_NAME, access_token=access_token)
             .delete().eq('id', existing['id']).execute())
            return False

        (backend.table(TABLE_NAME, access_token=access_token)
         .insert({'user_id': user_id, 'package_id': package_id}).execute())
        return True
    except BackendError as e:
        logger.error(f'Error toggling wishlist ({user_id}, {package_id}): {e}')
        return None


def get_wishlist(user_id: str, access_token: Optional[str] = None) -> List[Dict]:
    """
    A user's wishlist with the joined package rows.

    Returns:
        List of {id, package_id, package_data}, empty on backend failure
    """
    try:
        rows = (get_backend().table(TABLE_NAME, access_token=access_token)
                .select('id, package_id, packages(*)').eq('user_id', user_id).execute())
    except BackendError as e:
        logger.warning(f'Error fetching wishlist for {user_id}: {e}')
        return []

    return [
        {
            'id': row['id'],
            'package_id': row['package_id'],
            'package_data': row.get('packages'),
        }
        for row in rows
    ]


def get_wishlist_ids(user_id: str, access_token: Optional[str] = None) -> Set[str]:
    return {str(item['package_id']) for item in get_wishlist(user_id, access_token)}
