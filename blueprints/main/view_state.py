"""
Landing page view state.

Tracks which overlays are open, the selected destination, how many packages
are shown and the wishlist ids, and persists it in the Flask session between
requests. Each overlay is an independent flag; at most one destination is
selected at a time.
"""

from typing import Dict, Iterable, List, Optional

SESSION_KEY = 'view_state'
MODALS = ('booking', 'auth', 'dashboard')
DEFAULT_PAGE_SIZE = 3


def cycle_index(index: int, length: int, direction: str) -> int:
    """
    Step an index through a list, wrapping at both ends.

    cycle_index(0, 3, 'prev') == 2
    cycle_index(2, 3, 'next') == 0
    """
    if length <= 0:
        raise ValueError('Cannot navigate an empty list')
    if direction == 'next':
        return (index + 1) % length
    if direction == 'prev':
        return (index - 1 + length) % length
    raise ValueError(f'Unknown direction: {direction}')


class ViewState:
    """Overlay flags, destination cursor, package pager and wishlist ids."""

    def __init__(self, data: Optional[Dict] = None, page_size: int = DEFAULT_PAGE_SIZE):
        data = data or {}
        self.page_size = page_size
        self.modals = {name: bool((data.get('modals') or {}).get(name)) for name in MODALS}
        self.booking_package = data.get('booking_package')
        self.selected_destination = data.get('selected_destination')
        self.visible_packages = data.get('visible_packages') or page_size
        self.wishlist_ids = set(data.get('wishlist_ids') or [])

    # ==================== Persistence ====================

    @classmethod
    def load(cls, store, page_size: int = DEFAULT_PAGE_SIZE) -> 'ViewState':
        return cls(store.get(SESSION_KEY), page_size=page_size)

    def save(self, store) -> None:
        store[SESSION_KEY] = self.to_dict()

    def to_dict(self) -> Dict:
        return {
            'modals': dict(self.modals),
            'booking_package': self.booking_package,
            'selected_destination': self.selected_destination,
            'visible_packages': self.visible_packages,
            'wishlist_ids': sorted(self.wishlist_ids),
        }

    # ==================== Overlays ====================

    def is_open(self, modal: str) -> bool:
        return self.modals.get(modal, False)

    def open(self, modal: str) -> None:
        if modal not in MODALS:
            raise ValueError(f'Unknown modal: {modal}')
        self.modals[modal] = True

    def close(self, modal: str) -> None:
        if modal not in MODALS:
            raise ValueError(f'Unknown modal: {modal}')
        self.modals[modal] = False
        if modal == 'booking':
            self.booking_package = None

    def open_booking(self, package_name: Optional[str] = None) -> None:
        self.booking_package = package_name
        self.open('booking')

    def open_dashboard(self, user) -> None:
        """Signed-out visitors get the auth modal instead."""
        if user is None:
            self.open('auth')
        else:
            self.open('dashboard')

    # ==================== Destination detail ====================

    def select_destination(self, destination_id) -> None:
        self.selected_destination = str(destination_id)

    def close_destination(self) -> None:
        self.selected_destination = None

    def current_destination_index(self, destinations: List[Dict]) -> int:
        if self.selected_destination is None:
            return -1
        for index, destination in enumerate(destinations):
            if str(destination.get('id')) == self.selected_destination:
                return index
        return -1

    def navigate_destination(self, direction: str, destinations: List[Dict]) -> Optional[Dict]:
        """
        Move the detail view to the next/previous destination, wrapping.

        Returns:
            The newly selected destination, or None if nothing is selected
        """
        if self.selected_destination is None or not destinations:
            return None
        index = self.current_destination_index(destinations)
        if index < 0:
            # Selection vanished from the list (deleted by an admin)
            self.close_destination()
            return None
        destination = destinations[cycle_index(index, len(destinations), direction)]
        self.select_destination(destination['id'])
        return destination

    def handle_key(self, key: str, destinations: List[Dict]) -> bool:
        """
        Keyboard bindings, active only while a destination is open.

        Returns:
            True if the key was handled
        """
        if self.selected_destination is None:
            return False
        if key == 'ArrowLeft':
            self.navigate_destination('prev', destinations)
        elif key == 'ArrowRight':
            self.navigate_destination('next', destinations)
        elif key == 'Escape':
            self.close_destination()
        else:
            return False
        return True

    # ==================== Packages ====================

    def load_more(self, total: int) -> None:
        if self.has_more(total):
            self.visible_packages += self.page_size

    def has_more(self, total: int) -> bool:
        return self.visible_packages < total

    # ==================== Wishlist ====================

    def set_wishlist(self, package_ids: Iterable) -> None:
        self.wishlist_ids = {str(package_id) for package_id in package_ids}

    def apply_wishlist_toggle(self, package_id) -> bool:
        """
        Optimistic local flip before the backend answers.

        Returns:
            The membership the UI now shows
        """
        package_id = str(package_id)
        if package_id in self.wishlist_ids:
            self.wishlist_ids.discard(package_id)
            return False
        self.wishlist_ids.add(package_id)
        return True

    def reconcile_wishlist(self, package_id, optimistic: bool, result: Optional[bool]) -> bool:
        """
        Align the local set with the backend's answer.

        A failed call (None) reverts the optimistic flip; otherwise the
        backend's membership wins.
        """
        package_id = str(package_id)
        actual = (not optimistic) if result is None else result
        if actual:
            self.wishlist_ids.add(package_id)
        else:
            self.wishlist_ids.discard(package_id)
        return actual
