"""
Fallback catalog content.
Used by the admin "seed" action and the seed-catalog CLI command.
"""

FALLBACK_DESTINATIONS = [
    {
        'name': 'Pangong Lake',
        'region': 'Ladakh',
        'season': 'MAY - SEP',
        'image': 'https://images.unsplash.com/photo-1589802829985-817e51171b92?auto=format&fit=crop&q=80&w=1200',
        'description': ("Witness the changing colors of the world's highest saltwater lake. "
                        "A surreal landscape where the sky meets the water in a symphony of blue."),
    },
    {
        'name': 'Spiti Valley',
        'region': 'Himachal',
        'season': 'JUN - OCT',
        'image': 'https://images.unsplash.com/photo-1581793745862-99fde7fa73d2?auto=format&fit=crop&q=80&w=1200',
        'description': ('The Middle Land. Explore ancient monasteries, fossil-rich villages, '
                        'and stark desert mountains under a galaxy of stars.'),
    },
    {
        'name': 'Kedarnath',
        'region': 'Uttarakhand',
        'season': 'MAY - NOV',
        'image': 'https://images.unsplash.com/photo-1605649487212-47bdab064df7?auto=format&fit=crop&q=80&w=1200',
        'description': ('A spiritual journey to the abode of Lord Shiva. Trek through the '
                        'majestic Garhwal Himalayas to reach this ancient temple.'),
    },
]

FALLBACK_PACKAGES = [
    {
        'name': 'Manali Escape',
        'price': '₹14,999',
        'theme': 'white',
        'features': ['3 Nights / 4 Days', 'Volvo Transfer (Delhi)', 'Local Sightseeing', 'Breakfast & Dinner'],
    },
    {
        'name': 'Ladakh Expedition',
        'price': '₹34,999',
        'theme': 'teal',
        'features': ['6 Nights / 7 Days', 'Bike Rental Included', 'Nubra & Pangong', 'Permits & Camping'],
    },
    {
        'name': 'Char Dham Yatra',
        'price': '₹89,999',
        'theme': 'periwinkle',
        'features': ['10 Nights / 11 Days', 'Luxury Stays', 'Helicopter Option', 'VIP Darshan Assist'],
    },
]


def seed_catalog():
    """
    Insert every fallback destination and package.
    Insert-only: running it twice duplicates the rows.

    Returns:
        Tuple of (destinations_inserted, packages_inserted)
    """
    from models.destination import save_destination
    from models.package import save_package

    destinations = 0
    for destination in FALLBACK_DESTINATIONS:
        if save_destination(dict(destination)):
            destinations += 1

    packages = 0
    for package in FALLBACK_PACKAGES:
        if save_package(dict(package, features=list(package['features']))):
            packages += 1

    return destinations, packages
