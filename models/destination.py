"""
Destination data access functions.
Handles CRUD operations for the destinations table and the image bucket.
"""

import base64
import logging
import random
import string
import time
from typing import Dict, List, Optional

from flask import current_app
from werkzeug.utils import secure_filename

from backend import BackendError, get_backend

logger = logging.getLogger(__name__)

TABLE_NAME = 'destinations'
DEFAULT_BUCKET = 'destination-images'


def get_destinations() -> List[Dict]:
    """
    Get all destinations in creation order.

    Returns:
        List of destination dicts, empty if the backend read fails
    """
    try:
        return (get_backend().table(TABLE_NAME).select('*')
                .order('created_at', ascending=True).execute())
    except BackendError as e:
        logger.warning(f'Backend fetch error (destinations): {e}')
        return []


def find_destination_index(destinations: List[Dict], destination_id) -> int:
    """Position of a destination in the list, -1 if absent."""
    for index, destination in enumerate(destinations):
        if str(destination.get('id')) == str(destination_id):
            return index
    return -1


# ==================== Images ====================

def generate_storage_path(filename: str) -> str:
    """
    Randomized object path for an uploaded image.

    Format: public/<epoch ms>_<random base36 suffix>.<original extension>
    """
    safe_name = secure_filename(filename or '')
    extension = safe_name.rsplit('.', 1)[-1].lower() if '.' in safe_name else 'bin'
    suffix = ''.join(random.choices(string.ascii_lowercase + string.digits, k=6))
    return f'public/{int(time.time() * 1000)}_{suffix}.{extension}'


def build_preview_data_url(data: bytes, mimetype: str) -> str:
    """Inline base64 data URL used to preview an image before it is saved."""
    encoded = base64.b64encode(data).decode('ascii')
    return f'data:{mimetype or "application/octet-stream"};base64,{encoded}'


def allowed_image(filename: str) -> bool:
    allowed = current_app.config.get('ALLOWED_IMAGE_EXTENSIONS', {'png', 'jpg', 'jpeg', 'webp', 'gif'})
    return '.' in (filename or '') and filename.rsplit('.', 1)[1].lower() in allowed


def upload_destination_image(image) -> Optional[str]:
    """
    Upload an image file and resolve its public URL.

    Args:
        image: werkzeug FileStorage (or any object with filename,
               mimetype and read())

    Returns:
        Public URL, or None if the upload failed
    """
    if not allowed_image(image.filename):
        logger.warning(f'Rejected image upload: {image.filename!r}')
        return None

    backend = get_backend()
    bucket = current_app.config.get('STORAGE_BUCKET', DEFAULT_BUCKET)
    path = generate_storage_path(image.filename)

    try:
        backend.upload(bucket, path, image.read(),
                       content_type=image.mimetype or 'application/octet-stream')
    except BackendError as e:
        logger.error(f'Error uploading image: {e}')
        return None

    return backend.get_public_url(bucket, path)


# ==================== Create / Update / Delete ====================

def save_destination(data: Dict, image=None) -> bool:
    """
    Create or update a destination.

    When an image file is given it is uploaded first and its URL replaces
    data['image']; a failed upload aborts the save.

    Args:
        data: Dict with name, region, season, description, optional image
              URL and optional id
        image: Optional uploaded file

    Returns:
        True if the destination was saved
    """
    image_url = data.get('image')

    if image is not None:
        uploaded_url = upload_destination_image(image)
        if not uploaded_url:
            return False
        image_url = uploaded_url

    payload = {
        'name': data.get('name'),
        'region': data.get('region'),
        'season': data.get('season'),
        'description': data.get('description'),
        'image': image_url,
    }

    backend = get_backend()
    try:
        if data.get('id'):
            backend.table(TABLE_NAME).update(payload).eq('id', data['id']).execute()
        else:
            backend.table(TABLE_NAME).insert(payload).execute()
        return True
    except BackendError as e:
        logger.error(f'Error saving destination: {e}')
        return False


def delete_destination(destination_id: str) -> bool:
    """Delete a destination. Returns True on success."""
    try:
        get_backend().table(TABLE_NAME).delete().eq('id', destination_id).execute()
        return True
    except BackendError as e:
        logger.error(f'Error deleting destination {destination_id}: {e}')
        return False
