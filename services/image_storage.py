"""
Room image files on local disk.

Files live under UPLOAD_FOLDER/<subfolder>/ and are referenced in the
database by their path relative to UPLOAD_FOLDER.
"""

import logging
import os
import uuid

from flask import current_app
from werkzeug.utils import secure_filename

from models.errors import ValidationError
from utils.messages import MESSAGES

logger = logging.getLogger(__name__)


def _upload_root() -> str:
    folder = current_app.config['UPLOAD_FOLDER']
    if not os.path.isabs(folder):
        folder = os.path.join(current_app.root_path, folder)
    return folder


def allowed_image(filename: str) -> bool:
    """Check the extension against ALLOWED_IMAGE_EXTENSIONS."""
    if '.' not in filename:
        return False
    extension = filename.rsplit('.', 1)[1].lower()
    return extension in current_app.config['ALLOWED_IMAGE_EXTENSIONS']


def _file_size(file_storage) -> int:
    stream = file_storage.stream
    position = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(position)
    return size


def save_image(file_storage, subfolder: str = 'rooms') -> str:
    """
    Validate and store an uploaded image.

    Args:
        file_storage: werkzeug FileStorage from request.files
        subfolder: Directory under UPLOAD_FOLDER

    Returns:
        Stored path relative to UPLOAD_FOLDER (e.g. 'rooms/3f2a..._vista.jpg')

    Raises:
        ValidationError: Missing file, disallowed type or file too large
    """
    if file_storage is None or not file_storage.filename:
        raise ValidationError(MESSAGES['image_required'])

    original = file_storage.filename
    if not allowed_image(original):
        raise ValidationError(MESSAGES['invalid_image_type'].format(filename=original))

    max_size = current_app.config['MAX_IMAGE_SIZE']
    if _file_size(file_storage) > max_size:
        raise ValidationError(MESSAGES['image_too_large'].format(
            filename=original, max_mb=max_size // (1024 * 1024)
        ))

    filename = f'{uuid.uuid4().hex}_{secure_filename(original)}'
    directory = os.path.join(_upload_root(), subfolder)
    os.makedirs(directory, exist_ok=True)
    file_storage.save(os.path.join(directory, filename))

    logger.info('Stored image %s as %s/%s', original, subfolder, filename)
    return f'{subfolder}/{filename}'


def delete_image(filename: str) -> bool:
    """
    Remove a stored image. Missing files are logged, not raised.

    Returns:
        True if a file was removed
    """
    path = os.path.join(_upload_root(), filename)
    try:
        os.remove(path)
    except FileNotFoundError:
        logger.warning('Image file already gone: %s', path)
        return False
    except OSError as e:
        logger.error('Could not delete image %s: %s', path, e)
        return False
    return True
