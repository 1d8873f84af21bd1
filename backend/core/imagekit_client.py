from imagekitio import ImageKit
from imagekitio.models.UploadFileRequestOptions import UploadFileRequestOptions
from core.config import settings
import logging
import os
import tempfile

logger = logging.getLogger(__name__)

_imagekit = None


def get_imagekit() -> ImageKit:
    """ImageKit client, created on first use so the app starts without credentials."""
    global _imagekit
    if _imagekit is None:
        _imagekit = ImageKit(
            public_key=settings.imagekit_public_key,
            private_key=settings.imagekit_private_key,
            url_endpoint=settings.imagekit_url_endpoint
        )
    return _imagekit


def upload_image_to_imagekit(file_data: bytes, filename: str, folder: str = "images") -> dict:
    """
    Upload an image to ImageKit and return the URL.

    Args:
        file_data: Image file bytes
        filename: Name for the file, already unique within the folder
        folder: Folder path in ImageKit (default: "images")

    Returns:
        dict with 'url', 'file_id' and 'name' keys
    """
    # ImageKit SDK requires a file object opened in binary mode
    file_ext = os.path.splitext(filename)[1] or '.jpg'
    temp_file_path = None

    try:
        with tempfile.NamedTemporaryFile(delete=False, suffix=file_ext, mode='wb') as temp_file:
            temp_file.write(file_data)
            temp_file_path = temp_file.name

        upload_options = UploadFileRequestOptions(
            folder=folder,
            use_unique_file_name=False,
            is_private_file=False
        )

        with open(temp_file_path, 'rb') as file_obj:
            upload = get_imagekit().upload_file(
                file=file_obj,
                file_name=filename,
                options=upload_options
            )
    finally:
        if temp_file_path and os.path.exists(temp_file_path):
            try:
                os.unlink(temp_file_path)
            except OSError as cleanup_error:
                logger.warning("Failed to delete temporary file %s: %s", temp_file_path, cleanup_error)

    if not upload or not upload.url:
        raise ValueError("Upload returned no URL")

    logger.info("Upload successful: URL=%s, file_id=%s, size=%d bytes", upload.url, upload.file_id, len(file_data))
    return {
        "url": upload.url,
        "file_id": upload.file_id,
        "name": upload.name
    }
