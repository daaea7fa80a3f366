"""Prize artwork encoding."""

from __future__ import annotations

import base64
import io
import mimetypes
from pathlib import Path
from typing import Optional, Union

from PIL import Image, UnidentifiedImageError

from .errors import UnsupportedImageError

VALID_MIME_TYPES = ("image/jpeg", "image/jpg", "image/png")
_FORMAT_MIME_TYPES = {"PNG": "image/png", "JPEG": "image/jpeg"}


def is_valid_image_type(mime_type: str) -> bool:
    """Return ``True`` for the MIME types accepted as prize artwork."""
    return mime_type.lower() in VALID_MIME_TYPES


def image_extension(mime_type: str) -> str:
    return "png" if mime_type.lower() == "image/png" else "jpg"


def encode_image(
    source: Union[str, Path, bytes], filename: Optional[str] = None
) -> str:
    """Encode a PNG or JPEG image as a ``data:`` URL.

    Parameters
    ----------
    source : Union[str, Path, bytes]
        Path to the image file, or its raw bytes.
    filename : str, optional
        Name the image was uploaded under. Defaults to the path name for
        path sources. A name whose type is known and is not PNG/JPEG is
        rejected before the content is inspected.

    Returns
    -------
    str
        ``data:image/png;base64,...`` or ``data:image/jpeg;base64,...``.

    Raises
    ------
    UnsupportedImageError
        If the file cannot be read or is not a PNG/JPEG image.
    """
    if filename is None and not isinstance(source, (bytes, bytearray)):
        filename = Path(source).name
    label = filename or "image"
    if filename is not None:
        guessed, _ = mimetypes.guess_type(filename)
        if guessed is not None and not is_valid_image_type(guessed):
            raise UnsupportedImageError(
                f"'{filename}' is not a PNG or JPEG image ({guessed})"
            )

    if isinstance(source, (bytes, bytearray)):
        payload = bytes(source)
    else:
        try:
            payload = Path(source).read_bytes()
        except OSError as exc:
            raise UnsupportedImageError(f"Could not read {label}: {exc}") from exc

    try:
        with Image.open(io.BytesIO(payload)) as image:
            image_format = image.format
            image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise UnsupportedImageError(f"'{label}' is not a readable image") from exc

    mime_type = _FORMAT_MIME_TYPES.get(image_format or "")
    if mime_type is None:
        raise UnsupportedImageError(
            f"Unsupported image format '{image_format}'; use PNG or JPEG"
        )
    encoded = base64.b64encode(payload).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


__all__ = ["encode_image", "image_extension", "is_valid_image_type"]
