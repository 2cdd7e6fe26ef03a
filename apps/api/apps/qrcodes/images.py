"""
QR code image rendering and storage.

Images are PNGs stored through Django's default storage under
``QR_CODE_UPLOAD_DIR/{code}.png``.
"""
import io

import qrcode
import qrcode.image.pil
from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage

from apps.core.observability import metrics

BOX_SIZE = 10
BORDER = 4


def storefront_url(code: str) -> str:
    """Absolute storefront URL encoded in the QR image."""
    return f"{settings.SHOP_BASE_URL.rstrip('/')}/{code}/"


def image_path(code: str) -> str:
    return f"{settings.QR_CODE_UPLOAD_DIR}/{code}.png"


@metrics.track_duration(metrics.qr_image_render_duration_seconds)
def render_png(payload: str) -> bytes:
    """
    Render ``payload`` as a black-on-white PNG (error correction Q).
    """
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_Q,
        box_size=BOX_SIZE,
        border=BORDER,
        image_factory=qrcode.image.pil.PilImage,
    )
    qr.add_data(payload)
    qr.make(fit=True)
    img = qr.make_image(fill_color='black', back_color='white')

    buf = io.BytesIO()
    img.save(buf, format='PNG')
    return buf.getvalue()


def save_qr_image(code: str) -> str:
    """
    Render and store the image of ``code``, replacing any previous file.

    Returns:
        Public URL of the stored image
    """
    path = image_path(code)
    if default_storage.exists(path):
        default_storage.delete(path)
    stored_path = default_storage.save(path, ContentFile(render_png(storefront_url(code))))
    return default_storage.url(stored_path)


def load_qr_image(code: str) -> bytes:
    """PNG bytes of ``code``, re-rendered when the file is missing."""
    path = image_path(code)
    if not default_storage.exists(path):
        save_qr_image(code)
    with default_storage.open(path, 'rb') as fh:
        return fh.read()


def delete_qr_image(code: str):
    path = image_path(code)
    if default_storage.exists(path):
        default_storage.delete(path)
