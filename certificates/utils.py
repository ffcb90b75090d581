import hashlib
import hmac
import io
import logging
import os
import secrets
import string
import textwrap

from django.conf import settings
from django.core import signing
from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)

CERTIFICATE_PREFIX = "NEX"
SIGNING_SALT = "certificates.Certificate"

_BASE36 = string.digits + string.ascii_lowercase


def _base36(number):
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_certificate_id(internship_id, issued_at):
    """
    Build ``NEX-<base36 ms timestamp>-<6 hex>``.

    The suffix is an HMAC over the internship id, the issuance time and a
    random nonce, so ids are not guessable and a retry after a collision
    yields a different value.
    """
    stamp = _base36(int(issued_at.timestamp() * 1000))
    nonce = secrets.token_hex(8)
    message = f"{internship_id}:{issued_at.isoformat()}:{nonce}".encode()
    digest = hmac.new(settings.CERTIFICATE_SIGNING_SECRET.encode(), message, hashlib.sha256)
    return f"{CERTIFICATE_PREFIX}-{stamp}-{digest.hexdigest()[:6].upper()}"


def certificate_page_url(certificate_id):
    return f"{settings.CLIENT_URL.rstrip('/')}/certificate/{certificate_id}"


def sign_payload(payload):
    return signing.dumps(payload, key=settings.CERTIFICATE_SIGNING_SECRET, salt=SIGNING_SALT)


def unsign_payload(token):
    return signing.loads(token, key=settings.CERTIFICATE_SIGNING_SECRET, salt=SIGNING_SALT)


def render_certificate_image(certificate):
    """
    Draw the certificate as a PNG and return the encoded bytes.

    Uses MEDIA_ROOT/certificate_templates/certificate_template.png when present,
    otherwise a plain bordered canvas.
    """
    template_path = os.path.join(settings.MEDIA_ROOT, "certificate_templates", "certificate_template.png")
    if os.path.exists(template_path):
        img = Image.open(template_path).convert("RGB")
    else:
        img = Image.new("RGB", (2000, 1414), "#ffffff")
        border = ImageDraw.Draw(img)
        border.rectangle((40, 40, 1960, 1374), outline="#1e3a8a", width=12)
        border.rectangle((70, 70, 1930, 1344), outline="#c9a227", width=4)

    draw = ImageDraw.Draw(img)
    img_width, img_height = img.size

    font_path = os.path.join(settings.BASE_DIR, "static", "fonts", "Montserrat-Bold.ttf")
    try:
        title_font = ImageFont.truetype(font_path, 96)
        name_font = ImageFont.truetype(font_path, 110)
        body_font = ImageFont.truetype(font_path, 48)
        details_font = ImageFont.truetype(font_path, 36)
    except OSError:
        logger.warning("Custom font not found, using default font.")
        title_font = name_font = body_font = details_font = ImageFont.load_default()

    def draw_centered(text, font, y, fill="#111827"):
        bbox = draw.multiline_textbbox((0, 0), text, font=font, align="center")
        x = (img_width - (bbox[2] - bbox[0])) / 2
        draw.multiline_text((x, y), text, font=font, fill=fill, align="center")

    body_text = textwrap.fill(
        f"has successfully completed the internship \"{certificate.internship_title}\" "
        f"at {certificate.company} from {certificate.start_date.strftime('%B %d, %Y')} "
        f"to {certificate.end_date.strftime('%B %d, %Y')}.",
        width=60,
    )

    draw_centered("CERTIFICATE OF COMPLETION", title_font, int(img_height * 0.14), fill="#1e3a8a")
    draw_centered("This is to certify that", body_font, int(img_height * 0.30))
    draw_centered(certificate.intern_name.upper(), name_font, int(img_height * 0.38), fill="#000000")
    draw_centered(body_text, body_font, int(img_height * 0.52))
    draw_centered(
        f"Certificate No: {certificate.certificate_id}", details_font, int(img_height * 0.78), fill="#6b7280"
    )
    draw_centered(
        f"Issued on {certificate.issued_at.strftime('%B %d, %Y')}", details_font, int(img_height * 0.83),
        fill="#6b7280",
    )

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()
