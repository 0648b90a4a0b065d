"""
Settings Repository - the single-slot company settings record.

The record either exists or it does not; absence means first-run setup is
still required. A second `add` is refused with ConflictError.
"""

import base64
import logging
from typing import Dict, Optional

from sqlalchemy.orm import Session
from werkzeug.security import generate_password_hash, check_password_hash

from database.models import CompanySettings, ProductMode, PDFTheme
from errors import ConflictError, NotFoundError
from validators import (
    coerce_enum, require_email, require_fields, require_non_negative, sanitize_string
)

logger = logging.getLogger(__name__)

WRITABLE_FIELDS = ['company_name', 'owner_name', 'phone', 'email', 'logo_base64',
                   'default_observations', 'product_mode', 'pdf_theme',
                   'shipping_rate_per_km', 'origin_address']
REQUIRED_FIELDS = ['company_name', 'owner_name']


IMAGE_SIGNATURES = (
    (b'\x89PNG\r\n\x1a\n', 'image/png'),
    (b'\xff\xd8\xff', 'image/jpeg'),
    (b'GIF87a', 'image/gif'),
    (b'GIF89a', 'image/gif'),
    (b'<svg', 'image/svg+xml'),
    (b'<?xml', 'image/svg+xml'),
)


def detect_image_type(data: bytes) -> str:
    """MIME type from the leading bytes of an image."""
    if data[:4] == b'RIFF' and data[8:12] == b'WEBP':
        return 'image/webp'
    for signature, mime_type in IMAGE_SIGNATURES:
        if data.startswith(signature):
            return mime_type
    return 'application/octet-stream'


def encode_logo(logo, mime_type: Optional[str] = None) -> Optional[str]:
    """
    Store raw image bytes as a data URI, typed from `mime_type` or the
    image's leading bytes. Strings are kept as given.
    """
    if isinstance(logo, (bytes, bytearray)):
        data = bytes(logo)
        mime_type = mime_type or detect_image_type(data)
        return f"data:{mime_type};base64," + base64.b64encode(data).decode('ascii')
    return logo


class SettingsRepository:
    """Repository for the company settings slot."""

    def __init__(self, session: Session):
        self.session = session

    def _slot(self) -> Optional[CompanySettings]:
        return self.session.get(CompanySettings, CompanySettings.SINGLETON_ID)

    def _values(self, data: Dict) -> Dict:
        require_email(data)
        require_non_negative(data, 'shipping_rate_per_km')
        values = {key: data[key] for key in WRITABLE_FIELDS if key in data}
        for key in ('company_name', 'owner_name'):
            if key in values:
                values[key] = sanitize_string(values[key])
        if 'product_mode' in values:
            values['product_mode'] = coerce_enum(ProductMode, values['product_mode'], 'product_mode').value
        if 'pdf_theme' in values:
            values['pdf_theme'] = coerce_enum(PDFTheme, values['pdf_theme'], 'pdf_theme').value
        if 'logo_base64' in values:
            values['logo_base64'] = encode_logo(values['logo_base64'])
        elif 'logo' in data:
            values['logo_base64'] = encode_logo(data['logo'], data.get('logo_mime_type'))
        return values

    def exists(self) -> bool:
        return self._slot() is not None

    def is_setup_required(self) -> bool:
        """True until the company settings have been created."""
        return not self.exists()

    def get(self) -> Optional[Dict]:
        settings = self._slot()
        return settings.to_dict() if settings else None

    def add(self, data: Dict) -> int:
        """Create the settings record. Fails if one already exists."""
        if self.exists():
            raise ConflictError("Company settings already exist")
        require_fields(data, REQUIRED_FIELDS)
        settings = CompanySettings(id=CompanySettings.SINGLETON_ID, **self._values(data))
        if data.get('password'):
            settings.password_hash = generate_password_hash(data['password'], method='pbkdf2:sha256')
        self.session.add(settings)
        self.session.flush()
        logger.info(f"Created company settings for '{settings.company_name}'")
        return settings.id

    def update(self, data: Dict) -> Dict:
        """Merge fields into the existing settings record."""
        settings = self._slot()
        if settings is None:
            raise NotFoundError('CompanySettings', CompanySettings.SINGLETON_ID)
        require_fields(data, [f for f in REQUIRED_FIELDS if f in data])
        for key, value in self._values(data).items():
            setattr(settings, key, value)
        if data.get('password'):
            settings.password_hash = generate_password_hash(data['password'], method='pbkdf2:sha256')
        self.session.flush()
        logger.info("Updated company settings")
        return settings.to_dict()

    def save(self, data: Dict) -> Dict:
        """Update the settings if present, otherwise create them."""
        if self.exists():
            return self.update(data)
        self.add(data)
        return self.get()

    def set_password(self, password: str) -> None:
        settings = self._slot()
        if settings is None:
            raise NotFoundError('CompanySettings', CompanySettings.SINGLETON_ID)
        require_fields({'password': password}, ['password'])
        settings.password_hash = generate_password_hash(password, method='pbkdf2:sha256')
        self.session.flush()
        logger.info("Company password changed")

    def verify_password(self, password: str) -> bool:
        """
        Check a login password. With no password configured any input is
        accepted, matching the local single-user model.
        """
        settings = self._slot()
        if settings is None:
            return False
        if not settings.password_hash:
            return True
        return bool(password) and check_password_hash(settings.password_hash, password)
