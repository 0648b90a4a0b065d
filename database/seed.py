"""
First-run setup for the quoting/ordering data layer.
Creates the company settings record when the store has none.
"""

import logging

from config import Config
from database.models import ProductMode, PDFTheme
from errors import ValidationError
from services.settings_repository import SettingsRepository

logger = logging.getLogger(__name__)


def seed_company_settings(session, company_name, owner_name, password, phone='',
                          config=Config):
    """
    Create the company settings on first run. Company name, owner name and
    password are required. Returns the settings dict; an existing record is
    returned unchanged.
    """
    repo = SettingsRepository(session)
    existing = repo.get()
    if existing:
        logger.info(f"Company settings already exist: {existing['company_name']}")
        return existing

    if not (company_name or '').strip() or not (owner_name or '').strip() or not (password or '').strip():
        raise ValidationError("Company name, owner name and password are required")

    repo.add({
        'company_name': company_name,
        'owner_name': owner_name,
        'phone': phone or '',
        'default_observations': config.DEFAULT_OBSERVATIONS,
        'product_mode': ProductMode.SIMPLE,
        'pdf_theme': PDFTheme.SIMPLE,
        'shipping_rate_per_km': config.DEFAULT_SHIPPING_RATE_PER_KM,
        'password': password
    })
    logger.info(f"Created company settings: {company_name}")
    return repo.get()
