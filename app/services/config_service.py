"""
==============================================================================
Site Configuration Service Module
==============================================================================

Reads and replaces the singleton ``sitio_configuracion`` row.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from sqlalchemy.orm import Session

from app.db.models import SiteConfiguration


# Module logger
logger = logging.getLogger(__name__)


class SiteConfigService:
    """
    Admin access to the site configuration blob.

    Example:
        >>> service = SiteConfigService(db_session)
        >>> service.update_config({"nombre_sitio": "Mi tienda"})
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def get_config(self) -> Dict[str, Any]:
        """Stored blob, empty when the row does not exist yet."""
        row = self._db.get(SiteConfiguration, True)
        if row is None:
            return {}
        return dict(row.config_json or {})

    def update_config(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Replace the blob, creating the row when missing."""
        row = self._db.get(SiteConfiguration, True)
        if row is None:
            row = SiteConfiguration(id=True, config_json=dict(config))
            self._db.add(row)
        else:
            row.config_json = dict(config)

        self._db.commit()
        logger.info("✅ Site configuration updated")
        return dict(row.config_json)
