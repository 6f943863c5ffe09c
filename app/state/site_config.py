"""
==============================================================================
Site Config Loader
==============================================================================

Process-wide cache of the site configuration blob.

The blob is fetched at most once: later calls are no-ops while a value is
cached or a fetch is already running. The ``loading`` flag only debounces
calls made on the same event loop; it is not a lock and offers no
guarantee across threads.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from app.core.exceptions import AppException
from app.store.remote import RemoteStore


# Module logger
logger = logging.getLogger(__name__)


class SiteConfigLoader:
    """
    Load-once cache of the remote configuration.

    Attributes:
        config: Cached blob (None until the first successful load)
        loading: True while a fetch is in flight
        error: Message of the last failed fetch

    Example:
        >>> loader = SiteConfigLoader(store)
        >>> await loader.fetch_config()
        >>> loader.config["nombre_sitio"]
        'Catálogo'
    """

    def __init__(self, store: RemoteStore) -> None:
        self._store = store
        self.config: Optional[Dict[str, Any]] = None
        self.loading: bool = False
        self.error: Optional[str] = None
        self._generation = 0

    @property
    def is_loaded(self) -> bool:
        return self.config is not None

    async def fetch_config(self) -> None:
        """
        Fetch the blob unless it is cached or already being fetched.

        A result arriving after reset() is discarded.
        """
        if self.config is not None or self.loading:
            return

        self.loading = True
        generation = self._generation
        try:
            data = await self._store.fetch_site_config()
            if generation != self._generation:
                logger.debug("Site configuration reset during fetch, result dropped")
            elif data is not None:
                self.config = data
                self.error = None
                logger.info("Site configuration loaded")
            else:
                logger.warning("Site configuration row not found")

        except AppException as e:
            if generation == self._generation:
                self.error = e.message
            logger.error(f"Error al cargar la configuración del sitio: {e.message}")

        except Exception as e:
            if generation == self._generation:
                self.error = str(e)
            logger.exception("Error al cargar la configuración del sitio")

        finally:
            self.loading = False

    def reset(self) -> None:
        """Drop the cached blob so the next fetch_config() reloads it."""
        self._generation += 1
        self.config = None
        self.error = None
        logger.debug("Site configuration cache reset")
