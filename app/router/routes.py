"""
==============================================================================
Route Table
==============================================================================

Page routes of the storefront, grouped by layout:

    PUBLIC      /  /nosotros  /contacto  /categorias
                /categorias/:slug  /producto/:slug
    STANDALONE  /login  /c/:slug
    ADMIN       /admin  (→ /admin/productos)
                /admin/configuracion
                /admin/productos  /admin/productos/nuevo
                /admin/productos/editar/:id  /admin/productos/importar
                /admin/catalogos  /admin/catalogos/nuevo
                /admin/catalogos/editar/:id

``:name`` segments become route parameters.

==============================================================================
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import Dict, Optional, Pattern, Tuple


class Layout(str, enum.Enum):
    """Layout a page renders in."""

    PUBLIC = "public"
    STANDALONE = "standalone"
    ADMIN = "admin"

    def __str__(self) -> str:
        return self.value


_PARAM = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)")


def _compile(path: str) -> Pattern[str]:
    parts = []
    last = 0
    for param in _PARAM.finditer(path):
        parts.append(re.escape(path[last:param.start()]))
        parts.append(f"(?P<{param.group(1)}>[^/]+)")
        last = param.end()
    parts.append(re.escape(path[last:]))
    return re.compile("".join(parts))


@dataclass(frozen=True)
class RouteRecord:
    """One entry of the route table."""

    path: str
    name: Optional[str]
    layout: Layout
    redirect: Optional[str] = None
    pattern: Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "pattern", _compile(self.path))

    def match(self, path: str) -> Optional[Dict[str, str]]:
        """Return the route parameters when ``path`` matches, else None."""
        found = self.pattern.fullmatch(path)
        if found is None:
            return None
        return found.groupdict()


@dataclass(frozen=True)
class RouteMatch:
    record: RouteRecord
    params: Dict[str, str]

    @property
    def name(self) -> Optional[str]:
        return self.record.name

    @property
    def layout(self) -> Layout:
        return self.record.layout


ROUTES: Tuple[RouteRecord, ...] = (
    # Public site
    RouteRecord("/", "home", Layout.PUBLIC),
    RouteRecord("/nosotros", "nosotros", Layout.PUBLIC),
    RouteRecord("/contacto", "contacto", Layout.PUBLIC),
    RouteRecord("/categorias", "categorias", Layout.PUBLIC),
    RouteRecord("/categorias/:slug", "productos-por-categoria", Layout.PUBLIC),
    RouteRecord("/producto/:slug", "producto-detalle", Layout.PUBLIC),
    # Standalone pages
    RouteRecord("/login", "login", Layout.STANDALONE),
    RouteRecord("/c/:slug", "catalogo-publico", Layout.STANDALONE),
    # Administration
    RouteRecord("/admin", None, Layout.ADMIN, redirect="/admin/productos"),
    RouteRecord("/admin/configuracion", "admin-configuracion", Layout.ADMIN),
    RouteRecord("/admin/productos", "admin-productos", Layout.ADMIN),
    RouteRecord("/admin/productos/nuevo", "admin-productos-nuevo", Layout.ADMIN),
    RouteRecord("/admin/productos/editar/:id", "admin-productos-editar", Layout.ADMIN),
    RouteRecord("/admin/productos/importar", "admin-productos-importar", Layout.ADMIN),
    RouteRecord("/admin/catalogos", "admin-catalogos", Layout.ADMIN),
    RouteRecord("/admin/catalogos/nuevo", "admin-catalogos-nuevo", Layout.ADMIN),
    RouteRecord("/admin/catalogos/editar/:id", "admin-catalogos-editar", Layout.ADMIN),
)


def normalize_path(path: str) -> str:
    """Absolute path without trailing slash (root stays "/")."""
    path = "/" + path.strip().lstrip("/")
    if len(path) > 1:
        path = path.rstrip("/")
    return path


def resolve(path: str, routes: Tuple[RouteRecord, ...] = ROUTES) -> Optional[RouteMatch]:
    """Find the first record matching ``path``."""
    path = normalize_path(path)
    for record in routes:
        params = record.match(path)
        if params is not None:
            return RouteMatch(record=record, params=params)
    return None
