"""
==============================================================================
Quote Shortlist Endpoints
==============================================================================

Process-wide "cotización" selection of product ids.

==============================================================================
"""

from fastapi import APIRouter, Depends

from app.core.dependencies import get_shortlist, get_toast
from app.schemas.site import ShortlistResponse, ShortlistToggleResponse
from app.state.shortlist import ShortlistStore
from app.state.toast import ToastKind, ToastNotifier


router = APIRouter(prefix="/cotizacion", tags=["Shortlist"])


def _selection(shortlist: ShortlistStore) -> ShortlistResponse:
    return ShortlistResponse(count=shortlist.count, product_ids=shortlist.as_list())


@router.get("", response_model=ShortlistResponse)
async def get_shortlist_items(shortlist: ShortlistStore = Depends(get_shortlist)):
    """Current selection in insertion order."""
    return _selection(shortlist)


@router.post("/{product_id}", response_model=ShortlistResponse)
async def add_to_shortlist(product_id: str, shortlist: ShortlistStore = Depends(get_shortlist)):
    """Add a product; adding twice keeps one entry."""
    shortlist.add(product_id)
    return _selection(shortlist)


@router.delete("/{product_id}", response_model=ShortlistResponse)
async def remove_from_shortlist(product_id: str, shortlist: ShortlistStore = Depends(get_shortlist)):
    """Remove a product; absent ids are ignored."""
    shortlist.remove(product_id)
    return _selection(shortlist)


@router.post("/{product_id}/toggle", response_model=ShortlistToggleResponse)
async def toggle_in_shortlist(
    product_id: str,
    shortlist: ShortlistStore = Depends(get_shortlist),
    toast: ToastNotifier = Depends(get_toast)
):
    """Flip membership and announce the result."""
    selected = shortlist.toggle(product_id)

    if selected:
        toast.show("Producto añadido a la cotización", ToastKind.INFO)
    else:
        toast.show("Producto quitado de la cotización", ToastKind.INFO)

    return ShortlistToggleResponse(
        count=shortlist.count,
        product_ids=shortlist.as_list(),
        product_id=product_id,
        selected=selected
    )


@router.delete("", response_model=ShortlistResponse)
async def clear_shortlist(shortlist: ShortlistStore = Depends(get_shortlist)):
    """Empty the selection."""
    shortlist.clear()
    return _selection(shortlist)
