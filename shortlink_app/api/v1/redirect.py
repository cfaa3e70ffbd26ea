from urllib.parse import quote

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse
from shortlink_app.services.link_service import RedirectService
from shortlink_app.dependencies import get_redirect_service

router = APIRouter(tags=["redirect"])

# Printable ASCII passes through untouched; anything else cannot go in a header
HEADER_SAFE = "".join(chr(code) for code in range(0x20, 0x7f))


def redirect_response(destination: str) -> PlainTextResponse:
    """302 to destination, sent as stored, with a "Go to" body"""
    return PlainTextResponse(
        f"Go to {destination}",
        status_code=status.HTTP_302_FOUND,
        headers={"location": quote(destination, safe=HEADER_SAFE)}
    )


@router.get("/")
async def redirect_root(redirect_service: RedirectService = Depends(get_redirect_service)):
    """Redirect using the empty symbol (the root link)"""
    destination = await redirect_service.resolve("")
    return redirect_response(destination)


@router.get("/{symbol}")
async def redirect_to_destination(
    symbol: str,
    redirect_service: RedirectService = Depends(get_redirect_service)
):
    """
    Redirect to the destination registered under symbol.

    Lookups never wait on allocation. Unknown symbols raise
    SymbolNotFoundError, answered with an empty 404.
    """
    destination = await redirect_service.resolve(symbol)
    return redirect_response(destination)
