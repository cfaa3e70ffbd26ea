from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from shortlink_app.services.link_service import LinkService
from shortlink_app.dependencies import get_link_service, read_destination
from shortlink_app.security import require_token

router = APIRouter(tags=["links"], dependencies=[Depends(require_token)])


@router.put("/", response_class=PlainTextResponse)
async def create_link(
    destination: str = Depends(read_destination),
    link_service: LinkService = Depends(get_link_service)
):
    """Register the body as a destination under a new symbol; returns "/<symbol>" """
    symbol = await link_service.allocate(destination)
    return f"/{symbol}"


@router.put("/custom/{symbol}", response_class=PlainTextResponse)
async def create_custom_link(
    symbol: str,
    destination: str = Depends(read_destination),
    link_service: LinkService = Depends(get_link_service)
):
    """Register the body under an explicit symbol, replacing any previous destination"""
    registered = await link_service.register(symbol, destination)
    return f"/{registered}"
