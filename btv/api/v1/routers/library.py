from fastapi import APIRouter, Depends

from btv.api.v1.dependency import Gateway
from btv.api.v1.schemas.base import ApiOut
from btv.api.v1.schemas.library import ContinueWatchingIn, FavoritesIn, LibraryOut
from btv.domain.watch.library_views import LibraryViewService

router = APIRouter(prefix="/library")


def get_library_view_service(gateway: Gateway) -> LibraryViewService:
    return LibraryViewService(gateway)


@router.post("/favorites")
async def favorites(
    payload: FavoritesIn,
    service: LibraryViewService = Depends(get_library_view_service),
) -> ApiOut[LibraryOut]:
    """Hydrate the browser's favorite program ids into full program records."""
    view = await service.favorites_view([str(i) for i in payload.ids])
    return ApiOut[LibraryOut](
        results=LibraryOut(programs=view.programs, empty_message=view.empty_message)
    )


@router.post("/continue")
async def continue_watching(
    payload: ContinueWatchingIn,
    service: LibraryViewService = Depends(get_library_view_service),
) -> ApiOut[LibraryOut]:
    view = await service.continue_watching_view(payload.video_source_ids)
    return ApiOut[LibraryOut](
        results=LibraryOut(programs=view.programs, empty_message=view.empty_message)
    )
