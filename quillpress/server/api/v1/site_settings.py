"""
Site Settings API Endpoints.

The singleton site configuration and the structured documents the dashboard
edits on it: menus, widgets, appearance and search-engine verification files.
``verification_router`` serves verification files at the site root.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Response

from quillpress.core.models.io.site_settings import (
    MenusPayload,
    MenusResponse,
    PublicSiteSettingsRead,
    SiteSettingsRead,
    SiteSettingsUpdate,
    VerificationFileCreate,
    VerificationFileDeleteResponse,
    VerificationFileRead,
    VerificationFileUploadResponse,
    WidgetsPayload,
    WidgetsResponse,
)
from quillpress.server.services.deps import SiteSettingsServiceDep

router = APIRouter(tags=["settings"])
verification_router = APIRouter(tags=["settings"])

VERIFICATION_CACHE_CONTROL = "public, max-age=3600"


async def _serve_verification_file(filename: str, service: SiteSettingsServiceDep) -> Response:
    content, content_type = await service.find_verification_file(filename)
    return Response(content=content, media_type=content_type, headers={"Cache-Control": VERIFICATION_CACHE_CONTROL})


@router.get("", response_model=SiteSettingsRead, summary="Get Site Settings")
async def get_settings(service: SiteSettingsServiceDep) -> SiteSettingsRead:
    """Return the site settings, creating the defaults on first access."""
    return await service.get()


@router.put(
    "",
    response_model=SiteSettingsRead,
    summary="Update Site Settings",
    description="Update the given settings. Absent or null fields are left unchanged; menus and widgets are normalized.",
)
async def update_settings(data: SiteSettingsUpdate, service: SiteSettingsServiceDep) -> SiteSettingsRead:
    return await service.update(data)


@router.get("/public", response_model=PublicSiteSettingsRead, summary="Get Public Site Settings")
async def public_settings(service: SiteSettingsServiceDep) -> PublicSiteSettingsRead:
    return await service.public()


@router.get("/menus", response_model=MenusResponse, summary="Get Menus")
async def get_menus(service: SiteSettingsServiceDep) -> MenusResponse:
    return MenusResponse(menus=await service.get_menus())


@router.put("/menus", response_model=MenusResponse, summary="Save Menus")
async def save_menus(data: MenusPayload, service: SiteSettingsServiceDep) -> MenusResponse:
    """
    Save the site menus.

    Malformed menus and items are dropped or defaulted, page and post items get
    their URLs from the linked slugs, and reserved pages are removed.
    """
    return MenusResponse(menus=await service.set_menus(data.menus))


@router.get("/widgets", response_model=WidgetsResponse, summary="Get Widgets")
async def get_widgets(service: SiteSettingsServiceDep) -> WidgetsResponse:
    return WidgetsResponse(widgets=await service.get_widgets())


@router.put("/widgets", response_model=WidgetsResponse, summary="Save Widgets")
async def save_widgets(data: WidgetsPayload, service: SiteSettingsServiceDep) -> WidgetsResponse:
    return WidgetsResponse(widgets=await service.set_widgets(data.widgets))


@router.get("/appearance", response_model=Dict[str, Any], summary="Get Appearance")
async def get_appearance(service: SiteSettingsServiceDep) -> Dict[str, Any]:
    return await service.get_appearance()


@router.put(
    "/appearance",
    response_model=Dict[str, Any],
    summary="Save Appearance",
    responses={400: {"description": "Invalid color value"}},
)
async def save_appearance(
    service: SiteSettingsServiceDep,
    appearance: Dict[str, Any] = Body(...),
) -> Dict[str, Any]:
    return await service.set_appearance(appearance)


@router.post(
    "/verification-files",
    response_model=VerificationFileUploadResponse,
    summary="Upload Verification File",
    responses={400: {"description": "Unsupported extension or file too large"}},
)
async def upload_verification_file(
    data: VerificationFileCreate, service: SiteSettingsServiceDep
) -> VerificationFileUploadResponse:
    """
    Store a search-engine verification file.

    - **platform**: google, bing, yandex, pinterest or other. One file per platform.
    - **filename**: `.html`, `.txt`, `.json` or `.xml`; served at the site root.
    - **content**: At most 10240 bytes.
    """
    return await service.upload_verification_file(data)


@router.get("/verification-files", response_model=List[VerificationFileRead], summary="List Verification Files")
async def list_verification_files(service: SiteSettingsServiceDep) -> List[VerificationFileRead]:
    return await service.list_verification_files()


@router.delete(
    "/verification-files/{platform}",
    response_model=VerificationFileDeleteResponse,
    summary="Delete Verification File",
    responses={404: {"description": "Verification file not found"}},
)
async def delete_verification_file(platform: str, service: SiteSettingsServiceDep) -> VerificationFileDeleteResponse:
    return await service.delete_verification_file(platform)


@router.get(
    "/verification-files/serve/{filename}",
    summary="Serve Verification File",
    response_class=Response,
    responses={404: {"description": "Verification file not found"}},
)
async def serve_verification_file(filename: str, service: SiteSettingsServiceDep) -> Response:
    return await _serve_verification_file(filename, service)


@verification_router.get(
    "/{name}.{ext}",
    summary="Serve Verification File at Root",
    response_class=Response,
    include_in_schema=False,
)
async def serve_root_verification_file(name: str, ext: str, service: SiteSettingsServiceDep) -> Response:
    return await _serve_verification_file(f"{name}.{ext}", service)
