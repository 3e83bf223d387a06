from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import Response, StreamingResponse
from starlette.background import BackgroundTask

from app.services import fs_service, range_service
from app.services.exceptions import ServiceError
from app.services.serve_root import resolve_serve_root

router = APIRouter(tags=["files"])


def _raise_service_error(exc: ServiceError):
    detail = str(exc) or exc.__class__.__name__
    raise HTTPException(status_code=exc.status_code, detail=detail)


@router.get("/files/{relative_path:path}")
def get_file(relative_path: str, request: Request):
    range_header = request.headers.get("range")
    try:
        served = fs_service.resolve_served_file(resolve_serve_root(), relative_path)
        payload = range_service.respond(served.path, range_header, file_stat=served.stat)
    except ServiceError as exc:
        _raise_service_error(exc)

    if payload.stream is None:
        return Response(
            content=payload.body or b"",
            status_code=payload.status_code,
            media_type=payload.media_type,
            headers=payload.headers,
        )
    # 传输结束或连接断开后释放文件句柄
    return StreamingResponse(
        payload.stream,
        status_code=payload.status_code,
        media_type=payload.media_type,
        headers=payload.headers,
        background=BackgroundTask(payload.stream.close),
    )
