from fastapi import FastAPI
import os
from fastapi.middleware.cors import CORSMiddleware

import uvicorn

from app.api.file_routes import router as file_router
from app.schemas.files import HealthResponse
from app.services.serve_root import resolve_serve_root


app = FastAPI(title="Range File Server", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=r".*",
    allow_credentials=True,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
    # 播放器需要读取分段响应头
    expose_headers=["Accept-Ranges", "Content-Range", "Content-Length"],
    max_age=86400,
)

app.include_router(file_router)


# 轻量健康检查
@app.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="ok", serve_root=str(resolve_serve_root()))


@app.on_event("startup")
def _report_serve_root():
    root = resolve_serve_root()
    if not root.is_dir():
        print(f"[startup] 文件根目录不存在，所有请求将返回 404: {root}")
        return
    print(f"[startup] 文件根目录: {root}")


def _resolve_port() -> int:
    try:
        return int(os.environ.get("RANGE_SERVER_PORT", "8000"))
    except ValueError:
        return 8000


if __name__ == "__main__":
    host = os.environ.get("RANGE_SERVER_HOST", "0.0.0.0")
    port = _resolve_port()
    print(f"[boot] Range File Server 即将启动: http://{host}:{port}")
    uvicorn.run(app, host=host, port=port)
