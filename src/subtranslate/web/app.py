from __future__ import annotations

import re
import time

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from subtranslate.config import SubtranslateConfig
from subtranslate.env import load_dotenv_if_present
from subtranslate.errors import FetchError
from subtranslate.fetch import is_http_url
from subtranslate.logging_utils import get_logger, setup_logging
from subtranslate.pipeline import SubtitlePipeline
from .dependencies import build_manifest, build_pipeline, build_subtitle_entries


log = get_logger("subtranslate.web")

TEXT_MEDIA_TYPE = "text/plain; charset=utf-8"
# 语言代码，如 he / ru / zh-CN / pt-BR
_LANG_RE = re.compile(r"^[A-Za-z]{2,3}(?:-[A-Za-z0-9]{1,8})*$")


def create_app(
    config: SubtranslateConfig | None = None,
    pipeline: SubtitlePipeline | None = None,
) -> FastAPI:
    """
    创建并配置 FastAPI 应用。

    - 加载 .env 环境变量并初始化日志；
    - 允许任意来源跨域访问（Stremio 客户端直接请求本服务）；
    - 注册 /health、/manifest.json、/subtitles、/translate 路由。
    """
    load_dotenv_if_present()
    setup_logging()
    if config is None:
        config = SubtranslateConfig.from_env()
    if pipeline is None:
        pipeline = build_pipeline(config)

    app = FastAPI(
        title="subtranslate",
        description="On-the-fly subtitle translation (SRT / WebVTT).",
    )
    app.state.config = config
    app.state.pipeline = pipeline

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def access_log(request: Request, call_next):  # type: ignore[no-untyped-def]
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        log.info(
            "%s %s %d - %.1f ms",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    @app.get("/health", response_class=JSONResponse)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/manifest.json", response_class=JSONResponse)
    async def manifest() -> dict:
        return build_manifest(config)

    @app.get("/subtitles", response_class=JSONResponse)
    async def subtitles(request: Request, url: str | None = Query(None)) -> list:
        """
        只处理客户端直接提供字幕 URL 的情况；字幕检索不在本服务范围内。
        """
        if url and not is_http_url(url):
            return []
        return build_subtitle_entries(str(request.base_url), url, config)

    # 同步路由：FastAPI 会在线程池中执行，不阻塞事件循环
    @app.get("/translate", response_class=PlainTextResponse)
    def translate(
        url: str | None = Query(None),
        lang: str | None = Query(None),
    ) -> PlainTextResponse:
        if not url:
            raise HTTPException(status_code=400, detail="missing url param")
        if not is_http_url(url):
            raise HTTPException(status_code=400, detail="url must be an http(s) address")
        target_lang = (lang or "").strip() or config.target_lang
        if not _LANG_RE.match(target_lang):
            raise HTTPException(status_code=400, detail="invalid lang param")
        try:
            text = pipeline.translate_url(url, target_lang)
        except FetchError as exc:
            log.error("获取原始字幕失败 %s: %s", url, exc)
            return PlainTextResponse(str(exc), status_code=502, media_type=TEXT_MEDIA_TYPE)
        except Exception as exc:
            log.exception("翻译失败 %s", url)
            return PlainTextResponse(
                f"translation error: {exc}",
                status_code=500,
                media_type=TEXT_MEDIA_TYPE,
            )
        return PlainTextResponse(text, media_type=TEXT_MEDIA_TYPE)

    return app


# 供 uvicorn 等 ASGI 服务器直接引用
app = create_app()


def main() -> None:
    """
    本地启动 Web 服务的入口。

    监听地址与端口：
      - SUBTRANSLATE_WEB_HOST（默认 0.0.0.0）
      - SUBTRANSLATE_WEB_PORT（默认读取 PORT，均未设置时为 7000）
    """
    import uvicorn

    load_dotenv_if_present()
    setup_logging()
    config = SubtranslateConfig.from_env()
    log.info("subtranslate web 服务启动于 %s:%d", config.web_host, config.web_port)
    uvicorn.run("subtranslate.web.app:app", host=config.web_host, port=config.web_port, reload=False)
