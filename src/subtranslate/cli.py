from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .cache import build_cache
from .config import SubtranslateConfig
from .env import load_dotenv_if_present
from .errors import SubtranslateError
from .fetch import is_http_url
from .logging_utils import setup_logging
from .pipeline import SubtitlePipeline


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="subtranslate",
        description="subtranslate: 翻译 SRT / WebVTT 字幕，保留时间轴与原始格式。",
    )
    parser.add_argument(
        "source",
        type=str,
        help="原始字幕：http(s) URL 或本地文件路径。",
    )
    parser.add_argument(
        "--lang",
        type=str,
        default=None,
        help="目标语言代码（如: he, ru）。默认读取 SUBTRANSLATE_TARGET_LANG，未设置时为 he。",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["srt", "vtt"],
        default=None,
        help="强制指定字幕格式；默认根据文件扩展名 / 内容自动判断。",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="输出文件路径；不指定时输出到标准输出。",
    )
    parser.add_argument(
        "--engine",
        type=str,
        choices=["google", "none"],
        default=None,
        help="翻译引擎：google / none（不翻译，仅重新输出）。",
    )
    parser.add_argument(
        "--chunk-size",
        type=int,
        default=None,
        help="单次发送给翻译后端的最大字符数（默认: 2500）。",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=None,
        help="相邻两次翻译请求之间的间隔秒数（默认: 0.15，0 表示不等待）。",
    )
    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="对 URL 输入不读写翻译缓存。",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="日志级别（DEBUG / INFO / WARNING），默认读取 SUBTRANSLATE_LOG_LEVEL。",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    # 确保在解析参数和使用配置之前加载 .env 中的环境变量
    load_dotenv_if_present()
    if argv is None:
        argv = sys.argv[1:]

    parser = build_arg_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if args.chunk_size is not None and args.chunk_size < 1:
        parser.error("--chunk-size must be >= 1")
    if args.delay is not None and args.delay < 0:
        parser.error("--delay must be >= 0")

    try:
        config = SubtranslateConfig.from_env(
            target_lang=args.lang,
            translation_engine=args.engine,
            chunk_size=args.chunk_size,
            request_delay=args.delay,
        )
        source = args.source
        if is_http_url(source):
            cache = None if args.no_cache else build_cache(config)
            pipeline = SubtitlePipeline(config, cache=cache)
            text = pipeline.translate_url(source, config.target_lang, format_hint=args.format)
        else:
            source_path = Path(source).expanduser()
            if not source_path.is_file():
                print(f"处理失败: 找不到输入文件 {source_path}", file=sys.stderr)
                return 1
            pipeline = SubtitlePipeline(config)
            text = pipeline.translate_subtitle(
                source_path.read_bytes(),
                args.format or source_path.name,
                config.target_lang,
            )

        if args.output:
            out_path = Path(args.output).expanduser().resolve()
            out_path.parent.mkdir(parents=True, exist_ok=True)
            out_path.write_text(text, encoding="utf-8")
            print(f"字幕翻译完成: {out_path}", file=sys.stderr)
        else:
            sys.stdout.write(text)
        return 0
    except KeyboardInterrupt:
        print("\n用户中断", file=sys.stderr)
        return 1
    except (SubtranslateError, OSError, ValueError) as exc:
        print(f"处理失败: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
