from __future__ import annotations

import argparse
import logging
from pathlib import Path

import uvicorn

from .app import create_app
from .config import load_config


def main() -> None:
    parser = argparse.ArgumentParser(description="学生笔记增强 HTTP 服务")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML 配置文件路径（可选，环境变量优先）",
    )
    parser.add_argument("--host", type=str, default=None, help="监听地址（覆盖配置文件）")
    parser.add_argument("--port", type=int, default=None, help="监听端口（覆盖配置文件）")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )

    config = load_config(Path(args.config) if args.config else None)
    host = args.host or config.server.host
    port = args.port or config.server.port

    uvicorn.run(create_app(config), host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
