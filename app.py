"""站点用户管理 - 本地开发服务器.

用法:
    python app.py            # 启动开发服务器
    python app.py --init-db  # 启动前按模型建表(仅用于本地 SQLite)
"""

from __future__ import annotations

import argparse
import os
from typing import Final

from app import create_app, db
from app.settings import PROJECT_ROOT
from app.utils.structlog_config import get_system_logger

os.environ.setdefault("FLASK_ENV", "development")

USERDATA_DIR: Final = PROJECT_ROOT / "userdata"
DEFAULT_HOST: Final[str] = "127.0.0.1"
DEFAULT_PORT: Final[int] = 5001


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="站点用户管理开发服务器")
    parser.add_argument("--host", default=os.environ.get("FLASK_HOST", DEFAULT_HOST))
    parser.add_argument("--port", type=int, default=int(os.environ.get("FLASK_PORT", DEFAULT_PORT)))
    parser.add_argument("--init-db", action="store_true", help="启动前执行 db.create_all()")
    return parser.parse_args()


def main() -> None:
    """启动 Flask 开发服务器."""
    args = _parse_args()
    # 未配置 DATABASE_URL 时回退到 userdata 下的 SQLite 文件
    USERDATA_DIR.mkdir(exist_ok=True)
    app = create_app()
    logger = get_system_logger()

    if args.init_db:
        with app.app_context():
            db.create_all()
        logger.info("已按模型初始化数据库", database_url=app.config["SQLALCHEMY_DATABASE_URI"])

    base_url = f"http://{args.host}:{args.port}"
    logger.info(
        "站点用户管理开发环境已启动",
        users_url=f"{base_url}/users/",
        table_api_url=f"{base_url}/users/api/table",
        debug=app.debug,
    )
    app.run(host=args.host, port=args.port, debug=app.debug, use_reloader=False)


if __name__ == "__main__":
    main()
