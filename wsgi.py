"""站点用户管理 - WSGI 入口.

    gunicorn 'wsgi:application'
"""

import os

os.environ.setdefault("FLASK_ENV", "production")

from app import create_app  # noqa: E402

application = create_app()
