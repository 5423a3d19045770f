"""
API server entrypoint.

Usage:
    python -m figma2html
"""

import uvicorn

from figma2html import config


def main() -> int:
    uvicorn.run("app.main:app", host=config.API_HOST, port=config.API_PORT)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
