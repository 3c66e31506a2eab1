"""Run the snaplink server with ``python -m snaplink``."""

import uvicorn

from snaplink.core.config import settings


def run() -> None:
    """Start uvicorn on HOST:PORT, trusting the proxy's forwarded headers."""
    uvicorn.run(
        "snaplink.main:app",
        host=settings.HOST,
        port=settings.PORT,
        proxy_headers=True,
        forwarded_allow_ips="*",
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
