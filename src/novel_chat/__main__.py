"""Run the API: ``python -m novel_chat``."""
from __future__ import annotations

import uvicorn

from novel_chat.config import settings


def main() -> None:
    uvicorn.run(
        "novel_chat.app:create_app",
        factory=True,
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
