"""Run the QuillPress API with uvicorn: ``python -m quillpress.server``."""

import uvicorn

from .core.config import settings


def main() -> None:
    uvicorn.run("quillpress.server.main:app", host=settings.server_host, port=settings.server_port, log_level="info")


if __name__ == "__main__":
    main()
