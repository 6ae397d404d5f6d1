"""CLI entrypoint to run the ParlayForge FastAPI server."""

from __future__ import annotations

import uvicorn

from parlayforge.config import configure_logging, get_settings


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run("parlayforge.api.server:app", host="0.0.0.0", port=settings.api_port, reload=False)


if __name__ == "__main__":  # pragma: no cover
    main()
