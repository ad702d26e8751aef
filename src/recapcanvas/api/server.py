"""
ASGI entry point for the Recap Canvas API.

Exposes the `app` object for ASGI servers and loads `.env` first, so the
hosted-model key and the boundary caps are in the environment before the
settings are read.

Usage
-----
Run via the console script:
    $ recap-api

Or via uvicorn directly:
    $ uvicorn recapcanvas.api.server:app --reload
"""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(".env"))

from recapcanvas.api.app import create_app  # noqa: E402
from recapcanvas.core.settings import load_settings  # noqa: E402

app = create_app()


def main() -> None:
    """Run the API server locally for development."""
    cfg = load_settings()
    key_state = "loaded" if cfg.openai_api_key else "missing (hosted routes will refuse)"
    print(f"[Server] OPENAI_API_KEY: {key_state}")

    uvicorn.run(
        "recapcanvas.api.server:app",
        host="127.0.0.1",
        port=8787,
        reload=cfg.is_dev,
        log_level=cfg.log_level.lower(),
    )


if __name__ == "__main__":
    main()
