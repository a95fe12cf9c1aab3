"""Entry point for ``python -m you2api``."""

import argparse

import uvicorn

from .main import create_app, load_settings


def main() -> None:
    parser = argparse.ArgumentParser(description="you2api chat completions gateway")
    parser.add_argument("--config", default=None, help="Path to the YAML config file")
    parser.add_argument("--host", default=None, help="Bind host (overrides config)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (overrides config)")
    args = parser.parse_args()

    settings = load_settings(args.config)
    app = create_app(settings)
    uvicorn.run(
        app,
        host=args.host or settings.host,
        port=args.port or settings.port,
    )


if __name__ == "__main__":
    main()
