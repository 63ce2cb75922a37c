#!/usr/bin/env python3
"""
Launch the LocalPulse API with uvicorn.

Usage:
    python start_api.py                    # Development mode with reload
    python start_api.py --prod --workers 2 # Production mode
    python start_api.py --port 9000        # Custom port

Host and port default to LOCALPULSE_HOST / LOCALPULSE_PORT when set.
"""

import argparse
import os

import uvicorn
from dotenv import load_dotenv

APP_PATH = "api.main:app"
WATCHED_PACKAGES = ["api", "catalog", "ranking"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Start the LocalPulse API")
    parser.add_argument("--host", default=os.getenv("LOCALPULSE_HOST", "127.0.0.1"))
    parser.add_argument("--port", type=int, default=int(os.getenv("LOCALPULSE_PORT", "8000")))
    parser.add_argument("--prod", action="store_true", help="Run without reload, INFO logging")
    parser.add_argument("--workers", type=int, default=1, help="Worker processes in --prod mode")
    parser.add_argument("--no-reload", action="store_true", help="Disable auto-reload in dev mode")
    return parser


def main():
    load_dotenv()
    args = build_parser().parse_args()

    config = {
        "app": APP_PATH,
        "host": args.host,
        "port": args.port,
        "loop": "asyncio",
    }

    if args.prod:
        # Each worker holds its own in-memory feed
        config.update({"workers": args.workers, "log_level": "info"})
        print(f"🚀 LocalPulse API (production) on http://{args.host}:{args.port}, {args.workers} worker(s)")
    else:
        config["log_level"] = "debug"
        if not args.no_reload:
            config.update({"reload": True, "reload_dirs": WATCHED_PACKAGES})
        print(f"🔧 LocalPulse API (development) on http://{args.host}:{args.port}")
        print(f"   📚 API docs: http://{args.host}:{args.port}/docs")

    uvicorn.run(**config)


if __name__ == "__main__":
    main()
