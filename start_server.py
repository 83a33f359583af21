#!/usr/bin/env python3
"""Launch the EcoQuest marker API.

Usage:
    ./start_server.py              # Serve on ECOQUEST_HOST:ECOQUEST_PORT (127.0.0.1:3001)
    ./start_server.py --port 8080  # Use custom port
    ./start_server.py --reload     # Restart on code changes (development)
"""

import argparse

import uvicorn

from ecoquest.config import get_settings


def main():
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Launch EcoQuest marker API")
    parser.add_argument("--port", type=int, default=settings.port,
                        help=f"Server port (default: {settings.port})")
    parser.add_argument("--host", default=settings.host,
                        help=f"Server host (default: {settings.host})")
    parser.add_argument("--reload", action="store_true", help="Auto-reload on code changes")
    args = parser.parse_args()

    url = f"http://{args.host}:{args.port}"

    print(f"""
EcoQuest API Server
  Server running at: {url}
  Data file:         {settings.data_file}
  Press Ctrl+C to stop
""")

    # uvicorn installs its own SIGINT/SIGTERM handlers and exits cleanly
    uvicorn.run("ecoquest.server:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
