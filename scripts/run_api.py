#!/usr/bin/env python3
"""
Start the glow persistence API under uvicorn.
"""

import argparse

import uvicorn

from glowstore.core.config import DEBUG, LOG_LEVEL


def main():
    parser = argparse.ArgumentParser(description='Run the Glow Persistence API')
    parser.add_argument('--host', default='0.0.0.0',
                        help='Interface to bind (default: 0.0.0.0)')
    parser.add_argument('--port', type=int, default=8000,
                        help='Port to listen on (default: 8000)')
    parser.add_argument('--workers', type=int, default=1,
                        help='Number of worker processes (default: 1)')
    parser.add_argument('--reload', action='store_true', default=DEBUG,
                        help='Reload on code changes (development only)')

    args = parser.parse_args()

    print(f"🚀 Starting Glow Persistence API on {args.host}:{args.port}")
    uvicorn.run(
        "glowstore.api.main:app",
        host=args.host,
        port=args.port,
        workers=None if args.reload else args.workers,
        reload=args.reload,
        log_level=LOG_LEVEL.lower(),
    )


if __name__ == '__main__':
    main()
