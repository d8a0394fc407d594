#!/usr/bin/env python3
"""
Simple script to run the Lost & Found API server from the root directory.
"""

import argparse
import sys

import uvicorn


def main():
    parser = argparse.ArgumentParser(description='Run Lost & Found API Server')
    parser.add_argument('--host', default='0.0.0.0', help='Interface to bind')
    parser.add_argument('--port', type=int, default=8000, help='Port to run the server on')
    parser.add_argument('--reload', action='store_true', help='Reload on code changes')
    args = parser.parse_args()

    print(f"🚀 Starting Lost & Found API server on port {args.port}...")
    print("Press Ctrl+C to stop the server")

    try:
        uvicorn.run("api.main:app", host=args.host, port=args.port, reload=args.reload)
    except KeyboardInterrupt:
        print("\n🛑 Server stopped by user")
    except Exception as e:
        print(f"❌ Error running server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
