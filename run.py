"""
Development Server Entry Point
==============================

Runs the reference backend's HTTP surface with uvicorn.

Usage:
    python run.py                  # Development mode with reload
    python run.py --no-reload      # Development mode without reload
    python run.py --create-tables  # Create missing tables on startup
"""

import argparse
import os


def main():
    """Run the development server."""
    import uvicorn
    from contacerta.core.config import get_settings

    settings = get_settings()

    # Parse command line arguments
    parser = argparse.ArgumentParser(description="Run the ContaCerta reference backend")
    parser.add_argument(
        "--no-reload",
        action="store_true",
        help="Disable auto-reload",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind to (default: 8000)",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables on startup",
    )
    args = parser.parse_args()

    if args.create_tables:
        # Read by the reloader subprocess as well
        os.environ["CONTACERTA_CREATE_TABLES"] = "1"

    print(f"\n{'='*50}")
    print(f"  {settings.app_name} v{settings.app_version}")
    print(f"  Environment: {settings.environment}")
    print(f"  Database: {settings.database_url}")
    print(f"{'='*50}\n")

    if args.no_reload:
        print("Running without auto-reload")
    else:
        print("Running with auto-reload enabled")

    print(f"Server: http://{args.host}:{args.port}")
    print("Press CTRL+C to stop\n")

    # Run uvicorn
    uvicorn.run(
        "contacerta.api.main:app_factory",
        factory=True,
        host=args.host,
        port=args.port,
        reload=not args.no_reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
