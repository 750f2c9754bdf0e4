"""
ICP Lead Scorer - Main Entry Point
==================================
Run this file to start the FastAPI server.

Usage:
    python main.py                    # Start server on port 8000
    python main.py --port 8080        # Start server on custom port
    python main.py --reload           # Start with auto-reload (dev mode)
    python main.py --log-level debug  # Include factor-by-factor scoring trace

API Documentation:
    http://localhost:8000/docs        # Swagger UI
    http://localhost:8000/redoc       # ReDoc
"""

import argparse
import uvicorn
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from icp_scorer import __version__  # noqa: E402
from icp_scorer.config.settings import LOG_LEVEL, configure_logging  # noqa: E402


def main():
    parser = argparse.ArgumentParser(description="ICP Lead Scorer API Server")
    parser.add_argument(
        "--host",
        type=str,
        default="0.0.0.0",
        help="Host to bind the server to (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to run the server on (default: 8000)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=LOG_LEVEL.lower(),
        choices=["debug", "info", "warning", "error"],
        help="Logging level (default: LOG_LEVEL env var or info)",
    )

    args = parser.parse_args()
    configure_logging(args.log_level)

    print(f"""
    ╔══════════════════════════════════════════════════════════════╗
    ║                     ICP LEAD SCORER                          ║
    ║                      Version {__version__:<32}║
    ╠══════════════════════════════════════════════════════════════╣
    ║  Server:  http://{args.host}:{args.port:<38}║
    ║  Docs:    http://localhost:{args.port}/docs                          ║
    ║  Health:  http://localhost:{args.port}/api/health                    ║
    ╚══════════════════════════════════════════════════════════════╝
    """)

    # Single worker: businesses and configs live in process memory
    uvicorn.run(
        "icp_scorer.api.endpoints:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
