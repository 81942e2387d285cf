"""
BetterFeed article pipeline.

    python main.py serve --host 0.0.0.0 --port 8000
    python main.py fetch --limit 5 --no-shuffle
"""

import argparse
import asyncio
import json
import logging

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

async def run_fetch(limit: int, generate_summaries: bool, shuffle: bool) -> dict:
    from config.config import get_settings
    from core.bootstrap import open_pipeline

    async with open_pipeline(get_settings()) as pipeline:
        page = await pipeline.fetch_page(limit, generate_summaries=generate_summaries, shuffle=shuffle)
        if generate_summaries:
            # let background enrichment land in the database before the process exits
            await pipeline.scheduler.join()
            logger.info(f"Enrichment done: {pipeline.scheduler.processed} processed, {pipeline.scheduler.failed} failed")
    return page

def main():
    parser = argparse.ArgumentParser(description="Aggregate and summarize articles from external sources")
    parser.add_argument("--verbose", "-v", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    fetch = sub.add_parser("fetch", help="fetch one page and print it as JSON")
    fetch.add_argument("--limit", type=int, default=10, help="max articles per source")
    fetch.add_argument("--no-summaries", action="store_true", help="skip background enrichment")
    fetch.add_argument("--no-shuffle", action="store_true", help="keep source registration order")

    args = parser.parse_args()

    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "serve":
        import uvicorn
        from api.app import create_app

        uvicorn.run(create_app(), host=args.host, port=args.port, log_level="debug" if args.verbose else "info")
    else:
        page = asyncio.run(run_fetch(args.limit, not args.no_summaries, not args.no_shuffle))
        print(json.dumps(page, indent=2, ensure_ascii=False))

if __name__ == "__main__":
    main()
