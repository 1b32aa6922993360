import argparse
import asyncio
import json
import logging

from dotenv import load_dotenv

from talent_search.config import get_settings, setup_logging
from talent_search.client.notifications import NotificationCenter
from talent_search.client.search_client import AISearchClient

logger = logging.getLogger(__name__)


async def run_search(query: str) -> int:
    settings = get_settings()
    functions_url = settings.resolved_functions_url
    if not functions_url:
        logger.error("Set FUNCTIONS_URL or SUPABASE_URL to locate the ai-search function.")
        return 2

    notifier = NotificationCenter()
    notifier.subscribe(lambda n: print(f"[{n.variant.value}] {n.title}: {n.description}"))

    client = AISearchClient(
        functions_url=functions_url,
        api_key=settings.supabase_anon_key or settings.supabase_key,
        notifier=notifier
    )
    try:
        await client.search(query)
    finally:
        await client.aclose()

    for profile in client.results:
        print(json.dumps(profile.model_dump(), default=str))
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Search talent profiles in natural language.")
    parser.add_argument("query", help="Free-text search query, e.g. 'python developers in Berlin'")
    args = parser.parse_args()

    load_dotenv()
    setup_logging(get_settings().log_level)
    raise SystemExit(asyncio.run(run_search(args.query)))


if __name__ == "__main__":
    main()
