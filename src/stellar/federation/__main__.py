from typing import List, Optional, Tuple
import argparse
import asyncio
import json
import logging
import os
import sys
from logging.config import dictConfig

import aiohttp
import sentry_sdk

from stellar.federation.address import address_predicate, parse_address
from stellar.federation.config import Settings
from stellar.federation.errors import FederationError
from stellar.federation.model import QueryType
from stellar.federation.resolver import FederationResolver
from stellar.federation.strkey import is_valid_account_id
from stellar.federation.transport import AiohttpTransport

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging_config_file = os.getenv("LOGGING_CONFIG_FILE", "")

    if len(logging_config_file) > 0:
        with open(logging_config_file) as fl:
            dictConfig(json.load(fl))
        return

    logging.basicConfig()
    logging.getLogger().setLevel(settings.log_level)


def configure_sentry(settings: Settings) -> None:
    if settings.sentry_dsn:
        sentry_sdk.init(dsn=settings.sentry_dsn)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stellar-federation", description="Resolve stellar federation records"
    )
    parser.add_argument(
        "subject",
        nargs="+",
        help="Stellar address(es), account id(s) or transaction id(s) to resolve.",
    )
    parser.add_argument(
        "--type",
        dest="query_type",
        choices=[t.value for t in QueryType if t != QueryType.FORWARD],
        default=None,
        help="The lookup type. Inferred from each subject when omitted.",
    )
    parser.add_argument(
        "--server",
        default=None,
        help="The federation server to query, skipping stellar.toml discovery.",
    )
    parser.add_argument(
        "--discover",
        action="store_true",
        help="Only print the federation server advertised by each domain.",
    )
    return parser


def infer_query_type(subject: str) -> QueryType:
    if address_predicate(subject):
        return QueryType.NAME
    if is_valid_account_id(subject):
        return QueryType.ID
    return QueryType.TXID


async def resolve_subject(
    resolver: FederationResolver,
    subject: str,
    query_type: QueryType,
    server: Optional[str],
    discover: bool,
) -> dict:
    if discover:
        domain = parse_address(subject).domain if address_predicate(subject) else subject
        return {"domain": domain, "federation_server": await resolver.discover(domain)}

    if server is None:
        record = await resolver.resolve_address(subject)
    else:
        record = await resolver.query(server, query_type, subject)
    return record.model_dump(mode="json", exclude_none=True)


async def report_subject(
    resolver: FederationResolver,
    subject: str,
    query_type: QueryType,
    server: Optional[str],
    discover: bool,
) -> Tuple[bool, str]:
    try:
        result = await resolve_subject(resolver, subject, query_type, server, discover)
    except FederationError as e:
        return False, f"error {subject} {type(e).__name__}: {e}"
    except Exception as e:
        logger.exception("Exception resolving subject %s", subject)
        sentry_sdk.capture_exception(e)
        return False, f"error {subject} {type(e).__name__}: {e}"
    return True, json.dumps({"subject": subject, **result})


async def realMain(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = Settings()
    configure_logging(settings)
    configure_sentry(settings)

    subjects: List[Tuple[str, QueryType]] = []
    for subject in args.subject:
        if args.query_type is not None:
            query_type = QueryType(args.query_type)
        else:
            query_type = infer_query_type(subject)
        if query_type != QueryType.NAME and args.server is None and not args.discover:
            parser.error(f"--server is required for {query_type.value} lookups")
        subjects.append((subject, query_type))

    async with aiohttp.ClientSession() as session:
        resolver = FederationResolver(
            AiohttpTransport(session, settings.http_timeout, settings.user_agent)
        )
        async with asyncio.TaskGroup() as tg:
            tasks = [
                tg.create_task(
                    report_subject(
                        resolver, subject, query_type, args.server, args.discover
                    )
                )
                for subject, query_type in subjects
            ]

    failed = False
    for task in tasks:
        ok, line = task.result()
        print(line)
        failed = failed or not ok
    return 1 if failed else 0


def main() -> None:
    sys.exit(asyncio.run(realMain()))


if __name__ == "__main__":
    main()
