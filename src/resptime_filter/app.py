"""Litestar application factory and CLI entry point."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import TextIO

from litestar import Litestar
from litestar.datastructures import State
from litestar.di import Provide

from resptime_filter.clients.elasticsearch_client import ElasticsearchClient
from resptime_filter.config import ConfigLoader, Settings
from resptime_filter.controllers.filter import FilterController
from resptime_filter.controllers.health import HealthController
from resptime_filter.models.event import Event
from resptime_filter.plugins.contracts.filter import FilterPlugin
from resptime_filter.plugins.response_time import FilterOptions, ResponseTimeFilter
from resptime_filter.resources.filter import FilterResource
from resptime_filter.resources.health import HealthResource

logger = logging.getLogger("resptime_filter.app")


class AppFactory:
    """Builds and configures the Litestar application. All methods are static."""

    @staticmethod
    def build_filter(
        settings: Settings, search_client: ElasticsearchClient | None = None,
    ) -> ResponseTimeFilter:
        """Construct the search client and filter plugin once.

        settings → es_client ─┐
        settings → options ───┴→ ResponseTimeFilter

        A pre-built ``search_client`` replaces the one built from settings.
        """
        es_client = search_client or ElasticsearchClient(
            hosts=settings.hosts,
            index=settings.index,
            user=settings.user,
            password=settings.password,
            timeout=settings.timeout,
        )
        options = FilterOptions(
            query=settings.query,
            sort=settings.sort,
            source_filter=settings.source_filter,
            percentage_limit=settings.percentage_limit,
            best_response_time_field_name=settings.best_response_time_field_name,
            worst_response_time_field_name=settings.worst_response_time_field_name,
            latency_field=settings.latency_field,
            result_size=settings.result_size,
            tags=list(settings.tags),
            add_tag=list(settings.add_tag),
            add_field=dict(settings.add_field),
            remove_field=list(settings.remove_field),
            remove_tag=list(settings.remove_tag),
        )
        logger.info("New response-time filter, hosts=%s", es_client.hosts)
        return ResponseTimeFilter(es_client, options)

    @staticmethod
    def _build(
        settings: Settings, search_client: ElasticsearchClient | None = None,
    ) -> State:
        """Construct the full object graph once."""
        plugin = AppFactory.build_filter(settings, search_client)
        filter_resource = FilterResource(filter_plugin=plugin)
        return State({
            "health": HealthResource(hosts=plugin.search_hosts),
            "filter": filter_resource,
        })

    @staticmethod
    def provide_health(state: State) -> HealthResource:
        """Provide the pre-built HealthResource from app state."""
        health_resource: HealthResource = state.health
        return health_resource

    @staticmethod
    def provide_filter(state: State) -> FilterResource:
        """Provide the pre-built FilterResource from app state."""
        filter_resource: FilterResource = state.filter
        return filter_resource

    @staticmethod
    def create_app(
        settings: Settings | None = None,
        search_client: ElasticsearchClient | None = None,
    ) -> Litestar:
        """Create and configure the Litestar application."""
        if settings is None:
            settings = ConfigLoader.load_settings()
        return Litestar(
            route_handlers=[HealthController, FilterController],
            state=AppFactory._build(settings, search_client),
            dependencies={
                "health_resource": Provide(AppFactory.provide_health, sync_to_thread=False),
                "filter_resource": Provide(AppFactory.provide_filter, sync_to_thread=False),
            },
        )


# Public alias so tests / uvicorn can call create_app() without knowing AppFactory.
create_app = AppFactory.create_app


class CLI:
    """Command-line interface for resptime-filter."""

    @staticmethod
    def _build_parser() -> argparse.ArgumentParser:
        """Build the CLI argument parser."""
        parser = argparse.ArgumentParser(
            prog="resptime-filter", description="Response-time filter CLI",
        )
        subparsers = parser.add_subparsers(dest="command")

        run_parser = subparsers.add_parser("run", help="Start the HTTP filter service")
        run_parser.add_argument("--host", default="0.0.0.0")
        run_parser.add_argument("--port", type=int, default=8000)
        run_parser.add_argument("--reload", action="store_true", help="Auto-reload on file changes")

        subparsers.add_parser(
            "filter", help="Filter JSON-lines events from stdin to stdout",
        )

        return parser

    @staticmethod
    async def filter_stream(
        plugin: FilterPlugin, source: TextIO, sink: TextIO,
    ) -> int:
        """Filter one JSON event per line. Returns the count written.

        Lines that are blank or not a JSON object are logged and skipped.
        """
        written = 0
        for line_number, line in enumerate(source, start=1):
            if not line.strip():
                continue
            try:
                data = json.loads(line)
            except json.JSONDecodeError as error:
                logger.warning("Skipping line %d: invalid JSON (%s)", line_number, error)
                continue
            if not isinstance(data, dict):
                logger.warning("Skipping line %d: not a JSON object", line_number)
                continue
            event = await plugin.handle(Event(data))
            sink.write(json.dumps(event.to_dict()) + "\n")
            written += 1
        sink.flush()
        return written

    @staticmethod
    def main(argv: list[str] | None = None) -> None:
        """CLI entry point. Catches all exceptions and exits cleanly."""
        parser = CLI._build_parser()
        args = parser.parse_args(argv)

        if args.command is None:
            parser.print_help()
            sys.exit(1)

        try:
            settings = ConfigLoader.load_settings()
            logging.basicConfig(
                level=settings.log_level.upper(),
                format="%(asctime)s %(levelname)s %(name)s: %(message)s",
                stream=sys.stderr,
            )
            if args.command == "run":
                import uvicorn

                uvicorn.run(
                    "resptime_filter.app:create_app",
                    factory=True,
                    host=args.host,
                    port=args.port,
                    reload=args.reload,
                )
            elif args.command == "filter":
                plugin = AppFactory.build_filter(settings)
                asyncio.run(CLI.filter_stream(plugin, sys.stdin, sys.stdout))
        except KeyboardInterrupt:
            pass
        except Exception as error:
            print(f"Error: {error}", file=sys.stderr)
            sys.exit(1)


if __name__ == "__main__":
    CLI.main()
