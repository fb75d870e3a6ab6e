"""Periodic updater for the logged-in developers' pull requests.

Runs ``update_pull_requests_for_logged_in_developer_ids`` (and, by default,
the review refresh) on a fixed interval until stopped.
"""

import asyncio
import contextlib
import logging
import signal
import sys
from datetime import UTC, datetime, timedelta
from typing import Any

from ghmirror.config import Config, ConfigurationError, configure_logging, load_config
from ghmirror.database import DataStore
from ghmirror.github import AnonymousAuth, GitHubClient, GitHubError, PersonalAccessTokenAuth
from ghmirror.identity import DeveloperId, StaticIdentityProvider
from ghmirror.sync import GitHubDataManager

logger = logging.getLogger(__name__)

DEFAULT_UPDATE_INTERVAL = timedelta(minutes=5)


class DataUpdater:
    """Runs developer sync passes on a schedule.

    A failed cycle is logged and counted; the loop keeps going.
    """

    def __init__(
        self,
        manager: GitHubDataManager,
        interval: timedelta = DEFAULT_UPDATE_INTERVAL,
        include_reviews: bool = True,
    ):
        """Initialize updater.

        Args:
            manager: Data manager to drive
            interval: Pause between the end of one cycle and the next
            include_reviews: Also refresh reviews after pull requests
        """
        self.manager = manager
        self.interval = interval
        self.include_reviews = include_reviews

        self.running = False
        self.shutdown_event = asyncio.Event()

        self.stats: dict[str, Any] = {
            "started_at": None,
            "total_cycles": 0,
            "successful_cycles": 0,
            "failed_cycles": 0,
            "last_cycle_at": None,
            "last_error": None,
        }

    async def run_once(self) -> bool:
        """Run a single update cycle; returns True when it succeeded."""
        cycle_start = datetime.now(UTC)
        self.stats["total_cycles"] += 1
        self.stats["last_cycle_at"] = cycle_start
        try:
            await self.manager.update_pull_requests_for_logged_in_developer_ids()
            if self.include_reviews:
                await self.manager.update_pull_request_reviews_for_logged_in_developer_ids()
        except Exception as e:
            logger.error(f"Update cycle failed: {e}")
            self.stats["failed_cycles"] += 1
            self.stats["last_error"] = {"message": str(e), "timestamp": datetime.now(UTC)}
            return False

        self.stats["successful_cycles"] += 1
        elapsed = datetime.now(UTC) - cycle_start
        logger.info(f"Update cycle completed in {elapsed.total_seconds():.1f}s")
        return True

    async def run(self) -> None:
        """Run cycles until ``stop()`` is called."""
        self.running = True
        self.stats["started_at"] = datetime.now(UTC)
        logger.info(f"Starting data updater (interval: {self.interval})")

        try:
            while self.running and not self.shutdown_event.is_set():
                await self.run_once()

                try:
                    await asyncio.wait_for(
                        self.shutdown_event.wait(), timeout=self.interval.total_seconds()
                    )
                    break
                except TimeoutError:
                    continue
        finally:
            self.running = False
            logger.info("Data updater stopped")

    def stop(self) -> None:
        """Ask the loop to exit after the current cycle."""
        self.shutdown_event.set()


async def build_identity_provider(config: Config) -> StaticIdentityProvider:
    """Log in one developer per configured token.

    Tokens that fail to authenticate are logged and skipped.
    """
    client_config = config.github.client_config()
    developer_ids: list[DeveloperId] = []
    for token in config.github.tokens:
        client = GitHubClient(PersonalAccessTokenAuth(token), client_config)
        try:
            user = await client.get_authenticated_user()
        except GitHubError as e:
            logger.error(f"Failed to authenticate configured token: {e}")
            await client.close()
            continue
        developer_ids.append(
            DeveloperId(login=user.login, url=f"https://github.com/{user.login}", client=client)
        )
        logger.info(f"Logged in as {user.login}")

    public_client = GitHubClient(AnonymousAuth(), client_config)
    return StaticIdentityProvider(developer_ids, public_client=public_client)


async def _close_clients(identity_provider: StaticIdentityProvider) -> None:
    for developer_id in identity_provider.get_logged_in_developer_ids():
        await developer_id.client.close()
    public = identity_provider.get_public_developer_id()
    if public is not None:
        await public.client.close()


async def main() -> None:
    """Main entry point for the data updater."""
    import argparse

    parser = argparse.ArgumentParser(description="ghmirror data updater")
    parser.add_argument("--config", help="Configuration file path")
    parser.add_argument("--log-level", default=None, help="Log level")
    parser.add_argument(
        "--interval", type=int, default=None, help="Seconds between update cycles"
    )

    args = parser.parse_args()

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        configure_logging(args.log_level or "INFO")
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    configure_logging(args.log_level or config.system.log_level)

    identity_provider = await build_identity_provider(config)
    manager = await GitHubDataManager.create(
        identity_provider, DataStore.from_config(config.store, "GitHubDataStore"), config.sync
    )
    interval = timedelta(seconds=args.interval) if args.interval else DEFAULT_UPDATE_INTERVAL
    updater = DataUpdater(manager, interval)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, updater.stop)

    try:
        await updater.run()
    finally:
        await manager.close()
        await _close_clients(identity_provider)


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
