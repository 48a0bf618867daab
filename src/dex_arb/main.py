from __future__ import annotations

import asyncio
import signal

from dex_arb.connectors.venue_client import build_venue_clients
from dex_arb.core.bot_config import BotConfig
from dex_arb.core.price_history import PriceHistory
from dex_arb.logger.console_logger import ConsoleLogger
from dex_arb.services.arbitrage_loop import ArbitrageLoopService


async def arbitrage_main() -> None:
    cfg = BotConfig.load()
    cfg.validate()

    logger = ConsoleLogger(log_level=cfg.log_level, log_dir=cfg.log_dir)

    venues = build_venue_clients(cfg)
    history = PriceHistory(max_entries=cfg.history_max_entries or None)
    bot = ArbitrageLoopService(venues, cfg, logger, history=history)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, bot.stop)
        except NotImplementedError:
            # add_signal_handler is not available on some platforms.
            pass

    try:
        # The loop exits on its own once stop() is seen between cycles.
        await bot.start()
    finally:
        for client in venues.values():
            try:
                await client.close()
            except Exception as e:
                logger.log_error(f"Failed to close venue {client.venue_id}: {e}")

        logger.log_summary(
            cycles=bot.cycles,
            trades=bot.trades_ok,
            failures=bot.trades_failed,
            unhedged=bot.unhedged,
            history_size=len(history),
        )


def main() -> None:
    asyncio.run(arbitrage_main())


if __name__ == "__main__":
    main()
