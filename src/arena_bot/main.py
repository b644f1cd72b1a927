#!/usr/bin/env python3
"""
Arena circler bot - Main Entry Point

Usage:
    python main.py -i bot-1                       # Play on the live server
    python main.py -i bot-1 --url ws://host:8889  # Play on another server
    python main.py -i bot-1 -f bot-1-messages.log # Replay a recorded session
    python main.py -i bot-1 --url ws://host:8889 --save-params  # Remember the server
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Arena circler bot")
    parser.add_argument(
        "-i",
        "--id",
        dest="player_id",
        required=True,
        help="Player id to register with",
    )
    parser.add_argument(
        "-f",
        "--file",
        dest="replay",
        help="Replay the [recv] messages of a messages log instead of connecting",
    )
    parser.add_argument(
        "--url",
        help="Game server WebSocket URL (default from params.json or config)",
    )
    parser.add_argument(
        "--log-dir",
        help="Directory for the <player>-messages.log file",
    )
    parser.add_argument(
        "--no-message-log",
        action="store_true",
        help="Do not record sent/received messages",
    )
    parser.add_argument(
        "--params",
        help="Parameters JSON file (default: params.json next to this module)",
    )
    parser.add_argument(
        "--save-params",
        action="store_true",
        help="Write the effective parameters back to the parameters file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    return parser


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    # Setup logging
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    logging.getLogger("aiohttp").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info("Arena bot starting...")

    from comm import LogChannel, MessageLog, WebSocketChannel
    from control import Controller
    from params import PARAMS_FILE, Parameters

    params_path = Path(args.params) if args.params else PARAMS_FILE
    params = Parameters.load(params_path)
    changed = params.update(
        server_url=args.url,
        log_dir=args.log_dir,
        message_log=False if args.no_message_log else None,
    )
    if changed:
        logger.info(f"Overridden from command line: {', '.join(changed)}")
    logger.debug(f"Parameters: {params.to_dict()}")

    if args.save_params:
        try:
            params.save(params_path)
        except OSError as e:
            logger.error(f"Cannot save parameters: {e}")
            return 1

    if args.replay:
        channel = LogChannel(args.replay)
    else:
        channel = WebSocketChannel(params.server_url, heartbeat=params.heartbeat)

    message_log = None
    if params.message_log:
        message_log = MessageLog.for_player(params.log_dir, args.player_id)

    controller = Controller(channel, args.player_id, message_log=message_log)

    try:
        asyncio.run(controller.run())
    except KeyboardInterrupt:
        logger.info("Interrupted")
    except Exception as e:
        logger.error(f"Fatal: {e}")
        return 1

    logger.info("Connection closed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
