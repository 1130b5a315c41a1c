#!/usr/bin/env python3
"""
Command-line access to the meeting assistant without the browser UI.

Usage:
    export RECALL_API_KEY="your-api-key"
    meeting-assistant create https://meet.google.com/abc-defg-hij --watch
    meeting-assistant show <bot_id>
    meeting-assistant watch <bot_id>

Environment Variables:
    RECALL_API_KEY: API key for Recall authentication (required)
    RECALL_REGION: (optional) Recall region, default: us-west-2
    POLL_INTERVAL: (optional) Seconds between status polls, default: 5
"""

import argparse
import json
import logging
import os
import sys

from meeting_assistant.services.bot_data import BotDataService
from meeting_assistant.services.bot_watcher import BotWatcher
from meeting_assistant.services.config import AppConfig, load_config
from meeting_assistant.services.recall_client import RecallAPIError, RecallClient

logger = logging.getLogger("meeting_assistant.cli")


def _status_line(record: dict) -> str:
    return (
        f"status={record.get('status')} "
        f"duration={record.get('duration', {}).get('formatted')} "
        f"utterances={record.get('transcript_utterance_count', 0)} "
        f"chat={record.get('chat_message_count', 0)}"
    )


def _watch(service: BotDataService, bot_id: str, config: AppConfig) -> dict:
    watcher = BotWatcher(
        lambda: service.get_bot_data(bot_id),
        interval=config.poll_interval,
        on_update=lambda record: print(_status_line(record), flush=True),
    )
    watcher.start()
    try:
        watcher.wait()
    except KeyboardInterrupt:
        logger.info("Interrupted, stopping watcher")
    finally:
        watcher.stop()
    return watcher.last_record or {}


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Meeting Assistant bot tools")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--config",
        default=os.path.join(os.getcwd(), "data", "config.json"),
        help="Optional JSON config file (environment variables take precedence)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    create = subparsers.add_parser("create", help="Send a recording bot into a meeting")
    create.add_argument("meeting_url")
    create.add_argument("--bot-name", default=None)
    create.add_argument("--watch", action="store_true", help="Poll until the bot finishes")

    show = subparsers.add_parser("show", help="Print the full bot record as JSON")
    show.add_argument("bot_id")

    watch = subparsers.add_parser("watch", help="Poll a bot until it finishes")
    watch.add_argument("bot_id")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    config = load_config(args.config)
    if config.missing_for("recall"):
        logger.error("RECALL_API_KEY environment variable is required")
        return 1

    client = RecallClient(config.recall_api_key, region=config.recall_region, timeout=config.recall_timeout)
    service = BotDataService(client)
    try:
        if args.command == "create":
            data = client.create_bot(args.meeting_url, bot_name=args.bot_name or config.recall_bot_name)
            bot_id = data.get("id")
            print(f"bot_id={bot_id}")
            if args.watch and bot_id:
                _watch(service, bot_id, config)
        elif args.command == "show":
            print(json.dumps(service.get_bot_data(args.bot_id), indent=2))
        elif args.command == "watch":
            _watch(service, args.bot_id, config)
    except RecallAPIError as exc:
        logger.error("Recall request failed: %s", exc)
        return 1
    finally:
        client.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
