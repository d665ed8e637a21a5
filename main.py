import argparse
import logging
import sys
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from dingrobot.client import DingRobot, create_client
from dingrobot.config import Config, load_config
from dingrobot.errors import DingRobotError

logger = logging.getLogger("dingrobot")


def _configure_logging(verbose: bool, log_file: Optional[str]) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    if not log_file:
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        log_file = f"logs/dingrobot-{stamp}.log"
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        handlers=[logging.FileHandler(log_path, encoding="utf-8")],
    )
    if verbose:
        logging.getLogger("dingrobot.trace").setLevel(logging.DEBUG)
    else:
        logging.getLogger("dingrobot.trace").setLevel(logging.WARNING)


def _apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    updated = config
    if args.webhook:
        updated = replace(updated, webhook_url=args.webhook.strip())
    if args.timeout is not None:
        updated = replace(updated, request_timeout_seconds=args.timeout)
    return updated


def _read_text(value: str) -> str:
    if value == "-":
        return sys.stdin.read()
    return value


def _add_at_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--at",
        dest="at_mobiles",
        action="append",
        default=[],
        metavar="MOBILE",
        help="Mobile number to @-mention (repeatable)",
    )
    parser.add_argument("--at-all", action="store_true", help="@-mention everyone")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Post messages to a group robot webhook")
    parser.add_argument("--env", help="Path to .env file")
    parser.add_argument("--webhook", help="Webhook URL (overrides DINGROBOT_WEBHOOK_URL)")
    parser.add_argument("--timeout", type=float, help="Request timeout in seconds")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--log-file",
        help="Log file path (defaults to logs/dingrobot-<timestamp>.log)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    text_parser = subparsers.add_parser("text", help="Send a plain text message")
    text_parser.add_argument("content", help="Message content, or - to read stdin")
    _add_at_args(text_parser)

    link_parser = subparsers.add_parser("link", help="Send a link message")
    link_parser.add_argument("title")
    link_parser.add_argument("text")
    link_parser.add_argument("message_url")
    link_parser.add_argument("--pic-url", default="", help="Thumbnail image URL")

    markdown_parser = subparsers.add_parser("markdown", help="Send a markdown message")
    markdown_parser.add_argument("title")
    markdown_parser.add_argument("text", help="Markdown body, or - to read stdin")
    _add_at_args(markdown_parser)

    card_parser = subparsers.add_parser("action-card", help="Send a single-button action card")
    card_parser.add_argument("title")
    card_parser.add_argument("text", help="Markdown body, or - to read stdin")
    card_parser.add_argument("single_title", help="Button label")
    card_parser.add_argument("single_url", help="Button target URL")
    card_parser.add_argument("--btn-orientation", choices=("0", "1"), default="0")
    card_parser.add_argument("--hide-avatar", choices=("0", "1"), default="0")

    return parser


def _send(robot: DingRobot, args: argparse.Namespace) -> None:
    if args.command == "text":
        robot.send_text(_read_text(args.content), args.at_mobiles, args.at_all)
        return

    if args.command == "link":
        robot.send_link(args.title, args.text, args.message_url, args.pic_url)
        return

    if args.command == "markdown":
        robot.send_markdown(args.title, _read_text(args.text), args.at_mobiles, args.at_all)
        return

    if args.command == "action-card":
        robot.send_action_card(
            args.title,
            _read_text(args.text),
            args.single_title,
            args.single_url,
            args.btn_orientation,
            args.hide_avatar,
        )
        return


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose, args.log_file)

    env_path: Optional[Path] = Path(args.env) if args.env else None
    config = load_config(env_path)
    config = _apply_overrides(config, args)

    try:
        robot = create_client(config)
    except ValueError as exc:
        logger.error("%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    try:
        _send(robot, args)
    except DingRobotError as exc:
        logger.error("Send %s failed: %s", args.command, exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        robot.close()

    logger.info("Sent %s message", args.command)
    return 0


if __name__ == "__main__":
    sys.exit(main())
