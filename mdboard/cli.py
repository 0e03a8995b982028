#!/usr/bin/env python3
"""
mdboard CLI
-----------
Agents claim tasks, update status and report results on a Markdown
board file. Every command prints one JSON document on stdout; logs go
to stderr.

Usage:
    mdboard board-status --board Agents/Mission-Control.md
    mdboard list         --board Agents/Mission-Control.md --lane Ready
    mdboard claim        --board Agents/Mission-Control.md --id abc123def --agent claude-1
    mdboard update       --board Agents/Mission-Control.md --id abc123def --status blocked --note "Waiting on API key"
    mdboard complete     --board Agents/Mission-Control.md --id abc123def
    mdboard fail         --board Agents/Mission-Control.md --id abc123def --reason "Build failed"
    mdboard add-task     --board Agents/Mission-Control.md --title "Refactor auth" --lane Backlog --priority high
    mdboard archive      --board Agents/Mission-Control.md

Exit status: 0 on success, 1 on a board error, 2 on bad arguments.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .commands import BoardCommands, parse_fields_arg
from .config import Config
from .errors import BoardError
from .store import BoardStore

logger = logging.getLogger("mdboard")


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--board", required=True, help="Board path, relative to the vault")
    common.add_argument("--config", default=None, help="Path to config.yaml")
    common.add_argument("--vault", default=None, help="Vault directory (overrides config and env)")
    common.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    ap = argparse.ArgumentParser(prog="mdboard", description="Markdown task board for agents")
    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("board-status", parents=[common], help="Lane summary with item counts")

    p = sub.add_parser("list", parents=[common], help="List items as JSON")
    p.add_argument("--lane", default=None)
    p.add_argument("--agent", default=None)

    p = sub.add_parser("claim", parents=[common], help="Claim a task and move it to In Progress")
    p.add_argument("--id", required=True)
    p.add_argument("--agent", required=True)

    p = sub.add_parser("update", parents=[common], help="Update status in place")
    p.add_argument("--id", required=True)
    p.add_argument("--status", required=True)
    p.add_argument("--note", default=None)

    p = sub.add_parser("complete", parents=[common], help="Mark done and move to Done")
    p.add_argument("--id", required=True)

    p = sub.add_parser("fail", parents=[common], help="Mark failed and move to Failed")
    p.add_argument("--id", required=True)
    p.add_argument("--reason", default=None)

    p = sub.add_parser("add-task", parents=[common], help="Add a new task card")
    p.add_argument("--title", required=True)
    p.add_argument("--lane", default=None, help="Target lane (default: Ready)")
    p.add_argument("--priority", default=None, help="high|medium|low")
    p.add_argument("--fields", default=None, help="key=val,key2=val2")

    p = sub.add_parser("archive", parents=[common], help="Move a lane's items into a dated archive file")
    p.add_argument("--lane", default=None, help="Lane to archive (default: Done)")

    return ap


def dispatch(cmds: BoardCommands, args: argparse.Namespace):
    if args.command == "board-status":
        return cmds.board_status(args.board)
    if args.command == "list":
        return cmds.list_items(args.board, lane=args.lane, agent=args.agent)
    if args.command == "claim":
        return cmds.claim(args.board, args.id, args.agent)
    if args.command == "update":
        return cmds.update(args.board, args.id, args.status, note=args.note)
    if args.command == "complete":
        return cmds.complete(args.board, args.id)
    if args.command == "fail":
        return cmds.fail(args.board, args.id, reason=args.reason)
    if args.command == "add-task":
        fields = parse_fields_arg(args.fields) if args.fields else {}
        return cmds.add_task(args.board, args.title, lane=args.lane, priority=args.priority, fields=fields)
    if args.command == "archive":
        return cmds.archive(args.board, lane=args.lane)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    cfg = Config.load(args.config)
    if args.vault:
        cfg.vault_path = args.vault

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, str(cfg.log_level).upper(), logging.INFO),
        format="%(asctime)s [mdboard] %(levelname)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    cmds = BoardCommands(BoardStore(cfg.vault_path), cfg)
    try:
        result = dispatch(cmds, args)
    except BoardError as e:
        logger.warning(f"{args.command} failed: {e.message}")
        print(json.dumps(e.to_dict(), indent=2))
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
