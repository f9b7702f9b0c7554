#!/usr/bin/env python
"""
chalkboard CLI - serve a board, run a generation step, replay a batch
"""
from __future__ import annotations

import argparse
import asyncio
import json
import sys
import uuid
from pathlib import Path
from typing import List

from rich.console import Console
from rich.table import Table
from rich import box

console = Console()


def print_board(board) -> None:
    """Print the pages of a board with pointer markers."""
    table = Table(
        title=f"Board {board.info.chat_id}",
        box=box.ROUNDED,
        border_style="blue",
    )
    table.add_column("Id", style="cyan", justify="right")
    table.add_column("Title", style="white")
    table.add_column("Nodes", style="green", justify="right")
    table.add_column("", style="yellow")

    authoring = board.state.authoring_target.value
    viewing = board.state.viewing_target.value
    for page_id in board.pages.ids():
        page = board.pages.get(page_id)
        markers = []
        if page_id == authoring:
            markers.append("✏️ authoring")
        if page_id == viewing:
            markers.append("👁 viewing")
        table.add_row(
            str(page_id),
            page.title,
            str(len(page.document.root.children)),
            " ".join(markers),
        )

    console.print(table)
    console.print(
        f"[dim]page total: {board.state.page_total.value} | registered: {board.page_count}[/dim]"
    )


async def _generate(args: argparse.Namespace) -> None:
    from chalkboard.board import Board, ChatInfo, Step
    from chalkboard.client import ChalkClient

    async with ChalkClient() as client:
        board = Board(ChatInfo(args.chat_id, args.token), transport=client)
        board.initialize()
        await board.next(Step(args.step), args.prompt)
    print_board(board)


async def _apply(args: argparse.Namespace) -> None:
    from chalkboard.board import Board, ChatInfo

    data = json.loads(Path(args.file).read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("results", [])

    board = Board(ChatInfo(args.chat_id))
    if not args.no_primary:
        board.initialize()
    created = await board.apply(data)
    console.print(f"[green]✅ Applied {len(data)} result(s), created pages: {created or 'none'}[/]")
    print_board(board)


def main(argv: List[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="chalkboard",
        description="Multi-page document authoring state for a remote generation service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  chalkboard serve --port 8810
  chalkboard generate "Explain vectors" --step intro
  chalkboard apply results.json
        """
    )
    parser.add_argument("--version", action="version", version="chalkboard 0.1.0")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Serve a board session over HTTP")
    serve_parser.add_argument("--host", type=str, default=None, help="Bind address")
    serve_parser.add_argument("--port", type=int, default=None, help="Port number")
    serve_parser.add_argument("--chat-id", type=str, default=None, help="Chat id (default: random)")
    serve_parser.add_argument("--token", type=str, default=None, help="Bearer token for the service")

    generate_parser = subparsers.add_parser("generate", help="Run one layout + chalk step")
    generate_parser.add_argument("prompt", type=str, help="Prompt for the generation service")
    generate_parser.add_argument("--step", type=str, default="default", help="Design step identifier")
    generate_parser.add_argument("--chat-id", type=str, default=None, help="Chat id (default: random)")
    generate_parser.add_argument("--token", type=str, default=None, help="Bearer token for the service")

    apply_parser = subparsers.add_parser("apply", help="Replay a JSON batch of page results offline")
    apply_parser.add_argument("file", type=str, help="JSON file with a list of {page, output} results")
    apply_parser.add_argument("--chat-id", type=str, default=None, help="Chat id (default: random)")
    apply_parser.add_argument("--no-primary", action="store_true", help="Do not create the PRIMARY page first")

    args = parser.parse_args(argv)
    if getattr(args, "chat_id", None) is None:
        args.chat_id = uuid.uuid4().hex[:12]

    try:
        if args.command == "serve":
            from chalkboard.board import Board, ChatInfo
            from chalkboard.client import ChalkClient
            from chalkboard.config import ServerSettings
            from chalkboard.server import BoardServer

            settings = ServerSettings.from_env()
            settings.host = args.host or settings.host
            settings.port = args.port or settings.port

            board = Board(ChatInfo(args.chat_id, args.token), transport=ChalkClient())
            console.print(f"[bold cyan]🚀 Serving board {args.chat_id} on http://{settings.host}:{settings.port}[/]")
            BoardServer(board, settings).run()

        elif args.command == "generate":
            asyncio.run(_generate(args))

        elif args.command == "apply":
            asyncio.run(_apply(args))

        else:
            parser.print_help()

    except KeyboardInterrupt:
        console.print("\n[yellow]👋 Goodbye![/]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[red]💥 Error: {e}[/]")
        sys.exit(1)


if __name__ == "__main__":
    main()
