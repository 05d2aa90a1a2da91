"""Terminal chat against a running vmchat-server.

Invoked as `vmchat-client`. Type a message and press enter; `/vms` prints
the inventory and `/quit` (or EOF) exits.
"""

import argparse
import asyncio
import logging
import sys
from typing import TextIO

from vmchat_server import __version__
from vmchat_server.client.buffer import StreamUpdate
from vmchat_server.client.chat_client import (
    DEFAULT_BASE_URL,
    ChatClient,
    ChatConversation,
)
from vmchat_server.exceptions import VmChatError
from vmchat_server.models.vms import VmRecord

logger = logging.getLogger(__name__)

PROMPT = "you> "


class TerminalRenderer:
    """Prints the formatted reply as it grows.

    Only the new suffix of the display text is written. When reformatting
    changes text that is already on screen, output pauses until the display
    is consistent again; finish() prints whatever is still missing.
    """

    def __init__(self, out: TextIO) -> None:
        self.out = out
        self.printed = ""

    def __call__(self, update: StreamUpdate) -> None:
        if update.display.startswith(self.printed):
            self.out.write(update.display[len(self.printed) :])
            self.out.flush()
            self.printed = update.display

    def finish(self, final: str) -> None:
        if final.startswith(self.printed):
            self.out.write(final[len(self.printed) :])
        else:
            self.out.write("\n\n" + final)
        self.out.write("\n")
        self.out.flush()
        self.printed = final


def format_vm(vm: VmRecord) -> str:
    address = vm.ip_address or "-"
    return (
        f"{vm.id}  {vm.name:<14} {vm.power_state:<9} {address:<15} "
        f"{vm.os} {vm.os_version}"
    )


async def _read_line(prompt: str) -> str | None:
    try:
        return await asyncio.to_thread(input, prompt)
    except EOFError:
        return None


async def run_repl(client: ChatClient, stream: bool, out: TextIO = sys.stdout) -> None:
    conversation = ChatConversation(client)

    while True:
        line = await _read_line(PROMPT)
        if line is None or line.strip() == "/quit":
            break
        text = line.strip()
        if not text:
            continue

        try:
            if text == "/vms":
                for vm in await client.list_vms():
                    out.write(format_vm(vm) + "\n")
                continue

            out.write("assistant> ")
            if stream:
                renderer = TerminalRenderer(out)
                reply = await conversation.stream(text, on_update=renderer)
                renderer.finish(reply.content)
            else:
                reply = await conversation.send(text)
                out.write(reply.content + "\n")
        except VmChatError as e:
            logger.debug(f"Request failed: {e!r}")
            out.write(f"\n[Error: {e}]\n")


async def _run(args: argparse.Namespace) -> int:
    async with ChatClient(base_url=args.base_url, timeout=args.timeout) as client:
        if args.list_vms:
            try:
                vms = await client.list_vms()
            except VmChatError as e:
                print(f"[Error: {e}]", file=sys.stderr)
                return 1
            for vm in vms:
                print(format_vm(vm))
            return 0

        await run_repl(client, stream=not args.no_stream)
    return 0


def main() -> int:
    """Main entry point for the vmchat-client CLI."""
    parser = argparse.ArgumentParser(
        prog="vmchat-client",
        description="Terminal chat client for vmchat-server",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"vmchat-client {__version__}",
    )

    parser.add_argument(
        "--base-url",
        type=str,
        default=DEFAULT_BASE_URL,
        help=f"Server URL (default: {DEFAULT_BASE_URL})",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=120.0,
        help="HTTP timeout in seconds (default: 120)",
    )

    parser.add_argument(
        "--no-stream",
        action="store_true",
        help="Wait for complete replies instead of streaming them",
    )

    parser.add_argument(
        "--list-vms",
        action="store_true",
        help="Print the inventory and exit",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: WARNING)",
    )

    args = parser.parse_args()
    logging.basicConfig(level=args.log_level)

    try:
        return asyncio.run(_run(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
