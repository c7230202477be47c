#!/usr/bin/env python3
"""Print conversations and a timeline from a decrypted msgstore.db.

Usage:
    python scripts/dump_history.py msgstore.db
    python scripts/dump_history.py msgstore.db --contacts contacts.json --filter ali
    python scripts/dump_history.py msgstore.db --chat 15551234567@s.whatsapp.net
    python scripts/dump_history.py msgstore.db --config ./waviewer.json --save-config
"""

from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from rich.console import Console
from rich.table import Table

from integrations.contacts import contact_source_for
from waviewer.config import get_config, load_config, save_config
from waviewer.errors import ConfigurationError
from waviewer.service import ChatHistoryService
from waviewer.timeline import day_label
from waviewer.utils.logging import setup_logging

STATUS_MARKS = {
    "pending": "…",
    "sent": "✓",
    "delivered": "✓✓",
    "read": "[cyan]✓✓[/cyan]",
    "unknown": "?",
}


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("store", type=Path, help="Path to msgstore.db")
    parser.add_argument("--contacts", type=Path, help="contacts JSON export or contacts2.db")
    parser.add_argument("--filter", default="", help="Filter conversations by name")
    parser.add_argument("--chat", help="Conversation identifier to print")
    parser.add_argument("--limit", type=int, default=30, help="Conversations to list")
    parser.add_argument("--config", type=Path, help="Config file (default ~/.waviewer/config.json)")
    parser.add_argument("--save-config", action="store_true", help="Write the effective config to the default path")
    args = parser.parse_args()
    console = Console()

    try:
        config = load_config(args.config, strict=True) if args.config else get_config()
    except ConfigurationError as e:
        console.print("[red]Invalid configuration:[/red]", e.to_dict())
        return 2
    setup_logging("dump_history", level=config.logging.level, log_file=config.logging.log_file)

    if args.save_config and not save_config(config):
        console.print("[yellow]Could not save configuration[/yellow]")

    service = ChatHistoryService(config)
    contacts_path = args.contacts or config.contacts.source_path
    if contacts_path and not service.load_contacts(contact_source_for(contacts_path)):
        console.print("[yellow]Contacts not loaded:[/yellow]", service.last_error.to_dict())

    if not service.import_store(args.store):
        console.print("[red]Failed to load database:[/red]", service.last_error.to_dict())
        return 1
    if not service.has_data:
        console.print("[yellow]No chats found[/yellow]")
        return 0

    conversations = service.list_conversations(args.filter)
    table = Table(title=f"Conversations ({len(conversations)})", show_header=True, header_style="bold")
    table.add_column("Name", style="cyan")
    table.add_column("Type", justify="center")
    table.add_column("Created")
    table.add_column("Identifier")
    for conv in conversations[: args.limit]:
        table.add_row(
            conv.display_name,
            conv.kind.value,
            conv.conversation.created_at.to_datetime().strftime("%Y-%m-%d %H:%M"),
            conv.id,
        )
    console.print(table)

    if args.chat:
        timeline = service.list_messages(args.chat)
        if not timeline:
            console.print("[yellow]No messages found[/yellow]")
            return 0
        today = date.today()
        for item in timeline:
            if item.show_date_separator:
                console.rule(day_label(item.day, today))
            time = item.message.timestamp.to_datetime().strftime("%H:%M")
            author = "You" if item.sender_name is None else item.sender_name
            status = STATUS_MARKS[item.delivery_status.value] if item.message.is_outgoing else ""
            console.print(f"[dim]{time}[/dim] [bold]{author}[/bold]: {item.display_text} {status}")
            if item.caption_line:
                console.print(f"      [italic]{item.caption_line}[/italic]")

    return 0


if __name__ == "__main__":
    sys.exit(main())
