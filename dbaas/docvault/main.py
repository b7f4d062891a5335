"""
DocVault - command line entry point.

Usage:
    docvault generate-cert alice --output ./certs
    docvault --cert ./certs/alice.cert create user1 '{"name": "Alice", "age": 25}'
    docvault --cert ./certs/alice.cert find '{"type": "condition", "field": "age", "op": "gte", "value": 25}'

Configuration comes from DB_* environment variables (see config.py); flags
override them.

Invariants:
    - Certificate commands (generate-cert, revoke-cert, list-certs) need no certificate
    - Every document command authenticates the presented certificate first
    - Failures print "Error: <message>" to stderr and exit 1

How to change safely:
    - Add commands, don't rename existing ones; scripts depend on them
    - Keep --json output stable for machine consumers
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Sequence, TextIO

import json_log_formatter

from .config import Settings
from .database import DocVault
from .documents import Document
from .errors import DocVaultError, JsonError
from .query import Filter, loads_filter

logger = logging.getLogger(__name__)

CERT_COMMANDS = {"generate-cert", "revoke-cert", "list-certs"}
TEXT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(settings: Settings) -> logging.Handler:
    """Route log records to stderr so stdout stays free for command output.

    Reads ``settings.log_level`` (unknown names fall back to WARNING) and
    ``settings.log_format`` ("json" selects json_log_formatter, anything
    else the plain text format). Replaces any handlers on the root
    logger.

    Returns:
        The installed handler
    """
    handler = logging.StreamHandler(sys.stderr)
    if settings.log_format == "json":
        handler.setFormatter(json_log_formatter.JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(getattr(logging, settings.log_level.upper(), logging.WARNING))
    return handler


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="docvault",
        description="Encrypted, git-versioned JSON document store",
    )
    parser.add_argument("-p", "--path", type=Path, help="Path to the database directory")
    parser.add_argument("-k", "--key", help="Encryption key (32 bytes)")
    parser.add_argument("-c", "--cert", type=Path, help="Certificate file for authentication")
    parser.add_argument("--cert-content", help="Certificate content (base64 encoded)")
    parser.add_argument(
        "--stdin", action="store_true", help="Read data from stdin instead of the command line"
    )
    parser.add_argument(
        "--json", dest="json_output", action="store_true", default=None, help="Print JSON output"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    sub = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    p = sub.add_parser("create", help="Create a new document")
    p.add_argument("id", help="Document ID")
    p.add_argument("data", nargs="?", help="JSON data (optional if --stdin is used)")

    p = sub.add_parser("read", help="Read a document")
    p.add_argument("id", help="Document ID")

    p = sub.add_parser("update", help="Update a document")
    p.add_argument("id", help="Document ID")
    p.add_argument("data", nargs="?", help="JSON data (optional if --stdin is used)")

    p = sub.add_parser("delete", help="Delete a document")
    p.add_argument("id", help="Document ID")

    sub.add_parser("list", help="List all documents")

    p = sub.add_parser("find", help="Find documents using filters")
    p.add_argument(
        "filter",
        nargs="?",
        help='Filter JSON, e.g. {"type": "condition", "field": "age", "op": "gt", "value": 27}',
    )

    p = sub.add_parser("history", help="Show the commit history")
    p.add_argument("--limit", type=int, help="Maximum number of commits")

    p = sub.add_parser("generate-cert", help="Generate a new certificate")
    p.add_argument("username", help="Username")
    p.add_argument(
        "-o", "--output", type=Path, required=True, help="Output directory for certificate and key"
    )

    p = sub.add_parser("revoke-cert", help="Revoke a certificate")
    p.add_argument("username", help="Username")

    sub.add_parser("list-certs", help="List all valid certificates")

    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    """Environment settings overridden by explicit flags."""
    overrides: dict[str, Any] = {
        "path": args.path,
        "key": args.key,
        "cert": args.cert,
        "cert_content": args.cert_content,
        "json_output": args.json_output,
    }
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    return Settings(**{name: value for name, value in overrides.items() if value is not None})


def _read_input(arg: Optional[str], use_stdin: bool, stdin: TextIO, what: str) -> str:
    if use_stdin:
        return stdin.read()
    if arg is None:
        raise DocVaultError(f"No {what} provided. Use --stdin or provide {what} argument")
    return arg


def _parse_data(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise JsonError(f"Invalid JSON data: {e}") from e


class Printer:
    """Writes command results as text or JSON."""

    def __init__(self, out: TextIO, json_output: bool) -> None:
        self.out = out
        self.json_output = json_output

    def line(self, text: str = "") -> None:
        print(text, file=self.out)

    def document(self, doc: Document) -> None:
        if self.json_output:
            self.line(json.dumps(doc.to_dict()))
            return
        self.line(f"ID: {doc.id}")
        self.line(f"Created: {doc.created_at}")
        self.line(f"Updated: {doc.updated_at}")
        self.line(f"Data: {json.dumps(doc.data, indent=2)}")

    def documents(self, docs: list[Document]) -> None:
        if self.json_output:
            self.line(json.dumps([doc.to_dict() for doc in docs]))
            return
        self.line("Documents:")
        for doc in docs:
            self.line()
            self.line("-" * 40)
            self.document(doc)


def run(
    args: argparse.Namespace,
    settings: Settings,
    out: Optional[TextIO] = None,
    stdin: Optional[TextIO] = None,
) -> None:
    """Execute a parsed command.

    Raises:
        DocVaultError: On any failure
    """
    out = out or sys.stdout
    stdin = stdin or sys.stdin
    db = DocVault.from_settings(settings)
    printer = Printer(out, settings.json_output)
    command = args.command

    if command == "generate-cert":
        cert, key = db.generate_certificate(args.username)
        args.output.mkdir(parents=True, exist_ok=True)
        (args.output / f"{args.username}.cert").write_bytes(cert)
        (args.output / f"{args.username}.key").write_bytes(key)
        printer.line(f"Certificate generated for {args.username}")
        printer.line(f"Files saved in: {args.output}")
        return
    if command == "revoke-cert":
        db.revoke_certificate(args.username)
        printer.line(f"Certificate revoked for {args.username}")
        return
    if command == "list-certs":
        usernames = db.list_certificates()
        if settings.json_output:
            printer.line(json.dumps(usernames))
        else:
            printer.line("Valid certificates:")
            for username in usernames:
                printer.line(f"- {username}")
        return

    username = db.authenticate(settings.load_certificate())
    logger.info("Authenticated", extra={"username": username, "command": command})

    if command == "create":
        data = _parse_data(_read_input(args.data, args.stdin, stdin, "data"))
        printer.document(db.create(args.id, data))
    elif command == "read":
        printer.document(db.read(args.id))
    elif command == "update":
        data = _parse_data(_read_input(args.data, args.stdin, stdin, "data"))
        printer.document(db.update(args.id, data))
    elif command == "delete":
        db.delete(args.id)
        printer.line(f"Document {args.id} deleted successfully")
    elif command == "list":
        ids = db.list()
        if settings.json_output:
            printer.line(json.dumps(ids))
        else:
            printer.line("Documents:")
            for doc_id in ids:
                printer.line(f"- {doc_id}")
    elif command == "find":
        flt: Optional[Filter] = None
        if args.filter is not None or args.stdin:
            flt = loads_filter(_read_input(args.filter, args.stdin, stdin, "filter"))
        printer.documents(db.find(flt))
    elif command == "history":
        commits = db.history(limit=args.limit)
        if settings.json_output:
            printer.line(json.dumps([c.to_dict() for c in commits]))
        else:
            for c in commits:
                printer.line(f"{c.sha[:12]} {c.timestamp} {c.author_name} <{c.author_email}> {c.message}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = settings_from_args(args)
    except ValueError as e:
        # pydantic ValidationError is a ValueError
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    setup_logging(settings)
    settings.log_config()

    try:
        run(args, settings)
    except (DocVaultError, OSError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
