#!/usr/bin/env python3
"""
CLI interface for foldertalk.

Usage:
    foldertalk files <link>
    foldertalk prompt <link> [--question "..."]
    foldertalk chat <link>

The Drive token comes from --token, $FOLDERTALK_TOKEN, or token.json.
The chat endpoint key comes from $OPENAI_API_KEY.
"""

import argparse
import sys

from auth import get_token_provider
from extractors.folder import extract_collection_summary
from logging_config import configure_logging
from models import ConversationTurn, Role
from tools import ChatSession, build_system_prompt, load_files


def cmd_files(args: argparse.Namespace) -> None:
    """List what a link resolves to."""
    token = get_token_provider(args.token).request_token()
    files = load_files(args.link, token)
    print(extract_collection_summary(files, args.link))


def cmd_prompt(args: argparse.Namespace) -> None:
    """Print the system prompt the first turn would send."""
    token = get_token_provider(args.token).request_token()
    files = load_files(args.link, token)
    user_turn = ConversationTurn(Role.USER, args.question) if args.question else None
    print(build_system_prompt(files, args.link, user_turn, token))


def cmd_chat(args: argparse.Namespace) -> None:
    """Interactive conversation about a folder or document."""
    session = ChatSession(get_token_provider(args.token))
    files = session.load(args.link)
    print(f"Loaded {len(files)} file(s). Ask a question (Ctrl-D to quit).", file=sys.stderr)

    while True:
        try:
            question = input("> ")
        except (EOFError, KeyboardInterrupt):
            print(file=sys.stderr)
            break
        reply = session.submit(question)
        if reply is not None:
            print(reply.content)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Ask questions about a Google Drive folder or document",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    foldertalk files "https://drive.google.com/drive/folders/1abc..."
    foldertalk prompt "https://docs.google.com/document/d/1abc.../edit" --question "Summarize Notes"
    foldertalk chat "https://drive.google.com/drive/folders/1abc..."
""",
    )
    parser.add_argument("--token", help="Drive OAuth bearer token (default: $FOLDERTALK_TOKEN or token.json)")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ERROR")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # files
    files_p = subparsers.add_parser("files", help="List the files a link resolves to")
    files_p.add_argument("link", help="Shared folder or document link")
    files_p.set_defaults(func=cmd_files)

    # prompt
    prompt_p = subparsers.add_parser("prompt", help="Show the grounding prompt for a question")
    prompt_p.add_argument("link", help="Shared folder or document link")
    prompt_p.add_argument("--question", help="User message (file names in it are sent in full)")
    prompt_p.set_defaults(func=cmd_prompt)

    # chat
    chat_p = subparsers.add_parser("chat", help="Chat about a folder or document")
    chat_p.add_argument("link", help="Shared folder or document link")
    chat_p.set_defaults(func=cmd_chat)

    args = parser.parse_args()
    configure_logging(args.log_level)
    args.func(args)


if __name__ == "__main__":
    main()
