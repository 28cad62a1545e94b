"""
CLI entrypoint for llmcat package.
"""
import sys
from typing import List, Optional

from .core import (
    parse_args,
    expand_files,
    gen_payload,
    dispatch,
    error,
    UsageError,
    ClipboardError,
)

COMMANDS = ("cat-llm", "llm-cat")


def handle_cat_llm(tokens: List[str]) -> None:
    """Run parse → expand → build → output for the ``cat-llm`` command."""
    args = parse_args(tokens)
    args.filenames = expand_files(args.filenames)
    payload = gen_payload(args)
    dispatch(payload, args.clipboard)


def main(argv: Optional[List[str]] = None) -> None:
    if argv is None:
        argv = sys.argv[1:]
    try:
        if not argv:
            error("No command found")
            sys.exit(1)
        if argv[0] not in COMMANDS:
            error("unsupported command")
            sys.exit(1)

        try:
            handle_cat_llm(argv[1:])
        except (UsageError, ClipboardError) as e:
            error(f"Error: {e}")
            sys.exit(1)

    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        error(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
