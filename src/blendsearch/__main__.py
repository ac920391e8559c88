import sys

import structlog

from blendsearch.backend.types import Query
from blendsearch.blender import create_blender_backend, load_blender_config
from blendsearch.util.logging import configure_logging

_logger = structlog.get_logger()

_USAGE = (
    "Usage:\n"
    "  python -m blendsearch search <text> [--offset N] [--limit N]\n"
    "  python -m blendsearch retrieve <id> [<id> ...]"
)


def _int_option(args: list[str], name: str, default: int) -> int:
    if name not in args:
        return default

    idx = args.index(name)
    if idx + 1 >= len(args):
        print(f"{name} requires a value")
        sys.exit(1)

    value = args[idx + 1]
    if not value.isdigit():
        print(f"{name} must be a non-negative integer, got: {value}")
        sys.exit(1)

    del args[idx : idx + 2]
    return int(value)


def main(argv: list[str] | None = None) -> None:
    args = list(sys.argv[1:] if argv is None else argv)

    if not args or args[0] not in ("search", "retrieve"):
        print(_USAGE)
        sys.exit(1)

    command, args = args[0], args[1:]

    config = load_blender_config()
    configure_logging(config.logging)
    blender = create_blender_backend(config)

    if command == "search":
        offset = _int_option(args, "--offset", 0)
        limit = _int_option(args, "--limit", 10)
        result = blender.search(Query(text=" ".join(args)), offset, limit)

        print(f"{result.total} results, showing {offset + 1}-{offset + len(result)}")
        for position, record in enumerate(result, start=offset):
            print(f"{position + 1:>4}  [{record.source}] {record.id}  {record.title}")
        return

    if not args:
        print(_USAGE)
        sys.exit(1)

    collection = blender.retrieve(args[0]) if len(args) == 1 else blender.retrieve_batch(args)
    for record in collection:
        print(f"[{record.source}] {record.id}  {record.title}")
    _logger.info("retrieve_complete", requested=len(args), found=len(collection))


if __name__ == "__main__":
    main()
