"""CLI entrypoints for repostats commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import load_config
from .errors import RepoStatsError
from .features import EmbeddingStore, FeaturePipeline
from .logging import configure_logging, get_logger, log_failure
from .miner import RepositoryMiner


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _add_repository_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the repository root (defaults to current directory).",
    )
    parser.add_argument(
        "--name",
        default=None,
        help="Repository name to record (defaults to the directory name).",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="GLOB",
        help="Exclude paths matching GLOB; may be repeated.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repostats",
        description="Mine repository statistics and history into embedding tokens.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    mine_parser = subparsers.add_parser(
        "mine",
        help="Mine a repository and print its statistics document as JSON.",
    )
    _add_verbose_option(mine_parser, suppress_default=True)
    _add_repository_options(mine_parser)
    mine_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Write the JSON document to this file instead of stdout.",
    )

    embed_parser = subparsers.add_parser(
        "embed",
        help="Mine a repository and embed its source file tokens.",
    )
    _add_verbose_option(embed_parser, suppress_default=True)
    _add_repository_options(embed_parser)
    embed_parser.add_argument(
        "--store",
        type=Path,
        default=None,
        help="Vector store file (defaults to the configured store path).",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for repostats commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    if args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
        return

    try:
        config = load_config(Path(args.path).expanduser())
        if config.logging.file is not None:
            configure_logging(
                verbose=bool(args.verbose),
                log_file=config.logging.file,
                file_level=config.logging.level,
            )
        miner = RepositoryMiner(config=config)
        repository = miner.mine(args.path, name=args.name, exclude=args.exclude)
        if args.command == "mine":
            document = repository.to_json(indent=2)
            if args.output is not None:
                args.output.write_text(document + "\n", encoding="utf-8")
                print(f"Statistics written to {_relativize(args.output)}")
            else:
                print(document)
        elif args.command == "embed":
            store = None
            if config.embedding.enabled:
                store = EmbeddingStore(args.store or config.store_path)
            result = FeaturePipeline(store=store).run(repository)
            message = f"Embedded {len(result.tokens)} tokens for {repository.name}"
            if store is not None and store.path is not None:
                message += f" into {_relativize(store.path)}"
            print(message)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except RepoStatsError as exc:
        log_failure(get_logger("cli"), exc)
        parser.exit(1, f"repostats {args.command} failed: {exc}\nRun with --verbose for more details.\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
