# -*- coding: utf-8 -*-
"""
Smart Playlist Curator - Main Application
Scans a local music library and writes generated playlists as M3U files
"""
import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from playlist_curator.config_loader import Config
from playlist_curator.errors import PersistenceError, PlaylistCuratorError
from playlist_curator.generator import PlaylistEngine
from playlist_curator.logging_utils import add_logging_args, configure_logging, resolve_log_level

logger = logging.getLogger("playlist_curator.main")


class PlaylistApp:
    """Main application orchestrator"""

    def __init__(self, config: Config, seed: Optional[int] = None):
        self.config = config
        options = config.generation_options
        self.engine = PlaylistEngine(options=options, rng=seed if seed is not None else config.random_seed)
        for name in config.disabled_generators:
            self.engine.disable_generator(name)

    def run(self, music_dir: str, output_dir: str, templates_only: bool = False) -> int:
        """
        Scan, generate, export and save.

        Returns:
            Process exit code
        """
        if templates_only:
            for generator in self.engine.list_generators():
                self.engine.disable_generator(generator["name"])

        stats = self.engine.scan_directory(music_dir)
        logger.info(
            f"Library: {stats['tracks']} tracks, {stats['artists']} artists, {stats['genres']} genres"
        )

        playlists = self.engine.generate()
        if not playlists:
            logger.warning("No playlists generated")

        result = self.engine.export(output_dir)
        for name, error in result.failed.items():
            logger.error(f"Export failed for {name}: {error}")

        save_path = Path(output_dir) / self.config.save_file_name
        self.engine.save(save_path)

        self.engine.summary()
        return 0 if result.ok else 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate playlists from a local music library"
    )
    parser.add_argument(
        "music_dir",
        nargs="?",
        help="Music library directory (default from config library.music_directory)"
    )
    parser.add_argument(
        "output_dir",
        nargs="?",
        help="Playlist output directory (default from config output.playlists_dir)"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file (default: config.yaml if present)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible playlists"
    )
    parser.add_argument(
        "--playlists",
        type=int,
        default=None,
        help="Number of generated playlists to aim for (numberOfPlaylists)"
    )
    parser.add_argument(
        "--disable",
        nargs="+",
        default=[],
        metavar="NAME",
        help="Generators to disable (genres, folders, recentlyAdded, decades, smartMix, coverage)"
    )
    parser.add_argument(
        "--templates-only",
        action="store_true",
        help="Skip the generators and build only the configured template playlists"
    )
    add_logging_args(parser)
    return parser


def load_config(path: Optional[str]) -> Config:
    if path:
        return Config(path)
    if os.path.exists("config.yaml"):
        return Config("config.yaml")
    return Config.from_dict({})


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        configure_logging(level=resolve_log_level(args), log_file=args.log_file)
        logger.error(f"Configuration Error: {e}")
        return 1

    configure_logging(level=resolve_log_level(args, config.log_level), log_file=args.log_file or config.log_file)

    music_dir = args.music_dir or config.music_directory
    output_dir = args.output_dir or config.playlists_directory
    if not os.path.isdir(music_dir):
        logger.error(f"Music directory not found: {music_dir}")
        return 1

    try:
        app = PlaylistApp(config, seed=args.seed)
        if args.playlists is not None:
            app.engine.update_options({"numberOfPlaylists": args.playlists})
        for name in args.disable:
            app.engine.disable_generator(name)
        return app.run(music_dir, output_dir, templates_only=args.templates_only)
    except ValueError as e:
        logger.error(f"Configuration Error: {e}")
        return 1
    except PersistenceError as e:
        logger.error(f"Could not write playlists: {e}")
        return 1
    except PlaylistCuratorError as e:
        logger.error(f"Unexpected Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
