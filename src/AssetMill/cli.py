"""Command-line interface for building assets."""

import argparse
import logging
import os
import sys
from urllib.parse import urlparse

from tqdm import tqdm

from .asset import Asset, AssetBuildError
from .config import AssetMillConfig
from .core import Filesystem, setup_logging
from .factory import FilterFactory

logger = logging.getLogger("asset_mill")


def _output_relpath(asset: Asset, fingerprint: bool) -> str:
    path = asset.get_fingerprinted_path() if fingerprint else asset.get_usable_path()
    if asset.is_remote():
        path = urlparse(path if "://" in path else "https:" + path).path
    return path.lstrip("/")


def make_asset(path: str, config: AssetMillConfig, files, factory, extra_filters=()):
    """Create an asset for ``path`` with configured and extra filters applied."""
    is_url = path.startswith("//") or "://" in path
    absolute = path if is_url else os.path.join(config.public_dir, path)
    asset = Asset(files, factory, absolute, path.replace("\\", "/"))
    for name in list(config.filters) + list(extra_filters):
        asset.apply(name)
    return asset


def main():
    """Parse CLI arguments and build every requested asset."""
    parser = argparse.ArgumentParser(
        description="Build front-end assets through their filter chains",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  AssetMill css/site.scss js/app.coffee
  AssetMill --config assets.yaml --env staging css/site.scss
  AssetMill --filter CssMinFilter --fingerprint css/site.css
  AssetMill --generate-config
        """
    )
    parser.add_argument("assets", nargs="*",
                        help="Asset paths relative to the public dir, or URLs")
    parser.add_argument("--config", "-c", help="Path to config YAML")
    parser.add_argument("--public-dir", help="Directory asset paths are relative to")
    parser.add_argument("--build-dir", "-o", help="Directory builds are written to")
    parser.add_argument("--env", "-e", help="Build environment name")
    parser.add_argument("--dev", action="store_true",
                        help="Development build (skips production-only filters)")
    parser.add_argument("--filter", "-f", action="append", default=[],
                        help="Extra filter name or import path to apply (repeatable)")
    parser.add_argument("--fingerprint", action="store_true",
                        help="Write fingerprinted file names")
    parser.add_argument("--dry-run", action="store_true",
                        help="Build without writing output")
    parser.add_argument("--generate-config", action="store_true",
                        help="Generate default config YAML")
    parser.add_argument("--log-level",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])

    args = parser.parse_args()

    if args.generate_config:
        dest = args.config or "assetmill.yaml"
        AssetMillConfig().to_yaml(dest)
        logger.info("Generated default %s", dest)
        print(f"Generated default {dest}")
        return

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    if args.config:
        if not os.path.exists(args.config):
            logger.error("Config file not found: %s", args.config)
            print(f"Error: Config file not found: {args.config}")
            sys.exit(1)
        try:
            config = AssetMillConfig.from_yaml(args.config)
        except ValueError as e:
            logger.error("Invalid config file '%s': %s", args.config, e)
            print(f"Error: Invalid config: {e}")
            sys.exit(1)
    else:
        config = AssetMillConfig()

    # CLI overrides
    if args.public_dir:
        config.public_dir = args.public_dir
    if args.build_dir:
        config.build_dir = args.build_dir
    if args.env:
        config.environment = args.env
    if args.dev:
        config.production_build = False
    if args.log_level:
        config.log_level = args.log_level

    try:
        config.validate()
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    setup_logging(config.log_level)

    if not args.assets:
        parser.error("no assets given")

    files = Filesystem.from_config(config)
    factory = FilterFactory(config)
    failed = 0
    for path in tqdm(args.assets, desc="Building", unit="asset", disable=len(args.assets) < 2):
        try:
            asset = make_asset(path, config, files, factory, args.filter)
            content = asset.build()
        except (OSError, AssetBuildError, ValueError) as exc:
            failed += 1
            logger.error("Failed to build %s: %s", path, exc)
            continue

        dest = os.path.join(config.build_dir, _output_relpath(asset, args.fingerprint))
        if args.dry_run:
            logger.info("[dry-run] %s -> %s (%d chars)", path, dest, len(content))
            continue
        files.put(dest, content.encode("utf-8"))
        logger.info("Built %s -> %s", path, dest)

    if failed:
        logger.error("%d of %d asset(s) failed to build", failed, len(args.assets))
        sys.exit(1)


if __name__ == "__main__":
    main()
