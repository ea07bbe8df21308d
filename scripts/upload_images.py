#!/usr/bin/env python
"""Script to compress local images and upload them to Supabase Storage."""
from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from cinefeed.services import prepare_images, upload_multiple_images


def _print_progress(current: int, total: int) -> None:
    print(f"Compressing {current}/{total}...")


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Upload post or comment images")
    parser.add_argument("paths", nargs="+", help="Local image files")
    parser.add_argument("--folder", choices=["posts", "comments"], default="posts")
    parser.add_argument("--no-compress", action="store_true", help="Upload the files as-is")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    if args.no_compress:
        urls = upload_multiple_images(args.paths, args.folder)
    else:
        urls = prepare_images(args.paths, args.folder, on_progress=_print_progress)

    print("Uploaded images:")
    for url in urls:
        print(url)


if __name__ == "__main__":
    main()
