"""Download the upstream Splitwise API docs into the local spec directory."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import List

import httpx

from splitwise_mcp.config import get_settings
from splitwise_mcp.openapi import INDEX_FILE

CONTENTS_API_URL = "https://api.github.com/repos/splitwise/api-docs/contents/paths"


def _list_path_files(client: httpx.Client, ref: str) -> List[str]:
    response = client.get(CONTENTS_API_URL, params={"ref": ref})
    response.raise_for_status()
    names = [item.get("name", "") for item in response.json()]
    return sorted(name for name in names if name.endswith(".yaml") and name != INDEX_FILE)


def _download(client: httpx.Client, url: str, target: Path) -> None:
    response = client.get(url)
    response.raise_for_status()
    target.write_bytes(response.content)


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Sync Splitwise path specs from GitHub")
    parser.add_argument(
        "--spec-dir",
        default=os.getenv("SPLITWISE_SPEC_DIR", str(settings.splitwise_spec_dir)),
        help="Directory receiving index.yaml and the path documents",
    )
    parser.add_argument(
        "--ref",
        default="main",
        help="Git ref of splitwise/api-docs to download (default: main)",
    )

    args = parser.parse_args()
    paths_dir = Path(args.spec_dir).expanduser().resolve()
    paths_dir.mkdir(parents=True, exist_ok=True)
    source = f"{settings.splitwise_spec_source_url.rstrip('/')}/{args.ref}"

    with httpx.Client(timeout=30, follow_redirects=True) as client:
        _download(client, f"{source}/splitwise.yaml", paths_dir.parent / "splitwise.yaml")
        _download(client, f"{source}/paths/{INDEX_FILE}", paths_dir / INDEX_FILE)

        count = 0
        for name in _list_path_files(client, args.ref):
            _download(client, f"{source}/paths/{name}", paths_dir / name)
            count += 1

    print(f"Synced {count} Splitwise path specs to {paths_dir}")


if __name__ == "__main__":
    main()
