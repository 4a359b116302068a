# docsite/check_assets.py
import sys, argparse
from pathlib import Path

REQUIRED_ASSETS = [
    "public/logo.svg",
    "public/favicon.svg",
]

def missing_assets(root, assets=REQUIRED_ASSETS):
    root = Path(root)
    missing = []
    for asset in assets:
        if (root / asset).is_file():
            print(f"[assets] ✓ {asset}", flush=True)
        else:
            print(f"[assets] ✗ {asset} (missing)", file=sys.stderr, flush=True)
            missing.append(asset)
    return missing

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Check that required static assets exist")
    ap.add_argument("--root", default=".", help="Site project root")
    args = ap.parse_args(argv)

    missing = missing_assets(args.root)
    if not missing:
        print("[assets] All required assets are present!")
        return 0
    print(f"[assets] Missing {len(missing)} required asset(s):", file=sys.stderr)
    for asset in missing:
        print(f"  - {asset}", file=sys.stderr)
    return 1

if __name__ == "__main__":
    sys.exit(main())
