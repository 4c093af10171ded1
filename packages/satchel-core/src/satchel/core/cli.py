import argparse
import json
import sys

from satchel.core.collection import BundleCollection
from satchel.core.exception import SatchelError
from satchel.core.files import FileSystem
from satchel.core.loader import build_collection
from satchel.core.observability import configure_logging
from satchel.core.plugins import load_all_plugins
from satchel.core.registry.kinds import REGISTRY
from satchel.core.runtime.settings import load_settings
from satchel.core.validation import validate_descriptor_file


def _print_bundle(b: dict) -> None:
    sorted_flag = "sorted" if b.get("is_sorted") else "unsorted"
    print(f"{b['kind']} {b['path']} ({len(b['assets'])} asset(s), {sorted_flag})")
    if b.get("url"):
        print(f"  url: {b['url']}")
    if b.get("fallback_condition"):
        print(f"  fallback: {b['fallback_condition']}")
    if b.get("page_location"):
        print(f"  page_location: {b['page_location']}")
    for a in b["assets"]:
        print(f"  - {a}")
    for r in b["references"]:
        print(f"  > {r}")


def main(argv=None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = argparse.ArgumentParser(prog="satchel", description="satchel bundle descriptor tools")
    sp = parser.add_subparsers(dest="cmd", required=True)

    descp = sp.add_parser("describe", help="Add one bundle path and print the resolved bundle(s)")
    descp.add_argument("path", help="App-relative bundle path (file or directory), e.g. ~/scripts")
    descp.add_argument("--root", default=None, help="Asset root directory (defaults to SATCHEL_ROOT or settings)")
    descp.add_argument("--kind", default="script", help="Bundle kind (see `satchel kinds`)")
    descp.add_argument("--per-subdirectory", action="store_true", help="One bundle per sub-directory of PATH")
    descp.add_argument("--json", action="store_true", help="Output machine-readable JSON")

    buildp = sp.add_parser("build", help="Build every bundle declared in a YAML collection file")
    buildp.add_argument("--config", required=True, help="Path to collection YAML")
    buildp.add_argument("--json", action="store_true", help="Output machine-readable JSON")

    valp = sp.add_parser("validate", help="Validate a bundle descriptor file")
    valp.add_argument("descriptor", help="App-relative descriptor path, e.g. ~/scripts/bundle.txt")
    valp.add_argument("--root", default=None, help="Asset root directory (defaults to SATCHEL_ROOT or settings)")
    valp.add_argument("--json", action="store_true", help="Output machine-readable JSON")

    sp.add_parser("kinds", help="List registered bundle kinds")

    args = parser.parse_args(argv)
    overrides = {"root": args.root} if getattr(args, "root", None) else None
    settings = load_settings(overrides)
    configure_logging(settings)

    if args.cmd == "kinds":
        load_all_plugins(settings=settings)
        for name in REGISTRY.list():
            kind = REGISTRY.get(name)
            print(f"{name}\t{kind.file_pattern}\t{', '.join(kind.descriptor_filenames)}")
        return 0

    if args.cmd == "validate":
        report = validate_descriptor_file(settings.root, args.descriptor)
        if args.json:
            print(json.dumps(report, ensure_ascii=False))
        else:
            if report.get("ok"):
                print(f"OK: {report.get('descriptor')}")
            else:
                print(f"INVALID: {report.get('descriptor')}")
                for e in report.get("errors", []):
                    print(f"- {e.get('loc')}: {e.get('code')} - {e.get('msg')}")
            for w in report.get("warnings", []) or []:
                print(f"! {w.get('loc')}: {w.get('code')} - {w.get('msg')}")
        return 0 if report.get("ok") else 2

    try:
        if args.cmd == "describe":
            load_all_plugins(settings=settings)
            collection = BundleCollection(FileSystem(settings.root), settings=settings)
            if args.per_subdirectory:
                collection.add_per_subdirectory(args.path, args.kind)
            else:
                collection.add(args.path, args.kind)
        elif args.cmd == "build":
            collection = build_collection(args.config, settings=settings)
        else:
            return 1
    except (SatchelError, KeyError, ValueError) as exc:
        # ValueError: a path that climbs above the asset root
        plain_key_error = isinstance(exc, KeyError) and not isinstance(exc, SatchelError)
        msg = exc.args[0] if plain_key_error and exc.args else str(exc)
        if args.json:
            print(json.dumps({"ok": False, "error": type(exc).__name__, "msg": str(msg)}, ensure_ascii=False))
        else:
            print(f"ERROR: {msg}", file=sys.stderr)
        return 2

    bundles = [b.to_dict() for b in collection]
    if args.json:
        print(json.dumps({"ok": True, "bundles": bundles}, ensure_ascii=False))
    else:
        for b in bundles:
            _print_bundle(b)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
