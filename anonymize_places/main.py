import argparse
import sys
from pathlib import Path

from anonymize_places.config.settings import Settings
from anonymize_places.logging.logger import Log
from anonymize_places.profiles.exceptions import ProfileError
from anonymize_places.profiles.finder import find_profiles, profile_from_path, select_profile
from anonymize_places.profiles.models import Profile
from anonymize_places.runner.anonymization_runner import build_runner
from anonymize_places.workspace.exceptions import WorkspaceError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="anonymize-places",
        description="Write an anonymized copy of a Firefox places.sqlite database.",
    )
    parser.add_argument(
        "output",
        nargs="?",
        metavar="OUTPUT",
        help="Where to write the anonymized db (defaults to places_anonymized.sqlite)",
    )
    parser.add_argument(
        "places",
        nargs="?",
        metavar="PLACES",
        help="Path to places.sqlite. Defaults to the largest one in your Firefox profiles",
    )
    parser.add_argument(
        "-v",
        dest="verbosity",
        action="count",
        default=0,
        help="Increase verbosity (repeatable)",
    )
    parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Overwrite OUTPUT if it already exists",
    )
    parser.add_argument(
        "--mode",
        choices=["generic", "places"],
        help="Column discovery mode (defaults to places)",
    )
    parser.add_argument(
        "--no-vacuum",
        action="store_true",
        help="Skip the VACUUM after the rewrite",
    )
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    """Settings from env/.env with command-line flags taking precedence."""
    overrides: dict[str, object] = {}
    if args.output:
        overrides["output_path"] = args.output
    if args.places:
        overrides["places_path"] = args.places
    if args.force:
        overrides["force_overwrite"] = True
    if args.mode:
        overrides["discovery_mode"] = args.mode
    if args.no_vacuum:
        overrides["vacuum_after_rewrite"] = False
    if args.verbosity:
        overrides["log_level"] = Log.level_for_verbosity(args.verbosity)
    return Settings(**overrides)


def resolve_profile(settings: Settings) -> Profile:
    if settings.places_path:
        return profile_from_path(settings.places_path)
    profile = select_profile(find_profiles())
    print(f"Using profile {profile.name!r}")
    return profile


def main(argv: list[str] | None = None) -> int:
    """Entry point: parse flags -> pick source -> copy -> rewrite."""
    args = build_parser().parse_args(argv)
    settings = settings_from_args(args)
    Log.configure(settings.log_level)

    try:
        profile = resolve_profile(settings)
        outcome = build_runner(settings).run(profile.places_db, Path(settings.output_path))
    except (ProfileError, WorkspaceError, OSError) as exc:
        Log.error(str(exc))
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if not outcome.success:
        print(f"Error: {outcome.error}", file=sys.stderr)
        return 1
    print("Done!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
