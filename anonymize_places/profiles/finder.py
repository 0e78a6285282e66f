import platform
from pathlib import Path

from anonymize_places.logging.logger import Log
from anonymize_places.profiles.exceptions import ProfileNotFoundError
from anonymize_places.profiles.models import Profile

PLACES_FILENAME = "places.sqlite"


def profiles_root(home: Path, system: str) -> Path:
    """Directory holding Firefox profiles for the given OS name."""
    if system == "Windows":
        return home / "AppData" / "Roaming" / "Mozilla" / "Firefox" / "Profiles"
    if system == "Darwin":
        return home / "Library" / "Application Support" / "Firefox" / "Profiles"
    return home / ".mozilla" / "firefox"


def find_profiles(home: Path | None = None, system: str | None = None) -> list[Profile]:
    """List profiles under the platform's Firefox directory that hold a places db.

    Raises:
        ProfileNotFoundError: if the profile directory itself does not exist.
    """
    root = profiles_root(
        home if home is not None else Path.home(),
        system if system is not None else platform.system(),
    )
    Log.debug(f"Using profile path: {root}")
    if not root.is_dir():
        raise ProfileNotFoundError(f"Firefox profile directory not found: {root}")

    profiles: list[Profile] = []
    for entry in sorted(root.iterdir()):
        if not entry.is_dir():
            continue
        places = entry / PLACES_FILENAME
        try:
            if not places.is_file():
                continue
            size = places.stat().st_size
        except OSError as exc:
            Log.debug(f"Got error reading profile directory, skipping: {exc}")
            continue
        profiles.append(Profile(name=entry.name, places_db=places, db_size=size))
    return profiles


def select_profile(profiles: list[Profile]) -> Profile:
    """Return the profile with the largest places database.

    Raises:
        ProfileNotFoundError: if *profiles* is empty.
    """
    if not profiles:
        raise ProfileNotFoundError("No profiles found")
    ranked = sorted(profiles, key=lambda p: p.db_size, reverse=True)
    for profile in ranked:
        Log.debug(f"Found: {profile.name!r} with a {profile.friendly_db_size()} places.sqlite")
    return ranked[0]


def profile_from_path(path: Path | str) -> Profile:
    """Wrap an explicit places database path.

    Raises:
        FileNotFoundError: if *path* does not exist.
    """
    resolved = Path(path).resolve()
    if not resolved.is_file():
        raise FileNotFoundError(f"File not found: {resolved}")
    return Profile(name="", places_db=resolved, db_size=resolved.stat().st_size)
