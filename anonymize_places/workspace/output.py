import os
import shutil
from pathlib import Path

from anonymize_places.logging.logger import Log
from anonymize_places.workspace.exceptions import OutputExistsError, SameFileError


def _is_same_file(source: Path, output: Path) -> bool:
    if output.exists():
        return os.path.samefile(source, output)
    return source.resolve() == output.resolve()


def prepare_output(source: Path, output: Path, force: bool = False) -> Path:
    """Copy *source* to *output* so the rewrite never touches the original.

    Raises:
        FileNotFoundError: if *source* does not exist.
        SameFileError: if *output* is *source* (directly, or via a link).
        OutputExistsError: if *output* exists and *force* is False.
    """
    if not source.is_file():
        raise FileNotFoundError(f"File not found: {source}")
    if _is_same_file(source, output):
        raise SameFileError(f"Output {output} is the source database {source}")
    if output.exists():
        if not force:
            raise OutputExistsError(
                f"{output} already exists but overwrite (-f) was not requested"
            )
        Log.info(f"Removing existing output {output}")
        output.unlink()

    shutil.copyfile(source, output)
    Log.info(f"Copied {source} -> {output}")
    return output
