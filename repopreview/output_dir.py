"""Output directory handling."""

import logging
import shutil
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


def reset_output_dir(path: Union[str, Path]) -> Path:
    """Remove ``path`` with everything in it, then create it empty.

    A missing directory is fine. Errors while creating it are raised.
    """
    path = Path(path)
    if path.exists():
        shutil.rmtree(path)
        logger.info(f"Removed previous screenshots in {path}")
    path.mkdir(parents=True, exist_ok=True)
    return path
