"""
Dialogue bootstrap.

Loads the generated dialogues from `settings.DIALOGUES_DIR` into the
`dialogues` table at startup. Each `*.json` file (except the aggregate
manifest) holds one dialogue; its external id is `dialogue_<product_id>`.

Loading is idempotent: rows are inserted only when their external id is not
stored yet, so restarting the service never duplicates dialogues and never
rewrites a stored payload, even if the file changed.
"""

import json
import logging
from pathlib import Path
from typing import Iterator, Optional, Tuple

from sqlalchemy.orm import Session

from dialogue_rating.database.config.config import settings
from dialogue_rating.database.daos.dialogue_dao import DialogueDao
from dialogue_rating.database.entities.dialogue import DIALOGUE_KINDS, make_dialogue_id
from dialogue_rating.database.helpers.transactionManagement import transactional

logger = logging.getLogger(__name__)


def read_dialogue_files(directory: Path, manifest: str) -> Iterator[Tuple[str, dict]]:
    """
    Yield `(file name, parsed document)` for every dialogue file, in name order.

    Files that cannot be read or parsed, or whose document is not a JSON
    object, are logged and skipped.
    """
    for path in sorted(directory.glob("*.json")):
        if path.name == manifest:
            continue
        try:
            with path.open(encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Skipping %s: %s", path.name, e)
            continue
        if not isinstance(document, dict):
            logger.warning("Skipping %s: top-level JSON value is not an object", path.name)
            continue
        yield path.name, document


def _product_id(document: dict) -> Optional[int]:
    """The document's product id as an int; None when absent or not integral."""
    product_id = document.get("product_id")
    if isinstance(product_id, bool):
        return None
    if isinstance(product_id, int):
        return product_id
    if isinstance(product_id, str) and product_id.strip().isdigit():
        return int(product_id)
    return None


def _kind(document: dict) -> Optional[int]:
    kind = document.get("kind")
    return kind if kind in DIALOGUE_KINDS and not isinstance(kind, bool) else None


@transactional
def populate_dialogues(session: Session, directory: Optional[str] = None, manifest: Optional[str] = None) -> int:
    """
    Insert every dialogue file whose external id is not stored yet.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session (injected by @transactional).
    directory : str, optional
        Directory to read; defaults to `settings.DIALOGUES_DIR`.
    manifest : str, optional
        File name to ignore; defaults to `settings.DIALOGUES_MANIFEST`.

    Returns
    -------
    int
        Number of dialogues newly inserted.
    """
    directory = Path(directory or settings.DIALOGUES_DIR)
    manifest = manifest or settings.DIALOGUES_MANIFEST
    if not directory.is_dir():
        logger.warning("Dialogue directory %s does not exist; no dialogues loaded", directory)
        return 0

    dao = DialogueDao()
    seen = inserted = 0
    for file_name, document in read_dialogue_files(directory, manifest):
        product_id = _product_id(document)
        if product_id is None:
            logger.warning("Skipping %s: missing or non-integer product_id %r", file_name, document.get("product_id"))
            continue
        seen += 1
        if dao.insertIfAbsent(
            session=session,
            dialogue_id=make_dialogue_id(product_id),
            product_id=product_id,
            product_title=document.get("product_title"),
            kind=_kind(document),
            dialogue_data=json.dumps(document),
            source_file=file_name,
        ):
            inserted += 1

    logger.info("Loaded %d dialogues from %s (%d new)", seen, directory, inserted)
    return inserted
