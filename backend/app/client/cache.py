"""
Local note cache: one JSON file holding the whole collection.

The file is a plain serialized copy of the client's in-memory list with
client-shaped keys (id, isPinned, isArchived, isDeleted, createdAt, ...).
There is no schema version; a file that fails to parse is treated as absent.
Writes go to a sibling temp file first and are then renamed into place, so a
crash mid-write leaves the previous copy intact.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

import aiofiles
import aiofiles.os
from pydantic import TypeAdapter
from pydantic import ValidationError as SchemaError

from app.client.models import ClientNote

logger = logging.getLogger(__name__)

_notes_adapter = TypeAdapter(List[ClientNote])


class NoteCache:

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    async def load(self) -> Optional[List[ClientNote]]:
        """Return the cached notes, or None when there is no usable cache."""
        if not await aiofiles.os.path.exists(self.path):
            return None
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                raw = await f.read()
            return _notes_adapter.validate_json(raw)
        except (OSError, UnicodeDecodeError, SchemaError) as e:
            logger.warning("Ignoring unreadable note cache %s: %s", self.path, str(e))
            return None

    async def save(self, notes: Sequence[ClientNote]) -> None:
        """Overwrite the cache with `notes` (last write wins)."""
        await aiofiles.os.makedirs(self.path.parent, exist_ok=True)
        payload = json.dumps([note.to_cache() for note in notes], ensure_ascii=False)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(payload)
            await aiofiles.os.replace(tmp_path, self.path)
        except OSError:
            if await aiofiles.os.path.exists(tmp_path):
                await aiofiles.os.remove(tmp_path)
            raise

    async def clear(self) -> None:
        if await aiofiles.os.path.exists(self.path):
            await aiofiles.os.remove(self.path)
