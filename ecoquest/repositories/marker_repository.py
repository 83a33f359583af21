"""Marker repository - JSON file implementation."""

import json
import logging
import os
import tempfile
from dataclasses import replace
from pathlib import Path
from typing import List

from ecoquest.models.domain import Marker, MarkerCollection, MarkerType
from ecoquest.repositories.base import MarkerRepository

logger = logging.getLogger(__name__)


SAMPLE_MARKERS: List[Marker] = [
    Marker(
        id="sample-tree-1",
        type=MarkerType.TREE,
        description="Planted a neem sapling near the lake",
        lat=22.5726,
        lng=88.3639,
        user="EcoQuest Team",
        photo_url=None,
        timestamp="2024-01-15T09:30:00.000Z",
    ),
    Marker(
        id="sample-cleanup-1",
        type=MarkerType.CLEANUP,
        description="Cleared plastic waste from the riverbank",
        lat=22.5850,
        lng=88.3468,
        user="EcoQuest Team",
        photo_url=None,
        timestamp="2024-01-16T07:00:00.000Z",
    ),
    Marker(
        id="sample-school-1",
        type=MarkerType.SCHOOL,
        description="Recycling workshop with grade 6 students",
        lat=22.5448,
        lng=88.3426,
        user="EcoQuest Team",
        photo_url=None,
        timestamp="2024-01-17T11:15:00.000Z",
    ),
]


class JsonMarkerRepository(MarkerRepository):
    """
    Repository for marker data access.

    Current implementation: a single pretty-printed JSON file holding
    ``{"markers": [...]}``, read and rewritten on every operation.
    No locking: concurrent writers can lose each other's updates.
    """

    def __init__(self, data_file: Path, seed_samples: bool = False):
        self.data_file = Path(data_file)
        self.seed_samples = seed_samples

    def ensure_initialized(self) -> bool:
        """Create the backing file if it does not exist yet.

        Returns:
            True if a new file was written, False if one already existed
        """
        if self.data_file.exists():
            return False

        seed = [replace(m) for m in SAMPLE_MARKERS] if self.seed_samples else []
        if not self.save(MarkerCollection(markers=seed)):
            return False

        logger.info(
            "Initialized %s with %d marker(s)", self.data_file, len(seed)
        )
        return True

    def load(self) -> MarkerCollection:
        """Load the collection, falling back to empty on any read problem."""
        try:
            with open(self.data_file, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return MarkerCollection()
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error("Error reading data file %s: %s", self.data_file, e)
            return MarkerCollection()

        raw_markers = data.get("markers") if isinstance(data, dict) else None
        if not isinstance(raw_markers, list):
            logger.error("Data file %s has no markers list", self.data_file)
            return MarkerCollection()

        markers = []
        for raw in raw_markers:
            try:
                markers.append(Marker.from_dict(raw))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping unreadable marker entry %r: %s", raw, e)

        return MarkerCollection(markers=markers)

    def save(self, collection: MarkerCollection) -> bool:
        """Write the collection to a temp file, then swap it into place."""
        tmp_path = None
        try:
            self.data_file.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self.data_file.name}.",
                suffix=".tmp",
                dir=str(self.data_file.parent),
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(collection.to_dict(), f, indent=2)
            os.replace(tmp_path, self.data_file)
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.error("Error writing data file %s: %s", self.data_file, e)
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
            return False
