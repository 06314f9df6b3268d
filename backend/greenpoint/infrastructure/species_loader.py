"""Species Loader — reads the EcoCrop CSV into an immutable SpeciesTable.

Invariants:
    - Called once at startup (lifespan), never per request
    - Unreadable or undecodable file → empty table + error log
      (readiness reports not-ready); startup never aborts on it
    - Rows without ScientificName are skipped; all others kept

Design Decisions:
    - stdlib csv.DictReader: one small file, no dataframe needed
    - utf-8-sig encoding: EcoCrop exports often carry a BOM
"""

import csv
import logging
from pathlib import Path

from greenpoint.core.species import SpeciesTable, record_from_row

logger = logging.getLogger(__name__)


def load_species_table(path: Path | str) -> SpeciesTable:
    """Load the species table from CSV. Never raises on a missing or malformed file."""
    path = Path(path)
    try:
        with path.open(newline="", encoding="utf-8-sig") as fh:
            records = [
                record for record in (record_from_row(row) for row in csv.DictReader(fh))
                if record is not None
            ]
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        logger.error(f"Error reading species CSV {path}: {e}")
        return SpeciesTable([])
    logger.info(f"Species CSV {path.name} processed. Loaded {len(records)} records.")
    return SpeciesTable(records)
