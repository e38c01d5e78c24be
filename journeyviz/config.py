"""Configuration utilities.

Central place to load environment driven settings (input/output paths, region file, log level).
Avoids scattering os.getenv calls around the codebase.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env once on module import
load_dotenv()


@dataclass(slots=True)
class Settings:
    journeys_csv: Path = Path(os.getenv("JOURNEYS_CSV", "data/journeys.csv"))
    output_dir: Path = Path(os.getenv("OUTPUT_DIR", "tables"))
    regions_geojson: Optional[Path] = Path(os.environ["REGIONS_GEOJSON"]) if os.getenv("REGIONS_GEOJSON") else None
    region_name_property: str = os.getenv("REGION_NAME_PROPERTY", "name")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def regions_configured(self) -> bool:
        return self.regions_geojson is not None


settings = Settings()
