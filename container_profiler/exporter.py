import json
import logging
import os
from typing import Any, Dict, List, Optional

import pandas as pd

logger = logging.getLogger(__name__)


class Exporter:
    FORMATS = ("parquet", "csv", "tsv")

    def __init__(self, output_dir: str, session_uuid: str):
        self.output_dir = output_dir
        self.session_uuid = session_uuid
        self.snapshot_files = []

        # Ensure output directory exists
        os.makedirs(output_dir, exist_ok=True)

    def save_static(self, data: Dict[str, Any]):
        """Saves static host info to {uuid}.json"""
        path = os.path.join(self.output_dir, f"{self.session_uuid}.json")

        try:
            with open(path, 'w') as f:
                json.dump(data, f, indent=4)
            logger.info("Static info saved: %s", path)
        except OSError as e:
            logger.error("Error saving static info: %s", e)

    def save_snapshot(self, data: Dict[str, Any]):
        """Saves a single sample to {uuid}-{timestamp}.json"""
        ts = data.get("timestamp", 0)
        path = os.path.join(self.output_dir, f"{self.session_uuid}-{ts}.json")

        try:
            with open(path, 'w') as f:
                json.dump(data, f)
            self.snapshot_files.append(path)
        except OSError as e:
            logger.error("Error saving snapshot: %s", e)

    def process_session(self, export_format: str = "parquet") -> Optional[str]:
        """
        Reads all captured snapshots, flattens them into one row per container
        per sample and exports the table in `export_format`.
        Returns the written path, or None when nothing was exported.
        """
        if export_format not in self.FORMATS:
            raise ValueError(f"Unknown export format: {export_format}")

        if not self.snapshot_files:
            logger.warning("No snapshots captured to process.")
            return None

        logger.info("Aggregating %d snapshots...", len(self.snapshot_files))

        all_records = []
        # Timestamps are fixed width, so name order is chronological
        for file_path in sorted(self.snapshot_files):
            try:
                with open(file_path, 'r') as f:
                    data = json.load(f)
            except (OSError, ValueError) as e:
                logger.warning("Skipping corrupt file %s: %s", file_path, e)
                continue
            all_records.extend(self._flatten_snapshot(data))

        if not all_records:
            logger.warning("Snapshots contain no container samples.")
            return None

        df = pd.DataFrame(all_records)
        path = os.path.join(self.output_dir, f"{self.session_uuid}.{export_format}")

        if export_format == "csv":
            df.to_csv(path, index=False)
        elif export_format == "tsv":
            df.to_csv(path, sep='\t', index=False)
        else:
            try:
                df.to_parquet(path, index=False)
            except ImportError:
                logger.warning("PyArrow not found. Skipping Parquet export.")
                return None

        logger.info("Exported %s: %s", export_format.upper(), path)
        return path

    def _flatten_snapshot(self, data: Dict[str, Any]) -> List[Dict[str, Any]]:
        """One flat row per container in a snapshot."""
        rows = []
        for container in data.get("containers", []):
            row = {
                "timestamp": data.get("timestamp"),
                "uuid": self.session_uuid,
            }
            row.update(container)
            rows.append(row)
        return rows
