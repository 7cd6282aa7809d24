"""
Artifact management for storing run summaries and command transcripts.
"""

import json
import logging
from pathlib import Path
from datetime import datetime
from typing import Dict, Any, Optional, List

from ..models.provisioning import ProvisioningResult


class ArtifactManager:
    """Manages storage of per-run records."""

    def __init__(self, base_path: Path, run_id: Optional[str] = None):
        """
        Initialize artifact manager.

        Args:
            base_path: Base directory for run records
            run_id: Run ID; a timestamp is used if omitted
        """
        self.logger = logging.getLogger(__name__)
        self.base_path = Path(base_path)
        self.run_id = run_id or datetime.utcnow().strftime("%Y%m%d_%H%M%S")
        self.run_base_path = self.base_path / self.run_id

    def save_json(self, filename: str, data: Dict[str, Any],
                  subdirs: Optional[List[str]] = None) -> Path:
        """
        Save JSON data to file.

        Args:
            filename: JSON filename
            data: Data to save
            subdirs: Optional subdirectories under run base path

        Returns:
            Path to saved file
        """
        target_dir = self.run_base_path
        for subdir in subdirs or []:
            target_dir = target_dir / subdir
        target_dir.mkdir(parents=True, exist_ok=True)

        json_path = target_dir / filename

        # Add timestamp if not present
        if 'timestamp' not in data:
            data['timestamp'] = datetime.utcnow().isoformat()

        with open(json_path, 'w') as f:
            json.dump(data, f, indent=2, default=str)

        self.logger.info(f"Saved JSON to {json_path}")
        return json_path

    def save_log(self, log_content: str, log_type: str = "transcript") -> Path:
        """
        Save a log file.

        Args:
            log_content: Log content
            log_type: Type of log, used as the file name

        Returns:
            Path to saved log
        """
        self.run_base_path.mkdir(parents=True, exist_ok=True)
        log_path = self.run_base_path / f"{log_type}.log"
        log_path.write_text(log_content)

        self.logger.info(f"Saved log to {log_path}")
        return log_path

    def save_run(self, result: ProvisioningResult) -> Path:
        """Write summary.json and transcript.log for a finished run."""
        summary_path = self.save_json("summary.json", result.model_dump(mode="json"))

        lines = []
        for cmd in result.commands:
            marker = "skipped" if cmd.get("skipped") else f"exit={cmd.get('returncode')}"
            lines.append(f"[{marker}] {cmd.get('command')}")
        self.save_log("\n".join(lines) + "\n" if lines else "")

        return summary_path
