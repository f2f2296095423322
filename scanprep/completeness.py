"""
Config completeness scoring.

Compares an existing sonar-project.properties file with the properties the
analyzers detected. Critical keys carry 60% of the score and recommended
keys 40%; only keys some analyzer actually detected are counted.
"""

import logging
import math
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

from .config import DEFAULT_CONFIG_FILE
from .models import DetectedProperty, ExistingConfigAnalysis
from .properties import read_properties

logger = logging.getLogger(__name__)

CRITICAL_WEIGHT = 60
RECOMMENDED_WEIGHT = 40


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _is_present(existing: Dict[str, str], key: str) -> bool:
    return bool(existing.get(key))


def _unique(keys: Iterable[str]) -> List[str]:
    """Keys in first occurrence order, repeats dropped."""
    unique: List[str] = []
    for key in keys:
        if key not in unique:
            unique.append(key)
    return unique


class ConfigCompletenessScorer:
    """Scores an existing scanner configuration against detected properties"""

    def __init__(self, config_file: str = DEFAULT_CONFIG_FILE):
        self.config_file = config_file

    def read_existing_config(self, path: Union[str, Path]) -> Optional[Dict[str, str]]:
        """Parse a configuration file, None if it cannot be read."""
        return read_properties(path)

    def score(
        self,
        existing: Optional[Dict[str, str]],
        detected: Sequence[DetectedProperty],
        critical: Iterable[str],
        recommended: Iterable[str],
        path: str = "",
    ) -> ExistingConfigAnalysis:
        """
        Score existing configuration.

        Args:
            existing: Parsed configuration, None when there is no file
            detected: Properties found by the analyzers
            critical: Declared critical keys (duplicates allowed)
            recommended: Declared recommended keys (duplicates allowed)
            path: Configuration file path, reported as-is

        Returns:
            ExistingConfigAnalysis with missing lists and a 0..100 score
        """
        detected_keys = {p.key for p in detected}
        # Repeated declarations each count toward the score
        applicable_critical = [k for k in critical if k in detected_keys]
        applicable_recommended = [k for k in recommended if k in detected_keys]

        if existing is None:
            return ExistingConfigAnalysis(
                exists=False,
                path=path,
                properties={},
                missing_critical=tuple(_unique(applicable_critical)),
                missing_recommended=tuple(_unique(applicable_recommended)),
                completeness_score=0,
            )

        missing_critical = [k for k in applicable_critical if not _is_present(existing, k)]
        missing_recommended = [k for k in applicable_recommended if not _is_present(existing, k)]

        critical_score = self._category_score(
            applicable_critical, missing_critical, CRITICAL_WEIGHT)
        recommended_score = self._category_score(
            applicable_recommended, missing_recommended, RECOMMENDED_WEIGHT)
        completeness = round_half_up(critical_score + recommended_score)

        logger.debug(
            f"Config completeness {completeness}% "
            f"(critical {critical_score:.1f}/{CRITICAL_WEIGHT}, "
            f"recommended {recommended_score:.1f}/{RECOMMENDED_WEIGHT})"
        )

        return ExistingConfigAnalysis(
            exists=True,
            path=path,
            properties=dict(existing),
            missing_critical=tuple(_unique(missing_critical)),
            missing_recommended=tuple(_unique(missing_recommended)),
            completeness_score=max(0, min(100, completeness)),
        )

    def validate_existing_config(
        self,
        project_path: Union[str, Path],
        detected: Sequence[DetectedProperty],
        critical: Iterable[str],
        recommended: Iterable[str],
    ) -> ExistingConfigAnalysis:
        """Read <project>/<config_file> and score it."""
        config_path = Path(project_path) / self.config_file
        existing = self.read_existing_config(config_path)
        if existing is None:
            logger.info(f"No existing configuration at {config_path}")
        return self.score(existing, detected, critical, recommended, path=str(config_path))

    @staticmethod
    def _category_score(applicable: List[str], missing: List[str], weight: int) -> float:
        # Nothing detected in this category: treated as satisfied
        if not applicable:
            return float(weight)
        present = len(applicable) - len(missing)
        return weight * present / len(applicable)
