"""
Assessment metric definitions.

One entry per tracked metric. The direction of "better" for the paired-trial
metrics is declared here and nowhere else: best-value derivation, the results
table and the trend chart all read from this table.

- TUG (Timed Up-and-Go, seconds): lower is better
- 5 m walk (seconds): lower is better
- FR (Functional Reach, cm): higher is better
- CS10 (sit-to-stand repetitions): higher is better, single trial
- BI (Barthel Index, 0-100): higher is better, single score
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class MetricDefinition:
    """A tracked assessment metric."""

    key: str  # domain field name
    label: str
    unit: str
    decimals: int
    lower_is_better: bool
    paired: bool = False
    chart_color: Optional[Tuple[int, int, int]] = None
    # Accepted range for single-score metrics; values outside are clamped
    min_value: Optional[int] = None
    max_value: Optional[int] = None


TUG = MetricDefinition(
    key="tug",
    label="TUG",
    unit="s",
    decimals=2,
    lower_is_better=True,
    paired=True,
    chart_color=(53, 162, 235),
)
WALKING_SPEED = MetricDefinition(
    key="walkingSpeed",
    label="5m walk",
    unit="s",
    decimals=2,
    lower_is_better=True,
    paired=True,
    chart_color=(255, 99, 132),
)
FR = MetricDefinition(
    key="fr",
    label="FR",
    unit="cm",
    decimals=0,
    lower_is_better=False,
    paired=True,
    chart_color=(75, 192, 192),
)
CS10 = MetricDefinition(
    key="cs10",
    label="CS10",
    unit="reps",
    decimals=0,
    lower_is_better=False,
    chart_color=(255, 159, 64),
    min_value=0,
    max_value=999,
)
BI = MetricDefinition(
    key="bi",
    label="BI",
    unit="pts",
    decimals=0,
    lower_is_better=False,
    chart_color=(153, 102, 255),
    min_value=0,
    max_value=100,
)

PAIRED_METRICS = (TUG, WALKING_SPEED, FR)
CHARTED_METRICS = (TUG, WALKING_SPEED, FR, CS10, BI)
SCORE_METRICS = (CS10, BI)

GENDER_OPTIONS = ("male", "female", "other")
MEDICAL_HISTORY_OPTIONS = (
    "Hypertension",
    "Diabetes",
    "Heart disease",
    "Stroke",
    "Arthropathy",
)

DEFAULT_LATEST_LIMIT = 4
