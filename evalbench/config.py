"""Configuration loading for evalbench."""

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from evalbench.problems.registry import ProblemSuite, get_registry


@dataclass
class SuiteConfig:
    """A suite of problems to run."""

    family: str = "real"
    problems: list[int | str] = field(default_factory=list)
    instances: list[int] = field(default_factory=lambda: [1])
    dimensions: list[int] = field(default_factory=lambda: [5])

    def build(self) -> ProblemSuite:
        """Create the suite from the registry of this family."""
        return ProblemSuite(
            get_registry(self.family),
            problems=list(self.problems),
            instances=list(self.instances),
            dimensions=list(self.dimensions),
        )


@dataclass
class EvalbenchConfig:
    """Complete experiment configuration."""

    log_level: str = "WARNING"
    budget: int = 1000
    repeats: int = 1
    seed: int = 42
    track_memory: bool = False
    suites: list[SuiteConfig] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.budget <= 0:
            raise ValueError(f"budget must be positive, got {self.budget}")
        if self.repeats <= 0:
            raise ValueError(f"repeats must be positive, got {self.repeats}")


def load_config(config_path: Path | str | None = None) -> EvalbenchConfig:
    """Load experiment configuration from a YAML file.

    A missing file yields the default configuration.
    """
    if config_path is None:
        # Default to configs/evalbench.yaml relative to project root
        config_path = Path(__file__).parent.parent / "configs" / "evalbench.yaml"

    config_path = Path(config_path)
    if not config_path.exists():
        return EvalbenchConfig()

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    suites = []
    for suite_data in data.get("suites", []):
        suites.append(
            SuiteConfig(
                family=suite_data.get("family", "real"),
                problems=suite_data.get("problems", []),
                instances=suite_data.get("instances", [1]),
                dimensions=suite_data.get("dimensions", [5]),
            )
        )

    return EvalbenchConfig(
        log_level=str(data.get("log_level", "WARNING")).upper(),
        budget=int(data.get("budget", 1000)),
        repeats=int(data.get("repeats", 1)),
        seed=int(data.get("seed", 42)),
        track_memory=bool(data.get("track_memory", False)),
        suites=suites,
    )
