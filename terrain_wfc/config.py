from dataclasses import asdict, dataclass
from typing import Any, Mapping, Optional

import yaml


@dataclass
class WfcConfig:
    """
    Options for the WFC generator.

    floor_weight is accepted and validated but the base collapse rule draws
    uniformly, so it does not change the output.
    """
    floor_weight: float = 0.4
    pattern_size: int = 3
    enable_backtracking: bool = True
    # None means unbounded for both limits
    max_backtrack_depth: Optional[int] = None
    max_backtracks: Optional[int] = None
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.pattern_size < 1:
            raise ValueError(f"pattern_size must be >= 1, got {self.pattern_size}")
        if not 0.0 <= self.floor_weight <= 1.0:
            raise ValueError(f"floor_weight must be in [0, 1], got {self.floor_weight}")
        if self.max_backtrack_depth is not None and self.max_backtrack_depth < 0:
            raise ValueError(
                f"max_backtrack_depth must be >= 0, got {self.max_backtrack_depth}"
            )
        if self.max_backtracks is not None and self.max_backtracks < 0:
            raise ValueError(f"max_backtracks must be >= 0, got {self.max_backtracks}")

    @classmethod
    def from_dict(cls, params: Optional[Mapping[str, Any]]) -> "WfcConfig":
        """Build a config from a mapping. Unknown keys are ignored."""
        params = dict(params or {})
        kwargs: dict[str, Any] = {}
        if "floor_weight" in params:
            kwargs["floor_weight"] = float(params["floor_weight"])
        if "pattern_size" in params:
            kwargs["pattern_size"] = int(params["pattern_size"])
        if "enable_backtracking" in params:
            kwargs["enable_backtracking"] = _to_bool(params["enable_backtracking"])
        if params.get("max_backtrack_depth") is not None:
            kwargs["max_backtrack_depth"] = int(params["max_backtrack_depth"])
        if params.get("max_backtracks") is not None:
            kwargs["max_backtracks"] = int(params["max_backtracks"])
        if "verbose" in params:
            kwargs["verbose"] = _to_bool(params["verbose"])
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def load_config(path: str) -> WfcConfig:
    """
    Load a WfcConfig from a YAML file. Settings may sit at the top level or
    under a `wfc:` section; an empty file gives the defaults.
    """
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping in {path}, got {type(data).__name__}")
    if isinstance(data.get("wfc"), dict):
        data = data["wfc"]
    return WfcConfig.from_dict(data)


def save_config(config: WfcConfig, path: str) -> None:
    with open(path, "w") as f:
        yaml.dump({"wfc": config.to_dict()}, f, default_flow_style=False)

