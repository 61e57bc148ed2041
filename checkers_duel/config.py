# checkers_duel/config.py
from dataclasses import dataclass, field
from typing import Dict, Optional
import logging
import os
import tomllib  # python >=3.11

logger = logging.getLogger(__name__)

# Defaults (points)
PIECE_VALUES = {
    "NORMAL": 10,
    "KING": 15,
}

# plies searched per difficulty tier
DIFFICULTY_DEPTHS = {
    "easy": 2,
    "medium": 4,
    "hard": 6,
}

# fraction of JITTER_UNIT added as noise to root scores
DIFFICULTY_JITTER = {
    "easy": 0.3,
    "medium": 0.1,
    "hard": 0.0,
}

@dataclass
class SearchConfig:
    default_difficulty: str = "medium"
    depths: Dict[str, int] = field(default_factory=lambda: DIFFICULTY_DEPTHS.copy())
    jitter: Dict[str, float] = field(default_factory=lambda: DIFFICULTY_JITTER.copy())
    jitter_unit: int = 100
    seed: Optional[int] = None  # None means OS entropy
    max_nodes: Optional[int] = None  # None means unbounded
    time_limit_ms: Optional[int] = None  # None means depth-only
    think_delay_ms: int = 1000

@dataclass
class EvalConfig:
    piece_values: Dict[str, int] = field(default_factory=lambda: PIECE_VALUES.copy())
    mobility_weight: int = 2
    no_moves_score: int = 1000  # sentinel for a side that cannot move

@dataclass
class MatchConfig:
    hearts: int = 3
    auto_next_round: bool = True

@dataclass
class UIConfig:
    engine_name: str = "Checkers Duel"
    api_port: int = 8000

@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    eval: EvalConfig = field(default_factory=EvalConfig)
    match: MatchConfig = field(default_factory=MatchConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("search", "eval", "match", "ui"):
            target = getattr(cfg, section)
            for k, v in raw.get(section, {}).items():
                if hasattr(target, k):
                    setattr(target, k, v)
                else:
                    logger.warning("ignoring unknown config key %s.%s", section, k)
        if "log_level" in raw:
            cfg.log_level = raw["log_level"]
        return cfg

# single globally importable config instance
CONFIG = Config.load_from_toml(os.environ.get("CHECKERS_CONFIG_TOML", "config.toml"))
# allow env overrides for quick debugging
if os.environ.get("CHECKERS_DIFFICULTY"):
    CONFIG.search.default_difficulty = os.environ["CHECKERS_DIFFICULTY"].lower()
try:
    override_seed = os.environ.get("CHECKERS_SEED")
    if override_seed:
        CONFIG.search.seed = int(override_seed)
except ValueError:
    logger.warning("CHECKERS_SEED must be an integer, got %r", os.environ.get("CHECKERS_SEED"))
