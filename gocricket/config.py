"""Configuration management."""

from pathlib import Path

import yaml
from pydantic import BaseModel

from gocricket.models.player import Difficulty


class PlayersConfig(BaseModel):
    """Seat names. Seat 0 is the human."""

    human_name: str = "User"
    cpu_names: list[str] = ["CPU Alice", "CPU Bob", "CPU Charlie"]

    def all_names(self) -> list[str]:
        return [self.human_name, *self.cpu_names]


class TimingConfig(BaseModel):
    """Presentation pacing, in seconds."""

    transfer_delay: float = 1.5  # Human sees received cards before the turn passes
    draw_delay: float = 1.5  # Drawn card in flight to the human's hand
    cpu_turn_delay: float = 1.5  # Before a CPU picks its request
    cpu_think_delay: float = 1.0  # Between a CPU's announcement and its resolution
    message_ttl: float = 8.0


class CpuConfig(BaseModel):
    """CPU opponent configuration."""

    # Player name -> difficulty; unnamed CPUs fall back to a name heuristic
    difficulties: dict[str, Difficulty] = {}


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    show_hands: bool = False


class GameLogSettings(BaseModel):
    """Replay log configuration."""

    enabled: bool = False
    output_path: str = "logs"


class Config(BaseModel):
    """Root configuration."""

    players: PlayersConfig = PlayersConfig()
    timing: TimingConfig = TimingConfig()
    cpu: CpuConfig = CpuConfig()
    logging: LoggingConfig = LoggingConfig()
    game_log: GameLogSettings = GameLogSettings()


def load_config(path: Path | str | None = None) -> Config:
    """Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses default config.

    Returns:
        Config object.
    """
    if path is None:
        return Config()

    config_path = Path(path)
    if not config_path.exists():
        return Config()

    with open(config_path) as f:
        data = yaml.safe_load(f)

    return Config(**data) if data else Config()
