from pathlib import Path
from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    # Content
    data_directory: Path = Path(__file__).parent / "data"
    level_name: str = "stone-end-market"
    items_file: str = "items.yml"
    intro_file: str = "intro.txt"
    help_file: str = "help.txt"

    # Game Configuration
    starting_items: List[str] = ["sword", "gold"]
    line_width: int = 90
    indent: int = 4

    # Logging
    log_level: str = "WARNING"
    log_file: Optional[Path] = None

    class Config:
        env_prefix = "STONE_END_"
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def level_path(self) -> Path:
        return self.data_directory / "levels" / f"{self.level_name}.yml"

    @property
    def items_path(self) -> Path:
        return self.data_directory / self.items_file

    @property
    def intro_path(self) -> Path:
        return self.data_directory / self.intro_file

    @property
    def help_path(self) -> Path:
        return self.data_directory / self.help_file

# Get settings instance
settings = Settings()
