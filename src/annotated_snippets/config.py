import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict

DEFAULT_TYPES_PATH = ".snippets/types.json"
DEFAULT_LINE_HEIGHT = 20
DEFAULT_INDENT_SIZE = 2


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    types_path: Path = Path(DEFAULT_TYPES_PATH)
    theme_path: Path | None = None
    indent_size: int = DEFAULT_INDENT_SIZE
    line_height: int = DEFAULT_LINE_HEIGHT


def load_settings() -> Settings:
    theme_path = os.getenv("SNIPPETS_THEME_PATH")
    return Settings(
        types_path=Path(os.getenv("SNIPPETS_TYPES_PATH", DEFAULT_TYPES_PATH)),
        theme_path=Path(theme_path) if theme_path else None,
        indent_size=int(os.getenv("SNIPPETS_INDENT_SIZE", str(DEFAULT_INDENT_SIZE))),
        line_height=int(os.getenv("SNIPPETS_LINE_HEIGHT", str(DEFAULT_LINE_HEIGHT))),
    )
