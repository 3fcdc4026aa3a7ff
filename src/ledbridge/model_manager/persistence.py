"""JSON file storage for Pydantic models.

The bridge keeps its settings in `~/.ledbridge/config.json`. Problems with
that file surface as ConfigurationError subclasses carrying a recovery hint,
never as raw Pydantic or JSON tracebacks. A file that exists but does not
validate is never silently replaced by defaults.

Writes go to `<name>.tmp` and are renamed over the target; the previous
contents are first copied to `<name>.bak`.
"""

import logging
import shutil
from collections.abc import Callable
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ValidationError

from ledbridge.exceptions import ConfigFileInvalidError, ConfigurationError, wrap_pydantic_error

logger = logging.getLogger(__name__)


class JsonModelFile[M: BaseModel]:
    """
    One JSON file holding one model of type `M`.

    Example:
        ```python
        store = JsonModelFile(Path("config.json"), AppConfig)
        config = store.load_or_default()
        store.save(config.model_copy(update={"serial_port": "COM3"}))
        ```
    """

    def __init__(self, path: Path, model_type: type[M]):
        self.path = path
        self.model_type = model_type

    @property
    def backup_path(self) -> Path:
        return self.path.with_suffix(self.path.suffix + ".bak")

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> M:
        """
        Read and validate the file.

        Raises:
            FileNotFoundError: If the file does not exist
            ConfigFileInvalidError: If the file is empty, unreadable or not JSON
            ConfigValidationError: If the JSON does not fit the model
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigFileInvalidError(str(self.path), f"Cannot read file: {e}") from e

        if not text.strip():
            raise ConfigFileInvalidError(str(self.path), "File is empty")

        try:
            model = self.model_type.model_validate_json(text)
        except ValidationError as e:
            logger.error(f"Rejected {self.path}: {e}")
            raise wrap_pydantic_error(e, str(self.path)) from e

        logger.debug(f"Loaded {self.model_type.__name__} from {self.path}")
        return model

    def load_or_default(self, default_factory: Optional[Callable[[], M]] = None) -> M:
        """Load the file, or build a default model if it does not exist yet."""
        try:
            return self.load()
        except FileNotFoundError:
            logger.info(f"No file at {self.path}, using default {self.model_type.__name__}")
            return default_factory() if default_factory else self.model_type()

    def save(self, model: M, backup: bool = True) -> None:
        """
        Write the model atomically, keeping a backup of the previous file.

        Raises:
            OSError: If the directory or file cannot be written
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)

        if backup and self.path.exists():
            shutil.copy2(self.path, self.backup_path)
            logger.debug(f"Backed up {self.path} to {self.backup_path}")

        temp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            temp_path.write_text(model.model_dump_json(indent=2), encoding="utf-8")
            temp_path.replace(self.path)
        finally:
            temp_path.unlink(missing_ok=True)
        logger.info(f"Saved {self.model_type.__name__} to {self.path}")

    def check(self) -> Optional[str]:
        """Return why the file cannot be loaded, or None if it is valid."""
        try:
            self.load()
        except FileNotFoundError:
            return f"File not found: {self.path}"
        except ConfigurationError as e:
            return e.user_message
        return None
