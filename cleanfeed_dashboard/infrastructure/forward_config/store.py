"""
Flat-file persistence for the forwarding configuration.

The forwarding process reads the same file, so the format is a plain
env file:

    RTMP_URL=rtmp://example.com/live
    STREAM_KEY=abc123

No quoting and no escaping. Lines that don't look like KEY=VALUE are
ignored on read, which leaves room for fields added later.
"""

import logging
import os
import re
from pathlib import Path
from typing import Union

from ...core.errors import InvalidArgument, PersistenceFailure
from ...core.models import ForwardConfig

logger = logging.getLogger(__name__)

_LINE_PATTERN = re.compile(r"^([A-Z_]+)=(.*)$")

# File key -> ForwardConfig field, in the order they are written
_FIELDS = (
    ("RTMP_URL", "rtmp_url"),
    ("STREAM_KEY", "stream_key"),
)


class ConfigStore:
    """
    Reads and writes ForwardConfig to a single env-style file.

    Writes go to a sibling temp file which is then renamed over the
    target, so a reader sees either the old file or the new one.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> ForwardConfig:
        """
        Load the current config.

        A missing or unreadable file yields the empty config. The view
        must render even when the file is broken.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ForwardConfig()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(
                "Failed to read forwarding config, treating as absent",
                extra={"path": str(self._path), "error": str(e)}
            )
            return ForwardConfig()

        return parse_forward_env(raw)

    def write(self, config: ForwardConfig) -> None:
        """
        Replace the file with exactly two lines.

        Raises:
            InvalidArgument: a value contains a line break
            PersistenceFailure: the file could not be written; the
                previous file is left untouched
        """
        body = serialize_forward_env(config)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8", newline="\n") as handle:
                handle.write(body)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, self._path)
        except OSError as e:
            logger.error(
                "Failed to write forwarding config",
                extra={"path": str(self._path), "error": str(e)}
            )
            tmp_path.unlink(missing_ok=True)
            raise PersistenceFailure(f"Could not save configuration: {e}") from e

        logger.info(
            "Saved forwarding config",
            extra={
                "path": str(self._path),
                "rtmp_url_set": bool(config.rtmp_url),
                "stream_key_set": bool(config.stream_key),
            }
        )


def parse_forward_env(raw: str) -> ForwardConfig:
    """Parse env-file text into a ForwardConfig. Unknown lines are skipped."""
    values: dict[str, str] = {}
    # Only "\n" separates records; other Unicode line breaks are value data
    for line in raw.split("\n"):
        if line.endswith("\r"):
            line = line[:-1]
        match = _LINE_PATTERN.match(line)
        if match:
            values[match.group(1)] = match.group(2)

    return ForwardConfig(**{
        field_name: values.get(file_key, "")
        for file_key, field_name in _FIELDS
    })


def serialize_forward_env(config: ForwardConfig) -> str:
    """Render a ForwardConfig as env-file text, one line per field."""
    lines = []
    for file_key, field_name in _FIELDS:
        value = getattr(config, field_name) or ""
        if "\n" in value or "\r" in value:
            raise InvalidArgument(f"{file_key} cannot contain line breaks")
        lines.append(f"{file_key}={value}\n")
    return "".join(lines)
