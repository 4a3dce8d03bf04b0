# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""StructlogAdapter: default LoggingPort implementation using structlog."""

from __future__ import annotations

import logging
import sys
from typing import IO, Any, Literal

import structlog
from pydantic import BaseModel, ConfigDict, Field

from censor.core.config import Config, config_properties


@config_properties(prefix="censor.logging")
class LoggingProperties(BaseModel):
    """The ``censor.logging`` section.

    ``level`` maps logger names to level names; ``root`` sets the root
    logger and every other key one module.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    format: Literal["console", "json"] = "console"
    level: dict[str, str] = Field(default_factory=lambda: {"root": "INFO"})

    @property
    def root_level(self) -> str:
        return self.level.get("root", "INFO").upper()

    @property
    def module_levels(self) -> dict[str, str]:
        return {name: value.upper() for name, value in self.level.items() if name != "root"}


class StructlogAdapter:
    """Renders censor's stdlib log records through structlog.

    The interception modules only use ``logging.getLogger(__name__)``;
    :meth:`configure` installs a root handler whose formatter runs those
    records through the structlog processor chain.
    """

    def __init__(self, stream: IO[str] | None = None) -> None:
        self.properties = LoggingProperties()
        self._stream = stream

    def configure(self, config: Config) -> None:
        self.properties = config.bind(LoggingProperties)
        processors = self._shared_processors()
        structlog.configure(
            processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        handler = logging.StreamHandler(self._stream or sys.stdout)
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                foreign_pre_chain=processors,
                processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, self._renderer()],
            )
        )
        logging.basicConfig(handlers=[handler], level=self.properties.root_level, force=True)
        for name, level in self.properties.module_levels.items():
            self.set_level(name, level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        logging.getLogger(name).setLevel(getattr(logging, level.upper(), logging.INFO))

    @staticmethod
    def _shared_processors() -> list[structlog.types.Processor]:
        return [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
        ]

    def _renderer(self) -> structlog.types.Processor:
        if self.properties.format == "json":
            return structlog.processors.JSONRenderer()
        return structlog.dev.ConsoleRenderer(colors=False)
