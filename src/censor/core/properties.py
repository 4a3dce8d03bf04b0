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
"""Engine settings bound from the ``censor`` configuration section."""

from __future__ import annotations

import functools

from pydantic import BaseModel, ConfigDict, Field

from censor.core.config import Config, config_properties


@config_properties(prefix="censor")
class CensorProperties(BaseModel):
    """Settings consumed by the interception engines.

    Attributes:
        max_depth: Levels walked by the accessor lookup (instance dict
            counts as level 0).
        slot_prefix: Prefix of legacy single-listener event slots.
        register_method: Name of the listener registration method.
        unregister_method: Name of the listener removal method.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    max_depth: int = Field(default=10, ge=0)
    slot_prefix: str = "on"
    register_method: str = "add_event_listener"
    unregister_method: str = "remove_event_listener"

    @classmethod
    def load(cls, config: Config | None = None) -> CensorProperties:
        """Bind from *config*, or from the packaged defaults when omitted."""
        return (config if config is not None else Config.defaults()).bind(cls)


@functools.lru_cache(maxsize=1)
def default_properties() -> CensorProperties:
    """Properties bound from the packaged defaults, loaded once per process."""
    return CensorProperties.load()
