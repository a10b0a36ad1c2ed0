"""Snapshot persistido do motor (estado atual + histórico + cursor)."""

from __future__ import annotations

import json

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PersistedSnapshot(BaseModel):
    """Forma serializada de {current, history, cursor}."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    current: str = Field(min_length=1)
    history: list[str] = Field(min_length=1)
    cursor: int = Field(ge=0)

    @model_validator(mode="after")
    def _check_cursor(self) -> PersistedSnapshot:
        if self.cursor >= len(self.history):
            raise ValueError(
                f"cursor {self.cursor} fora do histórico (tamanho {len(self.history)})"
            )
        if self.history[self.cursor] != self.current:
            raise ValueError(
                f"current {self.current!r} diverge de history[{self.cursor}]"
            )
        return self

    def to_json(self) -> str:
        """JSON canônico (chaves ordenadas, separadores compactos)."""
        return json.dumps(
            self.model_dump(mode="json"),
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
        )

    @classmethod
    def from_json(cls, blob: str | bytes) -> PersistedSnapshot:
        """Decodifica o blob. Levanta pydantic.ValidationError se inválido."""
        return cls.model_validate_json(blob)
