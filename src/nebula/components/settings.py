from dataclasses import dataclass, asdict
from typing import Any, Dict, Mapping

@dataclass(slots=True)
class Settings:
    music: bool = True
    sound: bool = True
    vibration: bool = True

    def as_dict(self) -> Dict[str, bool]:
        return asdict(self)

    def update_from(self, payload: Mapping[str, Any]) -> None:
        for key in ("music", "sound", "vibration"):
            if key in payload:
                setattr(self, key, bool(payload[key]))
