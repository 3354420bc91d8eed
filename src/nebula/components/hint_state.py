from dataclasses import dataclass
from typing import Optional

@dataclass(slots=True)
class HintState:
    """Latest advisory text; None means the idle tip is shown."""
    text: Optional[str] = None
    loading: bool = False
