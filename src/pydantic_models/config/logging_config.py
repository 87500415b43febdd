from typing import Optional
from pydantic import BaseModel

class LoggingConfig(BaseModel):
    log_file: Optional[str] = None                   # kein Datei-Log per Default
    log_level: Optional[str] = "INFO"                # Defaultwert
