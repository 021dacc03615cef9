import logging
LOGGER = logging.getLogger(__name__)

from typing import Dict, Iterable, Optional, Tuple
from pydantic import BaseModel, ConfigDict

KEY_DELIMITER = ":"
SECTION_SEPARATOR = "--"


class PrefixSecretManager:
    """
    Decides which vault secrets belong to this application and how their
    names map onto hierarchical configuration keys.

    A secret named "app-AIAssistant--EndPoint" loaded with prefix "app"
    becomes the configuration key "AIAssistant:EndPoint". Secrets that
    do not start with "<prefix>-" are ignored.
    """

    def __init__(self, prefix: str):
        self.prefix = f"{prefix}-"

    def load(self, name: str) -> bool:
        return name.startswith(self.prefix)

    def get_key(self, name: str) -> str:
        return name[len(self.prefix):].replace(SECTION_SEPARATOR, KEY_DELIMITER)

    def load_entries(self, entries: Iterable[Tuple[str, str]]) -> Dict[str, str]:
        configuration = {}
        for name, value in entries:
            if not self.load(name):
                LOGGER.debug(f"Skipping secret {name}: does not match prefix {self.prefix}")
                continue
            configuration[self.get_key(name)] = value
        return configuration


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class AssistantSecrets(BaseModel):
    """Endpoint, key and assistant id needed to talk to the live assistant."""

    model_config = ConfigDict(frozen=True)

    endpoint: Optional[str] = None
    key: Optional[str] = None
    id: Optional[str] = None

    @classmethod
    def from_configuration(cls, configuration: Dict[str, str], section: str = "AIAssistant") -> "AssistantSecrets":
        def lookup(name):
            return _clean(configuration.get(f"{section}{KEY_DELIMITER}{name}"))

        return cls(endpoint=lookup("EndPoint"), key=lookup("Key"), id=lookup("Id"))

    def is_complete(self) -> bool:
        return all(_clean(value) for value in (self.endpoint, self.key, self.id))
