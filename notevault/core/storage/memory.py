"""In-memory record backend. Nothing survives the process."""

from notevault.core.storage.base import RecordBackend


class InMemoryBackend(RecordBackend):
    """Dictionary-backed record storage, mainly for tests and scratch sessions."""

    def __init__(self):
        self.records: dict[str, str] = {}

    async def initialize(self) -> None:
        pass

    async def read(self, key: str) -> str | None:
        return self.records.get(key)

    async def write(self, key: str, text: str) -> None:
        self.records[key] = text

    async def delete(self, key: str) -> bool:
        return self.records.pop(key, None) is not None

    async def list_keys(self, collection: str, suffix: str = "") -> list[str]:
        prefix = f"{collection}/"
        names = []
        for key in self.records:
            if not key.startswith(prefix):
                continue
            name = key[len(prefix) :]
            if "/" in name or (suffix and not name.endswith(suffix)):
                continue
            names.append(name[: len(name) - len(suffix)])
        return sorted(names)

    async def exists(self, key: str) -> bool:
        return key in self.records
