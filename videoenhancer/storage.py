import asyncio
import copy
import json
import logging
import os

logger = logging.getLogger(__name__)


class StoreError(Exception):
    pass


class Storage:
    """
    Asynchronous key-value store with change notifications.
    Listeners receive (changes, area_name) where changes maps each key to
    {"oldValue": ..., "newValue": ...}.
    """

    def __init__(self, area="local"):
        self.area = area
        self._listeners = []

    def add_listener(self, callback):
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback):
        if callback in self._listeners:
            self._listeners.remove(callback)

    async def get(self, keys=None):
        data = await self._load()
        if keys is None:
            return data
        if isinstance(keys, str):
            return {keys: data[keys]} if keys in data else {}
        if isinstance(keys, dict):
            result = copy.deepcopy(keys)
            result.update({k: data[k] for k in keys if k in data})
            return result
        return {k: data[k] for k in keys if k in data}

    async def set(self, items):
        data = await self._load()
        changes = {}
        for key, value in items.items():
            if data.get(key) != value:
                changes[key] = {"oldValue": data.get(key), "newValue": copy.deepcopy(value)}
            data[key] = copy.deepcopy(value)
        await self._save(data)
        if changes:
            self._notify(changes)

    async def clear(self):
        data = await self._load()
        await self._save({})
        if data:
            self._notify({key: {"oldValue": value, "newValue": None} for key, value in data.items()})

    def _notify(self, changes):
        for callback in list(self._listeners):
            try:
                callback(changes, self.area)
            except Exception as e:
                logger.error(f"[Video Enhancer] Storage listener failed: {e}")

    async def _load(self):
        raise NotImplementedError

    async def _save(self, data):
        raise NotImplementedError


class MemoryStore(Storage):
    def __init__(self, data=None, area="local"):
        super().__init__(area)
        self._data = copy.deepcopy(data or {})

    async def _load(self):
        return copy.deepcopy(self._data)

    async def _save(self, data):
        self._data = copy.deepcopy(data)


class JsonFileStore(Storage):
    def __init__(self, path, area="local"):
        super().__init__(area)
        self.path = path

    def setup(self):
        base_dir = os.path.dirname(self.path)
        if base_dir and not os.path.exists(base_dir):
            os.makedirs(base_dir)

    def _read(self):
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StoreError(f"Could not read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StoreError(f"Unexpected content in {self.path}")
        return data

    def _write(self, data):
        self.setup()
        tmp_path = f"{self.path}.tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            raise StoreError(f"Could not write {self.path}: {e}") from e

    async def _load(self):
        return await asyncio.to_thread(self._read)

    async def _save(self, data):
        await asyncio.to_thread(self._write, data)
