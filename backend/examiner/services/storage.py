import uuid
import aiofiles
import aiofiles.os
from pathlib import Path
from examiner.core.config import get_settings


class StorageService:
    """Local-disk blob store addressed by storage keys relative to the upload dir."""

    def __init__(self, upload_dir: str | Path | None = None):
        self.upload_dir = Path(upload_dir or get_settings().upload_dir)
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def _get_file_path(self, key: str) -> Path:
        """Get file path with path traversal protection."""
        if not key or ".." in key or key.startswith("/") or key.startswith("\\"):
            raise ValueError(f"Invalid storage key: {key}")

        file_path = (self.upload_dir / key).resolve()

        if not str(file_path).startswith(str(self.upload_dir.resolve())):
            raise ValueError(f"Path traversal attempt detected: {key}")

        return file_path

    async def save_file(self, file_content: bytes, filename: str) -> str:
        """Save file under a random key keeping the original extension."""
        ext = Path(filename).suffix.lower()
        key = f"{uuid.uuid4()}{ext}"
        file_path = self._get_file_path(key)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        async with aiofiles.open(file_path, "wb") as f:
            await f.write(file_content)

        return key

    async def get_file_path(self, key: str) -> Path:
        """Get absolute file path for a storage key."""
        file_path = self._get_file_path(key)
        if not await aiofiles.os.path.exists(file_path):
            raise FileNotFoundError(f"File not found: {key}")
        return file_path

    async def read_file(self, key: str) -> bytes:
        file_path = await self.get_file_path(key)
        async with aiofiles.open(file_path, "rb") as f:
            return await f.read()

    async def delete_file(self, key: str) -> bool:
        """Delete a file. Returns False when nothing was stored under the key."""
        file_path = self._get_file_path(key)
        if not await aiofiles.os.path.exists(file_path):
            return False
        await aiofiles.os.remove(file_path)
        return True
