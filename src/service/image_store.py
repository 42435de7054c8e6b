"""생성 이미지 로컬 저장소.

localStorage처럼 key 하나에 전체 목록을 JSON 문자열로 저장한다.
    {"version": 1, "images": [{id, prompt, enhancedPrompt?, url, timestamp}, ...]}
목록은 항상 최신순 (save가 맨 앞에 추가).

읽기:
- 값 전체를 해석할 수 없으면(JSON 깨짐, 목록 아님, 더 새 버전) 빈 목록 + 경고
- 항목 일부만 필드가 맞지 않으면 그 항목만 건너뛰고(경고) 나머지는 그대로 반환
쓰기:
- 해석하지 못한 항목은 원래 JSON 그대로 같은 위치에 다시 기록한다
- 값 전체를 해석할 수 없으면 덮어쓰기 전에 "<key>.corrupt" 키로 원본을 옮겨 둔다
그 밖의 쓰기 실패는 따로 처리하지 않고 그대로 전파된다.
"""

import json
import threading
import time
import uuid

from loguru import logger
from pydantic import ValidationError as PydanticValidationError
from sqlmodel import Session

from core.exceptions import ImageNotFound, StorageCorrupted
from model.image import ImageRecord, NewImage
from model.storage import StorageEntry

SCHEMA_VERSION = 1


class SqlKeyValueStorage:
    """localStorage 인터페이스(get/set/remove)를 StorageEntry 테이블 위에 구현."""

    def __init__(self, engine):
        self.engine = engine

    def get_item(self, key: str) -> str | None:
        with Session(self.engine) as session:
            entry = session.get(StorageEntry, key)
            return entry.value if entry else None

    def set_item(self, key: str, value: str) -> None:
        with Session(self.engine) as session:
            entry = session.get(StorageEntry, key)
            if entry:
                entry.value = value
            else:
                session.add(StorageEntry(key=key, value=value))
            session.commit()

    def remove_item(self, key: str) -> None:
        with Session(self.engine) as session:
            entry = session.get(StorageEntry, key)
            if entry:
                session.delete(entry)
                session.commit()


def _decode(raw: str) -> list:
    """저장 값 → 항목 목록 (ImageRecord 또는 해석하지 못한 원래 JSON 값).

    값 전체를 해석할 수 없으면 StorageCorrupted.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise StorageCorrupted(f"invalid JSON: {e}") from e

    # 버전 태그가 없는 예전 형식(목록 그대로)도 읽는다
    if isinstance(data, dict):
        version = data.get("version", SCHEMA_VERSION)
        if not isinstance(version, int) or version > SCHEMA_VERSION:
            raise StorageCorrupted(f"unsupported schema version: {version!r}")
        data = data.get("images")

    if not isinstance(data, list):
        raise StorageCorrupted(f"expected a list of images, got {type(data).__name__}")

    entries = []
    for index, item in enumerate(data):
        try:
            entries.append(ImageRecord.model_validate(item))
        except PydanticValidationError as e:
            logger.warning(f"Skipping invalid image record at index {index}: {e.error_count()} error(s)")
            entries.append(item)
    return entries


def _records(entries: list) -> list[ImageRecord]:
    return [e for e in entries if isinstance(e, ImageRecord)]


def _encode(entries: list) -> str:
    return json.dumps(
        {
            "version": SCHEMA_VERSION,
            "images": [e.to_storage() if isinstance(e, ImageRecord) else e for e in entries],
        },
        ensure_ascii=False,
    )


class LocalImageStore:
    """ImageRecord 목록을 key 하나에 저장하는 저장소.

    save/delete는 전체 목록을 읽고-수정하고-쓴다(read-modify-write).
    같은 프로세스 안에서 동시에 쓰면 한쪽 변경이 사라질 수 있으므로 Lock으로 직렬화한다.
    여러 프로세스가 같은 DB를 쓰는 경우는 보호하지 않는다.
    """

    def __init__(self, storage: SqlKeyValueStorage, key: str = "dallespace-images"):
        self.storage = storage
        self.key = key
        self._lock = threading.Lock()

    @property
    def backup_key(self) -> str:
        return f"{self.key}.corrupt"

    def save(self, image: NewImage) -> ImageRecord:
        """id와 현재 timestamp를 붙여 목록 맨 앞에 저장한다."""
        with self._lock:
            entries = self._load_for_write()
            record = ImageRecord(
                id=str(uuid.uuid4()),
                timestamp=int(time.time() * 1000),
                url=image.url,
                prompt=image.prompt,
                enhanced_prompt=image.enhanced_prompt,
            )
            self.storage.set_item(self.key, _encode([record, *entries]))

        logger.info(f"Saved image {record.id} ({len(entries) + 1} total)")
        return record

    def get_all(self) -> list[ImageRecord]:
        raw = self.storage.get_item(self.key)
        if not raw:
            return []
        try:
            return _records(_decode(raw))
        except StorageCorrupted as e:
            logger.warning(f"Failed to parse images from storage '{self.key}': {e}")
            return []

    def get_by_id(self, image_id: str) -> ImageRecord | None:
        return next((img for img in self.get_all() if img.id == image_id), None)

    def get_or_raise(self, image_id: str) -> ImageRecord:
        record = self.get_by_id(image_id)
        if not record:
            raise ImageNotFound
        return record

    def delete_by_id(self, image_id: str) -> bool:
        """id가 일치하는 레코드 1건을 지운다. 없으면 False (목록은 그대로)."""
        with self._lock:
            entries = self._load_for_write()
            remaining = [
                e for e in entries if not (isinstance(e, ImageRecord) and e.id == image_id)
            ]
            if len(remaining) == len(entries):
                return False
            self.storage.set_item(self.key, _encode(remaining))

        logger.info(f"Deleted image {image_id}")
        return True

    def clear_all(self) -> None:
        with self._lock:
            self.storage.remove_item(self.key)
        logger.info(f"Cleared image storage '{self.key}'")

    def _load_for_write(self) -> list:
        """쓰기 전 읽기. 해석할 수 없는 값은 backup_key로 옮긴 뒤 빈 목록으로 시작한다."""
        raw = self.storage.get_item(self.key)
        if not raw:
            return []
        try:
            return _decode(raw)
        except StorageCorrupted as e:
            self.storage.set_item(self.backup_key, raw)
            logger.warning(
                f"Unreadable value in storage '{self.key}' ({e}), "
                f"moved to '{self.backup_key}' before writing"
            )
            return []
